from datetime import date, datetime, timezone

from proposal_studio.core.export_layout import (
    MARGIN,
    PAGE_HEIGHT,
    build_export_payload,
    content_disposition,
    export_filename,
    layout_as_pages,
    render_pdf,
    safe_text,
    wrap_text,
)
from proposal_studio.core.templates import get_template
from proposal_studio.schemas.document import (
    DocumentMetadata,
    PitchDeckContent,
    ProposalContent,
    Slide,
)
from proposal_studio.schemas.template import DocumentType

METADATA = DocumentMetadata(
    company_name="Acme",
    industry="technology",
    generated_at=datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc),
)


def char_measure(text, family, bold, size):
    """Every character is 0.2 mm per point wide."""
    return len(text) * size * 0.2


def _proposal_payload(**sections):
    return build_export_payload(ProposalContent(**sections), DocumentType.proposal, METADATA)


def test_wrap_text_is_greedy():
    assert wrap_text("aa bb cc dd", 5, len) == ["aa bb", "cc dd"]
    assert wrap_text("one\n\ntwo", 10, len) == ["one", "", "two"]


def test_wrap_text_breaks_overlong_words():
    assert wrap_text("abcdefghij xy", 4, len) == ["abcd", "efgh", "ij", "xy"]


def test_payload_title_and_metadata():
    payload = _proposal_payload(budget="$50k")
    assert payload.title == "Business Proposal"
    assert payload.company == "Acme"
    assert payload.industry == "technology"

    deck = PitchDeckContent.from_slides([Slide(title=f"T{i}", content="c") for i in range(10)])
    assert build_export_payload(deck, DocumentType.pitch_deck, METADATA).title == "Pitch Deck"


def test_header_layout():
    pages = layout_as_pages(_proposal_payload(executive_summary="Short."), measure=char_measure)
    lines = pages[0].lines
    assert [(l.text, l.y, l.font_size, l.bold) for l in lines[:4]] == [
        ("Business Proposal", 20.0, 20, True),
        ("Company: Acme", 45.0, 12, True),
        ("Industry: technology", 56.0, 12, True),
        ("Generated: 3/5/2024", 67.0, 12, True),
    ]
    # +15 after the metadata block
    assert lines[4].text == "Executive Summary"
    assert lines[4].y == 93.0
    assert lines[4].font_size == 16
    assert all(l.x == MARGIN for l in lines)


def test_proposal_sections_follow_render_order():
    payload = _proposal_payload(next_steps="Call", executive_summary="Sum", budget="", target_market="SMBs")
    pages = layout_as_pages(payload, measure=char_measure)
    headings = [l.text for l in pages[0].lines if l.font_size == 16]
    assert headings == ["Executive Summary", "Target Market Analysis", "Next Steps"]


def test_long_text_splits_across_pages_without_passing_bottom_margin():
    body = " ".join(["lorem ipsum dolor sit amet"] * 400)
    pages = layout_as_pages(_proposal_payload(executive_summary=body), measure=char_measure)
    assert len(pages) >= 2
    assert [p.number for p in pages] == list(range(1, len(pages) + 1))
    for page in pages:
        assert page.lines
        assert all(l.y <= PAGE_HEIGHT - MARGIN for l in page.lines)
    assert pages[1].lines[0].y == MARGIN


def test_layout_is_deterministic():
    payload = _proposal_payload(executive_summary="word " * 300, budget="$50k")
    assert layout_as_pages(payload, measure=char_measure) == layout_as_pages(payload, measure=char_measure)


def test_pitch_deck_slides_in_order():
    deck = PitchDeckContent.from_slides(
        [Slide(title=f"Slide {i}", content=f"Content {i}") for i in range(1, 11)]
    )
    payload = build_export_payload(deck, DocumentType.pitch_deck, METADATA)
    pages = layout_as_pages(payload, measure=char_measure)
    titles = [l.text for p in pages for l in p.lines if l.font_size == 16]
    assert titles == [f"Slide {i}" for i in range(1, 11)]


def test_template_fonts_select_core_families():
    template = get_template("technical", DocumentType.proposal)
    pages = layout_as_pages(_proposal_payload(budget="$50k"), template, measure=char_measure)
    by_text = {l.text: l.font_family for l in pages[0].lines}
    assert by_text["Business Proposal"] == "courier"
    assert by_text["Budget Breakdown"] == "courier"
    assert by_text["$50k"] == "helvetica"


def test_layout_with_real_font_metrics_and_pdf_rendering():
    payload = _proposal_payload(executive_summary="Widget SaaS — for SMBs " * 200, next_steps="Call us")
    pages = layout_as_pages(payload)
    assert len(pages) >= 2
    pdf = render_pdf(pages, title=payload.title)
    assert pdf.startswith(b"%PDF")


def test_safe_text():
    assert safe_text("a — b “c” • d") == 'a -- b "c" * d'
    assert safe_text("日本") == "??"


def test_export_filename():
    payload = _proposal_payload(budget="$50k")
    assert export_filename(payload, date(2024, 3, 5)) == "Acme_Business_Proposal_2024-03-05.pdf"


def test_content_disposition_is_latin1_safe():
    header = content_disposition("Ωmega/Labs\n_Pitch_Deck_2024-03-05.pdf")
    assert header == (
        "attachment; filename=\"_mega_Labs__Pitch_Deck_2024-03-05.pdf\"; "
        "filename*=UTF-8''%CE%A9mega_Labs__Pitch_Deck_2024-03-05.pdf"
    )
    header.encode("latin-1")
