import pytest

from proposal_studio.core.document_renderer import (
    DEFAULT_PRIMARY,
    PitchDeckViewer,
    render_pitch_deck_html,
    render_proposal,
    render_proposal_html,
)
from proposal_studio.core.templates import get_template
from proposal_studio.schemas.document import PitchDeckContent, ProposalContent, Slide
from proposal_studio.schemas.rendering import DeckViewState, ViewerMode
from proposal_studio.schemas.template import DocumentType


@pytest.fixture
def deck():
    return PitchDeckContent.from_slides(
        [Slide(title=f"Slide {i}", content=f"Body {i}") for i in range(1, 11)]
    )


@pytest.fixture
def startup():
    return get_template("startup", DocumentType.pitch_deck)


# --- proposal ---

def test_proposal_sections_in_fixed_order_and_blank_ones_omitted():
    content = ProposalContent(
        next_steps="Sign",
        budget="",
        executive_summary="Summary",
        timeline="   ",
        target_market="SMBs",
        project_overview="Overview",
    )
    view = render_proposal(content, get_template("professional", DocumentType.proposal))
    assert [s.key for s in view.sections] == [
        "executive_summary", "project_overview", "target_market", "next_steps",
    ]
    assert view.sections[0].heading == "Executive Summary"
    assert view.sections[2].heading == "Target Market Analysis"
    assert view.sections[0].style.heading_font == "font-serif"


def test_proposal_without_template_uses_neutral_style():
    view = render_proposal(ProposalContent(budget="$50k"))
    style = view.sections[0].style
    assert style.heading_color is None
    assert style.border_color == "rgba(59, 130, 246, 0.25)"


def test_rendering_does_not_mutate_content():
    content = ProposalContent(executive_summary="Summary", budget="")
    before = content.model_dump()
    render_proposal(content)
    render_proposal_html(content)
    assert content.model_dump() == before


def test_proposal_html_escapes_content():
    html = render_proposal_html(ProposalContent(executive_summary="<script>x</script> & co"))
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;x&lt;/script&gt; &amp; co" in html
    assert "Executive Summary" in html


# --- pitch deck viewer ---

def test_viewer_starts_browsing_first_slide(deck):
    viewer = PitchDeckViewer(deck)
    assert viewer.current_slide_index == 0
    assert viewer.mode == ViewerMode.browsing
    assert not viewer.can_go_prev
    assert viewer.can_go_next


def test_prev_on_first_slide_is_a_no_op(deck):
    viewer = PitchDeckViewer(deck)
    assert viewer.prev() == 0
    assert viewer.current_slide_index == 0


def test_next_clamps_at_last_slide(deck):
    viewer = PitchDeckViewer(deck)
    for _ in range(15):
        viewer.next()
    assert viewer.current_slide_index == 9
    assert not viewer.can_go_next
    assert viewer.next() == 9


def test_go_to_slide(deck):
    viewer = PitchDeckViewer(deck)
    assert viewer.go_to_slide(4) == 4
    assert viewer.current_slide_index == 4
    with pytest.raises(IndexError):
        viewer.go_to_slide(10)
    with pytest.raises(IndexError):
        viewer.go_to_slide(-1)
    assert viewer.current_slide_index == 4


def test_toggle_presentation_keeps_index(deck):
    viewer = PitchDeckViewer(deck)
    viewer.go_to_slide(6)
    assert viewer.toggle_presentation_mode() == ViewerMode.presenting
    assert viewer.current_slide_index == 6
    assert viewer.toggle_presentation_mode() == ViewerMode.browsing
    assert viewer.current_slide_index == 6


def test_state_round_trip(deck, startup):
    viewer = PitchDeckViewer(deck, startup)
    viewer.go_to_slide(3)
    viewer.toggle_presentation_mode()
    restored = PitchDeckViewer.from_state(deck, viewer.state(), startup)
    assert restored.state() == DeckViewState(current_slide_index=3, is_presentation_mode=True)


def test_view_is_derived_from_index_template_and_mode(deck, startup):
    viewer = PitchDeckViewer(deck, startup)
    viewer.go_to_slide(2)
    view = viewer.view()
    assert view.counter == "Slide 3 of 10"
    assert view.current_slide.title == "Slide 3"
    assert [t.is_active for t in view.thumbnails].index(True) == 2
    assert view.thumbnails[0].id == "slide1"
    assert view.slide_style.background_color is None

    viewer.toggle_presentation_mode()
    assert viewer.view().slide_style.background_color == startup.colors.background


def test_view_without_template(deck):
    view = PitchDeckViewer(deck).view()
    assert view.thumbnails[0].accent_color == DEFAULT_PRIMARY
    assert view.slide_style.heading_color is None


def test_deck_html_starts_on_requested_slide(deck, startup):
    html = render_pitch_deck_html(deck, startup, state=DeckViewState(current_slide_index=9))
    assert 'class="slide active" data-slide="9"' in html
    assert "var current = 9;" in html
    assert '<button id="next" disabled>' in html
    assert "Math.max(0, Math.min(slides.length - 1, i))" in html
