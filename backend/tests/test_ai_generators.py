import json
from datetime import datetime, timezone

import pytest
from pydantic.alias_generators import to_camel

from proposal_studio.core.ai_generators import (
    PROPOSAL_NEXT_STEPS,
    build_pitch_deck_prompt,
    build_proposal_prompt,
    fallback_pitch_deck,
    fallback_proposal,
    generate_document,
    load_json_object,
    parse_pitch_deck,
    parse_proposal,
)
from proposal_studio.core.document_renderer import PROPOSAL_SECTION_ORDER, PitchDeckViewer, render_proposal
from proposal_studio.core.errors import GenerationError
from proposal_studio.schemas.template import DocumentType

from conftest import FakeGenerator

FIXED_NOW = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)


def _deck_json(count=10):
    return json.dumps({
        f"slide{i}": {"title": f"Title {i}", "content": f"Content {i}"} for i in range(1, count + 1)
    })


# --- prompts ---

def test_proposal_prompt_embeds_fields_and_asks_for_json(acme_request):
    prompt = build_proposal_prompt(acme_request)
    for fact in ("Company: Acme", "Industry: technology", "Project Description: Widget SaaS",
                 "Target Market: SMBs", "Budget: $50k", "Goals: Grow 2x", "Timeline: 6 months"):
        assert fact in prompt
    assert "Executive Summary" in prompt and "Next Steps" in prompt
    assert "JSON" in prompt
    assert "executiveSummary" in prompt
    # blank optional fields are left out
    assert "Client:" not in prompt
    assert "Competitors:" not in prompt


def test_inclusion_flags_become_emphasis_lines(acme_request):
    request = acme_request.model_copy(
        update={"include_financials": True, "include_competitor_analysis": True, "include_timeline": False}
    )
    prompt = build_proposal_prompt(request)
    assert "financial" in prompt.lower()
    assert "competitor analysis" in prompt.lower()
    assert "detailed timeline" not in prompt.lower()


def test_pitch_deck_prompt_lists_ten_slides(acme_deck_request):
    prompt = build_pitch_deck_prompt(acme_deck_request)
    assert "10-slide" in prompt
    assert "10. Funding Ask" in prompt
    assert "slide1" in prompt and "slide10" in prompt


# --- parsing ---

def test_load_json_object_accepts_fenced_block():
    text = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
    assert load_json_object(text) == {"a": 1}
    assert load_json_object("not json") is None


def test_parse_proposal_maps_key_variants():
    text = json.dumps({
        "executive_summary": "Summary",
        "Timeline & Milestones": "Q1",
        "budgetBreakdown": ["Design $10k", "Build $40k"],
        "unknown": "ignored",
    })
    proposal = parse_proposal(text)
    assert proposal.executive_summary == "Summary"
    assert proposal.timeline == "Q1"
    assert proposal.budget == "Design $10k\nBuild $40k"
    assert proposal.next_steps is None


def test_parse_proposal_unwraps_single_wrapper_object():
    proposal = parse_proposal(json.dumps({"proposal": {"executiveSummary": "Hi"}}))
    assert proposal.executive_summary == "Hi"


def test_parse_proposal_rejects_unusable_text():
    assert parse_proposal("Dear client, ...") is None
    assert parse_proposal(json.dumps({"foo": "bar"})) is None
    assert parse_proposal(json.dumps(["a", "b"])) is None


def test_parse_pitch_deck_requires_exactly_ten_slides():
    deck = parse_pitch_deck(_deck_json())
    assert deck.keys == [f"slide{i}" for i in range(1, 11)]
    assert deck.slides[9].title == "Title 10"
    assert parse_pitch_deck(_deck_json(9)) is None
    assert parse_pitch_deck(_deck_json(11)) is None


def test_parse_pitch_deck_accepts_slide_list():
    slides = [{"title": f"T{i}", "content": f"C{i}"} for i in range(10)]
    deck = parse_pitch_deck(json.dumps({"slides": slides}))
    assert [s.title for s in deck.slides][:2] == ["T0", "T1"]


# --- fallbacks ---

def test_fallback_proposal_slices_raw_text(acme_request):
    raw = "a" * 500 + "b" * 1000 + "c" * 100
    proposal = fallback_proposal(acme_request, raw)
    assert proposal.executive_summary == "a" * 500
    assert proposal.proposed_solution == "b" * 1000
    assert proposal.project_overview == "Widget SaaS"
    assert proposal.target_market == "SMBs"
    assert proposal.timeline == "6 months"
    assert proposal.budget == "$50k"
    assert proposal.expected_outcomes == "Grow 2x"
    assert proposal.next_steps == PROPOSAL_NEXT_STEPS


def test_fallback_proposal_keeps_surrounding_whitespace(acme_request):
    raw = "  Intro line\n" + "x" * 600 + "   \n"
    proposal = fallback_proposal(acme_request, raw)
    assert proposal.executive_summary == raw[0:500]
    assert len(proposal.executive_summary) == 500
    assert proposal.executive_summary.startswith("  Intro line\n")
    assert proposal.proposed_solution == raw[500:1500]
    assert proposal.proposed_solution.endswith("   \n")


def test_fallback_proposal_never_leaves_a_section_empty(acme_request):
    proposal = fallback_proposal(acme_request, "")
    assert all(getattr(proposal, key) for key in type(proposal).model_fields)
    assert proposal.proposed_solution == "Widget SaaS"


def test_fallback_pitch_deck(acme_deck_request):
    deck = fallback_pitch_deck(acme_deck_request)
    titles = [s.title for s in deck.slides]
    assert titles == [
        "Acme", "Problem", "Solution", "Market Opportunity", "Product/Service",
        "Business Model", "Competition", "Marketing Strategy",
        "Financial Projections", "Funding Ask",
    ]
    contents = [s.content for s in deck.slides]
    assert contents[0] == "Revolutionizing technology"
    assert contents[2] == "Widget SaaS"
    assert contents[3] == "Targeting SMBs"
    assert contents[6] == "Competitive analysis"
    assert contents[8] == "Budget: $50k"


# --- orchestration ---

@pytest.mark.asyncio
async def test_acme_non_json_reply_falls_back(acme_request):
    generator = FakeGenerator(reply="Thank you for considering Acme. We will build it.")
    document = await generate_document(acme_request, generator, now=FIXED_NOW)

    assert len(generator.calls) == 1
    assert generator.calls[0][1] == 4000
    proposal = document.proposal
    assert proposal.project_overview == "Widget SaaS"
    assert proposal.budget == "$50k"
    assert proposal.next_steps == PROPOSAL_NEXT_STEPS
    assert proposal.executive_summary.startswith("Thank you for considering Acme")
    assert document.metadata.company_name == "Acme"
    assert document.metadata.generated_at == FIXED_NOW


@pytest.mark.asyncio
async def test_json_reply_is_used_verbatim(acme_request):
    reply = json.dumps({"executiveSummary": "Generated summary", "nextSteps": "Call us"})
    document = await generate_document(acme_request, FakeGenerator(reply=reply))
    assert document.proposal.executive_summary == "Generated summary"
    assert document.proposal.next_steps == "Call us"
    assert document.proposal.budget is None


@pytest.mark.asyncio
async def test_pitch_deck_uses_its_own_token_limit(acme_deck_request):
    generator = FakeGenerator(reply=_deck_json())
    document = await generate_document(acme_deck_request, generator)
    assert generator.calls[0][1] == 3000
    assert document.document_type == DocumentType.pitch_deck
    assert document.metadata.client_name is None
    assert document.pitch_deck.slides[0].title == "Title 1"


@pytest.mark.asyncio
async def test_short_deck_falls_back_to_whole_fixed_deck(acme_deck_request):
    document = await generate_document(acme_deck_request, FakeGenerator(reply=_deck_json(7)))
    assert document.pitch_deck.slides[0].title == "Acme"
    assert len(document.pitch_deck.slides) == 10


@pytest.mark.asyncio
async def test_generator_failure_raises_once(acme_request):
    generator = FakeGenerator(error=ConnectionError("boom"))
    with pytest.raises(GenerationError) as excinfo:
        await generate_document(acme_request, generator)
    assert excinfo.value.user_message == "Failed to generate proposal"
    assert len(generator.calls) == 1


@pytest.mark.asyncio
async def test_complete_proposal_reply_reaches_every_rendered_section(acme_request):
    reply = {
        "executiveSummary": "Acme builds widgets for small shops.",
        "projectOverview": "A hosted widget catalogue.",
        "targetMarket": "Independent retailers in the EU.",
        "proposedSolution": "Self-serve onboarding with templates.",
        "timeline": "Q1 pilot, Q2 launch.",
        "budget": "$50k build, $5k/month run.",
        "expectedOutcomes": "200 paying shops in year one.",
        "nextSteps": "Sign the pilot agreement.",
    }
    document = await generate_document(acme_request, FakeGenerator(reply=json.dumps(reply)))

    sections = render_proposal(document.proposal).sections
    assert [s.key for s in sections] == [key for key, _ in PROPOSAL_SECTION_ORDER]
    assert {to_camel(s.key): s.body for s in sections} == reply


@pytest.mark.asyncio
async def test_complete_deck_reply_reaches_every_thumbnail(acme_deck_request):
    document = await generate_document(acme_deck_request, FakeGenerator(reply=_deck_json()))

    thumbnails = PitchDeckViewer(document.pitch_deck).view().thumbnails
    assert [(t.id, t.title, t.content) for t in thumbnails] == [
        (f"slide{i}", f"Title {i}", f"Content {i}") for i in range(1, 11)
    ]
