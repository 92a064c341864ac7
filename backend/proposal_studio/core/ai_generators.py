"""
Text generation for proposals and pitch decks.

Flow
----
1. ``build_proposal_prompt`` / ``build_pitch_deck_prompt`` turn a validated
   ``GenerationRequest`` into one natural-language prompt that asks for a
   JSON object keyed by section (or slide) name.
2. The prompt goes to a *text generator*: any ``async (prompt, max_tokens)
   -> str`` callable.  The default one runs a pydantic-ai agent.
3. ``parse_proposal`` / ``parse_pitch_deck`` turn the returned text into the
   fixed document shape.  Generators do not reliably honour the JSON
   instruction, so when parsing fails a fallback document is built from the
   request fields instead (``fallback_proposal`` / ``fallback_pitch_deck``).

There is no retry anywhere: a failing generator surfaces as a single
``GenerationError``.
"""

import json
import logging
import os
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from pydantic import ValidationError
from pydantic_ai import Agent

from proposal_studio.core.config import settings
from proposal_studio.core.errors import GenerationError
from proposal_studio.schemas.document import (
    PITCH_DECK_SLIDE_COUNT,
    DocumentMetadata,
    GeneratedDocument,
    PitchDeckContent,
    ProposalContent,
    Slide,
)
from proposal_studio.schemas.generation import GenerationRequest
from proposal_studio.schemas.template import DocumentType

logger = logging.getLogger(__name__)

TextGenerator = Callable[[str, int], Awaitable[str]]

PROPOSAL_NEXT_STEPS = "Contact us to discuss implementation details and begin the project."

PROPOSAL_SECTIONS: tuple[tuple[str, str], ...] = (
    ("executiveSummary", "Executive Summary"),
    ("projectOverview", "Project Overview"),
    ("targetMarket", "Target Market Analysis"),
    ("proposedSolution", "Proposed Solution"),
    ("timeline", "Timeline & Milestones"),
    ("budget", "Budget Breakdown"),
    ("expectedOutcomes", "Expected Outcomes"),
    ("nextSteps", "Next Steps"),
)

PITCH_DECK_SLIDES: tuple[tuple[str, str], ...] = (
    ("Title Slide", "Company name and tagline"),
    ("Problem", "What problem are we solving?"),
    ("Solution", "Our unique solution"),
    ("Market Opportunity", "Size and potential"),
    ("Product/Service", "Key features and benefits"),
    ("Business Model", "How we make money"),
    ("Competition", "Competitive landscape"),
    ("Marketing Strategy", "How we'll reach customers"),
    ("Financial Projections", "Revenue and growth"),
    ("Funding Ask", "Investment needed and use of funds"),
)


# ---------------------------------------------------------------------------
# 1.  Text generator  (pydantic-ai agent)
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = """\
You are an experienced business writer who prepares client proposals and \
investor pitch decks.  Write in a confident, professional tone, use the \
facts you are given, and never invent figures that contradict them.  When \
asked for JSON, reply with the JSON object only.
"""


@lru_cache
def get_generation_agent() -> Agent:
    """Build the text agent on first use so importing this module needs no API key."""
    if settings.OPENAI_API_KEY:
        os.environ.setdefault("OPENAI_API_KEY", settings.OPENAI_API_KEY)
    return Agent(
        model=settings.GENERATION_MODEL,
        output_type=str,
        system_prompt=_SYSTEM_PROMPT,
    )


async def generate_text(prompt: str, max_tokens: int) -> str:
    """Default text generator: one agent run, output capped at *max_tokens*."""
    result = await get_generation_agent().run(prompt, model_settings={"max_tokens": max_tokens})
    return result.output


# ---------------------------------------------------------------------------
# 2.  Prompts
# ---------------------------------------------------------------------------

def _emphasis_lines(request: GenerationRequest) -> list[str]:
    lines = []
    if request.include_financials:
        lines.append("Include financial details and projections.")
    if request.include_timeline:
        lines.append("Include a detailed timeline with milestones.")
    if request.include_competitor_analysis:
        lines.append("Include a competitor analysis.")
    return lines


def build_proposal_prompt(request: GenerationRequest) -> str:
    facts = [
        f"Company: {request.company_name}",
        f"Industry: {request.industry}",
        f"Project Description: {request.project_description}",
        f"Target Market: {request.target_market}",
        f"Budget: {request.budget}",
        f"Goals: {request.goals}",
        f"Timeline: {request.timeline}",
    ]
    if request.client_name.strip():
        facts.insert(1, f"Client: {request.client_name}")
    if request.competitors.strip():
        facts.append(f"Competitors: {request.competitors}")
    if request.additional_requirements.strip():
        facts.append(f"Additional Requirements: {request.additional_requirements}")

    sections = "\n".join(f"{i}. {title}" for i, (_, title) in enumerate(PROPOSAL_SECTIONS, start=1))
    keys = ", ".join(key for key, _ in PROPOSAL_SECTIONS)
    emphasis = "\n".join(_emphasis_lines(request))

    return (
        "Create a comprehensive business proposal for the following project:\n\n"
        + "\n".join(facts)
        + "\n\nGenerate a professional business proposal with the following sections:\n"
        + sections
        + ("\n\n" + emphasis if emphasis else "")
        + "\n\nFormat the response as a structured JSON object with each section as a key "
        f"containing the content. Use exactly these keys: {keys}."
    )


def build_pitch_deck_prompt(request: GenerationRequest) -> str:
    facts = [
        f"Company: {request.company_name}",
        f"Industry: {request.industry}",
        f"Project/Product: {request.project_description}",
        f"Target Market: {request.target_market}",
        f"Budget/Funding: {request.budget}",
        f"Goals: {request.goals}",
        f"Timeline: {request.timeline}",
    ]
    if request.competitors.strip():
        facts.append(f"Competitors: {request.competitors}")

    slides = "\n".join(
        f"{i}. {title} - {hint}" for i, (title, hint) in enumerate(PITCH_DECK_SLIDES, start=1)
    )
    emphasis = "\n".join(_emphasis_lines(request))

    return (
        "Create a compelling pitch deck for the following business:\n\n"
        + "\n".join(facts)
        + f"\n\nGenerate content for a {PITCH_DECK_SLIDE_COUNT}-slide pitch deck with the following slides:\n"
        + slides
        + ("\n\n" + emphasis if emphasis else "")
        + "\n\nFormat the response as a JSON object with each slide as a key containing "
        f'title and content. Use the keys slide1 to slide{PITCH_DECK_SLIDE_COUNT}, e.g. '
        '{"slide1": {"title": "...", "content": "..."}}.'
    )


# ---------------------------------------------------------------------------
# 3.  Parsing
# ---------------------------------------------------------------------------

_FENCED_JSON_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

_PROPOSAL_KEY_ALIASES: dict[str, str] = {
    "executivesummary": "executive_summary",
    "summary": "executive_summary",
    "projectoverview": "project_overview",
    "overview": "project_overview",
    "targetmarket": "target_market",
    "targetmarketanalysis": "target_market",
    "marketanalysis": "target_market",
    "proposedsolution": "proposed_solution",
    "solution": "proposed_solution",
    "timeline": "timeline",
    "timelinemilestones": "timeline",
    "timelineandmilestones": "timeline",
    "budget": "budget",
    "budgetbreakdown": "budget",
    "expectedoutcomes": "expected_outcomes",
    "outcomes": "expected_outcomes",
    "nextsteps": "next_steps",
}

_SLIDE_KEY_RE = re.compile(r"^slide(\d+)$")


def _squash(key: str) -> str:
    """Lower-case *key* and drop leading numbering and non-alphanumerics."""
    squashed = re.sub(r"[^a-z0-9]", "", key.lower())
    return re.sub(r"^\d+", "", squashed) if not _SLIDE_KEY_RE.match(squashed) else squashed


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n".join(t for t in (_as_text(v) for v in value) if t)
    if isinstance(value, dict):
        return "\n".join(f"{k}: {_as_text(v)}" for k, v in value.items() if _as_text(v))
    return str(value)


def load_json_object(text: str) -> Any:
    """Parse *text* as JSON, also accepting a single fenced ```json block.

    Returns ``None`` when neither form parses.
    """
    candidates = [text.strip()]
    m = _FENCED_JSON_RE.search(text)
    if m:
        candidates.append(m.group(1))
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


def parse_proposal(text: str) -> ProposalContent | None:
    """Map generator output onto ``ProposalContent``; ``None`` if it does not fit."""
    data = load_json_object(text)
    if isinstance(data, dict) and len(data) == 1 and isinstance(next(iter(data.values())), dict):
        # {"proposal": {...}}
        inner_key = _squash(next(iter(data)))
        if inner_key not in _PROPOSAL_KEY_ALIASES:
            data = next(iter(data.values()))
    if not isinstance(data, dict):
        return None

    sections: dict[str, str] = {}
    for key, value in data.items():
        field = _PROPOSAL_KEY_ALIASES.get(_squash(str(key)))
        body = _as_text(value)
        if field and body and field not in sections:
            sections[field] = body
    if not sections:
        return None
    return ProposalContent(**sections)


def _as_slide(value: Any) -> Slide | None:
    if not isinstance(value, dict):
        return None
    lowered = {str(k).lower(): v for k, v in value.items()}
    title = _as_text(lowered.get("title") or lowered.get("heading"))
    content = _as_text(
        lowered.get("content") or lowered.get("body") or lowered.get("points") or lowered.get("bullets")
    )
    if not title or not content:
        return None
    return Slide(title=title, content=content)


def parse_pitch_deck(text: str) -> PitchDeckContent | None:
    """Map generator output onto exactly ten slides; ``None`` if it does not fit."""
    data = load_json_object(text)
    if isinstance(data, dict):
        nested = next((v for k, v in data.items() if _squash(str(k)) in ("slides", "pitchdeck")), None)
        if nested is not None:
            data = nested
    if isinstance(data, dict):
        values = list(data.values())
    elif isinstance(data, list):
        values = data
    else:
        return None

    slides = [_as_slide(v) for v in values]
    if len(slides) != PITCH_DECK_SLIDE_COUNT or any(s is None for s in slides):
        return None
    try:
        return PitchDeckContent.from_slides(slides)
    except ValidationError:
        return None


# ---------------------------------------------------------------------------
# 4.  Fallback documents
# ---------------------------------------------------------------------------

def fallback_proposal(request: GenerationRequest, raw_text: str) -> ProposalContent:
    """Deterministic proposal used when the generated text is not usable JSON.

    The opening 500 characters of the raw text become the executive summary
    and characters 500-1500 the proposed solution; everything else is copied
    from the request.
    """
    summary = raw_text[0:500]
    solution = raw_text[500:1500]
    return ProposalContent(
        executive_summary=summary if summary.strip() else (
            f"{request.company_name} presents a proposal for a {request.industry} project."
        ),
        project_overview=request.project_description,
        target_market=request.target_market,
        proposed_solution=solution if solution.strip() else request.project_description,
        timeline=request.timeline,
        budget=request.budget,
        expected_outcomes=request.goals,
        next_steps=PROPOSAL_NEXT_STEPS,
    )


def fallback_pitch_deck(request: GenerationRequest) -> PitchDeckContent:
    """Deterministic ten-slide deck interpolated from the request fields."""
    return PitchDeckContent.from_slides([
        Slide(title=request.company_name, content=f"Revolutionizing {request.industry}"),
        Slide(title="Problem", content="Market challenges and pain points we address"),
        Slide(title="Solution", content=request.project_description),
        Slide(title="Market Opportunity", content=f"Targeting {request.target_market}"),
        Slide(title="Product/Service", content="Key features and benefits"),
        Slide(title="Business Model", content="Revenue generation strategy"),
        Slide(title="Competition", content=request.competitors.strip() or "Competitive analysis"),
        Slide(title="Marketing Strategy", content="Customer acquisition plan"),
        Slide(title="Financial Projections", content=f"Budget: {request.budget}"),
        Slide(title="Funding Ask", content="Investment opportunity"),
    ])


# ===================================================================
# Orchestration
# ===================================================================

def build_metadata(request: GenerationRequest, now: datetime | None = None) -> DocumentMetadata:
    return DocumentMetadata(
        company_name=request.company_name,
        client_name=request.client_name if request.document_type == DocumentType.proposal else None,
        industry=request.industry,
        generated_at=now or datetime.now(timezone.utc),
    )


async def generate_document(
    request: GenerationRequest,
    generate_fn: TextGenerator | None = None,
    now: datetime | None = None,
) -> GeneratedDocument:
    """Generate one proposal or pitch deck for *request*.

    Parameters
    ----------
    request:
        Validated form values plus the selected template.
    generate_fn:
        The external text generator; defaults to :func:`generate_text`.
    now:
        Timestamp recorded as ``generatedAt`` (defaults to the current UTC time).
    """
    generate_fn = generate_fn or generate_text
    is_proposal = request.document_type == DocumentType.proposal

    if is_proposal:
        prompt = build_proposal_prompt(request)
        max_tokens = settings.PROPOSAL_MAX_TOKENS
    else:
        prompt = build_pitch_deck_prompt(request)
        max_tokens = settings.PITCH_DECK_MAX_TOKENS

    logger.info(
        "Generating %s for %r (max_tokens=%d)",
        request.document_type.value, request.company_name, max_tokens,
    )
    try:
        text = await generate_fn(prompt, max_tokens)
    except Exception as exc:
        logger.error("Text generation failed for %s: %s", request.document_type.value, exc, exc_info=True)
        raise GenerationError(request.document_type.value, exc) from exc

    text = text if isinstance(text, str) else ""
    metadata = build_metadata(request, now)

    if is_proposal:
        proposal = parse_proposal(text)
        if proposal is None:
            logger.warning("Generated proposal was not valid JSON; using fallback document")
            proposal = fallback_proposal(request, text)
        return GeneratedDocument(document_type=request.document_type, proposal=proposal, metadata=metadata)

    deck = parse_pitch_deck(text)
    if deck is None:
        logger.warning("Generated pitch deck was not valid JSON; using fallback document")
        deck = fallback_pitch_deck(request)
    return GeneratedDocument(document_type=request.document_type, pitch_deck=deck, metadata=metadata)
