import logging
from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from proposal_studio.core.document_renderer import (
    PitchDeckViewer,
    render_pitch_deck_html,
    render_proposal,
    render_proposal_html,
)
from proposal_studio.core.templates import get_template
from proposal_studio.schemas.rendering import DeckView, NavigationRequest
from proposal_studio.schemas.results import (
    GENERATED_CONTENT_KEY,
    CallToAction,
    ResultsContext,
    ResultsView,
)
from proposal_studio.schemas.template import DocumentType, Template

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No content found"
CREATE_CTA = CallToAction(label="Create New Document", href="/dashboard/create")


def context_from_payload(payload: Any) -> ResultsContext | None:
    """Accept either a ``ResultsContext`` or the two storage blobs; ``None`` if neither reads."""
    if not isinstance(payload, dict):
        return None
    if GENERATED_CONTENT_KEY in payload:
        return ResultsContext.from_storage(payload)
    try:
        return ResultsContext.model_validate(payload)
    except ValidationError as exc:
        logger.info("Discarding unreadable results context: %s", exc.error_count())
        return None


def _template_for(context: ResultsContext) -> Template | None:
    return get_template(context.template_id, context.document_type)


def empty_view() -> ResultsView:
    return ResultsView(status="empty", message=EMPTY_MESSAGE, call_to_action=CREATE_CTA)


def build_results_view(context: ResultsContext | None) -> ResultsView:
    if context is None:
        return empty_view()

    document = context.document
    template = _template_for(context)
    metadata = document.metadata
    view = ResultsView(
        status="ready",
        document_type=document.document_type,
        heading="Business Proposal" if document.document_type == DocumentType.proposal else "Pitch Deck",
        subtitle=f"Generated for {metadata.company_name} • {metadata.industry}",
        template=template,
    )
    if document.document_type == DocumentType.proposal:
        view.proposal = render_proposal(document.proposal, template)
    else:
        view.deck = PitchDeckViewer(document.pitch_deck, template=template).view()
    return view


def build_results_html(context: ResultsContext | None) -> str | None:
    if context is None:
        return None
    document = context.document
    template = _template_for(context)
    if document.document_type == DocumentType.proposal:
        return render_proposal_html(document.proposal, template, document.metadata)
    return render_pitch_deck_html(document.pitch_deck, template, document.metadata)


def navigate_deck(request: NavigationRequest) -> DeckView:
    """Apply one viewer transition to the state the client sent back."""
    template = get_template(request.template_id, DocumentType.pitch_deck)
    try:
        viewer = PitchDeckViewer.from_state(request.deck, request.state, template)
        if request.action == "next":
            viewer.next()
        elif request.action == "prev":
            viewer.prev()
        elif request.action == "toggle":
            viewer.toggle_presentation_mode()
        else:
            if request.index is None:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="goto requires an index",
                )
            viewer.go_to_slide(request.index)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return viewer.view()
