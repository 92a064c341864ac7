import logging

from fastapi import HTTPException, status

from proposal_studio.core.ai_generators import TextGenerator, generate_document
from proposal_studio.schemas.document import GeneratedDocument
from proposal_studio.schemas.generation import (
    DocumentForm,
    PitchDeckResponse,
    ProposalResponse,
)
from proposal_studio.schemas.results import ResultsContext
from proposal_studio.schemas.template import DocumentType

logger = logging.getLogger(__name__)


def validate_form(form: DocumentForm) -> None:
    """Reject an incomplete form with 422 before anything is sent out."""
    errors = form.validation_errors()
    if errors:
        logger.info("Rejected %s form: %s", form.document_type.value, sorted(errors))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Please fill in all required fields.", "errors": errors},
        )


async def _generate(
    form: DocumentForm, document_type: DocumentType, generate_fn: TextGenerator
) -> tuple[GeneratedDocument, ResultsContext]:
    # The endpoint decides the document type; the template id is kept so a
    # template from the other catalogue is reported, not silently replaced.
    form = form.model_copy(update={"document_type": document_type})
    validate_form(form)
    request = form.to_generation_request()
    document = await generate_document(request, generate_fn)
    return document, ResultsContext(document=document, template_id=request.template.id)


async def generate_proposal(form: DocumentForm, generate_fn: TextGenerator) -> ProposalResponse:
    document, context = await _generate(form, DocumentType.proposal, generate_fn)
    return ProposalResponse(proposal=document.proposal, metadata=document.metadata, context=context)


async def generate_pitch_deck(form: DocumentForm, generate_fn: TextGenerator) -> PitchDeckResponse:
    document, context = await _generate(form, DocumentType.pitch_deck, generate_fn)
    return PitchDeckResponse(pitch_deck=document.pitch_deck, metadata=document.metadata, context=context)
