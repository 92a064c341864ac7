"""Generation router: form in, generated document out."""

from fastapi import APIRouter, Depends

from proposal_studio.api.deps import get_text_generator
from proposal_studio.controllers import generation_controller
from proposal_studio.core.ai_generators import TextGenerator
from proposal_studio.schemas.generation import (
    DocumentForm,
    PitchDeckResponse,
    ProposalResponse,
)

router = APIRouter(tags=["generation"])


@router.post("/generate-proposal", response_model=ProposalResponse)
async def generate_proposal(
    form: DocumentForm,
    generate_fn: TextGenerator = Depends(get_text_generator),
):
    return await generation_controller.generate_proposal(form, generate_fn)


@router.post("/generate-pitch-deck", response_model=PitchDeckResponse)
async def generate_pitch_deck(
    form: DocumentForm,
    generate_fn: TextGenerator = Depends(get_text_generator),
):
    return await generation_controller.generate_pitch_deck(form, generate_fn)
