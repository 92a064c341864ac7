from fastapi import APIRouter, HTTPException, Query

from proposal_studio.core.templates import get_template, list_templates
from proposal_studio.schemas.template import DocumentType, Template

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[Template])
async def get_templates(
    document_type: DocumentType = Query(DocumentType.proposal, alias="documentType"),
):
    """The fixed template catalogue for one document type."""
    return list_templates(document_type)


@router.get("/{document_type}/{template_id}", response_model=Template)
async def get_one_template(document_type: DocumentType, template_id: str):
    template = get_template(template_id, document_type)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template
