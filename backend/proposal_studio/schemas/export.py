import datetime
from typing import Any

from pydantic import model_validator

from proposal_studio.schemas.document import (
    CamelModel,
    DocumentMetadata,
    PitchDeckContent,
    ProposalContent,
)
from proposal_studio.schemas.template import DocumentType


class ExportRequest(CamelModel):
    content: dict[str, Any]
    document_type: DocumentType
    metadata: DocumentMetadata
    template: dict[str, Any] | None = None
    template_id: str | None = None

    @model_validator(mode="after")
    def _content_fits_type(self) -> "ExportRequest":
        self.typed_content()
        return self

    def requested_template_id(self) -> str | None:
        """Template id from ``templateId`` or from a posted template object."""
        if self.template_id:
            return self.template_id
        if self.template and isinstance(self.template.get("id"), str):
            return self.template["id"]
        return None

    def typed_content(self) -> ProposalContent | PitchDeckContent:
        if self.document_type == DocumentType.proposal:
            return ProposalContent.model_validate(self.content)
        return PitchDeckContent.model_validate(self.content)


class PdfData(CamelModel):
    title: str
    company: str
    industry: str
    generated_at: datetime.datetime
    # deck first: a proposal model would accept a slide mapping with every section unset
    content: PitchDeckContent | ProposalContent
    document_type: DocumentType


class PlacedLine(CamelModel):
    text: str
    x: float
    y: float
    font_family: str
    font_size: float
    bold: bool = False


class Page(CamelModel):
    number: int
    lines: list[PlacedLine]


class ExportResponse(CamelModel):
    success: bool = True
    pdf_data: PdfData
    pages: list[Page]
    download_url: str
