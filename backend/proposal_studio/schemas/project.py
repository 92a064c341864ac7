import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import ConfigDict, model_validator

from proposal_studio.schemas.document import CamelModel, DocumentMetadata, GeneratedDocument
from proposal_studio.schemas.template import DocumentType, TemplateId

ProjectStatus = Literal["draft", "completed"]


class ProjectCreate(CamelModel):
    """A generated document as the results page saves it."""

    title: str | None = None
    document_type: DocumentType
    template_id: TemplateId | None = None
    content: dict[str, Any]
    metadata: DocumentMetadata
    status: ProjectStatus = "completed"

    @model_validator(mode="after")
    def _content_fits_type(self) -> "ProjectCreate":
        self.to_document()
        return self

    def to_document(self) -> GeneratedDocument:
        key = "proposal" if self.document_type == DocumentType.proposal else "pitch_deck"
        return GeneratedDocument(
            document_type=self.document_type,
            metadata=self.metadata,
            **{key: self.content},
        )


class ProjectRead(CamelModel):
    id: UUID
    user_id: UUID
    title: str
    document_type: DocumentType
    status: str
    template_id: TemplateId | None
    content: dict[str, Any]
    document_metadata: dict[str, Any]
    created_at: datetime.datetime
    updated_at: datetime.datetime | None

    model_config = ConfigDict(from_attributes=True)
