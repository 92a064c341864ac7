"""
Form model for the create step and the request/response payloads of the
generation endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator, model_validator

from proposal_studio.core.templates import default_template, get_template
from proposal_studio.schemas.document import (
    CamelModel,
    DocumentMetadata,
    PitchDeckContent,
    ProposalContent,
)
from proposal_studio.schemas.results import ResultsContext
from proposal_studio.schemas.template import DocumentType, Template

REQUIRED_FIELDS: tuple[str, ...] = (
    "company_name",
    "industry",
    "project_description",
    "target_market",
    "budget",
    "goals",
    "timeline",
)


class FormFields(CamelModel):
    company_name: str = ""
    client_name: str = ""
    industry: str = ""
    project_description: str = ""
    target_market: str = ""
    budget: str = ""
    goals: str = ""
    competitors: str = ""
    timeline: str = ""
    additional_requirements: str = ""
    include_financials: bool = False
    include_timeline: bool = True
    include_competitor_analysis: bool = False

    @field_validator(
        "company_name",
        "client_name",
        "industry",
        "project_description",
        "target_market",
        "budget",
        "goals",
        "competitors",
        "timeline",
        "additional_requirements",
        mode="before",
    )
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class DocumentForm(FormFields):
    """Values entered on the create form, validated before any network call."""

    document_type: DocumentType = DocumentType.proposal
    template_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _template_id_from_template(cls, data: Any) -> Any:
        # The create page posts the whole template object; only its id matters here.
        if isinstance(data, dict) and not data.get("templateId") and not data.get("template_id"):
            template = data.get("template")
            if isinstance(template, dict) and template.get("id"):
                data = {**data, "templateId": template["id"]}
        return data

    def with_document_type(self, document_type: DocumentType | str) -> "DocumentForm":
        """Switch document type and reset the template to that type's default."""
        document_type = DocumentType(document_type)
        return self.model_copy(
            update={
                "document_type": document_type,
                "template_id": default_template(document_type).id,
            }
        )

    def resolve_template(self) -> Template | None:
        if self.template_id is None:
            return default_template(self.document_type)
        return get_template(self.template_id, self.document_type)

    def missing_required_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    def validation_errors(self) -> dict[str, str]:
        """Inline error per offending field, keyed by its wire (camelCase) name."""
        errors: dict[str, str] = {}
        for name in self.missing_required_fields():
            field = type(self).model_fields[name]
            label = field.alias or name
            errors[label] = "This field is required."
        if self.resolve_template() is None:
            errors["templateId"] = (
                f"Unknown template '{self.template_id}' for document type '{self.document_type.value}'."
            )
        return errors

    def to_generation_request(self) -> "GenerationRequest":
        template = self.resolve_template()
        if template is None:
            raise ValueError(f"unknown template {self.template_id!r} for {self.document_type.value}")
        fields = FormFields.model_fields
        return GenerationRequest(
            document_type=self.document_type,
            template=template,
            **{name: getattr(self, name) for name in fields},
        )


class GenerationRequest(FormFields):
    """Validated form values plus the full selected template."""

    document_type: DocumentType
    template: Template


class ProposalResponse(CamelModel):
    success: bool = True
    proposal: ProposalContent
    metadata: DocumentMetadata
    context: ResultsContext


class PitchDeckResponse(CamelModel):
    success: bool = True
    pitch_deck: PitchDeckContent
    metadata: DocumentMetadata
    context: ResultsContext
