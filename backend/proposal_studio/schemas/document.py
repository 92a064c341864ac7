"""
Pydantic models for generated document content.

A generated document is either a proposal (free-text sections keyed by
name) or a pitch deck (exactly ten ``{title, content}`` slides kept in
insertion order).  Wire names are camelCase.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, RootModel, model_validator
from pydantic.alias_generators import to_camel

from proposal_studio.schemas.template import DocumentType

PITCH_DECK_SLIDE_COUNT = 10


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProposalContent(CamelModel):
    executive_summary: str | None = None
    project_overview: str | None = None
    target_market: str | None = None
    proposed_solution: str | None = None
    timeline: str | None = None
    budget: str | None = None
    expected_outcomes: str | None = None
    next_steps: str | None = None


PROPOSAL_SECTION_KEYS: tuple[str, ...] = tuple(ProposalContent.model_fields)


class Slide(BaseModel):
    title: str
    content: str


class PitchDeckContent(RootModel[dict[str, Slide]]):
    """Ten slides serialised as ``{"slide1": {...}, ..., "slide10": {...}}``."""

    @model_validator(mode="after")
    def _exactly_ten_slides(self) -> "PitchDeckContent":
        if len(self.root) != PITCH_DECK_SLIDE_COUNT:
            raise ValueError(
                f"a pitch deck has exactly {PITCH_DECK_SLIDE_COUNT} slides, got {len(self.root)}"
            )
        return self

    @classmethod
    def from_slides(cls, slides: list[Slide]) -> "PitchDeckContent":
        return cls({f"slide{i}": slide for i, slide in enumerate(slides, start=1)})

    @property
    def slides(self) -> list[Slide]:
        return list(self.root.values())

    @property
    def keys(self) -> list[str]:
        return list(self.root.keys())


class DocumentMetadata(CamelModel):
    company_name: str
    client_name: str | None = None
    industry: str
    generated_at: datetime.datetime


class GeneratedDocument(CamelModel):
    document_type: DocumentType
    proposal: ProposalContent | None = None
    pitch_deck: PitchDeckContent | None = None
    metadata: DocumentMetadata

    @model_validator(mode="after")
    def _content_matches_type(self) -> "GeneratedDocument":
        if self.document_type == DocumentType.proposal and self.proposal is None:
            raise ValueError("proposal content is required for a proposal")
        if self.document_type == DocumentType.pitch_deck and self.pitch_deck is None:
            raise ValueError("pitchDeck content is required for a pitch deck")
        return self

    @property
    def content(self) -> ProposalContent | PitchDeckContent:
        if self.document_type == DocumentType.proposal:
            return self.proposal
        return self.pitch_deck
