"""
Pydantic models for the static presentation templates.

Templates are frozen records; the catalogues themselves live in
``proposal_studio.core.templates``.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class DocumentType(str, Enum):
    proposal = "proposal"
    pitch_deck = "pitch-deck"


TemplateCategory = Literal["business", "creative", "technical", "minimal"]
FontRole = Literal["font-serif", "font-sans", "font-mono"]

ProposalTemplateId = Literal["professional", "creative", "technical", "minimal"]
PitchDeckTemplateId = Literal["startup", "corporate", "modern", "elegant"]
TemplateId = ProposalTemplateId | PitchDeckTemplateId


class TemplateColors(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    secondary: str
    accent: str
    background: str
    text: str


class TemplateFonts(BaseModel):
    model_config = ConfigDict(frozen=True)

    heading: FontRole
    body: FontRole


class Template(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: TemplateId
    name: str
    description: str
    category: TemplateCategory
    colors: TemplateColors
    fonts: TemplateFonts
    preview: str


class ProposalTemplate(Template):
    id: ProposalTemplateId


class PitchDeckTemplate(Template):
    id: PitchDeckTemplateId
