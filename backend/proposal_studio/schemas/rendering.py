"""View models produced by the document renderer."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field

from proposal_studio.schemas.document import CamelModel, PitchDeckContent, Slide


class ViewerMode(str, Enum):
    browsing = "browsing"
    presenting = "presenting"


class SectionStyle(CamelModel):
    border_color: str
    header_background: str
    heading_color: str | None = None
    text_color: str | None = None
    heading_font: str = "font-sans"
    body_font: str = "font-sans"


class RenderedSection(CamelModel):
    key: str
    heading: str
    body: str
    style: SectionStyle


class ProposalView(CamelModel):
    sections: list[RenderedSection]


class SlideStyle(CamelModel):
    background_color: str | None = None
    heading_color: str | None = None
    text_color: str | None = None
    border_color: str
    header_background: str
    heading_font: str = "font-sans"
    body_font: str = "font-sans"


class SlideThumbnail(CamelModel):
    id: str
    index: int
    title: str
    content: str
    is_active: bool
    accent_color: str


class DeckViewState(CamelModel):
    current_slide_index: int = Field(default=0, ge=0)
    is_presentation_mode: bool = False


class DeckView(CamelModel):
    mode: ViewerMode
    state: DeckViewState
    slide_count: int
    counter: str
    current_slide: Slide
    can_go_prev: bool
    can_go_next: bool
    slide_style: SlideStyle
    controls_background: str
    thumbnails: list[SlideThumbnail]


class NavigationRequest(CamelModel):
    """One viewer transition applied to a client-held view state."""

    deck: PitchDeckContent
    template_id: str | None = None
    state: DeckViewState = Field(default_factory=DeckViewState)
    action: Literal["next", "prev", "goto", "toggle"]
    index: int | None = None

