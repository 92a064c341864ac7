"""
Static template registry.

Two fixed catalogues, one per document type.  Ids are only unique inside a
catalogue, so every lookup is keyed by ``(template_id, document_type)``.
"""

from __future__ import annotations

import re

from proposal_studio.schemas.template import (
    DocumentType,
    PitchDeckTemplate,
    ProposalTemplate,
    Template,
    TemplateColors,
    TemplateFonts,
)


PROPOSAL_TEMPLATES: tuple[ProposalTemplate, ...] = (
    ProposalTemplate(
        id="professional",
        name="Professional",
        description="Clean, corporate design perfect for business proposals",
        category="business",
        colors=TemplateColors(
            primary="rgb(30, 41, 59)",
            secondary="rgb(71, 85, 105)",
            accent="rgb(59, 130, 246)",
            background="rgb(248, 250, 252)",
            text="rgb(15, 23, 42)",
        ),
        fonts=TemplateFonts(heading="font-serif", body="font-sans"),
        preview="Modern corporate styling with blue accents",
    ),
    ProposalTemplate(
        id="creative",
        name="Creative",
        description="Bold and modern design for creative agencies",
        category="creative",
        colors=TemplateColors(
            primary="rgb(147, 51, 234)",
            secondary="rgb(168, 85, 247)",
            accent="rgb(236, 72, 153)",
            background="rgb(250, 250, 250)",
            text="rgb(23, 23, 23)",
        ),
        fonts=TemplateFonts(heading="font-sans", body="font-sans"),
        preview="Vibrant purple and pink gradient design",
    ),
    ProposalTemplate(
        id="technical",
        name="Technical",
        description="Clean, data-focused design for tech companies",
        category="technical",
        colors=TemplateColors(
            primary="rgb(15, 118, 110)",
            secondary="rgb(20, 184, 166)",
            accent="rgb(34, 197, 94)",
            background="rgb(249, 250, 251)",
            text="rgb(17, 24, 39)",
        ),
        fonts=TemplateFonts(heading="font-mono", body="font-sans"),
        preview="Tech-focused with teal and green accents",
    ),
    ProposalTemplate(
        id="minimal",
        name="Minimal",
        description="Simple, elegant design that focuses on content",
        category="minimal",
        colors=TemplateColors(
            primary="rgb(17, 24, 39)",
            secondary="rgb(75, 85, 99)",
            accent="rgb(107, 114, 128)",
            background="rgb(255, 255, 255)",
            text="rgb(17, 24, 39)",
        ),
        fonts=TemplateFonts(heading="font-serif", body="font-serif"),
        preview="Minimalist black and white design",
    ),
)

PITCH_DECK_TEMPLATES: tuple[PitchDeckTemplate, ...] = (
    PitchDeckTemplate(
        id="startup",
        name="Startup",
        description="Dynamic design perfect for startup pitch decks",
        category="business",
        colors=TemplateColors(
            primary="rgb(239, 68, 68)",
            secondary="rgb(249, 115, 22)",
            accent="rgb(245, 158, 11)",
            background="rgb(255, 251, 235)",
            text="rgb(120, 53, 15)",
        ),
        fonts=TemplateFonts(heading="font-sans", body="font-sans"),
        preview="Energetic red-orange gradient for startups",
    ),
    PitchDeckTemplate(
        id="corporate",
        name="Corporate",
        description="Professional design for established businesses",
        category="business",
        colors=TemplateColors(
            primary="rgb(30, 58, 138)",
            secondary="rgb(59, 130, 246)",
            accent="rgb(147, 197, 253)",
            background="rgb(239, 246, 255)",
            text="rgb(30, 58, 138)",
        ),
        fonts=TemplateFonts(heading="font-serif", body="font-sans"),
        preview="Classic blue corporate styling",
    ),
    PitchDeckTemplate(
        id="modern",
        name="Modern",
        description="Contemporary design with bold typography",
        category="creative",
        colors=TemplateColors(
            primary="rgb(16, 185, 129)",
            secondary="rgb(52, 211, 153)",
            accent="rgb(110, 231, 183)",
            background="rgb(236, 253, 245)",
            text="rgb(6, 78, 59)",
        ),
        fonts=TemplateFonts(heading="font-sans", body="font-sans"),
        preview="Fresh emerald green modern design",
    ),
    PitchDeckTemplate(
        id="elegant",
        name="Elegant",
        description="Sophisticated design for premium presentations",
        category="minimal",
        colors=TemplateColors(
            primary="rgb(55, 48, 163)",
            secondary="rgb(99, 102, 241)",
            accent="rgb(196, 181, 253)",
            background="rgb(250, 250, 255)",
            text="rgb(55, 48, 163)",
        ),
        fonts=TemplateFonts(heading="font-serif", body="font-serif"),
        preview="Elegant indigo and violet styling",
    ),
)

_CATALOGUES: dict[DocumentType, tuple[Template, ...]] = {
    DocumentType.proposal: PROPOSAL_TEMPLATES,
    DocumentType.pitch_deck: PITCH_DECK_TEMPLATES,
}

_RGB_RE = re.compile(r"rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)")


def list_templates(document_type: DocumentType | str) -> list[Template]:
    """Return the catalogue for *document_type* in display order."""
    return list(_CATALOGUES[DocumentType(document_type)])


def get_template(template_id: str | None, document_type: DocumentType | str) -> Template | None:
    """Narrow a free-form *template_id* to an entry of the *document_type* catalogue.

    An id that exists solely in the other catalogue is reported as not found.
    """
    if not template_id:
        return None
    for template in _CATALOGUES[DocumentType(document_type)]:
        if template.id == template_id:
            return template
    return None


def default_template(document_type: DocumentType | str) -> Template:
    """First entry of the catalogue; selected whenever the document type changes."""
    return _CATALOGUES[DocumentType(document_type)][0]


def with_alpha(color: str, alpha: float) -> str:
    """Turn an ``rgb(r, g, b)`` colour into ``rgba(r, g, b, alpha)``.

    Colours that are not in ``rgb()`` form are returned unchanged.
    """
    m = _RGB_RE.fullmatch(color.strip())
    if not m:
        return color
    r, g, b = m.groups()
    return f"rgba({r}, {g}, {b}, {alpha:g})"

