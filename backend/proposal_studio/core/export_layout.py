"""
Export of generated documents as paginated text.

``build_export_payload`` flattens a document into ``PdfData``;
``layout_as_pages`` flows that payload onto A4 pages with a running
vertical cursor; ``render_pdf`` draws the placed lines with fpdf2.

Layout rules (all lengths in mm, font sizes in pt):

- text starts at the top margin; every wrapped line advances the cursor by
  ``font_size * 0.5`` and every block adds 5 after its last line
- before each line, if the cursor is past ``page_height - margin`` a new
  page starts and the cursor returns to the top margin
- title 20 bold, then +10; the three metadata lines 12 bold, then +15
- proposal: each present section as a 16 bold heading and 12 body, +10
  between sections
- pitch deck: each slide title 16 bold and content 12, +15 after each slide
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date
from urllib.parse import quote

from fpdf import FPDF

from proposal_studio.core.document_renderer import PROPOSAL_SECTION_ORDER
from proposal_studio.core.errors import ExportError
from proposal_studio.schemas.document import (
    DocumentMetadata,
    PitchDeckContent,
    ProposalContent,
)
from proposal_studio.schemas.export import Page, PdfData, PlacedLine
from proposal_studio.schemas.template import DocumentType, Template

logger = logging.getLogger(__name__)

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 20.0
MAX_WIDTH = PAGE_WIDTH - 2 * MARGIN
LINE_ADVANCE_PER_PT = 0.5
BLOCK_GAP = 5.0

TITLE_SIZE = 20
HEADING_SIZE = 16
BODY_SIZE = 12

DEFAULT_FAMILY = "helvetica"
_FAMILY_FOR_ROLE = {
    "font-sans": "helvetica",
    "font-serif": "times",
    "font-mono": "courier",
}

# (text, family, bold, size) -> width in mm
Measure = Callable[[str, str, bool, float], float]


# --- sanitizers ---
_REPLACEMENTS = {
    "—": "--",   # em dash
    "–": "-",    # en dash
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "•": "*",    # bullet
    "…": "...",
    " ": " ",    # no-break space
    "​": "",     # zero-width space
    "→": "->",
    "←": "<-",
}


def safe_text(text: str) -> str:
    """Reduce *text* to what the PDF core fonts (latin-1) can draw."""
    for bad, good in _REPLACEMENTS.items():
        text = text.replace(bad, good)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class FpdfMeasure:
    """String widths from fpdf2's core font metrics."""

    def __init__(self):
        self._pdf = FPDF(unit="mm", format="A4")

    def __call__(self, text: str, family: str, bold: bool, size: float) -> float:
        self._pdf.set_font(family, "B" if bold else "", size)
        return self._pdf.get_string_width(text)


def _fit_prefix(word: str, max_width: float, width_of: Callable[[str], float]) -> int:
    """Largest prefix length of *word* that fits; at least one character."""
    lo, hi, fit = 1, len(word), 1
    while lo <= hi:
        mid = (lo + hi) // 2
        if width_of(word[:mid]) <= max_width:
            fit = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return fit


def wrap_text(text: str, max_width: float, width_of: Callable[[str], float]) -> list[str]:
    """Greedy word wrap; explicit newlines are kept and over-long words are split."""
    lines: list[str] = []
    for paragraph in text.replace("\r\n", "\n").split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if width_of(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            while width_of(word) > max_width:
                fit = _fit_prefix(word, max_width, width_of)
                lines.append(word[:fit])
                word = word[fit:]
            current = word
        lines.append(current)
    return lines


def font_family(role: str | None) -> str:
    return _FAMILY_FOR_ROLE.get(role or "", DEFAULT_FAMILY)


def export_title(document_type: DocumentType) -> str:
    return "Business Proposal" if document_type == DocumentType.proposal else "Pitch Deck"


def build_export_payload(
    content: ProposalContent | PitchDeckContent,
    document_type: DocumentType,
    metadata: DocumentMetadata,
    template: Template | None = None,
) -> PdfData:
    """Flatten a document and its metadata into the record the layout consumes.

    *template* does not change the record; it only selects fonts at layout time.
    """
    return PdfData(
        title=export_title(document_type),
        company=metadata.company_name,
        industry=metadata.industry,
        generated_at=metadata.generated_at,
        content=content,
        document_type=document_type,
    )


class _PageFlow:
    """Running cursor over a growing list of pages."""

    def __init__(self, measure: Measure):
        self.measure = measure
        self.pages: list[Page] = [Page(number=1, lines=[])]
        self.y = MARGIN

    def skip(self, amount: float) -> None:
        self.y += amount

    def add_text(self, text: str, size: float, bold: bool = False, family: str = DEFAULT_FAMILY) -> None:
        text = safe_text(text)
        width_of = lambda s: self.measure(s, family, bold, size)  # noqa: E731
        for line in wrap_text(text, MAX_WIDTH, width_of):
            if self.y > PAGE_HEIGHT - MARGIN:
                self.pages.append(Page(number=len(self.pages) + 1, lines=[]))
                self.y = MARGIN
            self.pages[-1].lines.append(
                PlacedLine(text=line, x=MARGIN, y=self.y, font_family=family, font_size=size, bold=bold)
            )
            self.y += size * LINE_ADVANCE_PER_PT
        self.y += BLOCK_GAP


def _format_date(payload: PdfData) -> str:
    d = payload.generated_at
    return f"{d.month}/{d.day}/{d.year}"


def layout_as_pages(
    payload: PdfData,
    template: Template | None = None,
    measure: Measure | None = None,
) -> list[Page]:
    """Flow *payload* onto fixed-size pages.  Deterministic for a given measure."""
    flow = _PageFlow(measure or FpdfMeasure())
    heading_family = font_family(template.fonts.heading if template else None)
    body_family = font_family(template.fonts.body if template else None)

    flow.add_text(payload.title, TITLE_SIZE, bold=True, family=heading_family)
    flow.skip(10)
    flow.add_text(f"Company: {payload.company}", BODY_SIZE, bold=True, family=body_family)
    flow.add_text(f"Industry: {payload.industry}", BODY_SIZE, bold=True, family=body_family)
    flow.add_text(f"Generated: {_format_date(payload)}", BODY_SIZE, bold=True, family=body_family)
    flow.skip(15)

    content = payload.content
    if payload.document_type == DocumentType.proposal:
        present = [
            (heading, getattr(content, key))
            for key, heading in PROPOSAL_SECTION_ORDER
            if getattr(content, key) and getattr(content, key).strip()
        ]
        for i, (heading, body) in enumerate(present):
            flow.add_text(heading, HEADING_SIZE, bold=True, family=heading_family)
            flow.add_text(body, BODY_SIZE, family=body_family)
            if i < len(present) - 1:
                flow.skip(10)
    else:
        for slide in content.slides:
            flow.add_text(slide.title, HEADING_SIZE, bold=True, family=heading_family)
            flow.add_text(slide.content, BODY_SIZE, family=body_family)
            flow.skip(15)

    return flow.pages


def render_pdf(pages: list[Page], title: str | None = None) -> bytes:
    """Draw already-placed lines with fpdf2 and return the PDF bytes."""
    try:
        pdf = FPDF(unit="mm", format="A4")
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(MARGIN, MARGIN, MARGIN)
        if title:
            pdf.set_title(safe_text(title))
        for page in pages:
            pdf.add_page()
            for line in page.lines:
                if not line.text:
                    continue
                pdf.set_font(line.font_family, "B" if line.bold else "", line.font_size)
                pdf.text(line.x, line.y, line.text)
        return bytes(pdf.output())
    except Exception as exc:
        logger.error("PDF rendering failed: %s", exc, exc_info=True)
        raise ExportError(str(exc)) from exc


def export_filename(payload: PdfData, today: date | None = None) -> str:
    """``{company}_{Title_With_Underscores}_{YYYY-MM-DD}.pdf``"""
    today = today or date.today()
    title = "_".join(payload.title.split())
    return f"{payload.company}_{title}_{today.isoformat()}.pdf"


_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f"/\\]')
_NON_ASCII = re.compile(r"[^\x20-\x7e]|\?")


def content_disposition(filename: str) -> str:
    """``attachment`` header value with an ASCII ``filename`` and an RFC 5987 ``filename*``.

    Response headers are latin-1 encoded, so the plain parameter is reduced to
    printable ASCII; clients that understand ``filename*`` get the UTF-8 name.
    """
    filename = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    fallback = safe_text(filename).encode("ascii", errors="replace").decode("ascii")
    fallback = _NON_ASCII.sub("_", fallback)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"
