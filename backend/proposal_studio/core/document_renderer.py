"""
Deterministic renderer for generated documents.

- Proposals become an ordered list of styled sections; absent or blank
  sections are skipped.
- Pitch decks are browsed through ``PitchDeckViewer``, a small state machine
  (browsing / presenting) whose slide index is clamped at both ends.
- ``render_proposal_html`` / ``render_pitch_deck_html`` produce
  self-contained HTML pages for the same views.

Styling is a pure function of the template (and, for decks, of the current
slide index); nothing here mutates the document.
"""

from __future__ import annotations

import html as html_mod

from proposal_studio.core.templates import with_alpha
from proposal_studio.schemas.document import (
    DocumentMetadata,
    PitchDeckContent,
    ProposalContent,
)
from proposal_studio.schemas.rendering import (
    DeckView,
    DeckViewState,
    ProposalView,
    RenderedSection,
    SectionStyle,
    SlideStyle,
    SlideThumbnail,
    ViewerMode,
)
from proposal_studio.schemas.template import Template

PROPOSAL_SECTION_ORDER: tuple[tuple[str, str], ...] = (
    ("executive_summary", "Executive Summary"),
    ("project_overview", "Project Overview"),
    ("target_market", "Target Market Analysis"),
    ("proposed_solution", "Proposed Solution"),
    ("timeline", "Timeline & Milestones"),
    ("budget", "Budget Breakdown"),
    ("expected_outcomes", "Expected Outcomes"),
    ("next_steps", "Next Steps"),
)

# Neutral palette used when no template could be resolved.
DEFAULT_PRIMARY = "rgb(59, 130, 246)"
DEFAULT_ACCENT = "rgb(147, 51, 234)"

_FONT_STACKS = {
    "font-serif": "Georgia, 'Times New Roman', serif",
    "font-sans": "'Helvetica Neue', Arial, sans-serif",
    "font-mono": "'SFMono-Regular', Menlo, Consolas, monospace",
}


def _e(text: str | None) -> str:
    """HTML-escape helper."""
    return html_mod.escape(text or "")


def _gradient(template: Template | None, alpha: float) -> str:
    primary = template.colors.primary if template else DEFAULT_PRIMARY
    accent = template.colors.accent if template else DEFAULT_ACCENT
    return f"linear-gradient(135deg, {with_alpha(primary, alpha)}, {with_alpha(accent, alpha)})"


def section_style(template: Template | None) -> SectionStyle:
    if template is None:
        return SectionStyle(
            border_color=with_alpha(DEFAULT_PRIMARY, 0.25),
            header_background=_gradient(None, 0.05),
        )
    return SectionStyle(
        border_color=with_alpha(template.colors.primary, 0.25),
        header_background=_gradient(template, 0.03),
        heading_color=template.colors.primary,
        text_color=template.colors.text,
        heading_font=template.fonts.heading,
        body_font=template.fonts.body,
    )


# ---------------------------------------------------------------------------
# Proposal
# ---------------------------------------------------------------------------

def render_proposal(content: ProposalContent, template: Template | None = None) -> ProposalView:
    """One styled section per present, non-blank key, in fixed order."""
    style = section_style(template)
    sections = []
    for key, heading in PROPOSAL_SECTION_ORDER:
        body = getattr(content, key)
        if not body or not body.strip():
            continue
        sections.append(RenderedSection(key=key, heading=heading, body=body, style=style))
    return ProposalView(sections=sections)


# ---------------------------------------------------------------------------
# Pitch deck viewer
# ---------------------------------------------------------------------------

class PitchDeckViewer:
    """Slide navigation for one pitch deck.

    ``next``/``prev`` are no-ops at the last/first slide; the matching
    ``can_go_next``/``can_go_prev`` flags are what a UI uses to disable its
    buttons.  Toggling presentation mode keeps the current slide.
    """

    def __init__(
        self,
        deck: PitchDeckContent,
        template: Template | None = None,
        state: DeckViewState | None = None,
    ):
        self.deck = deck
        self.template = template
        self._slides = deck.slides
        self.current_slide_index = 0
        self.mode = ViewerMode.browsing
        if state is not None:
            self.go_to_slide(state.current_slide_index)
            if state.is_presentation_mode:
                self.mode = ViewerMode.presenting

    @property
    def slide_count(self) -> int:
        return len(self._slides)

    @property
    def is_presentation_mode(self) -> bool:
        return self.mode == ViewerMode.presenting

    @property
    def can_go_prev(self) -> bool:
        return self.current_slide_index > 0

    @property
    def can_go_next(self) -> bool:
        return self.current_slide_index < self.slide_count - 1

    def next(self) -> int:
        if self.can_go_next:
            self.current_slide_index += 1
        return self.current_slide_index

    def prev(self) -> int:
        if self.can_go_prev:
            self.current_slide_index -= 1
        return self.current_slide_index

    def go_to_slide(self, index: int) -> int:
        if not 0 <= index < self.slide_count:
            raise IndexError(f"slide index {index} out of range 0..{self.slide_count - 1}")
        self.current_slide_index = index
        return index

    def toggle_presentation_mode(self) -> ViewerMode:
        self.mode = ViewerMode.browsing if self.is_presentation_mode else ViewerMode.presenting
        return self.mode

    def state(self) -> DeckViewState:
        return DeckViewState(
            current_slide_index=self.current_slide_index,
            is_presentation_mode=self.is_presentation_mode,
        )

    @classmethod
    def from_state(
        cls, deck: PitchDeckContent, state: DeckViewState, template: Template | None = None
    ) -> "PitchDeckViewer":
        return cls(deck, template=template, state=state)

    def slide_style(self) -> SlideStyle:
        t = self.template
        if t is None:
            return SlideStyle(
                border_color=with_alpha(DEFAULT_PRIMARY, 0.25),
                header_background=_gradient(None, 0.05),
            )
        return SlideStyle(
            background_color=t.colors.background if self.is_presentation_mode else None,
            heading_color=t.colors.primary,
            text_color=t.colors.text,
            border_color=with_alpha(t.colors.primary, 0.25),
            header_background=_gradient(t, 0.03),
            heading_font=t.fonts.heading,
            body_font=t.fonts.body,
        )

    def view(self) -> DeckView:
        accent = self.template.colors.primary if self.template else DEFAULT_PRIMARY
        thumbnails = [
            SlideThumbnail(
                id=key,
                index=i,
                title=slide.title,
                content=slide.content,
                is_active=i == self.current_slide_index,
                accent_color=accent,
            )
            for i, (key, slide) in enumerate(zip(self.deck.keys, self._slides))
        ]
        return DeckView(
            mode=self.mode,
            state=self.state(),
            slide_count=self.slide_count,
            counter=f"Slide {self.current_slide_index + 1} of {self.slide_count}",
            current_slide=self._slides[self.current_slide_index],
            can_go_prev=self.can_go_prev,
            can_go_next=self.can_go_next,
            slide_style=self.slide_style(),
            controls_background=_gradient(self.template, 0.06),
            thumbnails=thumbnails,
        )


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

def _page(title: str, body: str, template: Template | None, extra_css: str = "", script: str = "") -> str:
    background = template.colors.background if template else "#ffffff"
    text = template.colors.text if template else "#0f172a"
    body_font = _FONT_STACKS[template.fonts.body if template else "font-sans"]
    heading_font = _FONT_STACKS[template.fonts.heading if template else "font-sans"]
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{_e(title)}</title>
<style>
*, *::before, *::after {{ box-sizing: border-box; margin: 0; padding: 0; }}
body {{ background: {background}; color: {text}; font-family: {body_font}; line-height: 1.6; }}
h1, h2, h3 {{ font-family: {heading_font}; }}
.container {{ max-width: 960px; margin: 0 auto; padding: 48px 24px; }}
.doc-header {{ margin-bottom: 32px; }}
.doc-header p {{ opacity: 0.7; }}
.card {{ border: 1px solid; border-radius: 12px; margin-bottom: 24px; overflow: hidden; }}
.card-header {{ padding: 16px 24px; }}
.card-body {{ padding: 24px; white-space: pre-wrap; }}
{extra_css}
</style>
</head>
<body>
{body}
{script}
</body>
</html>"""


def _doc_header(heading: str, metadata: DocumentMetadata | None, template: Template | None) -> str:
    subtitle = ""
    if metadata is not None:
        subtitle = f"<p>Generated for {_e(metadata.company_name)} &bull; {_e(metadata.industry)}</p>"
    badge = ""
    if template is not None:
        badge = (
            f' <span class="badge" style="background:{with_alpha(template.colors.primary, 0.12)};'
            f'color:{template.colors.primary}">{_e(template.name)}</span>'
        )
    return f'<header class="doc-header"><h1>{_e(heading)}{badge}</h1>{subtitle}</header>'


def render_proposal_html(
    content: ProposalContent,
    template: Template | None = None,
    metadata: DocumentMetadata | None = None,
) -> str:
    """Render a proposal into a self-contained HTML page."""
    view = render_proposal(content, template)
    cards = []
    for section in view.sections:
        s = section.style
        heading_color = f"color:{s.heading_color};" if s.heading_color else ""
        text_color = f' style="color:{s.text_color}"' if s.text_color else ""
        cards.append(
            f'<section class="card" data-section="{section.key}" style="border-color:{s.border_color}">'
            f'<div class="card-header" style="background:{s.header_background}">'
            f'<h2 style="{heading_color}">{_e(section.heading)}</h2></div>'
            f'<div class="card-body"{text_color}>{_e(section.body)}</div></section>'
        )
    body = (
        '<main class="container">'
        + _doc_header("Business Proposal", metadata, template)
        + "\n".join(cards)
        + "</main>"
    )
    return _page("Business Proposal", body, template)


_DECK_CSS = """
.slide { display: none; min-height: 420px; padding: 48px; border: 2px solid; border-radius: 12px; }
.slide.active { display: flex; flex-direction: column; justify-content: center; }
.slide h2 { font-size: 2.2rem; margin-bottom: 24px; }
.slide .content { font-size: 1.15rem; white-space: pre-wrap; }
.deck-nav { display: flex; align-items: center; justify-content: center; gap: 16px; margin: 24px 0; }
.deck-nav button:disabled { opacity: 0.4; cursor: default; }
.dots { display: flex; justify-content: center; gap: 8px; }
.dot { width: 12px; height: 12px; border-radius: 50%; border: none; background: #cbd5e1; cursor: pointer; }
.dot.active { background: currentColor; }
"""

_DECK_SCRIPT = """<script>
(function () {
  var slides = document.querySelectorAll('.slide');
  var dots = document.querySelectorAll('.dot');
  var prev = document.getElementById('prev');
  var next = document.getElementById('next');
  var counter = document.getElementById('counter');
  var current = %(start)d;
  function show(i) {
    current = Math.max(0, Math.min(slides.length - 1, i));
    slides.forEach(function (s, n) { s.classList.toggle('active', n === current); });
    dots.forEach(function (d, n) { d.classList.toggle('active', n === current); });
    prev.disabled = current === 0;
    next.disabled = current === slides.length - 1;
    counter.textContent = 'Slide ' + (current + 1) + ' of ' + slides.length;
  }
  prev.addEventListener('click', function () { show(current - 1); });
  next.addEventListener('click', function () { show(current + 1); });
  dots.forEach(function (d, n) { d.addEventListener('click', function () { show(n); }); });
  document.addEventListener('keydown', function (e) {
    if (e.key === 'ArrowRight' || e.key === ' ') { show(current + 1); }
    if (e.key === 'ArrowLeft') { show(current - 1); }
  });
  show(current);
})();
</script>"""


def render_pitch_deck_html(
    deck: PitchDeckContent,
    template: Template | None = None,
    metadata: DocumentMetadata | None = None,
    state: DeckViewState | None = None,
) -> str:
    """Render a pitch deck into a self-contained, keyboard-navigable HTML page."""
    viewer = PitchDeckViewer(deck, template=template, state=state)
    view = viewer.view()
    style = view.slide_style

    slides_html = []
    for thumb in view.thumbnails:
        heading_color = f"color:{style.heading_color};" if style.heading_color else ""
        slides_html.append(
            f'<section class="slide{" active" if thumb.is_active else ""}" data-slide="{thumb.index}" '
            f'data-key="{_e(thumb.id)}" style="border-color:{style.border_color};background:{style.header_background}">'
            f'<h2 style="{heading_color}">{_e(thumb.title)}</h2>'
            f'<div class="content">{_e(thumb.content)}</div></section>'
        )
    dots = "".join(
        f'<button class="dot{" active" if t.is_active else ""}" data-dot="{t.index}" '
        f'aria-label="Go to slide {t.index + 1}"></button>'
        for t in view.thumbnails
    )
    accent = template.colors.primary if template else DEFAULT_PRIMARY
    body = (
        '<main class="container">'
        + _doc_header("Pitch Deck", metadata, template)
        + "\n".join(slides_html)
        + '<nav class="deck-nav">'
        + f'<button id="prev"{" disabled" if not view.can_go_prev else ""}>Previous</button>'
        + f'<span id="counter">{_e(view.counter)}</span>'
        + f'<button id="next"{" disabled" if not view.can_go_next else ""}>Next</button>'
        + "</nav>"
        + f'<div class="dots" style="color:{accent}">{dots}</div>'
        + "</main>"
    )
    script = _DECK_SCRIPT % {"start": view.state.current_slide_index}
    title = f"{metadata.company_name} - Pitch Deck" if metadata else "Pitch Deck"
    return _page(title, body, template, extra_css=_DECK_CSS, script=script)
