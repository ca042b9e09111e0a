# pppk_contracts/services/text_layout.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

# F4 (215 x 330 mm) in PDF points
F4_SIZE: Tuple[float, float] = (610, 936)
DEFAULT_MARGIN = 50

REGULAR_FONT = "Times-Roman"
BOLD_FONT = "Times-Bold"


@dataclass
class DrawnLine:
    page: int
    x: float
    y: float
    text: str
    font: str
    size: float
    justified: bool = False
    # x of each word when justified, else empty
    word_xs: Tuple[float, ...] = ()


@dataclass
class LayoutState:
    """Page/cursor/fonts for ONE document being rendered. Never shared."""

    canvas: canvas.Canvas
    buffer: BytesIO
    page_width: float
    page_height: float
    margin: float
    y: float
    regular_font: str = REGULAR_FONT
    bold_font: str = BOLD_FONT
    page_number: int = 1
    lines: List[DrawnLine] = field(default_factory=list)
    pdf: bytes = b""

    @property
    def top(self) -> float:
        return self.page_height - self.margin

    @property
    def usable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def remaining(self) -> float:
        return self.y - self.margin


def text_width(text: str, font: str, size: float) -> float:
    return pdfmetrics.stringWidth(text, font, size)


def new_layout_state(
    page_size: Sequence[float] = F4_SIZE,
    margin: float = DEFAULT_MARGIN,
    regular_font: str = REGULAR_FONT,
    bold_font: str = BOLD_FONT,
    title: Optional[str] = None,
) -> LayoutState:
    width, height = float(page_size[0]), float(page_size[1])
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height), invariant=1)
    if title:
        c.setTitle(title)
    return LayoutState(
        canvas=c,
        buffer=buf,
        page_width=width,
        page_height=height,
        margin=margin,
        y=height - margin,
        regular_font=regular_font,
        bold_font=bold_font,
    )


# ---------- pages ----------

def new_page(state: LayoutState) -> None:
    state.canvas.showPage()
    state.page_number += 1
    state.y = state.top


def ensure_space(state: LayoutState, needed: float) -> bool:
    """Start a new page if less than `needed` remains. Returns True on a break."""
    if state.remaining < needed:
        new_page(state)
        return True
    return False


def finish(state: LayoutState) -> bytes:
    state.canvas.save()
    state.pdf = state.buffer.getvalue()
    return state.pdf


# ---------- primitives ----------

def draw_text(state: LayoutState, x: float, text: str, font: str, size: float) -> None:
    c = state.canvas
    c.setFont(font, size)
    c.drawString(x, state.y, text)
    state.lines.append(DrawnLine(state.page_number, x, state.y, text, font, size))


def draw_centered(state: LayoutState, text: str, font: str, size: float) -> None:
    x = (state.page_width - text_width(text, font, size)) / 2
    draw_text(state, x, text, font, size)


def draw_rule(state: LayoutState, y: float, thickness: float = 1.5) -> None:
    c = state.canvas
    c.setLineWidth(thickness)
    c.line(state.margin, y, state.page_width - state.margin, y)


def _draw_justified(state: LayoutState, words: List[str], font: str, size: float) -> None:
    glyphs = sum(text_width(w, font, size) for w in words)
    gap = (state.usable_width - glyphs) / (len(words) - 1)
    c = state.canvas
    c.setFont(font, size)
    x = state.margin
    xs = []
    for w in words:
        c.drawString(x, state.y, w)
        xs.append(x)
        x += text_width(w, font, size) + gap
    state.lines.append(DrawnLine(
        state.page_number, state.margin, state.y, " ".join(words), font, size,
        justified=True, word_xs=tuple(xs),
    ))


def _emit_line(
    state: LayoutState, words: List[str], font: str, size: float,
    line_height: float, justify: bool,
) -> None:
    ensure_space(state, line_height)
    if justify and len(words) > 1:
        _draw_justified(state, words, font, size)
    else:
        draw_text(state, state.margin, " ".join(words), font, size)
    state.y -= line_height


# ---------- paragraphs ----------

def estimate_height(state: LayoutState, paragraph: str, font: str, size: float, line_height: float) -> float:
    """Coarse: raw text width over usable width, not the wrapped line count."""
    raw = text_width(paragraph, font, size)
    return math.ceil(raw / state.usable_width) * line_height


def draw_paragraph(state: LayoutState, paragraph: str, font: str, size: float, line_height: float) -> None:
    words = paragraph.split()
    if not words:
        ensure_space(state, line_height)
        state.y -= line_height
        return

    # Coarse pre-check. Only skipped at the top of a page, where breaking
    # would emit a blank page and the wrap loop breaks on overflow anyway.
    if state.y < state.top and state.remaining < estimate_height(state, paragraph, font, size, line_height):
        new_page(state)

    line: List[str] = []
    for word in words:
        candidate = line + [word]
        if line and text_width(" ".join(candidate), font, size) > state.usable_width:
            # an overflowing word always follows, so this is never the paragraph's last line
            _emit_line(state, line, font, size, line_height, justify=True)
            line = [word]
        else:
            line = candidate
    _emit_line(state, line, font, size, line_height, justify=False)


def draw_text_block(state: LayoutState, text: str, font: str, size: float, line_height: float) -> float:
    """Lay out `text` (paragraphs split on newlines) from the current cursor.

    Body lines are justified; a paragraph's last line and single-word lines are
    left-aligned. Pages are added as the cursor runs out of room. Returns the
    new cursor position.
    """
    for paragraph in (text or "").split("\n"):
        draw_paragraph(state, paragraph, font, size, line_height)
    return state.y
