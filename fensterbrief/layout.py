"""
Layout engine and auto-fit

``layout_letter`` turns classified paragraphs into positioned draw instructions
at one font size and reports whether everything stayed above the bottom
margin. The same trace serves both fitting and drawing: ``fit_font_size`` runs
it for each candidate size and the PDF builder replays the chosen trace.

Coordinates are PDF points with the origin in the bottom-left corner; ``y`` is
the text baseline.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth

from .classify import ClassifiedLine, Role
from .config import Fonts, LetterSettings

logger = logging.getLogger(__name__)

BULLET_GLYPH = "•"


class Weight(str, Enum):
    REGULAR = "regular"
    BOLD = "bold"


class DrawInstruction(BaseModel):
    """A single run of text at a fixed position"""
    model_config = ConfigDict(frozen=True)

    text: str
    x: float
    y: float
    font_size: float
    weight: Weight = Weight.REGULAR
    link: Optional[str] = None


class LayoutResult(BaseModel):
    """Outcome of laying out the whole letter at one size"""
    model_config = ConfigDict(frozen=True)

    font_size: float
    fits: bool
    instructions: Tuple[DrawInstruction, ...]
    end_y: float


class FitResult(BaseModel):
    """Chosen body size and the layout produced at that size"""
    model_config = ConfigDict(frozen=True)

    chosen_font_size: float
    fits: bool
    layout: LayoutResult


# ============================================================================
# MEASUREMENT AND WRAPPING
# ============================================================================

def font_for(fonts: Fonts, weight: Weight) -> str:
    return fonts.bold if weight == Weight.BOLD else fonts.regular


def line_height(font_name: str, size: float) -> float:
    """Distance from descender to ascender at the given size"""
    ascent, descent = pdfmetrics.getAscentDescent(font_name, size)
    return ascent - descent


def wrap_text(text: str, font_name: str, size: float, max_width: float) -> List[str]:
    """Greedy word wrap; a word wider than max_width gets a line of its own"""
    lines = []
    current_line = []

    for word in text.split():
        test_line = ' '.join(current_line + [word])
        if stringWidth(test_line, font_name, size) > max_width and current_line:
            lines.append(' '.join(current_line))
            current_line = [word]
        else:
            current_line.append(word)

    if current_line:
        lines.append(' '.join(current_line))

    return lines


Token = Tuple[str, Weight]
Segment = Tuple[str, Weight]


def _segments(tokens: Sequence[Token]) -> List[Segment]:
    """Merge consecutive words of equal weight into runs"""
    segments = []
    for word, weight in tokens:
        if segments and segments[-1][1] == weight:
            segments[-1] = (segments[-1][0] + ' ' + word, weight)
        else:
            segments.append((word, weight))
    return segments


def _place(segments: Sequence[Segment], fonts: Fonts, size: float) -> List[Tuple[float, str, Weight]]:
    """Offsets of each run relative to the line start"""
    space = stringWidth(' ', fonts.regular, size)
    placed = []
    offset = 0.0
    for i, (text, weight) in enumerate(segments):
        if i:
            offset += space
        placed.append((offset, text, weight))
        offset += stringWidth(text, font_for(fonts, weight), size)
    return placed


def _runs_width(tokens: Sequence[Token], fonts: Fonts, size: float) -> float:
    placed = _place(_segments(tokens), fonts, size)
    if not placed:
        return 0.0
    offset, text, weight = placed[-1]
    return offset + stringWidth(text, font_for(fonts, weight), size)


def wrap_runs(tokens: Sequence[Token], fonts: Fonts, size: float, max_width: float) -> List[List[Segment]]:
    """Greedy wrap of mixed-weight words, e.g. a bold title followed by regular text"""
    lines = []
    current = []
    for token in tokens:
        candidate = current + [token]
        if _runs_width(candidate, fonts, size) > max_width and current:
            lines.append(current)
            current = [token]
        else:
            current = candidate
    if current:
        lines.append(current)
    return [_segments(line) for line in lines]


# ============================================================================
# LAYOUT
# ============================================================================

class _Overflow(Exception):
    """Raised when the next line would start below the bottom margin"""


class _Trace:
    """Vertical cursor plus the instructions emitted so far"""

    def __init__(self, settings: LetterSettings, size: float):
        page = settings.page
        params = settings.layout
        window = settings.window

        self.settings = settings
        self.fonts = settings.fonts
        self.size = size
        self.left = params.left_margin * mm
        self.width = page.width - (params.left_margin + params.right_margin) * mm
        self.bottom = params.bottom_margin * mm
        self.step = line_height(self.fonts.regular, size) + params.line_gap
        self.y = (page.height - (window.top + window.height + params.top_offset_below_window) * mm
                  + params.start_higher * mm)
        self.instructions = []

    def emit(self, runs: Sequence[Tuple[float, str, Weight, Optional[str]]]):
        """Place one line of runs at the cursor and advance by one line step"""
        if self.y < self.bottom:
            raise _Overflow()
        for x, text, weight, link in runs:
            self.instructions.append(DrawInstruction(
                text=text, x=x, y=self.y, font_size=self.size, weight=weight, link=link,
            ))
        self.y -= self.step

    def wrapped(self, text: str, weight: Weight):
        for line in wrap_text(text, font_for(self.fonts, weight), self.size, self.width):
            self.emit([(self.left, line, weight, None)])

    def mixed(self, line: ClassifiedLine, x: float, max_width: float, lead=()):
        """Bold title followed by regular body, wrapped within max_width"""
        tokens = [(w, Weight.BOLD) for w in line.title.split()]
        tokens += [(w, Weight.REGULAR) for w in line.body.split()]
        for i, segments in enumerate(wrap_runs(tokens, self.fonts, self.size, max_width)):
            runs = list(lead) if i == 0 else []
            runs += [(x + offset, text, weight, None)
                     for offset, text, weight in _place(segments, self.fonts, self.size)]
            self.emit(runs)

    def line(self, line: ClassifiedLine):
        params = self.settings.layout

        if line.role == Role.BULLET:
            indent = params.bullet_indent * mm
            glyph = (self.left, BULLET_GLYPH, Weight.REGULAR, None)
            self.mixed(line, self.left + indent, self.width - indent, lead=[glyph])
            self.y -= params.bullet_gap
        elif line.role == Role.LABEL:
            self.mixed(line, self.left, self.width)
        elif line.role == Role.HEADING:
            self.y -= params.heading_gap_before
            self.wrapped(line.text, Weight.BOLD)
            self.y -= params.heading_gap_after
        elif line.role == Role.SIGNATURE:
            self.y -= params.signature_gap
            self.wrapped(line.text, Weight.REGULAR)
        else:
            self.wrapped(line.text, Weight.REGULAR)

    def contact(self):
        """Contact line; each value links to its href"""
        runs = []
        x = self.left
        for item in self.settings.contact:
            runs.append((x, item.label, Weight.REGULAR, None))
            x += stringWidth(item.label, self.fonts.regular, self.size)
            runs.append((x, item.value, Weight.REGULAR, item.href))
            x += stringWidth(item.value, self.fonts.regular, self.size)
        if runs:
            self.emit(runs)


def layout_letter(paragraphs: Sequence[Sequence[ClassifiedLine]], size: float,
                  settings: LetterSettings) -> LayoutResult:
    """Lay out all paragraphs and the contact line at one font size

    On overflow the trace stops at the first line that would start below the
    bottom margin; the instructions gathered up to that point are kept.
    """
    trace = _Trace(settings, size)
    fits = True
    try:
        for paragraph in paragraphs:
            if not paragraph:
                trace.y -= trace.step
            for line in paragraph:
                trace.line(line)
            trace.y -= settings.layout.paragraph_gap
        trace.contact()
    except _Overflow:
        fits = False

    return LayoutResult(font_size=size, fits=fits,
                        instructions=tuple(trace.instructions), end_y=trace.y)


def fit_font_size(paragraphs: Sequence[Sequence[ClassifiedLine]], settings: LetterSettings) -> FitResult:
    """Pick the largest candidate size at which the whole letter fits"""
    result = None
    for size in settings.layout.candidate_font_sizes:
        result = layout_letter(paragraphs, size, settings)
        if result.fits:
            logger.debug("Letter fits at %.1f pt", size)
            return FitResult(chosen_font_size=size, fits=True, layout=result)

    logger.warning("Letter does not fit at %.1f pt; truncating at the bottom margin",
                   result.font_size)
    return FitResult(chosen_font_size=result.font_size, fits=False, layout=result)
