"""
fensterbrief - window letters for DL/C6 envelopes as PDF
"""

from .classify import ClassifiedLine, Role, classify_line, classify_text, letter_paragraphs
from .config import LetterSettings, LayoutParams, WindowSpec, load_settings
from .layout import DrawInstruction, FitResult, LayoutResult, fit_font_size, layout_letter, wrap_text
from .pdf import LetterPDFBuilder, build_letter_pdf
from .request import LetterRequest, address_block, parse_body, request_from_payload

__version__ = "1.0.0"
