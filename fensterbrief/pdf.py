"""
PDF rendering for window letters

The builder does no layout of its own: it replays the instructions chosen by
the fit controller and adds the window address field and the optional logo.
"""

import logging
from io import BytesIO
from typing import Optional

from PIL import Image
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .assets import LogoProvider, NoLogo
from .classify import letter_paragraphs
from .config import LetterSettings
from .layout import DrawInstruction, FitResult, fit_font_size, font_for
from .request import LetterRequest, address_block

logger = logging.getLogger(__name__)

# Leading of the reportlab multiline text field
FIELD_LEADING = 1.2


class LetterPDFBuilder:
    """Renders one letter onto a single A4 page"""

    def __init__(self, settings: LetterSettings, logo: Optional[bytes] = None):
        self.settings = settings
        self.logo = logo
        self.buffer = BytesIO()
        self.canvas = None
        self.fit: Optional[FitResult] = None

    def generate(self, request: LetterRequest) -> bytes:
        """Generate the PDF letter"""
        paragraphs = letter_paragraphs(request.body_text, self.settings, request.subject)
        self.fit = fit_font_size(paragraphs, self.settings)

        page = self.settings.page
        # invariant: no creation date or random document id, so output is reproducible
        self.canvas = canvas.Canvas(self.buffer, pagesize=(page.width, page.height), invariant=1)
        self._set_document_properties(request)

        self._draw_logo()
        self._draw_address_field(request)
        for instruction in self.fit.layout.instructions:
            self._draw_instruction(instruction)

        self.canvas.showPage()
        self.canvas.save()
        pdf = self.buffer.getvalue()
        self.buffer.close()
        return pdf

    def _set_document_properties(self, request: LetterRequest):
        self.canvas.setTitle(self.settings.title)
        self.canvas.setAuthor(self.settings.author)
        self.canvas.setSubject(request.subject or self.settings.title)

    def _draw_logo(self):
        """Draw the logo top-right, keeping its aspect ratio inside the box"""
        if not self.logo:
            return
        try:
            img = Image.open(BytesIO(self.logo))
            img.load()
        except (OSError, Image.DecompressionBombError) as e:
            logger.warning("Could not decode logo image: %s", e)
            return

        spec = self.settings.logo
        width = spec.width * mm
        height = spec.height * mm
        x = self.settings.page.width - spec.right * mm - width
        y = self.settings.page.height - spec.top * mm - height
        self.canvas.drawImage(ImageReader(img), x, y, width=width, height=height,
                              preserveAspectRatio=True, anchor='ne', mask='auto')

    def _draw_address_field(self, request: LetterRequest):
        """Editable multiline field covering exactly the envelope window"""
        field = self.settings.address_field
        window = self.settings.window
        size = field.font_size or self.fit.chosen_font_size
        value = address_block(request, field)

        width = window.width * mm
        height = window.height * mm
        x = window.left * mm
        y = self.settings.page.height - window.top * mm - height

        needed = len(value.split("\n")) * size * FIELD_LEADING
        if needed > height:
            logger.warning("Address block needs %.1f pt but the window is %.1f pt high",
                           needed, height)

        self.canvas.acroForm.textfield(
            name=field.name,
            value=value,
            x=x, y=y, width=width, height=height,
            fontName=self.settings.fonts.field,
            fontSize=size,
            borderWidth=0,
            borderColor=colors.white,
            fillColor=colors.white,
            textColor=colors.black,
            fieldFlags='multiline',
            forceBorder=False,
            maxlen=max(100, len(value)),
        )

    def _draw_instruction(self, instruction: DrawInstruction):
        font = font_for(self.settings.fonts, instruction.weight)
        self.canvas.setFillColor(colors.black)
        self.canvas.setFont(font, instruction.font_size)
        self.canvas.drawString(instruction.x, instruction.y, instruction.text)

        if instruction.link:
            ascent, descent = pdfmetrics.getAscentDescent(font, instruction.font_size)
            width = stringWidth(instruction.text, font, instruction.font_size)
            rect = (instruction.x, instruction.y + descent,
                    instruction.x + width, instruction.y + ascent)
            self.canvas.linkURL(instruction.link, rect, relative=0, thickness=0)


def build_letter_pdf(request: LetterRequest, settings: LetterSettings,
                     logo_provider: Optional[LogoProvider] = None) -> bytes:
    """Fetch the logo (if any) and render the letter for one request"""
    logo = (logo_provider or NoLogo()).fetch()
    return LetterPDFBuilder(settings, logo=logo).generate(request)
