"""
Letter configuration for DL/C6 window envelopes

All settings are immutable pydantic models. Geometry that relates to the
paper (window, margins, indents, logo box) is given in millimetres, typographic
spacing (gaps between lines and blocks) in points.
"""

import json
import os
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from reportlab.lib.pagesizes import A4


CONFIG_ENV = "FENSTERBRIEF_CONFIG"
LOGO_URL_ENV = "FENSTERBRIEF_LOGO_URL"


DEFAULT_BODY = """herzlichen Glückwunsch zum Auktionszuschlag!

Wir sind Wisehomes.at, ein Full-Service-Bauträger aus Wien mit Schwerpunkt auf Ziegelmassivbau von Einfamilien- und Doppelhäusern in Wien, Niederösterreich und Burgenland. Wir scouten regelmäßig vielversprechende Projekte auf öffentlichen Auktions- und Amtsportalen. Dabei ist uns diese Liegenschaft besonders positiv aufgefallen. Da sie fachlich hervorragend zu uns passt, haben wir uns entschieden, Sie direkt zu kontaktieren – in der Überzeugung, dass hier beste Voraussetzungen für eine erfolgreiche Zusammenarbeit bestehen.

Was wir für Sie unkompliziert aus einer Hand übernehmen:
• Planung & Design: Bestandsaufnahme, Bauordnungs- bzw. Bebauungsplan-Check, Variantenstudien und Visualisierungen bis zur Einreichplanung.
Ergebnis: ein stimmiges Konzept, das technisch machbar, wirtschaftlich sinnvoll und behördlich genehmigungsfähig ist.
• Bau & Übergabe: Koordination aller Gewerke, verlässliche Zeit- und Kostensteuerung, Qualitätssicherung auf der Baustelle, saubere Abnahmen und die schlüsselfertige Übergabe.
Ergebnis: Sie haben nur einen Ansprechpartner, wir kümmern uns um den Rest.
• Finanzierung & Betreuung: Transparente Kostenstruktur, Zahlungsplan je Baufortschritt, auf Wunsch Kontakt zu Finanzierungs- und Förderstellen sowie Begleitung nach der Übergabe.
Ergebnis: Planungssicherheit statt Überraschungen.

Unser Vorschlag: Lassen Sie uns ein kurzes, kostenloses Erstgespräch (vor Ort oder online) ansetzen. Danach haben Sie eine klare Basis, um zu entscheiden, wie Sie mit dieser Liegenschaft weitergehen möchten.

Wenn das für Sie interessant klingt, teilen Sie uns einfach kurz Ihre Wunschzeiten mit – wir richten uns gerne nach Ihrem Kalender. Sie können uns jederzeit direkt per Mail oder telefonisch erreichen.

Mit besten Grüßen
Eldi Neziri
Projektberater Wohnbau"""


# ============================================================================
# CONFIGURATION MODELS (Pydantic)
# ============================================================================

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PageSpec(_Frozen):
    """Page size in points (A4 portrait by default)"""
    width: float = A4[0]
    height: float = A4[1]


class Fonts(_Frozen):
    """Standard PDF font names used for body text and the address field"""
    regular: str = "Times-Roman"
    bold: str = "Times-Bold"
    field: str = "Helvetica"


class WindowSpec(_Frozen):
    """Envelope window in mm, measured from the top-left corner of the page"""
    left: float = Field(default=20.0, ge=0)
    top: float = Field(default=45.0, ge=0)
    width: float = Field(default=90.0, gt=0)
    height: float = Field(default=45.0, gt=0)


class LayoutParams(_Frozen):
    """Body layout: margins and indents in mm, gaps in points"""
    left_margin: float = 25.0
    right_margin: float = 20.0
    top_offset_below_window: float = 12.0
    start_higher: float = 0.0
    bottom_margin: float = 15.0
    bullet_indent: float = 5.0
    line_gap: float = 4.0
    paragraph_gap: float = 6.0
    bullet_gap: float = 2.0
    signature_gap: float = 28.0
    heading_gap_before: float = 4.0
    heading_gap_after: float = 2.0
    candidate_font_sizes: Tuple[float, ...] = (12.0, 11.5, 11.0, 10.5, 10.0, 9.5, 9.0)

    @field_validator('candidate_font_sizes')
    @classmethod
    def validate_sizes(cls, v):
        if not v:
            raise ValueError("At least one candidate font size is required")
        if any(size <= 0 for size in v):
            raise ValueError("Font sizes must be positive")
        if any(a <= b for a, b in zip(v, v[1:])):
            raise ValueError("Candidate font sizes must be strictly descending")
        return v


class AddressFieldSpec(_Frozen):
    """Editable recipient field placed inside the envelope window"""
    name: str = "anschrift"
    heading: str = "An die neuen Eigentümer"
    leading_blank_lines: int = Field(default=1, ge=0)
    default_address: str = "Bahnstraße 17"
    default_locality: str = "2404 Petronell"
    # None: follow the body size chosen by the fit controller
    font_size: Optional[float] = Field(default=None, gt=0)


class Markers(_Frozen):
    """Fixed strings that give body lines their structural role"""
    bullet: str = "• "
    label_prefixes: Tuple[str, ...] = ("Ergebnis:", "Betreff:", "Unser Vorschlag:")
    headings: Tuple[str, ...] = (
        "herzlichen Glückwunsch zum Auktionszuschlag!",
        "Was wir für Sie unkompliziert aus einer Hand übernehmen:",
    )
    signature_name: str = "Eldi Neziri"


class ContactItem(_Frozen):
    """One segment of the contact line; the value is rendered as a link"""
    label: str
    value: str
    href: str


class LogoSpec(_Frozen):
    """Optional logo in the top-right corner, box given in mm"""
    url: Optional[str] = None
    timeout: float = Field(default=3.0, gt=0)
    right: float = 20.0
    top: float = 12.0
    width: float = 45.0
    height: float = 20.0


class LetterSettings(_Frozen):
    """Complete letter configuration"""
    page: PageSpec = PageSpec()
    fonts: Fonts = Fonts()
    window: WindowSpec = WindowSpec()
    layout: LayoutParams = LayoutParams()
    address_field: AddressFieldSpec = AddressFieldSpec()
    markers: Markers = Markers()
    logo: LogoSpec = LogoSpec()
    salutation: str = "Sehr geehrte Damen und Herren,"
    default_body: str = DEFAULT_BODY
    contact: Tuple[ContactItem, ...] = (
        ContactItem(label="T: ", value="+43 1 774 20 32", href="tel:+4317742032"),
        ContactItem(label=" · E: ", value="info@wisehomes.at", href="mailto:info@wisehomes.at"),
        ContactItem(label=" · W: ", value="wisehomes.at", href="https://wisehomes.at"),
    )
    file_name: str = "wisehomes_brief.pdf"
    author: str = "Wisehomes.at"
    title: str = "Brief an die neuen Eigentümer"


def load_settings(path: Optional[str] = None) -> LetterSettings:
    """Load settings from a JSON file, falling back to the compiled-in defaults"""
    path = path or os.environ.get(CONFIG_ENV)
    config_dict = {}
    if path:
        with open(path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)

    logo_url = os.environ.get(LOGO_URL_ENV)
    if logo_url:
        config_dict["logo"] = {**(config_dict.get("logo") or {}), "url": logo_url}

    return LetterSettings(**config_dict)
