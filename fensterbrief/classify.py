"""
Structural classification of letter body lines

Each trimmed line is tagged with a role that decides its font weight,
indentation and surrounding space. The role depends only on the line's text.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .config import LetterSettings, Markers


class Role(str, Enum):
    HEADING = "heading"
    BULLET = "bullet"
    LABEL = "label"
    SIGNATURE = "signature"
    PLAIN = "plain"


class ClassifiedLine(BaseModel):
    """A body line with its role; title is the bold lead of bullets and labels"""
    model_config = ConfigDict(frozen=True)

    text: str
    role: Role
    paragraph: int
    title: str = ""
    body: str = ""


def _split_at_colon(text: str) -> Tuple[str, str]:
    """Split into a title up to and including the first colon and the rest"""
    head, sep, tail = text.partition(":")
    if not sep:
        return text, ""
    return head + sep, tail.strip()


def classify_line(line: str, markers: Markers, paragraph: int = 0) -> ClassifiedLine:
    """Tag one line; rules are checked in priority order"""
    text = line.strip()

    if text.startswith(markers.bullet):
        remainder = text[len(markers.bullet):].strip()
        title, body = _split_at_colon(remainder)
        return ClassifiedLine(text=remainder, role=Role.BULLET, paragraph=paragraph,
                              title=title, body=body)

    for prefix in markers.label_prefixes:
        if text.startswith(prefix):
            title, body = _split_at_colon(text)
            return ClassifiedLine(text=text, role=Role.LABEL, paragraph=paragraph,
                                  title=title, body=body)

    if text in markers.headings:
        return ClassifiedLine(text=text, role=Role.HEADING, paragraph=paragraph)

    if text == markers.signature_name:
        return ClassifiedLine(text=text, role=Role.SIGNATURE, paragraph=paragraph)

    return ClassifiedLine(text=text, role=Role.PLAIN, paragraph=paragraph)


def classify_text(text: str, markers: Markers, first_paragraph: int = 0) -> List[List[ClassifiedLine]]:
    """Classify a body text, grouped by blank-line separated paragraphs

    A paragraph without any non-empty line comes back as an empty list; the
    layout still advances the cursor for it.
    """
    paragraphs = []
    for offset, block in enumerate(text.replace('\r\n', '\n').split('\n\n')):
        index = first_paragraph + offset
        paragraphs.append([
            classify_line(line, markers, index)
            for line in block.split('\n')
            if line.strip()
        ])
    return paragraphs


def letter_paragraphs(body_text: Optional[str], settings: LetterSettings,
                      subject: Optional[str] = None) -> List[List[ClassifiedLine]]:
    """Assemble subject, salutation and body into classified paragraphs"""
    markers = settings.markers
    paragraphs = []
    if subject:
        paragraphs.append([classify_line(f"Betreff: {subject}", markers, len(paragraphs))])
    if settings.salutation:
        paragraphs.append([classify_line(settings.salutation, markers, len(paragraphs))])

    body = body_text if body_text is not None else settings.default_body
    paragraphs.extend(classify_text(body, markers, len(paragraphs)))
    return paragraphs
