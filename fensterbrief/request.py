"""
Request parsing and the window address block

Field aliases are resolved here, once, into a canonical LetterRequest; the
layout code never sees the alternative spellings.
"""

import json
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from .config import AddressFieldSpec

ADDRESS_ALIASES = ("adresse", "address", "Adresse")
LOCALITY_ALIASES = ("plz/ort", "PLZ/Ort", "plzOrt", "plz_ort", "plzort")
TEXT_ALIASES = ("text", "body")
SUBJECT_ALIASES = ("betreff",)


class LetterRequest(BaseModel):
    """Recipient lines plus optional body text and subject"""
    model_config = ConfigDict(frozen=True)

    address: str = ""
    locality: str = ""
    body_text: Optional[str] = None
    subject: Optional[str] = None


def parse_body(raw: Union[bytes, str, None]) -> Dict[str, Any]:
    """Decode a JSON object, also when it arrives JSON-encoded as a string

    Anything that is not a JSON object yields an empty dict.
    """
    data: Any = raw
    # Two rounds: the payload may be a JSON string that itself holds JSON
    for _ in range(2):
        if isinstance(data, (bytes, bytearray)):
            data = data.decode('utf-8', errors='replace')
        if not isinstance(data, str):
            break
        try:
            data = json.loads(data)
        except ValueError:
            return {}
    return data if isinstance(data, dict) else {}


def _first(payload: Dict[str, Any], aliases: Sequence[str]) -> Optional[str]:
    for key in aliases:
        value = payload.get(key)
        if value is not None:
            return str(value)
    return None


def request_from_payload(payload: Dict[str, Any]) -> LetterRequest:
    """Build a LetterRequest from a decoded body, honouring all field aliases"""
    text = _first(payload, TEXT_ALIASES)
    subject = _first(payload, SUBJECT_ALIASES)
    return LetterRequest(
        address=(_first(payload, ADDRESS_ALIASES) or "").strip(),
        locality=(_first(payload, LOCALITY_ALIASES) or "").strip(),
        body_text=text if text and text.strip() else None,
        subject=subject.strip() if subject and subject.strip() else None,
    )


def address_block(request: LetterRequest, field: AddressFieldSpec) -> str:
    """Text of the window field: blank lines, heading, street line, locality line"""
    lines = [""] * field.leading_blank_lines
    lines.append(field.heading)
    lines.append(request.address.strip() or field.default_address)
    lines.append(request.locality.strip() or field.default_locality)
    return "\n".join(lines)
