"""
utils/vcard_utils.py

Purpose: vCard parsing

- Reads one or more vCards from an attachment
- Extracts the display name and phone numbers with their type labels
- Normalizes numbers to E.164, dropping ones that cannot be parsed
"""

from dataclasses import dataclass, field
from typing import List, Optional

import vobject

from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from utils.phone_utils import normalize_phone_number
from utils.constants import VCARD_UNREADABLE_MESSAGE

logger = get_logger(__name__)

VCARD_CONTENT_TYPES = ("text/vcard", "text/x-vcard")

# Type labels that say nothing useful to the user
IGNORED_PHONE_TYPES = {"voice", "pref", "internet"}


@dataclass
class VCardPhone:
    number: str
    description: Optional[str] = None


@dataclass
class VCardRecord:
    name: str
    phones: List[VCardPhone] = field(default_factory=list)


def is_vcard_content_type(content_type: Optional[str]) -> bool:
    """
    Checks a MIME type, ignoring parameters like "; charset=utf-8".
    """
    if not content_type:
        return False
    return content_type.split(";")[0].strip().lower() in VCARD_CONTENT_TYPES


def _display_name(card) -> Optional[str]:
    fn = card.contents.get("fn")
    if fn and str(fn[0].value).strip():
        return str(fn[0].value).strip()

    n = card.contents.get("n")
    if n:
        value = n[0].value
        parts = [getattr(value, "given", ""), getattr(value, "additional", ""), getattr(value, "family", "")]
        name = " ".join(
            " ".join(part) if isinstance(part, list) else str(part)
            for part in parts
            if part
        ).strip()
        if name:
            return name

    return None


def _phone_description(tel) -> Optional[str]:
    labels = []
    for label in list(tel.params.get("TYPE", [])) + list(getattr(tel, "singletonparams", [])):
        for piece in str(label).split(","):
            piece = piece.strip().lower()
            if piece and piece not in IGNORED_PHONE_TYPES and piece not in labels:
                labels.append(piece)

    return ", ".join(labels) or None


def parse_vcards(data: str, default_region: str = "US") -> List[VCardRecord]:
    """
    Parses vCard text into records, keeping the order of cards and of
    phone numbers within each card.

    Args:
        data: Raw attachment text (may hold several cards)
        default_region: Region for numbers without a country code

    Returns:
        List of VCardRecord. Cards without a name are skipped; cards with
        no usable numbers come back with an empty phone list.

    Raises:
        ValidationError: If the text is not a readable vCard, or a card
            carries data vobject cannot decode
    """
    records = []

    try:
        for card in vobject.readComponents(data):
            if card.name != "VCARD":
                logger.debug(f"Skipping non-vCard component: {card.name}")
                continue

            name = _display_name(card)
            if not name:
                logger.warning("Skipping vCard without a name")
                continue

            record = VCardRecord(name=name)
            seen = set()
            for tel in card.contents.get("tel", []):
                number = normalize_phone_number(str(tel.value), default_region)
                if not number or number in seen:
                    continue
                seen.add(number)
                record.phones.append(VCardPhone(number=number, description=_phone_description(tel)))

            records.append(record)

    except (vobject.base.VObjectError, ValueError) as e:
        # ValueError covers bad embedded data, e.g. binascii.Error from a corrupt PHOTO
        logger.warning(f"Failed to parse vCard content: {e}")
        raise ValidationError(VCARD_UNREADABLE_MESSAGE) from e

    return records
