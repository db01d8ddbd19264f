"""
utils/phone_utils.py

Purpose: Phone number helpers

- Normalizes free-form numbers to E.164
- Derives the area code shown next to names in lists
- National format for telling one contact's numbers apart
"""

from typing import Optional

import phonenumbers
from phonenumbers import NumberParseException

from app.core.logging import get_logger

logger = get_logger(__name__)


def normalize_phone_number(phone: str, default_region: str = "US") -> Optional[str]:
    """
    Normalizes a phone number to E.164 format.

    Numbers only need to be *possible*, not assigned, so fictional
    numbers (e.g. 555 exchanges) are accepted.

    Args:
        phone: Number as typed or as found in a vCard
        default_region: Region used when the number has no country code

    Returns:
        E.164 string, or None if the number cannot be parsed
    """
    if not phone or not phone.strip():
        return None

    try:
        parsed = phonenumbers.parse(phone, default_region)
    except NumberParseException as e:
        logger.warning(f"Could not parse phone number '{phone}': {e}")
        return None

    if not phonenumbers.is_possible_number(parsed):
        logger.warning(f"Impossible phone number: {phone}")
        return None

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def area_code(number: str) -> str:
    """
    Returns the area code of an E.164 number.

    Uses the geographic area code when the number has one, otherwise the
    first three digits of the national number. Anything that does not
    parse is returned unchanged.
    """
    try:
        parsed = phonenumbers.parse(number, None)
    except NumberParseException:
        return number

    national = phonenumbers.national_significant_number(parsed)
    length = phonenumbers.length_of_geographical_area_code(parsed)
    if length <= 0:
        length = 3
    return national[:length]


def format_contact(name: str, number: str) -> str:
    """
    Display form used in every list: "Alice Jones (206)".
    """
    return f"{name} ({area_code(number)})"


def format_national(number: str) -> str:
    """
    National display form, "(206) 555-0100" for US numbers, used where
    two numbers of one contact must be told apart.
    """
    try:
        parsed = phonenumbers.parse(number, None)
    except NumberParseException:
        return number

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.NATIONAL)
