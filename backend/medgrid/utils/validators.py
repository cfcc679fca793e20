"""
Validation helpers.
"""
import re
from datetime import date
from typing import Iterable, List, Optional


PHONE_PATTERN = re.compile(r'^\+?[\d\s\-()]{6,30}$')


def is_blank(value) -> bool:
    """True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(data: dict, required: Iterable[str]) -> List[str]:
    """
    Returns the required fields that are absent or blank.

    Args:
        data: Field name -> value
        required: Names that must be present and non-empty

    Returns:
        Missing field names, in the order given
    """
    return [name for name in required if is_blank(data.get(name))]


def is_valid_phone(number: Optional[str]) -> bool:
    """
    Loose phone number check: digits with optional +, spaces, dashes and
    parentheses.
    """
    if is_blank(number):
        return False
    return bool(PHONE_PATTERN.match(number.strip()))


def is_valid_birth_date(value: Optional[date], today: Optional[date] = None) -> bool:
    """A date of birth cannot be in the future."""
    if value is None:
        return False
    return value <= (today or date.today())
