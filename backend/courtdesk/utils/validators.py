"""
Custom validators
"""
import re
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

TIME_FORMAT_MESSAGE = "Invalid time format. Use HH:MM"


def validate_hhmm(value: str) -> str:
    """
    Validate a 24h "HH:MM" time string
    Examples: 09:30, 23:59 (not 9:30, 24:00)
    """
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        raise ValueError(TIME_FORMAT_MESSAGE)
    return value


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def find_duplicates(values: list) -> list:
    """Values that occur more than once, in first-seen order."""
    seen = set()
    dupes = []
    for v in values:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    return dupes
