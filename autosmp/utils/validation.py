"""Input validation utilities."""

import re
from typing import Any


class ValidationError(Exception):
    """Validation error."""
    pass


_UNSIGNED_PATTERN = re.compile(r'^\+?\d+$')

_TRUE_WORDS = ("1", "y", "yes", "on", "true")
_FALSE_WORDS = ("0", "n", "no", "off", "false")


def parse_unsigned(text: Any) -> int:
    """Parse a single unsigned integer from a textual setting value."""
    if isinstance(text, bool):
        raise ValidationError(f"Expected an unsigned integer, got {text!r}")
    if isinstance(text, int):
        if text < 0:
            raise ValidationError(f"Expected an unsigned integer, got {text}")
        return text

    value = str(text).strip()
    if not _UNSIGNED_PATTERN.match(value):
        raise ValidationError(f"Expected an unsigned integer, got {text!r}")
    return int(value)


def parse_bool(text: Any) -> bool:
    """Parse a boolean setting value (1/0, y/n, yes/no, on/off, true/false)."""
    if isinstance(text, bool):
        return text

    value = str(text).strip().lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ValidationError(f"Expected a boolean, got {text!r}")
