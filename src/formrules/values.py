"""Value coercion helpers shared by rules and the message formatter."""

import math
import re
from typing import Any

# Decimal literal: optional sign, digits with optional fraction, optional exponent
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Leading integer, as read by a lenient integer parser ("25 years" -> 25)
LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


def is_blank(value: Any) -> bool:
    """Check if a value is absent for the purposes of value-optional rules."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if isinstance(value, (list, tuple, set, dict)) and len(value) == 0:
        return True
    return False


def as_text(value: Any) -> str:
    """Convert a value to its display text.

    Booleans render as true/false and integral floats drop the fraction,
    so ``5.0`` reads as ``5`` inside messages.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(value: Any) -> float | None:
    """Parse a finite number from a value. Returns None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        text = value.strip()
        if not NUMBER_PATTERN.match(text):
            return None
        number = float(text)
        return number if math.isfinite(number) else None
    return None


def parse_leading_int(value: Any) -> int | None:
    """Parse the leading integer of a value. Returns None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = LEADING_INT_PATTERN.match(str(value))
    if not match:
        return None
    return int(match.group(1))
