"""Built-in validation rules for formrules.

This module registers the default rule vocabulary with a RuleRegistry.
Every rule except ``required`` treats an absent or blank value as valid,
leaving "must have a value" entirely to ``required``.

Rules:
- Presence: required
- Length: minLength, maxLength
- Format: email, phone, pattern, url, date
- Numeric: number, min, max, age
- Credentials: password, confirmPassword
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any
from urllib.parse import urlsplit

from formrules.registry import RuleRegistry
from formrules.values import as_text, is_blank, parse_leading_int, parse_number


# =============================================================================
# Format Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PHONE_PATTERN = re.compile(r"^[+]?[1-9][0-9]{0,15}$")

# Spaces, dashes and parentheses are formatting only
PHONE_SEPARATORS = re.compile(r"[\s\-()]")

PASSWORD_SYMBOLS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

URL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")

DEFAULT_PASSWORD_MIN_LENGTH = 8
DEFAULT_MIN_AGE = 0
DEFAULT_MAX_AGE = 120


# =============================================================================
# Default Messages
# =============================================================================

DEFAULT_MESSAGES: dict[str, str] = {
    "required": "This field is required",
    "minLength": "Must be at least {length} characters long",
    "maxLength": "Must be no more than {length} characters long",
    "email": "Please enter a valid email address",
    "phone": "Please enter a valid phone number",
    "number": "Please enter a valid number",
    "min": "Value must be at least {value}",
    "max": "Value must be no more than {value}",
    "pattern": "Please match the required format",
    "password": (
        "Password must contain uppercase, lowercase, numbers, special characters, "
        "and be at least 8 characters long"
    ),
    "confirmPassword": "Passwords do not match",
    "age": "Please enter a valid age between {min} and {max}",
    "date": "Please enter a valid date",
    "url": "Please enter a valid URL",
}


def register_builtin_rules(registry: RuleRegistry) -> None:
    """Register all built-in rules with the given registry."""
    registry.register("required", _required, DEFAULT_MESSAGES["required"])
    registry.register("minLength", _min_length, DEFAULT_MESSAGES["minLength"])
    registry.register("maxLength", _max_length, DEFAULT_MESSAGES["maxLength"])
    registry.register("email", _email, DEFAULT_MESSAGES["email"])
    registry.register("phone", _phone, DEFAULT_MESSAGES["phone"])
    registry.register("number", _number, DEFAULT_MESSAGES["number"])
    registry.register("min", _min, DEFAULT_MESSAGES["min"])
    registry.register("max", _max, DEFAULT_MESSAGES["max"])
    registry.register("pattern", _pattern, DEFAULT_MESSAGES["pattern"])
    registry.register("password", _password, DEFAULT_MESSAGES["password"])
    registry.register("confirmPassword", _confirm_password, DEFAULT_MESSAGES["confirmPassword"])
    registry.register("age", _age, DEFAULT_MESSAGES["age"])
    registry.register("date", _date, DEFAULT_MESSAGES["date"])
    registry.register("url", _url, DEFAULT_MESSAGES["url"])


# -----------------------------------------------------------------------------
# Presence and Length
# -----------------------------------------------------------------------------


def _required(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    """Valid iff the value is present and its trimmed text is non-empty."""
    if value is None:
        return False
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return as_text(value).strip() != ""


def _min_length(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return len(as_text(value)) >= int(params["length"])


def _max_length(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return len(as_text(value)) <= int(params["length"])


# -----------------------------------------------------------------------------
# Format
# -----------------------------------------------------------------------------


def _email(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return EMAIL_PATTERN.match(as_text(value)) is not None


def _phone(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    digits = PHONE_SEPARATORS.sub("", as_text(value))
    return PHONE_PATTERN.match(digits) is not None


def _pattern(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return re.search(params["pattern"], as_text(value)) is not None


def _date(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return parse_date(value) is not None


def _url(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    text = as_text(value).strip()
    if any(ch.isspace() for ch in text):
        return False
    try:
        parts = urlsplit(text)
        # Accessing port validates it
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not URL_SCHEME_PATTERN.match(parts.scheme):
        return False
    return bool(parts.netloc or parts.path)


def parse_date(value: Any) -> date | None:
    """Parse a calendar date from a date, datetime or ISO-8601 string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = as_text(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


# -----------------------------------------------------------------------------
# Numeric
# -----------------------------------------------------------------------------


def _number(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return parse_number(value) is not None


def _min(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    number = parse_number(value)
    return number is not None and number >= float(params["value"])


def _max(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    number = parse_number(value)
    return number is not None and number <= float(params["value"])


def _age(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    age = parse_leading_int(value)
    if age is None:
        return False
    min_age = params.get("min") or DEFAULT_MIN_AGE
    max_age = params.get("max") or DEFAULT_MAX_AGE
    return float(min_age) <= age <= float(max_age)


# -----------------------------------------------------------------------------
# Credentials
# -----------------------------------------------------------------------------


def _password(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    text = as_text(value)
    min_length = params.get("minLength") or DEFAULT_PASSWORD_MIN_LENGTH
    return (
        re.search(r"[A-Z]", text) is not None
        and re.search(r"[a-z]", text) is not None
        and re.search(r"\d", text) is not None
        and PASSWORD_SYMBOLS.search(text) is not None
        and len(text) >= int(min_length)
    )


def _confirm_password(
    value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]
) -> bool:
    """Valid iff the value equals the value of params["matchField"] in the form."""
    if is_blank(value):
        return True
    return value == form_data.get(params["matchField"])
