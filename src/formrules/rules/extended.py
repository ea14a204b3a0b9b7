"""Extended business rules for formrules.

These rules are not part of the default vocabulary. Register them on a
validator's registry when a form needs them:

    validator = FormValidator()
    register_extended_rules(validator.registry)

Available rules:
- sku: 3 letters followed by 3-6 digits
- price: positive amount with at most 2 decimals
- discount: percentage between 0 and 100
- inventory: whole quantity between 0 and 999999
- category: one of params["categories"]
- dateRange: date between params["after"] and params["before"]
- yearRange: year between params["min"] (1800) and params["max"] (current year)
- minSelected: at least params["min"] selections, optionally from another field
- taxId: 8-15 digit tax identification number
- companyCode: 2-3 letters followed by 3-7 digits
- cpf: Brazilian CPF with valid check digits
- creditCard: card number passing the Luhn checksum
"""

import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from formrules.registry import RuleRegistry
from formrules.rules.builtins import parse_date
from formrules.values import as_text, is_blank, parse_leading_int, parse_number

SKU_PATTERN = re.compile(r"^[A-Z]{3}\d{3,6}$")
PRICE_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")
COMPANY_CODE_PATTERN = re.compile(r"^[A-Z]{2,3}\d{3,7}$")
TAX_ID_PATTERN = re.compile(r"^\d{8,15}$")
NON_DIGITS = re.compile(r"\D")

MAX_PRICE = 999999999.99
MAX_INVENTORY = 999999
MIN_YEAR = 1800

EXTENDED_MESSAGES: dict[str, str] = {
    "sku": "SKU must be 3 letters followed by 3-6 digits (e.g., ABC123)",
    "price": "Please enter a valid price (at most 2 decimals)",
    "discount": "Discount must be between 0% and 100%",
    "inventory": "Please enter a valid quantity (whole number between 0 and 999,999)",
    "category": "Please select a valid category",
    "dateRange": "The date must be within the allowed range",
    "yearRange": "Please enter a valid year between {min} and {max}",
    "minSelected": "Please select at least {min} option(s)",
    "taxId": "Please enter a valid tax identification number",
    "companyCode": "Format: 2-3 letters followed by 3-7 digits (e.g., EMP001)",
    "cpf": "Please enter a valid CPF number",
    "creditCard": "Please enter a valid credit card number",
}


def register_extended_rules(registry: RuleRegistry) -> None:
    """Register the extended business rules with the given registry."""
    registry.register("sku", _sku, EXTENDED_MESSAGES["sku"])
    registry.register("price", _price, EXTENDED_MESSAGES["price"])
    registry.register("discount", _discount, EXTENDED_MESSAGES["discount"])
    registry.register("inventory", _inventory, EXTENDED_MESSAGES["inventory"])
    registry.register("category", _category, EXTENDED_MESSAGES["category"])
    registry.register("dateRange", _date_range, EXTENDED_MESSAGES["dateRange"])
    registry.register("yearRange", _year_range, EXTENDED_MESSAGES["yearRange"])
    registry.register("minSelected", _min_selected, EXTENDED_MESSAGES["minSelected"])
    registry.register("taxId", _tax_id, EXTENDED_MESSAGES["taxId"])
    registry.register("companyCode", _company_code, EXTENDED_MESSAGES["companyCode"])
    registry.register("cpf", _cpf, EXTENDED_MESSAGES["cpf"])
    registry.register("creditCard", _credit_card, EXTENDED_MESSAGES["creditCard"])


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------


def _sku(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return SKU_PATTERN.match(as_text(value).strip().upper()) is not None


def _price(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    text = as_text(value).strip()
    price = parse_number(text)
    if price is None or not PRICE_PATTERN.match(text):
        return False
    return 0 < price <= MAX_PRICE


def _discount(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    discount = parse_number(value)
    return discount is not None and 0 <= discount <= 100


def _inventory(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    quantity = parse_leading_int(value)
    return quantity is not None and 0 <= quantity <= MAX_INVENTORY


def _category(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return value in (params.get("categories") or [])


# -----------------------------------------------------------------------------
# Dates
# -----------------------------------------------------------------------------


def _date_range(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    current = parse_date(value)
    if current is None:
        return False

    after = parse_date(params["after"]) if params.get("after") else None
    before = parse_date(params["before"]) if params.get("before") else None

    if after is not None and current < after:
        return False
    if before is not None and current > before:
        return False
    return True


def _year_range(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    year = parse_leading_int(value)
    if year is None:
        return False
    min_year = params.get("min") or MIN_YEAR
    max_year = params.get("max") or date.today().year
    return int(min_year) <= year <= int(max_year)


# -----------------------------------------------------------------------------
# Selections
# -----------------------------------------------------------------------------


def _min_selected(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    """Count selections in this field, or in params["group"] when given."""
    selections = form_data.get(params["group"]) if params.get("group") else value
    minimum = int(params.get("min") or 1)

    if isinstance(selections, (list, tuple, set)):
        count = sum(1 for s in selections if s is not None and s is not False)
    elif selections is True:
        count = 1
    elif is_blank(selections) or selections is False:
        count = 0
    else:
        count = 1
    return count >= minimum


# -----------------------------------------------------------------------------
# Identifiers
# -----------------------------------------------------------------------------


def _tax_id(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    digits = NON_DIGITS.sub("", as_text(value))
    return TAX_ID_PATTERN.match(digits) is not None


def _company_code(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    return COMPANY_CODE_PATTERN.match(as_text(value).strip().upper()) is not None


def _cpf(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    digits = NON_DIGITS.sub("", as_text(value))
    if len(digits) != 11:
        return False
    # Repeated sequences (000.000.000-00, 111...) pass the checksum but are invalid
    if digits == digits[0] * 11:
        return False

    numbers = [int(d) for d in digits]
    for position in (9, 10):
        total = sum(numbers[i] * (position + 1 - i) for i in range(position))
        check = 11 - (total % 11)
        if check >= 10:
            check = 0
        if check != numbers[position]:
            return False
    return True


def _credit_card(value: Any, params: Mapping[str, Any], form_data: Mapping[str, Any]) -> bool:
    if is_blank(value):
        return True
    number = re.sub(r"[\s-]", "", as_text(value))
    if not re.fullmatch(r"[0-9]+", number):
        return False

    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0
