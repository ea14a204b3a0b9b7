"""Rule vocabularies for formrules.

The built-in rules are registered on every new FormValidator by default;
the extended business rules are opt-in.
"""

from formrules.rules.builtins import DEFAULT_MESSAGES, register_builtin_rules
from formrules.rules.extended import EXTENDED_MESSAGES, register_extended_rules

__all__ = [
    "DEFAULT_MESSAGES",
    "EXTENDED_MESSAGES",
    "register_builtin_rules",
    "register_extended_rules",
]
