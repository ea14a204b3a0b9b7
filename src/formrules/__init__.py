"""formrules — rule-based form validation.

This package provides a two-layer validation architecture:
- Engine: a rule registry, per-field rule configuration, message formatting
  and single-field / whole-form evaluation (FormValidator)
- Orchestration: keeps each field's displayed validity in sync with
  input, blur, focus and submit events (FieldOrchestrator)

Usage:
    from formrules import FormValidator

    validator = FormValidator()
    validator.configure_fields({
        "email": {"rules": ["required", "email"]},
        "password": {"rules": ["required", {"name": "password", "params": {"minLength": 10}}]},
    })
    result = validator.validate_form({"email": "a@b.co", "password": "secret"})
"""

from formrules.engine import FormValidator
from formrules.messages import MessageFormatter
from formrules.orchestrator import (
    FieldOrchestrator,
    FieldState,
    FieldStatus,
    FormHooks,
    InMemoryField,
    InMemoryForm,
    InputKind,
    ValidationState,
)
from formrules.registry import RuleRegistry
from formrules.rules import register_builtin_rules, register_extended_rules
from formrules.store import FieldConfigStore
from formrules.types import (
    ConfigurationError,
    FieldConfig,
    FieldValidationResult,
    FormValidationResult,
    Predicate,
    Rule,
    RuleFailure,
    RuleReference,
)

__all__ = [
    # Types
    "ConfigurationError",
    "FieldConfig",
    "FieldValidationResult",
    "FormValidationResult",
    "Predicate",
    "Rule",
    "RuleFailure",
    "RuleReference",
    # Engine
    "FieldConfigStore",
    "FormValidator",
    "MessageFormatter",
    "RuleRegistry",
    # Orchestration
    "FieldOrchestrator",
    "FieldState",
    "FieldStatus",
    "FormHooks",
    "InMemoryField",
    "InMemoryForm",
    "InputKind",
    "ValidationState",
    # Setup
    "register_builtin_rules",
    "register_extended_rules",
]
