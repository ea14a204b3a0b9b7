"""Real-time field orchestration for formrules.

Usage:
    from formrules.orchestrator import FieldOrchestrator, FormHooks

    orchestrator = FieldOrchestrator(validator, hooks=FormHooks(on_form_valid=save))
    orchestrator.discover(source)
"""

from formrules.orchestrator.memory import InMemoryField, InMemoryForm
from formrules.orchestrator.service import FieldOrchestrator
from formrules.orchestrator.types import (
    AttributeTranslator,
    FieldEvent,
    FieldHandle,
    FieldState,
    FieldStatus,
    FormHooks,
    InputKind,
    InputSource,
    NoRulesTranslator,
    ValidationState,
)

__all__ = [
    "AttributeTranslator",
    "FieldEvent",
    "FieldHandle",
    "FieldOrchestrator",
    "FieldState",
    "FieldStatus",
    "FormHooks",
    "InMemoryField",
    "InMemoryForm",
    "InputKind",
    "InputSource",
    "NoRulesTranslator",
    "ValidationState",
]
