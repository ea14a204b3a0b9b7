"""Validation engine for formrules.

The FormValidator ties together the three stores of the engine:
1. RuleRegistry: named predicates and their default message templates
2. FieldConfigStore: ordered rule references per field
3. MessageFormatter: renders default templates with rule params

Validation outcomes are always returned as data. Only structural misuse of
the API (malformed configurations, non-callable predicates) raises.
"""

import inspect
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from formrules.messages import MessageFormatter
from formrules.registry import RuleRegistry
from formrules.rules.builtins import register_builtin_rules
from formrules.store import FieldConfigStore
from formrules.types import (
    FieldConfig,
    FieldValidationResult,
    FormValidationResult,
    Predicate,
    RuleFailure,
    RuleReference,
)

logger = logging.getLogger(__name__)


class FormValidator:
    """Evaluates field configurations against candidate values.

    Each validator owns its registry and configuration store, so independent
    forms never see each other's rules. Pass an existing registry to share
    rules between validators explicitly.

    Example:
        validator = FormValidator()
        validator.configure_field("email", {"rules": ["required", "email"]})

        result = validator.validate_field("email", "not-an-email")
        result.is_valid  # False
    """

    def __init__(self, registry: RuleRegistry | None = None, *, include_builtins: bool = True):
        if registry is None:
            registry = RuleRegistry()
            if include_builtins:
                register_builtin_rules(registry)
        self.registry = registry
        self.store = FieldConfigStore()
        self.formatter = MessageFormatter(registry)

    # -------------------------------------------------------------------------
    # Rules and configuration
    # -------------------------------------------------------------------------

    def add_validation_rule(self, name: str, predicate: Predicate, message: str) -> None:
        """Register a rule, replacing any existing rule of the same name."""
        self.registry.register(name, predicate, message)

    def configure_field(self, field_name: str, config: FieldConfig | Mapping[str, Any]) -> None:
        """Replace the rule configuration for a field."""
        self.store.configure_field(field_name, config)

    def configure_fields(self, configs: Mapping[str, FieldConfig | Mapping[str, Any]]) -> None:
        """Configure several fields at once."""
        self.store.configure_fields(configs)

    def reset_field(self, field_name: str) -> None:
        """Remove a field's configuration."""
        self.store.reset_field(field_name)

    def clear_all(self) -> None:
        """Remove all field configurations. Registered rules are kept."""
        self.store.clear_all()

    def get_field_config(self, field_name: str) -> FieldConfig | None:
        return self.store.get(field_name)

    def configured_fields(self) -> list[str]:
        return self.store.field_names()

    def get_available_rules(self) -> list[str]:
        """List all registered rule names."""
        return self.registry.list_names()

    def format_error_message(self, rule_name: str, params: Mapping[str, Any] | None = None) -> str:
        """Render a rule's default message with the given params."""
        return self.formatter.format(rule_name, params)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate_field(
        self,
        field_name: str,
        value: Any,
        form_data: Mapping[str, Any] | None = None,
    ) -> FieldValidationResult:
        """Validate a single field value.

        Every configured rule runs, in declared order, even after a failure.
        Rules missing from the registry are skipped with a warning.

        Args:
            field_name: The configured field name
            value: Candidate value for the field
            form_data: Complete form data for cross-field rules

        Returns:
            FieldValidationResult with one RuleFailure per failing rule
        """
        config = self.store.get(field_name)
        if config is None:
            return FieldValidationResult.valid()

        if isinstance(form_data, MappingProxyType):
            context = form_data
        else:
            context = MappingProxyType(dict(form_data or {}))

        errors: list[RuleFailure] = []
        for reference in config.rules:
            failure = self._evaluate_rule(field_name, reference, value, context)
            if failure is not None:
                errors.append(failure)

        return FieldValidationResult(is_valid=len(errors) == 0, errors=tuple(errors))

    def validate_form(self, form_data: Mapping[str, Any]) -> FormValidationResult:
        """Validate every configured field against one snapshot of the form.

        Only configured fields are validated; extra keys in form_data are
        available to cross-field rules but are not validated themselves.
        """
        return self.validate_fields(self.store.field_names(), form_data)

    def validate_fields(
        self,
        field_names: Iterable[str],
        form_data: Mapping[str, Any],
    ) -> FormValidationResult:
        """Validate a subset of fields, e.g. one step of a multi-step form.

        Unconfigured names are reported valid.
        """
        # Snapshot once so cross-field rules for different fields see the same values
        snapshot = MappingProxyType(dict(form_data or {}))

        fields: dict[str, FieldValidationResult] = {}
        all_errors: list[RuleFailure] = []
        for field_name in field_names:
            result = self.validate_field(field_name, snapshot.get(field_name), snapshot)
            fields[field_name] = result
            all_errors.extend(result.errors)

        return FormValidationResult(
            is_valid=all(r.is_valid for r in fields.values()),
            fields=fields,
            errors=tuple(all_errors),
        )

    def _evaluate_rule(
        self,
        field_name: str,
        reference: RuleReference,
        value: Any,
        context: Mapping[str, Any],
    ) -> RuleFailure | None:
        """Run one rule reference. Returns a RuleFailure, or None if it passed."""
        predicate = self.registry.get(reference.name)
        if predicate is None:
            logger.warning(
                "Validation rule '%s' not found for field '%s', skipping",
                reference.name,
                field_name,
            )
            return None

        params = MappingProxyType(dict(reference.params))
        try:
            outcome = predicate(value, params, context)
        except Exception as e:
            logger.error(
                "Validation rule '%s' failed for field '%s': %s",
                reference.name,
                field_name,
                e,
            )
            return self._failure(
                field_name, reference, f"Validation rule '{reference.name}' failed: {e}"
            )

        if inspect.isawaitable(outcome):
            # A pending result is never a pass
            if inspect.iscoroutine(outcome):
                outcome.close()
            logger.error(
                "Validation rule '%s' returned an awaitable; asynchronous rules are not supported",
                reference.name,
            )
            return self._failure(
                field_name,
                reference,
                f"Validation rule '{reference.name}' failed: asynchronous rules are not supported",
            )

        if outcome:
            return None

        message = reference.message or self.formatter.format(reference.name, reference.params)
        return self._failure(field_name, reference, message)

    def _failure(self, field_name: str, reference: RuleReference, message: str) -> RuleFailure:
        return RuleFailure(
            rule=reference.name,
            message=message,
            params=dict(reference.params),
            field=field_name,
        )
