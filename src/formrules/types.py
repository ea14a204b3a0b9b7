"""Core types for the formrules validation engine.

This module defines the foundational types shared by the registry, the
engine and the field orchestrator:
- Rule / RuleReference: registry entries and a field's pointers to them
- FieldConfig: the ordered rule references assigned to one field
- RuleFailure / FieldValidationResult / FormValidationResult: outcomes
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

# Predicate signature: (value, params, form_data) -> bool
Predicate = Callable[[Any, Mapping[str, Any], Mapping[str, Any]], bool]


class ConfigurationError(ValueError):
    """Raised for structural misuse of the API.

    Covers malformed field configurations, rule references without a name,
    non-callable predicates and similar programming errors. End-user input
    problems are never reported this way; they come back as RuleFailure data.
    """


@dataclass(frozen=True)
class Rule:
    """A named predicate plus its default message template."""

    name: str
    predicate: Predicate
    message: str


@dataclass(frozen=True)
class RuleReference:
    """One entry in a field's configuration.

    Attributes:
        name: Registered rule name (e.g., "minLength")
        params: Rule parameters, also used as message placeholders
        message: Override message used verbatim instead of the default template
    """

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)
    message: str | None = None

    @classmethod
    def from_value(cls, raw: Any) -> "RuleReference":
        """Create a RuleReference from a bare name or a YAML/JSON dict."""
        if isinstance(raw, RuleReference):
            return raw

        if isinstance(raw, str):
            if not raw.strip():
                raise ConfigurationError("Rule reference name must not be empty")
            return cls(name=raw)

        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"Rule reference must be a rule name or a mapping, got {type(raw).__name__}"
            )

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"Rule reference is missing a 'name': {dict(raw)!r}")

        params = raw.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, Mapping):
            raise ConfigurationError(
                f"Params for rule '{name}' must be a mapping, got {type(params).__name__}"
            )

        message = raw.get("message")
        if message is not None and not isinstance(message, str):
            raise ConfigurationError(f"Message override for rule '{name}' must be a string")

        return cls(name=name, params=dict(params), message=message or None)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.params:
            result["params"] = dict(self.params)
        if self.message:
            result["message"] = self.message
        return result


@dataclass(frozen=True)
class FieldConfig:
    """The ordered rule references assigned to one field.

    Order drives message order only; every rule is evaluated regardless.
    """

    rules: tuple[RuleReference, ...] = ()

    @classmethod
    def from_value(cls, raw: Any) -> "FieldConfig":
        """Create a FieldConfig from an existing config or a YAML/JSON dict."""
        if isinstance(raw, FieldConfig):
            return raw

        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                f"Field configuration must be a mapping with a 'rules' list, "
                f"got {type(raw).__name__}"
            )

        rules = raw.get("rules", [])
        if rules is None:
            rules = []
        if not isinstance(rules, (list, tuple)):
            raise ConfigurationError(
                f"Field configuration 'rules' must be a list, got {type(rules).__name__}"
            )

        return cls(rules=tuple(RuleReference.from_value(r) for r in rules))

    @property
    def has_rules(self) -> bool:
        return len(self.rules) > 0

    def rule_names(self) -> list[str]:
        return [ref.name for ref in self.rules]

    def to_dict(self) -> dict[str, Any]:
        return {"rules": [ref.to_dict() for ref in self.rules]}


@dataclass(frozen=True)
class RuleFailure:
    """A single failing rule.

    Attributes:
        rule: Name of the rule that failed
        message: Formatted (or overridden) human-readable message
        params: Params the rule was evaluated with
        field: Field name this failure relates to
    """

    rule: str
    message: str
    params: Mapping[str, Any] = field(default_factory=dict)
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "rule": self.rule,
            "message": self.message,
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class FieldValidationResult:
    """Result of validating one field."""

    is_valid: bool
    errors: tuple[RuleFailure, ...] = ()

    @classmethod
    def valid(cls) -> "FieldValidationResult":
        return cls(is_valid=True, errors=())

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass(frozen=True)
class FormValidationResult:
    """Result of validating a whole form.

    Attributes:
        is_valid: True iff every configured field is valid
        fields: Per-field results, keyed by field name
        errors: Flattened failures across all fields, each tagged with its field
    """

    is_valid: bool
    fields: Mapping[str, FieldValidationResult] = field(default_factory=dict)
    errors: tuple[RuleFailure, ...] = ()

    def errors_for(self, field_name: str) -> list[RuleFailure]:
        return [e for e in self.errors if e.field == field_name]

    @property
    def invalid_fields(self) -> list[str]:
        return [name for name, result in self.fields.items() if not result.is_valid]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "fields": {name: r.to_dict() for name, r in self.fields.items()},
            "errors": [e.to_dict() for e in self.errors],
        }
