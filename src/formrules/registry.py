"""Rule registry for formrules.

Provides registration and lookup for named validation predicates and their
default message templates. A registry is an owned instance: every
FormValidator creates its own unless one is passed in explicitly for sharing.
"""

import inspect
import logging
from typing import Callable

from formrules.types import ConfigurationError, Predicate, Rule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Registry for validation rules.

    Registering a name that already exists replaces the prior rule
    (last registration wins).

    Example:
        registry = RuleRegistry()

        @registry.rule("sku", "SKU must be 3 letters followed by 3-6 digits")
        def sku(value, params, form_data):
            ...

        predicate = registry.get("sku")
    """

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, name: str, predicate: Predicate, message: str) -> None:
        """Register a rule by name, replacing any existing rule of that name.

        Args:
            name: Unique identifier for the rule (e.g., "minLength")
            predicate: Synchronous callable (value, params, form_data) -> bool
            message: Default message template with {param} placeholders

        Raises:
            ConfigurationError: If the name is empty, the predicate is not
                callable, or the predicate is a coroutine function
        """
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Rule name must be a non-empty string")
        if not callable(predicate):
            raise ConfigurationError(f"Predicate for rule '{name}' is not callable")
        if inspect.iscoroutinefunction(predicate):
            raise ConfigurationError(
                f"Rule '{name}' is asynchronous. Only synchronous predicates are supported; "
                "run remote checks outside the validation pass."
            )
        if not isinstance(message, str):
            raise ConfigurationError(f"Message template for rule '{name}' must be a string")

        if name in self._rules:
            logger.debug("Replacing validation rule '%s'", name)
        self._rules[name] = Rule(name=name, predicate=predicate, message=message)

    def rule(self, name: str, message: str) -> Callable[[Predicate], Predicate]:
        """Decorator to register a predicate function.

        Usage:
            @registry.rule("even", "Must be an even number")
            def even(value, params, form_data):
                ...
        """

        def decorator(fn: Predicate) -> Predicate:
            self.register(name, fn, message)
            return fn

        return decorator

    def get(self, name: str) -> Predicate | None:
        """Get a registered predicate by name, or None if not registered."""
        rule = self._rules.get(name)
        return rule.predicate if rule else None

    def get_rule(self, name: str) -> Rule | None:
        """Get the full registry entry for a rule."""
        return self._rules.get(name)

    def get_message(self, name: str) -> str | None:
        """Get the default message template for a rule."""
        rule = self._rules.get(name)
        return rule.message if rule else None

    def is_registered(self, name: str) -> bool:
        """Check if a rule is registered."""
        return name in self._rules

    def list_names(self) -> list[str]:
        """List all registered rule names, in registration order."""
        return list(self._rules.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)
