"""Tests for the rule registry."""

import pytest

from formrules.engine import FormValidator
from formrules.registry import RuleRegistry
from formrules.rules.builtins import DEFAULT_MESSAGES, register_builtin_rules
from formrules.types import ConfigurationError


def _always(value, params, form_data):
    return True


def _never(value, params, form_data):
    return False


class TestRuleRegistry:
    def test_register_and_get(self):
        registry = RuleRegistry()
        registry.register("always", _always, "Never shown")

        assert registry.get("always") is _always
        assert registry.get_message("always") == "Never shown"
        assert registry.is_registered("always")
        assert "always" in registry

    def test_get_unknown_returns_none(self):
        registry = RuleRegistry()
        assert registry.get("missing") is None
        assert registry.get_rule("missing") is None
        assert registry.get_message("missing") is None

    def test_last_registration_wins(self):
        registry = RuleRegistry()
        registry.register("check", _always, "first")
        registry.register("check", _never, "second")

        rule = registry.get_rule("check")
        assert rule.predicate is _never
        assert rule.message == "second"
        assert len(registry) == 1

    def test_list_names_in_registration_order(self):
        registry = RuleRegistry()
        registry.register("b", _always, "")
        registry.register("a", _always, "")
        registry.register("c", _always, "")
        assert registry.list_names() == ["b", "a", "c"]

    def test_decorator_registers_function(self):
        registry = RuleRegistry()

        @registry.rule("even", "Must be an even number")
        def even(value, params, form_data):
            return int(value) % 2 == 0

        assert registry.get("even") is even
        assert registry.get_message("even") == "Must be an even number"

    def test_rejects_empty_name(self):
        registry = RuleRegistry()
        with pytest.raises(ConfigurationError):
            registry.register("", _always, "msg")

    def test_rejects_non_callable_predicate(self):
        registry = RuleRegistry()
        with pytest.raises(ConfigurationError, match="not callable"):
            registry.register("broken", "not a function", "msg")

    def test_rejects_async_predicate(self):
        registry = RuleRegistry()

        async def remote_check(value, params, form_data):
            return True

        with pytest.raises(ConfigurationError, match="asynchronous"):
            registry.register("usernameAvailable", remote_check, "Taken")
        assert not registry.is_registered("usernameAvailable")

    def test_rejects_non_string_message(self):
        registry = RuleRegistry()
        with pytest.raises(ConfigurationError):
            registry.register("check", _always, None)


class TestRegistryIsolation:
    def test_validators_do_not_share_rules(self):
        first = FormValidator()
        second = FormValidator()

        first.add_validation_rule("custom", _always, "Custom")

        assert "custom" in first.get_available_rules()
        assert "custom" not in second.get_available_rules()

    def test_explicitly_shared_registry(self):
        registry = RuleRegistry()
        register_builtin_rules(registry)
        first = FormValidator(registry)
        second = FormValidator(registry)

        first.add_validation_rule("custom", _always, "Custom")

        assert "custom" in second.get_available_rules()

    def test_builtins_registered_by_default(self):
        validator = FormValidator()
        assert validator.get_available_rules() == list(DEFAULT_MESSAGES.keys())

    def test_without_builtins(self):
        validator = FormValidator(include_builtins=False)
        assert validator.get_available_rules() == []
