"""Tests for the validation engine."""

import logging

import pytest

from formrules.engine import FormValidator
from formrules.types import (
    ConfigurationError,
    FieldConfig,
    FieldValidationResult,
    FormValidationResult,
    RuleFailure,
    RuleReference,
)


@pytest.fixture
def validator():
    return FormValidator()


# =============================================================================
# Unconfigured Fields
# =============================================================================


class TestUnconfiguredFields:
    @pytest.mark.parametrize("value", [None, "", "anything", 42, ["x"], {"a": 1}])
    def test_unconfigured_field_is_valid(self, validator, value):
        result = validator.validate_field("nobody", value, {"nobody": value})
        assert result == FieldValidationResult(is_valid=True, errors=())

    def test_empty_rules_is_valid(self, validator):
        validator.configure_field("notes", {"rules": []})
        assert validator.validate_field("notes", None).is_valid


# =============================================================================
# Single Field Validation
# =============================================================================


class TestValidateField:
    def test_passing_value(self, validator):
        validator.configure_field("email", {"rules": ["required", "email"]})
        result = validator.validate_field("email", "someone@example.com")
        assert result.is_valid
        assert result.errors == ()

    def test_failure_shape(self, validator):
        validator.configure_field(
            "username", {"rules": [{"name": "minLength", "params": {"length": 5}}]}
        )
        result = validator.validate_field("username", "abc")

        assert not result.is_valid
        assert result.errors == (
            RuleFailure(
                rule="minLength",
                message="Must be at least 5 characters long",
                params={"length": 5},
                field="username",
            ),
        )

    def test_no_early_exit(self, validator):
        validator.configure_field(
            "code",
            {
                "rules": [
                    {"name": "minLength", "params": {"length": 10}},
                    "number",
                    {"name": "pattern", "params": {"pattern": "^[A-Z]"}},
                    "email",
                ]
            },
        )
        result = validator.validate_field("code", "abc")

        assert [e.rule for e in result.errors] == ["minLength", "number", "pattern", "email"]

    def test_error_count_matches_failing_rules(self, validator):
        validator.add_validation_rule("yes", lambda v, p, f: True, "never")
        validator.add_validation_rule("no", lambda v, p, f: False, "always")
        validator.configure_field("f", {"rules": ["no", "yes", "no", "yes", "no"]})

        result = validator.validate_field("f", "x")
        assert len(result.errors) == 3

    def test_errors_follow_declared_order(self, validator):
        validator.configure_field("f", {"rules": ["email", {"name": "minLength", "params": {"length": 20}}]})
        result = validator.validate_field("f", "short")
        assert result.messages == [
            "Please enter a valid email address",
            "Must be at least 20 characters long",
        ]

    def test_message_override(self, validator):
        validator.configure_field(
            "email", {"rules": [{"name": "required", "message": "We need your email"}]}
        )
        result = validator.validate_field("email", "")
        assert result.errors[0].message == "We need your email"

    def test_every_rule_evaluated_even_after_required_fails(self, validator):
        calls = []

        def spy(value, params, form_data):
            calls.append(value)
            return True

        validator.add_validation_rule("spy", spy, "spy")
        validator.configure_field("f", {"rules": ["required", "spy"]})
        validator.validate_field("f", "")

        assert calls == [""]

    def test_predicate_receives_params_and_form_data(self, validator):
        seen = {}

        def capture(value, params, form_data):
            seen.update(value=value, params=dict(params), form_data=dict(form_data))
            return True

        validator.add_validation_rule("capture", capture, "")
        validator.configure_field("f", {"rules": [{"name": "capture", "params": {"k": 1}}]})
        validator.validate_field("f", "v", {"f": "v", "other": 2})

        assert seen == {"value": "v", "params": {"k": 1}, "form_data": {"f": "v", "other": 2}}

    def test_bare_reference_has_empty_params(self, validator):
        seen = []
        validator.add_validation_rule("capture", lambda v, p, f: seen.append(dict(p)) or True, "")
        validator.configure_field("f", {"rules": ["capture"]})
        validator.validate_field("f", "v")
        assert seen == [{}]


# =============================================================================
# Registration Round-trip and Overwrite
# =============================================================================


class TestCustomRules:
    def test_round_trip(self, validator):
        validator.add_validation_rule(
            "uppercase", lambda v, p, f: str(v).isupper(), "Must be uppercase"
        )
        validator.configure_field("code", {"rules": ["uppercase"]})

        assert validator.validate_field("code", "ABC") == FieldValidationResult(True, ())

        result = validator.validate_field("code", "abc")
        assert len(result.errors) == 1
        assert result.errors[0].rule == "uppercase"
        assert result.errors[0].message == "Must be uppercase"

    def test_overwrite_uses_latest_predicate(self, validator):
        validator.configure_field("email", {"rules": ["email"]})
        assert not validator.validate_field("email", "not-an-email").is_valid

        validator.add_validation_rule("email", lambda v, p, f: True, "first")
        validator.add_validation_rule("email", lambda v, p, f: "@" in str(v), "second")

        assert validator.validate_field("email", "a@b").is_valid
        result = validator.validate_field("email", "nope")
        assert result.errors[0].message == "second"


# =============================================================================
# Unknown Rules (leniency policy)
# =============================================================================


class TestUnknownRules:
    def test_unknown_rule_is_skipped(self, validator, caplog):
        validator.configure_field("f", {"rules": ["doesNotExist"]})

        with caplog.at_level(logging.WARNING, logger="formrules.engine"):
            result = validator.validate_field("f", "")

        assert result.is_valid
        assert result.errors == ()
        assert any("doesNotExist" in r.getMessage() for r in caplog.records)
        assert all(r.levelno == logging.WARNING for r in caplog.records)

    def test_unknown_rule_does_not_hide_other_failures(self, validator, caplog):
        validator.configure_field("f", {"rules": ["doesNotExist", "required"]})
        with caplog.at_level(logging.WARNING, logger="formrules.engine"):
            result = validator.validate_field("f", "")
        assert [e.rule for e in result.errors] == ["required"]


# =============================================================================
# Predicate Errors
# =============================================================================


class TestPredicateErrors:
    def test_raising_predicate_becomes_failure(self, validator, caplog):
        def explode(value, params, form_data):
            raise RuntimeError("boom")

        validator.add_validation_rule("explode", explode, "unused")
        validator.configure_field("f", {"rules": ["explode", "required"]})

        with caplog.at_level(logging.ERROR, logger="formrules.engine"):
            result = validator.validate_field("f", "")

        assert [e.rule for e in result.errors] == ["explode", "required"]
        assert result.errors[0].message == "Validation rule 'explode' failed: boom"
        assert any("boom" in r.getMessage() for r in caplog.records)

    def test_missing_param_becomes_failure(self, validator):
        validator.configure_field("f", {"rules": ["minLength"]})
        result = validator.validate_field("f", "abc")
        assert not result.is_valid
        assert result.errors[0].rule == "minLength"
        assert result.errors[0].message.startswith("Validation rule 'minLength' failed")

    def test_awaitable_result_is_not_a_pass(self, validator):
        async def pending():
            return True

        validator.add_validation_rule("remote", lambda v, p, f: pending(), "Taken")
        validator.configure_field("username", {"rules": ["remote"]})

        result = validator.validate_field("username", "admin")
        assert not result.is_valid
        assert "asynchronous rules are not supported" in result.errors[0].message

    def test_predicate_cannot_mutate_form_data(self, validator):
        def writer(value, params, form_data):
            form_data["injected"] = True
            return True

        validator.add_validation_rule("writer", writer, "")
        validator.configure_field("f", {"rules": ["writer"]})
        data = {"f": "x"}

        result = validator.validate_field("f", "x", data)
        assert not result.is_valid
        assert "injected" not in data


# =============================================================================
# Form Validation
# =============================================================================


class TestValidateForm:
    @pytest.fixture
    def signup(self, validator):
        validator.configure_fields(
            {
                "email": {"rules": ["required", "email"]},
                "password": {"rules": ["required", "password"]},
                "confirmPassword": {
                    "rules": [
                        "required",
                        {"name": "confirmPassword", "params": {"matchField": "password"}},
                    ]
                },
            }
        )
        return validator

    def test_valid_form(self, signup):
        result = signup.validate_form(
            {"email": "a@b.co", "password": "Abc12345!", "confirmPassword": "Abc12345!"}
        )
        assert result.is_valid
        assert set(result.fields) == {"email", "password", "confirmPassword"}
        assert result.errors == ()

    def test_cross_field_mismatch(self, signup):
        result = signup.validate_form(
            {"email": "a@b.co", "password": "Abc12345!", "confirmPassword": "different"}
        )
        assert not result.is_valid
        assert result.invalid_fields == ["confirmPassword"]
        assert len(result.errors) == 1
        assert result.errors[0].field == "confirmPassword"
        assert result.errors[0].rule == "confirmPassword"

    def test_only_configured_fields_are_validated(self, signup):
        result = signup.validate_form({"email": "a@b.co", "unrelated": ""})
        assert "unrelated" not in result.fields

    def test_missing_values_validate_as_absent(self, signup):
        result = signup.validate_form({})
        assert not result.is_valid
        assert [e.rule for e in result.errors] == ["required", "required", "required"]

    def test_errors_are_flattened_and_tagged(self, signup):
        result = signup.validate_form({"email": "bad", "password": "", "confirmPassword": ""})
        assert [(e.field, e.rule) for e in result.errors] == [
            ("email", "email"),
            ("password", "required"),
            ("confirmPassword", "required"),
        ]
        assert result.errors_for("email")[0].message == "Please enter a valid email address"

    def test_idempotent(self, signup):
        data = {"email": "bad", "password": "weak", "confirmPassword": "other"}
        first = signup.validate_form(data)
        second = signup.validate_form(data)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_snapshot_is_taken_before_rules_run(self, validator):
        data = {"a": "1", "b": "1"}
        seen = []

        def mutating_reader(value, params, form_data):
            # Mutating the caller's dict mid-pass must not affect later rules
            data["b"] = "changed"
            seen.append(form_data.get("b"))
            return True

        validator.add_validation_rule("reader", mutating_reader, "")
        validator.configure_fields({"a": {"rules": ["reader"]}, "b": {"rules": ["reader"]}})
        result = validator.validate_form(data)

        assert seen == ["1", "1"]
        assert result.is_valid

    def test_to_dict(self, signup):
        result = signup.validate_form({"email": "bad", "password": "Abc12345!", "confirmPassword": "Abc12345!"})
        payload = result.to_dict()
        assert payload["isValid"] is False
        assert payload["fields"]["email"]["isValid"] is False
        assert payload["errors"] == [
            {
                "field": "email",
                "rule": "email",
                "message": "Please enter a valid email address",
                "params": {},
            }
        ]


class TestValidateFields:
    def test_subset(self, validator):
        validator.configure_fields(
            {"name": {"rules": ["required"]}, "email": {"rules": ["required", "email"]}}
        )
        result = validator.validate_fields(["name"], {"name": "Ada"})
        assert result.is_valid
        assert list(result.fields) == ["name"]

    def test_unconfigured_name_is_valid(self, validator):
        result = validator.validate_fields(["ghost"], {})
        assert result == FormValidationResult(
            is_valid=True, fields={"ghost": FieldValidationResult.valid()}, errors=()
        )


# =============================================================================
# Configuration Store
# =============================================================================


class TestConfiguration:
    def test_configure_field_replaces(self, validator):
        validator.configure_field("f", {"rules": ["required"]})
        validator.configure_field("f", {"rules": ["email"]})
        assert validator.get_field_config("f").rule_names() == ["email"]

    def test_accepts_field_config_instance(self, validator):
        config = FieldConfig(rules=(RuleReference("required"),))
        validator.configure_field("f", config)
        assert validator.get_field_config("f") is config

    def test_reset_field(self, validator):
        validator.configure_field("f", {"rules": ["required"]})
        validator.reset_field("f")
        assert validator.validate_field("f", "").is_valid
        assert "f" not in validator.configured_fields()

    def test_reset_unknown_field_is_noop(self, validator):
        validator.reset_field("never-configured")

    def test_clear_all_keeps_rules(self, validator):
        validator.configure_fields({"a": {"rules": ["required"]}, "b": {"rules": ["required"]}})
        validator.clear_all()
        assert validator.configured_fields() == []
        assert "required" in validator.get_available_rules()

    @pytest.mark.parametrize(
        "config",
        [
            {"rules": "required"},
            {"rules": {"name": "required"}},
            ["required"],
            "required",
            None,
            {"rules": [42]},
            {"rules": [{"params": {"length": 3}}]},
            {"rules": [{"name": "minLength", "params": [3]}]},
            {"rules": [""]},
        ],
    )
    def test_malformed_config_fails_fast(self, validator, config):
        with pytest.raises(ConfigurationError):
            validator.configure_field("f", config)
        assert validator.get_field_config("f") is None

    def test_empty_field_name_rejected(self, validator):
        with pytest.raises(ConfigurationError):
            validator.configure_field("", {"rules": ["required"]})

    def test_configure_fields_requires_mapping(self, validator):
        with pytest.raises(ConfigurationError):
            validator.configure_fields([("f", {"rules": []})])
