"""Field orchestration service for formrules.

Keeps each field's displayed validity in sync with user interaction:
- input and blur recompute the field from a fresh snapshot of the form
- focus clears the displayed result back to pristine (config retained)
- submit recomputes every configured field from one snapshot and fires
  exactly one of the injected on_form_valid / on_form_invalid hooks
"""

import logging
from collections.abc import Mapping
from typing import Any

from formrules.engine import FormValidator
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
from formrules.types import (
    ConfigurationError,
    FieldConfig,
    FieldValidationResult,
    FormValidationResult,
)

logger = logging.getLogger(__name__)

# Inputs sharing a name with one of these kinds form a single field
GROUPED_KINDS = (InputKind.RADIO, InputKind.CHECKBOX)


class FieldOrchestrator:
    """Tracks fields of an input source and validates them as users interact.

    Example:
        form = InMemoryForm([InMemoryField("email", kind=InputKind.EMAIL)])
        orchestrator = FieldOrchestrator(
            FormValidator(),
            translator=my_translator,
            hooks=FormHooks(on_form_valid=save),
        )
        orchestrator.discover(form)
        orchestrator.submit()
    """

    def __init__(
        self,
        validator: FormValidator | None = None,
        *,
        translator: AttributeTranslator | None = None,
        hooks: FormHooks | None = None,
    ):
        self.validator = validator or FormValidator()
        self.translator = translator or NoRulesTranslator()
        self.hooks = hooks or FormHooks()
        self._fields: dict[str, FieldState] = {}
        self._last_result: FormValidationResult | None = None

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    def discover(self, source: InputSource) -> list[str]:
        """Register every named input of the source.

        Radio or checkbox inputs sharing a name become one field. Inputs that
        are already tracked are skipped. Each new field's config is derived by
        the attribute translator and handed to the validator when it has at
        least one rule; otherwise any existing configuration is left alone.

        Returns:
            Names of the fields discovered, in source order
        """
        discovered: list[str] = []
        for handle in source.inputs():
            field_name = handle.name
            if not field_name:
                continue

            existing = self._fields.get(field_name)
            if existing is not None and any(h is handle for h in existing.handles):
                # Already tracked
                if field_name not in discovered:
                    discovered.append(field_name)
                continue

            if (
                existing is not None
                and handle.kind in GROUPED_KINDS
                and existing.kind == handle.kind
                and field_name in discovered
            ):
                existing.handles.append(handle)
                self._bind(handle)
                continue

            config = FieldConfig.from_value(self.translator.translate(handle))
            self._register(field_name, handle, config)
            discovered.append(field_name)

        logger.debug("Discovered %d field(s): %s", len(discovered), discovered)
        return discovered

    def add_field(
        self,
        field_name: str,
        handle: FieldHandle,
        config: FieldConfig | Mapping[str, Any] | None = None,
    ) -> FieldState:
        """Add a field dynamically, wiring the same reactions as discovered fields."""
        if not isinstance(field_name, str) or not field_name:
            raise ConfigurationError("Field name must be a non-empty string")
        if handle is None:
            raise ConfigurationError(f"Field '{field_name}' requires an input handle")

        normalized = FieldConfig.from_value(config if config is not None else {})
        return self._register(field_name, handle, normalized)

    def remove_field(self, field_name: str) -> None:
        """Remove a field, its configuration and any displayed state."""
        state = self._fields.pop(field_name, None)
        if state is None:
            return

        self.validator.reset_field(field_name)
        if state.last_result is not None:
            state.last_result = None
            self._notify(state)

    def get_field(self, field_name: str) -> FieldState | None:
        return self._fields.get(field_name)

    def field_names(self) -> list[str]:
        return list(self._fields.keys())

    def _register(self, field_name: str, handle: FieldHandle, config: FieldConfig) -> FieldState:
        state = FieldState(name=field_name, handles=[handle], config=config)
        self._fields[field_name] = state

        if config.has_rules:
            self.validator.configure_field(field_name, config)

        self._bind(handle)
        return state

    def _bind(self, handle: FieldHandle) -> None:
        handle.bind(FieldEvent.INPUT, lambda: self._on_change(handle))
        handle.bind(FieldEvent.BLUR, lambda: self._on_change(handle))
        handle.bind(FieldEvent.FOCUS, lambda: self._on_focus(handle))

    # -------------------------------------------------------------------------
    # Event reactions
    # -------------------------------------------------------------------------

    def _on_change(self, handle: FieldHandle) -> None:
        try:
            self.validate_field_realtime(handle)
        except Exception:
            logger.exception("Realtime validation failed for field '%s'", handle.name)

    def _on_focus(self, handle: FieldHandle) -> None:
        try:
            self.clear_field_validation(handle)
        except Exception:
            logger.exception("Clearing validation failed for field '%s'", handle.name)

    def validate_field_realtime(self, handle: FieldHandle) -> FieldValidationResult | None:
        """Validate the field backing a handle against a fresh form snapshot.

        Returns:
            The field's result, or None when the handle is not a tracked field
        """
        state = self._resolve(handle)
        if state is None:
            return None

        snapshot = self.get_form_data()
        result = self.validator.validate_field(state.name, snapshot.get(state.name), snapshot)
        self._display(state, result)
        return result

    def clear_field_validation(self, handle: FieldHandle) -> None:
        """Return a field's display to pristine. Its configuration is kept."""
        state = self._resolve(handle)
        if state is None or state.last_result is None:
            return
        state.last_result = None
        self._notify(state)

    def _resolve(self, handle: FieldHandle) -> FieldState | None:
        field_name = handle.name
        if not field_name:
            return None
        state = self._fields.get(field_name)
        if state is None or not any(h is handle for h in state.handles):
            return None
        return state

    # -------------------------------------------------------------------------
    # Form-level validation
    # -------------------------------------------------------------------------

    def validate_all(self) -> FormValidationResult:
        """Validate every configured field from one snapshot and update displays."""
        return self._validate_snapshot(self.get_form_data())

    def submit(self) -> FormValidationResult:
        """Handle a submit attempt.

        Recomputes every configured field regardless of its current status,
        then calls exactly one of the on_form_valid / on_form_invalid hooks.
        Hook failures are logged, not raised; the result is returned either way.
        """
        snapshot = self.get_form_data()
        result = self._validate_snapshot(snapshot)

        if result.is_valid:
            logger.debug("Form submitted with %d field(s)", len(snapshot))
            self._call_hook("on_form_valid", snapshot)
        else:
            logger.debug("Form submit rejected: invalid fields %s", result.invalid_fields)
            self._call_hook("on_form_invalid", result)
        return result

    def _validate_snapshot(self, snapshot: dict[str, Any]) -> FormValidationResult:
        result = self.validator.validate_form(snapshot)
        self._last_result = result

        for field_name, field_result in result.fields.items():
            state = self._fields.get(field_name)
            if state is not None:
                self._display(state, field_result)
        return result

    def get_form_data(self) -> dict[str, Any]:
        """Read the current value of every tracked field.

        A single checkbox reads as a boolean and a checkbox group as the list
        of its checked members' values. Radio groups read as the checked
        member's value and are omitted when nothing is checked. All other
        inputs read as the raw value provided by the source.
        """
        form_data: dict[str, Any] = {}
        for field_name, state in self._fields.items():
            kind = state.kind
            if kind == InputKind.CHECKBOX and len(state.handles) > 1:
                form_data[field_name] = [h.value for h in state.handles if h.checked]
            elif kind == InputKind.CHECKBOX:
                form_data[field_name] = bool(state.handle.checked)
            elif kind == InputKind.RADIO:
                for handle in state.handles:
                    if handle.checked:
                        form_data[field_name] = handle.value
                        break
            else:
                form_data[field_name] = state.handle.value
        return form_data

    def get_validation_state(self) -> ValidationState:
        result = self._last_result
        return ValidationState(
            is_valid=result.is_valid if result is not None else False,
            result=result,
            form_data=self.get_form_data(),
        )

    def reset(self) -> None:
        """Restore every input's initial value and clear all validation state."""
        for state in self._fields.values():
            for handle in state.handles:
                handle.reset()
            if state.last_result is not None:
                state.last_result = None
                self._notify(state)
        self._last_result = None

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def _display(self, state: FieldState, result: FieldValidationResult) -> None:
        state.last_result = result
        self._notify(state)

    def _notify(self, state: FieldState) -> None:
        try:
            self.hooks.on_field_change(state)
        except Exception:
            logger.exception("on_field_change hook failed for field '%s'", state.name)

    def _call_hook(self, hook_name: str, payload: Any) -> None:
        try:
            getattr(self.hooks, hook_name)(payload)
        except Exception:
            logger.exception("%s hook failed", hook_name)

    def status_of(self, field_name: str) -> FieldStatus:
        state = self._fields.get(field_name)
        return state.status if state is not None else FieldStatus.PRISTINE
