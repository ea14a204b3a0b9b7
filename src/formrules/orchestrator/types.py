"""Field orchestrator types for formrules.

Defines the collaborator protocols the orchestrator consumes and the state
it owns:
- FieldHandle / InputSource: the external input source and its inputs
- AttributeTranslator: derives a FieldConfig from an input's attributes
- FieldState / FieldStatus: per-field interaction state
- FormHooks: injected submit and display callbacks
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol

from formrules.types import FieldConfig, FieldValidationResult, FormValidationResult


class InputKind(Enum):
    """The kind of an input, which decides how its value is read."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    TEXTAREA = "textarea"
    EMAIL = "email"
    TEL = "tel"
    URL = "url"
    DATE = "date"
    PASSWORD = "password"


class FieldEvent(Enum):
    """Interaction events the orchestrator reacts to."""

    INPUT = "input"
    BLUR = "blur"
    FOCUS = "focus"


class FieldHandle(Protocol):
    """Opaque reference to one input of the external input source."""

    @property
    def name(self) -> str | None:
        """Field name (or id) of the input; None for anonymous inputs."""
        ...

    @property
    def kind(self) -> InputKind:
        ...

    @property
    def value(self) -> Any:
        """Raw value as provided by the source (text, number, ...)."""
        ...

    @property
    def checked(self) -> bool:
        """Checked state for checkbox and radio inputs."""
        ...

    def bind(self, event: FieldEvent, callback: Callable[[], None]) -> None:
        """Call ``callback`` whenever ``event`` fires on this input."""
        ...

    def reset(self) -> None:
        """Restore the input's initial value."""
        ...


class InputSource(Protocol):
    """The external input source fields are discovered from."""

    def inputs(self) -> Iterable[FieldHandle]:
        """Enumerate candidate inputs, in document order."""
        ...


class AttributeTranslator(Protocol):
    """Translates an input's markup attributes into a rule configuration."""

    def translate(self, handle: FieldHandle) -> FieldConfig | Mapping[str, Any]:
        ...


class NoRulesTranslator:
    """Default translator: discovered inputs carry no rules."""

    def translate(self, handle: FieldHandle) -> FieldConfig:
        return FieldConfig()


class FieldStatus(Enum):
    """Displayed validity of a field."""

    PRISTINE = "pristine"  # No result yet, or cleared on focus
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class FieldState:
    """Orchestrator-owned state for one field.

    Attributes:
        name: Field name
        handles: Inputs backing the field (several for a radio group)
        config: Rule configuration the field was registered with
        last_result: Most recent displayed result, None while pristine
    """

    name: str
    handles: list[FieldHandle]
    config: FieldConfig = field(default_factory=FieldConfig)
    last_result: FieldValidationResult | None = None

    @property
    def handle(self) -> FieldHandle:
        return self.handles[0]

    @property
    def kind(self) -> InputKind:
        return self.handle.kind

    @property
    def status(self) -> FieldStatus:
        if self.last_result is None:
            return FieldStatus.PRISTINE
        return FieldStatus.VALID if self.last_result.is_valid else FieldStatus.INVALID


def _noop(*args: Any) -> None:
    return None


@dataclass
class FormHooks:
    """Callbacks injected into the orchestrator.

    Attributes:
        on_form_valid: Called with the submitted form data when submit passes
        on_form_invalid: Called with the FormValidationResult when submit fails
        on_field_change: Called with a FieldState whenever its displayed status changes
    """

    on_form_valid: Callable[[dict[str, Any]], None] = _noop
    on_form_invalid: Callable[[FormValidationResult], None] = _noop
    on_field_change: Callable[[FieldState], None] = _noop


@dataclass(frozen=True)
class ValidationState:
    """Snapshot of the orchestrator's form-level state."""

    is_valid: bool
    result: FormValidationResult | None
    form_data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "results": self.result.to_dict() if self.result else {},
            "formData": dict(self.form_data),
        }
