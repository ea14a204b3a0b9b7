"""In-memory input source for formrules.

Headless implementations of the FieldHandle and InputSource protocols, used
by the CLI to validate data files and by applications that re-validate
submitted data outside a browser.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from formrules.orchestrator.types import FieldEvent, InputKind


class InMemoryField:
    """A single input held in memory.

    Setting a value dispatches the input event; focus and blur dispatch
    their own events, mimicking a user interacting with the field.
    """

    def __init__(
        self,
        name: str | None,
        kind: InputKind = InputKind.TEXT,
        value: Any = None,
        checked: bool = False,
        attributes: Mapping[str, Any] | None = None,
    ):
        if value is None:
            # Checkable inputs submit "on" when no value is given
            value = "on" if kind in (InputKind.CHECKBOX, InputKind.RADIO) else ""
        self._name = name
        self._kind = kind
        self._value = value
        self._checked = checked
        self._initial = (value, checked)
        self.attributes = dict(attributes or {})
        self._listeners: dict[FieldEvent, list[Callable[[], None]]] = defaultdict(list)

    def __repr__(self) -> str:
        return f"InMemoryField(name={self._name!r}, kind={self._kind.value!r}, value={self._value!r})"

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def kind(self) -> InputKind:
        return self._kind

    @property
    def value(self) -> Any:
        return self._value

    @property
    def checked(self) -> bool:
        return self._checked

    def bind(self, event: FieldEvent, callback: Callable[[], None]) -> None:
        self._listeners[event].append(callback)

    def fire(self, event: FieldEvent) -> None:
        for callback in list(self._listeners[event]):
            callback()

    def set_value(self, value: Any) -> None:
        """Change the value as a user would, dispatching the input event."""
        self._value = value
        self.fire(FieldEvent.INPUT)

    def check(self, checked: bool = True) -> None:
        """Toggle the checked state, dispatching the input event."""
        self._checked = checked
        self.fire(FieldEvent.INPUT)

    def focus(self) -> None:
        self.fire(FieldEvent.FOCUS)

    def blur(self) -> None:
        self.fire(FieldEvent.BLUR)

    def reset(self) -> None:
        """Restore the initial value without dispatching events."""
        self._value, self._checked = self._initial


class InMemoryForm:
    """An InputSource over a list of in-memory fields."""

    def __init__(self, fields: Iterable[InMemoryField] = ()):
        self.fields: list[InMemoryField] = list(fields)

    def inputs(self) -> list[InMemoryField]:
        return list(self.fields)

    def add(self, field: InMemoryField) -> InMemoryField:
        self.fields.append(field)
        return field

    def get(self, name: str) -> InMemoryField | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "InMemoryForm":
        """Build a form from plain data.

        Booleans become checkboxes; everything else becomes a text input
        holding the value as-is.
        """
        fields = []
        for key, value in data.items():
            name = str(key)
            if isinstance(value, bool):
                fields.append(InMemoryField(name, kind=InputKind.CHECKBOX, checked=value))
            else:
                fields.append(InMemoryField(name, kind=InputKind.TEXT, value=value))
        return cls(fields)
