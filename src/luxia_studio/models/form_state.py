"""
Form state store.

FormState is an immutable snapshot of the values collected for a
service. Every mutation returns a new snapshot, so a reference to an
older state stays valid (undo, concurrent readers).
"""

from __future__ import annotations

import mimetypes
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Union

from luxia_studio.models.field_schema import FieldKind, ServiceDefinition


@dataclass(frozen=True)
class FileHandle:
    """An uploaded file, read fully into memory."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "FileHandle":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            data=path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )

    @property
    def size(self) -> int:
        return len(self.data)


FieldValue = Union[str, int, float, tuple[str, ...], FileHandle, None]


def is_empty(value: FieldValue) -> bool:
    """None, empty string and empty selection count as empty."""
    if value is None:
        return True
    if isinstance(value, (str, tuple)):
        return len(value) == 0
    return False


def _normalize(value: object) -> FieldValue:
    if isinstance(value, (list, tuple)):
        # ordered set: keep first occurrence
        return tuple(dict.fromkeys(str(item) for item in value))
    return value  # type: ignore[return-value]


class FormState(Mapping[str, FieldValue]):
    """Read-only mapping from field name to current value."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, FieldValue]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, name: str) -> FieldValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FormState({dict(self._values)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FormState):
            return dict(self._values) == dict(other._values)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


def initialize(service: ServiceDefinition) -> FormState:
    """
    Build the initial form state for a service.

    Every field gets an entry. Checkbox groups start with an empty
    selection (or their default), other kinds with their default or None.
    """
    values: dict[str, FieldValue] = {}
    for schema in service.fields:
        if schema.kind is FieldKind.CHECKBOX_GROUP:
            values[schema.name] = _normalize(schema.default or ())
        else:
            values[schema.name] = schema.default
    return FormState(values)


def set_field(state: FormState, name: str, value: object) -> FormState:
    """Return a new snapshot with exactly one entry replaced."""
    if name not in state:
        raise KeyError(f'Unknown field "{name}"')
    values = dict(state)
    values[name] = _normalize(value)
    return FormState(values)


@dataclass(frozen=True)
class FieldChanged:
    """A field received a new value."""

    name: str
    value: object


@dataclass(frozen=True)
class OptionToggled:
    """A checkbox option was ticked or unticked."""

    name: str
    option: str


FormEvent = Union[FieldChanged, OptionToggled]


def toggle_option(state: FormState, name: str, option: str) -> FormState:
    current = state[name] or ()
    if not isinstance(current, tuple):
        raise TypeError(f'Field "{name}" does not hold a selection')
    if option in current:
        selected = tuple(item for item in current if item != option)
    else:
        selected = current + (option,)
    return set_field(state, name, selected)


def apply_event(state: FormState, event: FormEvent) -> FormState:
    """Apply one form event and return the resulting snapshot."""
    if isinstance(event, FieldChanged):
        return set_field(state, event.name, event.value)
    if isinstance(event, OptionToggled):
        return toggle_option(state, event.name, event.option)
    raise TypeError(f"Unsupported form event: {event!r}")


class FormStore:
    """
    Holds the current form state for the active service.

    Switching service is a full reset: nothing carries over.
    """

    def __init__(self, service: ServiceDefinition):
        self.service = service
        self.state = initialize(service)
        self._history: list[FormState] = []

    def reset(self, service: ServiceDefinition | None = None) -> FormState:
        if service is not None:
            self.service = service
        self.state = initialize(self.service)
        self._history.clear()
        return self.state

    def dispatch(self, event: FormEvent) -> FormState:
        new_state = apply_event(self.state, event)
        self._history.append(self.state)
        self.state = new_state
        return new_state

    def undo(self) -> FormState:
        """Restore the snapshot before the last event, if any."""
        if self._history:
            self.state = self._history.pop()
        return self.state

    @property
    def can_undo(self) -> bool:
        return bool(self._history)
