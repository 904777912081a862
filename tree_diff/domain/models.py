"""Domain models for the parent-child tabular diff.

These dataclasses capture rows handed over by ingestion, the key schema that
identifies them, and the classified outcome of a diff run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Union

from .errors import DiffConfigurationError

CompositeKey = tuple[str, ...]
FieldRef = Union[str, int]


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def label(self) -> str:
        return "left (from)" if self is Side.LEFT else "right (to)"


class Action(str, Enum):
    ADD = "Add"
    DELETE = "Delete"
    UPDATE = "Update"
    MOVE = "Move"
    NONE = "None"

    @classmethod
    def from_name(cls, name: str) -> "Action":
        """Look up an action by name, ignoring case and a trailing plural ``s``."""
        wanted = name.strip().lower()
        for action in cls:
            value = action.value.lower()
            if wanted in (value, value + "s"):
                return action
        raise ValueError(f"Unknown diff action: {name!r}")


@dataclass(frozen=True)
class Row:
    """One record read from a source, values kept verbatim as strings."""

    values: tuple[str, ...]
    side: Side
    line_number: int


@dataclass(frozen=True)
class KeySchema:
    """Ordered key field names; the last one is the child, the rest the parent path."""

    fields: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise DiffConfigurationError("A key schema needs at least one key field")
        if len(set(self.fields)) != len(self.fields):
            raise DiffConfigurationError(f"Key fields must be unique: {list(self.fields)}")

    @classmethod
    def from_parts(cls, parent_fields: Sequence[str], child_field: str) -> "KeySchema":
        return cls(tuple(parent_fields) + (child_field,))

    @property
    def parent_fields(self) -> tuple[str, ...]:
        return self.fields[:-1]

    @property
    def child_field(self) -> str:
        return self.fields[-1]


@dataclass(frozen=True)
class SourceData:
    """Everything the diff needs from one ingested source."""

    label: str
    side: Side
    field_names: tuple[str, ...]
    rows: tuple[Row, ...]
    key_schema: KeySchema
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiffOptions:
    ignore_fields: tuple[FieldRef, ...] = ()
    ignore_adds: bool = False
    ignore_deletes: bool = False
    ignore_updates: bool = False
    ignore_moves: bool = False

    def suppresses(self, action: Action) -> bool:
        return {
            Action.ADD: self.ignore_adds,
            Action.DELETE: self.ignore_deletes,
            Action.UPDATE: self.ignore_updates,
            Action.MOVE: self.ignore_moves,
        }.get(action, False)


@dataclass(frozen=True)
class DiffRecord:
    """Classified outcome for one composite key.

    ``changes`` maps a field name to its ``(old, new)`` values and
    ``position_change`` holds the ``(old, new)`` sibling positions when the
    row changed place among its siblings. An ``Update`` may carry both.
    """

    key: CompositeKey
    action: Action
    left_row: Row | None = None
    right_row: Row | None = None
    changes: dict[str, tuple[str, str]] = field(default_factory=dict)
    position_change: tuple[int, int] | None = None

    @property
    def moved(self) -> bool:
        return self.position_change is not None
