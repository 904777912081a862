"""Composite and parent-group key construction."""
from __future__ import annotations

from typing import Sequence

from .errors import DiffConfigurationError
from .models import CompositeKey, KeySchema


class KeyBuilder:
    """Builds keys for rows of one source once its key schema has been validated."""

    def __init__(self, key_schema: KeySchema, field_names: Sequence[str], source_label: str = "source") -> None:
        missing = [name for name in key_schema.fields if name not in field_names]
        if missing:
            raise DiffConfigurationError(
                f"Key field(s) {missing} not found in {source_label} fields {list(field_names)}"
            )
        positions = {name: idx for idx, name in enumerate(field_names)}
        self._key_schema = key_schema
        self._indices = tuple(positions[name] for name in key_schema.fields)

    @property
    def key_schema(self) -> KeySchema:
        return self._key_schema

    def key(self, values: Sequence[str]) -> CompositeKey:
        return tuple(values[idx] for idx in self._indices)

    def parent_key(self, values: Sequence[str]) -> CompositeKey:
        return tuple(values[idx] for idx in self._indices[:-1])


def build_key(values: Sequence[str], field_names: Sequence[str], key_schema: KeySchema) -> CompositeKey:
    return KeyBuilder(key_schema, field_names).key(values)


def build_parent_key(values: Sequence[str], field_names: Sequence[str], key_schema: KeySchema) -> CompositeKey:
    return KeyBuilder(key_schema, field_names).parent_key(values)


def format_key(key: CompositeKey, separator: str = "~") -> str:
    return separator.join(key)
