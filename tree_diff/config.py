"""Central configuration for the tree diff package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from tree_diff.domain.models import FieldRef

BASE_DIR = Path(__file__).resolve().parent.parent

WORKBOOK_SUFFIXES = {".xls", ".xlsx", ".xlsm"}


@dataclass(slots=True, frozen=True)
class Settings:
    key_separator: str
    default_encoding: str
    default_delimiter: str
    log_level: str
    workbook_suffixes: frozenset[str]


SETTINGS = Settings(
    key_separator=os.environ.get("TREE_DIFF_KEY_SEPARATOR", "~"),
    default_encoding=os.environ.get("TREE_DIFF_ENCODING", "utf-8"),
    default_delimiter=",",
    log_level=os.environ.get("TREE_DIFF_LOG_LEVEL", "INFO").upper(),
    workbook_suffixes=frozenset(WORKBOOK_SUFFIXES),
)


@dataclass(frozen=True)
class SourceOptions:
    """How to read a source and which of its fields make up the key.

    Field references are names or zero-based positions. ``parent_fields`` and
    ``child_field`` take precedence over ``key_fields``; with none of them the
    first field is the key.
    """

    encoding: str = SETTINGS.default_encoding
    delimiter: str = SETTINGS.default_delimiter
    field_names: tuple[str, ...] | None = None
    ignore_header: bool = False
    key_fields: tuple[FieldRef, ...] = ()
    parent_fields: tuple[FieldRef, ...] = ()
    child_field: FieldRef | None = None
    sheet_name: str | None = None
