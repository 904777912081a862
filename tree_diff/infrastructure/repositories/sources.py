"""File and in-memory repositories supplying diff sources."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Sequence

from tree_diff.config import SETTINGS, SourceOptions
from tree_diff.domain.models import Side, SourceData
from tree_diff.domain.repositories import SourceRepository
from tree_diff.infrastructure.parsing.delimited import delimited_to_source
from tree_diff.infrastructure.parsing.utils import build_source, ensure_bytes
from tree_diff.infrastructure.parsing.workbook import workbook_to_source


class DelimitedFileSource(SourceRepository):
    def __init__(self, source: BytesIO | Path | bytes, options: SourceOptions | None = None, label: str | None = None) -> None:
        self._source = ensure_bytes(source)
        self._options = options or SourceOptions()
        self._label = label or (str(source) if isinstance(source, Path) else None)

    def load(self, side: Side) -> SourceData:
        return delimited_to_source(self._source, side, self._options, label=self._label)


class WorkbookSource(SourceRepository):
    def __init__(self, source: BytesIO | Path | bytes, options: SourceOptions | None = None, label: str | None = None) -> None:
        self._source = ensure_bytes(source)
        self._options = options or SourceOptions()
        self._label = label or (str(source) if isinstance(source, Path) else None)

    def load(self, side: Side) -> SourceData:
        return workbook_to_source(self._source, side, self._options, label=self._label)


class ArraySource(SourceRepository):
    """Rows supplied in memory as a list of field lists."""

    def __init__(self, rows: Sequence[Sequence[Any]], options: SourceOptions | None = None, label: str | None = None) -> None:
        self._rows = [["" if value is None else str(value) for value in row] for row in rows]
        self._options = options or SourceOptions()
        self._label = label

    def load(self, side: Side) -> SourceData:
        return build_source(self._rows, self._options, side, self._label or f"{side.value} array")


def open_source(path: Path | str, options: SourceOptions | None = None) -> SourceRepository:
    """Pick a repository for ``path`` by file suffix."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Missing input file: {path}")
    if path.suffix.lower() in SETTINGS.workbook_suffixes:
        return WorkbookSource(path, options)
    return DelimitedFileSource(path, options)
