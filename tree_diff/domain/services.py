"""Domain service running a diff between two ingested sources."""
from __future__ import annotations

import logging

from .errors import DiffConfigurationError
from .fields import resolve_diff_fields
from .indexer import index_rows
from .keys import KeyBuilder
from .matcher import match_rows
from .models import Action, CompositeKey, DiffOptions, DiffRecord, KeySchema, SourceData
from .results import filter_diffs, summarize, suppress

logger = logging.getLogger(__name__)


class TreeDiffer:
    """Diffs hierarchical tabular data provided as a left (from) and right (to) source.

    Rows are matched on the key schema the sources share. Re-running ``diff``
    with other options reuses the rows already ingested.
    """

    def __init__(self, left: SourceData, right: SourceData, options: DiffOptions | None = None) -> None:
        if not left.field_names:
            raise DiffConfigurationError("No field names found in left (from) source")
        if not right.field_names:
            raise DiffConfigurationError("No field names found in right (to) source")
        if left.key_schema != right.key_schema:
            raise DiffConfigurationError(
                f"Left and right sources use different key fields: "
                f"{list(left.key_schema.fields)} vs {list(right.key_schema.fields)}"
            )
        self._left = left
        self._right = right
        self._options = DiffOptions()
        self._diffs: dict[CompositeKey, DiffRecord] = {}
        self._diff_fields: list[str] = []
        self._diff_warnings: list[str] = []
        self._summary: dict[str, int] = {}
        self._summary_dirty = True
        self.diff(options)

    @property
    def left(self) -> SourceData:
        return self._left

    @property
    def right(self) -> SourceData:
        return self._right

    @property
    def key_schema(self) -> KeySchema:
        return self._left.key_schema

    @property
    def options(self) -> DiffOptions:
        return self._options

    @property
    def diffs(self) -> dict[CompositeKey, DiffRecord]:
        return self._diffs

    @property
    def diff_fields(self) -> list[str]:
        return list(self._diff_fields)

    def diff(self, options: DiffOptions | None = None) -> dict[CompositeKey, DiffRecord]:
        options = options or DiffOptions()
        key_schema = self.key_schema
        left_keys = KeyBuilder(key_schema, self._left.field_names, f"left (from) source '{self._left.label}'")
        right_keys = KeyBuilder(key_schema, self._right.field_names, f"right (to) source '{self._right.label}'")

        diff_fields, warnings = resolve_diff_fields(
            self._left.field_names, self._right.field_names, options.ignore_fields
        )
        left_index = index_rows(self._left.rows, self._left.field_names, left_keys, self._left.side)
        right_index = index_rows(self._right.rows, self._right.field_names, right_keys, self._right.side)
        warnings.extend(left_index.warnings)
        warnings.extend(right_index.warnings)

        diffs = match_rows(left_index, right_index, diff_fields, len(key_schema.parent_fields))
        diffs = suppress(diffs, options)

        self._options = options
        self._diff_fields = diff_fields
        self._diff_warnings = warnings
        self._diffs = diffs
        self._summary_dirty = True
        logger.info(
            "Diffed %s (%d rows) against %s (%d rows): %d difference(s), %d warning(s)",
            self._left.label,
            len(left_index),
            self._right.label,
            len(right_index),
            len(diffs),
            len(warnings),
        )
        return diffs

    def summary(self) -> dict[str, int]:
        """Count of records per action, plus ``Warning`` when there are warnings."""
        if self._summary_dirty:
            self._summary = summarize(self._diffs, self.warnings)
            self._summary_dirty = False
        return dict(self._summary)

    def filter_by_action(self, action: Action | str) -> dict[CompositeKey, DiffRecord]:
        return filter_diffs(self._diffs, action)

    def adds(self) -> dict[CompositeKey, DiffRecord]:
        return self.filter_by_action(Action.ADD)

    def deletes(self) -> dict[CompositeKey, DiffRecord]:
        return self.filter_by_action(Action.DELETE)

    def updates(self) -> dict[CompositeKey, DiffRecord]:
        return self.filter_by_action(Action.UPDATE)

    def moves(self) -> dict[CompositeKey, DiffRecord]:
        return self.filter_by_action(Action.MOVE)

    @property
    def warnings(self) -> list[str]:
        return list(self._left.warnings) + list(self._right.warnings) + self._diff_warnings

    @property
    def diff_warnings(self) -> list[str]:
        return list(self._diff_warnings)
