"""Index rows of one source by composite key and sibling group."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .keys import KeyBuilder, format_key
from .models import CompositeKey, Row, Side

logger = logging.getLogger(__name__)


@dataclass
class SourceIndex:
    side: Side
    field_names: tuple[str, ...]
    rows: dict[CompositeKey, Row] = field(default_factory=dict)
    siblings: dict[CompositeKey, list[CompositeKey]] = field(default_factory=dict)
    positions: dict[CompositeKey, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def __contains__(self, key: object) -> bool:
        return key in self.rows

    def sibling_position(self, key: CompositeKey) -> int:
        return self.positions[key]

    def siblings_of(self, parent_key: CompositeKey) -> Sequence[CompositeKey]:
        return self.siblings.get(parent_key, ())

    def field_indices(self, names: Iterable[str]) -> dict[str, int]:
        positions = {name: idx for idx, name in enumerate(self.field_names)}
        return {name: positions[name] for name in names}


def index_rows(
    rows: Iterable[Row],
    field_names: Sequence[str],
    key_builder: KeyBuilder,
    side: Side,
) -> SourceIndex:
    """Build the key and sibling index for one side in a single pass.

    Rows whose field count does not match ``field_names`` are skipped with a
    warning. When two rows share a key the later one replaces the earlier one,
    both in the key index and in its sibling list.
    """
    index = SourceIndex(side=side, field_names=tuple(field_names))
    expected = len(field_names)

    for row in rows:
        if len(row.values) != expected:
            message = (
                f"Row {row.line_number} in {side.label} source has {len(row.values)} "
                f"field(s), expected {expected}; row skipped"
            )
            logger.warning(message)
            index.warnings.append(message)
            continue

        key = key_builder.key(row.values)
        parent = key_builder.parent_key(row.values)
        siblings = index.siblings.setdefault(parent, [])
        earlier = index.rows.get(key)
        if earlier is not None:
            message = (
                f"Duplicate key '{format_key(key)}' in {side.label} source: row {row.line_number} "
                f"replaces row {earlier.line_number}"
            )
            logger.warning(message)
            index.warnings.append(message)
            siblings.remove(key)
        index.rows[key] = row
        siblings.append(key)

    for keys in index.siblings.values():
        for position, key in enumerate(keys):
            index.positions[key] = position

    logger.debug("Indexed %d row(s) in %d sibling group(s) for %s", len(index.rows), len(index.siblings), side.value)
    return index
