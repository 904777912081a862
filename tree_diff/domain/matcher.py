"""Matching of two indexed sources into classified diff records."""
from __future__ import annotations

from typing import Mapping, Sequence

from .indexer import SourceIndex
from .models import Action, CompositeKey, DiffRecord, Row


def classify(changes: Mapping[str, tuple[str, str]], position_change: tuple[int, int] | None) -> Action:
    if changes:
        return Action.UPDATE
    if position_change is not None:
        return Action.MOVE
    return Action.NONE


def compare_fields(
    left_row: Row,
    right_row: Row,
    left_indices: Mapping[str, int],
    right_indices: Mapping[str, int],
) -> dict[str, tuple[str, str]]:
    changes: dict[str, tuple[str, str]] = {}
    for name, left_idx in left_indices.items():
        old = left_row.values[left_idx]
        new = right_row.values[right_indices[name]]
        if old != new:
            changes[name] = (old, new)
    return changes


class SiblingOrder:
    """Relative order of the keys a sibling group shares between both sides.

    Keys added or deleted within a group do not take part, so a sibling only
    counts as moved when its rank among the common keys changes.
    """

    def __init__(self, left: SourceIndex, right: SourceIndex) -> None:
        self._left = left
        self._right = right
        self._ranks: dict[CompositeKey, tuple[dict[CompositeKey, int], dict[CompositeKey, int]]] = {}

    def _group_ranks(self, parent: CompositeKey) -> tuple[dict[CompositeKey, int], dict[CompositeKey, int]]:
        ranks = self._ranks.get(parent)
        if ranks is None:
            left_siblings = self._left.siblings_of(parent)
            right_siblings = self._right.siblings_of(parent)
            left_common = [key for key in left_siblings if key in self._right]
            right_common = [key for key in right_siblings if key in self._left]
            ranks = (
                {key: rank for rank, key in enumerate(left_common)},
                {key: rank for rank, key in enumerate(right_common)},
            )
            self._ranks[parent] = ranks
        return ranks

    def position_change(self, key: CompositeKey, parent: CompositeKey) -> tuple[int, int] | None:
        left_ranks, right_ranks = self._group_ranks(parent)
        if left_ranks[key] == right_ranks[key]:
            return None
        return self._left.sibling_position(key), self._right.sibling_position(key)


def match_rows(
    left: SourceIndex,
    right: SourceIndex,
    diff_fields: Sequence[str],
    parent_length: int,
) -> dict[CompositeKey, DiffRecord]:
    """Classify every key seen on either side.

    Deletes come first in left input order, followed by adds, updates and
    moves in right input order. Matched keys without any difference are left
    out. ``parent_length`` is the number of parent fields leading each key.
    """
    left_indices = left.field_indices(diff_fields)
    right_indices = right.field_indices(diff_fields)
    order = SiblingOrder(left, right)
    diffs: dict[CompositeKey, DiffRecord] = {}

    for key, left_row in left.rows.items():
        if key not in right:
            diffs[key] = DiffRecord(key=key, action=Action.DELETE, left_row=left_row)

    for key, right_row in right.rows.items():
        left_row = left.rows.get(key)
        if left_row is None:
            diffs[key] = DiffRecord(key=key, action=Action.ADD, right_row=right_row)
            continue
        changes = compare_fields(left_row, right_row, left_indices, right_indices)
        position_change = order.position_change(key, key[:parent_length])
        action = classify(changes, position_change)
        if action is Action.NONE:
            continue
        diffs[key] = DiffRecord(
            key=key,
            action=action,
            left_row=left_row,
            right_row=right_row,
            changes=changes,
            position_change=position_change,
        )
    return diffs
