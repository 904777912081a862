"""Summaries and action filters over a finished diff set."""
from __future__ import annotations

from typing import Mapping, Sequence

from .models import Action, CompositeKey, DiffOptions, DiffRecord

REPORTED_ACTIONS = (Action.ADD, Action.DELETE, Action.UPDATE, Action.MOVE)


def suppress(diffs: Mapping[CompositeKey, DiffRecord], options: DiffOptions) -> dict[CompositeKey, DiffRecord]:
    return {key: record for key, record in diffs.items() if not options.suppresses(record.action)}


def filter_diffs(diffs: Mapping[CompositeKey, DiffRecord], action: Action | str) -> dict[CompositeKey, DiffRecord]:
    if isinstance(action, str) and not isinstance(action, Action):
        action = Action.from_name(action)
    wanted = action.value.lower()
    return {key: record for key, record in diffs.items() if record.action.value.lower() == wanted}


def summarize(diffs: Mapping[CompositeKey, DiffRecord], warnings: Sequence[str] = ()) -> dict[str, int]:
    counts = {action.value: 0 for action in REPORTED_ACTIONS}
    for record in diffs.values():
        counts[record.action.value] += 1
    summary = {name: count for name, count in counts.items() if count}
    if warnings:
        summary["Warning"] = len(warnings)
    return summary
