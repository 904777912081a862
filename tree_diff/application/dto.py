"""Application-level DTOs for diff runs."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tree_diff.config import SourceOptions
from tree_diff.domain.models import DiffOptions
from tree_diff.domain.services import TreeDiffer


@dataclass(slots=True, frozen=True)
class DiffRequest:
    left_path: Path
    right_path: Path
    source_options: SourceOptions
    diff_options: DiffOptions


@dataclass(slots=True, frozen=True)
class DiffResponse:
    differ: TreeDiffer
    summary: dict[str, int]
    warnings: list[str]
