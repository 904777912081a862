"""Structural diffs of parent-child tabular data."""
from tree_diff.application.use_cases import DiffContext, DiffSourcesUseCase
from tree_diff.domain.errors import DiffConfigurationError, TreeDiffError
from tree_diff.domain.models import Action, DiffOptions, DiffRecord, KeySchema
from tree_diff.domain.services import TreeDiffer
from tree_diff.infrastructure.repositories.sources import (
    ArraySource,
    DelimitedFileSource,
    WorkbookSource,
    open_source,
)

__all__ = [
    "Action",
    "ArraySource",
    "DelimitedFileSource",
    "DiffConfigurationError",
    "DiffContext",
    "DiffOptions",
    "DiffRecord",
    "DiffSourcesUseCase",
    "KeySchema",
    "TreeDiffError",
    "TreeDiffer",
    "WorkbookSource",
    "open_source",
]
