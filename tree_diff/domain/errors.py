"""Exceptions raised by the diff engine."""
from __future__ import annotations


class TreeDiffError(Exception):
    """Base class for tree diff failures."""


class DiffConfigurationError(TreeDiffError, ValueError):
    """Key or field configuration that makes a diff impossible.

    Raised before any matching happens; no partial diff is produced.
    """
