"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol

from .models import Side, SourceData


class SourceRepository(Protocol):
    """Provides the ingested rows of one side of a diff."""

    def load(self, side: Side) -> SourceData:
        ...
