"""Application services orchestrating a diff run."""
from __future__ import annotations

from dataclasses import dataclass

from tree_diff.application.dto import DiffRequest, DiffResponse
from tree_diff.domain.models import DiffOptions, Side
from tree_diff.domain.repositories import SourceRepository
from tree_diff.domain.services import TreeDiffer
from tree_diff.infrastructure.repositories.sources import open_source


@dataclass(slots=True)
class DiffContext:
    left_repository: SourceRepository
    right_repository: SourceRepository
    options: DiffOptions


class DiffSourcesUseCase:
    def __init__(self, context: DiffContext) -> None:
        self._context = context

    @classmethod
    def from_request(cls, request: DiffRequest) -> "DiffSourcesUseCase":
        return cls(
            DiffContext(
                left_repository=open_source(request.left_path, request.source_options),
                right_repository=open_source(request.right_path, request.source_options),
                options=request.diff_options,
            )
        )

    def execute(self) -> DiffResponse:
        left = self._context.left_repository.load(Side.LEFT)
        right = self._context.right_repository.load(Side.RIGHT)
        differ = TreeDiffer(left, right, self._context.options)
        return DiffResponse(differ=differ, summary=differ.summary(), warnings=differ.warnings)
