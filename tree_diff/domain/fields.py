"""Resolution of the field set compared between two sources."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .models import FieldRef

logger = logging.getLogger(__name__)


def resolve_diff_fields(
    left_fields: Sequence[str],
    right_fields: Sequence[str],
    ignore_fields: Iterable[FieldRef] = (),
) -> tuple[list[str], list[str]]:
    """Return the diffable fields in right-schema order, plus warnings.

    ``ignore_fields`` may hold names or positions in the right schema; those
    are dropped without comment. A right-only field is dropped with a warning;
    a left-only field is simply never compared.
    """
    ignored = set(ignore_fields or ())
    left_names = set(left_fields)
    diff_fields: list[str] = []
    warnings: list[str] = []
    for idx, name in enumerate(right_fields):
        if name in ignored or idx in ignored:
            continue
        if name not in left_names:
            message = f"Field '{name}' is missing from the left (from) source, and won't be diffed"
            logger.warning(message)
            warnings.append(message)
            continue
        diff_fields.append(name)
    return diff_fields, warnings
