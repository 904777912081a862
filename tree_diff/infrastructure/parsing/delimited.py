"""Delimited text (CSV, TSV) parser producing source data."""
from __future__ import annotations

import logging
from io import BytesIO, StringIO
from pathlib import Path

import pandas as pd

from tree_diff.config import SourceOptions
from tree_diff.domain.models import Side, SourceData
from tree_diff.infrastructure.parsing.utils import build_source, decode_text, ensure_bytes, frame_to_records

logger = logging.getLogger(__name__)


def read_delimited_raw(
    text: str,
    delimiter: str,
    width: int | None = None,
) -> tuple[pd.DataFrame, list[list[str]]]:
    """Read every line as strings; lines wider than the row width are returned separately.

    The row width is ``width`` when given (the declared field names), otherwise the
    width of the first line.
    """
    too_long: list[list[str]] = []

    def collect(bad_line: list[str]) -> None:
        too_long.append(bad_line)
        return None

    try:
        frame = pd.read_csv(
            StringIO(text),
            sep=delimiter,
            header=None,
            names=list(range(width)) if width else None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=collect,
        )
    except pd.errors.EmptyDataError:
        frame = pd.DataFrame()
    return frame, too_long


def delimited_to_source(
    source: BytesIO | Path | bytes,
    side: Side,
    options: SourceOptions | None = None,
    label: str | None = None,
) -> SourceData:
    options = options or SourceOptions()
    label = label or (str(source) if isinstance(source, Path) else f"{side.value} input")
    text, warnings = decode_text(ensure_bytes(source), options.encoding, label)
    width = len(options.field_names) if options.field_names else None
    frame, too_long = read_delimited_raw(text, options.delimiter, width)
    for bad_line in too_long:
        message = (
            f"Skipped a row in '{label}' with {len(bad_line)} field(s), "
            f"more than the {len(frame.columns)} expected: {bad_line}"
        )
        logger.warning(message)
        warnings.append(message)
    return build_source(frame_to_records(frame), options, side, label, warnings)
