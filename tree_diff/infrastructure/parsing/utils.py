"""Shared parsing utilities for source ingestion."""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from tree_diff.config import SourceOptions
from tree_diff.domain.errors import DiffConfigurationError
from tree_diff.domain.models import FieldRef, KeySchema, Row, Side, SourceData

logger = logging.getLogger(__name__)


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def decode_text(data: bytes, encoding: str, label: str) -> tuple[str, list[str]]:
    """Decode ``data``, replacing undecodable bytes and reporting that as a warning."""
    try:
        return data.decode(encoding), []
    except UnicodeDecodeError as exc:
        message = (
            f"Source '{label}' is not valid {encoding} (first bad byte at offset {exc.start}); "
            f"undecodable bytes were replaced"
        )
        logger.warning(message)
        return data.decode(encoding, errors="replace"), [message]


def frame_to_records(frame: pd.DataFrame) -> list[list[str]]:
    """Turn a string-typed frame into row lists, trimming the padding pandas adds to short rows."""
    records: list[list[str]] = []
    for values in frame.itertuples(index=False, name=None):
        record = list(values)
        while record and pd.isna(record[-1]):
            record.pop()
        records.append(["" if pd.isna(value) else str(value) for value in record])
    return records


def resolve_field_ref(ref: FieldRef, field_names: Sequence[str], label: str) -> str:
    if isinstance(ref, int) and not isinstance(ref, bool):
        if not 0 <= ref < len(field_names):
            raise DiffConfigurationError(
                f"Key field index {ref} is out of range for source '{label}' with {len(field_names)} field(s)"
            )
        return field_names[ref]
    name = str(ref)
    if name not in field_names:
        raise DiffConfigurationError(f"Key field '{name}' not found in source '{label}' fields {list(field_names)}")
    return name


def resolve_key_schema(field_names: Sequence[str], options: SourceOptions, label: str) -> KeySchema:
    if options.parent_fields or options.child_field is not None:
        if options.child_field is None:
            raise DiffConfigurationError("A child field is required when parent fields are given")
        refs: tuple[FieldRef, ...] = tuple(options.parent_fields) + (options.child_field,)
    elif options.key_fields:
        refs = tuple(options.key_fields)
    else:
        refs = (0,)
    return KeySchema(tuple(resolve_field_ref(ref, field_names, label) for ref in refs))


def build_source(
    records: Iterable[Sequence[str]],
    options: SourceOptions,
    side: Side,
    label: str,
    warnings: Sequence[str] = (),
) -> SourceData:
    """Split header and data rows and resolve the key schema for one source.

    Record numbers are 1-based positions in the source, header included.
    """
    numbered = [(number, list(record)) for number, record in enumerate(records, start=1)]
    if options.ignore_header and not options.field_names:
        raise DiffConfigurationError("ignore_header can only be used together with field_names")

    if options.field_names:
        field_names = tuple(options.field_names)
        if options.ignore_header:
            numbered = numbered[1:]
    elif numbered:
        field_names = tuple(str(name) for name in numbered[0][1])
        numbered = numbered[1:]
    else:
        field_names = ()

    if not field_names:
        raise DiffConfigurationError(f"No field names found in source '{label}'")
    duplicates = sorted({name for name in field_names if field_names.count(name) > 1})
    if duplicates:
        raise DiffConfigurationError(f"Duplicate field names {duplicates} in source '{label}'")

    key_schema = resolve_key_schema(field_names, options, label)
    rows = tuple(Row(values=tuple(values), side=side, line_number=number) for number, values in numbered)
    logger.info("Read %d row(s) with %d field(s) from %s", len(rows), len(field_names), label)
    return SourceData(
        label=label,
        side=side,
        field_names=field_names,
        rows=rows,
        key_schema=key_schema,
        warnings=tuple(warnings),
    )
