"""Excel workbook parser producing source data."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pandas as pd

from tree_diff.config import SourceOptions
from tree_diff.domain.models import Side, SourceData
from tree_diff.infrastructure.parsing.utils import build_source, ensure_bytes, frame_to_records


def _engine_for(data: bytes) -> str:
    # Legacy .xls files are OLE2 compound documents; everything else is a zip container.
    return "xlrd" if data.startswith(b"\xd0\xcf\x11\xe0") else "openpyxl"


def list_sheets(data: bytes) -> list[str]:
    xls = pd.ExcelFile(BytesIO(data), engine=_engine_for(data))
    return list(xls.sheet_names)


def pick_sheet(data: bytes, preferred: str | None) -> str:
    sheets = list_sheets(data)
    if not sheets:
        raise ValueError("Workbook has no sheets")
    if not preferred:
        return sheets[0]
    if preferred in sheets:
        return preferred
    lower_map = {name.lower(): name for name in sheets}
    if preferred.lower() in lower_map:
        return lower_map[preferred.lower()]
    for name in sheets:
        if preferred.lower() in name.lower():
            return name
    return sheets[0]


def read_workbook_raw(data: bytes, sheet_name: str | None) -> pd.DataFrame:
    return pd.read_excel(
        BytesIO(data),
        sheet_name=pick_sheet(data, sheet_name),
        engine=_engine_for(data),
        header=None,
        dtype=str,
        keep_default_na=False,
    )


def workbook_to_source(
    source: BytesIO | Path | bytes,
    side: Side,
    options: SourceOptions | None = None,
    label: str | None = None,
) -> SourceData:
    options = options or SourceOptions()
    label = label or (str(source) if isinstance(source, Path) else f"{side.value} workbook")
    data = ensure_bytes(source)
    frame = read_workbook_raw(data, options.sheet_name)
    return build_source(frame_to_records(frame), options, side, label)
