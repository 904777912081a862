"""Storage helpers for diff option presets."""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from tree_diff.config import BASE_DIR, SourceOptions
from tree_diff.domain.errors import DiffConfigurationError
from tree_diff.domain.models import DiffOptions, FieldRef

DEFAULT_PATH = BASE_DIR / "tree_diff_options.json"

_FLAGS = ("ignore_adds", "ignore_deletes", "ignore_updates", "ignore_moves")


def _normalize_refs(raw: Any) -> tuple[FieldRef, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (str, int)):
        raw = [raw]
    refs: list[FieldRef] = []
    for item in raw:
        if isinstance(item, int) and not isinstance(item, bool):
            refs.append(item)
            continue
        text = str(item).strip()
        if text:
            refs.append(text)
    return tuple(refs)


def _source_options(raw: dict[str, Any]) -> SourceOptions:
    defaults = SourceOptions()
    field_names = raw.get("field_names")
    child = _normalize_refs(raw.get("child_field"))
    return SourceOptions(
        encoding=str(raw.get("encoding") or defaults.encoding),
        delimiter=str(raw.get("delimiter") or defaults.delimiter),
        field_names=tuple(str(name) for name in field_names) if field_names else None,
        ignore_header=bool(raw.get("ignore_header", False)),
        key_fields=_normalize_refs(raw.get("key_fields")),
        parent_fields=_normalize_refs(raw.get("parent_fields")),
        child_field=child[0] if child else None,
        sheet_name=raw.get("sheet_name") or None,
    )


def _diff_options(raw: dict[str, Any]) -> DiffOptions:
    return DiffOptions(
        ignore_fields=_normalize_refs(raw.get("ignore_fields")),
        **{flag: bool(raw.get(flag, False)) for flag in _FLAGS},
    )


def load_options(path: Path | None = None) -> tuple[SourceOptions, DiffOptions]:
    options_path = path or DEFAULT_PATH
    if not options_path.exists():
        return SourceOptions(), DiffOptions()
    try:
        data = json.loads(options_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise DiffConfigurationError(f"Options file {options_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DiffConfigurationError(f"Options file {options_path} must contain a JSON object")
    return _source_options(data.get("source") or {}), _diff_options(data.get("diff") or {})


def save_options(source: SourceOptions, diff: DiffOptions, path: Path | None = None) -> Path:
    options_path = path or DEFAULT_PATH
    payload = {"source": asdict(source), "diff": asdict(diff)}
    options_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return options_path
