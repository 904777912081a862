"""Command-line entrypoint for tree diffs."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from zipfile import BadZipFile

from tree_diff.application.dto import DiffRequest
from tree_diff.application.use_cases import DiffSourcesUseCase
from tree_diff.config import SETTINGS, SourceOptions
from tree_diff.domain.models import DiffOptions, FieldRef
from tree_diff.infrastructure.log_config import configure_logging
from tree_diff.infrastructure.storage.options_store import load_options
from tree_diff.presentation.diff_report import diffs_to_rows, render_csv, render_excel, render_html, render_text

logger = logging.getLogger(__name__)

FORMATS = ("text", "csv", "html", "xlsx")
FLAGS = ("ignore_adds", "ignore_deletes", "ignore_updates", "ignore_moves")


def parse_field_ref(value: str) -> FieldRef:
    value = value.strip()
    return int(value) if value.isdigit() else value


def parse_field_refs(value: str) -> tuple[FieldRef, ...]:
    """Split ``"0,name"`` into ``(0, "name")``; all-digit entries are indices."""
    refs: list[FieldRef] = []
    for part in value.split(","):
        if part.strip():
            refs.append(parse_field_ref(part))
    return tuple(refs)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Diff two versions of hierarchical tabular data")
    parser.add_argument("left", type=Path, help="Path to the left (from) CSV or Excel file")
    parser.add_argument("right", type=Path, help="Path to the right (to) CSV or Excel file")
    parser.add_argument("--key-fields", type=parse_field_refs, help="Comma-separated key fields, child last")
    parser.add_argument("--parent-fields", type=parse_field_refs, help="Comma-separated parent fields")
    parser.add_argument("--child-field", type=parse_field_ref, help="Field identifying a child within its parent")
    parser.add_argument("--field-names", type=str, help="Comma-separated field names for headerless input")
    parser.add_argument("--ignore-header", action="store_true", default=None, help="Skip the first row of each file")
    parser.add_argument("--ignore-fields", type=parse_field_refs, help="Comma-separated fields not to compare")
    for flag in FLAGS:
        parser.add_argument(f"--{flag.replace('_', '-')}", dest=flag, action="store_true", default=None)
    parser.add_argument("--encoding", type=str, help="Encoding of the input files")
    parser.add_argument("--delimiter", type=str, help="Field delimiter of delimited input")
    parser.add_argument("--sheet", type=str, help="Worksheet to read from Excel input")
    parser.add_argument("--options-file", type=Path, help="JSON file with saved source/diff options")
    parser.add_argument("--format", choices=FORMATS, default="text", help="Report format")
    parser.add_argument("--output", type=Path, help="Write the report here instead of stdout")
    parser.add_argument("--log-level", type=str, default=SETTINGS.log_level, help="Logging level")
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> DiffRequest:
    if args.options_file:
        source_options, diff_options = load_options(args.options_file)
    else:
        source_options, diff_options = SourceOptions(), DiffOptions()
    source_overrides = {
        "key_fields": args.key_fields,
        "parent_fields": args.parent_fields,
        "child_field": args.child_field,
        "field_names": tuple(name.strip() for name in args.field_names.split(",")) if args.field_names else None,
        "ignore_header": args.ignore_header,
        "encoding": args.encoding,
        "delimiter": args.delimiter.encode().decode("unicode_escape") if args.delimiter else None,
        "sheet_name": args.sheet,
    }
    source_options = replace(source_options, **{k: v for k, v in source_overrides.items() if v is not None})
    diff_overrides = {flag: getattr(args, flag) for flag in FLAGS}
    diff_overrides["ignore_fields"] = args.ignore_fields
    diff_options = replace(diff_options, **{k: v for k, v in diff_overrides.items() if v is not None})
    return DiffRequest(
        left_path=args.left,
        right_path=args.right,
        source_options=source_options,
        diff_options=diff_options,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.log_level)

    try:
        request = build_request(args)
        response = DiffSourcesUseCase.from_request(request).execute()
    except (ValueError, OSError, BadZipFile) as exc:
        # DiffConfigurationError and pandas ParserError are ValueErrors; missing files are OSErrors.
        print(f"error: {exc}", file=sys.stderr)
        return 2

    differ = response.differ
    if args.format == "text":
        report: bytes | str = render_text(differ.diffs, response.summary, response.warnings)
    else:
        rows = diffs_to_rows(differ.diffs, differ.key_schema)
        if args.format == "csv":
            report = render_csv(rows)
        elif args.format == "html":
            report = render_html(rows)
        else:
            report = render_excel(rows)

    if args.output:
        if isinstance(report, bytes):
            args.output.write_bytes(report)
        else:
            args.output.write_text(report, encoding="utf-8")
        logger.info("Wrote %s report to %s", args.format, args.output)
    elif isinstance(report, bytes):
        sys.stdout.buffer.write(report)
    else:
        sys.stdout.write(report)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
