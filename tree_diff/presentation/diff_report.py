"""Report generators for diff results."""
from __future__ import annotations

import csv
import html
import io
from typing import Mapping, Sequence

import pandas as pd

from tree_diff.config import SETTINGS
from tree_diff.domain.keys import format_key
from tree_diff.domain.models import CompositeKey, DiffRecord, KeySchema

ACTION_COLOURS = {
    "Add": "#C6EFCE",
    "Delete": "#FFC7CE",
    "Update": "#FFFF00",
    "Move": "#BDD7EE",
}


def describe_changes(record: DiffRecord) -> str:
    return "; ".join(f"{name}: '{old}' -> '{new}'" for name, (old, new) in record.changes.items())


def diffs_to_rows(diffs: Mapping[CompositeKey, DiffRecord], key_schema: KeySchema) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for key, record in diffs.items():
        row = {"action": record.action.value}
        row.update(dict(zip(key_schema.fields, key)))
        old_position, new_position = record.position_change or ("", "")
        row.update(
            {
                "left_row": str(record.left_row.line_number) if record.left_row else "",
                "right_row": str(record.right_row.line_number) if record.right_row else "",
                "old_position": str(old_position),
                "new_position": str(new_position),
                "changes": describe_changes(record),
            }
        )
        rows.append(row)
    return rows


def render_csv(rows: Sequence[dict[str, str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(rows: Sequence[dict[str, str]]) -> str:
    if not rows:
        return "<p>No differences detected.</p>"
    header = "".join(f"<th>{html.escape(col)}</th>" for col in rows[0].keys())
    body_parts = []
    for row in rows:
        colour = ACTION_COLOURS.get(row.get("action", ""), "")
        style = f' style="background-color:{colour}"' if colour else ""
        cells = "".join(f"<td>{html.escape(value)}</td>" for value in row.values())
        body_parts.append(f"<tr{style}>{cells}</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"


def render_excel(rows: Sequence[dict[str, str]], sheet_name: str = "diffs") -> bytes:
    frame = pd.DataFrame(list(rows))
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
        if not frame.empty:
            workbook = writer.book
            worksheet = writer.sheets[sheet_name]
            last_row = len(frame)
            last_col = len(frame.columns) - 1
            # Action is the first column; colour whole rows by it.
            for action, colour in ACTION_COLOURS.items():
                worksheet.conditional_format(1, 0, last_row, last_col, {
                    "type": "formula",
                    "criteria": f'=$A2="{action}"',
                    "format": workbook.add_format({"bg_color": colour}),
                })
    return buffer.getvalue()


def render_text(
    diffs: Mapping[CompositeKey, DiffRecord],
    summary: Mapping[str, int],
    warnings: Sequence[str] = (),
) -> str:
    lines = ["Diff Summary", "============"]
    lines.extend(f"{name}: {count}" for name, count in summary.items())
    if not diffs:
        lines.append("No differences detected.")
    else:
        lines.append("")
        for key, record in diffs.items():
            line = f"{record.action.value:<6} {format_key(key, SETTINGS.key_separator)}"
            if record.moved:
                old, new = record.position_change
                line += f" [position {old} -> {new}]"
            if record.changes:
                line += f" {describe_changes(record)}"
            lines.append(line)
    if warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"- {warning}" for warning in warnings)
    return "\n".join(lines) + "\n"
