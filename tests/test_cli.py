import json
from pathlib import Path

import pandas as pd

from tree_diff.cli import main, parse_field_refs
from tree_diff.infrastructure.parsing import workbook

LEFT = "parent,child,val\nA,1,x\nA,2,y\n"
RIGHT = "parent,child,val,extra\nA,2,y,e\nA,1,z,e\n"


def write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    left = tmp_path / "left.csv"
    right = tmp_path / "right.csv"
    left.write_text(LEFT, encoding="utf-8")
    right.write_text(RIGHT, encoding="utf-8")
    return left, right


def test_parse_field_refs():
    assert parse_field_refs("0, name ,,2") == (0, "name", 2)


def test_text_report(tmp_path: Path, capsys):
    left, right = write_inputs(tmp_path)

    code = main([str(left), str(right), "--parent-fields", "parent", "--child-field", "child"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Update: 1" in out
    assert "Move: 1" in out
    assert "Field 'extra' is missing from the left (from) source" in out


def test_ignore_flags(tmp_path: Path, capsys):
    left, right = write_inputs(tmp_path)

    code = main([str(left), str(right), "--key-fields", "0,1", "--ignore-moves", "--ignore-fields", "val"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Move" not in out
    assert "Update" not in out


def test_csv_report_to_file(tmp_path: Path):
    left, right = write_inputs(tmp_path)
    output = tmp_path / "diff.csv"

    code = main([str(left), str(right), "--key-fields", "parent,child", "--format", "csv", "--output", str(output)])

    assert code == 0
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "action,parent,child,left_row,right_row,old_position,new_position,changes"
    assert len(lines) == 3


def test_options_file_with_overrides(tmp_path: Path, capsys):
    left, right = write_inputs(tmp_path)
    options = tmp_path / "options.json"
    options.write_text(json.dumps({"source": {"key_fields": ["parent", "child"]}, "diff": {"ignore_updates": True}}))

    code = main([str(left), str(right), "--options-file", str(options), "--ignore-moves"])

    out = capsys.readouterr().out
    assert code == 0
    assert "No differences detected." in out


def test_bad_key_field_exits_with_error(tmp_path: Path, capsys):
    left, right = write_inputs(tmp_path)

    code = main([str(left), str(right), "--key-fields", "missing"])

    assert code == 2
    assert "missing" in capsys.readouterr().err


def test_missing_input_file(tmp_path: Path, capsys):
    left, _ = write_inputs(tmp_path)

    code = main([str(left), str(tmp_path / "nope.csv")])

    assert code == 2
    assert "Missing input file" in capsys.readouterr().err


def test_workbook_without_sheets_exits_with_error(tmp_path: Path, capsys, monkeypatch):
    left = tmp_path / "left.xlsx"
    right = tmp_path / "right.xlsx"
    for path in (left, right):
        pd.DataFrame({"parent": ["A"], "child": ["1"]}).to_excel(path, index=False)
    monkeypatch.setattr(workbook, "list_sheets", lambda data: [])

    code = main([str(left), str(right)])

    assert code == 2
    assert "Workbook has no sheets" in capsys.readouterr().err


def test_corrupt_workbook_exits_with_error(tmp_path: Path, capsys):
    left, right = tmp_path / "left.xlsx", tmp_path / "right.xlsx"
    left.write_bytes(b"not a workbook")
    right.write_bytes(b"not a workbook")

    code = main([str(left), str(right)])

    assert code == 2
    assert "error: " in capsys.readouterr().err
