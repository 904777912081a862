from dataclasses import replace

import pytest

from tree_diff.config import SourceOptions
from tree_diff.domain.errors import DiffConfigurationError
from tree_diff.domain.models import Action, DiffOptions, Side
from tree_diff.domain.services import TreeDiffer
from tree_diff.infrastructure.repositories.sources import ArraySource

KEYED = SourceOptions(parent_fields=("parent",), child_field="child")
HEADER = ["parent", "child", "val"]


def make_differ(left_rows, right_rows, options: DiffOptions | None = None, source_options: SourceOptions = KEYED) -> TreeDiffer:
    left = ArraySource(left_rows, source_options).load(Side.LEFT)
    right = ArraySource(right_rows, source_options).load(Side.RIGHT)
    return TreeDiffer(left, right, options)


def mixed_differ(options: DiffOptions | None = None) -> TreeDiffer:
    left = [HEADER, ["A", "1", "x"], ["A", "2", "y"], ["A", "3", "z"], ["B", "1", "gone"]]
    right = [HEADER, ["A", "2", "y"], ["A", "1", "x"], ["A", "3", "changed"], ["C", "1", "new"]]
    return make_differ(left, right, options)


def test_diff_against_itself_is_empty():
    rows = [HEADER, ["A", "1", "x"], ["A", "2", "y"]]

    differ = make_differ(rows, rows)

    assert differ.diffs == {}
    assert differ.summary() == {}
    assert differ.warnings == []


def test_swapped_rows_are_two_moves():
    differ = make_differ(
        [HEADER, ["A", "1", "x"], ["A", "2", "y"]],
        [HEADER, ["A", "2", "y"], ["A", "1", "x"]],
    )

    assert differ.summary() == {"Move": 2}
    assert set(differ.moves()) == {("A", "1"), ("A", "2")}
    assert differ.updates() == {}
    assert differ.adds() == {}
    assert differ.deletes() == {}


def test_changed_value_is_one_update():
    differ = make_differ(
        [HEADER, ["A", "1", "x"]],
        [HEADER, ["A", "1", "z"]],
    )

    assert list(differ.diffs) == [("A", "1")]
    record = differ.diffs[("A", "1")]
    assert record.action is Action.UPDATE
    assert record.changes == {"val": ("x", "z")}
    assert record.left_row.line_number == 2


def test_extra_right_field_warns_and_is_never_compared():
    differ = make_differ(
        [HEADER, ["A", "1", "x"]],
        [HEADER + ["extra"], ["A", "1", "x", "anything"]],
    )

    assert differ.diffs == {}
    assert differ.diff_fields == ["parent", "child", "val"]
    assert differ.warnings == ["Field 'extra' is missing from the left (from) source, and won't be diffed"]
    assert differ.summary() == {"Warning": 1}


def test_mixed_summary_and_filters():
    differ = mixed_differ()

    assert differ.summary() == {"Add": 1, "Delete": 1, "Update": 1, "Move": 2}
    assert list(differ.adds()) == [("C", "1")]
    assert list(differ.deletes()) == [("B", "1")]
    assert list(differ.updates()) == [("A", "3")]
    assert set(differ.moves()) == {("A", "1"), ("A", "2")}


def test_filter_by_action_name_is_case_insensitive():
    differ = mixed_differ()

    assert differ.filter_by_action("update") == differ.updates()
    assert differ.filter_by_action("MOVES") == differ.moves()
    assert differ.filter_by_action(Action.ADD) == differ.adds()


def test_unknown_action_name_is_rejected():
    differ = mixed_differ()

    with pytest.raises(ValueError):
        differ.filter_by_action("rename")


def test_suppression_is_a_post_filter():
    full = mixed_differ().diffs
    without_moves = mixed_differ(DiffOptions(ignore_moves=True)).diffs

    assert without_moves == {key: record for key, record in full.items() if record.action is not Action.MOVE}


@pytest.mark.parametrize(
    "flag, action",
    [
        ("ignore_adds", Action.ADD),
        ("ignore_deletes", Action.DELETE),
        ("ignore_updates", Action.UPDATE),
        ("ignore_moves", Action.MOVE),
    ],
)
def test_each_suppression_flag_removes_its_action(flag, action):
    differ = mixed_differ(DiffOptions(**{flag: True}))

    assert action not in {record.action for record in differ.diffs.values()}
    assert len(differ.diffs) == len(mixed_differ().diffs) - len(mixed_differ().filter_by_action(action))


def test_suppressed_update_is_not_kept_as_move():
    differ = make_differ(
        [HEADER, ["A", "1", "x"], ["A", "2", "y"]],
        [HEADER, ["A", "2", "y"], ["A", "1", "changed"]],
        DiffOptions(ignore_updates=True),
    )

    assert list(differ.diffs) == [("A", "2")]
    assert differ.diffs[("A", "2")].action is Action.MOVE


def test_ignore_moves_keeps_position_change_on_updates():
    differ = make_differ(
        [HEADER, ["A", "1", "x"], ["A", "2", "y"]],
        [HEADER, ["A", "2", "y"], ["A", "1", "changed"]],
        DiffOptions(ignore_moves=True),
    )

    assert list(differ.diffs) == [("A", "1")]
    assert differ.diffs[("A", "1")].position_change == (0, 1)


def test_ignore_fields_excludes_from_comparison():
    differ = make_differ(
        [HEADER, ["A", "1", "x"]],
        [HEADER, ["A", "1", "z"]],
        DiffOptions(ignore_fields=("val",)),
    )

    assert differ.diffs == {}
    assert differ.diff_fields == ["parent", "child"]


def test_rediff_recomputes_and_invalidates_summary():
    differ = mixed_differ()
    assert differ.summary()["Move"] == 2

    differ.diff(DiffOptions(ignore_moves=True, ignore_adds=True))

    assert differ.summary() == {"Delete": 1, "Update": 1}
    assert differ.options.ignore_moves


def test_summary_is_a_copy():
    differ = mixed_differ()

    differ.summary()["Add"] = 99

    assert differ.summary()["Add"] == 1


def test_duplicate_keys_surface_as_diff_warnings():
    differ = make_differ(
        [HEADER, ["A", "1", "x"], ["A", "1", "y"]],
        [HEADER, ["A", "1", "y"]],
    )

    assert differ.diffs == {}
    assert len(differ.diff_warnings) == 1
    assert "Duplicate key 'A~1'" in differ.diff_warnings[0]
    assert differ.summary() == {"Warning": 1}


def test_short_rows_are_skipped_with_warning():
    differ = make_differ(
        [HEADER, ["A", "1", "x"], ["A", "2"]],
        [HEADER, ["A", "1", "x"]],
    )

    assert differ.diffs == {}
    assert "has 2 field(s), expected 3" in differ.diff_warnings[0]


def test_child_only_key_compares_order_across_whole_source():
    differ = make_differ(
        [["id", "val"], ["1", "a"], ["2", "b"]],
        [["id", "val"], ["2", "b"], ["1", "a"]],
        source_options=SourceOptions(key_fields=("id",)),
    )

    assert differ.summary() == {"Move": 2}


def test_mismatched_key_schemas_are_fatal():
    left = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.LEFT)
    right = ArraySource([["parent", "kid", "val"], ["A", "1", "x"]], SourceOptions(key_fields=(0,))).load(Side.RIGHT)

    with pytest.raises(DiffConfigurationError, match="different key fields"):
        TreeDiffer(left, right)


def test_key_field_absent_from_source_is_fatal_before_matching():
    left = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.LEFT)
    right = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.RIGHT)
    right = replace(right, field_names=("parent", "kid", "val"))

    with pytest.raises(DiffConfigurationError, match="child"):
        TreeDiffer(left, right)


def test_source_without_fields_is_fatal():
    left = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.LEFT)

    with pytest.raises(DiffConfigurationError, match="No field names found in right"):
        TreeDiffer(left, replace(left, side=Side.RIGHT, field_names=()))


def test_ingestion_warnings_are_included():
    left = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.LEFT)
    right = ArraySource([HEADER, ["A", "1", "x"]], KEYED).load(Side.RIGHT)
    right = replace(right, warnings=("bad bytes",))

    differ = TreeDiffer(left, right)

    assert differ.warnings == ["bad bytes"]
    assert differ.diff_warnings == []
    assert differ.summary() == {"Warning": 1}
