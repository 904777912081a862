"""Streamlit front-end for tree diffs."""
from __future__ import annotations

from io import BytesIO
from pathlib import PurePath
from zipfile import BadZipFile

import pandas as pd
import streamlit as st

from tree_diff import (
    DelimitedFileSource,
    DiffContext,
    DiffOptions,
    DiffSourcesUseCase,
    TreeDiffer,
    WorkbookSource,
)
from tree_diff.cli import parse_field_ref, parse_field_refs
from tree_diff.config import SETTINGS, SourceOptions
from tree_diff.infrastructure.log_config import configure_logging
from tree_diff.presentation.diff_report import diffs_to_rows, render_csv, render_excel, render_html

configure_logging(SETTINGS.log_level)

st.set_page_config(page_title="Tree Diff", layout="wide")
st.title("Hierarchical Data Diff")


def make_repository(uploaded, options: SourceOptions):
    data = uploaded.getvalue()
    if PurePath(uploaded.name).suffix.lower() in SETTINGS.workbook_suffixes:
        return WorkbookSource(BytesIO(data), options, label=uploaded.name)
    return DelimitedFileSource(BytesIO(data), options, label=uploaded.name)


def run_diff(left_file, right_file, source_options: SourceOptions, diff_options: DiffOptions) -> TreeDiffer:
    context = DiffContext(
        left_repository=make_repository(left_file, source_options),
        right_repository=make_repository(right_file, source_options),
        options=diff_options,
    )
    return DiffSourcesUseCase(context).execute().differ


if "result" not in st.session_state:
    st.session_state["result"] = None

col1, col2 = st.columns(2)
with col1:
    left_file = st.file_uploader("Left (from) file", type=["csv", "tsv", "txt", "xls", "xlsx", "xlsm"])
with col2:
    right_file = st.file_uploader("Right (to) file", type=["csv", "tsv", "txt", "xls", "xlsx", "xlsm"])

with st.expander("Keys and fields", expanded=True):
    parent_text = st.text_input("Parent fields (comma-separated)", key="parent_fields")
    child_text = st.text_input("Child field", key="child_field")
    key_text = st.text_input("Key fields, if no parent/child given (comma-separated)", key="key_fields")
    ignore_text = st.text_input("Fields to ignore (comma-separated)", key="ignore_fields")
    delimiter = st.text_input("Delimiter", value=SETTINGS.default_delimiter, key="delimiter")
    encoding = st.text_input("Encoding", value=SETTINGS.default_encoding, key="encoding")

flag_cols = st.columns(4)
ignore_adds = flag_cols[0].checkbox("Ignore adds")
ignore_deletes = flag_cols[1].checkbox("Ignore deletes")
ignore_updates = flag_cols[2].checkbox("Ignore updates")
ignore_moves = flag_cols[3].checkbox("Ignore moves")

run_btn = st.button("Run Diff", disabled=not (left_file and right_file))
if run_btn and left_file and right_file:
    source_options = SourceOptions(
        encoding=encoding.strip() or SETTINGS.default_encoding,
        delimiter=delimiter.encode().decode("unicode_escape") or SETTINGS.default_delimiter,
        key_fields=parse_field_refs(key_text),
        parent_fields=parse_field_refs(parent_text),
        child_field=parse_field_ref(child_text) if child_text.strip() else None,
    )
    diff_options = DiffOptions(
        ignore_fields=parse_field_refs(ignore_text),
        ignore_adds=ignore_adds,
        ignore_deletes=ignore_deletes,
        ignore_updates=ignore_updates,
        ignore_moves=ignore_moves,
    )
    try:
        with st.spinner("Diffing..."):
            st.session_state["result"] = run_diff(left_file, right_file, source_options, diff_options)
    except (ValueError, BadZipFile) as exc:
        st.session_state["result"] = None
        st.error(str(exc))

differ: TreeDiffer | None = st.session_state.get("result")
if differ is None:
    st.info("Upload both files and run the diff.")
else:
    st.subheader("Summary")
    summary = differ.summary()
    metric_cols = st.columns(5)
    for col, name in zip(metric_cols, ["Add", "Delete", "Update", "Move", "Warning"]):
        col.metric(name, summary.get(name, 0))

    rows = diffs_to_rows(differ.diffs, differ.key_schema)
    tabs = st.tabs(["All", "Adds", "Deletes", "Updates", "Moves", "Warnings"])
    with tabs[0]:
        st.dataframe(pd.DataFrame(rows))
    for tab, view in zip(tabs[1:5], [differ.adds, differ.deletes, differ.updates, differ.moves]):
        with tab:
            st.dataframe(pd.DataFrame(diffs_to_rows(view(), differ.key_schema)))
    with tabs[5]:
        if differ.warnings:
            for warning in differ.warnings:
                st.warning(warning)
        else:
            st.write("No warnings.")

    st.download_button("Download diff CSV", data=render_csv(rows), file_name="tree_diff.csv", mime="text/csv")
    st.download_button(
        "Download diff HTML",
        data=render_html(rows).encode("utf-8"),
        file_name="tree_diff.html",
        mime="text/html",
    )
    st.download_button(
        "Download diff Excel",
        data=render_excel(rows),
        file_name="tree_diff.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
