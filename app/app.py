"""ads-prep artifact viewer.

Renders the output of `ads-prep prepare`: the data dictionary and a paginated
grid of the sanitized table with download buttons. Reads artifacts only; all
preparation logic lives in the ads_prep package.

    streamlit run app/app.py -- --root prep_out
"""
import json
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

st.set_page_config(page_title="ads-prep viewer", layout="wide")


def _root_from_argv(default: str = "prep_out") -> Path:
    args = sys.argv[1:]
    if "--root" in args and args.index("--root") + 1 < len(args):
        return Path(args[args.index("--root") + 1])
    return Path(default)


def discover_runs(root: Path) -> list[Path]:
    """Directories (root itself included) that contain a table_view.json."""
    if not root.exists():
        return []
    candidates = [root] + sorted(p for p in root.iterdir() if p.is_dir())
    return [p for p in candidates if (p / "table_view.json").exists()]


def load_json_artifact(run_path: Path, filename: str):
    path = run_path / filename
    if path.exists():
        return json.loads(path.read_text(encoding="utf-8"))
    return None


def render_dictionary(run_path: Path):
    dictionary = load_json_artifact(run_path, "data_dictionary.json")
    if not dictionary:
        st.info("No data_dictionary.json in this run.")
        return

    rows = []
    for c in dictionary.get("columns", []):
        if c.get("level_count") is not None:
            shown = ", ".join(f"{lv['level']} ({lv['count']})" for lv in c.get("levels", []))
            more = c.get("more")
            if more:
                shown += f", {more['label']} ({more['omitted']} levels)"
            summary = shown
        elif c.get("min") is not None:
            summary = f"{c['min']} to {c['max']}"
        else:
            summary = f"{c.get('distinct_count', 0)} distinct"
        rows.append(
            {
                "Column": c["name"],
                "Type": c["type"],
                "Label": c.get("label", ""),
                "N": c.get("count"),
                "Missing": c.get("missing_count"),
                "Levels / Range": summary,
            }
        )
    st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")

    md_path = run_path / "data_dictionary.md"
    if md_path.exists():
        st.download_button(
            label="Download dictionary (Markdown)",
            data=md_path.read_text(encoding="utf-8"),
            file_name="data_dictionary.md",
            mime="text/markdown",
        )


def render_table(run_path: Path):
    view = load_json_artifact(run_path, "table_view.json")
    if not view:
        st.info("No table_view.json in this run.")
        return

    columns = view.get("columns", [])
    df = pd.DataFrame(view.get("records", []), columns=[c["name"] for c in columns])
    headers = {c["name"]: (c["label"] or c["name"]) for c in columns}

    page_length = int(view.get("page_length", 10)) or 10
    pages = max(1, -(-len(df) // page_length))
    page = st.number_input("Page", min_value=1, max_value=pages, value=1, step=1)
    start = (int(page) - 1) * page_length
    st.dataframe(df.iloc[start:start + page_length].rename(columns=headers), hide_index=True, width="stretch")
    st.caption(f"{len(df):,} rows, {pages} page(s)")

    if view.get("sanitized_columns"):
        st.caption(
            f"Delimiter {view['delimiter']!r} replaced by {view['placeholder']!r} in: "
            + ", ".join(view["sanitized_columns"])
        )

    formats = view.get("export_formats", [])
    if "csv" in formats:
        export_path = run_path / "export.csv"
        data = export_path.read_text(encoding="utf-8") if export_path.exists() else df.to_csv(index=False)
        st.download_button(label="Download CSV", data=data, file_name="export.csv", mime="text/csv")
    if "copy" in formats:
        with st.expander("Copy as text"):
            st.code(df.to_csv(index=False, sep="\t"), language=None)


def main():
    st.title("ads-prep viewer")
    root = _root_from_argv()
    runs = discover_runs(root)
    if not runs:
        st.warning(f"No runs found under `{root}`. Run `ads-prep prepare --out {root}` first.")
        return

    st.sidebar.header("Select Run")
    selected = st.sidebar.selectbox("Run", runs, format_func=lambda p: p.name or str(p))
    log = load_json_artifact(selected, "prep_log.json") or {}
    st.sidebar.markdown(f"**Status:** `{log.get('status', 'unknown')}`")
    for w in log.get("warnings", []):
        st.sidebar.caption(w)

    tab1, tab2 = st.tabs(["Data Dictionary", "Table"])
    with tab1:
        render_dictionary(selected)
    with tab2:
        render_table(selected)


if __name__ == "__main__":
    main()
