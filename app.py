"""gitstat — interactive Streamlit dashboard over a JSON report.

Generate the report first:

    python main.py /path/to/repo 2023-08-01 2023-09-30 --output report.json
    streamlit run app.py
"""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="gitstat",
    page_icon="📅",
    layout="wide",
)

GAP_STYLE = "background-color: #ffe0c2; color: #b35900"


@st.cache_data
def load_report(path: str) -> dict:
    with open(path) as f:
        return json.load(f)


def rows_frame(rows: list[dict]) -> pd.DataFrame:
    """One display row per report row, gap rows carrying their message."""
    records = []
    for r in rows:
        if r["kind"] == "gap":
            noun = "day" if r["days"] == 1 else "days"
            records.append({
                "Date Range": r["label"],
                "Files Changed": None,
                "Additions": None,
                "Deletions": None,
                "Total Changes": None,
                "Note": f"{r['days']} {noun} no commits",
            })
        else:
            records.append({
                "Date Range": r["date"],
                "Files Changed": r["files_changed"],
                "Additions": r["additions"],
                "Deletions": r["deletions"],
                "Total Changes": r["total_changes"],
                "Note": "",
            })
    return pd.DataFrame(records)


def _highlight_gaps(row: pd.Series) -> list[str]:
    return [GAP_STYLE if row["Note"] else ""] * len(row)


# ---------------------------------------------------------------------------
# Sidebar — load report
# ---------------------------------------------------------------------------
st.sidebar.title("📅 gitstat")
st.sidebar.markdown("Daily change activity")

default_report = Path(__file__).parent / "report.json"
report_path = st.sidebar.text_input("Report file", value=str(default_report))

try:
    report = load_report(report_path)
except FileNotFoundError:
    st.error(f"Report not found: `{report_path}`\n\nRun `python main.py <repo> <start> <end> --output report.json` first.")
    st.stop()

repo_name = Path(report.get("repo", report_path)).name
st.sidebar.markdown(f"**Repo:** `{repo_name}`  **Rev:** `{report.get('rev', 'HEAD')}`")
st.sidebar.caption(f"Window: {report['start']} → {report['end']}")

show_gaps = st.sidebar.toggle("Show no-commit rows", value=True)

# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------
df_days = pd.DataFrame.from_dict(report.get("days", {}), orient="index")
if not df_days.empty:
    df_days.index = pd.to_datetime(df_days.index)
    df_days = df_days.sort_index()

rows = report.get("rows", [])
if not show_gaps:
    rows = [r for r in rows if r["kind"] == "active"]
df_rows = rows_frame(rows)

# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
st.title(f"Daily activity — {repo_name}")

summary = report.get("summary", {})
span_days = (pd.Timestamp(report["end"]) - pd.Timestamp(report["start"])).days + 1
c1, c2, c3, c4 = st.columns(4)
c1.metric("Active days", f"{summary.get('active_days', 0):,} / {span_days:,}")
c2.metric("Files changed", f"{summary.get('files_changed', 0):,}")
c3.metric("Additions", f"+{summary.get('additions', 0):,}")
c4.metric("Deletions", f"-{summary.get('deletions', 0):,}")

st.divider()

tab1, tab2 = st.tabs(["📋 Table", "⚡ Activity"])

with tab1:
    if df_rows.empty:
        st.info("Nothing to show for this window.")
    else:
        st.dataframe(
            df_rows.style.apply(_highlight_gaps, axis=1),
            use_container_width=True,
            hide_index=True,
        )

with tab2:
    if df_days.empty:
        st.info("No commits in this window.")
    else:
        st.subheader("Lines added vs removed")
        fig_diff = go.Figure()
        fig_diff.add_trace(go.Bar(
            x=df_days.index, y=df_days["additions"],
            name="Additions", marker_color="mediumseagreen",
            hovertemplate="%{x|%Y-%m-%d}<br>+%{y:,}<extra></extra>",
        ))
        fig_diff.add_trace(go.Bar(
            x=df_days.index, y=-df_days["deletions"],
            name="Deletions", marker_color="salmon",
            hovertemplate="%{x|%Y-%m-%d}<br>-%{customdata:,}<extra></extra>",
            customdata=df_days["deletions"],
        ))
        fig_diff.update_layout(
            barmode="relative",
            height=320,
            margin=dict(l=0, r=0, t=10, b=0),
            yaxis_title="Lines",
            xaxis_title="Date",
            legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        )
        st.plotly_chart(fig_diff, use_container_width=True)

        st.subheader("Files changed per day")
        files_df = df_days["files_changed"].rename_axis("day").reset_index()
        fig_files = px.bar(
            files_df, x="day", y="files_changed",
            labels={"day": "Date", "files_changed": "Distinct files"},
        )
        fig_files.update_layout(height=280, margin=dict(l=0, r=0, t=10, b=0))
        st.plotly_chart(fig_files, use_container_width=True)
