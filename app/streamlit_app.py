"""
app/streamlit_app.py

Read-only Streamlit page for the utility-scale solar PPA dashboard.

Responsibilities
----------------
- Run the PPA pipeline on the workbook named by `PPA_SOURCE_PATH`.
- Show the composed three-chart figure.
- Show the cumulative capacity by region and the yearly totals as tables.

Notes
-----
- PPA_SOURCE_PATH can be supplied via environment variable for local dev or
  via Streamlit Secrets in hosted deployments.
- The page has no controls: it renders the same figure as `python -m ppa.run`.
"""

import os

import streamlit as st

from ppa import config
from ppa.charts import compose
from ppa.errors import PipelineError
from ppa.run import build

st.set_page_config(page_title="Utility-Scale Solar PPAs", layout="wide")

st.title("Utility-Scale Solar PPAs")
st.caption("Contracted capacity and levelized PPA prices by region and year.")

# Prefer environment variable for local dev; fall back to Streamlit Secrets
# for hosted environments.
source = os.environ.get("PPA_SOURCE_PATH") or st.secrets.get("PPA_SOURCE_PATH")
if not source:
    st.warning(
        "PPA_SOURCE_PATH is not set. Add it via environment variable or Streamlit Secrets."
    )
    st.stop()

try:
    raw, table, aggs = build(source, config.SHEET, config.CELL_RANGE)
except PipelineError as exc:
    st.error(f"Could not build the dashboard: {exc}")
    st.stop()

if table.frame.empty:
    st.info("The configured range holds no PPA records.")
    st.stop()

kpis = st.columns(3)
with kpis[0]:
    st.metric("Agreements", len(raw))
with kpis[1]:
    st.metric("Regions", len(table.region_order))
with kpis[2]:
    st.metric("Total capacity (MW)", f"{table.frame['capacity_mw'].sum():,.0f}")

st.pyplot(compose(table, aggs))

left, right = st.columns(2)
with left:
    st.subheader("Cumulative capacity by region")
    st.dataframe(
        aggs.region_totals[["region", "label"]].rename(
            columns={"region": "Region", "label": "Capacity (MW)"}
        ),
        hide_index=True,
    )
with right:
    st.subheader("Capacity by year")
    st.dataframe(
        aggs.yearly_totals[["year", "label"]].rename(
            columns={"year": "Year", "label": "Capacity (MW)"}
        ),
        hide_index=True,
    )
