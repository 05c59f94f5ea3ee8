from __future__ import annotations

from dataclasses import replace

import streamlit as st
import altair as alt

from segment_profit.config import ScoringMode, get_settings
from segment_profit.dataset import DatasetStore
from segment_profit.errors import ParseError
from segment_profit.logging_config import configure_logging
from segment_profit.aggregate.build_insights import summarize
from segment_profit.aggregate.narrative import build_insight_text
from segment_profit.aggregate.chart_data import (
    ACA_TIERS,
    CHART_COMBINATIONS,
    CHART_TYPES,
    CONTINUOUS_KEYS,
    DISCRETE_KEYS,
    ChartSpec,
    custom_chart_spec,
    chart_frame,
    group_average_frame,
    records_frame,
)

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Customer Segmentation & Profitability", layout="wide")
st.title("📊 Customer Segmentation & Profitability Tool")

# =====================================================
# Settings + per-session dataset store
# =====================================================
try:
    settings = get_settings()
except RuntimeError as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Invalid configuration: {exc}")
    st.stop()

configure_logging()

if "store" not in st.session_state:
    st.session_state["store"] = DatasetStore(
        settings.profitability, npartitions=settings.enrich_partitions
    )
store: DatasetStore = st.session_state["store"]

# =====================================================
# Helpers
# =====================================================
CHART_MARKS = {
    "bar": "mark_bar",
    "line": "mark_line",
    "scatter": "mark_circle",
}


def kpi(label: str, value) -> None:
    """Display a simple KPI metric in the dashboard.

    Args:
        label: Metric label.
        value: Metric value (displayed as-is).
    """
    st.metric(label, value)


def fmt(value: float | None, prefix: str = "", suffix: str = "") -> str:
    return "N/A" if value is None else f"{prefix}{value:,.2f}{suffix}"


def render_records_chart(spec: ChartSpec, descending: bool) -> alt.Chart:
    """Bar/line/scatter chart of one record field against another."""
    df = chart_frame(store.current.records, spec.x, spec.y, descending=descending)
    x_type = "Q" if spec.x_is_quantitative else "N"
    # keep the frame's row order on categorical axes
    x_sort = None if x_type == "N" else "ascending"
    mark = getattr(alt.Chart(df), CHART_MARKS[spec.chart_type])()
    return (
        mark.encode(
            x=alt.X(f"{spec.x}:{x_type}", sort=x_sort, title=spec.x),
            y=alt.Y(f"{spec.y}:Q", title=spec.y),
            tooltip=["id:Q", "companyName:N", f"{spec.x}:{x_type}", f"{spec.y}:Q"],
        )
        .properties(height=320)
    )


def render_group_chart(spec: ChartSpec) -> alt.Chart:
    """Average profitability per category of `spec.group_key`."""
    categories = ACA_TIERS if spec.group_key == "acaTier" else None
    df = group_average_frame(store.current.records, spec.group_key, categories)
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("name:N", sort=None, title=spec.group_key),
            y=alt.Y("avgProfitability:Q", title="Average Profitability (%)"),
            tooltip=["name:N", "avgProfitability:Q", "count:Q"],
        )
        .properties(height=320)
    )


# =====================================================
# SECTION 0 — PROFITABILITY SCORE
# =====================================================
st.header("📌 Profitability Score")

mode_labels = {
    ScoringMode.ANNUALIZED: "Annualized (annual profit after fixed costs / annual revenue)",
    ScoringMode.SIMPLE: "Simple margin ((premium - contribution) / premium)",
}
modes = list(mode_labels)
mode = st.radio(
    "Scoring mode",
    modes,
    index=modes.index(ScoringMode(store.config.mode)),
    format_func=lambda m: mode_labels[m],
    horizontal=True,
)
if mode != store.config.mode:
    store.set_config(replace(store.config, mode=mode))

st.caption(
    "The profitability score represents the annual profit per customer after accounting "
    "for support, onboarding, financial and broker costs. Higher scores indicate more "
    "profitable customers."
)

st.divider()

# =====================================================
# SECTION 1 — DATA SOURCE
# =====================================================
st.header("📥 Data")

c1, c2 = st.columns(2)
with c1:
    if st.button("Generate Dummy Data"):
        store.load_generated(settings.dataset_size, settings.seed)
with c2:
    upload = st.file_uploader("Upload CSV", type=["csv"])
    if upload is not None and st.session_state.get("uploaded_id") != upload.file_id:
        try:
            store.load_upload(upload.getvalue(), upload.name)
            st.session_state["uploaded_id"] = upload.file_id
        except ParseError as exc:
            st.error(f"Could not load {upload.name}: {exc}")

dataset = store.current
if dataset is None:
    st.info("Generate dummy data or upload a CSV to begin.")
    st.stop()

summary = summarize(dataset.records)

k1, k2, k3, k4 = st.columns(4)
with k1:
    kpi("Records", summary.record_count)
with k2:
    kpi("Scored", summary.scored_count)
with k3:
    kpi("Avg Profitability", fmt(summary.average_profitability, suffix="%"))
with k4:
    kpi("Avg Monthly Premium", fmt(summary.average_monthly_premium, prefix="$"))

if dataset.invalid_records:
    st.warning(
        f"{len(dataset.invalid_records)} record(s) have no usable monthly premium and "
        "are excluded from averages."
    )

st.divider()

# =====================================================
# SECTION 2 — DATA ANALYSIS
# =====================================================
st.header("📈 Data Analysis")

descending = st.toggle("Sort descending", value=False)
tabs = st.tabs([spec.title for spec in CHART_COMBINATIONS])

for tab, spec in zip(tabs, CHART_COMBINATIONS):
    with tab:
        chart = render_group_chart(spec) if spec.group_key else render_records_chart(spec, descending)
        st.altair_chart(chart, width="stretch")

st.subheader("Custom chart")

cx, cy, ct = st.columns(3)
with cx:
    x_key = st.selectbox("X axis", DISCRETE_KEYS + CONTINUOUS_KEYS)
with cy:
    y_key = st.selectbox("Y axis", CONTINUOUS_KEYS, index=CONTINUOUS_KEYS.index("profitabilityScore"))
with ct:
    chart_type = st.selectbox("Chart type", CHART_TYPES)

st.altair_chart(render_records_chart(custom_chart_spec(x_key, y_key, chart_type), descending), width="stretch")

st.divider()

# =====================================================
# SECTION 3 — INSIGHTS
# =====================================================
st.header("💡 Insights")

text = build_insight_text(summary)
if text:
    st.text(text)

with st.expander("Records"):
    st.dataframe(records_frame(dataset.records), width="stretch")

# =====================================================
# Footer
# =====================================================
st.caption(f"Source: {dataset.source} • Scoring mode: {ScoringMode(dataset.config.mode).value}")
