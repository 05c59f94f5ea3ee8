"""Insight aggregation helpers.

This package turns enriched records into per-segment averages, the
dataset-wide summary and its narrative, and the chart-ready frames used by
the Streamlit dashboard.
"""
