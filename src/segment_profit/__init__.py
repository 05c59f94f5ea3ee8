"""segment_profit package.

Contains modules for generating or uploading customer records, enriching them
with a profitability score and churn-risk classification, aggregating the
enriched records into per-segment insights, and helpers for serving a
Streamlit dashboard.

Architecture:
- Raw → Enriched → Insight layers held in memory (no persistence)
- Pydantic models describe each layer
- Dask is used for optional partitioned enrichment
- pandas backs grouping, upload parsing and chart frames
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
