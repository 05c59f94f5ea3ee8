"""Enrichment utilities.

Derives revenue, the profitability score and the churn-risk class for each
record, either one at a time or in Dask partitions for a whole dataset.
"""
