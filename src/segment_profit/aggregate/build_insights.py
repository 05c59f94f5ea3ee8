"""Insight aggregation functions.

Functions in this module turn a list of enriched records into the summaries
shown by the dashboard and the CLI.

Expectations:
- Input: a sequence of `EnrichedRecord` (typically `Dataset.records`).
- Records that could not be scored count towards group sizes but are left
  out of every mean, top/bottom list and extreme-group pick.
- Empty input gives empty output (`[]` or an empty `DatasetSummary`); no
  function here returns NaN or raises for it.
- Inputs are never reordered or mutated; sorts work on fresh copies.
"""
from __future__ import annotations

import math
from typing import Any, Iterable, Sequence

import numpy as np
import pandas as pd

from segment_profit.models import AggregateInsight, DatasetSummary, EnrichedRecord

TOP_N = 5


def resolve_field(key: str) -> str:
    """Return the attribute name for `key`, accepting camelCase aliases.

    Unknown keys are returned unchanged so extra upload columns can be used.
    """
    fields = EnrichedRecord.model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    return key


def _key_value(record: EnrichedRecord, name: str) -> str | None:
    value: Any = getattr(record, name, None)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    return str(value)


def _mean(values: Iterable[float | None]) -> float | None:
    series = pd.Series(list(values), dtype="float64")
    mean = series[np.isfinite(series)].mean()
    return None if pd.isna(mean) else float(mean)


# =========================================================
# GROUPING
# =========================================================

def aggregate_by(records: Sequence[EnrichedRecord], key: str) -> list[AggregateInsight]:
    """Group records by a categorical field and average their scores.

    Args:
        records: Enriched records.
        key: Field to group by, e.g. `industry` or `acaTier`.

    Returns:
        One AggregateInsight per non-null value of `key`, in order of first
        appearance. `count` includes unscored members; `average_profitability`
        is None only for a group whose members are all unscored.
    """
    records = list(records)
    if not records:
        return []

    name = resolve_field(key)
    pdf = pd.DataFrame(
        {
            "key": [_key_value(r, name) for r in records],
            "score": pd.Series(
                [r.profitability_score if r.is_scored else None for r in records],
                dtype="float64",
            ),
        }
    )
    pdf = pdf.dropna(subset=["key"])
    if pdf.empty:
        return []

    stats = pdf.groupby("key", sort=False)["score"].agg(["mean", "count", "size"])

    return [
        AggregateInsight(
            key=str(group),
            average_profitability=None if pd.isna(row["mean"]) else float(row["mean"]),
            count=int(row["size"]),
            scored_count=int(row["count"]),
        )
        for group, row in stats.iterrows()
    ]


def extreme_groups(insights: Sequence[AggregateInsight]) -> tuple[str | None, str | None]:
    """Return the keys with the highest and lowest average profitability.

    Ties go to the group seen first; groups without an average are skipped.
    """
    highest: AggregateInsight | None = None
    lowest: AggregateInsight | None = None

    for insight in insights:
        avg = insight.average_profitability
        if avg is None:
            continue
        if highest is None or avg > highest.average_profitability:
            highest = insight
        if lowest is None or avg < lowest.average_profitability:
            lowest = insight

    return (
        highest.key if highest is not None else None,
        lowest.key if lowest is not None else None,
    )


# =========================================================
# RANKING
# =========================================================

def _scored(records: Iterable[EnrichedRecord]) -> list[EnrichedRecord]:
    return [r for r in records if r.is_scored]


def top_n(records: Sequence[EnrichedRecord], n: int = TOP_N) -> list[EnrichedRecord]:
    """Return the `n` most profitable scored records; ties keep dataset order."""
    ranked = sorted(_scored(records), key=lambda r: r.profitability_score, reverse=True)
    return ranked[:n]


def bottom_n(records: Sequence[EnrichedRecord], n: int = TOP_N) -> list[EnrichedRecord]:
    """Return the `n` least profitable scored records; ties keep dataset order."""
    ranked = sorted(_scored(records), key=lambda r: r.profitability_score)
    return ranked[:n]


# =========================================================
# DATASET SUMMARY
# =========================================================

def summarize(records: Sequence[EnrichedRecord]) -> DatasetSummary:
    """Compute whole-dataset statistics.

    Means cover scored records only. The most and least profitable industries
    are picked by `extreme_groups` over `aggregate_by(records, "industry")`.

    Returns:
        A DatasetSummary; all optional fields are None for an empty dataset.
    """
    records = list(records)
    if not records:
        return DatasetSummary()

    scored = _scored(records)
    most, least = extreme_groups(aggregate_by(scored, "industry"))

    return DatasetSummary(
        record_count=len(records),
        scored_count=len(scored),
        average_profitability=_mean(r.profitability_score for r in scored),
        average_monthly_premium=_mean(r.monthly_premium for r in scored),
        average_employer_contribution=_mean(r.employer_contribution for r in scored),
        average_claim_frequency=_mean(r.claim_frequency for r in scored),
        most_profitable_industry=most,
        least_profitable_industry=least,
        top_records=top_n(scored),
        bottom_records=bottom_n(scored),
    )
