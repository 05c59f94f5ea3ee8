"""Chart-ready frames for the dashboard.

Every function returns a new DataFrame; the dataset itself is never sorted
in place, so one chart's ordering cannot leak into another.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from segment_profit.aggregate.build_insights import aggregate_by
from segment_profit.models import EnrichedRecord

DISCRETE_KEYS = ("state", "industry", "acaTier", "planType")
CONTINUOUS_KEYS = (
    "monthlyPremium",
    "employerContribution",
    "revenue",
    "profitabilityScore",
    "claimFrequency",
    "employeeAge",
    "companySize",
)

# x-axes that read as an ordered scale rather than a ranking
ORDERED_X_KEYS = ("employeeAge", "companySize")

CHART_TYPES = ("bar", "line", "scatter")

ACA_TIERS = ("Bronze", "Silver", "Gold", "Platinum")


@dataclass(frozen=True)
class ChartSpec:
    """One dashboard tab: axes plus chart type.

    `group_key` marks a per-category average chart instead of a row chart.
    """
    x: str
    y: str
    chart_type: str = "bar"
    group_key: str | None = None

    def __post_init__(self) -> None:
        if self.chart_type not in CHART_TYPES:
            raise ValueError(f"Unknown chart type {self.chart_type!r}; expected one of {CHART_TYPES}")

    @property
    def title(self) -> str:
        return f"{self.x} vs {self.y}"

    @property
    def x_is_quantitative(self) -> bool:
        """Scatter plots of a numeric x use a continuous axis."""
        return self.chart_type == "scatter" and self.x in CONTINUOUS_KEYS


CHART_COMBINATIONS = (
    ChartSpec("companySize", "profitabilityScore", "bar"),
    ChartSpec("state", "profitabilityScore", "bar"),
    ChartSpec("employeeAge", "profitabilityScore", "bar"),
    ChartSpec("acaTier", "profitabilityScore", "bar", group_key="acaTier"),
)


def custom_chart_spec(x: str, y: str, chart_type: str = "bar") -> ChartSpec:
    """Build a user-chosen chart from the axis choices offered by the dashboard.

    `x` may be any categorical or numeric field, `y` must be numeric.

    Raises:
        ValueError: for an axis or chart type outside the offered choices.
    """
    if x not in DISCRETE_KEYS + CONTINUOUS_KEYS:
        raise ValueError(f"Unknown x-axis field {x!r}")
    if y not in CONTINUOUS_KEYS:
        raise ValueError(f"y-axis field must be numeric, got {y!r}")
    return ChartSpec(x, y, chart_type)


def records_frame(records: Sequence[EnrichedRecord]) -> pd.DataFrame:
    """Return records as a DataFrame with camelCase columns."""
    rows = [r.model_dump(by_alias=True, mode="json") for r in records]
    return pd.DataFrame(rows)


def chart_frame(
    records: Sequence[EnrichedRecord],
    x: str,
    y: str,
    descending: bool = False,
) -> pd.DataFrame:
    """Return a sorted copy of the records for an x/y chart.

    Ordered x-axes (`employeeAge`, `companySize`) sort by x ascending; any
    other x sorts by y, ascending unless `descending`. Sorting is stable and
    rows with a missing sort value go last.
    """
    pdf = records_frame(records)
    if pdf.empty:
        return pdf

    if x in ORDERED_X_KEYS:
        by, ascending = x, True
    else:
        by, ascending = y, not descending

    if by not in pdf.columns:
        return pdf.reset_index(drop=True)

    return pdf.sort_values(by, ascending=ascending, kind="stable", na_position="last").reset_index(drop=True)


def group_average_frame(
    records: Sequence[EnrichedRecord],
    key: str,
    categories: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Return average profitability per category.

    Args:
        records: Enriched records.
        key: Categorical field to group by.
        categories: Optional display order; categories without members are
            omitted and groups outside the list are appended after it.

    Returns:
        DataFrame with columns `name`, `avgProfitability`, `count`.
    """
    insights = aggregate_by(records, key)
    if categories is not None:
        rank = {c: i for i, c in enumerate(categories)}
        insights = sorted(insights, key=lambda g: rank.get(g.key, len(rank)))

    return pd.DataFrame(
        [
            {"name": g.key, "avgProfitability": g.average_profitability, "count": g.count}
            for g in insights
        ],
        columns=["name", "avgProfitability", "count"],
    )
