from __future__ import annotations

import pytest

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
from segment_profit.enrich.scoring import enrich


def _records():
    return [
        enrich({"id": 1, "state": "CA", "companySize": 300, "acaTier": "Gold",
                "monthlyPremium": 200, "employerContribution": 100}),
        enrich({"id": 2, "state": "NY", "companySize": 50, "acaTier": "Bronze",
                "monthlyPremium": 400, "employerContribution": 100}),
        enrich({"id": 3, "state": "TX", "companySize": 150, "acaTier": "Gold",
                "monthlyPremium": 100, "employerContribution": 100}),
    ]


def test_records_frame_uses_camel_case_columns() -> None:
    df = records_frame(_records())
    assert {"monthlyPremium", "profitabilityScore", "churnRisk", "acaTier"} <= set(df.columns)
    assert df["churnRisk"].tolist() == ["Low", "High", "Low"]


def test_ordered_x_sorts_by_x() -> None:
    df = chart_frame(_records(), "companySize", "profitabilityScore")
    assert df["id"].tolist() == [2, 3, 1]


def test_categorical_x_sorts_by_y_in_both_directions() -> None:
    records = _records()
    asc = chart_frame(records, "state", "profitabilityScore")
    desc = chart_frame(records, "state", "profitabilityScore", descending=True)
    assert asc["id"].tolist() == [3, 1, 2]
    assert desc["id"].tolist() == [2, 1, 3]
    # the dataset itself keeps its order
    assert [r.id for r in records] == [1, 2, 3]


def test_chart_frame_of_empty_dataset() -> None:
    assert chart_frame([], "state", "profitabilityScore").empty


def test_group_average_frame_follows_category_order_and_skips_empty() -> None:
    df = group_average_frame(_records(), "acaTier", ACA_TIERS)
    assert df["name"].tolist() == ["Bronze", "Gold"]
    assert df["count"].tolist() == [1, 2]
    assert df["avgProfitability"].notna().all()
    gold = df.loc[df["name"] == "Gold", "avgProfitability"].iloc[0]
    expected = (enrich({"id": 0, "monthlyPremium": 200, "employerContribution": 100}).profitability_score
                + enrich({"id": 0, "monthlyPremium": 100, "employerContribution": 100}).profitability_score) / 2
    assert gold == pytest.approx(expected)


def test_group_average_frame_of_empty_dataset_has_columns() -> None:
    df = group_average_frame([], "acaTier", ACA_TIERS)
    assert df.empty
    assert list(df.columns) == ["name", "avgProfitability", "count"]


def test_chart_combinations_cover_aca_tier_average() -> None:
    titles = [spec.title for spec in CHART_COMBINATIONS]
    assert "acaTier vs profitabilityScore" in titles
    assert any(spec.group_key == "acaTier" for spec in CHART_COMBINATIONS)


def test_custom_chart_accepts_every_offered_axis_and_type() -> None:
    for x in DISCRETE_KEYS + CONTINUOUS_KEYS:
        for y in CONTINUOUS_KEYS:
            for chart_type in CHART_TYPES:
                spec = custom_chart_spec(x, y, chart_type)
                assert spec.title == f"{x} vs {y}"
                assert spec.group_key is None


def test_custom_chart_rejects_categorical_y_and_unknown_x() -> None:
    with pytest.raises(ValueError):
        custom_chart_spec("state", "industry")
    with pytest.raises(ValueError):
        custom_chart_spec("nope", "revenue")
    with pytest.raises(ValueError):
        custom_chart_spec("state", "revenue", "pie")


def test_scatter_of_numeric_x_uses_continuous_axis() -> None:
    assert custom_chart_spec("monthlyPremium", "revenue", "scatter").x_is_quantitative
    assert not custom_chart_spec("state", "revenue", "scatter").x_is_quantitative
    assert not custom_chart_spec("monthlyPremium", "revenue", "line").x_is_quantitative
    assert not any(spec.x_is_quantitative for spec in CHART_COMBINATIONS)


def test_chart_spec_rejects_unknown_chart_type() -> None:
    with pytest.raises(ValueError):
        ChartSpec("state", "profitabilityScore", "pie")
