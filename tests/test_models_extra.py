from __future__ import annotations

import pytest
from pydantic import ValidationError

from segment_profit.models import AggregateInsight, DatasetSummary, RawRecord


def test_raw_record_accepts_camel_and_snake_names() -> None:
    a = RawRecord.model_validate({"id": 1, "monthlyPremium": 120, "acaTier": "Gold"})
    b = RawRecord.model_validate({"id": 1, "monthly_premium": 120, "aca_tier": "Gold"})
    assert a == b
    assert a.model_dump(by_alias=True)["monthlyPremium"] == 120


def test_raw_record_rejects_negative_id() -> None:
    with pytest.raises(ValidationError):
        RawRecord.model_validate({"id": -1})


def test_aggregate_insight_rejects_empty_group() -> None:
    with pytest.raises(ValidationError):
        AggregateInsight(key="Tech", average_profitability=None, count=0, scored_count=0)


def test_empty_summary_dumps_nulls() -> None:
    dumped = DatasetSummary().model_dump(by_alias=True)
    assert dumped["averageProfitability"] is None
    assert dumped["topRecords"] == []
