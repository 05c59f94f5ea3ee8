from __future__ import annotations

import pytest

from segment_profit.config import ProfitabilityConfig, ScoringMode, get_settings


def test_default_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SEGMENT_SCORING_MODE",
        "SEGMENT_SUPPORT_COST",
        "SEGMENT_FINANCIAL_COST",
        "SEGMENT_BROKER_COMMISSION",
        "SEGMENT_CHURN_THRESHOLD",
        "SEGMENT_DATASET_SIZE",
        "SEGMENT_SEED",
        "SEGMENT_ENRICH_PARTITIONS",
    ):
        monkeypatch.delenv(name, raising=False)

    s = get_settings()
    assert s.profitability == ProfitabilityConfig()
    assert s.profitability.mode is ScoringMode.ANNUALIZED
    assert s.profitability.fixed_costs == 600
    assert s.dataset_size == 100
    assert s.seed is None
    assert s.enrich_partitions == 1


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGMENT_SCORING_MODE", "Simple")
    monkeypatch.setenv("SEGMENT_BROKER_COMMISSION", "250")
    monkeypatch.setenv("SEGMENT_SEED", "42")
    monkeypatch.setenv("SEGMENT_ENRICH_PARTITIONS", "4")

    s = get_settings()
    assert s.profitability.mode is ScoringMode.SIMPLE
    assert s.profitability.broker_commission == 250
    assert s.seed == 42
    assert s.enrich_partitions == 4


def test_unknown_scoring_mode_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGMENT_SCORING_MODE", "guess")
    with pytest.raises(RuntimeError):
        get_settings()


def test_non_numeric_cost_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGMENT_FINANCIAL_COST", "lots")
    with pytest.raises(RuntimeError):
        get_settings()
