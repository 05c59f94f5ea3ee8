"""Configuration helpers and Settings container.

This module provides the `ProfitabilityConfig` consumed by the scoring
functions, a `Settings` dataclass for entry points, and `get_settings`, which
reads the `SEGMENT_*` environment variables (optionally from `.env`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


class ScoringMode(str, Enum):
    """Named profitability-score strategies.

    ANNUALIZED: annual revenue less contribution and fixed costs, over annual revenue.
    SIMPLE: monthly premium less contribution, over monthly premium.
    """

    ANNUALIZED = "annualized"
    SIMPLE = "simple"


DEFAULT_SUPPORT_ONBOARDING_COST = 300.0
DEFAULT_FINANCIAL_COST = 100.0
DEFAULT_BROKER_COMMISSION = 200.0
DEFAULT_CHURN_THRESHOLD = 0.5
DEFAULT_DATASET_SIZE = 100


@dataclass(frozen=True)
class ProfitabilityConfig:
    """Inputs of the profitability score and churn-risk rules.

    The three fixed costs are subtracted from annual revenue as-is by the
    annualized strategy and are ignored by the simple strategy.

    Attributes:
        mode: Scoring strategy; always stated, never inferred.
        support_onboarding_cost: Customer support and onboarding cost.
        financial_cost: Financial cost.
        broker_commission: Broker commission.
        churn_threshold: Contribution/premium ratio below which churn risk is High.
    """
    mode: ScoringMode = ScoringMode.ANNUALIZED
    support_onboarding_cost: float = DEFAULT_SUPPORT_ONBOARDING_COST
    financial_cost: float = DEFAULT_FINANCIAL_COST
    broker_commission: float = DEFAULT_BROKER_COMMISSION
    churn_threshold: float = DEFAULT_CHURN_THRESHOLD

    @property
    def fixed_costs(self) -> float:
        return self.support_onboarding_cost + self.financial_cost + self.broker_commission


@dataclass(frozen=True)
class Settings:
    """Container for configuration read from the environment.

    Attributes:
        profitability: Scoring configuration.
        dataset_size: Number of synthetic records to generate.
        seed: Optional generator seed; None draws fresh values each time.
        enrich_partitions: Dask partitions used for batch enrichment.
        log_path: Log file written by the CLI.
    """
    profitability: ProfitabilityConfig = field(default_factory=ProfitabilityConfig)
    dataset_size: int = DEFAULT_DATASET_SIZE
    seed: int | None = None
    enrich_partitions: int = 1
    log_path: Path = Path("logs/segment_profit.log")


def _env_number(name: str, default: float, cast: type = float):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from exc


def parse_scoring_mode(value: str) -> ScoringMode:
    """Return the `ScoringMode` named by `value` (case-insensitive).

    Raises:
        RuntimeError: if `value` names no known strategy.
    """
    try:
        return ScoringMode(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(m.value for m in ScoringMode)
        raise RuntimeError(
            f"Unknown scoring mode {value!r}. Expected one of: {choices}."
        ) from exc


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if a variable holds an unknown mode or a non-numeric value.
    """
    mode = parse_scoring_mode(os.getenv("SEGMENT_SCORING_MODE", ScoringMode.ANNUALIZED.value))

    profitability = ProfitabilityConfig(
        mode=mode,
        support_onboarding_cost=_env_number("SEGMENT_SUPPORT_COST", DEFAULT_SUPPORT_ONBOARDING_COST),
        financial_cost=_env_number("SEGMENT_FINANCIAL_COST", DEFAULT_FINANCIAL_COST),
        broker_commission=_env_number("SEGMENT_BROKER_COMMISSION", DEFAULT_BROKER_COMMISSION),
        churn_threshold=_env_number("SEGMENT_CHURN_THRESHOLD", DEFAULT_CHURN_THRESHOLD),
    )

    dataset_size = _env_number("SEGMENT_DATASET_SIZE", DEFAULT_DATASET_SIZE, int)
    seed = _env_number("SEGMENT_SEED", None, int)
    enrich_partitions = _env_number("SEGMENT_ENRICH_PARTITIONS", 1, int)

    if dataset_size < 0:
        raise RuntimeError("SEGMENT_DATASET_SIZE must not be negative.")
    if enrich_partitions < 1:
        raise RuntimeError("SEGMENT_ENRICH_PARTITIONS must be at least 1.")

    return Settings(
        profitability=profitability,
        dataset_size=dataset_size,
        seed=seed,
        enrich_partitions=enrich_partitions,
        log_path=Path(os.getenv("SEGMENT_LOG_PATH", "logs/segment_profit.log")),
    )
