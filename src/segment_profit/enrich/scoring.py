"""Record enrichment: profitability score and churn-risk classification.

Every function here is pure. A record that cannot be scored (missing or
non-finite premium or contribution, or a premium that is zero or negative)
is never given a NaN/Infinity score: the strategies raise
`InvalidRecordError` and `enrich` turns that into an explicit `invalid`
status on the returned record.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping

from segment_profit.config import ProfitabilityConfig, ScoringMode
from segment_profit.errors import InvalidRecordError
from segment_profit.models import ChurnRisk, EnrichedRecord, RawRecord, RecordStatus

log = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

ScoringStrategy = Callable[[float, float, ProfitabilityConfig], float]

# Derived fields by Python name and by camelCase alias
_DERIVED_FIELDS = set(EnrichedRecord.model_fields) - set(RawRecord.model_fields)
_DERIVED_KEYS = _DERIVED_FIELDS | {
    EnrichedRecord.model_fields[name].alias or name for name in _DERIVED_FIELDS
}


def _is_missing(value: float | None) -> bool:
    # NaN and +/-inf count as missing
    return value is None or not math.isfinite(value)


def _check_inputs(monthly_premium: float | None, employer_contribution: float | None) -> None:
    """Raise `InvalidRecordError` unless both inputs can be scored."""
    if _is_missing(monthly_premium):
        raise InvalidRecordError("monthlyPremium is missing")
    if _is_missing(employer_contribution):
        raise InvalidRecordError("employerContribution is missing")
    if monthly_premium <= 0:
        raise InvalidRecordError(f"monthlyPremium must be positive, got {monthly_premium}")


def annualized_profitability(
    monthly_premium: float,
    employer_contribution: float,
    config: ProfitabilityConfig,
) -> float:
    """Annual profit as a percentage of annual revenue.

    annual_revenue = premium * 12
    annual_profit = annual_revenue - contribution - support - financial - commission
    score = annual_profit / annual_revenue * 100
    """
    _check_inputs(monthly_premium, employer_contribution)
    annual_revenue = monthly_premium * MONTHS_PER_YEAR
    annual_profit = annual_revenue - employer_contribution - config.fixed_costs
    return (annual_profit / annual_revenue) * 100


def simple_margin(
    monthly_premium: float,
    employer_contribution: float,
    config: ProfitabilityConfig,
) -> float:
    """Monthly margin as a percentage of the monthly premium."""
    _check_inputs(monthly_premium, employer_contribution)
    return ((monthly_premium - employer_contribution) / monthly_premium) * 100


SCORING_STRATEGIES: dict[ScoringMode, ScoringStrategy] = {
    ScoringMode.ANNUALIZED: annualized_profitability,
    ScoringMode.SIMPLE: simple_margin,
}


def profitability_score(
    monthly_premium: float | None,
    employer_contribution: float | None,
    config: ProfitabilityConfig,
) -> float:
    """Score with the strategy named by `config.mode`.

    Raises:
        InvalidRecordError: if the inputs cannot be scored.
    """
    strategy = SCORING_STRATEGIES[ScoringMode(config.mode)]
    return strategy(monthly_premium, employer_contribution, config)


def classify_churn_risk(
    monthly_premium: float | None,
    employer_contribution: float | None,
    threshold: float = 0.5,
) -> ChurnRisk:
    """High when contribution/premium is strictly below `threshold`, else Low.

    Returns Unknown instead of dividing by a zero, negative or missing premium.
    """
    try:
        _check_inputs(monthly_premium, employer_contribution)
    except InvalidRecordError:
        return ChurnRisk.UNKNOWN
    ratio = employer_contribution / monthly_premium
    return ChurnRisk.HIGH if ratio < threshold else ChurnRisk.LOW


def _revenue(record: RawRecord) -> float | None:
    if _is_missing(record.monthly_premium) or _is_missing(record.employer_contribution):
        return None
    return record.monthly_premium + record.employer_contribution


def enrich(
    record: RawRecord | Mapping[str, Any],
    config: ProfitabilityConfig | None = None,
) -> EnrichedRecord:
    """Return a new `EnrichedRecord` with revenue, score and churn risk.

    Args:
        record: A RawRecord, or a mapping with camelCase or snake_case keys.
        config: Scoring configuration; defaults to `ProfitabilityConfig()`.

    Returns:
        A frozen EnrichedRecord. Records that cannot be scored come back with
        `status=invalid`, `profitability_score=None` and `churn_risk=Unknown`.
    """
    config = config or ProfitabilityConfig()
    if isinstance(record, RawRecord):
        raw = record
    else:
        raw = RawRecord.model_validate(dict(record))

    # Re-enrichment starts from the raw fields only
    fields = {k: v for k, v in raw.model_dump().items() if k not in _DERIVED_KEYS}
    fields["revenue"] = _revenue(raw)

    try:
        score = profitability_score(raw.monthly_premium, raw.employer_contribution, config)
    except InvalidRecordError as exc:
        log.debug("Record id=%s not scored: %s", raw.id, exc)
        fields.update(
            profitability_score=None,
            churn_risk=ChurnRisk.UNKNOWN,
            status=RecordStatus.INVALID,
            invalid_reason=str(exc),
        )
        return EnrichedRecord.model_validate(fields)

    fields.update(
        profitability_score=score,
        churn_risk=classify_churn_risk(
            raw.monthly_premium, raw.employer_contribution, config.churn_threshold
        ),
        status=RecordStatus.VALID,
        invalid_reason=None,
    )
    return EnrichedRecord.model_validate(fields)
