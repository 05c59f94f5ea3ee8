"""Pydantic models for the Raw, Enriched and Insight layers.

Field names are snake_case in Python; every model also accepts and emits the
camelCase names used by uploaded CSV headers and the dashboard
(`model_dump(by_alias=True)`).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChurnRisk(str, Enum):
    HIGH = "High"
    LOW = "Low"
    UNKNOWN = "Unknown"


class RecordStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class RawRecord(_CamelModel):
    """One customer/company entity as generated or parsed from an upload.

    Extra upload columns are kept so they remain available for display.
    """
    model_config = ConfigDict(extra="allow")

    id: int | None = Field(None, ge=0)
    company_name: str | None = None

    # Categorical
    industry: str | None = None
    state: str | None = None
    aca_tier: str | None = None
    plan_type: str | None = None

    # Numeric
    company_size: float | None = None
    employee_age: float | None = None
    monthly_premium: float | None = None
    employer_contribution: float | None = None
    claim_frequency: float | None = None
    fips_code: float | None = None
    employee_tenure: float | None = None


class EnrichedRecord(RawRecord):
    """A RawRecord plus the fields derived by enrichment.

    Attributes:
        revenue: monthly premium plus employer contribution.
        profitability_score: percentage score; None when the record is invalid.
        churn_risk: High/Low, or Unknown when the record is invalid.
        status: valid when a score could be computed.
        invalid_reason: why the record could not be scored.
    """
    revenue: float | None = None
    profitability_score: float | None = None
    churn_risk: ChurnRisk = ChurnRisk.UNKNOWN
    status: RecordStatus = RecordStatus.VALID
    invalid_reason: str | None = None

    @property
    def is_scored(self) -> bool:
        return self.status is RecordStatus.VALID and self.profitability_score is not None

    @property
    def label(self) -> str:
        """Display label: company name, falling back to `#<id>`, then "unnamed"."""
        if self.company_name:
            return self.company_name
        return f"#{self.id}" if self.id is not None else "unnamed"


class AggregateInsight(_CamelModel):
    """Per-group summary for one value of a categorical field."""
    key: str
    average_profitability: float | None
    count: int = Field(..., gt=0)
    scored_count: int = Field(..., ge=0)


class DatasetSummary(_CamelModel):
    """Whole-dataset statistics; numeric fields are None when nothing was scored."""
    record_count: int = Field(0, ge=0)
    scored_count: int = Field(0, ge=0)
    average_profitability: float | None = None
    average_monthly_premium: float | None = None
    average_employer_contribution: float | None = None
    average_claim_frequency: float | None = None
    most_profitable_industry: str | None = None
    least_profitable_industry: str | None = None
    top_records: list[EnrichedRecord] = Field(default_factory=list)
    bottom_records: list[EnrichedRecord] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.record_count == 0
