"""
Synthetic customer records for demos and tests.

Values are drawn uniformly within fixed ranges per field. Pass a seed for a
reproducible dataset; without one every call draws fresh values.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from segment_profit.ingest.parse_upload import records_from_frame
from segment_profit.models import RawRecord

log = logging.getLogger(__name__)


# ---------------- Dimensions & categories ---------------- #

STATES = [
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
]
COMPANY_NAMES = [
    "Acme Corp", "Globex Corporation", "Soylent Corp", "Initech", "Umbrella Corp",
    "Hooli", "Vehement Capital Partners", "Massive Dynamic", "Stark Industries",
    "Wayne Enterprises",
]
INDUSTRIES = ["Tech", "Finance", "Healthcare", "Retail"]
ACA_TIERS = ["Bronze", "Silver", "Gold"]
PLAN_TYPES = ["Individual", "Family", "Dependent"]

# ---------------- Numeric ranges (inclusive) ---------------- #

RANGES: dict[str, tuple[int, int]] = {
    "companySize": (10, 499),
    "employeeAge": (18, 64),
    "monthlyPremium": (100, 499),
    "employerContribution": (50, 299),
    "claimFrequency": (0, 9),
    "fipsCode": (10_000, 99_998),
    "employeeTenure": (1, 30),
}


def generate_frame(n: int = 100, seed: int | None = None) -> pd.DataFrame:
    """Generate `n` synthetic customers as a DataFrame with camelCase columns.

    State and company name cycle through their lists by row; every other
    field is drawn independently.
    """
    if n < 0:
        raise ValueError("n must not be negative")

    rng = np.random.default_rng(seed)
    idx = np.arange(n)

    def _ints(column: str) -> np.ndarray:
        low, high = RANGES[column]
        return rng.integers(low, high + 1, size=n)

    frame = pd.DataFrame(
        {
            "id": idx + 1,
            "companyName": [COMPANY_NAMES[i % len(COMPANY_NAMES)] for i in idx],
            "companySize": _ints("companySize"),
            "industry": rng.choice(INDUSTRIES, size=n),
            "employeeAge": _ints("employeeAge"),
            "monthlyPremium": _ints("monthlyPremium"),
            "employerContribution": _ints("employerContribution"),
            "acaTier": rng.choice(ACA_TIERS, size=n),
            "fipsCode": _ints("fipsCode"),
            "state": [STATES[i % len(STATES)] for i in idx],
            "employeeTenure": _ints("employeeTenure"),
            "planType": rng.choice(PLAN_TYPES, size=n),
            "claimFrequency": _ints("claimFrequency"),
        }
    )
    return frame


def generate_records(n: int = 100, seed: int | None = None) -> list[RawRecord]:
    """Generate `n` synthetic RawRecords (ids 1..n)."""
    records = records_from_frame(generate_frame(n, seed))
    log.info("Generated %d synthetic records (seed=%s)", len(records), seed)
    return records
