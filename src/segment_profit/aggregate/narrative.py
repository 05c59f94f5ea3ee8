"""Plain-text insight summary built from a `DatasetSummary`."""
from __future__ import annotations

from segment_profit.models import DatasetSummary, EnrichedRecord

SCORE_EXPLANATION = (
    "Profitability Score represents the annual profit per customer after accounting "
    "for various costs and contributions. Higher scores indicate more profitable customers."
)


def _labels(records: list[EnrichedRecord]) -> str:
    return ", ".join(r.label for r in records)


def build_insight_text(summary: DatasetSummary) -> str:
    """Render the summary as one sentence per line.

    Currency and percentage values use two decimal places. An empty summary
    renders as an empty string.
    """
    if summary.is_empty:
        return ""

    lines = [SCORE_EXPLANATION]
    if summary.average_profitability is None:
        lines.append(f"None of the {summary.record_count} records could be scored.")
        return "\n".join(lines) + "\n"

    lines.append(f"The average profitability score is {summary.average_profitability:.2f}%.")
    if summary.most_profitable_industry is not None:
        lines.append(f"The most profitable industry segment is {summary.most_profitable_industry}.")
        lines.append(f"The least profitable industry segment is {summary.least_profitable_industry}.")
    lines.append(f"The average monthly premium is ${summary.average_monthly_premium:.2f}.")
    lines.append(f"The average employer contribution is ${summary.average_employer_contribution:.2f}.")
    if summary.average_claim_frequency is not None:
        lines.append(
            f"The average claim frequency is {summary.average_claim_frequency:.2f} claims per month."
        )
    lines.append(f"Top 5 most profitable customers: {_labels(summary.top_records)}.")
    lines.append(f"Top 5 least profitable customers: {_labels(summary.bottom_records)}.")

    unscored = summary.record_count - summary.scored_count
    if unscored:
        lines.append(f"{unscored} record(s) could not be scored and were left out of these figures.")

    return "\n".join(lines) + "\n"
