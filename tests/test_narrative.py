from __future__ import annotations

from segment_profit.aggregate.build_insights import summarize
from segment_profit.aggregate.narrative import SCORE_EXPLANATION, build_insight_text
from segment_profit.enrich.scoring import enrich
from segment_profit.models import DatasetSummary


def test_empty_summary_renders_nothing() -> None:
    assert build_insight_text(DatasetSummary()) == ""


def test_narrative_formats_two_decimals_and_labels() -> None:
    records = [
        enrich({"id": 1, "companyName": "Initech", "industry": "Tech", "monthlyPremium": 200,
                "employerContribution": 100, "claimFrequency": 3}),
        enrich({"id": 2, "industry": "Retail", "monthlyPremium": 300,
                "employerContribution": 50, "claimFrequency": 2}),
    ]
    text = build_insight_text(summarize(records))
    lines = text.splitlines()

    assert lines[0] == SCORE_EXPLANATION
    assert "The average monthly premium is $250.00." in lines
    assert "The average employer contribution is $75.00." in lines
    assert "The average claim frequency is 2.50 claims per month." in lines
    assert "The most profitable industry segment is Retail." in lines
    assert "The least profitable industry segment is Tech." in lines
    assert "Top 5 most profitable customers: #2, Initech." in lines
    assert "Top 5 least profitable customers: Initech, #2." in lines
    assert any(line.startswith("The average profitability score is ") and line.endswith("%.")
               for line in lines)


def test_narrative_mentions_unscored_records() -> None:
    records = [
        enrich({"id": 1, "industry": "Tech", "monthlyPremium": 200, "employerContribution": 100}),
        enrich({"id": 2, "industry": "Tech", "monthlyPremium": 0, "employerContribution": 100}),
    ]
    text = build_insight_text(summarize(records))
    assert "1 record(s) could not be scored" in text


def test_narrative_for_fully_unscored_dataset() -> None:
    records = [enrich({"id": 1, "monthlyPremium": 0, "employerContribution": 10})]
    text = build_insight_text(summarize(records))
    assert "None of the 1 records could be scored." in text
