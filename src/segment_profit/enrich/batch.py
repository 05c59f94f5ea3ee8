"""Batch enrichment of a whole dataset.

Enrichment is a pure per-record function, so chunks can be enriched as
independent Dask tasks. `dask.compute` is the join barrier: aggregation only
ever sees the fully enriched list, in input order.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence
from typing import cast, Any as TypingAny

from dask import delayed, compute  # type: ignore[attr-defined]

from segment_profit.config import ProfitabilityConfig, ScoringMode
from segment_profit.enrich.scoring import enrich
from segment_profit.models import EnrichedRecord, RawRecord

log = logging.getLogger(__name__)


def _chunks(records: Sequence[RawRecord], parts: int) -> Iterable[Sequence[RawRecord]]:
    """Split `records` into at most `parts` contiguous chunks."""
    size = max(1, -(-len(records) // parts))
    for i in range(0, len(records), size):
        yield records[i : i + size]


def _enrich_chunk(chunk: Sequence[RawRecord], config: ProfitabilityConfig) -> List[EnrichedRecord]:
    """Runs inside a worker (delayed task)."""
    return [enrich(r, config) for r in chunk]


def enrich_all(
    records: Sequence[RawRecord],
    config: ProfitabilityConfig | None = None,
    npartitions: int = 1,
) -> list[EnrichedRecord]:
    """Enrich every record, optionally spread over Dask partitions.

    Args:
        records: Raw records in dataset order.
        config: Scoring configuration shared by every task.
        npartitions: Number of chunks; 1 enriches inline.

    Returns:
        Enriched records in the same order as `records`.
    """
    config = config or ProfitabilityConfig()
    records = list(records)

    if npartitions <= 1 or len(records) <= 1:
        enriched = _enrich_chunk(records, config)
    else:
        tasks = [delayed(_enrich_chunk)(chunk, config) for chunk in _chunks(records, npartitions)]
        # `compute` is untyped in our environment; cast to Any before calling
        results = cast(TypingAny, compute)(*tasks)
        enriched = [r for part in results for r in part]

    invalid = sum(1 for r in enriched if not r.is_scored)
    log.info(
        "Enriched %d records (mode=%s, invalid=%d)",
        len(enriched),
        ScoringMode(config.mode).value,
        invalid,
    )
    return enriched
