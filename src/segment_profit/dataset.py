"""In-memory dataset and its single-writer store.

A `Dataset` is an immutable snapshot of enriched records. `DatasetStore`
holds at most one of them and replaces it whole: the new dataset is fully
parsed and enriched before the swap, so a failed upload leaves the previous
dataset in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

from segment_profit.config import ProfitabilityConfig
from segment_profit.enrich.batch import enrich_all
from segment_profit.ingest.generate import generate_records
from segment_profit.ingest.parse_upload import UploadSource, parse_upload
from segment_profit.models import EnrichedRecord, RawRecord

log = logging.getLogger(__name__)

SOURCE_SYNTHETIC = "synthetic"
SOURCE_UPLOAD = "upload"


@dataclass(frozen=True)
class Dataset:
    """Enriched records plus where they came from and how they were scored."""
    records: tuple[EnrichedRecord, ...]
    config: ProfitabilityConfig
    source: str
    name: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_records(
        cls,
        raw: Sequence[RawRecord],
        config: ProfitabilityConfig | None = None,
        source: str = SOURCE_SYNTHETIC,
        name: str | None = None,
        npartitions: int = 1,
    ) -> "Dataset":
        config = config or ProfitabilityConfig()
        enriched = enrich_all(raw, config, npartitions=npartitions)
        return cls(records=tuple(enriched), config=config, source=source, name=name)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def invalid_records(self) -> list[EnrichedRecord]:
        return [r for r in self.records if not r.is_scored]

    def rescored(self, config: ProfitabilityConfig, npartitions: int = 1) -> "Dataset":
        """Return a new Dataset with the same records scored under `config`."""
        return Dataset.from_records(
            self.records, config, source=self.source, name=self.name, npartitions=npartitions
        )


class DatasetStore:
    """Holds the current dataset; every load is a full, atomic replace."""

    def __init__(self, config: ProfitabilityConfig | None = None, npartitions: int = 1) -> None:
        self.config = config or ProfitabilityConfig()
        self.npartitions = npartitions
        self._current: Dataset | None = None

    @property
    def current(self) -> Dataset | None:
        return self._current

    def replace(self, dataset: Dataset) -> Dataset:
        previous = len(self._current) if self._current is not None else 0
        self._current = dataset
        log.info(
            "Dataset replaced: source=%s records=%d (previous=%d)",
            dataset.source,
            len(dataset),
            previous,
        )
        return dataset

    def load_generated(self, n: int = 100, seed: int | None = None) -> Dataset:
        raw = generate_records(n, seed)
        dataset = Dataset.from_records(
            raw, self.config, source=SOURCE_SYNTHETIC, npartitions=self.npartitions
        )
        return self.replace(dataset)

    def load_upload(self, source: UploadSource, filename: str | None = None) -> Dataset:
        """Parse and enrich an upload, then swap it in.

        Raises:
            ParseError: if the upload cannot be parsed; the current dataset is kept.
        """
        raw = parse_upload(source, filename)
        dataset = Dataset.from_records(
            raw, self.config, source=SOURCE_UPLOAD, name=filename, npartitions=self.npartitions
        )
        return self.replace(dataset)

    def set_config(self, config: ProfitabilityConfig) -> Dataset | None:
        """Switch scoring config and rescore the current dataset, if any."""
        self.config = config
        if self._current is None:
            return None
        return self.replace(self._current.rescored(config, self.npartitions))

    def clear(self) -> None:
        self._current = None
