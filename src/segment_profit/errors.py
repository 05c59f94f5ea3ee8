"""
Exception hierarchy for record enrichment and dataset loading.

All exceptions inherit from SegmentError so callers can catch broadly or
narrowly as needed. Each exception carries structured context for logging.
"""

from __future__ import annotations


class SegmentError(Exception):
    """Base exception for all segment_profit errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class InvalidRecordError(SegmentError):
    """A record cannot be scored (missing, zero or negative premium)."""

    def __init__(self, message: str, *, record_id: int | None = None, **kwargs) -> None:
        self.record_id = record_id
        super().__init__(message, **kwargs)


class ParseError(SegmentError):
    """An uploaded file could not be parsed as a table of records."""

    def __init__(self, message: str, *, filename: str | None = None, **kwargs) -> None:
        self.filename = filename
        super().__init__(message, **kwargs)
