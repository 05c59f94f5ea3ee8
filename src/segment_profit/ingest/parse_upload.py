"""Parsing helpers for uploaded CSV files.

`parse_upload` reads a CSV (header row first) with pandas and hands the frame
to `records_from_frame`, which coerces numeric-looking columns to numbers and
turns each row into a `RawRecord`. Missing, non-numeric or infinite cells
become None; deciding whether such a row can be scored is left to enrichment.
"""

from __future__ import annotations

import io
import logging
from os import PathLike
from pathlib import Path
from typing import IO, Any, Union

import numpy as np
import pandas as pd
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from segment_profit.errors import ParseError
from segment_profit.models import RawRecord

log = logging.getLogger(__name__)

UploadSource = Union[str, PathLike, bytes, IO[Any]]

ALLOWED_SUFFIXES = {".csv"}

NUMERIC_FIELDS = (
    "company_size",
    "employee_age",
    "monthly_premium",
    "employer_contribution",
    "claim_frequency",
    "fips_code",
    "employee_tenure",
)
TEXT_FIELDS = ("company_name", "industry", "state", "aca_tier", "plan_type")


def _columns_for(field: str) -> tuple[str, str]:
    return to_camel(field), field


def _as_text(value: Any) -> str | None:
    if pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


def _assign_ids(frame: pd.DataFrame) -> pd.Series:
    """Keep the `id` column when it is complete and unique, else number rows 1..n."""
    positional = pd.Series(range(1, len(frame) + 1), index=frame.index)
    if "id" not in frame.columns:
        return positional

    ids = pd.to_numeric(frame["id"], errors="coerce")
    if ids.isna().any() or ids.duplicated().any() or (ids < 0).any() or (ids % 1 != 0).any():
        log.warning("Column 'id' is incomplete or not unique. Assigning row numbers instead.")
        return positional
    return ids.astype(int)


def records_from_frame(frame: pd.DataFrame) -> list[RawRecord]:
    """Convert a tabular frame into RawRecords with type coercion.

    Args:
        frame: DataFrame whose columns use camelCase (or snake_case) field names.

    Returns:
        One RawRecord per non-blank row, in frame order.

    Raises:
        ParseError: if a row cannot be represented as a record.
    """
    pdf = frame.copy()
    pdf.columns = [str(c).strip() for c in pdf.columns]
    pdf = pdf.dropna(how="all").reset_index(drop=True)

    for field in NUMERIC_FIELDS:
        for col in _columns_for(field):
            if col in pdf.columns:
                # "inf" cells parse as floats; treat them like any other bad number
                pdf[col] = pd.to_numeric(pdf[col], errors="coerce").replace([np.inf, -np.inf], np.nan)

    for field in TEXT_FIELDS:
        for col in _columns_for(field):
            if col in pdf.columns:
                pdf[col] = pdf[col].map(_as_text)

    ids = _assign_ids(pdf)
    pdf = pdf.astype(object).where(pdf.notna(), None)
    pdf["id"] = ids.astype(object)

    records: list[RawRecord] = []
    for pos, row in enumerate(pdf.to_dict(orient="records"), start=1):
        try:
            records.append(RawRecord.model_validate(row))
        except ValidationError as exc:
            raise ParseError(f"Row {pos} is not a valid record: {exc}") from exc
    return records


def _source_name(source: UploadSource, filename: str | None) -> str | None:
    if filename:
        return filename
    if isinstance(source, (str, PathLike)):
        return str(source)
    return getattr(source, "name", None)


def parse_upload(source: UploadSource, filename: str | None = None) -> list[RawRecord]:
    """Parse an uploaded CSV file into RawRecords.

    Args:
        source: Path, raw bytes, or a file-like object (e.g. a Streamlit upload).
        filename: Original file name, used for the extension check and messages.

    Returns:
        Records in file order.

    Raises:
        ParseError: for a non-CSV extension, unreadable content, an empty file,
            or a table without any known record column.
    """
    name = _source_name(source, filename)
    if name is not None and Path(name).suffix.lower() not in ALLOWED_SUFFIXES:
        raise ParseError(f"Unsupported file type for {name!r}; expected a .csv file.", filename=name)

    if isinstance(source, bytes):
        source = io.BytesIO(source)

    try:
        frame = pd.read_csv(source, header=0, skip_blank_lines=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, ValueError) as exc:
        raise ParseError(f"Could not read {name or 'upload'} as CSV: {exc}", filename=name) from exc

    known = {col for f in NUMERIC_FIELDS + TEXT_FIELDS for col in _columns_for(f)}
    if not known.intersection(str(c).strip() for c in frame.columns):
        raise ParseError(
            f"{name or 'upload'} has no recognised record columns.",
            filename=name,
            details={"columns": [str(c) for c in frame.columns]},
        )

    records = records_from_frame(frame)
    if not records:
        raise ParseError(f"{name or 'upload'} contains no data rows.", filename=name)

    log.info("Parsed %d records from %s", len(records), name or "upload")
    return records
