"""Read raw SUBCAM CSV text into observation rows.

Two source layouts are recognised:

- ``raw``: the standard export with ``File Name``, ``Adjusted Date and Time``,
  ``Quantity (Nmax)``, ``Common Name``, ``Lowest Order Scientific Name`` etc.
- ``raw2``: the lower-case export (``file_name``, ``quantity``, ``note``,
  ``species``, ``genus`` ...) whose timestamp lives in the clip file name.
  Unquoted commas in its trailing ``notes`` column are merged back into it.

Lines are tokenized with the csv module and tabulated with pandas; every
cell is kept as text and cleaned through the normalizer. Malformed lines
are skipped and counted, never fatal.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from subcam.conversion import columns
from subcam.conversion.errors import EmptyInputError
from subcam.conversion.normalizer import (
    normalize_text,
    parse_level,
    parse_quantity,
    parse_timestamp,
    timestamp_from_filename,
)
from subcam.conversion.records import RawObservationRow

__all__ = ['RawTable', 'read_raw_csv', 'detect_source_format', 'resolve_header_map', 'build_rows']

logger = logging.getLogger(__name__)

RAW = "raw"
RAW2 = "raw2"


@dataclass
class RawTable:
    """Parsed CSV before typing: normalized headers and text cells."""
    headers: list
    records: list
    source_format: str = RAW
    skipped_lines: int = 0
    merged_note_lines: int = 0
    header_map: dict = field(default_factory=dict)

    def sample(self, size: int) -> list:
        return self.records[:size]


def detect_source_format(headers) -> str:
    """Return ``raw2`` when every _raw2 header is present, else ``raw``."""
    lowered = {str(h).strip().lower() for h in headers}
    if all(name in lowered for name in columns.RAW2_COLUMNS):
        return RAW2
    return RAW


def resolve_header_map(headers) -> dict:
    """Map canonical raw column names to the headers actually present.

    Matching ignores case and whitespace runs; known aliases such as
    ``Confidence Level (1-5)`` are accepted for their canonical column.
    """
    by_key = {normalize_text(h).lower(): h for h in headers}
    header_map = {}
    for canonical in columns.RAW_COLUMNS + columns.TIMESTAMP_FALLBACK_COLUMNS:
        for candidate in [canonical] + columns.HEADER_ALIASES.get(canonical, []):
            actual = by_key.get(candidate.lower())
            if actual is not None:
                header_map[canonical] = actual
                break
    return header_map


def _fit_fields(fields: list, width: int, source_format: str, counters: dict) -> Optional[list]:
    """Pad short lines; merge _raw2 notes overflow; drop other over-long lines."""
    if len(fields) < width:
        return fields + [""] * (width - len(fields))
    if len(fields) == width:
        return fields
    if source_format == RAW2 and width == len(columns.RAW2_COLUMNS):
        # Overflow belongs to the free-text notes column
        keep = width - 1
        counters["merged"] += 1
        return fields[:keep] + [" ".join(f.strip() for f in fields[keep:] if f.strip())]
    counters["skipped"] += 1
    return None


def read_raw_csv(csv_text: str) -> RawTable:
    """Parse CSV text into a RawTable.

    Raises
    ------
    EmptyInputError
        If the text has no header or no data rows.
    """
    text = (csv_text or "").lstrip("\ufeff")
    if not text.strip():
        raise EmptyInputError("No data: CSV input is empty")

    lines = [
        fields for fields in csv.reader(io.StringIO(text), skipinitialspace=True)
        if any(f.strip() for f in fields)
    ]
    if not lines:
        raise EmptyInputError("No data: CSV input has no header row")

    headers = [normalize_text(h) for h in lines[0]]
    source_format = detect_source_format(headers)
    counters = {"skipped": 0, "merged": 0}

    body = []
    for fields in lines[1:]:
        fitted = _fit_fields(fields, len(headers), source_format, counters)
        if fitted is not None:
            body.append(fitted)

    if not body:
        raise EmptyInputError("No data: CSV must contain a header row and at least one data row")

    df = pd.DataFrame(body, columns=headers, dtype=str)
    df = df.apply(lambda col: col.map(normalize_text))
    records = df.to_dict(orient="records")

    if counters["skipped"]:
        logger.warning("Skipped %d malformed CSV lines", counters["skipped"])
    if counters["merged"]:
        logger.debug("Merged comma overflow into notes for %d lines", counters["merged"])

    return RawTable(
        headers=headers,
        records=records,
        source_format=source_format,
        skipped_lines=counters["skipped"],
        merged_note_lines=counters["merged"],
        header_map=resolve_header_map(headers) if source_format == RAW else {},
    )


def _raw_row(record: dict, header_map: dict, row_number: int) -> RawObservationRow:
    def cell(canonical: str) -> str:
        header = header_map.get(canonical)
        return record.get(header, "") if header is not None else ""

    timestamp_text = cell(columns.ADJUSTED_TIMESTAMP)
    timestamp = parse_timestamp(timestamp_text)
    if timestamp is None:
        for fallback in columns.TIMESTAMP_FALLBACK_COLUMNS:
            if cell(fallback):
                timestamp = parse_timestamp(cell(fallback))
                if timestamp is not None:
                    timestamp_text = cell(fallback)
                    break

    quantity_text = cell(columns.QUANTITY)
    return RawObservationRow(
        row_number=row_number,
        file_name=cell(columns.FILE_NAME),
        clock_time=cell(columns.CLOCK_TIME),
        timestamp_text=timestamp_text,
        timestamp=timestamp,
        event_observation=cell(columns.EVENT_OBSERVATION),
        quantity=parse_quantity(quantity_text),
        quantity_text=quantity_text,
        common_name=cell(columns.COMMON_NAME),
        scientific_name=cell(columns.SCIENTIFIC_NAME),
        confidence=parse_level(cell(columns.CONFIDENCE)),
        quality=parse_level(cell(columns.QUALITY)),
    )


def _raw2_row(record: dict, row_number: int) -> RawObservationRow:
    by_key = {key.lower(): value for key, value in record.items()}
    file_name = by_key.get("file_name", "")
    timestamp = timestamp_from_filename(file_name)
    quantity_text = by_key.get("quantity", "")
    return RawObservationRow(
        row_number=row_number,
        file_name=file_name,
        clock_time=by_key.get("time_stamp", ""),
        timestamp_text=timestamp.isoformat(sep=" ") if timestamp is not None else "",
        timestamp=timestamp,
        quantity=parse_quantity(quantity_text),
        quantity_text=quantity_text,
        common_name=by_key.get("note", ""),
        scientific_name=by_key.get("species", ""),
        confidence=parse_level(by_key.get("confidence_1-5")),
        fallback_names=tuple(
            name for name in (by_key.get("genus", ""), by_key.get("family", "")) if name
        ),
    )


def build_rows(table: RawTable) -> list:
    """Type every record of a RawTable as a RawObservationRow."""
    if table.source_format == RAW2:
        return [_raw2_row(record, i) for i, record in enumerate(table.records, start=1)]
    return [_raw_row(record, table.header_map, i) for i, record in enumerate(table.records, start=1)]
