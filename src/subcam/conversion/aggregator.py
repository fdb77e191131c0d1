"""Daily aggregation of resolved observations into Nmax and Obvs matrices.

Both matrices come from the same grouping pass and differ only in how a
row's quantity is folded into its (date, taxon) cell:

- Nmax: the cell keeps the largest single-event quantity (peak abundance).
- Obvs: the cell counts events, regardless of how many individuals each had.

After grouping, buckets are walked in ascending date order while a
DiscoveryState accumulates the taxa seen so far and the running totals.
That state is created fresh for every call and never escapes it.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Literal

from subcam.conversion import columns
from subcam.conversion.errors import ConversionError
from subcam.conversion.records import ResolvedRow

__all__ = [
    'AggregationMode',
    'DailyBucket',
    'DiscoveryState',
    'AggregationResult',
    'partition_by_date',
    'aggregate',
    'aggregate_nmax',
    'aggregate_obvs',
]

logger = logging.getLogger(__name__)

AggregationMode = Literal["nmax", "obvs"]


@dataclass
class DailyBucket:
    """Accumulator for one calendar day."""
    day: date
    total_observations: int = 0
    values: dict = field(default_factory=dict)

    def add(self, taxon: str, quantity: int, mode: AggregationMode) -> None:
        self.total_observations += 1
        if mode == "nmax":
            self.values[taxon] = max(self.values.get(taxon, 0), quantity)
        else:
            self.values[taxon] = self.values.get(taxon, 0) + 1

    def active_taxa(self) -> list:
        """Taxa with a non-zero value today, in first-seen order."""
        return [taxon for taxon, value in self.values.items() if value > 0]


@dataclass
class DiscoveryState:
    """Running discovery statistics threaded through buckets in date order."""
    seen: set = field(default_factory=set)
    cumulative_observations: int = 0
    cumulative_new: int = 0

    def advance(self, bucket: DailyBucket) -> dict:
        """Fold one day into the state and return that day's summary fields."""
        active = bucket.active_taxa()
        new_today = [taxon for taxon in active if taxon not in self.seen]
        self.seen.update(new_today)
        self.cumulative_new += len(new_today)
        self.cumulative_observations += bucket.total_observations

        return {
            columns.DATE: bucket.day.isoformat(),
            columns.TOTAL_OBSERVATIONS: bucket.total_observations,
            columns.CUMULATIVE_OBSERVATIONS: self.cumulative_observations,
            columns.UNIQUE_TODAY: len(active),
            columns.NEW_TODAY: len(new_today),
            columns.CUMULATIVE_NEW: self.cumulative_new,
            columns.CUMULATIVE_SPECIES: len(self.seen),
        }


@dataclass
class AggregationResult:
    """Finished matrix plus the column order it was built with."""
    mode: str
    rows: list
    taxa: list

    @property
    def header(self) -> list:
        return columns.SUMMARY_COLUMNS + self.taxa


def partition_by_date(rows: Iterable[ResolvedRow], mode: AggregationMode) -> dict:
    """Group rows into DailyBuckets keyed by calendar date.

    Rows without a taxon or a timestamp are skipped; the converter has
    already reported them. Repeated dates (e.g. from concatenated files)
    merge into one bucket.
    """
    buckets: dict = {}
    for row in rows:
        day = row.event_date
        if row.taxon is None or day is None:
            continue
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = DailyBucket(day=day)
        bucket.add(row.taxon, row.quantity, mode)
    return buckets


def _fill_gaps(buckets: dict) -> dict:
    """Insert empty buckets for calendar days missing between first and last date."""
    if not buckets:
        return buckets
    first, last = min(buckets), max(buckets)
    filled = dict(buckets)
    day = first
    while day < last:
        day += timedelta(days=1)
        filled.setdefault(day, DailyBucket(day=day))
    return filled


def aggregate(rows: Iterable[ResolvedRow], mode: AggregationMode,
              fill_missing_days: bool = False) -> AggregationResult:
    """Build the daily matrix for ``mode``.

    Parameters
    ----------
    rows : iterable of ResolvedRow
        Filtered rows with their taxon labels.
    mode : {"nmax", "obvs"}
        Combine rule for per-species cells.
    fill_missing_days : bool, optional
        Emit zero rows for days without observations between the first
        and last observed date.

    Returns
    -------
    AggregationResult
        One row per date, ascending. Taxon columns are the union over all
        dates in order of first discovery (ties within a day keep input order).

    Raises
    ------
    ConversionError
        If a taxon label is also the name of a summary column.
    """
    if mode not in ("nmax", "obvs"):
        raise ValueError(f"Unknown aggregation mode: {mode}")

    buckets = partition_by_date(rows, mode)
    if fill_missing_days:
        buckets = _fill_gaps(buckets)

    ordered = [buckets[day] for day in sorted(buckets)]

    taxa: list = []
    known: set = set()
    for bucket in ordered:
        for taxon in bucket.values:
            if taxon not in known:
                known.add(taxon)
                taxa.append(taxon)

    clashes = [taxon for taxon in taxa if taxon in columns.SUMMARY_COLUMNS]
    if clashes:
        raise ConversionError(f"Taxon labels clash with summary columns: {clashes}")

    state = DiscoveryState()
    result_rows = []
    for bucket in ordered:
        row = state.advance(bucket)
        for taxon in taxa:
            row[taxon] = bucket.values.get(taxon, 0)
        result_rows.append(row)

    logger.debug("Aggregated %s matrix: %d dates x %d taxa", mode, len(result_rows), len(taxa))
    return AggregationResult(mode=mode, rows=result_rows, taxa=taxa)


def aggregate_nmax(rows: Iterable[ResolvedRow], fill_missing_days: bool = False) -> AggregationResult:
    """Per-day peak quantity per taxon."""
    return aggregate(rows, "nmax", fill_missing_days)


def aggregate_obvs(rows: Iterable[ResolvedRow], fill_missing_days: bool = False) -> AggregationResult:
    """Per-day event count per taxon."""
    return aggregate(rows, "obvs", fill_missing_days)
