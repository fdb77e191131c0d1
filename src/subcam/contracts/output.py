"""Output matrix contracts.

Enforces the guarantees the aggregator promises for both daily matrices.
These checks look at structure and bookkeeping only (counts, running sums,
ordering); whether a species was identified correctly is not their concern.
"""

import logging

import numpy as np
import pandas as pd

from subcam.conversion import columns
from subcam.contracts.base import require

__all__ = ['assert_matrix_output', 'validate_nmax_output', 'validate_obvs_output']

logger = logging.getLogger(__name__)


def _frame(rows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    require(isinstance(rows, list), f"Output contract violated: rows is {type(rows)}, expected list")
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame.from_records(rows, columns=list(rows[0].keys()))


def assert_matrix_output(rows, mode: str) -> None:
    """Enforce the daily matrix contract for ``mode`` ("nmax" or "obvs").

    Parameters
    ----------
    rows : list of dict or pd.DataFrame
        Aggregator output, one entry per date.
    mode : str
        Selects the mode-specific check (Obvs totals equal taxon sums).

    Raises
    ------
    ContractViolation
        On the first violated invariant.
    """
    label = mode.capitalize()
    df = _frame(rows)

    require(len(df) > 0, f"{label} contract violated: matrix has no rows")

    for col in columns.SUMMARY_COLUMNS:
        require(col in df.columns, f"{label} contract violated: missing required column '{col}'")
    require(
        list(df.columns[:len(columns.SUMMARY_COLUMNS)]) == columns.SUMMARY_COLUMNS,
        f"{label} contract violated: summary columns out of order"
    )

    numeric_cols = [c for c in df.columns if c != columns.DATE]
    taxon_cols = [c for c in df.columns if c not in columns.SUMMARY_COLUMNS]

    for col in numeric_cols:
        values = df[col]
        require(
            all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in values),
            f"{label} contract violated: non-integer value in column '{col}'"
        )
        require(
            bool((values.to_numpy() >= 0).all()),
            f"{label} contract violated: negative value in column '{col}'"
        )

    dates = list(df[columns.DATE])
    require(
        all(earlier < later for earlier, later in zip(dates, dates[1:])),
        f"{label} contract violated: dates are not strictly ascending"
    )

    for col in columns.CUMULATIVE_COLUMNS:
        steps = np.diff(df[col].to_numpy(dtype=np.int64))
        require(
            bool((steps >= 0).all()),
            f"{label} contract violated: '{col}' decreases between consecutive dates"
        )

    totals = df[columns.TOTAL_OBSERVATIONS].to_numpy(dtype=np.int64)
    require(
        np.array_equal(np.cumsum(totals), df[columns.CUMULATIVE_OBSERVATIONS].to_numpy(dtype=np.int64)),
        f"{label} contract violated: '{columns.CUMULATIVE_OBSERVATIONS}' is not the running sum of totals"
    )

    require(
        int(df[columns.CUMULATIVE_SPECIES].max()) <= len(taxon_cols),
        f"{label} contract violated: '{columns.CUMULATIVE_SPECIES}' exceeds the number of taxon columns"
    )

    if taxon_cols:
        taxa = df[taxon_cols].to_numpy(dtype=np.int64)
        positive = (taxa > 0).sum(axis=1)
    else:
        taxa = np.zeros((len(df), 0), dtype=np.int64)
        positive = np.zeros(len(df), dtype=np.int64)
    require(
        np.array_equal(positive, df[columns.UNIQUE_TODAY].to_numpy(dtype=np.int64)),
        f"{label} contract violated: '{columns.UNIQUE_TODAY}' disagrees with positive taxon cells"
    )

    if mode == "obvs":
        require(
            np.array_equal(taxa.sum(axis=1), totals),
            f"{label} contract violated: '{columns.TOTAL_OBSERVATIONS}' is not the sum of taxon counts"
        )

    logger.debug("%s contract satisfied for %d rows x %d taxa", label, len(df), len(taxon_cols))


def validate_nmax_output(rows) -> None:
    """Raise ContractViolation if an Nmax matrix breaks its invariants."""
    assert_matrix_output(rows, "nmax")


def validate_obvs_output(rows) -> None:
    """Raise ContractViolation if an Obvs matrix breaks its invariants."""
    assert_matrix_output(rows, "obvs")
