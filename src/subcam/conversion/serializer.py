"""CSV text <-> row-dict conversion for the daily matrices.

Output text uses a single header line, comma separators, ``\\n`` line
endings and no index column. Reading back converts every non-Date
cell to an int so that serialize -> parse -> serialize is lossless.
"""

import io
import logging
from typing import Optional

import pandas as pd

from subcam.conversion import columns
from subcam.conversion.normalizer import parse_quantity

__all__ = ['data_to_csv', 'csv_to_data', 'to_dataframe']

logger = logging.getLogger(__name__)


def to_dataframe(rows: list, header: Optional[list] = None) -> pd.DataFrame:
    """Build a DataFrame whose column order follows the first row (or ``header``)."""
    if not rows:
        return pd.DataFrame(columns=header or [])
    order = header or list(rows[0].keys())
    return pd.DataFrame.from_records(rows, columns=order)


def data_to_csv(rows: list, header: Optional[list] = None) -> str:
    """Serialize matrix rows to CSV text. Empty input gives ``""``.

    Examples
    --------
    >>> data_to_csv([{"Date": "2024-01-01", "Total Observations": 2}])
    'Date,Total Observations\\n2024-01-01,2\\n'
    """
    if not rows:
        return ""
    return to_dataframe(rows, header).to_csv(index=False, lineterminator="\n")


def csv_to_data(text: str) -> list:
    """Parse matrix CSV text back into row dicts with integer counts."""
    if not text or not text.strip():
        return []
    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    rows = []
    for record in df.to_dict(orient="records"):
        rows.append({
            key: (value if key == columns.DATE else parse_quantity(value))
            for key, value in record.items()
        })
    logger.debug("Parsed %d matrix rows from CSV", len(rows))
    return rows
