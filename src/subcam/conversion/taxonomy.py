"""Taxon resolution: one identity label per observation row.

Scientific names always win over common names. They are the join key
used when daily matrices from several deployments are merged, so a row
is only labelled by its common name when no scientific name was recorded.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from subcam.conversion import columns
from subcam.conversion.normalizer import normalize_text
from subcam.conversion.records import RawObservationRow, ResolvedRow

__all__ = ['choose_taxon_label', 'resolve_rows']

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    text = normalize_text(value)
    return text if isinstance(text, str) else str(text)


def choose_taxon_label(row: Union[RawObservationRow, Mapping[str, Any]]) -> Optional[str]:
    """Pick the label a row is aggregated under.

    Parameters
    ----------
    row : RawObservationRow or mapping
        A parsed row, or a dict keyed by raw column headers
        (``Lowest Order Scientific Name``, ``Common Name``).

    Returns
    -------
    str or None
        Scientific name, else common name, else the first non-empty
        fallback rank, else None (row excluded from aggregation).

    Examples
    --------
    >>> choose_taxon_label({"Lowest Order Scientific Name": "Gadus morhua", "Common Name": "Cod"})
    'Gadus morhua'
    >>> choose_taxon_label({"Lowest Order Scientific Name": "", "Common Name": "Cod"})
    'Cod'
    """
    if isinstance(row, RawObservationRow):
        candidates = [row.scientific_name, row.common_name, *row.fallback_names]
    else:
        candidates = [
            row.get(columns.SCIENTIFIC_NAME),
            row.get(columns.COMMON_NAME),
        ]

    for candidate in candidates:
        label = _clean(candidate)
        if label:
            return label
    return None


def resolve_rows(rows: Iterable[RawObservationRow]) -> list[ResolvedRow]:
    """Attach a taxon label to every row, keeping unresolved rows marked with None."""
    resolved = [ResolvedRow(observation=row, taxon=choose_taxon_label(row)) for row in rows]
    logger.debug("Resolved taxa for %d rows", len(resolved))
    return resolved
