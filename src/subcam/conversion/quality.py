"""Confidence and video-quality filtering.

A threshold only applies to rows that actually record the field: a row
without a confidence level is never dropped by the confidence filter.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from subcam.conversion.records import RawObservationRow

__all__ = ['QualityFilter', 'FilterOutcome']

logger = logging.getLogger(__name__)


@dataclass
class FilterOutcome:
    """Rows kept and rows rejected by one filter pass."""
    passed: list = field(default_factory=list)
    rejected: list = field(default_factory=list)


class QualityFilter:
    """Conjunctive minimum-confidence / minimum-quality filter.

    A threshold of None or 0 disables that criterion.
    """

    def __init__(self, min_confidence: Optional[int] = None, min_quality: Optional[int] = None):
        self.min_confidence = min_confidence or None
        self.min_quality = min_quality or None

    @classmethod
    def from_config(cls, config) -> "QualityFilter":
        """Build from an InternalConfig."""
        return cls(config.filters.min_confidence, config.filters.min_quality)

    @property
    def active(self) -> bool:
        return self.min_confidence is not None or self.min_quality is not None

    def passes(self, row: RawObservationRow) -> bool:
        if (self.min_confidence is not None and row.confidence is not None
                and row.confidence < self.min_confidence):
            return False
        if (self.min_quality is not None and row.quality is not None
                and row.quality < self.min_quality):
            return False
        return True

    def apply(self, rows: Iterable[RawObservationRow]) -> FilterOutcome:
        outcome = FilterOutcome()
        for row in rows:
            (outcome.passed if self.passes(row) else outcome.rejected).append(row)

        if self.active:
            logger.debug(
                "Quality filter (confidence>=%s, quality>=%s): kept %d, rejected %d",
                self.min_confidence, self.min_quality,
                len(outcome.passed), len(outcome.rejected),
            )
        return outcome
