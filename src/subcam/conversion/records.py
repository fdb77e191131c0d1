"""Typed records flowing between conversion stages.

RawObservationRow is one camera-detected event after parsing. It has fixed
fields; the open-ended part of the data (one column per taxon) only appears
later, as a mapping inside the aggregator.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RawObservationRow(BaseModel):
    """One parsed input line. Immutable once built by the loader."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    row_number: int = Field(ge=1, description="1-based position among parsed data rows")
    file_name: str = ""
    clock_time: str = ""
    timestamp_text: str = ""
    timestamp: Optional[datetime] = None
    event_observation: str = ""
    quantity: int = Field(0, ge=0)
    quantity_text: str = ""
    common_name: str = ""
    scientific_name: str = ""
    confidence: Optional[int] = None
    quality: Optional[int] = None
    # Lower taxonomic ranks consulted after the common name (_raw2 genus, family)
    fallback_names: tuple[str, ...] = ()

    @property
    def event_date(self) -> Optional[date]:
        """Calendar day of the adjusted timestamp."""
        return self.timestamp.date() if self.timestamp is not None else None


class ResolvedRow(BaseModel):
    """A RawObservationRow with its chosen taxon label (None = rejected)."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    observation: RawObservationRow
    taxon: Optional[str] = None

    @property
    def event_date(self) -> Optional[date]:
        return self.observation.event_date

    @property
    def quantity(self) -> int:
        return self.observation.quantity
