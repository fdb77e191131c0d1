"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen for the lifetime of one conversion call.
"""

from typing import Literal, Optional
from pydantic import ConfigDict, Field
from subcam.schemas.base import SubcamBaseModel


class InternalFilterConfig(SubcamBaseModel):
    """Runtime quality filter thresholds."""
    min_confidence: Optional[int] = Field(ge=0)
    min_quality: Optional[int] = Field(ge=0)


class InternalValidationConfig(SubcamBaseModel):
    """Runtime input validation settings."""
    sample_size: int = Field(ge=1)
    warning_compliance: int = Field(ge=0, le=100)
    critical_compliance: int = Field(ge=0, le=100)


class InternalAggregationConfig(SubcamBaseModel):
    """Runtime aggregation settings."""
    fill_missing_days: bool


class InternalReporterConfig(SubcamBaseModel):
    """Runtime reporter settings."""
    max_row_warnings: int = Field(ge=0)


class InternalLoggingConfig(SubcamBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(SubcamBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.min_confidence = config.filters.min_confidence  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code

    All of that happens during config resolution, not in runtime code.
    """

    filters: InternalFilterConfig
    validation: InternalValidationConfig
    aggregation: InternalAggregationConfig
    reporter: InternalReporterConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
