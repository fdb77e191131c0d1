"""ParamConfig: Expert defaults for the SUBCAM conversion engine.

This module defines the complete default configuration. ALL conversion
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field
from subcam.schemas.base import SubcamBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class FilterConfig(SubcamBaseModel):
    """Quality filter thresholds. None disables a filter."""
    min_confidence: Optional[int] = Field(None, ge=0, description="Minimum confidence level")
    min_quality: Optional[int] = Field(None, ge=0, description="Minimum quality of video")


class ValidationConfig(SubcamBaseModel):
    """Input format validation settings."""
    sample_size: int = Field(5, ge=1, description="Rows checked by the input validator")
    warning_compliance: int = Field(80, ge=0, le=100)
    critical_compliance: int = Field(50, ge=0, le=100)


class AggregationConfig(SubcamBaseModel):
    """Daily aggregation settings."""
    fill_missing_days: bool = False


class ReporterConfig(SubcamBaseModel):
    """Progress/log reporter settings."""
    max_row_warnings: int = Field(5, ge=0, description="Per-row warnings logged before summarizing")


class LoggingConfig(SubcamBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(SubcamBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all conversion parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    filters: FilterConfig = Field(default_factory=FilterConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    reporter: ReporterConfig = Field(default_factory=ReporterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
