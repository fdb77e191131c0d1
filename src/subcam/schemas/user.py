"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts the conversion options callers pass to the converter
entry points, with aliases for the common naming patterns
(``minConfidence``, ``MIN_CONFIDENCE`` and ``min_confidence`` all map to
the same field).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Unknown keys are ignored.
"""

from typing import Optional, Any
from pydantic import AliasChoices, Field, field_validator
from subcam.schemas.base import SubcamBaseModel


class UserFilterConfig(SubcamBaseModel):
    """User-facing quality filter config."""
    min_confidence: Optional[int] = Field(None, ge=0)
    min_quality: Optional[int] = Field(None, ge=0)


class UserConfig(SubcamBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        options = UserConfig.model_validate({"minConfidence": 4})
        internal = resolve_config(param_cfg, options)
    """

    min_confidence: Optional[int] = Field(
        None, ge=0,
        validation_alias=AliasChoices("min_confidence", "minConfidence", "MIN_CONFIDENCE"),
    )
    min_quality: Optional[int] = Field(
        None, ge=0,
        validation_alias=AliasChoices("min_quality", "minQuality", "MIN_QUALITY"),
    )
    fill_missing_days: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("fill_missing_days", "fillMissingDays", "FILL_MISSING_DAYS"),
    )
    sample_size: Optional[int] = Field(
        None, ge=1,
        validation_alias=AliasChoices("sample_size", "sampleSize", "SAMPLE_SIZE"),
    )
    log_level: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("log_level", "logLevel", "LOG_LEVEL"),
    )

    # Nested overrides (advanced users)
    filters: Optional[UserFilterConfig] = None

    model_config = SubcamBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("min_confidence", "min_quality", "sample_size", mode="before")
    @classmethod
    def coerce_numeric_strings(cls, v: Any):
        """Accept numeric strings such as "4" from CSV-driven UIs."""
        if isinstance(v, str):
            v = v.strip()
            return int(v) if v else None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize log level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        filters = {}
        if self.min_confidence is not None:
            filters["min_confidence"] = self.min_confidence
        if self.min_quality is not None:
            filters["min_quality"] = self.min_quality
        if self.filters is not None:
            filters.update(self.filters.model_dump(exclude_none=True))
        if filters:
            overrides["filters"] = filters

        if self.fill_missing_days is not None:
            overrides["aggregation"] = {"fill_missing_days": self.fill_missing_days}

        if self.sample_size is not None:
            overrides["validation"] = {"sample_size": self.sample_size}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
