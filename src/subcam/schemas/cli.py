"""CLIConfig: Command-line operational overrides.

Minimal configuration for the settings that commonly change between runs:
filter thresholds, gap filling and verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import Field
from subcam.schemas.base import SubcamBaseModel


class CLIConfig(SubcamBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(min_confidence=4, log_level="DEBUG")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    min_confidence: Optional[int] = Field(None, ge=0)
    min_quality: Optional[int] = Field(None, ge=0)
    fill_missing_days: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

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
        if filters:
            overrides["filters"] = filters

        if self.fill_missing_days is not None:
            overrides["aggregation"] = {"fill_missing_days": self.fill_missing_days}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
