"""Pydantic configuration schemas for the SUBCAM conversion engine.

All configuration validation, coercion, and normalization happens at
schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration and per-call conversion options
CLIConfig : class
    Command-line operational overrides
"""

from subcam.schemas.resolve import resolve_config
from subcam.schemas.internal import InternalConfig
from subcam.schemas.param import ParamConfig
from subcam.schemas.user import UserConfig
from subcam.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
