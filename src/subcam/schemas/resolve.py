"""Layering of conversion options into one frozen InternalConfig.

Each converter call resolves its options once through resolve_config();
stages then read the returned InternalConfig and never the raw dicts.

Precedence (highest to lowest):
1. CLIConfig (command-line overrides)
2. UserConfig (conversion options / user file)
3. ParamConfig (expert defaults)
"""

from typing import Union, Optional
from subcam.schemas.param import ParamConfig
from subcam.schemas.user import UserConfig
from subcam.schemas.cli import CLIConfig
from subcam.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Overlay option sections onto a base config dict.

    Sections (``filters``, ``aggregation`` ...) merge key by key so that an
    override naming one threshold keeps its siblings; scalars are replaced.

    >>> deep_merge({"filters": {"min_confidence": 3, "min_quality": 0}},
    ...            {"filters": {"min_quality": 2}})
    {'filters': {'min_confidence': 3, 'min_quality': 2}}
    """
    merged = dict(base)
    for override in overrides:
        for section, value in override.items():
            current = merged.get(section)
            if isinstance(current, dict) and isinstance(value, dict):
                value = deep_merge(current, value)
            merged[section] = value
    return merged


def resolve_config(
    param_cfg: Optional[Union[dict, ParamConfig]] = None,
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Resolve final runtime configuration from param, user, and CLI configs.

    Parameters
    ----------
    param_cfg : dict or ParamConfig, optional
        Expert configuration with complete defaults. ``None`` uses ParamConfig().
    user_cfg : dict or UserConfig, optional
        User overrides, typically the ``options`` passed to a conversion call.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    ValidationError
        If any config fails Pydantic validation

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), {"minConfidence": 4})
    >>> config.filters.min_confidence
    4
    """
    if param_cfg is None:
        param = ParamConfig()
    elif not isinstance(param_cfg, ParamConfig):
        param = ParamConfig.model_validate(param_cfg)
    else:
        param = param_cfg

    if user_cfg is None or (isinstance(user_cfg, dict) and not user_cfg):
        user = UserConfig()
    elif not isinstance(user_cfg, UserConfig):
        user = UserConfig.model_validate(user_cfg)
    else:
        user = user_cfg

    if cli_cfg is None or (isinstance(cli_cfg, dict) and not cli_cfg):
        cli = CLIConfig()
    elif not isinstance(cli_cfg, CLIConfig):
        cli = CLIConfig.model_validate(cli_cfg)
    else:
        cli = cli_cfg

    merged = deep_merge(
        param.model_dump(),
        user.to_internal_overrides(),
        cli.to_internal_overrides(),
    )

    return InternalConfig.model_validate(merged)
