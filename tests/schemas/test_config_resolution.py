"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from subcam.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from subcam.schemas.resolve import deep_merge, resolve_config

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.filters.min_confidence is None
        assert config.filters.min_quality is None
        assert config.validation.sample_size == 5
        assert config.validation.warning_compliance == 80
        assert config.validation.critical_compliance == 50
        assert config.aggregation.fill_missing_days is False
        assert config.reporter.max_row_warnings == 5
        assert config.logging.level == "INFO"

    def test_no_arguments_uses_param_defaults(self):
        assert resolve_config() == resolve_config(ParamConfig(), None, None)

    def test_user_config_overrides_param_config(self):
        config = resolve_config(ParamConfig(), UserConfig(min_confidence=4), None)
        assert config.filters.min_confidence == 4

    def test_dict_inputs_are_validated(self):
        config = resolve_config({"reporter": {"max_row_warnings": 2}}, {"minQuality": 3}, {"log_level": "DEBUG"})

        assert config.reporter.max_row_warnings == 2
        assert config.filters.min_quality == 3
        assert config.logging.level == "DEBUG"

    def test_cli_beats_user(self):
        user = UserConfig(min_confidence=2, fill_missing_days=True)
        cli = CLIConfig(min_confidence=4)
        config = resolve_config(ParamConfig(), user, cli)

        assert config.filters.min_confidence == 4
        assert config.aggregation.fill_missing_days is True
        # The user model itself is not mutated
        assert user.min_confidence == 2

    def test_nested_user_filters(self):
        user = UserConfig.model_validate({"filters": {"min_quality": 2}})
        config = resolve_config(ParamConfig(), user, None)
        assert config.filters.min_quality == 2

    def test_internal_config_is_frozen(self, internal_config):
        with pytest.raises(ValidationError):
            internal_config.aggregation = None

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), {"log_level": "chatty"}, None)

    def test_param_config_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            ParamConfig.model_validate({"filters": {"min_confidence": 1, "bogus": 2}})


def test_deep_merge_nested():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    merged = deep_merge(base, {"b": {"d": 4}}, {"e": 5})

    assert merged == {"a": 1, "b": {"c": 2, "d": 4}, "e": 5}
    assert base == {"a": 1, "b": {"c": 2, "d": 3}}
