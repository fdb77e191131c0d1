import pytest
from pydantic import ValidationError

from subcam.schemas.cli import CLIConfig

pytestmark = pytest.mark.unit


def test_empty_cli_config_has_no_overrides():
    assert CLIConfig().to_internal_overrides() == {}


def test_cli_overrides_structure():
    cli = CLIConfig(min_confidence=3, min_quality=2, fill_missing_days=True, log_level="WARNING")

    assert cli.to_internal_overrides() == {
        "filters": {"min_confidence": 3, "min_quality": 2},
        "aggregation": {"fill_missing_days": True},
        "logging": {"level": "WARNING"},
    }


def test_cli_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        CLIConfig.model_validate({"output_dir": "/tmp"})


def test_cli_rejects_bad_log_level():
    with pytest.raises(ValidationError):
        CLIConfig(log_level="LOUD")
