import pytest
from pydantic import ValidationError

from subcam.schemas.user import UserConfig

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("key", ["minConfidence", "min_confidence", "MIN_CONFIDENCE"])
def test_confidence_aliases(key):
    assert UserConfig.model_validate({key: 4}).min_confidence == 4


def test_uppercase_keys_are_handled():
    raw = {
        "MIN_QUALITY": 3,
        "FILL_MISSING_DAYS": True,
        "SAMPLE_SIZE": 10,
        "LOG_LEVEL": "debug",
    }

    user = UserConfig.model_validate(raw)

    assert user.min_quality == 3
    assert user.fill_missing_days is True
    assert user.sample_size == 10
    assert user.log_level == "DEBUG"


def test_numeric_strings_are_coerced():
    user = UserConfig.model_validate({"minConfidence": " 4 ", "minQuality": ""})
    assert user.min_confidence == 4
    assert user.min_quality is None


def test_unknown_keys_are_ignored():
    user = UserConfig.model_validate({"minConfidence": 2, "UNKNOWN_LEGACY": 12345})

    assert user.min_confidence == 2
    assert not hasattr(user, "UNKNOWN_LEGACY")


def test_negative_threshold_rejected():
    with pytest.raises(ValidationError):
        UserConfig.model_validate({"minConfidence": -1})


def test_overrides_only_contain_set_values():
    assert UserConfig().to_internal_overrides() == {}
    assert UserConfig(min_confidence=3, sample_size=2).to_internal_overrides() == {
        "filters": {"min_confidence": 3},
        "validation": {"sample_size": 2},
    }
