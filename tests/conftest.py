"""Root-level pytest fixtures for the SUBCAM test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus a builder for raw SUBCAM CSV text.
"""

import pytest

from subcam.conversion import columns
from subcam.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Examples
    --------
    >>> def test_custom_filter(make_config):
    ...     config = make_config(min_confidence=4)
    ...     assert config.filters.min_confidence == 4
    """
    def _make(**user_overrides):
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Raw CSV Fixtures
# =============================================================================

def _csv_cell(value) -> str:
    text = "" if value is None else str(value)
    if any(ch in text for ch in ',"\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


@pytest.fixture
def make_raw_csv():
    """Build raw SUBCAM CSV text from compact observation tuples.

    Each observation is a dict with any of: ``timestamp``, ``quantity``,
    ``scientific``, ``common``, ``confidence``, ``quality``, ``file``.
    Pass ``header`` to use a custom column list (e.g. without Confidence Level).

    Examples
    --------
    >>> csv_text = make_raw_csv([
    ...     {"timestamp": "2024-03-01 10:00:00", "quantity": 3, "scientific": "Gadus morhua"},
    ... ])
    """
    field_for_column = {
        columns.FILE_NAME: "file",
        columns.CLOCK_TIME: "clock",
        columns.ADJUSTED_TIMESTAMP: "timestamp",
        columns.EVENT_OBSERVATION: "event",
        columns.QUANTITY: "quantity",
        columns.COMMON_NAME: "common",
        columns.SCIENTIFIC_NAME: "scientific",
        columns.CONFIDENCE: "confidence",
        columns.QUALITY: "quality",
    }

    def _make(observations, header=None):
        header = list(header or columns.RAW_COLUMNS)
        lines = [",".join(_csv_cell(h) for h in header)]
        for i, obs in enumerate(observations, start=1):
            defaults = {"file": f"clip_{i:04d}.mp4", "clock": "00:00:10", "event": "Fish passes"}
            merged = {**defaults, **obs}
            lines.append(",".join(
                _csv_cell(merged.get(field_for_column.get(col, col), "")) for col in header
            ))
        return "\n".join(lines) + "\n"

    return _make
