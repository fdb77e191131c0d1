"""Tests for output matrix contracts.

These tests feed hand-built matrices straight into the validators; they do
not go through the aggregator.
"""

import numpy as np
import pandas as pd
import pytest

from subcam.conversion import columns
from subcam.contracts import (
    ContractViolation,
    require,
    validate_nmax_output,
    validate_obvs_output,
)

pytestmark = pytest.mark.unit


def _row(day, total, cum_obs, unique, new, cum_new, cum_species, **taxa):
    row = {
        columns.DATE: day,
        columns.TOTAL_OBSERVATIONS: total,
        columns.CUMULATIVE_OBSERVATIONS: cum_obs,
        columns.UNIQUE_TODAY: unique,
        columns.NEW_TODAY: new,
        columns.CUMULATIVE_NEW: cum_new,
        columns.CUMULATIVE_SPECIES: cum_species,
    }
    row.update(taxa)
    return row


@pytest.fixture
def valid_obvs():
    return [
        _row("2024-03-01", 3, 3, 2, 2, 2, 2, Cod=2, Ling=1),
        _row("2024-03-02", 1, 4, 1, 0, 2, 2, Cod=0, Ling=1),
    ]


class TestRequire:

    def test_require_passes(self):
        require(True, "never raised")

    def test_require_raises(self):
        with pytest.raises(ContractViolation, match="boom"):
            require(False, "boom")

    def test_contract_violation_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)


class TestMatrixContract:

    def test_valid_matrix_passes(self, valid_obvs):
        validate_obvs_output(valid_obvs)
        validate_nmax_output(valid_obvs)

    def test_dataframe_input(self, valid_obvs):
        validate_obvs_output(pd.DataFrame(valid_obvs))

    def test_empty_matrix_fails(self):
        with pytest.raises(ContractViolation, match="no rows"):
            validate_nmax_output([])

    def test_missing_summary_column(self, valid_obvs):
        for row in valid_obvs:
            del row[columns.CUMULATIVE_SPECIES]
        with pytest.raises(ContractViolation, match="missing required column"):
            validate_nmax_output(valid_obvs)

    def test_negative_cell(self, valid_obvs):
        valid_obvs[1]["Ling"] = -1
        with pytest.raises(ContractViolation, match="negative value in column 'Ling'"):
            validate_nmax_output(valid_obvs)

    def test_non_integer_cell(self, valid_obvs):
        valid_obvs[0]["Cod"] = 2.5
        with pytest.raises(ContractViolation, match="non-integer"):
            validate_nmax_output(valid_obvs)

    def test_numpy_integers_accepted(self, valid_obvs):
        valid_obvs[0]["Cod"] = np.int64(2)
        validate_obvs_output(valid_obvs)

    def test_decreasing_cumulative(self, valid_obvs):
        valid_obvs[1][columns.CUMULATIVE_NEW] = 1
        with pytest.raises(ContractViolation, match="decreases"):
            validate_nmax_output(valid_obvs)

    def test_cumulative_observations_running_sum(self, valid_obvs):
        valid_obvs[1][columns.CUMULATIVE_OBSERVATIONS] = 5
        with pytest.raises(ContractViolation, match="running sum"):
            validate_nmax_output(valid_obvs)

    def test_unique_today_mismatch(self, valid_obvs):
        valid_obvs[1][columns.UNIQUE_TODAY] = 2
        with pytest.raises(ContractViolation, match="positive taxon cells"):
            validate_nmax_output(valid_obvs)

    def test_species_exceeds_taxon_columns(self, valid_obvs):
        for row in valid_obvs:
            row[columns.CUMULATIVE_SPECIES] = 3
        with pytest.raises(ContractViolation, match="exceeds"):
            validate_nmax_output(valid_obvs)

    def test_dates_must_ascend(self, valid_obvs):
        valid_obvs[1][columns.DATE] = "2024-03-01"
        with pytest.raises(ContractViolation, match="ascending"):
            validate_nmax_output(valid_obvs)

    def test_obvs_totals_equal_taxon_sum(self, valid_obvs):
        valid_obvs[0]["Cod"] = 5
        # Nmax allows peak values above the event count
        validate_nmax_output(valid_obvs)
        with pytest.raises(ContractViolation, match="sum of taxon counts"):
            validate_obvs_output(valid_obvs)


def test_every_stage_has_documented_invariants():
    from subcam.contracts.invariants import PIPELINE_INVARIANTS, STAGE_REQUIREMENTS

    assert set(PIPELINE_INVARIANTS) == set(STAGE_REQUIREMENTS)
    assert all(PIPELINE_INVARIANTS[stage] for stage in PIPELINE_INVARIANTS)
