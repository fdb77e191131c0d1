"""Tests for the command-line runner."""

import logging

import pytest

from subcam.cli.run_conversion import (
    default_output_path,
    load_user_config_dict,
    main,
    run_conversion,
    setup_logging,
)
from subcam.conversion import columns

pytestmark = pytest.mark.unit


@pytest.fixture
def raw_file(tmp_path, make_raw_csv):
    path = tmp_path / "site4_raw.csv"
    path.write_text(make_raw_csv([
        {"timestamp": "2024-03-01 10:00:00", "quantity": 3, "scientific": "Gadus morhua", "confidence": 2},
        {"timestamp": "2024-03-01 11:00:00", "quantity": 5, "scientific": "Gadus morhua", "confidence": 5},
        {"timestamp": "2024-03-02 11:00:00", "quantity": 1, "common": "Ballan wrasse", "confidence": 5},
    ]))
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestUserConfigFile:

    def test_loads_config_dict(self, tmp_path):
        path = tmp_path / "user_config.py"
        path.write_text('CONFIG = {"MIN_CONFIDENCE": 3}\n')
        assert load_user_config_dict(str(path)) == {"MIN_CONFIDENCE": 3}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_user_config_dict(str(tmp_path / "nope.py"))

    def test_no_config_dict(self, tmp_path):
        path = tmp_path / "empty.py"
        path.write_text("X = 1\n")
        with pytest.raises(ValueError, match="No CONFIG dict"):
            load_user_config_dict(str(path))


class TestRunConversion:

    def test_default_output_name(self, tmp_path):
        assert default_output_path(tmp_path / "site4_raw.csv", "nmax").name == "site4_nmax.csv"
        assert default_output_path(tmp_path / "site4_raw2.csv", "obvs").name == "site4_obvs.csv"
        assert default_output_path(tmp_path / "survey.csv", "obvs").name == "survey_obvs.csv"

    def test_writes_matrix(self, raw_file):
        result = run_conversion(str(raw_file), mode="obvs")

        output = raw_file.with_name("site4_obvs.csv")
        assert result.success
        assert output.read_text().splitlines()[0].startswith(",".join(columns.SUMMARY_COLUMNS))

    def test_config_file_and_cli_precedence(self, raw_file, tmp_path):
        config_path = tmp_path / "user_config.py"
        config_path.write_text('CONFIG = {"MIN_CONFIDENCE": 5}\n')

        from_file = run_conversion(str(raw_file), mode="obvs", user_config_path=str(config_path))
        from_cli = run_conversion(str(raw_file), mode="obvs", user_config_path=str(config_path),
                                  cli_args={"min_confidence": 1})

        assert from_file.data[0][columns.TOTAL_OBSERVATIONS] == 1
        assert from_cli.data[0][columns.TOTAL_OBSERVATIONS] == 2

    def test_missing_input(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_conversion(str(tmp_path / "absent.csv"))

    def test_bad_mode(self, raw_file):
        with pytest.raises(ValueError, match="Unknown mode"):
            run_conversion(str(raw_file), mode="sum")


class TestMain:

    def test_success_exit_code(self, raw_file, tmp_path):
        output = tmp_path / "out" / "matrix.csv"
        assert main([str(raw_file), "--mode", "nmax", "-o", str(output), "--min-confidence", "3"]) == 0
        assert output.exists()

    def test_failure_exit_code(self, tmp_path, capsys):
        empty = tmp_path / "empty_raw.csv"
        empty.write_text("")

        assert main([str(empty)]) == 1
        assert "ERROR" in capsys.readouterr().err
        assert not tmp_path.joinpath("empty_nmax.csv").exists()

    def test_missing_file_exit_code(self, tmp_path):
        assert main([str(tmp_path / "absent.csv")]) == 2

    def test_log_file(self, raw_file, tmp_path):
        log_path = tmp_path / "logs" / "conversion.log"
        assert main([str(raw_file), "--log-file", str(log_path)]) == 0
        assert "Raw to nmax conversion completed" in log_path.read_text()


def test_setup_logging_replaces_handlers():
    setup_logging("WARNING")
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
