"""Tests for the progress/log reporter."""

import logging

import pytest

from subcam.pipeline.reporter import ConversionReporter, LogEntry, LogLevel, ProgressUpdate

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def reporter(clock):
    rep = ConversionReporter(total_steps=4, clock=clock)
    rep.start()
    return rep


class TestEvents:

    def test_callback_receives_logs_and_progress(self, reporter):
        events = []
        reporter.set_progress_callback(events.append)

        reporter.set_step(1, "Parse CSV")
        reporter.success("parsed")

        assert isinstance(events[0], ProgressUpdate)
        assert events[0].percent == 25
        assert events[0].step_name == "Parse CSV"
        assert isinstance(events[1], LogEntry)
        assert events[1].level == LogLevel.SUCCESS
        assert events[1].step == 1

    def test_no_callback_is_fine(self, reporter):
        reporter.set_step(1, "Parse CSV")
        reporter.info("hello")
        assert len(reporter.get_logs()) == 1

    def test_elapsed_time(self, reporter, clock):
        clock.advance(250)
        entry = reporter.info("later")
        assert entry.elapsed_ms == 250


class TestOrdering:

    def test_percent_is_non_decreasing(self, reporter):
        reporter.set_step(1, "a")
        reporter.set_step(3, "c")
        reporter.set_step(3, "c again")
        reporter.complete()

        percents = [p.percent for p in reporter.progress]
        assert percents == sorted(percents)
        assert percents[-1] == 100

    def test_steps_cannot_go_backwards(self, reporter):
        reporter.set_step(2, "b")
        with pytest.raises(ValueError, match="follows step 2"):
            reporter.set_step(1, "a")

    def test_start_resets_log(self, reporter):
        reporter.set_step(2, "b")
        reporter.info("first call")
        reporter.start()

        assert reporter.get_logs() == []
        assert reporter.percent == 0
        reporter.set_step(1, "a")

    def test_invalid_total_steps(self):
        with pytest.raises(ValueError):
            ConversionReporter(total_steps=0)


class TestLogQueries:

    def test_filter_by_level(self, reporter):
        reporter.info("i")
        reporter.warning("w")
        reporter.error("e", ValueError("bad"))

        errors = reporter.get_logs("ERROR")
        assert [e.message for e in errors] == ["e"]
        assert errors[0].error == "bad"

    def test_step_durations(self, reporter, clock):
        reporter.set_step(1, "a")
        clock.advance(10)
        reporter.success("a done")
        reporter.set_step(2, "b")
        clock.advance(30)
        reporter.warning("not counted")
        reporter.success("b done")

        assert reporter.step_durations() == [
            {"step": 1, "step_name": "a", "duration_ms": 10},
            {"step": 2, "step_name": "b", "duration_ms": 30},
        ]

    def test_entries_mirrored_to_logging(self, reporter, caplog):
        with caplog.at_level(logging.INFO, logger="subcam.pipeline.reporter"):
            reporter.set_step(1, "Parse CSV")
            reporter.success("parsed 3 rows")
            reporter.warning("row 2 odd")

        records = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.INFO, "[step 1/4 Parse CSV] parsed 3 rows") in records
        assert (logging.WARNING, "[step 1/4 Parse CSV] row 2 odd") in records
