"""Progress and log reporting for one conversion call.

The reporter is an append-only event log with a single subscriber. Every
entry is also mirrored to the standard ``logging`` tree, so the same
messages show up in console/file handlers configured by the CLI.

Event shapes delivered to the registered callback:

- LogEntry: elapsed time, level (INFO/SUCCESS/WARNING/ERROR), step number
  and name, message.
- ProgressUpdate: elapsed time, percent complete (0-100), step number and name.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = ['LogLevel', 'LogEntry', 'ProgressUpdate', 'ReporterEvent', 'ConversionReporter']

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


# SUCCESS is a reporter-only level; it is mirrored as INFO
_LOGGING_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.SUCCESS: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class LogEntry(BaseModel):
    """One reporter log line."""
    model_config = ConfigDict(frozen=True)

    elapsed_ms: int = Field(ge=0)
    level: LogLevel
    step: Optional[int] = None
    step_name: Optional[str] = None
    message: str
    error: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class ProgressUpdate(BaseModel):
    """Percent-complete notification emitted when a step starts."""
    model_config = ConfigDict(frozen=True)

    elapsed_ms: int = Field(ge=0)
    percent: int = Field(ge=0, le=100)
    step: Optional[int] = None
    total_steps: int
    step_name: Optional[str] = None


ReporterEvent = Union[LogEntry, ProgressUpdate]
ProgressCallback = Callable[[ReporterEvent], None]


class ConversionReporter:
    """Ordered log plus progress stream for a single conversion call.

    A converter owns one reporter and calls :meth:`start` at the beginning
    of every conversion, which clears the previous log. Overlapping calls
    on one converter therefore interleave their logs.

    Parameters
    ----------
    total_steps : int
        Number of pipeline steps; step ``n`` reports ``n / total_steps``.
    clock : callable, optional
        Monotonic seconds source (tests inject a fake clock).

    Examples
    --------
    >>> reporter = ConversionReporter(total_steps=2)
    >>> reporter.set_progress_callback(events.append)
    >>> reporter.start()
    >>> reporter.set_step(1, "Parse CSV")
    >>> reporter.success("CSV parsed: 10 rows")
    """

    def __init__(self, total_steps: int = 6, clock: Callable[[], float] = time.monotonic):
        if total_steps < 1:
            raise ValueError("total_steps must be >= 1")
        self.total_steps = total_steps
        self._clock = clock
        self._callback: Optional[ProgressCallback] = None
        self.logs: list = []
        self.progress: list = []
        self.current_step: Optional[int] = None
        self.current_step_name: Optional[str] = None
        self.percent = 0
        self._start = self._clock()

    def set_progress_callback(self, callback: Optional[ProgressCallback]) -> None:
        """Register the single subscriber (None unregisters)."""
        self._callback = callback

    def start(self) -> None:
        """Reset state for a new conversion call."""
        self.logs = []
        self.progress = []
        self.current_step = None
        self.current_step_name = None
        self.percent = 0
        self._start = self._clock()

    def elapsed_ms(self) -> int:
        return max(int(round((self._clock() - self._start) * 1000)), 0)

    def _emit(self, event: ReporterEvent) -> None:
        if self._callback is not None:
            self._callback(event)

    def _report_progress(self, percent: int) -> None:
        # Percent never goes backwards within one call
        self.percent = min(max(self.percent, percent), 100)
        update = ProgressUpdate(
            elapsed_ms=self.elapsed_ms(),
            percent=self.percent,
            step=self.current_step,
            total_steps=self.total_steps,
            step_name=self.current_step_name,
        )
        self.progress.append(update)
        self._emit(update)

    def set_step(self, number: int, name: str) -> None:
        """Enter step ``number``; step numbers must not go backwards."""
        if self.current_step is not None and number < self.current_step:
            raise ValueError(f"Step {number} ({name}) follows step {self.current_step}")
        self.current_step = number
        self.current_step_name = name
        self._report_progress(round(number / self.total_steps * 100))

    def complete(self) -> None:
        """Report 100%."""
        self._report_progress(100)

    def log(self, message: str, level: LogLevel = LogLevel.INFO,
            error: Optional[str] = None, **metadata) -> LogEntry:
        level = LogLevel(level)
        entry = LogEntry(
            elapsed_ms=self.elapsed_ms(),
            level=level,
            step=self.current_step,
            step_name=self.current_step_name,
            message=message,
            error=error,
            metadata=metadata,
        )
        self.logs.append(entry)

        if self.current_step is not None:
            logger.log(_LOGGING_LEVELS[level], "[step %d/%d %s] %s",
                       self.current_step, self.total_steps, self.current_step_name, message)
        else:
            logger.log(_LOGGING_LEVELS[level], "%s", message)

        self._emit(entry)
        return entry

    def info(self, message: str, **metadata) -> LogEntry:
        return self.log(message, LogLevel.INFO, **metadata)

    def success(self, message: str, **metadata) -> LogEntry:
        return self.log(message, LogLevel.SUCCESS, **metadata)

    def warning(self, message: str, **metadata) -> LogEntry:
        return self.log(message, LogLevel.WARNING, **metadata)

    def error(self, message: str, error: Optional[BaseException] = None, **metadata) -> LogEntry:
        return self.log(message, LogLevel.ERROR, error=str(error) if error is not None else None, **metadata)

    def get_logs(self, level: Optional[Union[LogLevel, str]] = None) -> list:
        """Return the ordered log, optionally restricted to one level."""
        if level is None:
            return list(self.logs)
        level = LogLevel(level)
        return [entry for entry in self.logs if entry.level == level]

    def step_durations(self) -> list:
        """Durations between consecutive SUCCESS entries.

        The first SUCCESS entry is measured from the start of the call.

        Returns
        -------
        list of dict
            ``{"step", "step_name", "duration_ms"}`` per SUCCESS entry.
        """
        durations = []
        previous = 0
        for entry in self.get_logs(LogLevel.SUCCESS):
            durations.append({
                "step": entry.step,
                "step_name": entry.step_name,
                "duration_ms": entry.elapsed_ms - previous,
            })
            previous = entry.elapsed_ms
        return durations
