"""SUBCAM raw observation conversion pipeline.

Turns raw camera-observation CSV text into a daily Nmax or Obvs matrix.
Each call runs six sequential steps and reports through a ConversionReporter:

1. **Parse CSV**: read text with pandas, detect the raw/_raw2 layout and
   score the header plus a row sample (advisory only).
2. **Normalize**: type every record as a RawObservationRow (quantities
   clamped, timestamps parsed or left empty).
3. **Quality filter**: drop rows below the confidence/quality thresholds.
4. **Resolve taxa**: label each row; unlabelled or undated rows are dropped.
5. **Aggregate**: group by date and fold the discovery statistics.
6. **Validate output**: enforce the matrix contracts (fatal on violation).

Failures never raise out of the entry points. Empty input, cancellation and
contract violations end the call with ``success=False`` and the partial log.
Invalid options are a caller error and raise ``pydantic.ValidationError``.
"""

import logging
import threading
from typing import Callable, Optional, Union

import pandas as pd
from pydantic import BaseModel, Field

from subcam.conversion import columns
from subcam.conversion.aggregator import aggregate
from subcam.conversion.errors import ConversionCancelled, ConversionError, EmptyInputError
from subcam.conversion.input_validator import InputFormatValidator, ValidationReport
from subcam.conversion.loader import build_rows, read_raw_csv
from subcam.conversion.normalizer import MAX_QUANTITY, is_integer_text
from subcam.conversion.quality import QualityFilter
from subcam.conversion.serializer import data_to_csv, to_dataframe
from subcam.conversion.taxonomy import resolve_rows
from subcam.contracts import ContractViolation, validate_nmax_output, validate_obvs_output
from subcam.pipeline.reporter import ConversionReporter, LogEntry, LogLevel, ReporterEvent
from subcam.schemas import InternalConfig, UserConfig, resolve_config

__all__ = ['DateRange', 'ConversionMetadata', 'ConversionResult', 'SubcamConverter']

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6

_OUTPUT_VALIDATORS = {
    "nmax": validate_nmax_output,
    "obvs": validate_obvs_output,
}


class DateRange(BaseModel):
    start: str
    end: str
    days: int = Field(ge=1, description="Number of dated rows in the matrix")


class ConversionMetadata(BaseModel):
    """Summary numbers for a successful conversion."""
    mode: str
    source_format: str
    input_rows: int = Field(ge=0)
    filtered_rows: int = Field(ge=0, description="Rows that entered aggregation")
    output_rows: int = Field(ge=0)
    processing_time_ms: int = Field(ge=0)
    conversion_steps: int = Field(ge=1)
    date_range: Optional[DateRange] = None
    species_count: int = Field(0, ge=0)


class ConversionResult(BaseModel):
    """Outcome of one ``convert_raw_to_*`` call.

    ``data`` and ``metadata`` are only set on success; ``error`` only on
    failure. ``logs`` is always the full reporter log of the call.
    """
    success: bool
    data: Optional[list] = None
    metadata: Optional[ConversionMetadata] = None
    validation: Optional[ValidationReport] = None
    error: Optional[str] = None
    logs: list[LogEntry] = Field(default_factory=list)

    def error_logs(self) -> list[LogEntry]:
        return [entry for entry in self.logs if entry.level == LogLevel.ERROR]

    def to_dataframe(self) -> pd.DataFrame:
        return to_dataframe(self.data or [])

    def to_csv(self) -> str:
        return data_to_csv(self.data or [])


class SubcamConverter:
    """Converts raw SUBCAM observation CSV text into daily matrices.

    One converter owns one reporter. Register a progress callback before
    calling an entry point to receive LogEntry and ProgressUpdate events
    as each step runs.

    Parameters
    ----------
    config : InternalConfig, optional
        Base configuration; per-call ``options`` are merged on top of it.
        Defaults to ``resolve_config()``.

    Example usage::

        converter = SubcamConverter()
        converter.set_progress_callback(print)
        result = converter.convert_raw_to_nmax(csv_text, {"minConfidence": 4})
        if result.success:
            Path("deployment_nmax.csv").write_text(result.to_csv())
    """

    def __init__(self, config: Optional[InternalConfig] = None):
        self.config = config if config is not None else resolve_config()
        self.reporter = ConversionReporter(total_steps=TOTAL_STEPS)

    def set_progress_callback(self, callback: Optional[Callable[[ReporterEvent], None]]) -> None:
        self.reporter.set_progress_callback(callback)

    @staticmethod
    def data_to_csv(rows: list) -> str:
        return data_to_csv(rows)

    def convert_raw_to_nmax(self, csv_text: str,
                            options: Optional[Union[dict, UserConfig]] = None,
                            cancel_event: Optional[threading.Event] = None) -> ConversionResult:
        """Daily peak-abundance matrix (max quantity per date and taxon)."""
        return self._convert(csv_text, "nmax", options, cancel_event)

    def convert_raw_to_obvs(self, csv_text: str,
                            options: Optional[Union[dict, UserConfig]] = None,
                            cancel_event: Optional[threading.Event] = None) -> ConversionResult:
        """Daily detection-count matrix (events per date and taxon)."""
        return self._convert(csv_text, "obvs", options, cancel_event)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _resolve_options(self, options) -> InternalConfig:
        if not options:
            return self.config
        return resolve_config(self.config.model_dump(), options)

    def _convert(self, csv_text, mode, options, cancel_event) -> ConversionResult:
        # Option errors propagate to the caller before any work starts
        config = self._resolve_options(options)
        reporter = self.reporter
        reporter.start()
        validation = None

        try:
            reporter.info(f"Starting raw to {mode} conversion")

            # Step 1: Parse and score input
            self._check_cancelled(cancel_event)
            reporter.set_step(1, "Parse CSV")
            table = read_raw_csv(csv_text)
            validator = InputFormatValidator.from_config(config)
            validation = validator.validate(
                table.headers, table.sample(config.validation.sample_size), table.source_format
            )
            if table.skipped_lines:
                reporter.warning(f"Skipped {table.skipped_lines} malformed CSV lines (wrong column count)")
            if validation.format_compliance < config.validation.warning_compliance:
                reporter.warning(f"Input format compliance is {validation.format_compliance}%")
            reporter.success(
                f"CSV parsed: {len(table.records)} rows ({table.source_format} format, "
                f"{validation.format_compliance}% compliant)"
            )

            # Step 2: Normalize
            self._check_cancelled(cancel_event)
            reporter.set_step(2, "Normalize data")
            rows = build_rows(table)
            self._warn_rows(
                config, "with a coerced quantity",
                [r for r in rows if self._quantity_coerced(r.quantity_text)],
                lambda r: f"Row {r.row_number}: quantity '{r.quantity_text}' coerced to {r.quantity}",
            )
            reporter.success(f"Data normalized: {len(rows)} records")

            # Step 3: Quality filter
            self._check_cancelled(cancel_event)
            reporter.set_step(3, "Apply quality filters")
            quality_filter = QualityFilter.from_config(config)
            outcome = quality_filter.apply(rows)
            self._warn_rows(
                config, "rejected by quality filter", outcome.rejected,
                lambda r: (f"Row {r.row_number}: rejected by quality filter "
                           f"(confidence={r.confidence}, quality={r.quality})"),
            )
            if not outcome.passed:
                raise EmptyInputError("No data: every row was removed by the quality filters")
            reporter.success(f"Quality filters applied: {len(outcome.passed)} of {len(rows)} rows passed")

            # Step 4: Resolve taxa
            self._check_cancelled(cancel_event)
            reporter.set_step(4, "Resolve taxa")
            resolved = resolve_rows(outcome.passed)
            self._warn_rows(
                config, "without a taxon", [r for r in resolved if r.taxon is None],
                lambda r: f"Row {r.observation.row_number}: no scientific or common name, row excluded",
            )
            self._warn_rows(
                config, "with an unparsable timestamp",
                [r for r in resolved if r.taxon is not None and r.event_date is None],
                lambda r: (f"Row {r.observation.row_number}: unparsable timestamp "
                           f"'{r.observation.timestamp_text}', row excluded"),
            )
            self._warn_rows(
                config, "with a reserved taxon label",
                [r for r in resolved if r.taxon in columns.SUMMARY_COLUMNS],
                lambda r: (f"Row {r.observation.row_number}: taxon '{r.taxon}' is a summary "
                           f"column name, row excluded"),
            )
            usable = [
                r for r in resolved
                if r.taxon is not None and r.event_date is not None
                and r.taxon not in columns.SUMMARY_COLUMNS
            ]
            if not usable:
                raise EmptyInputError("No data: no rows with both a taxon and a valid timestamp")
            reporter.success(f"Taxa resolved: {len(usable)} rows ready for aggregation")

            # Step 5: Aggregate
            self._check_cancelled(cancel_event)
            reporter.set_step(5, f"Aggregate {mode}")
            aggregated = aggregate(usable, mode, config.aggregation.fill_missing_days)
            reporter.success(
                f"Daily aggregation complete: {len(aggregated.rows)} dates, {len(aggregated.taxa)} taxa"
            )

            # Step 6: Validate output
            self._check_cancelled(cancel_event)
            reporter.set_step(6, "Validate output")
            _OUTPUT_VALIDATORS[mode](aggregated.rows)
            reporter.success(f"Output validation complete: {len(aggregated.rows)} rows")

            reporter.complete()
            elapsed = reporter.elapsed_ms()
            reporter.success(f"Raw to {mode} conversion completed in {elapsed}ms")

            metadata = ConversionMetadata(
                mode=mode,
                source_format=table.source_format,
                input_rows=len(table.records),
                filtered_rows=len(usable),
                output_rows=len(aggregated.rows),
                processing_time_ms=elapsed,
                conversion_steps=TOTAL_STEPS,
                date_range=self._date_range(aggregated.rows),
                species_count=len(aggregated.taxa),
            )
            return ConversionResult(
                success=True,
                data=aggregated.rows,
                metadata=metadata,
                validation=validation,
                logs=reporter.get_logs(),
            )

        except ContractViolation as e:
            logger.critical("Output contract violated: %s", e)
            reporter.error(f"Output validation failed for {mode} matrix", e)
            return self._failure(str(e), validation)

        except ConversionError as e:
            reporter.error(f"Raw to {mode} conversion failed: {e}", e)
            return self._failure(str(e), validation)

        except Exception as e:
            logger.exception("Unexpected error during %s conversion", mode)
            reporter.error(f"Raw to {mode} conversion failed unexpectedly", e)
            return self._failure(f"{type(e).__name__}: {e}", validation)

    def _failure(self, message: str, validation: Optional[ValidationReport]) -> ConversionResult:
        return ConversionResult(
            success=False,
            error=message,
            validation=validation,
            logs=self.reporter.get_logs(),
        )

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ConversionCancelled("Conversion cancelled by caller")

    @staticmethod
    def _quantity_coerced(text: str) -> bool:
        """True when a non-empty quantity cell was not a plain in-range integer."""
        if not text:
            return False
        digits = text.rstrip("+")
        return not is_integer_text(digits) or not 0 <= int(digits) <= MAX_QUANTITY

    def _warn_rows(self, config: InternalConfig, kind: str, rows: list, describe) -> None:
        """Warn per row for the first few rows, then once with the total."""
        limit = config.reporter.max_row_warnings
        for row in rows[:limit]:
            self.reporter.warning(describe(row))
        if len(rows) > limit:
            self.reporter.warning(f"{len(rows)} rows {kind} in total ({len(rows) - limit} not listed)")

    @staticmethod
    def _date_range(rows: list) -> Optional[DateRange]:
        if not rows:
            return None
        dates = sorted(row[columns.DATE] for row in rows)
        return DateRange(start=dates[0], end=dates[-1], days=len(dates))
