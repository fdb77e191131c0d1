"""Advisory scoring of raw input files against the expected schema.

The report produced here never blocks a conversion. It lowers the
compliance score and adds recommendations so that the caller can show
the user why a file converted poorly; hard failures are the business
of the output contracts, not of this module.
"""

import logging
import re
from typing import Literal, Optional

from pydantic import BaseModel, Field

from subcam.conversion import columns
from subcam.conversion.loader import RAW, RAW2, resolve_header_map
from subcam.conversion.normalizer import (
    is_integer_text,
    parse_level,
    parse_timestamp,
    timestamp_from_filename,
)

__all__ = ['ColumnCheck', 'RowCheck', 'ValidationReport', 'InputFormatValidator', 'validate_raw_file_format']

logger = logging.getLogger(__name__)

_CANONICAL_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


class ColumnCheck(BaseModel):
    column: str
    present: bool
    status: Literal["present", "missing", "unexpected"]
    note: Optional[str] = None


class RowCheck(BaseModel):
    row: int
    status: Literal["pass", "warn", "fail"] = "pass"
    issues: list[str] = Field(default_factory=list)

    def flag(self, issue: str, severity: Literal["warn", "fail"]) -> None:
        self.issues.append(issue)
        if severity == "fail" or self.status == "pass":
            self.status = severity


class ValidationReport(BaseModel):
    """Input-side format report attached to every conversion result."""
    source_format: str = RAW
    format_compliance: int = Field(0, ge=0, le=100)
    column_validation: list[ColumnCheck] = Field(default_factory=list)
    data_validation: list[RowCheck] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def missing_columns(self) -> list[str]:
        return [c.column for c in self.column_validation if c.status == "missing"]


class InputFormatValidator:
    """Score headers and sampled rows; always returns, never raises.

    Parameters
    ----------
    warning_compliance : int
        Compliance (percent) below which a format warning is recommended.
    critical_compliance : int
        Compliance below which the file is flagged as probably not SUBCAM data.
    """

    def __init__(self, warning_compliance: int = 80, critical_compliance: int = 50):
        self.warning_compliance = warning_compliance
        self.critical_compliance = critical_compliance

    @classmethod
    def from_config(cls, config) -> "InputFormatValidator":
        return cls(config.validation.warning_compliance, config.validation.critical_compliance)

    def validate(self, headers: list, sample_rows: list, source_format: str = RAW) -> ValidationReport:
        report = ValidationReport(source_format=source_format)

        if source_format == RAW2:
            self._check_raw2_columns(headers, report)
            for number, record in enumerate(sample_rows, start=1):
                report.data_validation.append(self._check_raw2_row(record, number))
        else:
            header_map = resolve_header_map(headers)
            self._check_raw_columns(headers, header_map, report)
            for number, record in enumerate(sample_rows, start=1):
                report.data_validation.append(self._check_raw_row(record, number, header_map))

        self._recommend(report)
        logger.debug("Input format compliance: %d%%", report.format_compliance)
        return report

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def _check_raw_columns(self, headers: list, header_map: dict, report: ValidationReport) -> None:
        matched = 0
        for expected in columns.RAW_COLUMNS:
            actual = header_map.get(expected)
            if actual is not None:
                matched += 1
                note = f"Matched as '{actual}'" if actual != expected else None
                report.column_validation.append(
                    ColumnCheck(column=expected, present=True, status="present", note=note)
                )
            else:
                note = None
                if expected in columns.OPTIONAL_COLUMNS:
                    note = "Optional column; filtering on it will be a no-op"
                report.column_validation.append(
                    ColumnCheck(column=expected, present=False, status="missing", note=note)
                )

        known = set(header_map.values())
        for header in headers:
            if header in known:
                continue
            report.column_validation.append(
                ColumnCheck(column=header, present=True, status="unexpected",
                            note="Not part of the expected raw schema")
            )

        report.format_compliance = round(matched / len(columns.RAW_COLUMNS) * 100)

    def _check_raw2_columns(self, headers: list, report: ValidationReport) -> None:
        lowered = {h.lower() for h in headers}
        matched = 0
        for expected in columns.RAW2_COLUMNS:
            present = expected in lowered
            matched += present
            report.column_validation.append(
                ColumnCheck(column=expected, present=present, status="present" if present else "missing")
            )
        report.format_compliance = round(matched / len(columns.RAW2_COLUMNS) * 100)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def _check_raw_row(self, record: dict, number: int, header_map: dict) -> RowCheck:
        def cell(canonical: str) -> str:
            header = header_map.get(canonical)
            return record.get(header, "") if header is not None else ""

        check = RowCheck(row=number)

        if not cell(columns.FILE_NAME):
            check.flag(f"Empty {columns.FILE_NAME}", "warn")

        timestamp_text = cell(columns.ADJUSTED_TIMESTAMP)
        if not timestamp_text:
            check.flag(f"Empty {columns.ADJUSTED_TIMESTAMP}", "fail")
        elif parse_timestamp(timestamp_text) is None:
            check.flag(f"Unparsable timestamp '{timestamp_text}'", "fail")
        elif not _CANONICAL_TIMESTAMP.match(timestamp_text):
            check.flag(f"Non-standard date format '{timestamp_text}'", "warn")

        if not cell(columns.SCIENTIFIC_NAME) and not cell(columns.COMMON_NAME):
            check.flag("Empty taxon fields (scientific and common name)", "fail")

        self._check_quantity(cell(columns.QUANTITY), check)
        for level_column in (columns.CONFIDENCE, columns.QUALITY):
            self._check_level(level_column, cell(level_column), check)

        return check

    def _check_raw2_row(self, record: dict, number: int) -> RowCheck:
        by_key = {key.lower(): value for key, value in record.items()}
        check = RowCheck(row=number)

        file_name = by_key.get("file_name", "")
        if not file_name:
            check.flag("Empty file_name", "fail")
        elif timestamp_from_filename(file_name) is None:
            check.flag(f"No timestamp in file name '{file_name}'", "fail")

        if not any(by_key.get(k) for k in ("species", "note", "genus", "family")):
            check.flag("Empty taxon fields (species, note, genus, family)", "fail")

        self._check_quantity(by_key.get("quantity", ""), check)
        self._check_level("confidence_1-5", by_key.get("confidence_1-5", ""), check)
        return check

    @staticmethod
    def _check_quantity(text: str, check: RowCheck) -> None:
        if not text:
            check.flag("Empty quantity (counted as 0)", "warn")
        elif not is_integer_text(text.rstrip("+")):
            check.flag(f"Non-numeric quantity '{text}'", "warn")
        elif int(text.rstrip("+")) < 0:
            check.flag(f"Negative quantity '{text}' (clamped to 0)", "warn")

    @staticmethod
    def _check_level(column: str, text: str, check: RowCheck) -> None:
        if text and parse_level(text) is None:
            check.flag(f"Non-numeric value in {column}", "warn")

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def _recommend(self, report: ValidationReport) -> None:
        recs = report.recommendations

        if report.format_compliance < self.warning_compliance:
            recs.append(
                f"File format compliance is below {self.warning_compliance}%. "
                "Check that column headers match the SUBCAM raw export."
            )
        if report.format_compliance < self.critical_compliance:
            recs.append("Format compliance is critically low. This may not be a SUBCAM raw file.")

        missing = set(report.missing_columns)
        if columns.ADJUSTED_TIMESTAMP in missing:
            recs.append(
                f"{columns.ADJUSTED_TIMESTAMP} column missing; rows without a timestamp cannot be dated."
            )
        if {columns.SCIENTIFIC_NAME, columns.COMMON_NAME} <= missing:
            recs.append("No taxon columns found; every row will be rejected.")
        if columns.CONFIDENCE in missing:
            recs.append(f"{columns.CONFIDENCE} column missing; confidence filtering will be a no-op.")
        if columns.QUALITY in missing:
            recs.append(f"{columns.QUALITY} column missing; video quality filtering will be a no-op.")

        with_issues = [r for r in report.data_validation if r.issues]
        if len(with_issues) > 2:
            recs.append(
                f"{len(with_issues)} sampled rows have data quality issues. "
                "Check date formats, numeric values and taxon fields."
            )


def validate_raw_file_format(headers: list, sample_rows: list, source_format: str = RAW) -> ValidationReport:
    """Score a file with the default compliance thresholds."""
    return InputFormatValidator().validate(headers, sample_rows, source_format)
