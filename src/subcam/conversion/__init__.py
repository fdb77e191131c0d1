"""Conversion stages: load, normalize, filter, resolve taxa, aggregate, serialize."""

from subcam.conversion.errors import ConversionError, EmptyInputError, ConversionCancelled
from subcam.conversion.records import RawObservationRow, ResolvedRow
from subcam.conversion.loader import RawTable, read_raw_csv, build_rows, detect_source_format
from subcam.conversion.input_validator import InputFormatValidator, ValidationReport, validate_raw_file_format
from subcam.conversion.quality import QualityFilter, FilterOutcome
from subcam.conversion.taxonomy import choose_taxon_label, resolve_rows
from subcam.conversion.aggregator import AggregationResult, aggregate, aggregate_nmax, aggregate_obvs
from subcam.conversion.serializer import data_to_csv, csv_to_data, to_dataframe

__all__ = [
    'ConversionError',
    'EmptyInputError',
    'ConversionCancelled',
    'RawObservationRow',
    'ResolvedRow',
    'RawTable',
    'read_raw_csv',
    'build_rows',
    'detect_source_format',
    'InputFormatValidator',
    'ValidationReport',
    'validate_raw_file_format',
    'QualityFilter',
    'FilterOutcome',
    'choose_taxon_label',
    'resolve_rows',
    'AggregationResult',
    'aggregate',
    'aggregate_nmax',
    'aggregate_obvs',
    'data_to_csv',
    'csv_to_data',
    'to_dataframe',
]
