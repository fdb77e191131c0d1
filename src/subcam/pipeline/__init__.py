"""Pipeline modules.

- converter: SubcamConverter entry points and result models
- reporter: Progress/log event stream
"""

from subcam.pipeline.converter import SubcamConverter, ConversionResult, ConversionMetadata
from subcam.pipeline.reporter import ConversionReporter, LogEntry, ProgressUpdate, LogLevel

__all__ = [
    "SubcamConverter",
    "ConversionResult",
    "ConversionMetadata",
    "ConversionReporter",
    "LogEntry",
    "ProgressUpdate",
    "LogLevel",
]
