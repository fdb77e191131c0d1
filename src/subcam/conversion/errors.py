"""Conversion failures that end a call with ``success=False``.

Key distinction:
- ValidationError: caller passed invalid options (raised, not reported)
- ConversionError: the input batch cannot be converted (reported in the result)
- ContractViolation: aggregation produced a broken matrix (pipeline bug)
"""


class ConversionError(Exception):
    """Base class for fatal conversion failures."""


class EmptyInputError(ConversionError, ValueError):
    """Raised when no usable observation rows exist."""


class ConversionCancelled(ConversionError):
    """Raised between stages when the caller's cancel event is set."""
