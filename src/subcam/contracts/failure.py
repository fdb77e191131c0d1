"""Exception raised by output contracts.

Every violation raises ContractViolation on the first failed check, so the
converter can turn it into one failed result.
"""


class ContractViolation(RuntimeError):
    """Raised when the aggregator produced a matrix that breaks its invariants.

    This indicates a bug in aggregation logic, not bad input data.

    Key distinction:
    - ValidationError: caller/config error (handled by Pydantic)
    - ConversionError: unusable input batch (empty, cancelled)
    - ContractViolation: pipeline bug (programmer error)
    """
    pass
