"""Output contracts: fail-fast enforcement of aggregator invariants.

Key principle:
- Pydantic validates config correctness
- The input validator scores input files (advisory)
- Contracts validate pipeline correctness (fatal)
"""

from subcam.contracts.failure import ContractViolation
from subcam.contracts.base import require
from subcam.contracts.output import assert_matrix_output, validate_nmax_output, validate_obvs_output

__all__ = [
    "ContractViolation",
    "require",
    "assert_matrix_output",
    "validate_nmax_output",
    "validate_obvs_output",
]
