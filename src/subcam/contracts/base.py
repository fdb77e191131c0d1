"""Base contract enforcement utilities."""

from subcam.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require(len(rows) > 0, "Nmax contract: at least one date row expected")
    """
    if not condition:
        raise ContractViolation(message)
