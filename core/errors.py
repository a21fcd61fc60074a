from __future__ import annotations


class PackingError(Exception):
    """Base class for all bin packing errors."""

    pass


class InvalidArgumentError(PackingError, ValueError):
    """Raised for non-positive capacities or weights, negative quantities and similar bad input."""

    pass


class ParseError(PackingError, ValueError):
    """Raised when configuration or item data is malformed."""

    pass


class InfeasibleError(PackingError):
    """Raised when the solver proves that no packing respects the bin capacity."""

    pass


class UnsolvedError(PackingError):
    """
    Raised when the solver stopped without a proof either way (time limit, abort).
    Retrying with a larger budget may succeed.
    """

    pass


class InternalInconsistencyError(PackingError):
    """Raised when an extracted solution violates an invariant of the formulation."""

    pass
