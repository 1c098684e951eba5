"""
Errors: Exception hierarchy for triplet-store operations.

Every operation returns True on success and raises one of these on
failure. Nothing is rolled back: after a failed call the output store is
in an unspecified state and must not be reused until rewritten.
"""


class SparseError(Exception):
    """Base exception for all tripsparse errors."""


class InvalidInput(SparseError, ValueError):
    """Absent argument, zero/negative dimension, bad buffer or aliasing."""


class DimensionMismatch(SparseError, ValueError):
    """Operand shapes are incompatible for the requested operation."""

    def __init__(self, message, left=None, right=None):
        super().__init__(message)
        self.left = left
        self.right = right


class CapacityExceeded(SparseError):
    """Destination store cannot hold the result.

    Parameters
    ----------
    required : int or None
        Number of value entries needed (None when the kernel stopped early
        and the final count is unknown).
    capacity : int
        Declared capacity of the destination store.
    """

    def __init__(self, message, required=None, capacity=None):
        super().__init__(message)
        self.required = required
        self.capacity = capacity


class IndexOutOfRange(SparseError, IndexError):
    """Entry position outside [0, nnz)."""


class ConfigError(SparseError, ValueError):
    """Invalid configuration value (e.g. a non-positive threshold)."""


__all__ = [
    "SparseError", "InvalidInput", "DimensionMismatch",
    "CapacityExceeded", "IndexOutOfRange", "ConfigError",
]
