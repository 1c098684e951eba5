"""
tripsparse - Coordinate-triplet sparse matrix engine
=====================================================

Stores only entries with |value| >= epsilon (default 0.001) as
(row, col, value) triplets in caller-sized, fixed-capacity stores.

Quick start:
    import numpy as np
    import tripsparse as ts

    A = ts.SparseStore(capacity=4)
    ts.generate(A, [[1.0, 0.0], [0.0, 2.0]], 2, 2)

    C = ts.SparseStore(capacity=4)
    ts.multiply(C, A, A)

    D = np.empty((2, 2))
    ts.expand(D, 2, 2, C)
    ts.print_sparse(C)

Every operation returns True or raises a ``tripsparse.SparseError``
subclass. Capacity is never grown: size output stores for the worst case.
"""

__version__ = "0.1.0"

from tripsparse.errors import (
    SparseError, InvalidInput, DimensionMismatch, CapacityExceeded,
    IndexOutOfRange, ConfigError,
)
from tripsparse.config import (
    DEFAULT_EPSILON, config, get_epsilon, set_epsilon,
)
from tripsparse.store import SparseStore
from tripsparse.conversion import generate, expand, to_scipy, from_scipy
from tripsparse.structural import copy, transpose, delete_element, prune_near_zero
from tripsparse.arithmetic import add, multiply
from tripsparse.diagnostics import format_sparse, print_sparse, sparse_info
from tripsparse.logging_config import setup_logging
from tripsparse import fast

__all__ = [
    "SparseStore",
    "generate", "expand", "to_scipy", "from_scipy",
    "copy", "transpose", "delete_element", "prune_near_zero",
    "add", "multiply",
    "format_sparse", "print_sparse", "sparse_info",
    "DEFAULT_EPSILON", "config", "get_epsilon", "set_epsilon",
    "SparseError", "InvalidInput", "DimensionMismatch", "CapacityExceeded",
    "IndexOutOfRange", "ConfigError",
    "setup_logging", "fast",
]
