"""
Triplet Store: fixed-capacity coordinate-list storage.

A store is a header (rows, cols, nnz) plus three parallel numpy arrays
holding (row, col, value) records. The arrays are sized once by the
caller; operations write into them but never reallocate or grow them.
Slots at and beyond nnz are scratch space with unspecified contents.

Entries keep insertion (generation) order until a swap-and-pop removal
happens; after delete_element or prune_near_zero the order is arbitrary.
"""

import numpy as np

from tripsparse.errors import InvalidInput


INDEX_DTYPE = np.int64
VALUE_DTYPE = np.float64


class SparseStore:
    """
    Caller-owned, fixed-capacity triplet store.

    Parameters
    ----------
    capacity : int
        Number of value entries the store can ever hold.
    rows, cols : int
        Initial header dimensions (normally set by the operation that
        writes the store).

    Examples
    --------
    >>> out = SparseStore(capacity=4)
    >>> generate(out, [[1.0, 0.0], [0.0, 2.0]], 2, 2)
    True
    >>> out.header
    (2, 2, 2)
    >>> list(out)
    [(0, 0, 1.0), (1, 1, 2.0)]
    """

    def __init__(self, capacity, rows=0, cols=0):
        capacity = int(capacity)
        if capacity < 0:
            raise InvalidInput(f"capacity must be >= 0, got {capacity}")
        self.rows = int(rows)
        self.cols = int(cols)
        self.nnz = 0

        self.row_idx = np.empty(capacity, dtype=INDEX_DTYPE)
        self.col_idx = np.empty(capacity, dtype=INDEX_DTYPE)
        self.values = np.empty(capacity, dtype=VALUE_DTYPE)

    @classmethod
    def for_shape(cls, rows, cols):
        """Store sized for the worst case of a rows x cols matrix (all nonzero)."""
        return cls(capacity=int(rows) * int(cols))

    @property
    def capacity(self):
        return len(self.values)

    @property
    def shape(self):
        return (self.rows, self.cols)

    @property
    def header(self):
        """(rows, cols, nnz)"""
        return (self.rows, self.cols, self.nnz)

    def set_header(self, rows, cols, nnz):
        self.rows = int(rows)
        self.cols = int(cols)
        self.nnz = int(nnz)

    def live(self):
        """
        Views of the live part of the backing arrays.

        Returns
        -------
        tuple of numpy.ndarray
            (row_idx[:nnz], col_idx[:nnz], values[:nnz]). Writing through
            them writes the store.
        """
        n = self.nnz
        return self.row_idx[:n], self.col_idx[:n], self.values[:n]

    def entries(self):
        """Iterate live entries as (row, col, value) in storage order."""
        for k in range(self.nnz):
            yield (int(self.row_idx[k]), int(self.col_idx[k]),
                   float(self.values[k]))

    def __iter__(self):
        return self.entries()

    def __len__(self):
        return self.nnz

    def __repr__(self):
        return (f"SparseStore(shape={self.rows}x{self.cols}, "
                f"nnz={self.nnz:,}, capacity={self.capacity:,})")
