"""
Conversion: dense <-> triplet store, plus scipy.sparse interop.

generate scans a dense row-major buffer and keeps every value with
|x| >= epsilon, in row-major order. expand scatters a store back into a
caller-provided dense buffer.

The nonzero count is computed before anything is written, so a
generate that fails on capacity leaves the destination untouched.
"""

import logging

import numpy as np
from scipy import sparse

from tripsparse import fast as _fast
from tripsparse.config import resolve_epsilon
from tripsparse.errors import InvalidInput, DimensionMismatch, CapacityExceeded

logger = logging.getLogger(__name__)


def _check_dims(m, n):
    m = int(m)
    n = int(n)
    if m <= 0 or n <= 0:
        raise InvalidInput(f"dimensions must be positive, got {m}x{n}")
    return m, n


def _write_entries(out, rows, cols, vals, m, n):
    """Copy triplets into out after the capacity check; sets the header."""
    nnz = len(vals)
    if nnz > m * n:
        # More nonzeros than positions: the dimensions do not describe the input
        raise InvalidInput(f"{nnz} nonzeros cannot fit a {m}x{n} matrix")
    if nnz > out.capacity:
        logger.warning("capacity exceeded: need %d entries, store holds %d",
                       nnz, out.capacity)
        raise CapacityExceeded(
            f"result needs {nnz} entries but capacity is {out.capacity}",
            required=nnz, capacity=out.capacity)

    out.row_idx[:nnz] = rows
    out.col_idx[:nnz] = cols
    out.values[:nnz] = vals
    out.set_header(m, n, nnz)


def generate(out, dense, m, n, epsilon=None):
    """
    Build a triplet store from a dense row-major matrix.

    Parameters
    ----------
    out : SparseStore
        Destination; its capacity bounds the number of kept entries.
    dense : array-like of float
        m*n values in row-major order (a 2-D array is flattened).
    m, n : int
        Number of rows and columns.
    epsilon : float, optional
        Near-zero threshold; defaults to ``config.epsilon``.

    Returns
    -------
    bool
        True.

    Raises
    ------
    InvalidInput
        Missing argument, non-positive dimension or wrong buffer size.
    CapacityExceeded
        More entries survive the threshold than ``out`` can hold.
    """
    if out is None or dense is None:
        raise InvalidInput("generate needs both an output store and a dense buffer")
    m, n = _check_dims(m, n)
    eps = resolve_epsilon(epsilon)

    flat = np.asarray(dense, dtype=np.float64).ravel()
    if flat.size != m * n:
        raise InvalidInput(f"dense buffer holds {flat.size} values, expected {m * n}")

    keep = np.flatnonzero(np.abs(flat) >= eps)
    rows, cols = np.divmod(keep, n)
    _write_entries(out, rows, cols, flat[keep], m, n)

    logger.debug("generate %dx%d: nnz=%d (epsilon=%g)", m, n, out.nnz, eps)
    return True


def expand(out, m, n, store):
    """
    Write the dense form of a store into ``out``.

    Parameters
    ----------
    out : numpy.ndarray
        Writable, C-contiguous float buffer with m*n elements (flat or
        shaped (m, n)). Overwritten entirely.
    m, n : int
        Expected dimensions; must equal ``store.shape``.
    store : SparseStore
        Source. Duplicate positions resolve to the last stored entry.

    Returns
    -------
    bool
        True.
    """
    if out is None or store is None:
        raise InvalidInput("expand needs both an output buffer and a store")
    m, n = _check_dims(m, n)
    if store.shape != (m, n):
        raise DimensionMismatch(
            f"store is {store.rows}x{store.cols}, buffer described as {m}x{n}",
            left=store.shape, right=(m, n))
    if not isinstance(out, np.ndarray) or out.size != m * n:
        raise InvalidInput(f"output must be a numpy array of {m * n} elements")
    if not np.issubdtype(out.dtype, np.floating):
        raise InvalidInput(f"output must have a floating dtype, got {out.dtype}")
    if not (out.flags.writeable and out.flags.c_contiguous):
        raise InvalidInput("output must be writable and C-contiguous")

    # The header is trusted elsewhere, but scatter writes raw offsets
    rows, cols, _ = store.live()
    if rows.size and (rows.min() < 0 or cols.min() < 0
                      or rows.max() >= m or cols.max() >= n):
        raise InvalidInput(f"store has entries outside its {m}x{n} header")

    flat = out.reshape(-1)
    flat[:] = 0.0
    _fast.scatter(flat, n, store.row_idx, store.col_idx, store.values, store.nnz)

    logger.debug("expand %dx%d from nnz=%d", m, n, store.nnz)
    return True


# ============================================================
# scipy.sparse interop
# ============================================================

def to_scipy(store):
    """
    Copy the live entries into a ``scipy.sparse.coo_matrix``.

    Duplicate positions are kept as separate entries; scipy sums them
    when the matrix is converted to another format.
    """
    if store is None:
        raise InvalidInput("to_scipy needs a store")
    rows, cols, vals = store.live()
    return sparse.coo_matrix(
        (vals.copy(), (rows.copy(), cols.copy())),
        shape=store.shape,
    )


def from_scipy(out, matrix, epsilon=None):
    """
    Load a scipy.sparse matrix into a store.

    Duplicates are summed first, then the threshold is applied; surviving
    entries are written in row-major order, as ``generate`` would.

    Parameters
    ----------
    out : SparseStore
        Destination.
    matrix : scipy.sparse matrix or array
        Any sparse format.
    epsilon : float, optional
        Near-zero threshold; defaults to ``config.epsilon``.
    """
    if out is None or matrix is None:
        raise InvalidInput("from_scipy needs both an output store and a matrix")
    if not sparse.issparse(matrix):
        raise InvalidInput(f"expected a scipy.sparse matrix, got {type(matrix).__name__}")
    m, n = _check_dims(*matrix.shape)
    eps = resolve_epsilon(epsilon)

    coo = sparse.coo_matrix(matrix, dtype=np.float64, copy=True)
    coo.sum_duplicates()
    order = np.lexsort((coo.col, coo.row))
    rows = coo.row[order].astype(np.int64)
    cols = coo.col[order].astype(np.int64)
    vals = coo.data[order]

    mask = np.abs(vals) >= eps
    _write_entries(out, rows[mask], cols[mask], vals[mask], m, n)

    logger.debug("from_scipy %dx%d: nnz=%d", m, n, out.nnz)
    return True
