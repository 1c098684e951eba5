"""
Arithmetic: sparse + sparse and sparse x sparse on triplet stores.

Both operations merge partial results with a linear search over the
output's live entries (search-or-append), then prune entries that
cancelled to near zero. Output entries carry no ordering guarantee.

The output must be a separate store from both operands, sized by the
caller for the worst case: nnz_a + nnz_b for add, and up to
rows_a * cols_b for multiply.
"""

import logging

from tripsparse import fast as _fast
from tripsparse.config import resolve_epsilon
from tripsparse.errors import InvalidInput, DimensionMismatch, CapacityExceeded
from tripsparse.structural import copy, prune_near_zero

logger = logging.getLogger(__name__)


def _check_operands(name, out, a, b):
    if out is None or a is None or b is None:
        raise InvalidInput(f"{name} needs an output store and two operands")
    if out is a or out is b:
        raise InvalidInput(f"{name} output must not alias an operand")


def _overflow(name, out):
    logger.warning("%s: result does not fit capacity %d", name, out.capacity)
    return CapacityExceeded(
        f"{name} result exceeds capacity {out.capacity}",
        capacity=out.capacity)


def add(out, a, b, epsilon=None):
    """
    out = a + b

    Parameters
    ----------
    out : SparseStore
        Destination; overwritten.
    a, b : SparseStore
        Operands with identical (rows, cols).
    epsilon : float, optional
        Threshold for the final prune; defaults to ``config.epsilon``.

    Returns
    -------
    bool
        True.

    Raises
    ------
    DimensionMismatch
        Shapes differ in either dimension.
    CapacityExceeded
        ``out`` cannot hold a copy of ``a`` or the merged result.
    """
    _check_operands("add", out, a, b)
    if a.shape != b.shape:
        raise DimensionMismatch(
            f"cannot add {a.rows}x{a.cols} and {b.rows}x{b.cols}",
            left=a.shape, right=b.shape)
    eps = resolve_epsilon(epsilon)

    copy(out, a)
    nnz = _fast.merge_entries(
        out.row_idx, out.col_idx, out.values, out.nnz, out.capacity,
        b.row_idx, b.col_idx, b.values, b.nnz)
    if nnz < 0:
        raise _overflow("add", out)
    out.nnz = int(nnz)

    prune_near_zero(out, epsilon=eps)
    logger.debug("add %dx%d: nnz %d + %d -> %d",
                 a.rows, a.cols, a.nnz, b.nnz, out.nnz)
    return True


def multiply(out, a, b, epsilon=None):
    """
    out = a @ b

    Parameters
    ----------
    out : SparseStore
        Destination; overwritten with shape (a.rows, b.cols).
    a, b : SparseStore
        Operands with a.cols == b.rows. Headers are trusted: entries
        lying outside them are not detected.
    epsilon : float, optional
        Threshold for the final prune; defaults to ``config.epsilon``.

    Returns
    -------
    bool
        True.
    """
    _check_operands("multiply", out, a, b)
    if a.cols != b.rows:
        raise DimensionMismatch(
            f"cannot multiply {a.rows}x{a.cols} by {b.rows}x{b.cols}",
            left=a.shape, right=b.shape)
    eps = resolve_epsilon(epsilon)

    nnz = _fast.multiply_entries(
        out.row_idx, out.col_idx, out.values, out.capacity,
        a.row_idx, a.col_idx, a.values, a.nnz,
        b.row_idx, b.col_idx, b.values, b.nnz)
    if nnz < 0:
        raise _overflow("multiply", out)
    out.set_header(a.rows, b.cols, nnz)

    prune_near_zero(out, epsilon=eps)
    logger.debug("multiply %dx%d @ %dx%d: nnz=%d",
                 a.rows, a.cols, b.rows, b.cols, out.nnz)
    return True
