"""
Structural Ops: copy, transpose, single-entry removal, near-zero pruning.

transpose, delete_element and prune_near_zero mutate the store in place
and stay within its existing entries, so they can never exceed capacity.
"""

import logging
import operator

from tripsparse import fast as _fast
from tripsparse.config import resolve_epsilon
from tripsparse.errors import InvalidInput, CapacityExceeded, IndexOutOfRange

logger = logging.getLogger(__name__)


def copy(out, src):
    """
    Deep-copy header and live entries of ``src`` into ``out``.

    Parameters
    ----------
    out : SparseStore
        Destination, distinct from ``src``. Needs capacity >= src.nnz.
    src : SparseStore
        Source, not modified.

    Returns
    -------
    bool
        True.
    """
    if out is None or src is None:
        raise InvalidInput("copy needs both an output and a source store")
    if out is src:
        raise InvalidInput("copy source and destination must be distinct stores")
    nnz = src.nnz
    if out.capacity < nnz:
        logger.warning("copy: need %d entries, destination holds %d",
                       nnz, out.capacity)
        raise CapacityExceeded(
            f"copy needs {nnz} entries but capacity is {out.capacity}",
            required=nnz, capacity=out.capacity)

    out.row_idx[:nnz] = src.row_idx[:nnz]
    out.col_idx[:nnz] = src.col_idx[:nnz]
    out.values[:nnz] = src.values[:nnz]
    out.set_header(src.rows, src.cols, nnz)
    return True


def transpose(store):
    """Transpose in place: swap the dimensions and every entry's row/col.

    Entry order is unchanged.
    """
    if store is None:
        raise InvalidInput("transpose needs a store")
    rows, cols, _ = store.live()
    tmp = rows.copy()
    rows[:] = cols
    cols[:] = tmp
    store.rows, store.cols = store.cols, store.rows
    return True


def delete_element(store, pos):
    """
    Remove the entry at 0-based position ``pos`` by swap-and-pop.

    The last live entry moves into ``pos``; any ordering the store had is
    lost from then on.

    Raises
    ------
    IndexOutOfRange
        ``pos`` is not in [0, nnz).
    """
    if store is None:
        raise InvalidInput("delete_element needs a store")
    try:
        pos = operator.index(pos)
    except TypeError as e:
        raise InvalidInput(f"position must be an integer, got {pos!r}") from e
    if not 0 <= pos < store.nnz:
        raise IndexOutOfRange(f"position {pos} outside [0, {store.nnz})")

    store.nnz = int(_fast.swap_remove(store.row_idx, store.col_idx,
                                      store.values, store.nnz, pos))
    return True


def prune_near_zero(store, epsilon=None):
    """
    Drop every entry whose magnitude is below the threshold.

    Idempotent: a second call with the same epsilon changes nothing.

    Parameters
    ----------
    store : SparseStore
        Store to sweep in place.
    epsilon : float, optional
        Near-zero threshold; defaults to ``config.epsilon``.
    """
    if store is None:
        raise InvalidInput("prune_near_zero needs a store")
    eps = resolve_epsilon(epsilon)
    before = store.nnz
    store.nnz = int(_fast.prune_entries(store.row_idx, store.col_idx,
                                        store.values, before, eps))
    if store.nnz != before:
        logger.debug("pruned %d near-zero entries (epsilon=%g)",
                     before - store.nnz, eps)
    return True
