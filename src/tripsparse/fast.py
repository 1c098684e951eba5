"""
Fast: Numba JIT-compiled kernels for the triplet-store hot loops.

All kernels work on the raw backing arrays of a store (int64 row/col
indices, float64 values) plus its live count, and return the new live
count. They never raise: overflow is reported as -1 and the Python
wrappers turn it into CapacityExceeded.

Merging is a plain linear search over the live entries, so add costs
O(nnz_a * nnz_b) and multiply O(nnz_a * nnz_b * nnz_out) in the worst case.
"""

import numpy as np
from numba import njit


# ============================================================
# Search-or-append: the primitive behind add and multiply
# ============================================================

@njit(cache=True)
def find_entry(row_idx, col_idx, nnz, i, j):
    """Position of the first live entry at (i, j), or -1.

    Parameters
    ----------
    row_idx, col_idx : numpy arrays of int64
        Backing index arrays of the store.
    nnz : int
        Number of live entries to scan.
    i, j : int
        Row and column to look for.

    Returns
    -------
    int64
        Slot index, -1 when absent.
    """
    for h in range(nnz):
        if row_idx[h] == i and col_idx[h] == j:
            return h
    return -1


@njit(cache=True)
def accumulate(row_idx, col_idx, values, nnz, capacity, i, j, v):
    """Add v at (i, j): in place when present, appended otherwise.

    Returns
    -------
    int64
        New live count, or -1 if appending would pass capacity (nothing
        is written in that case).
    """
    h = find_entry(row_idx, col_idx, nnz, i, j)
    if h >= 0:
        values[h] += v
        return nnz
    if nnz >= capacity:
        return -1
    row_idx[nnz] = i
    col_idx[nnz] = j
    values[nnz] = v
    return nnz + 1


@njit(cache=True)
def merge_entries(out_rows, out_cols, out_vals, nnz, capacity,
                  in_rows, in_cols, in_vals, in_nnz):
    """Merge every live entry of one store into another (addition).

    Returns
    -------
    int64
        New live count of the destination, -1 on overflow.
    """
    for k in range(in_nnz):
        nnz = accumulate(out_rows, out_cols, out_vals, nnz, capacity,
                         in_rows[k], in_cols[k], in_vals[k])
        if nnz < 0:
            return -1
    return nnz


@njit(cache=True)
def multiply_entries(out_rows, out_cols, out_vals, capacity,
                     a_rows, a_cols, a_vals, a_nnz,
                     b_rows, b_cols, b_vals, b_nnz):
    """Sparse x sparse triple product into an empty destination.

    For each entry (i, k, v1) of a and each entry (k, c, v2) of b,
    accumulates v1*v2 at (i, c). No row/column index is built; b is
    rescanned for every entry of a.

    Returns
    -------
    int64
        Live count of the destination, -1 on overflow.
    """
    nnz = 0
    for p in range(a_nnz):
        i = a_rows[p]
        k = a_cols[p]
        v1 = a_vals[p]
        for q in range(b_nnz):
            if b_rows[q] == k:
                nnz = accumulate(out_rows, out_cols, out_vals, nnz, capacity,
                                 i, b_cols[q], v1 * b_vals[q])
                if nnz < 0:
                    return -1
    return nnz


# ============================================================
# Removal: swap-and-pop and near-zero sweep
# ============================================================

@njit(cache=True)
def swap_remove(row_idx, col_idx, values, nnz, pos):
    """Overwrite slot pos with the last live entry; return nnz - 1."""
    last = nnz - 1
    row_idx[pos] = row_idx[last]
    col_idx[pos] = col_idx[last]
    values[pos] = values[last]
    return last


@njit(cache=True)
def prune_entries(row_idx, col_idx, values, nnz, epsilon):
    """Swap-remove every live entry with |value| < epsilon.

    The slot that receives the swapped-in entry is examined again before
    the sweep moves on, since that entry may be below threshold too.

    Returns
    -------
    int64
        New live count.
    """
    k = 0
    while k < nnz:
        if abs(values[k]) < epsilon:
            nnz = swap_remove(row_idx, col_idx, values, nnz, k)
        else:
            k += 1
    return nnz


# ============================================================
# Expansion: scatter entries into a dense buffer
# ============================================================

@njit(cache=True)
def scatter(out_flat, n_cols, row_idx, col_idx, values, nnz):
    """Write live entries into a zeroed row-major buffer, in entry order.

    Later entries overwrite earlier ones at the same position.
    """
    for k in range(nnz):
        out_flat[row_idx[k] * n_cols + col_idx[k]] = values[k]


def warmup():
    """Compile every kernel on tiny inputs so the first real call is fast."""
    rows = np.zeros(2, dtype=np.int64)
    cols = np.zeros(2, dtype=np.int64)
    vals = np.ones(2, dtype=np.float64)
    out_rows = np.empty(2, dtype=np.int64)
    out_cols = np.empty(2, dtype=np.int64)
    out_vals = np.empty(2, dtype=np.float64)
    n = merge_entries(out_rows, out_cols, out_vals, 0, 2, rows, cols, vals, 1)
    multiply_entries(out_rows, out_cols, out_vals, 2,
                     rows, cols, vals, 1, rows, cols, vals, 1)
    prune_entries(out_rows, out_cols, out_vals, n, 0.001)
    swap_remove(rows, cols, vals, 2, 0)
    scatter(np.zeros(1, dtype=np.float64), 1, rows, cols, vals, 1)
