"""
Diagnostics: human-readable views of a triplet store.

Text format (one entry per line, storage order):

    Sparse matrix 2x2:
    (0,0) = 1.000000
    (1,1) = 2.000000

There is no parser for this format.
"""

import sys

from tripsparse.errors import InvalidInput


def format_sparse(store):
    """Render the store header and live entries as text."""
    if store is None:
        raise InvalidInput("format_sparse needs a store")
    lines = [f"Sparse matrix {store.rows}x{store.cols}:"]
    for i, j, v in store.entries():
        lines.append(f"({i},{j}) = {v:f}")
    return "\n".join(lines) + "\n"


def print_sparse(store, file=None):
    """Write ``format_sparse(store)`` to ``file`` (stdout by default)."""
    text = format_sparse(store)
    out = sys.stdout if file is None else file
    out.write(text)
    out.flush()
    return True


def sparse_info(store):
    """
    Summarize size and memory of a store.

    Parameters
    ----------
    store : SparseStore
        Store to inspect.

    Returns
    -------
    dict
        Shape, nnz, capacity, density, RAM of the backing arrays, the RAM a
        dense float64 matrix would take, and the compression ratio.
    """
    if store is None:
        raise InvalidInput("sparse_info needs a store")
    m, n = store.shape
    total = m * n
    ram = store.row_idx.nbytes + store.col_idx.nbytes + store.values.nbytes
    dense = total * 8

    return {
        "shape": (m, n),
        "nnz": store.nnz,
        "capacity": store.capacity,
        "density": round(store.nnz / total, 6) if total > 0 else 0.0,
        "ram_bytes": ram,
        "dense_would_be_bytes": dense,
        "compression": round(dense / max(ram, 1), 1),
    }
