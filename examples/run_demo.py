"""
tripsparse demo: build, combine and inspect triplet stores.

Usage:
  pip install -e .
  python examples/run_demo.py
"""

import logging
import sys
import time

import numpy as np

import tripsparse as ts


def main():
    ts.setup_logging(logging.DEBUG)

    print(f"\n{'='*60}")
    print(f"  tripsparse {ts.__version__} (epsilon={ts.get_epsilon()})")
    print(f"{'='*60}")

    t0 = time.time()
    ts.fast.warmup()
    print(f"  JIT warmup: {time.time()-t0:.1f}s")
    sys.stdout.flush()

    rng = np.random.default_rng(42)
    m, k, n = 6, 5, 4
    A_dense = rng.normal(size=(m, k))
    A_dense[rng.random((m, k)) > 0.3] = 0.0
    B_dense = rng.normal(size=(k, n))
    B_dense[rng.random((k, n)) > 0.3] = 0.0

    A = ts.SparseStore.for_shape(m, k)
    B = ts.SparseStore.for_shape(k, n)
    ts.generate(A, A_dense, m, k)
    ts.generate(B, B_dense, k, n)
    ts.print_sparse(A)
    print(f"  A: {ts.sparse_info(A)}")

    C = ts.SparseStore.for_shape(m, n)
    ts.multiply(C, A, B)
    ts.print_sparse(C)

    At = ts.SparseStore(capacity=A.nnz)
    ts.copy(At, A)
    ts.transpose(At)
    S = ts.SparseStore(capacity=A.nnz + At.nnz)
    try:
        ts.add(S, A, At)
    except ts.DimensionMismatch as e:
        print(f"  add A + A^T refused: {e}")

    dense = np.empty((m, n))
    ts.expand(dense, m, n, C)
    expected = A_dense @ B_dense
    expected[np.abs(expected) < ts.get_epsilon()] = 0.0
    print(f"\n  max |C - A@B| = {np.max(np.abs(dense - expected)):.2e}")


if __name__ == '__main__':
    main()
