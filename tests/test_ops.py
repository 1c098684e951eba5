"""Tests for structural ops, arithmetic and the numba kernels."""
from collections import Counter

import numpy as np
import pytest

import tripsparse as ts
from tripsparse import SparseStore, generate, expand
from tripsparse import fast


def make_store(triplets, rows, cols, capacity=None):
    """Write triplets straight into a store, bypassing generate."""
    s = SparseStore(capacity=len(triplets) if capacity is None else capacity)
    for k, (i, j, v) in enumerate(triplets):
        s.row_idx[k] = i
        s.col_idx[k] = j
        s.values[k] = v
    s.set_header(rows, cols, len(triplets))
    return s


def from_dense(D, capacity=None):
    D = np.asarray(D, dtype=float)
    m, n = D.shape
    s = SparseStore(capacity=m * n if capacity is None else capacity)
    generate(s, D, m, n)
    return s


def to_dense(s):
    out = np.empty((s.rows, s.cols))
    expand(out, s.rows, s.cols, s)
    return out


def random_int_matrix(rng, m, n, density=0.4):
    """Integer-valued so every sum and product is exact."""
    D = rng.integers(-3, 4, size=(m, n)).astype(float)
    D[rng.random((m, n)) > density] = 0.0
    return D


# ============================================================
# Copy
# ============================================================

class TestCopy:

    def test_copy_header_and_entries(self):
        src = from_dense([[0, 1.5], [2.5, 0]])
        out = SparseStore(capacity=2)
        assert ts.copy(out, src) is True
        assert out.header == src.header
        assert list(out) == list(src)

    def test_copy_independence(self):
        src = make_store([(0, 0, 1.0), (1, 1, 2.0), (2, 2, 3.0)], 3, 3)
        out = SparseStore(capacity=3)
        ts.copy(out, src)
        ts.delete_element(src, 0)
        src.values[0] = 99.0
        assert out.header == (3, 3, 3)
        assert list(out) == [(0, 0, 1.0), (1, 1, 2.0), (2, 2, 3.0)]

        ts.transpose(out)
        assert src.header == (3, 3, 2)

    def test_copy_capacity(self):
        src = from_dense([[1.0, 2.0]])
        out = SparseStore(capacity=1)
        with pytest.raises(ts.CapacityExceeded) as exc:
            ts.copy(out, src)
        assert exc.value.required == 2

    def test_copy_larger_capacity_ok(self):
        src = from_dense([[1.0, 2.0]])
        out = SparseStore(capacity=10)
        ts.copy(out, src)
        assert out.nnz == 2
        assert out.capacity == 10

    def test_copy_rejects_same_store(self):
        s = from_dense([[1.0]])
        with pytest.raises(ts.InvalidInput):
            ts.copy(s, s)

    def test_copy_none(self):
        with pytest.raises(ts.InvalidInput):
            ts.copy(None, from_dense([[1.0]]))


# ============================================================
# Transpose
# ============================================================

class TestTranspose:

    def test_transpose_rectangular(self):
        D = np.array([[1.0, 0, 2.0], [0, 3.0, 0]])
        s = from_dense(D)
        assert ts.transpose(s) is True
        assert s.shape == (3, 2)
        assert np.array_equal(to_dense(s), D.T)

    def test_transpose_keeps_order(self):
        s = make_store([(0, 1, 1.0), (1, 0, 2.0), (0, 2, 3.0)], 2, 3)
        ts.transpose(s)
        assert list(s) == [(1, 0, 1.0), (0, 1, 2.0), (2, 0, 3.0)]

    def test_transpose_involution(self):
        rng = np.random.default_rng(1)
        D = random_int_matrix(rng, 4, 7)
        s = from_dense(D)
        before = (s.header, list(s))
        ts.transpose(s)
        ts.transpose(s)
        assert (s.header, list(s)) == before

    def test_transpose_empty(self):
        s = from_dense(np.zeros((2, 5)), capacity=0)
        ts.transpose(s)
        assert s.header == (5, 2, 0)

    def test_transpose_none(self):
        with pytest.raises(ts.InvalidInput):
            ts.transpose(None)


# ============================================================
# Delete
# ============================================================

class TestDeleteElement:

    def test_swap_and_pop(self):
        s = make_store([(0, 0, 1.0), (1, 1, 2.0), (2, 2, 3.0)], 3, 3)
        assert ts.delete_element(s, 1) is True
        assert s.nnz == 2
        assert list(s) == [(0, 0, 1.0), (2, 2, 3.0)]

    def test_delete_last(self):
        s = make_store([(0, 0, 1.0), (1, 1, 2.0)], 2, 2)
        ts.delete_element(s, 1)
        assert list(s) == [(0, 0, 1.0)]

    def test_delete_only(self):
        s = make_store([(0, 0, 1.0)], 1, 1)
        ts.delete_element(s, 0)
        assert s.nnz == 0
        assert list(s) == []

    @pytest.mark.parametrize("pos", [-1, 3, 10])
    def test_out_of_range(self, pos):
        s = make_store([(0, 0, 1.0), (1, 1, 2.0), (2, 2, 3.0)], 3, 3)
        with pytest.raises(ts.IndexOutOfRange):
            ts.delete_element(s, pos)
        assert s.nnz == 3

    def test_out_of_range_is_index_error(self):
        s = make_store([], 1, 1)
        with pytest.raises(IndexError):
            ts.delete_element(s, 0)

    def test_non_integer_position(self):
        s = make_store([(0, 0, 1.0)], 1, 1)
        with pytest.raises(ts.InvalidInput):
            ts.delete_element(s, 0.5)

    def test_numpy_integer_position(self):
        s = make_store([(0, 0, 1.0), (1, 1, 2.0)], 2, 2)
        ts.delete_element(s, np.int64(0))
        assert list(s) == [(1, 1, 2.0)]


# ============================================================
# Prune
# ============================================================

class TestPrune:

    def test_prune_rechecks_swapped_slot(self):
        s = make_store([(0, 0, 0.0005), (0, 1, 1.0), (0, 2, -0.0002),
                        (0, 3, 2.0), (0, 4, 0.0001)], 1, 5)
        assert ts.prune_near_zero(s) is True
        assert s.nnz == 2
        assert Counter(s) == Counter([(0, 1, 1.0), (0, 3, 2.0)])

    def test_prune_all(self):
        s = make_store([(0, 0, 1e-4), (1, 1, -1e-5)], 2, 2)
        ts.prune_near_zero(s)
        assert s.nnz == 0

    def test_prune_keeps_boundary(self):
        s = make_store([(0, 0, 0.001), (0, 1, -0.001)], 1, 2)
        ts.prune_near_zero(s)
        assert s.nnz == 2

    def test_prune_idempotent(self):
        rng = np.random.default_rng(7)
        triplets = [(k // 5, k % 5, float(v))
                    for k, v in enumerate(rng.normal(scale=0.002, size=20))]
        s = make_store(triplets, 4, 5)
        ts.prune_near_zero(s)
        first = (s.header, list(s))
        ts.prune_near_zero(s)
        assert (s.header, list(s)) == first
        assert all(abs(v) >= 0.001 for _, _, v in s)

    def test_prune_custom_epsilon(self):
        s = make_store([(0, 0, 0.4), (0, 1, 0.6)], 1, 2)
        ts.prune_near_zero(s, epsilon=0.5)
        assert list(s) == [(0, 1, 0.6)]


# ============================================================
# Add
# ============================================================

class TestAdd:

    def test_add_random_against_dense(self):
        rng = np.random.default_rng(11)
        for m, n in [(1, 1), (3, 3), (5, 8), (9, 4)]:
            A = random_int_matrix(rng, m, n)
            B = random_int_matrix(rng, m, n)
            a, b = from_dense(A), from_dense(B)
            out = SparseStore(capacity=a.nnz + b.nnz)
            assert ts.add(out, a, b) is True
            assert out.shape == (m, n)
            assert np.array_equal(to_dense(out), A + B)

    def test_add_cancellation_is_pruned(self):
        a = from_dense([[1.0, 2.0], [0, 0]])
        b = from_dense([[-1.0, 0], [0, 3.0]])
        out = SparseStore(capacity=4)
        ts.add(out, a, b)
        assert Counter(out) == Counter([(0, 1, 2.0), (1, 1, 3.0)])

    def test_add_near_zero_sum_is_pruned(self):
        a = from_dense([[1.0]])
        b = from_dense([[-0.9995]])
        out = SparseStore(capacity=2)
        ts.add(out, a, b)
        assert out.nnz == 0

    def test_add_merges_duplicates(self):
        a = from_dense([[1.0, 0], [0, 0]])
        b = from_dense([[2.0, 0], [0, 0]])
        out = SparseStore(capacity=2)
        ts.add(out, a, b)
        assert list(out) == [(0, 0, 3.0)]

    def test_add_inputs_unchanged(self):
        a = from_dense([[1.0, 0], [0, 2.0]])
        b = from_dense([[0, 5.0], [0, -2.0]])
        before = (list(a), list(b))
        ts.add(SparseStore(capacity=4), a, b)
        assert (list(a), list(b)) == before

    @pytest.mark.parametrize("shape_b", [(2, 3), (3, 2), (3, 3)])
    def test_add_dimension_mismatch(self, shape_b):
        a = from_dense(np.eye(2))
        b = from_dense(np.ones(shape_b))
        with pytest.raises(ts.DimensionMismatch):
            ts.add(SparseStore(capacity=20), a, b)

    def test_add_capacity_for_copy(self):
        a = from_dense([[1.0, 2.0]])
        b = from_dense([[1.0, 2.0]])
        with pytest.raises(ts.CapacityExceeded):
            ts.add(SparseStore(capacity=1), a, b)

    def test_add_capacity_for_merge(self):
        a = from_dense([[1.0, 0]])
        b = from_dense([[0, 2.0]])
        with pytest.raises(ts.CapacityExceeded):
            ts.add(SparseStore(capacity=1), a, b)

    def test_add_rejects_aliasing(self):
        a = from_dense([[1.0, 0]], capacity=2)
        b = from_dense([[0, 2.0]])
        with pytest.raises(ts.InvalidInput):
            ts.add(a, a, b)
        with pytest.raises(ts.InvalidInput):
            ts.add(b, a, b)


# ============================================================
# Multiply
# ============================================================

class TestMultiply:

    def test_multiply_random_against_dense(self):
        rng = np.random.default_rng(5)
        for m, k, n in [(1, 1, 1), (2, 3, 4), (5, 5, 5), (6, 2, 7)]:
            A = random_int_matrix(rng, m, k)
            B = random_int_matrix(rng, k, n)
            a, b = from_dense(A), from_dense(B)
            out = SparseStore.for_shape(m, n)
            assert ts.multiply(out, a, b) is True
            assert out.shape == (m, n)
            assert np.array_equal(to_dense(out), A @ B)

    def test_multiply_output_column_from_second_operand(self):
        a = from_dense([[0, 2.0]])          # 1x2
        b = from_dense([[0, 0, 0], [0, 0, 3.0]])  # 2x3
        out = SparseStore(capacity=3)
        ts.multiply(out, a, b)
        assert out.header == (1, 3, 1)
        assert list(out) == [(0, 2, 6.0)]

    def test_multiply_cancellation_is_pruned(self):
        a = from_dense([[1.0, 1.0]])
        b = from_dense([[2.0], [-2.0]])
        out = SparseStore(capacity=1)
        ts.multiply(out, a, b)
        assert out.header == (1, 1, 0)

    def test_multiply_negative_products_kept(self):
        a = from_dense([[-2.0]])
        b = from_dense([[3.0]])
        out = SparseStore(capacity=1)
        ts.multiply(out, a, b)
        assert list(out) == [(0, 0, -6.0)]

    def test_multiply_no_overlap(self):
        a = from_dense([[1.0, 0]])
        b = from_dense([[0], [0]], capacity=0)
        out = SparseStore(capacity=0)
        ts.multiply(out, a, b)
        assert out.header == (1, 1, 0)

    def test_multiply_dimension_mismatch(self):
        a = from_dense(np.ones((2, 3)))
        b = from_dense(np.ones((2, 3)))
        with pytest.raises(ts.DimensionMismatch):
            ts.multiply(SparseStore(capacity=9), a, b)

    def test_multiply_capacity(self):
        a = from_dense(np.ones((2, 1)))
        b = from_dense(np.ones((1, 2)))
        with pytest.raises(ts.CapacityExceeded):
            ts.multiply(SparseStore(capacity=3), a, b)

    def test_multiply_after_transpose(self):
        rng = np.random.default_rng(9)
        A = random_int_matrix(rng, 3, 5)
        a = from_dense(A)
        at = SparseStore(capacity=a.nnz)
        ts.copy(at, a)
        ts.transpose(at)
        out = SparseStore.for_shape(3, 3)
        ts.multiply(out, a, at)
        assert np.array_equal(to_dense(out), A @ A.T)

    def test_multiply_rejects_aliasing(self):
        a = from_dense(np.eye(2))
        with pytest.raises(ts.InvalidInput):
            ts.multiply(a, a, a)


# ============================================================
# Kernels
# ============================================================

class TestKernels:

    def test_warmup(self):
        fast.warmup()

    def test_find_entry(self):
        rows = np.array([0, 1, 1], dtype=np.int64)
        cols = np.array([2, 0, 2], dtype=np.int64)
        assert fast.find_entry(rows, cols, 3, 1, 2) == 2
        assert fast.find_entry(rows, cols, 3, 2, 2) == -1
        # entries beyond nnz are not searched
        assert fast.find_entry(rows, cols, 2, 1, 2) == -1

    def test_accumulate_overflow_writes_nothing(self):
        rows = np.array([0], dtype=np.int64)
        cols = np.array([0], dtype=np.int64)
        vals = np.array([1.0])
        assert fast.accumulate(rows, cols, vals, 1, 1, 0, 0, 2.0) == 1
        assert vals[0] == 3.0
        assert fast.accumulate(rows, cols, vals, 1, 1, 0, 1, 5.0) == -1
        assert (rows[0], cols[0], vals[0]) == (0, 0, 3.0)

    def test_prune_entries(self):
        rows = np.arange(4, dtype=np.int64)
        cols = np.zeros(4, dtype=np.int64)
        vals = np.array([0.0, 1.0, 0.0, 0.0])
        n = fast.prune_entries(rows, cols, vals, 4, 0.001)
        assert n == 1
        assert (rows[0], vals[0]) == (1, 1.0)
