"""Tests for multiplier.py: product correctness, mismatch, overflow, parallel rows."""

from concurrent.futures import Future
from concurrent.futures.process import BrokenProcessPool

import numpy as np
import pytest

from enums import OverflowMode
from errors import DimensionMismatchError, IntegerOverflowError, WorkerError
from matrix import Matrix
from multiplier import _row_blocks, multiply, multiply_rows, verify_product, wrap_int32


def _random_matrix(rng, rows, cols, low=-50, high=50):
    return Matrix(values=rng.integers(low, high, size=(rows, cols)).tolist())


class _BrokenPool:
    """Stands in for a process pool whose workers died."""

    def __init__(self, max_workers=None):
        self.max_workers = max_workers

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False

    def submit(self, fn, *args):
        future = Future()
        future.set_exception(BrokenProcessPool("a worker terminated abruptly"))
        return future


def _naive_product(a_values, b_values):
    return [
        [sum(a_values[i][k] * b_values[k][j] for k in range(len(b_values)))
         for j in range(len(b_values[0]))]
        for i in range(len(a_values))
    ]


class TestMultiply:
    def test_example_scenario(self):
        a = Matrix(values=[[1, 2, 9], [4, 5, 6]])
        b = Matrix(values=[[7, 8], [9, 10], [11, 12]])
        result = multiply(a, b)
        assert result.shape == (2, 2)
        assert result.get_data() == [
            [1 * 7 + 2 * 9 + 9 * 11, 1 * 8 + 2 * 10 + 9 * 12],
            [4 * 7 + 5 * 9 + 6 * 11, 4 * 8 + 5 * 10 + 6 * 12],
        ]
        assert result.get_data() == [[124, 136], [139, 154]]

    @pytest.mark.parametrize('m, n, p', [(1, 1, 1), (1, 5, 1), (4, 1, 3), (3, 4, 5), (6, 2, 6)])
    def test_matches_naive_sum(self, m, n, p):
        rng = np.random.default_rng(m * 100 + n * 10 + p)
        a = _random_matrix(rng, m, n)
        b = _random_matrix(rng, n, p)
        result = multiply(a, b)
        assert result.shape == (m, p)
        assert result.get_data() == _naive_product(a.get_data(), b.get_data())

    @pytest.mark.parametrize('m, n', [(1, 1), (2, 3), (4, 4), (5, 2)])
    def test_identity(self, m, n):
        rng = np.random.default_rng(m + n)
        a = _random_matrix(rng, m, n)
        assert multiply(a, Matrix.create_identity_matrix(n)) == a

    def test_inputs_unchanged(self):
        a = Matrix(values=[[1, 2], [3, 4]])
        b = Matrix(values=[[5, 6], [7, 8]])
        multiply(a, b)
        assert a.get_data() == [[1, 2], [3, 4]]
        assert b.get_data() == [[5, 6], [7, 8]]

    def test_result_is_new_matrix(self):
        a = Matrix(values=[[1]])
        result = multiply(a, a)
        assert result is not a
        result.release()
        assert a.get_element(0, 0) == 1

    @pytest.mark.parametrize('a_shape, b_shape', [((2, 3), (2, 3)), ((1, 2), (3, 1)), ((4, 1), (2, 4))])
    def test_dimension_mismatch(self, a_shape, b_shape):
        a = Matrix.allocate(*a_shape, zero=True)
        b = Matrix.allocate(*b_shape, zero=True)
        with pytest.raises(DimensionMismatchError) as exc_info:
            multiply(a, b)
        assert exc_info.value.a_shape == a_shape
        assert exc_info.value.b_shape == b_shape
        assert "incompatible dimensions" in str(exc_info.value)

    def test_dimension_mismatch_allocates_nothing(self, monkeypatch):
        a = Matrix.allocate(2, 3, zero=True)
        b = Matrix.allocate(2, 3, zero=True)
        calls = []
        monkeypatch.setattr(Matrix, 'allocate', classmethod(lambda cls, *args, **kw: calls.append(args)))
        with pytest.raises(DimensionMismatchError):
            multiply(a, b)
        assert calls == []

    def test_invalid_thread_count(self):
        a = Matrix(values=[[1]])
        with pytest.raises(ValueError):
            multiply(a, a, threads=0)


class TestOverflow:
    def test_wrap_int32(self):
        assert wrap_int32(0) == 0
        assert wrap_int32(2 ** 31 - 1) == 2 ** 31 - 1
        assert wrap_int32(2 ** 31) == -2 ** 31
        assert wrap_int32(-2 ** 31 - 1) == 2 ** 31 - 1
        assert wrap_int32(2 ** 32 + 5) == 5

    def test_wraparound_matches_native_int32(self):
        a = Matrix(values=[[2 ** 31 - 1, 1]])
        b = Matrix(values=[[1], [1]])
        result = multiply(a, b)
        expected = np.array([[2 ** 31 - 1, 1]], dtype=np.int32) @ np.array([[1], [1]], dtype=np.int32)
        assert result.get_element(0, 0) == int(expected[0, 0]) == -2 ** 31

    def test_checked_mode_raises(self):
        a = Matrix(values=[[1, 1], [65536, 0]])
        b = Matrix(values=[[65536], [1]])
        with pytest.raises(IntegerOverflowError) as exc_info:
            multiply(a, b, overflow_mode=OverflowMode.CHECKED)
        assert exc_info.value.cell == (1, 0)
        assert exc_info.value.value == 2 ** 32

    def test_checked_mode_without_overflow(self):
        a = Matrix(values=[[1, 2, 9], [4, 5, 6]])
        b = Matrix(values=[[7, 8], [9, 10], [11, 12]])
        assert multiply(a, b, overflow_mode=OverflowMode.CHECKED) == multiply(a, b)


class TestRowKernel:
    def test_row_range(self):
        a_rows = [[1, 0], [0, 1], [2, 2]]
        b_rows = [[3, 4], [5, 6]]
        assert multiply_rows(a_rows, b_rows, 1, 3) == [[5, 6], [16, 20]]

    def test_row_blocks_are_disjoint_and_complete(self):
        for rows in range(1, 12):
            for workers in range(1, 6):
                blocks = _row_blocks(rows, workers)
                assert len(blocks) <= workers
                covered = [i for start, stop in blocks for i in range(start, stop)]
                assert covered == list(range(rows))


class TestParallel:
    def test_parallel_matches_sequential(self):
        rng = np.random.default_rng(7)
        a = _random_matrix(rng, 7, 5)
        b = _random_matrix(rng, 5, 4)
        assert multiply(a, b, threads=3) == multiply(a, b)

    def test_parallel_overflow_propagates(self):
        a = Matrix(values=[[1], [2 ** 20], [3]])
        b = Matrix(values=[[2 ** 20]])
        with pytest.raises(IntegerOverflowError) as exc_info:
            multiply(a, b, overflow_mode=OverflowMode.CHECKED, threads=3)
        assert exc_info.value.cell == (1, 0)

    def test_broken_pool_raises_worker_error(self, monkeypatch):
        monkeypatch.setattr('multiplier.ProcessPoolExecutor', _BrokenPool)
        a = Matrix(values=[[1], [2], [3]])
        b = Matrix(values=[[4]])
        with pytest.raises(WorkerError) as exc_info:
            multiply(a, b, threads=2)
        assert "a worker terminated abruptly" in str(exc_info.value)


class TestVerifyProduct:
    def test_correct_product(self):
        rng = np.random.default_rng(3)
        a = _random_matrix(rng, 4, 3, low=-2 ** 31, high=2 ** 31 - 1)
        b = _random_matrix(rng, 3, 2, low=-2 ** 31, high=2 ** 31 - 1)
        assert verify_product(a, b, multiply(a, b)) is True

    def test_wrong_product(self):
        a = Matrix(values=[[1, 2]])
        b = Matrix(values=[[3], [4]])
        assert verify_product(a, b, Matrix(values=[[12]])) is False

    def test_wrong_shape(self):
        a = Matrix(values=[[1, 2]])
        b = Matrix(values=[[3], [4]])
        assert verify_product(a, b, Matrix(values=[[11, 0]])) is False

    def test_mismatch(self):
        a = Matrix(values=[[1, 2]])
        with pytest.raises(DimensionMismatchError):
            verify_product(a, a, a)
