"""Matrix product with fixed-width 32-bit integer semantics."""

import math
from concurrent.futures import BrokenExecutor, ProcessPoolExecutor, as_completed

try:
    import numpy as np
except ImportError as e:
    raise ImportError(
        "numpy is required but not installed. Please install it using: pip install numpy"
    ) from e

from enums import OverflowMode
from errors import DimensionMismatchError, IntegerOverflowError, WorkerError
from matrix import Matrix

_INT32_MODULUS = 2 ** 32


def wrap_int32(value):
    """Reduce an exact integer to the signed 32-bit two's complement range."""
    return (value - Matrix.ELEMENT_MIN) % _INT32_MODULUS + Matrix.ELEMENT_MIN


def multiply_rows(a_rows, b_rows, start, stop, overflow_mode=OverflowMode.WRAP):
    """Compute rows [start, stop) of the product of two row-major lists.

    Each cell is accumulated exactly with Python ints and then either wrapped
    to 32 bits or, in checked mode, rejected when it does not fit.
    Module-level so it can be shipped to worker processes.

    Returns:
        list of result rows, the first one being row `start`
    """
    inner = len(b_rows)
    out_cols = len(b_rows[0])

    block = []
    for i_row in range(start, stop):
        a_row = a_rows[i_row]
        result_row = [0] * out_cols
        for i_col in range(out_cols):
            d_res = 0
            for k in range(inner):
                d_res += a_row[k] * b_rows[k][i_col]

            if overflow_mode == OverflowMode.CHECKED:
                if d_res < Matrix.ELEMENT_MIN or d_res > Matrix.ELEMENT_MAX:
                    raise IntegerOverflowError(i_row, i_col, d_res)
            else:
                d_res = wrap_int32(d_res)

            result_row[i_col] = d_res
        block.append(result_row)

    return block


def _row_blocks(rows, workers):
    """Split [0, rows) into at most `workers` contiguous, disjoint ranges."""
    size = math.ceil(rows / workers)
    return [(start, min(start + size, rows)) for start in range(0, rows, size)]


def _multiply_parallel(a_rows, b_rows, overflow_mode, threads):
    """Run multiply_rows over disjoint row blocks in a process pool.

    Workers receive pickled copies of the operands and return their own rows;
    nothing is shared or written concurrently.
    """
    blocks = _row_blocks(len(a_rows), threads)
    results = []
    try:
        with ProcessPoolExecutor(max_workers=len(blocks)) as executor:
            futures = {
                executor.submit(multiply_rows, a_rows, b_rows, start, stop, overflow_mode): start
                for start, stop in blocks
            }
            for future in as_completed(futures):
                results.append((futures[future], future.result()))
    except BrokenExecutor as e:
        raise WorkerError(f"Worker process pool failed: {e}") from e

    return results


def multiply(a, b, overflow_mode=OverflowMode.WRAP, threads=1):
    """Multiply two matrices, returning a new matrix of shape (a.rows, b.cols).

    Args:
        a: Left operand
        b: Right operand, b.get_rows() must equal a.get_cols()
        overflow_mode: OverflowMode.WRAP (two's complement, default) or
            OverflowMode.CHECKED (raise IntegerOverflowError)
        threads: Number of worker processes; 1 computes in-process

    Raises:
        DimensionMismatchError: operands are not compatible (nothing is allocated)
    """
    if a.get_cols() != b.get_rows():
        raise DimensionMismatchError(a.shape, b.shape)
    if threads < 1:
        raise ValueError(f"threads must be at least 1, got {threads}")

    result_rows = a.get_rows()
    result_cols = b.get_cols()
    result_mtx = Matrix.allocate(result_rows, result_cols, zero=True)

    a_rows = a.get_data()
    b_rows = b.get_data()

    if threads == 1 or result_rows == 1:
        blocks = [(0, multiply_rows(a_rows, b_rows, 0, result_rows, overflow_mode))]
    else:
        blocks = _multiply_parallel(a_rows, b_rows, overflow_mode, threads)

    for start, block in blocks:
        for offset, row in enumerate(block):
            for i_col, value in enumerate(row):
                result_mtx.set_element(start + offset, i_col, value)

    return result_mtx


def verify_product(a, b, result):
    """Cross-check a product against numpy.matmul with the same 32-bit wraparound."""
    if a.get_cols() != b.get_rows():
        raise DimensionMismatchError(a.shape, b.shape)

    # int64 matmul wraps modulo 2**64, which preserves the value modulo 2**32
    expected = np.matmul(a.to_array().astype(np.int64), b.to_array().astype(np.int64))
    expected = (expected - Matrix.ELEMENT_MIN) % _INT32_MODULUS + Matrix.ELEMENT_MIN

    if result.shape != expected.shape:
        return False
    return bool(np.array_equal(expected, result.to_array()))
