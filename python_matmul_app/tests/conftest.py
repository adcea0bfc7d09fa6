"""Shared fixtures for matrix multiplier tests."""

import os
import sys
import pytest

# Ensure python_matmul_app is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


SAMPLE_INPUT = """2 3
1 2 9
4 5 6
3 2
7 8
9 10
11 12
"""


@pytest.fixture
def sample_input_path(tmp_path):
    """Input file holding the 2x3 and 3x2 example matrices."""
    path = tmp_path / 'input_mat.txt'
    path.write_text(SAMPLE_INPUT, encoding='utf-8')
    return str(path)


@pytest.fixture
def write_input(tmp_path):
    """Factory writing arbitrary text to an input file and returning its path."""
    def _write(text, name='input_mat.txt'):
        path = tmp_path / name
        path.write_text(text, encoding='utf-8')
        return str(path)
    return _write


@pytest.fixture
def sample_multiplication_result():
    """A MultiplicationResult for the example input, for export and plot tests."""
    from results import MultiplicationResult

    return MultiplicationResult(
        input_path='/test/input_mat.txt',
        a=[[1, 2, 9], [4, 5, 6]],
        b=[[7, 8], [9, 10], [11, 12]],
        product=[[124, 136], [139, 154]],
        overflow_mode='wrap',
        threads=1,
        wall_clock_seconds=0.01,
        timestamp='2026-01-01T00:00:00',
        verified=True,
    )
