"""
Dense integer matrix backed by a single contiguous numpy buffer.
Elements are signed 32-bit integers, as produced by the reader and the multiplier.
"""
import sys

try:
    import numpy as np
except ImportError as e:
    raise ImportError(
        "numpy is required but not installed. Please install it using: pip install numpy"
    ) from e

from errors import AllocationError, ReleasedMatrixError


class Matrix:
    """Fixed-shape rows x cols grid of int32 values."""

    ELEMENT_MIN = -2 ** 31
    ELEMENT_MAX = 2 ** 31 - 1
    DTYPE = np.int32

    def __init__(self, rows=0, cols=0, default_value=0, values=None):
        """
        Initialize matrix.

        Args:
            rows: Number of rows (ignored when values is given)
            cols: Number of columns (ignored when values is given)
            default_value: Fill value for every element, or None to leave
                the storage uninitialized
            values: List of lists (row-major) to copy into the matrix
        """
        self._released = False
        if values is not None:
            if not values or not values[0]:
                raise ValueError("Matrix must have at least one row and one column")
            cols = len(values[0])
            for row in values:
                if len(row) != cols:
                    raise ValueError("All rows must have the same number of columns")
            rows = len(values)

        self._check_shape(rows, cols)
        self._rows = rows
        self._cols = cols
        self._data = self._allocate_storage(rows, cols, None if values is not None else default_value)

        if values is not None:
            for i_row, row in enumerate(values):
                for i_col, value in enumerate(row):
                    self.set_element(i_row, i_col, value)

    @classmethod
    def allocate(cls, rows, cols, zero=False):
        """Allocate a rows x cols matrix; contents are undefined unless zero=True."""
        return cls(rows, cols, default_value=0 if zero else None)

    @staticmethod
    def _check_shape(rows, cols):
        for name, value in (("rows", rows), ("cols", cols)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"Matrix {name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"Matrix {name} must be positive, got {value}")

    @classmethod
    def _allocate_storage(cls, rows, cols, default_value):
        try:
            if default_value is None:
                return np.empty((rows, cols), dtype=cls.DTYPE)
            return np.full((rows, cols), default_value, dtype=cls.DTYPE)
        except MemoryError as e:
            raise AllocationError(rows, cols) from e
        except ValueError as e:
            # numpy refuses shapes whose byte size exceeds the address space
            raise AllocationError(rows, cols) from e

    def _storage(self):
        if self._released:
            raise ReleasedMatrixError("Matrix storage has already been released")
        return self._data

    def _check_index(self, i_row, i_col):
        if i_row >= self._rows or i_col >= self._cols or i_row < 0 or i_col < 0:
            raise IndexError("Index out of bounds")

    def get_rows(self):
        """Get the number of rows."""
        return self._rows

    def get_cols(self):
        """Get the number of columns."""
        return self._cols

    @property
    def shape(self):
        return (self._rows, self._cols)

    def set_element(self, i_row, i_col, i_value):
        """Set an element at a specific position (iRow, iCol)."""
        data = self._storage()
        self._check_index(i_row, i_col)
        if not isinstance(i_value, (int, np.integer)) or isinstance(i_value, bool):
            raise ValueError(f"Matrix elements must be integers, got {i_value!r}")
        if i_value < self.ELEMENT_MIN or i_value > self.ELEMENT_MAX:
            raise ValueError(f"Value {i_value} does not fit in a 32-bit signed integer")

        data[i_row, i_col] = i_value

    def get_element(self, i_row, i_col):
        """Get an element at a specific position (iRow, iCol)."""
        data = self._storage()
        self._check_index(i_row, i_col)

        return int(data[i_row, i_col])

    def get_data(self):
        """Get matrix data as a list of lists of Python ints."""
        return self._storage().tolist()

    def to_array(self):
        """Get a read-only numpy copy of the matrix."""
        array = self._storage().copy()
        array.flags.writeable = False
        return array

    @staticmethod
    def create_identity_matrix(size):
        """Create an identity matrix."""
        identity = Matrix.allocate(size, size, zero=True)

        for i_index in range(size):
            identity.set_element(i_index, i_index, 1)

        return identity

    def format_rows(self):
        """Render each row as space-separated values with a trailing space."""
        return ["".join(f"{value} " for value in row) for row in self.get_data()]

    def print(self, file=None):
        """Print the matrix."""
        out = file if file is not None else sys.stdout
        for line in self.format_rows():
            print(line, file=out)

    def release(self):
        """Free the storage. The matrix cannot be used afterwards."""
        if self._released:
            raise ReleasedMatrixError("Matrix storage has already been released")
        self._data = None
        self._released = True

    def is_released(self):
        return self._released

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if not self._released:
            self.release()
        return False

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._storage(), other._storage()))

    __hash__ = None

    def __repr__(self):
        state = " released" if self._released else ""
        return f"Matrix({self._rows}x{self._cols}{state})"
