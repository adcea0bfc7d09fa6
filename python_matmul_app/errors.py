"""Error types raised by the matrix reader, container and multiplier."""


class MatrixError(Exception):
    """Base class for every failure that aborts a multiplication run."""


class MatrixIOError(MatrixError):
    """Input file is missing or cannot be read."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to open file {path}: {reason}")


class FormatError(MatrixError):
    """Dimension or value tokens are missing or not integers."""

    def __init__(self, stage, detail=""):
        self.stage = stage
        self.detail = detail
        message = f"Failed to read matrix {stage.value}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class AllocationError(MatrixError):
    """Storage for a matrix could not be obtained."""

    def __init__(self, rows, cols):
        self.shape = (rows, cols)
        super().__init__(f"Failed to allocate memory for a {rows}x{cols} matrix")


class DimensionMismatchError(MatrixError):
    """Left operand's column count differs from right operand's row count."""

    def __init__(self, a_shape, b_shape):
        self.a_shape = tuple(a_shape)
        self.b_shape = tuple(b_shape)
        super().__init__(
            "Matrix multiplication not possible: incompatible dimensions "
            f"{self.a_shape[0]}x{self.a_shape[1]} and {self.b_shape[0]}x{self.b_shape[1]}"
        )


class IntegerOverflowError(MatrixError):
    """Product cell does not fit in a signed 32-bit integer (checked mode)."""

    def __init__(self, row, col, value):
        self.cell = (row, col)
        self.value = value
        super().__init__(f"Integer overflow in result cell ({row}, {col}): {value}")

    def __reduce__(self):
        # Raised inside worker processes, so it must survive pickling
        return (self.__class__, (self.cell[0], self.cell[1], self.value))


class VerificationError(MatrixError):
    """Product disagrees with the numpy cross-check."""


class WorkerError(MatrixError):
    """Worker process pool broke down during a parallel multiplication."""


class ReleasedMatrixError(MatrixError):
    """Matrix storage was accessed or released after release()."""
