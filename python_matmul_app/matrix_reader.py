"""Reading matrices from whitespace-delimited integer text."""

import re

from enums import FormatStage
from errors import FormatError, MatrixIOError
from matrix import Matrix

_INTEGER_RE = re.compile(r'[+-]?[0-9]+\Z')
_WHITESPACE = ' \t\n\r\v\f'

# More significant digits than this cannot fit in 32 bits
_MAX_SIGNIFICANT_DIGITS = 10


def read_token(stream):
    """Read the next whitespace-delimited token from a text stream.

    Reads one character at a time and stops right after the whitespace that
    ends the token, so the stream cursor sits at the start of whatever follows.
    Returns None when the stream is exhausted before any token character.
    """
    chars = []
    while True:
        ch = stream.read(1)
        if not ch:
            break
        if ch in _WHITESPACE:
            if chars:
                break
            continue
        chars.append(ch)

    return ''.join(chars) if chars else None


def _parse_int(token):
    """Convert an ASCII decimal token to int, or None if it is not one."""
    if token is None or not _INTEGER_RE.match(token):
        return None
    sign = -1 if token[0] == '-' else 1
    digits = token.lstrip('+-').lstrip('0') or '0'
    if len(digits) > _MAX_SIGNIFICANT_DIGITS:
        # int() refuses very long strings; any value just past the range will do
        return sign * (Matrix.ELEMENT_MAX + 2)
    return sign * int(digits)


def parse_matrix(stream):
    """Read `rows cols` followed by rows*cols values (row-major) into a Matrix."""
    dims = []
    for name in ('rows', 'cols'):
        token = read_token(stream)
        if token is None:
            raise FormatError(FormatStage.DIMENSIONS, f"missing {name} count")
        value = _parse_int(token)
        if value is None:
            raise FormatError(FormatStage.DIMENSIONS, f"invalid {name} count {token!r}")
        dims.append(value)

    rows, cols = dims
    if rows <= 0 or cols <= 0:
        raise FormatError(FormatStage.DIMENSIONS, f"dimensions must be positive, got {rows}x{cols}")
    if rows > Matrix.ELEMENT_MAX or cols > Matrix.ELEMENT_MAX:
        raise FormatError(FormatStage.DIMENSIONS, "dimensions do not fit in a 32-bit signed integer")

    matrix = Matrix.allocate(rows, cols)

    for i_row in range(rows):
        for i_col in range(cols):
            token = read_token(stream)
            if token is None:
                raise FormatError(
                    FormatStage.VALUES,
                    f"unexpected end of input at ({i_row}, {i_col}) of a {rows}x{cols} matrix"
                )
            value = _parse_int(token)
            if value is None:
                raise FormatError(FormatStage.VALUES, f"invalid value {token!r} at ({i_row}, {i_col})")
            if value < Matrix.ELEMENT_MIN or value > Matrix.ELEMENT_MAX:
                raise FormatError(
                    FormatStage.VALUES,
                    f"value {token} at ({i_row}, {i_col}) does not fit in a 32-bit signed integer"
                )
            matrix.set_element(i_row, i_col, value)

    return matrix


def read_matrices(file_name):
    """Read matrix A and then matrix B from one input file."""
    try:
        with open(file_name, 'r', encoding='utf-8') as file:
            matrix_a = parse_matrix(file)
            matrix_b = parse_matrix(file)
    except UnicodeDecodeError as e:
        raise MatrixIOError(file_name, f"not a UTF-8 text file ({e.reason})") from e
    except OSError as e:
        raise MatrixIOError(file_name, e.strerror or str(e)) from e

    return matrix_a, matrix_b
