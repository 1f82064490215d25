"""
Plain-text wire format used between the driver and its workers.

A matrix is written row-major, one line per row, values separated by a single
space. No dimensions are transmitted: they are inferred from the number of
lines and tokens on decode. Two matrices travel in one payload separated by
the line `---`.

Token parsing is lenient on purpose: a token that isn't a float is dropped
(not replaced by zero and not an error), which can shrink a row.
"""
import re

from procmatmul.matrix.matrix import Matrix
from procmatmul.matrix.matrix_errors import FormatError

SEPARATOR = "---\n"
_SEPARATOR_LINE = re.compile(r"^---\n", re.MULTILINE)


def encode(matrix: Matrix) -> str:
    # repr() is the shortest representation that round-trips a float
    return "".join(" ".join(repr(float(value)) for value in row) + "\n" for row in matrix)


def decode(text: str) -> Matrix:
    stripped = text.strip()
    if not stripped:
        return []

    matrix: Matrix = []
    for line in stripped.splitlines():
        row: list[float] = []
        for token in line.split():
            try:
                row.append(float(token))
            except ValueError:
                continue
        matrix.append(row)
    return matrix


def join_encoded(first: str, second: str) -> str:
    """ joins two matrices that were already encoded (lets the driver encode B only once) """
    return first + SEPARATOR + second


def encode_pair(m1: Matrix, m2: Matrix) -> str:
    return join_encoded(encode(m1), encode(m2))


def decode_pair(text: str) -> tuple[Matrix, Matrix]:
    parts = _SEPARATOR_LINE.split(text, maxsplit=1)
    if len(parts) != 2:
        raise FormatError(f"payload is missing the '---' separator line (payload size: {len(text)} chars)")
    return decode(parts[0]), decode(parts[1])
