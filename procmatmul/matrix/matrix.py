from typing import Any, Sequence
import numpy as np

from procmatmul.matrix.matrix_errors import DimensionError

Matrix = list[list[float]]


def as_matrix(data: Sequence[Sequence[Any]] | np.ndarray) -> Matrix:
    """
    Coerces nested sequences or a 2-D numpy array into a list of rows of floats.
    Rows are copied, so the caller's data is never shared with a worker.
    """
    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise DimensionError(f"expected a 2-D array, got {data.ndim} dimension(s)")
        return data.astype(np.float64).tolist()
    return [[float(value) for value in row] for row in data]


def shape(matrix: Matrix) -> tuple[int, int]:
    """ (rows, columns of the first row) """
    return len(matrix), len(matrix[0]) if matrix else 0


def is_rectangular(matrix: Matrix) -> bool:
    if not matrix:
        return True
    columns = len(matrix[0])
    return all(len(row) == columns for row in matrix)
