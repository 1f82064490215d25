from procmatmul.matrix.matrix import Matrix, is_rectangular, shape
from procmatmul.matrix.matrix_errors import DimensionError


def validate_dimensions(a: Matrix, b: Matrix) -> tuple[int, int]:
    """
    Checked once, before any work is dispatched.
    returns the shape of the product (rows of A, columns of B)
    """
    if not a or not a[0]:
        raise DimensionError("matrix A is empty")
    if not b or not b[0]:
        raise DimensionError("matrix B is empty")
    if not is_rectangular(a):
        raise DimensionError("matrix A has rows of different lengths")
    if not is_rectangular(b):
        raise DimensionError("matrix B has rows of different lengths")

    a_rows, a_columns = shape(a)
    b_rows, b_columns = shape(b)
    if a_columns != b_rows:
        raise DimensionError(f"matrices must comply with A columns number equals to B rows number (A is {a_rows}x{a_columns}, B is {b_rows}x{b_columns})")
    return a_rows, b_columns
