from procmatmul.matrix.matrix import Matrix


def multiply_sequential(a: Matrix, b: Matrix) -> Matrix:
    """
    Naive triple loop (i, j, k) with plain float accumulation.
    Expects len(a[0]) == len(b); callers validate once with `validate_dimensions` before getting here.
    Also the per-chunk computation done by every worker.
    """
    if not a:
        return []
    a_columns = len(a[0])
    b_columns = len(b[0])

    result: Matrix = []
    for i in range(len(a)):
        a_row = a[i]
        result_row = [0.0] * b_columns
        for j in range(b_columns):
            total = 0.0
            for k in range(a_columns):
                total += a_row[k] * b[k][j]
            result_row[j] = total
        result.append(result_row)
    return result
