from typing import Callable

from procmatmul.matrix.matrix import Matrix
from procmatmul.utils.logger import create_logger

logger = create_logger(__name__)

DEFAULT_WORKER_COUNT = 2


def load_matrix(path: str) -> Matrix:
    """ Same lenient token policy as the wire codec: tokens that aren't floats are skipped. Blank lines are ignored """
    matrix: Matrix = []
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            row: list[float] = []
            for token in line.split():
                try:
                    row.append(float(token))
                except ValueError:
                    continue
            matrix.append(row)
    logger.info(f"Loaded {len(matrix)}x{len(matrix[0]) if matrix else 0} matrix from {path}")
    return matrix


def write_matrix(matrix: Matrix, path: str) -> None:
    with open(path, "w") as f:
        for row in matrix:
            f.write(" ".join(f"{value:.2f}" for value in row) + "\n")
    logger.info(f"Wrote {len(matrix)}x{len(matrix[0]) if matrix else 0} matrix to {path}")


def clamp_worker_count(requested: int | None, rows: int) -> int:
    """
    - invalid (None or <= 0) => DEFAULT_WORKER_COUNT
    - 1 => 2 (the parallel path is meant to use more than one process)
    - more workers than rows => rows
    The result is always within [1, rows]
    """
    if requested is None or requested <= 0:
        print(f"Invalid number, defaulting to {DEFAULT_WORKER_COUNT} processes.")
        requested = DEFAULT_WORKER_COUNT
    elif requested == 1:
        print("The number of processes has to be greater than 1. Adjusting to 2 processes.")
        requested = 2

    if requested > rows:
        print(f"You have more processes than rows in matrix A. Adjusting to {rows} processes.")
        return rows
    return requested


def prompt_worker_count(a: Matrix, input_fn: Callable[[str], str] = input) -> int:
    answer = input_fn("\nType in the number of processes you want to use for the application (greater than 1): ")
    try:
        requested = int(answer.strip())
    except ValueError:
        requested = None
    return clamp_worker_count(requested, len(a))
