from dataclasses import dataclass
import numpy as np

from procmatmul.matrix.matrix import Matrix

RESULTS_TOLERANCE = 1e-9

@dataclass
class BenchmarkReport:
    workers: int
    sequential_ms: float
    parallel_ms: float
    results_match: bool | None = None

    @property
    def speedup(self) -> float:
        if self.parallel_ms == 0:
            return float("inf")
        return self.sequential_ms / self.parallel_ms

    def format(self) -> str:
        lines = [
            f"Sequential time: {self.sequential_ms / 1000:f} seconds",
            f"Parallel time ({self.workers}): {self.parallel_ms / 1000:f} seconds",
            f"Speedup: {self.speedup:f}X",
        ]
        if self.results_match is False:
            lines.append("WARNING: sequential and parallel results differ!")
        return "\n".join(lines)


def results_match(sequential: Matrix, parallel: Matrix, tolerance: float = RESULTS_TOLERANCE) -> bool:
    if len(sequential) != len(parallel):
        return False
    if not sequential:
        return True
    if any(len(expected_row) != len(actual_row) for expected_row, actual_row in zip(sequential, parallel)):
        return False
    expected, actual = np.array(sequential, dtype=np.float64), np.array(parallel, dtype=np.float64)
    if expected.shape != actual.shape:
        return False
    return bool(np.allclose(actual, expected, rtol=0, atol=tolerance))
