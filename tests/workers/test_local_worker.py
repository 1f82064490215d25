import asyncio
import os
import sys
import pytest
import numpy as np

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from procmatmul.matrix.kernel import multiply_sequential
from procmatmul.matrix.matrix import as_matrix
from procmatmul.matrix.matrix_errors import DimensionError, FailedWorkerError
from procmatmul.multiply import multiply_parallel
from procmatmul.utils.logger import create_logger
from procmatmul.workers.local_worker import LocalWorker
from tests.utils.test_utils import get_worker_config

logger = create_logger(__name__)

A = [[1.0, 2.0], [3.0, 4.0]]
B = [[5.0, 6.0], [7.0, 8.0]]

def test_two_by_two_with_two_workers():
    assert multiply_parallel(A, B, 2, config=get_worker_config("local")) == [[19.0, 22.0], [43.0, 50.0]]

def test_two_by_two_with_one_worker():
    assert multiply_parallel(A, B, 1, config=get_worker_config("local")) == multiply_sequential(A, B)

@pytest.mark.parametrize("max_concurrent_workers", [1, 3])
def test_matches_sequential_for_every_worker_count(max_concurrent_workers):
    rng = np.random.default_rng(42)
    a = as_matrix(rng.uniform(-100, 100, (9, 6)))
    b = as_matrix(rng.uniform(-100, 100, (6, 5)))
    expected = np.array(multiply_sequential(a, b))

    for n in range(1, len(a) + 1):
        result = multiply_parallel(a, b, n, config=get_worker_config("local", max_concurrent_workers))
        assert np.allclose(np.array(result), expected, rtol=0, atol=1e-9)

def test_accepts_numpy_arrays():
    result = multiply_parallel(np.array(A), np.array(B), 2, config=get_worker_config("local"))
    assert result == [[19.0, 22.0], [43.0, 50.0]]

def test_incompatible_shapes_are_rejected():
    with pytest.raises(DimensionError):
        multiply_parallel([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], B, 2, config=get_worker_config("local"))

def test_chunk_metrics_are_recorded_in_chunk_order():
    worker = LocalWorker(LocalWorker.Config(max_concurrent_workers=2))
    a = [[float(i)] for i in range(5)]
    asyncio.run(worker.multiply(a, [[1.0, 2.0]], 3))
    assert [m.chunk_index for m in worker.chunk_metrics] == [0, 1, 2]
    assert [m.rows for m in worker.chunk_metrics] == [2, 2, 1]
    assert all(m.payload_size_bytes > 0 for m in worker.chunk_metrics)

def test_malformed_payload_fails_the_chunk():
    worker = LocalWorker(LocalWorker.Config())
    with pytest.raises(FailedWorkerError) as e:
        asyncio.run(worker.run_chunk(4, "1 2\n3 4\n"))
    assert e.value.chunk_index == 4

def test_invalid_concurrency_config():
    with pytest.raises(ValueError):
        LocalWorker.Config(max_concurrent_workers=0).create_instance()
