import asyncio
import os
import sys
import pytest
import numpy as np

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from procmatmul.matrix.kernel import multiply_sequential
from procmatmul.matrix.matrix import as_matrix
from procmatmul.matrix.matrix_errors import FailedWorkerError, ProcessLaunchError
from procmatmul.multiply import multiply_parallel
from procmatmul.utils.logger import create_logger
from procmatmul.workers.subprocess_worker import SubprocessWorker
from tests.utils.test_utils import get_worker_config

logger = create_logger(__name__)

def test_two_by_two_with_two_processes():
    result = multiply_parallel([[1, 2], [3, 4]], [[5, 6], [7, 8]], 2, config=get_worker_config("subprocess"))
    assert result == [[19.0, 22.0], [43.0, 50.0]]

def test_default_config_uses_processes():
    assert multiply_parallel([[1, 2], [3, 4]], [[5, 6], [7, 8]], 2) == [[19.0, 22.0], [43.0, 50.0]]

@pytest.mark.parametrize("num_workers", [1, 2, 5])
def test_matches_sequential(num_workers):
    rng = np.random.default_rng(num_workers)
    a = as_matrix(rng.uniform(-1, 1, (5, 4)))
    b = as_matrix(rng.uniform(-1, 1, (4, 3)))
    result = multiply_parallel(a, b, num_workers, config=get_worker_config("subprocess"))
    assert np.allclose(np.array(result), np.array(multiply_sequential(a, b)), rtol=0, atol=1e-9)

def test_concurrent_processes_keep_chunk_order():
    a = [[float(i), 1.0] for i in range(8)]
    b = [[2.0], [1.0]]
    result = multiply_parallel(a, b, 4, config=get_worker_config("subprocess", max_concurrent_workers=4))
    assert result == [[2.0 * i + 1.0] for i in range(8)]

def test_payloads_larger_than_pipe_buffers():
    # both the request and the response are well beyond a typical 64 KiB pipe buffer
    a = [[float(i), float(i) + 0.5] for i in range(3000)]
    b = [[0.25] * 50, [1.5] * 50]
    result = multiply_parallel(a, b, 2, config=get_worker_config("subprocess"))
    assert len(result) == 3000
    assert result == multiply_sequential(a, b)

def test_malformed_payload_makes_the_worker_exit_abnormally():
    worker = SubprocessWorker(SubprocessWorker.Config())
    with pytest.raises(FailedWorkerError) as e:
        asyncio.run(worker.run_chunk(3, "1 2\n3 4\n"))
    assert e.value.chunk_index == 3
    assert e.value.exit_code == 1
    assert "FormatError" in e.value.stderr

def test_worker_that_fails_to_start_its_entry_point():
    # argparse rejects the unknown flag with exit code 2
    worker = SubprocessWorker(SubprocessWorker.Config(worker_flag="--not-a-real-flag"))
    with pytest.raises(FailedWorkerError) as e:
        asyncio.run(worker.multiply([[1.0]], [[1.0]], 1))
    assert e.value.exit_code == 2

def test_missing_interpreter_is_a_launch_error():
    worker = SubprocessWorker(SubprocessWorker.Config(python_executable=os.path.join(os.sep, "nonexistent", "python")))
    with pytest.raises(ProcessLaunchError) as e:
        asyncio.run(worker.multiply([[1.0]], [[1.0]], 1))
    assert not isinstance(e.value, FailedWorkerError)
