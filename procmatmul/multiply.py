"""
Entry points measured by the timing harness: the reference sequential product and the
process-parallel product.
"""
import asyncio
from typing import Any, Sequence
import numpy as np

from procmatmul.matrix import kernel
from procmatmul.matrix.matrix import Matrix, as_matrix
from procmatmul.matrix.validation import validate_dimensions
from procmatmul.workers.worker import Worker

MatrixLike = Sequence[Sequence[Any]] | np.ndarray


def default_worker_config() -> Worker.Config:
    from procmatmul.workers.subprocess_worker import SubprocessWorker
    return SubprocessWorker.Config()


def multiply_sequential(a: MatrixLike, b: MatrixLike) -> Matrix:
    _a, _b = as_matrix(a), as_matrix(b)
    validate_dimensions(_a, _b)
    return kernel.multiply_sequential(_a, _b)


async def multiply_parallel_async(a: MatrixLike, b: MatrixLike, num_workers: int, config: Worker.Config | None = None) -> Matrix:
    _config = config if config is not None else default_worker_config()
    worker = _config.create_instance()
    return await worker.multiply(as_matrix(a), as_matrix(b), num_workers)


def multiply_parallel(a: MatrixLike, b: MatrixLike, num_workers: int, config: Worker.Config | None = None) -> Matrix:
    """
    {num_workers} must be within [1, rows of A] (see `clamp_worker_count`).
    Uses one worker process per chunk unless {config} says otherwise
    """
    return asyncio.run(multiply_parallel_async(a, b, num_workers, config))
