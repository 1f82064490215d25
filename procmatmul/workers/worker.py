import asyncio
from dataclasses import dataclass
from abc import ABC, abstractmethod

from procmatmul.matrix import codec
from procmatmul.matrix.matrix import Matrix
from procmatmul.matrix.matrix_errors import FailedWorkerError
from procmatmul.matrix.partitioner import split_rows
from procmatmul.matrix.validation import validate_dimensions
from procmatmul.utils.logger import create_logger
from procmatmul.utils.timer import Timer

logger = create_logger(__name__)

@dataclass
class ChunkMetrics:
    chunk_index: int
    rows: int
    payload_size_bytes: int
    time_ms: float

class Worker(ABC):
    """
    Driver side of the parallel multiply.
    Splits A by rows, hands each (chunk, B) payload to an isolated worker and glues the partial results back together in chunk order.
    A single chunk failure aborts the whole multiply: no retries, no partial matrix.
    """

    @dataclass
    class Config(ABC):
        # 1 = one worker at a time (launched, fed, drained and awaited before the next one)
        max_concurrent_workers: int = 1

        @abstractmethod
        def create_instance(self) -> "Worker": pass

    config: Config

    def __init__(self, config: Config):
        if config.max_concurrent_workers < 1:
            raise ValueError(f"max_concurrent_workers must be at least 1 (got {config.max_concurrent_workers})")
        self.config = config
        self.chunk_metrics: list[ChunkMetrics] = []

    @abstractmethod
    async def run_chunk(self, chunk_index: int, payload: str) -> str:
        """
        Hands {payload} to one isolated worker and returns everything it wrote back (an encoded partial result).
        Must raise ProcessLaunchError/FailedWorkerError instead of returning a partial output
        """
        pass

    async def multiply(self, a: Matrix, b: Matrix, num_workers: int) -> Matrix:
        validate_dimensions(a, b)
        chunks = split_rows(a, num_workers)
        b_encoded = codec.encode(b)
        self.chunk_metrics = []

        timer = Timer()
        if self.config.max_concurrent_workers == 1:
            partial_results = []
            for chunk_index, chunk in enumerate(chunks):
                partial_results.append(await self._handle_chunk(chunk_index, chunk, b_encoded))
        else:
            partial_results = await self._handle_chunks_concurrently(chunks, b_encoded)
            self.chunk_metrics.sort(key=lambda m: m.chunk_index)

        result: Matrix = []
        for partial_result in partial_results:
            result.extend(partial_result)

        logger.info(f"{type(self).__name__} multiplied {len(a)}x{len(a[0])} by {len(b)}x{len(b[0])} using {len(chunks)} chunks in {timer.stop():.3f} ms")
        return result

    async def _handle_chunks_concurrently(self, chunks: list[Matrix], b_encoded: str) -> list[Matrix]:
        """ all chunks launched up front, results collected by chunk index (not arrival order) """
        semaphore = asyncio.Semaphore(self.config.max_concurrent_workers)

        async def _bounded(chunk_index: int, chunk: Matrix) -> Matrix:
            async with semaphore:
                return await self._handle_chunk(chunk_index, chunk, b_encoded)

        tasks = [asyncio.create_task(_bounded(i, chunk), name=f"chunk(index={i})") for i, chunk in enumerate(chunks)]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _handle_chunk(self, chunk_index: int, chunk: Matrix, b_encoded: str) -> Matrix:
        payload = codec.join_encoded(codec.encode(chunk), b_encoded)
        timer = Timer()
        output = await self.run_chunk(chunk_index, payload)
        partial_result = codec.decode(output)
        time_ms = timer.stop()

        if len(partial_result) != len(chunk):
            raise FailedWorkerError(chunk_index, f"expected a partial result with {len(chunk)} rows, got {len(partial_result)}")

        self.chunk_metrics.append(ChunkMetrics(chunk_index=chunk_index, rows=len(chunk), payload_size_bytes=len(payload.encode("utf-8")), time_ms=time_ms))
        logger.debug(f"Chunk {chunk_index} ({len(chunk)} rows) done in {time_ms:.3f} ms")
        return partial_result
