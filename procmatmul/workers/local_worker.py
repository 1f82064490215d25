import asyncio
from dataclasses import dataclass

from procmatmul import worker_handler
from procmatmul.matrix.matrix_errors import FailedWorkerError, FormatError
from procmatmul.utils.logger import create_logger
from procmatmul.workers.worker import Worker

logger = create_logger(__name__)

class LocalWorker(Worker):
    @dataclass
    class Config(Worker.Config):
        def create_instance(self) -> "LocalWorker": return LocalWorker(self)

    local_config: Config

    """
    Runs the worker entry logic on a thread of this process instead of spawning one.
    Same payload, same codec, same ordering and failure contract as SubprocessWorker, without the process startup cost.
    """
    def __init__(self, config: Config):
        super().__init__(config)
        self.local_config = config

    async def run_chunk(self, chunk_index: int, payload: str) -> str:
        try:
            return await asyncio.to_thread(worker_handler.handle_payload, payload)
        except FormatError as e:
            raise FailedWorkerError(chunk_index, f"worker rejected its payload: {e}") from e
