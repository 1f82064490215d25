import asyncio
import os
import sys
from dataclasses import dataclass, field

from procmatmul.matrix.matrix_errors import FailedWorkerError, ProcessLaunchError
from procmatmul.utils.logger import create_logger
from procmatmul.workers.worker import Worker

logger = create_logger(__name__)

# root of the checkout, so that workers can import procmatmul even when it's not installed
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

class SubprocessWorker(Worker):
    @dataclass
    class Config(Worker.Config):
        python_executable: str = field(default_factory=lambda: sys.executable)
        worker_module: str = "procmatmul.cli"
        worker_flag: str = "--worker"
        # LOGS value for the workers (0 = warnings only)
        worker_logs: str = "0"

        def create_instance(self) -> "SubprocessWorker": return SubprocessWorker(self)

    subprocess_config: Config

    """
    One short-lived OS process per chunk: the same program started in worker mode.
    The only interface to a worker are its stdin (payload) and stdout (partial result). stderr is drained for diagnostics.
    """
    def __init__(self, config: Config):
        super().__init__(config)
        self.subprocess_config = config

    def _worker_command(self) -> list[str]:
        return [self.subprocess_config.python_executable, "-m", self.subprocess_config.worker_module, self.subprocess_config.worker_flag]

    def _worker_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["LOGS"] = self.subprocess_config.worker_logs
        env.pop("LOGS_FILE", None)
        python_path = env.get("PYTHONPATH")
        env["PYTHONPATH"] = _PROJECT_ROOT if not python_path else _PROJECT_ROOT + os.pathsep + python_path
        return env

    async def run_chunk(self, chunk_index: int, payload: str) -> str:
        try:
            # all pipes are created before anything is written
            process = await asyncio.create_subprocess_exec(
                *self._worker_command(),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._worker_env(),
            )
        except OSError as e:
            raise ProcessLaunchError(chunk_index, f"could not start worker process: {e}") from e

        assert process.stdin is not None and process.stdout is not None and process.stderr is not None
        logger.debug(f"Started worker pid={process.pid} for chunk {chunk_index}")

        write_errors: list[BaseException] = []

        async def _feed_stdin():
            try:
                process.stdin.write(payload.encode("utf-8"))
                await process.stdin.drain()
            except (BrokenPipeError, ConnectionResetError) as e:
                # worker went away before reading everything, exit status tells why
                write_errors.append(e)
            finally:
                process.stdin.close()

        # writer runs on its own task so a worker filling its stdout buffer can't deadlock us
        writer_task = asyncio.create_task(_feed_stdin(), name=f"feed_stdin(chunk={chunk_index})")
        try:
            stdout, stderr = await asyncio.gather(process.stdout.read(), process.stderr.read())
            await writer_task
            exit_code = await process.wait()
        except asyncio.CancelledError:
            writer_task.cancel()
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise
        except OSError as e:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise ProcessLaunchError(chunk_index, f"could not read worker output: {e}") from e

        stderr_text = stderr.decode("utf-8", errors="replace")
        if exit_code != 0:
            raise FailedWorkerError(chunk_index, f"worker pid={process.pid} exited abnormally", exit_code=exit_code, stderr=stderr_text)
        if write_errors:
            raise ProcessLaunchError(chunk_index, f"could not write payload to worker pid={process.pid}: {write_errors[0]}")

        logger.debug(f"Worker pid={process.pid} for chunk {chunk_index} exited with code {exit_code} ({len(stdout)} bytes of output)")
        return stdout.decode("utf-8")
