import argparse
import os
import sys

# Be at the same level as the ./procmatmul directory
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from procmatmul import worker_handler
from procmatmul.matrix import kernel
from procmatmul.matrix.matrix_errors import DimensionError, MatrixError
from procmatmul.matrix.matrix_io import clamp_worker_count, load_matrix, prompt_worker_count, write_matrix
from procmatmul.matrix.validation import validate_dimensions
from procmatmul.multiply import multiply_parallel
from procmatmul.report import BenchmarkReport, results_match
from procmatmul.utils.logger import create_logger
from procmatmul.utils.timer import Timer
from procmatmul.workers.local_worker import LocalWorker
from procmatmul.workers.subprocess_worker import SubprocessWorker
from procmatmul.workers.worker import Worker

logger = create_logger(__name__)

WORKER_FLAG = "--worker"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Multiply two matrices sequentially and with one worker process per chunk of rows, and compare the timings")
    parser.add_argument(WORKER_FLAG, action="store_true", help="Run as a worker: read a payload from stdin, write the partial product to stdout")
    parser.add_argument("--a", default="./matrices/A.txt", help="Path to matrix A")
    parser.add_argument("--b", default="./matrices/B.txt", help="Path to matrix B")
    parser.add_argument("--out", default="./matrices/C.txt", help="Where to write the parallel result")
    parser.add_argument("--workers", type=int, default=None, help="Number of workers (prompted for when missing)")
    parser.add_argument("--backend", choices=["subprocess", "local"], default="subprocess", help="subprocess: one OS process per chunk. local: in-process threads")
    parser.add_argument("--max-concurrent", type=int, default=1, help="How many workers may run at the same time (1 = strictly one after the other)")
    return parser


def worker_config_from_args(args: argparse.Namespace) -> Worker.Config:
    if args.backend == "local":
        return LocalWorker.Config(max_concurrent_workers=args.max_concurrent)
    return SubprocessWorker.Config(max_concurrent_workers=args.max_concurrent, worker_flag=WORKER_FLAG)


def run_driver(args: argparse.Namespace) -> int:
    a = load_matrix(args.a)
    b = load_matrix(args.b)
    try:
        validate_dimensions(a, b)
    except DimensionError as e:
        print(f"Error: {e}")
        return 1

    num_workers = prompt_worker_count(a) if args.workers is None else clamp_worker_count(args.workers, len(a))

    sequential_timer = Timer()
    sequential_result = kernel.multiply_sequential(a, b)
    sequential_ms = sequential_timer.stop()

    parallel_timer = Timer()
    parallel_result = multiply_parallel(a, b, num_workers, config=worker_config_from_args(args))
    parallel_ms = parallel_timer.stop()

    write_matrix(parallel_result, args.out)

    report = BenchmarkReport(
        workers=num_workers,
        sequential_ms=sequential_ms,
        parallel_ms=parallel_ms,
        results_match=results_match(sequential_result, parallel_result),
    )
    print(report.format())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.worker:
        return worker_handler.main()

    try:
        return run_driver(args)
    except (MatrixError, OSError) as e:
        logger.error(f"Matrix multiplication failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
