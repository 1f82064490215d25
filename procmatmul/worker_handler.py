import sys
import os
from typing import TextIO

# Be at the same level as the ./procmatmul directory
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from procmatmul.matrix import codec
from procmatmul.matrix.kernel import multiply_sequential
from procmatmul.matrix.matrix_errors import MatrixError
from procmatmul.utils.logger import create_logger
from procmatmul.utils.timer import Timer

logger = create_logger(__name__, prefix=f"worker pid={os.getpid()}")


def handle_payload(payload: str) -> str:
    """
    Worker-side contract: `encode(chunk) + "---\\n" + encode(B)` in, `encode(chunk x B)` out.
    Raises FormatError when the separator is missing
    """
    chunk, b = codec.decode_pair(payload)
    return codec.encode(multiply_sequential(chunk, b))


def main(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """
    Runs in worker mode: read the whole input channel, compute, write the result and exit.
    returns the process exit code
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    timer = Timer()
    payload = stdin.read()
    try:
        result = handle_payload(payload)
    except MatrixError as e:
        # never emit an empty result, the driver must see the failure
        logger.error(f"Could not process payload: {e}")
        return 1

    stdout.write(result)
    stdout.flush()
    logger.debug(f"Processed payload of {len(payload)} chars in {timer.stop():.3f} ms")
    return 0


if __name__ == '__main__':
    sys.exit(main())
