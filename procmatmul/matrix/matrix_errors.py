class MatrixError(Exception):
    """Base class for all matrix multiplication errors"""
    pass

class DimensionError(MatrixError):
    """Raised when two matrices can't be multiplied (A columns != B rows, empty or ragged input)"""
    def __init__(self, reason: str):
        super().__init__(f"[DimensionError] {reason}")
        self.reason = reason

class FormatError(MatrixError):
    """Raised when a worker payload doesn't contain the separator line"""
    def __init__(self, reason: str):
        super().__init__(f"[FormatError] {reason}")
        self.reason = reason

class ProcessLaunchError(MatrixError):
    """Raised when a worker can't be started or its pipes can't be written/read. Fatal to the whole multiply"""
    def __init__(self, chunk_index: int, reason: str):
        super().__init__(f"[ProcessLaunchError] chunk={chunk_index}: {reason}")
        self.chunk_index = chunk_index
        self.reason = reason

class FailedWorkerError(ProcessLaunchError):
    """Raised when a worker exits abnormally or returns a partial result that doesn't match its chunk"""
    def __init__(self, chunk_index: int, reason: str, exit_code: int | None = None, stderr: str = ""):
        details = reason if not stderr else f"{reason} | worker stderr: {stderr.strip()}"
        super().__init__(chunk_index, details)
        self.exit_code = exit_code
        self.stderr = stderr
