import logging
import sys
import os

logs_env = os.getenv("LOGS")
logs_env = logs_env.strip() if logs_env else None
logs_file_env = os.getenv("LOGS_FILE")

def _level_from_env() -> int:
    if logs_env == "0":
        return logging.WARNING
    if logs_env == "2":
        return logging.DEBUG
    return logging.INFO

# stdout carries the worker wire protocol, so everything goes to stderr
def create_logger(name: str, prefix: str = "") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.hasHandlers():
        level = _level_from_env()
        logger.setLevel(level)
        logger.propagate = False

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        # Custom formatter that includes the prefix (if provided)
        class PrefixFormatter(logging.Formatter):
            def __init__(self, prefix: str = "", *args, **kwargs):
                super().__init__(*args, **kwargs)
                self.prefix = prefix

            def format(self, record: logging.LogRecord) -> str:
                if not self.prefix:
                    return super().format(record)
                # format a copy, the same record goes through every handler
                prefixed = logging.makeLogRecord(record.__dict__)
                prefixed.msg = f"[{self.prefix}] {record.getMessage()}"
                prefixed.args = None
                return super().format(prefixed)

        formatter = PrefixFormatter(
            prefix=prefix,
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if logs_file_env:
            file_handler = logging.FileHandler(logs_file_env)
            # Log everything to file
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
