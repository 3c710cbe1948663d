"""
Optional logging setup for applications embedding the drivers.

The package itself only creates module loggers; call setup_logging() from an
entry point to get stdout/stderr output.
"""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup logging (stdout for INFO+, stderr for ERROR+)."""

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(level)

    # stderr for errors
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.ERROR)

    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(level)

    return root_logger
