"""
Unit tests for logging setup.

Run with:
    pytest tests/test_logging_config.py -v
"""

import logging
import sys

import pytest

from gcs_filesystem.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if isinstance(handler, logging.StreamHandler) and handler.stream in (sys.stdout, sys.stderr):
            root.removeHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_splits_stdout_and_stderr(self, restore_root_logger):
        root = setup_logging(logging.DEBUG)

        assert root is restore_root_logger
        assert root.level == logging.DEBUG
        streams = {handler.stream: handler.level for handler in root.handlers}
        assert streams == {sys.stdout: logging.DEBUG, sys.stderr: logging.ERROR}

    def test_replaces_existing_handlers(self, restore_root_logger):
        setup_logging()
        setup_logging()

        assert len(restore_root_logger.handlers) == 2
