"""
Test fixtures for the polaris_ddl logging system.

Provides a capturing handler and fixtures that attach it to the root
``polaris_ddl`` logger, so records emitted by any module logger can be
asserted on.
"""

import pytest
from typing import List, Dict, Any, Optional

from polaris_ddl.infrastructure.observability import (
    PolarisLogger, LogLevel, LogHandler, LogFormatter, JSONLogFormatter, get_logger
)
from polaris_ddl.infrastructure.observability.logging import ROOT_LOGGER_NAME


class CapturingLogHandler(LogHandler):
    """Log handler that keeps records in memory for assertions."""

    def __init__(self, formatter: Optional[LogFormatter] = None):
        super().__init__(formatter or JSONLogFormatter())
        self.records: List[Dict[str, Any]] = []

    def emit(self, record: Dict[str, Any]) -> None:
        """Capture log record for testing."""
        self.records.append(record.copy())

    def clear(self) -> None:
        self.records.clear()

    def get_records(self, level: Optional[LogLevel] = None) -> List[Dict[str, Any]]:
        """Get captured records, optionally filtered by level."""
        if level is None:
            return self.records.copy()
        return [r for r in self.records if r.get('level') == level.value]

    def has_record_with_message(self, message: str) -> bool:
        return any(message in r.get('message', '') for r in self.records)

    def has_record_with_code(self, code: str, level: Optional[LogLevel] = None) -> bool:
        """Check if any record carries the given error/log code."""
        return any(r.get('extra', {}).get('code') == code for r in self.get_records(level))


class LogCapture:
    """Context manager for capturing logs during tests."""

    def __init__(self, logger: PolarisLogger, level: LogLevel = LogLevel.DEBUG):
        self.logger = logger
        self.level = level
        self.handler = CapturingLogHandler()
        self.original_level = None
        self.original_handlers = []

    def __enter__(self):
        # Store original state
        self.original_level = self.logger.level
        self.original_handlers = self.logger.handlers.copy()

        self.logger.set_level(self.level)
        self.logger.handlers.clear()
        self.logger.add_handler(self.handler)

        return self.handler

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore original state
        self.logger.handlers.clear()
        for handler in self.original_handlers:
            self.logger.add_handler(handler)
        self.logger.set_level(self.original_level)


@pytest.fixture
def log_capture():
    """Capture every record reaching the root polaris_ddl logger at DEBUG."""
    with LogCapture(get_logger(ROOT_LOGGER_NAME)) as handler:
        yield handler


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo any handler or level changes a test makes to the root logger."""
    root = get_logger(ROOT_LOGGER_NAME)
    handlers = root.handlers.copy()
    level = root.level
    yield root
    root.handlers.clear()
    root.handlers.extend(handlers)
    root.set_level(level)
