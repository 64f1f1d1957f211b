"""
Structured Logging System for POLARIS descriptors

Provides structured JSON logging with correlation IDs, descriptor context
management, and configurable formatters and handlers for different output
destinations. Loggers form a hierarchy by dotted name: a record emitted on
``polaris_ddl.framework.descriptors.loader`` reaches the handlers of
``polaris_ddl.framework.descriptors``, ``polaris_ddl.framework`` and
``polaris_ddl``.
"""

import json
import sys
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union
from contextvars import ContextVar

# Context variables for correlation tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
plugin_kind_var: ContextVar[Optional[str]] = ContextVar('plugin_kind', default=None)
plugin_name_var: ContextVar[Optional[str]] = ContextVar('plugin_name', default=None)

ROOT_LOGGER_NAME = "polaris_ddl"


class LogLevel(Enum):
    """Log levels for POLARIS logging system"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
    LogLevel.CRITICAL: 4
}


class LogFormatter(ABC):
    """Abstract base class for log formatters"""

    @abstractmethod
    def format(self, record: Dict[str, Any]) -> str:
        """Format a log record into a string"""
        pass


class JSONLogFormatter(LogFormatter):
    """JSON formatter for structured logging"""

    def format(self, record: Dict[str, Any]) -> str:
        """Format log record as JSON string"""
        return json.dumps(record, default=str, ensure_ascii=False)


class HumanReadableFormatter(LogFormatter):
    """Human-readable formatter for development/debugging"""

    def format(self, record: Dict[str, Any]) -> str:
        """Format log record as human-readable string"""
        timestamp = record.get('timestamp', '')
        level = record.get('level', '')
        message = record.get('message', '')
        correlation_id = record.get('correlation_id', '')

        base_msg = f"[{timestamp}] {level}: {message}"

        if record.get('plugin_kind') or record.get('plugin_name'):
            base_msg += f" [plugin={record.get('plugin_kind', '?')}/{record.get('plugin_name', '?')}]"

        if correlation_id:
            base_msg += f" [correlation_id={correlation_id}]"

        if record.get('extra'):
            extra_str = ', '.join(f"{k}={v}" for k, v in record['extra'].items())
            base_msg += f" [{extra_str}]"

        return base_msg


class LogHandler(ABC):
    """Abstract base class for log handlers"""

    def __init__(self, formatter: LogFormatter):
        self.formatter = formatter

    @abstractmethod
    def emit(self, record: Dict[str, Any]) -> None:
        """Emit a log record"""
        pass


class ConsoleLogHandler(LogHandler):
    """Console log handler that writes to stdout/stderr"""

    def __init__(self, formatter: LogFormatter, stream: TextIO = sys.stderr):
        super().__init__(formatter)
        self.stream = stream

    def emit(self, record: Dict[str, Any]) -> None:
        """Write log record to console"""
        formatted_message = self.formatter.format(record)
        self.stream.write(formatted_message + '\n')
        self.stream.flush()


class FileLogHandler(LogHandler):
    """File log handler that writes to a file"""

    def __init__(self, formatter: LogFormatter, file_path: Union[str, Path]):
        super().__init__(formatter)
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: Dict[str, Any]) -> None:
        """Write log record to file"""
        formatted_message = self.formatter.format(record)
        with open(self.file_path, 'a', encoding='utf-8') as f:
            f.write(formatted_message + '\n')


class PolarisLogger:
    """
    Structured logger with correlation ID support and descriptor context management.

    Features:
    - Structured JSON logging
    - Correlation ID tracking across components
    - Plugin kind/name context for descriptor loads
    - Dotted-name hierarchy: handlers of ancestors receive records, levels are inherited
    """

    def __init__(self, name: str, level: Optional[LogLevel] = None):
        self.name = name
        self.level = level
        self.handlers: List[LogHandler] = []
        self.parent: Optional["PolarisLogger"] = None

    def add_handler(self, handler: LogHandler) -> None:
        """Add a log handler"""
        self.handlers.append(handler)

    def remove_handler(self, handler: LogHandler) -> None:
        """Remove a log handler"""
        if handler in self.handlers:
            self.handlers.remove(handler)

    def set_level(self, level: Optional[LogLevel]) -> None:
        """Set the logging level; None inherits the parent's level"""
        self.level = level

    def effective_level(self) -> LogLevel:
        logger: Optional[PolarisLogger] = self
        while logger is not None:
            if logger.level is not None:
                return logger.level
            logger = logger.parent
        return LogLevel.INFO

    def _should_log(self, level: LogLevel) -> bool:
        """Check if message should be logged based on current level"""
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self.effective_level()]

    def _create_log_record(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Create a structured log record"""
        record = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level.value,
            'logger': self.name,
            'message': message,
            'correlation_id': correlation_id_var.get(),
            'plugin_kind': plugin_kind_var.get(),
            'plugin_name': plugin_name_var.get(),
        }

        if extra:
            record['extra'] = extra

        # Remove None values to keep logs clean
        return {k: v for k, v in record.items() if v is not None}

    def _log(self, level: LogLevel, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Internal logging method"""
        if not self._should_log(level):
            return

        record = self._create_log_record(level, message, extra)

        logger: Optional[PolarisLogger] = self
        while logger is not None:
            for handler in logger.handlers:
                try:
                    handler.emit(record)
                except Exception as e:
                    # Fallback to stderr if handler fails
                    sys.stderr.write(f"Logging handler failed: {e}\n")
            logger = logger.parent

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message"""
        self._log(LogLevel.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message"""
        self._log(LogLevel.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message"""
        self._log(LogLevel.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: Optional[Exception] = None) -> None:
        """Log error message with optional exception info"""
        if exc_info:
            if extra is None:
                extra = {}
            extra['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
                'module': type(exc_info).__module__
            }
        self._log(LogLevel.ERROR, message, extra)

    def critical(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: Optional[Exception] = None) -> None:
        """Log critical message with optional exception info"""
        if exc_info:
            if extra is None:
                extra = {}
            extra['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
                'module': type(exc_info).__module__
            }
        self._log(LogLevel.CRITICAL, message, extra)

    @contextmanager
    def correlation_context(self, correlation_id: Optional[str] = None):
        """Context manager for correlation ID tracking"""
        if correlation_id is None:
            correlation_id = str(uuid.uuid4())

        token = correlation_id_var.set(correlation_id)
        try:
            yield correlation_id
        finally:
            correlation_id_var.reset(token)

    @contextmanager
    def descriptor_context(self, plugin_kind: Optional[str], plugin_name: Optional[str]):
        """Context manager tagging records with the descriptor being loaded"""
        kind_token = plugin_kind_var.set(plugin_kind)
        name_token = plugin_name_var.set(plugin_name)
        try:
            yield
        finally:
            plugin_name_var.reset(name_token)
            plugin_kind_var.reset(kind_token)


# Global logger registry
_loggers: Dict[str, PolarisLogger] = {}


def _parent_name(name: str) -> Optional[str]:
    if name == ROOT_LOGGER_NAME or '.' not in name:
        return None
    return name.rsplit('.', 1)[0]


def get_logger(name: str = ROOT_LOGGER_NAME, level: Optional[LogLevel] = None) -> PolarisLogger:
    """Get or create a logger instance, linking it to its dotted-name parent"""
    if name not in _loggers:
        logger = PolarisLogger(name, level)
        if name == ROOT_LOGGER_NAME and level is None:
            logger.level = LogLevel.INFO
        _loggers[name] = logger
        parent_name = _parent_name(name)
        if parent_name is not None:
            logger.parent = get_logger(parent_name)
    return _loggers[name]


def configure_default_logging(
    level: LogLevel = LogLevel.INFO,
    use_json: bool = True,
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True
) -> PolarisLogger:
    """Configure default handlers on the root ``polaris_ddl`` logger"""

    # Choose formatter
    formatter = JSONLogFormatter() if use_json else HumanReadableFormatter()

    root_logger = get_logger(ROOT_LOGGER_NAME)
    root_logger.set_level(level)
    root_logger.handlers.clear()

    if console:
        root_logger.add_handler(ConsoleLogHandler(formatter))

    # Add file handler if specified
    if log_file:
        root_logger.add_handler(FileLogHandler(formatter, log_file))

    return root_logger


def configure_logging(config) -> PolarisLogger:
    """Configure the root logger from a ``LoggingConfiguration`` model"""
    return configure_default_logging(
        level=LogLevel(config.level),
        use_json=config.format == "json",
        log_file=config.file_path if config.output in ("file", "both") else None,
        console=config.output in ("console", "both")
    )


# Convenience function to get current correlation ID
def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context"""
    return correlation_id_var.get()
