"""
Observability Framework - Structured Logging

Structured JSON logging with correlation IDs and descriptor context, shared by
every polaris_ddl component.
"""

from .logging import (
    PolarisLogger, LogLevel, LogFormatter, LogHandler, JSONLogFormatter,
    HumanReadableFormatter, ConsoleLogHandler, FileLogHandler,
    get_logger, configure_default_logging, configure_logging, get_correlation_id
)

__all__ = [
    "PolarisLogger",
    "LogLevel",
    "LogFormatter",
    "LogHandler",
    "JSONLogFormatter",
    "HumanReadableFormatter",
    "ConsoleLogHandler",
    "FileLogHandler",
    "get_logger",
    "configure_default_logging",
    "configure_logging",
    "get_correlation_id",
]
