"""
Infrastructure Layer - Cross-cutting technical services

Exception hierarchy and structured logging used by the descriptor framework.
"""

from .exceptions import (
    PolarisException, ConfigurationError, DescriptorError, DescriptorErrorCode,
    DescriptorNotFoundError, MalformedDescriptorError, UnsupportedRequirementError,
    VersionTooOldError, InputValidationError
)
from .observability import (
    PolarisLogger, LogLevel, LogFormatter, LogHandler, get_logger,
    configure_default_logging, configure_logging
)

__all__ = [
    "PolarisException",
    "ConfigurationError",
    "DescriptorError",
    "DescriptorErrorCode",
    "DescriptorNotFoundError",
    "MalformedDescriptorError",
    "UnsupportedRequirementError",
    "VersionTooOldError",
    "InputValidationError",
    "PolarisLogger",
    "LogLevel",
    "LogFormatter",
    "LogHandler",
    "get_logger",
    "configure_default_logging",
    "configure_logging",
]
