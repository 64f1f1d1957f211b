"""
Structured Exception Hierarchy

Provides the exception hierarchy used when loading plugin descriptors and
validating arguments against them. Every exception carries a stable error
code, a context dictionary and a correlation ID for diagnostics.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Any, Optional
import uuid


class DescriptorErrorCode(Enum):
    """Stable identifiers for descriptor failures and notable events."""
    DESCRIPTOR_NOT_FOUND = "DESCRIPTOR_NOT_FOUND"
    DESCRIPTOR_FOUND = "DESCRIPTOR_FOUND"
    DESCRIPTOR_LOADED = "DESCRIPTOR_LOADED"
    INVALID_PLUGIN_IDENTIFIER = "INVALID_PLUGIN_IDENTIFIER"
    INVALID_DESCRIPTOR_SYNTAX = "INVALID_DESCRIPTOR_SYNTAX"
    INVALID_DESCRIPTOR_STRUCTURE = "INVALID_DESCRIPTOR_STRUCTURE"
    MISSING_METADATA = "MISSING_METADATA"
    MISSING_METADATA_KEY = "MISSING_METADATA_KEY"
    INVALID_METADATA_VALUE = "INVALID_METADATA_VALUE"
    METADATA_ALREADY_SET = "METADATA_ALREADY_SET"
    NO_ACTIVE_ENTITY = "NO_ACTIVE_ENTITY"
    MISSING_ENTITY_PROPERTY = "MISSING_ENTITY_PROPERTY"
    INVALID_ENTITY_PROPERTY = "INVALID_ENTITY_PROPERTY"
    MISSING_INPUT_PROPERTY = "MISSING_INPUT_PROPERTY"
    INVALID_INPUT_PROPERTY = "INVALID_INPUT_PROPERTY"
    MISSING_OUTPUT_PROPERTY = "MISSING_OUTPUT_PROPERTY"
    UNSUPPORTED_REQUIREMENT = "UNSUPPORTED_REQUIREMENT"
    INVALID_REQUIREMENT_VALUE = "INVALID_REQUIREMENT_VALUE"
    VERSION_TOO_OLD = "VERSION_TOO_OLD"
    REQUIREMENTS_SKIPPED_IN_DEVELOPMENT = "REQUIREMENTS_SKIPPED_IN_DEVELOPMENT"
    UNKNOWN_ENTITY = "UNKNOWN_ENTITY"
    MISSING_REQUIRED_INPUT = "MISSING_REQUIRED_INPUT"
    INPUT_VALIDATION_FAILED = "INPUT_VALIDATION_FAILED"
    VALIDATORS_NOT_LOADED = "VALIDATORS_NOT_LOADED"
    VALIDATOR_NOT_FOUND = "VALIDATOR_NOT_FOUND"
    INVALID_VALIDATION_PATTERN = "INVALID_VALIDATION_PATTERN"
    HELP_TEMPLATE_NOT_FOUND = "HELP_TEMPLATE_NOT_FOUND"
    INVALID_HELP_TEMPLATE = "INVALID_HELP_TEMPLATE"


class PolarisException(Exception):
    """
    Base exception class for all POLARIS-specific exceptions.

    Provides structured error information including error codes,
    context data, and correlation IDs for tracing.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        correlation_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(PolarisException):
    """Raised when configuration-related errors occur."""

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        validation_errors: Optional[List[Any]] = None,
        error_code: str = "CONFIG_ERROR",
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if config_path:
            context['config_path'] = config_path
        if validation_errors:
            context['validation_errors'] = validation_errors

        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            **kwargs
        )


class DescriptorError(PolarisException):
    """Base class for errors raised while loading or using a plugin descriptor."""

    def __init__(
        self,
        message: str,
        code: DescriptorErrorCode,
        plugin_kind: Optional[str] = None,
        plugin_name: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if plugin_kind:
            context['plugin_kind'] = plugin_kind
        if plugin_name:
            context['plugin_name'] = plugin_name

        super().__init__(
            message=message,
            error_code=code.value,
            context=context,
            **kwargs
        )
        self.code = code
        self.plugin_kind = plugin_kind
        self.plugin_name = plugin_name


class DescriptorNotFoundError(DescriptorError):
    """Raised when no search root holds a descriptor for the requested plugin."""

    def __init__(self, message: str, search_roots: Optional[List[str]] = None, **kwargs):
        context = kwargs.pop('context', {})
        if search_roots is not None:
            context['search_roots'] = search_roots

        super().__init__(
            message=message,
            code=DescriptorErrorCode.DESCRIPTOR_NOT_FOUND,
            context=context,
            **kwargs
        )


class MalformedDescriptorError(DescriptorError):
    """Raised when a primitive is called with missing/invalid properties or out of context."""

    def __init__(
        self,
        message: str,
        code: DescriptorErrorCode,
        path: Optional[str] = None,
        entity: Optional[str] = None,
        argument: Optional[str] = None,
        property_name: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if path:
            context['path'] = path
        if entity:
            context['entity'] = entity
        if argument:
            context['argument'] = argument
        if property_name:
            context['property'] = property_name

        super().__init__(message=message, code=code, context=context, **kwargs)
        self.property_name = property_name


class UnsupportedRequirementError(DescriptorError):
    """Raised when ``requires`` names an unknown requirement kind."""

    def __init__(self, message: str, requirement: Optional[str] = None, **kwargs):
        context = kwargs.pop('context', {})
        if requirement:
            context['requirement'] = requirement

        super().__init__(
            message=message,
            code=DescriptorErrorCode.UNSUPPORTED_REQUIREMENT,
            context=context,
            **kwargs
        )
        self.requirement = requirement


class VersionTooOldError(DescriptorError):
    """Raised when the host platform is older than a descriptor's minimum version."""

    def __init__(
        self,
        message: str,
        required_version: Optional[str] = None,
        platform_version: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if required_version:
            context['required_version'] = required_version
        if platform_version:
            context['platform_version'] = platform_version

        super().__init__(
            message=message,
            code=DescriptorErrorCode.VERSION_TOO_OLD,
            context=context,
            **kwargs
        )
        self.required_version = required_version
        self.platform_version = platform_version


class InputValidationError(DescriptorError):
    """Raised when a supplied argument fails its declared type, length, pattern or membership check."""

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        argument: Optional[str] = None,
        code: DescriptorErrorCode = DescriptorErrorCode.INPUT_VALIDATION_FAILED,
        **kwargs
    ):
        context = kwargs.pop('context', {})
        if entity:
            context['entity'] = entity
        if argument:
            context['argument'] = argument

        super().__init__(message=message, code=code, context=context, **kwargs)
        self.entity = entity
        self.argument = argument
