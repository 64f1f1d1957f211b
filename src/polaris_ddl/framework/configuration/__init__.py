"""
Configuration Management System

Type-safe configuration management with hierarchical configuration support,
YAML and environment variable sources, and validation.
"""

from .models import (
    LoggingConfiguration,
    FrameworkConfiguration
)

from .sources import (
    ConfigurationSource,
    YAMLConfigurationSource,
    EnvironmentConfigurationSource,
    OverrideConfigurationSource
)

from .validation import (
    ConfigurationValidator,
    ConfigurationValidationError
)

from .core import PolarisConfiguration

from .builder import ConfigurationBuilder

__all__ = [
    # Models
    'LoggingConfiguration',
    'FrameworkConfiguration',

    # Sources
    'ConfigurationSource',
    'YAMLConfigurationSource',
    'EnvironmentConfigurationSource',
    'OverrideConfigurationSource',

    # Validation
    'ConfigurationValidator',
    'ConfigurationValidationError',

    # Core
    'PolarisConfiguration',

    # Builder
    'ConfigurationBuilder'
]
