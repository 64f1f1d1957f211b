"""
polaris-ddl - Plugin Descriptor Interpreter and Validation Engine

Loads declarative plugin descriptors, builds immutable registries of the
metadata, requirements, actions, inputs and outputs they declare, and
validates runtime arguments against them.
"""

__version__ = "2.0.0"
__author__ = "POLARIS Development Team"

from .domain import DescriptorRegistry, Entity, InputSpec, OutputSpec
from .framework import DescriptorManager, FrameworkConfiguration
from .infrastructure import (
    PolarisException, DescriptorError, DescriptorErrorCode, ConfigurationError
)

__all__ = [
    "DescriptorManager",
    "FrameworkConfiguration",
    "DescriptorRegistry",
    "Entity",
    "InputSpec",
    "OutputSpec",
    "PolarisException",
    "DescriptorError",
    "DescriptorErrorCode",
    "ConfigurationError",
]
