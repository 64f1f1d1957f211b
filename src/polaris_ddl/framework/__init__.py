"""
Framework Layer - configuration, type validators and the descriptor engine
"""

from .configuration import FrameworkConfiguration, PolarisConfiguration, ConfigurationBuilder
from .descriptors import DescriptorManager

__all__ = [
    "FrameworkConfiguration",
    "PolarisConfiguration",
    "ConfigurationBuilder",
    "DescriptorManager",
]
