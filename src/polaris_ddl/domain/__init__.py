"""
Domain Layer - descriptor value objects and version ordering
"""

from .models import (
    DescriptorRegistry, Entity, InputSpec, OutputSpec, DisplayPolicy,
    METADATA_KEYS, VALID_REQUIREMENTS, PLATFORM_VERSION_REQUIREMENT
)
from .versioning import (
    VersionComparator, VersionOrdering, DEVELOPMENT_VERSION, versioncmp,
    get_platform_version, set_platform_version
)

__all__ = [
    "DescriptorRegistry",
    "Entity",
    "InputSpec",
    "OutputSpec",
    "DisplayPolicy",
    "METADATA_KEYS",
    "VALID_REQUIREMENTS",
    "PLATFORM_VERSION_REQUIREMENT",
    "VersionComparator",
    "VersionOrdering",
    "DEVELOPMENT_VERSION",
    "versioncmp",
    "get_platform_version",
    "set_platform_version",
]
