"""
Fluent assembly of descriptor framework configuration.
"""

from typing import Any, Dict, Iterable, List, Union
from pathlib import Path

from .core import PolarisConfiguration
from .models import FrameworkConfiguration
from .sources import (
    ConfigurationSource, YAMLConfigurationSource, EnvironmentConfigurationSource,
    OverrideConfigurationSource, DEFAULT_ENV_PREFIX
)


class ConfigurationBuilder:
    """
    Collects configuration sources and explicit descriptor settings.

    Explicit settings (search paths, platform version, custom validators) are
    gathered into one override source that outranks YAML files and the
    environment. The environment is always consulted unless a source for it
    was added explicitly.
    """

    def __init__(self):
        self._sources: List[ConfigurationSource] = []
        self._overrides: Dict[str, Any] = {}

    def add_yaml_source(self, path: Union[str, Path], priority: int = 100) -> 'ConfigurationBuilder':
        self._sources.append(YAMLConfigurationSource(path, priority))
        return self

    def add_environment_source(self, prefix: str = DEFAULT_ENV_PREFIX, priority: int = 200) -> 'ConfigurationBuilder':
        self._sources.append(EnvironmentConfigurationSource(prefix, priority))
        return self

    def add_source(self, source: ConfigurationSource) -> 'ConfigurationBuilder':
        self._sources.append(source)
        return self

    def with_search_paths(self, paths: Iterable[Union[str, Path]]) -> 'ConfigurationBuilder':
        """Replace the descriptor search roots; an empty iterable leaves them alone."""
        paths = [str(path) for path in paths]
        if paths:
            self._overrides['plugin_search_paths'] = paths
        return self

    def with_platform_version(self, version: str) -> 'ConfigurationBuilder':
        self._overrides['platform_version'] = version
        return self

    def with_validator(self, name: str, dotted_path: str) -> 'ConfigurationBuilder':
        """Register a custom ``module:callable`` validator for input type ``name``."""
        self._overrides.setdefault('validators', {})[name] = dotted_path
        return self

    def build(self) -> PolarisConfiguration:
        sources = list(self._sources)
        if not any(isinstance(source, EnvironmentConfigurationSource) for source in sources):
            sources.append(EnvironmentConfigurationSource(DEFAULT_ENV_PREFIX, 200))
        if self._overrides:
            sources.append(OverrideConfigurationSource(self._overrides))
        return PolarisConfiguration(sources)

    def build_framework_config(self) -> FrameworkConfiguration:
        return self.build().get_framework_config()
