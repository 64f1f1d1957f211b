"""
Core configuration management class.
"""

import logging
from typing import Dict, Any, Optional, List

from .models import FrameworkConfiguration
from .sources import ConfigurationSource
from .validation import ConfigurationValidator

logger = logging.getLogger(__name__)


class PolarisConfiguration:
    """
    Configuration for the descriptor framework, merged from prioritised sources.

    Sources are loaded lowest priority first and deep-merged, so a value from an
    environment variable (priority 200) overrides the same value from a YAML
    file (priority 100).
    """

    def __init__(self, sources: Optional[List[ConfigurationSource]] = None):
        self._sources = list(sources or [])
        self._config_data: Dict[str, Any] = {}
        self._framework_config: Optional[FrameworkConfiguration] = None
        self._warnings: List[str] = []

        if self._sources:
            self._load_configuration()

    def add_source(self, source: ConfigurationSource) -> None:
        """Add a configuration source and reload."""
        self._sources.append(source)
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load and merge configuration from all sources."""
        merged_config: Dict[str, Any] = {}

        # Load from sources in priority order (lowest to highest)
        for source in sorted(self._sources, key=lambda s: s.get_priority()):
            try:
                source_config = source.load()
            except Exception as e:
                logger.error(f"Failed to load configuration from source: {type(source).__name__}: {e}")
                raise
            merged_config = self._deep_merge(merged_config, source_config)

        # Validate the merged configuration
        try:
            self._warnings = ConfigurationValidator.validate_configuration(merged_config)
        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        for warning in self._warnings:
            logger.warning(warning)

        self._config_data = merged_config
        self._framework_config = FrameworkConfiguration(**merged_config.get('framework', {}))

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get_framework_config(self) -> FrameworkConfiguration:
        """Get framework configuration."""
        if self._framework_config is None:
            # Return default configuration if none loaded
            return FrameworkConfiguration()
        return self._framework_config

    def reload_configuration(self) -> None:
        """Reload configuration from all sources."""
        self._load_configuration()

    def get_raw_config(self) -> Dict[str, Any]:
        """Get the raw configuration data."""
        return self._config_data.copy()

    def get_warnings(self) -> List[str]:
        """Warnings produced by the last validation pass."""
        return list(self._warnings)
