"""
Configuration sources for loading configuration data.
"""

import os
import yaml
from abc import ABC, abstractmethod
from typing import Dict, Any, Union
from pathlib import Path

from ...infrastructure.exceptions import ConfigurationError

DEFAULT_ENV_PREFIX = "POLARIS_DDL_"

# Framework fields whose names contain underscores, so they cannot be split naively
_FRAMEWORK_FIELDS = (
    'plugin_search_paths',
    'descriptor_namespace',
    'descriptor_extension',
    'help_template_dir',
    'platform_version',
)

_LIST_FIELDS = {'framework_plugin_search_paths'}


class ConfigurationSource(ABC):
    """Abstract base class for configuration sources."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Load configuration data from the source."""
        pass

    @abstractmethod
    def get_priority(self) -> int:
        """Get the priority of this source (higher number = higher priority)."""
        pass


class YAMLConfigurationSource(ConfigurationSource):
    """YAML file configuration source."""

    def __init__(self, file_path: Union[str, Path], priority: int = 100):
        self.file_path = Path(file_path)
        self.priority = priority

    def load(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.file_path}",
                config_path=str(self.file_path),
                error_code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {self.file_path}",
                config_path=str(self.file_path),
                error_code="INVALID_YAML",
                context={"yaml_error": str(e)},
                cause=e
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Error reading configuration file: {self.file_path}",
                config_path=str(self.file_path),
                error_code="CONFIG_READ_ERROR",
                context={"error": str(e)},
                cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping: {self.file_path}",
                config_path=str(self.file_path),
                error_code="INVALID_CONFIG_STRUCTURE"
            )
        return data

    def get_priority(self) -> int:
        return self.priority


class EnvironmentConfigurationSource(ConfigurationSource):
    """
    Environment variable configuration source.

    ``POLARIS_DDL_FRAMEWORK_PLUGIN_SEARCH_PATHS=/a,/b`` becomes
    ``{"framework": {"plugin_search_paths": ["/a", "/b"]}}`` and
    ``POLARIS_DDL_FRAMEWORK_LOGGING_CONFIG_LEVEL=DEBUG`` becomes
    ``{"framework": {"logging_config": {"level": "DEBUG"}}}``.
    """

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX, priority: int = 200):
        self.prefix = prefix.upper()
        self.priority = priority

    def load(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if key.startswith(self.prefix):
                # Remove prefix and convert to nested dict
                config_key = key[len(self.prefix):].lower()
                self._set_nested_value(config, config_key, self._parse_value(value, config_key))

        return config

    def _set_nested_value(self, config: Dict[str, Any], key: str, value: Any) -> None:
        """Set a nested configuration value using underscore notation."""
        section, _, rest = key.partition('_')
        if not rest:
            config[section] = value
            return

        target = config.setdefault(section, {})
        if section == 'framework':
            if rest in _FRAMEWORK_FIELDS:
                target[rest] = value
                return
            if rest.startswith('logging_config_'):
                target.setdefault('logging_config', {})[rest[len('logging_config_'):]] = value
                return
            if rest.startswith('validators_'):
                target.setdefault('validators', {})[rest[len('validators_'):]] = value
                return

        # Standard nested structure
        parts = rest.split('_')
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[parts[-1]] = value

    def _parse_value(self, value: str, key: str = "") -> Any:
        """Parse environment variable value to appropriate type."""
        if key in _LIST_FIELDS:
            return [item.strip() for item in value.split(',') if item.strip()]

        # Versions, paths and patterns stay strings
        if key.startswith('framework_') and key[len('framework_'):] in _FRAMEWORK_FIELDS:
            return value

        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def get_priority(self) -> int:
        return self.priority


class OverrideConfigurationSource(ConfigurationSource):
    """
    Explicit framework settings, typically from the command line.

    Holds values for the ``framework`` section and wins over files and the
    environment at the default priority.
    """

    def __init__(self, framework: Dict[str, Any], priority: int = 300):
        self.framework = dict(framework)
        self.priority = priority

    def load(self) -> Dict[str, Any]:
        if not self.framework:
            return {}
        return {'framework': dict(self.framework)}

    def get_priority(self) -> int:
        return self.priority
