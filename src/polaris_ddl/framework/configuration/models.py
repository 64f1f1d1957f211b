"""
Configuration data models with validation.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class LoggingConfiguration(BaseModel):
    """Logging system configuration with validation."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = Field(default="json", pattern="^(json|text)$")
    output: str = Field(default="console", pattern="^(console|file|both)$")
    file_path: Optional[str] = None

    @model_validator(mode="after")
    def validate_file_path(self):
        """Validate file path when file output is used."""
        if self.output in ['file', 'both'] and not self.file_path:
            raise ValueError("file_path is required when output is 'file' or 'both'")
        return self


class FrameworkConfiguration(BaseModel):
    """Descriptor framework configuration with nested validation."""
    logging_config: LoggingConfiguration = Field(default_factory=LoggingConfiguration)
    plugin_search_paths: List[str] = Field(default=["./plugins"])
    descriptor_namespace: str = Field(default="polaris", min_length=1)
    descriptor_extension: str = Field(default="ddl", min_length=1)
    help_template_dir: Optional[str] = None
    platform_version: Optional[str] = None
    validators: Dict[str, str] = Field(default_factory=dict)

    @field_validator('plugin_search_paths', mode='before')
    @classmethod
    def validate_search_paths(cls, v):
        """Accept a single path as well as a list."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator('descriptor_namespace', 'descriptor_extension')
    @classmethod
    def validate_path_component(cls, v):
        """Namespace and extension become part of descriptor paths."""
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError(f"Invalid path component: {v}")
        return v

    @field_validator('platform_version', mode='before')
    @classmethod
    def validate_platform_version(cls, v):
        """YAML and environment values like 2.0 arrive as numbers."""
        if v is None:
            return v
        return str(v)

    @field_validator('validators')
    @classmethod
    def validate_validator_paths(cls, v):
        """Custom validators are referenced as module:callable."""
        for name, dotted_path in v.items():
            module_name, _, attribute = dotted_path.partition(':')
            if not module_name or not attribute:
                raise ValueError(f"Validator '{name}' must be given as 'module:callable'")
        return v
