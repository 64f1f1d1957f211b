"""
Descriptor Domain Models

Immutable value objects produced by loading a descriptor: declared inputs and
outputs, the entities that own them, and the registry holding a plugin's
metadata, requirements, entities and usage text.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

METADATA_KEYS: Tuple[str, ...] = ("name", "description", "author", "license", "version", "url", "timeout")

PLATFORM_VERSION_REQUIREMENT = "platform-version"
VALID_REQUIREMENTS: Tuple[str, ...] = (PLATFORM_VERSION_REQUIREMENT,)


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def frozen_mapping(data: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    """
    Return a read-only view over a private copy of ``data``.

    Nested mappings become read-only views and nested lists become tuples.
    """
    return _freeze(data or {})


def thaw(value: Any) -> Any:
    """Plain ``dict``/``list`` copy of a value built by ``frozen_mapping``."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class DisplayPolicy(Enum):
    """When the results of an action should be displayed."""
    OK = "ok"
    FAILED = "failed"
    ALWAYS = "always"


@dataclass(frozen=True)
class InputSpec:
    """A declared input argument."""
    name: str
    prompt: str
    description: str
    type: str
    default: Any = None
    optional: bool = False
    validation: Optional[str] = None
    maxlength: Optional[int] = None
    allowed: Optional[Tuple[Any, ...]] = None
    extra: Mapping[str, Any] = field(default_factory=frozen_mapping)

    @property
    def required(self) -> bool:
        return not self.optional

    def to_dict(self) -> Dict[str, Any]:
        data = thaw(self.extra)
        data.update({
            "prompt": self.prompt,
            "description": self.description,
            "type": self.type,
            "default": self.default,
            "optional": self.optional,
        })
        if self.type == "string":
            data["validation"] = self.validation
            data["maxlength"] = self.maxlength
        elif self.type == "list":
            data["list"] = list(self.allowed or ())
        return data


@dataclass(frozen=True)
class OutputSpec:
    """A declared output field."""
    name: str
    description: str
    display_as: str
    default: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "display_as": self.display_as,
            "default": self.default,
        }


@dataclass(frozen=True)
class Entity:
    """A named unit of a descriptor (an action, a data query) with its inputs and outputs."""
    name: str
    kind: str
    description: str
    display: DisplayPolicy = DisplayPolicy.FAILED
    inputs: Mapping[str, InputSpec] = field(default_factory=frozen_mapping)
    outputs: Mapping[str, OutputSpec] = field(default_factory=frozen_mapping)

    def required_inputs(self) -> Tuple[str, ...]:
        return tuple(name for name, spec in self.inputs.items() if spec.required)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "description": self.description,
            "display": self.display.value,
            "input": {name: spec.to_dict() for name, spec in self.inputs.items()},
            "output": {name: spec.to_dict() for name, spec in self.outputs.items()},
        }


@dataclass(frozen=True)
class DescriptorRegistry:
    """
    Everything one descriptor declared for a (plugin kind, plugin name) pair.

    Instances are built once by the interpreter and never mutated afterwards,
    so they can be shared freely between readers.
    """
    plugin_name: str
    plugin_kind: str
    path: Optional[Path] = None
    metadata: Mapping[str, Any] = field(default_factory=frozen_mapping)
    requirements: Mapping[str, str] = field(default_factory=frozen_mapping)
    entities: Mapping[str, Entity] = field(default_factory=frozen_mapping)
    usage: str = ""

    def has_entity(self, name: str) -> bool:
        return name in self.entities

    def entity_names(self) -> Tuple[str, ...]:
        return tuple(self.entities.keys())

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view used by help renderers and JSON output."""
        return {
            "plugin_name": self.plugin_name,
            "plugin_kind": self.plugin_kind,
            "path": str(self.path) if self.path else None,
            "metadata": thaw(self.metadata),
            "requirements": dict(self.requirements),
            "entities": {name: entity.to_dict() for name, entity in self.entities.items()},
            "usage": self.usage,
        }
