"""
Descriptor Interpreter Module

Executes a descriptor document against the fixed set of registration
primitives and produces an immutable DescriptorRegistry.

A descriptor is a YAML list of single-key steps, run in document order::

    - metadata:
        name: echo
        description: Echo service
        author: POLARIS Development Team
        license: Apache-2.0
        version: "1.0.0"
        url: https://example.org/echo
        timeout: 10
    - requires:
        platform-version: 2.0.0
    - action:
        name: echo
        description: Echo a message back
    - input:
        message:
          prompt: Message
          description: The message to echo
          type: string
          validation: '^.+$'
          maxlength: 256
    - output:
        message:
          description: The echoed message
          display_as: Message

The document is parsed with ``yaml.safe_load`` and checked against a JSON
schema before any primitive runs, so a descriptor can only ever reach the
primitives below.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from ...domain.models import (
    DescriptorRegistry, DisplayPolicy, Entity, InputSpec, OutputSpec,
    METADATA_KEYS, PLATFORM_VERSION_REQUIREMENT, VALID_REQUIREMENTS, frozen_mapping
)
from ...domain.versioning import VersionComparator, VersionOrdering, get_platform_version
from ...infrastructure.exceptions import (
    DescriptorErrorCode, DescriptorNotFoundError, MalformedDescriptorError,
    UnsupportedRequirementError, VersionTooOldError
)
from ...infrastructure.observability import get_logger

logger = get_logger(__name__)

ENTITY_PRIMITIVES = ("action", "dataquery")
ARGUMENT_PRIMITIVES = ("input", "output")
PRIMITIVES = ("metadata", "requires", "usage") + ENTITY_PRIMITIVES + ARGUMENT_PRIMITIVES

INPUT_REQUIRED_PROPERTIES = ("prompt", "description", "type")
STRING_REQUIRED_PROPERTIES = ("validation", "maxlength")
OUTPUT_REQUIRED_PROPERTIES = ("description", "display_as")
INPUT_KNOWN_PROPERTIES = INPUT_REQUIRED_PROPERTIES + STRING_REQUIRED_PROPERTIES + ("default", "optional", "list")

DATAQUERY_ENTITY = "data"

_ARGUMENTS_SCHEMA = {
    "type": "object",
    "minProperties": 1,
    "propertyNames": {"type": "string"},
    "additionalProperties": {"type": "object"},
}

DESCRIPTOR_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "items": {
        "type": "object",
        "minProperties": 1,
        "maxProperties": 1,
        "properties": {
            "metadata": {"type": "object"},
            "requires": {"type": "object"},
            "usage": {"type": "string"},
            "action": {"type": "object"},
            "dataquery": {"type": "object"},
            "input": _ARGUMENTS_SCHEMA,
            "output": _ARGUMENTS_SCHEMA,
        },
        "additionalProperties": False,
    },
}

_schema_validator = Draft7Validator(DESCRIPTOR_SCHEMA)


class EntityHandle:
    """Mutable draft of an entity, handed out by the entity primitives."""

    def __init__(self, name: str, kind: str, description: str, display: DisplayPolicy):
        self.name = name
        self.kind = kind
        self.description = description
        self.display = display
        self.inputs: Dict[str, InputSpec] = {}
        self.outputs: Dict[str, OutputSpec] = {}

    def freeze(self) -> Entity:
        return Entity(
            name=self.name,
            kind=self.kind,
            description=self.description,
            display=self.display,
            inputs=frozen_mapping(self.inputs),
            outputs=frozen_mapping(self.outputs)
        )


class DescriptorBuilder:
    """
    The registration primitives.

    One builder serves one interpreter pass. Entity primitives return an
    EntityHandle that must be passed explicitly to ``input`` and ``output``.
    """

    def __init__(
        self,
        plugin_name: str,
        plugin_kind: str,
        path: Optional[Path] = None,
        platform_version: Optional[str] = None
    ):
        self.plugin_name = plugin_name
        self.plugin_kind = plugin_kind
        self.path = path
        self.platform_version = platform_version if platform_version is not None else get_platform_version()
        self._metadata: Optional[Dict[str, Any]] = None
        self._requirements: Dict[str, str] = {}
        self._entities: Dict[str, EntityHandle] = {}
        self._usage = ""

    @property
    def has_metadata(self) -> bool:
        return self._metadata is not None

    def _malformed(self, message: str, code: DescriptorErrorCode, **kwargs) -> MalformedDescriptorError:
        return MalformedDescriptorError(
            message,
            code=code,
            path=str(self.path) if self.path else None,
            plugin_kind=self.plugin_kind,
            plugin_name=self.plugin_name,
            **kwargs
        )

    def metadata(self, fields: Mapping[str, Any]) -> None:
        if self._metadata is not None:
            raise self._malformed("Metadata has already been set", DescriptorErrorCode.METADATA_ALREADY_SET)

        for key in METADATA_KEYS:
            if key not in fields:
                raise self._malformed(
                    f"Metadata needs a '{key}' property",
                    DescriptorErrorCode.MISSING_METADATA_KEY,
                    property_name=key
                )

        timeout = fields["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise self._malformed(
                f"Metadata 'timeout' should be a number, got {timeout!r}",
                DescriptorErrorCode.INVALID_METADATA_VALUE,
                property_name="timeout"
            )

        self._metadata = dict(fields)

    def requires(self, requirements: Mapping[str, Any]) -> None:
        for kind, version in requirements.items():
            if kind not in VALID_REQUIREMENTS:
                raise UnsupportedRequirementError(
                    f"Requirement '{kind}' is not a valid requirement, only {', '.join(VALID_REQUIREMENTS)} is supported",
                    requirement=str(kind),
                    plugin_kind=self.plugin_kind,
                    plugin_name=self.plugin_name
                )
            if not isinstance(version, str) or not version.strip():
                raise self._malformed(
                    f"Requirement '{kind}' should be a version string, got {version!r}; quote the version, e.g. {kind}: '1.10'",
                    DescriptorErrorCode.INVALID_REQUIREMENT_VALUE,
                    property_name=kind
                )
            self._requirements[kind] = version

        self.validate_requirements()

    def validate_requirements(self) -> bool:
        """Check the platform-version requirement against the host version."""
        required = self._requirements.get(PLATFORM_VERSION_REQUIREMENT)
        if required is None:
            return True

        if VersionComparator.is_development(self.platform_version):
            logger.warning(
                "Descriptor requirements validation being skipped in development",
                extra={
                    "code": DescriptorErrorCode.REQUIREMENTS_SKIPPED_IN_DEVELOPMENT.value,
                    "required_version": required
                }
            )
            return True

        if VersionComparator.compare(self.platform_version, required) == VersionOrdering.LESS:
            raise VersionTooOldError(
                f"{self.plugin_kind.capitalize()} plugin '{self.plugin_name}' requires platform version {required} or newer",
                required_version=required,
                platform_version=self.platform_version,
                plugin_kind=self.plugin_kind,
                plugin_name=self.plugin_name
            )
        return True

    def _entity(self, name: str, kind: str, description: str, display: DisplayPolicy) -> EntityHandle:
        if name not in self._entities:
            self._entities[name] = EntityHandle(name, kind, description, display)
        return self._entities[name]

    def action(self, properties: Mapping[str, Any]) -> EntityHandle:
        """Declare (or re-activate) an action."""
        name = properties.get("name")
        if not isinstance(name, str) or not name:
            raise self._malformed(
                "Action needs a 'name' property",
                DescriptorErrorCode.MISSING_ENTITY_PROPERTY,
                property_name="name"
            )
        if "description" not in properties:
            raise self._malformed(
                f"Action '{name}' needs a 'description' property",
                DescriptorErrorCode.MISSING_ENTITY_PROPERTY,
                entity=name,
                property_name="description"
            )

        display = properties.get("display", DisplayPolicy.FAILED.value)
        try:
            display = DisplayPolicy(display)
        except ValueError:
            raise self._malformed(
                f"Action '{name}' has an invalid display policy {display!r}, expected one of ok, failed, always",
                DescriptorErrorCode.INVALID_ENTITY_PROPERTY,
                entity=name,
                property_name="display"
            ) from None

        return self._entity(name, "action", properties["description"], display)

    def dataquery(self, properties: Mapping[str, Any]) -> EntityHandle:
        """Declare the single query of a data plugin."""
        if "description" not in properties:
            raise self._malformed(
                "Data query needs a 'description' property",
                DescriptorErrorCode.MISSING_ENTITY_PROPERTY,
                entity=DATAQUERY_ENTITY,
                property_name="description"
            )
        return self._entity(DATAQUERY_ENTITY, "dataquery", properties["description"], DisplayPolicy.ALWAYS)

    def _require_entity(self, entity: Optional[EntityHandle], kind: str, argument: str) -> EntityHandle:
        if entity is None:
            raise self._malformed(
                f"Cannot determine what entity {kind} '{argument}' belongs to",
                DescriptorErrorCode.NO_ACTIVE_ENTITY,
                argument=argument
            )
        return entity

    def input(self, entity: Optional[EntityHandle], argument: str, properties: Mapping[str, Any]) -> InputSpec:
        entity = self._require_entity(entity, "input", argument)

        for key in INPUT_REQUIRED_PROPERTIES:
            if key not in properties:
                raise self._malformed(
                    f"Input '{argument}' needs a '{key}' property",
                    DescriptorErrorCode.MISSING_INPUT_PROPERTY,
                    entity=entity.name,
                    argument=argument,
                    property_name=key
                )

        input_type = properties["type"]
        if not isinstance(input_type, str):
            raise self._invalid_input(entity, argument, "type", f"should be a type name, got {input_type!r}")

        optional = properties.get("optional", False)
        if optional is None:
            optional = False
        if not isinstance(optional, bool):
            raise self._invalid_input(entity, argument, "optional", f"should be true or false, got {optional!r}")

        validation = maxlength = allowed = None
        if input_type == "string":
            for key in STRING_REQUIRED_PROPERTIES:
                if key not in properties:
                    raise self._malformed(
                        f"Input type string needs a '{key}' property",
                        DescriptorErrorCode.MISSING_INPUT_PROPERTY,
                        entity=entity.name,
                        argument=argument,
                        property_name=key
                    )
            validation = properties["validation"]
            maxlength = properties["maxlength"]
            if not isinstance(validation, str):
                raise self._invalid_input(entity, argument, "validation", f"should be a pattern or validator name, got {validation!r}")
            if isinstance(maxlength, bool) or not isinstance(maxlength, int) or maxlength < 0:
                raise self._invalid_input(entity, argument, "maxlength", f"should be a non-negative integer, got {maxlength!r}")

        elif input_type == "list":
            if "list" not in properties:
                raise self._malformed(
                    "Input type list needs a 'list' property",
                    DescriptorErrorCode.MISSING_INPUT_PROPERTY,
                    entity=entity.name,
                    argument=argument,
                    property_name="list"
                )
            if not isinstance(properties["list"], list):
                raise self._invalid_input(entity, argument, "list", f"should be a list of values, got {properties['list']!r}")
            allowed = tuple(properties["list"])

        spec = InputSpec(
            name=argument,
            prompt=properties["prompt"],
            description=properties["description"],
            type=input_type,
            default=properties.get("default"),
            optional=optional,
            validation=validation,
            maxlength=maxlength,
            allowed=allowed,
            extra=frozen_mapping({k: v for k, v in properties.items() if k not in INPUT_KNOWN_PROPERTIES})
        )
        entity.inputs[argument] = spec
        return spec

    def _invalid_input(self, entity: EntityHandle, argument: str, key: str, problem: str) -> MalformedDescriptorError:
        return self._malformed(
            f"Input '{argument}' property '{key}' {problem}",
            DescriptorErrorCode.INVALID_INPUT_PROPERTY,
            entity=entity.name,
            argument=argument,
            property_name=key
        )

    def output(self, entity: Optional[EntityHandle], argument: str, properties: Mapping[str, Any]) -> OutputSpec:
        entity = self._require_entity(entity, "output", argument)

        for key in OUTPUT_REQUIRED_PROPERTIES:
            if key not in properties:
                raise self._malformed(
                    f"Output '{argument}' needs a '{key}' property",
                    DescriptorErrorCode.MISSING_OUTPUT_PROPERTY,
                    entity=entity.name,
                    argument=argument,
                    property_name=key
                )

        spec = OutputSpec(
            name=argument,
            description=properties["description"],
            display_as=properties["display_as"],
            default=properties.get("default")
        )
        entity.outputs[argument] = spec
        return spec

    def usage(self, text: str) -> None:
        self._usage = text

    def build(self) -> DescriptorRegistry:
        if self._metadata is None:
            raise self._malformed(
                f"Descriptor for {self.plugin_kind} plugin '{self.plugin_name}' does not declare metadata",
                DescriptorErrorCode.MISSING_METADATA
            )

        return DescriptorRegistry(
            plugin_name=self.plugin_name,
            plugin_kind=self.plugin_kind,
            path=self.path,
            metadata=frozen_mapping(self._metadata),
            requirements=frozen_mapping(self._requirements),
            entities=frozen_mapping({name: entity.freeze() for name, entity in self._entities.items()}),
            usage=self._usage
        )


class DescriptorInterpreter:
    """Runs descriptor documents through a fresh DescriptorBuilder per load."""

    def __init__(self, platform_version: Optional[str] = None):
        self.platform_version = platform_version

    def load(
        self,
        path: Union[str, Path],
        plugin_name: Optional[str] = None,
        plugin_kind: Optional[str] = None
    ) -> DescriptorRegistry:
        """
        Load the descriptor at ``path``.

        Plugin name and kind default to the file stem and its parent directory,
        matching the loader's layout.
        """
        path = Path(path)
        plugin_name = plugin_name or path.stem
        plugin_kind = plugin_kind or path.parent.name

        with logger.descriptor_context(plugin_kind, plugin_name):
            try:
                source = path.read_text(encoding='utf-8')
            except UnicodeDecodeError as e:
                raise MalformedDescriptorError(
                    f"Descriptor {path} is not valid UTF-8 text",
                    code=DescriptorErrorCode.INVALID_DESCRIPTOR_SYNTAX,
                    path=str(path),
                    plugin_kind=plugin_kind,
                    plugin_name=plugin_name,
                    cause=e
                ) from e
            except OSError as e:
                raise DescriptorNotFoundError(
                    f"Cannot read descriptor for {plugin_kind} plugin '{plugin_name}' at {path}: {e}",
                    plugin_kind=plugin_kind,
                    plugin_name=plugin_name,
                    context={"path": str(path)},
                    cause=e
                ) from e

            registry = self.execute(source, plugin_name, plugin_kind, path)
            logger.info(
                f"Loaded {plugin_kind} descriptor '{plugin_name}'",
                extra={
                    "code": DescriptorErrorCode.DESCRIPTOR_LOADED.value,
                    "path": str(path),
                    "entities": list(registry.entity_names())
                }
            )
            return registry

    def execute(
        self,
        source: str,
        plugin_name: str,
        plugin_kind: str,
        path: Optional[Path] = None
    ) -> DescriptorRegistry:
        """Interpret descriptor source text that has already been read."""
        builder = DescriptorBuilder(plugin_name, plugin_kind, path, self.platform_version)
        steps = self._parse(source, builder)

        current: Optional[EntityHandle] = None
        for step in steps:
            (primitive, argument), = step.items()
            logger.debug(f"Running descriptor primitive '{primitive}'")

            if primitive == "metadata":
                builder.metadata(argument)
            elif primitive == "requires":
                builder.requires(argument)
            elif primitive == "usage":
                builder.usage(argument)
            elif primitive == "action":
                current = builder.action(argument)
            elif primitive == "dataquery":
                current = builder.dataquery(argument)
            elif primitive == "input":
                for name, properties in argument.items():
                    builder.input(current, name, properties)
            elif primitive == "output":
                for name, properties in argument.items():
                    builder.output(current, name, properties)

        return builder.build()

    @staticmethod
    def _parse(source: str, builder: DescriptorBuilder) -> List[Dict[str, Any]]:
        try:
            document = yaml.safe_load(source)
        except yaml.YAMLError as e:
            raise builder._malformed(
                f"Invalid YAML in descriptor: {e}",
                DescriptorErrorCode.INVALID_DESCRIPTOR_SYNTAX,
                cause=e
            ) from e

        if document is None:
            return []

        error = best_match(_schema_validator.iter_errors(document))
        if error is not None:
            location = ".".join(str(part) for part in error.absolute_path) or "<root>"
            raise builder._malformed(
                f"Invalid descriptor structure at {location}: {error.message}",
                DescriptorErrorCode.INVALID_DESCRIPTOR_STRUCTURE,
                context={"location": location, "primitives": list(PRIMITIVES)}
            )

        return document
