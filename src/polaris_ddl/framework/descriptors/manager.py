"""
Descriptor Manager

Facade that wires the loader, interpreter, validators and help renderer
together from a FrameworkConfiguration.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ...domain.models import DescriptorRegistry, Entity, InputSpec
from ...infrastructure.exceptions import DescriptorError, DescriptorErrorCode
from ...infrastructure.observability import get_logger
from ..configuration.models import FrameworkConfiguration
from ..validators import ValidatorRegistry
from .arguments import ArgumentValidator
from .help import HelpRenderer, TemplateHelpRenderer
from .interpreter import DescriptorInterpreter
from .loader import DescriptorLoader, DEFAULT_EXTENSION, DEFAULT_NAMESPACE

logger = get_logger(__name__)


class DescriptorManager:
    """
    Loads plugin descriptors and answers questions about them.

    A manager holds no per-descriptor state: every ``load`` builds a fresh
    registry, and the registries it returns are immutable.
    """

    def __init__(
        self,
        search_roots: Iterable[Union[str, Path]],
        namespace: str = DEFAULT_NAMESPACE,
        extension: str = DEFAULT_EXTENSION,
        platform_version: Optional[str] = None,
        validators: Optional[ValidatorRegistry] = None,
        help_renderer: Optional[HelpRenderer] = None
    ):
        self.loader = DescriptorLoader(search_roots, namespace, extension)
        self.interpreter = DescriptorInterpreter(platform_version)
        self.validators = validators or ValidatorRegistry()
        self.arguments = ArgumentValidator(self.validators)
        self.help_renderer = help_renderer or TemplateHelpRenderer()

    @classmethod
    def from_config(cls, config: FrameworkConfiguration) -> "DescriptorManager":
        """Build a manager from framework configuration."""
        return cls(
            search_roots=config.plugin_search_paths,
            namespace=config.descriptor_namespace,
            extension=config.descriptor_extension,
            platform_version=config.platform_version,
            validators=ValidatorRegistry(config.validators),
            help_renderer=TemplateHelpRenderer(config.help_template_dir)
        )

    def find(self, plugin_name: str, plugin_kind: str) -> Optional[Path]:
        return self.loader.find(plugin_name, plugin_kind)

    def load(self, plugin_name: str, plugin_kind: str) -> DescriptorRegistry:
        """Locate and interpret the descriptor for a plugin."""
        path = self.loader.locate(plugin_name, plugin_kind)
        return self.interpreter.load(path, plugin_name, plugin_kind)

    def render_help(self, registry: DescriptorRegistry, template: Optional[str] = None) -> str:
        return self.help_renderer.render(registry, template)

    @staticmethod
    def entity(registry: DescriptorRegistry, name: str) -> Entity:
        """Look up an entity by name, failing with UNKNOWN_ENTITY."""
        if not registry.has_entity(name):
            raise DescriptorError(
                f"{registry.plugin_kind.capitalize()} plugin '{registry.plugin_name}' has no entity '{name}'",
                code=DescriptorErrorCode.UNKNOWN_ENTITY,
                plugin_kind=registry.plugin_kind,
                plugin_name=registry.plugin_name,
                context={"entity": name, "known_entities": list(registry.entity_names())}
            )
        return registry.entities[name]

    def validate_argument(self, entity: Union[Entity, str], key: str, declared_input: InputSpec, value: Any) -> bool:
        return self.arguments.validate(entity, key, declared_input, value)

    def validate_request(
        self,
        registry: DescriptorRegistry,
        entity_name: str,
        arguments: Mapping[str, Any]
    ) -> bool:
        """Validate a full set of arguments for one entity of ``registry``."""
        entity = self.entity(registry, entity_name)
        with logger.descriptor_context(registry.plugin_kind, registry.plugin_name):
            return self.arguments.validate_request(entity, arguments, registry)

    def apply_defaults(
        self,
        registry: DescriptorRegistry,
        entity_name: str,
        arguments: Mapping[str, Any]
    ) -> Dict[str, Any]:
        return self.arguments.apply_defaults(self.entity(registry, entity_name), arguments)
