"""
Help Rendering

Turns a loaded DescriptorRegistry into human-readable help text.

Templates are YAML documents holding ``str.format`` strings for each section::

    template: "{metadata_help}\\nACTIONS:\\n{entities}"
    entity: "  {name}: {description}\\n{inputs}{outputs}"
    input: "    {name} ({type}): {description}\\n"
    output: "    {name}: {description}\\n"

Built-in ``rpc-help.yaml`` and ``metadata-help.yaml`` templates are used when
the template directory does not provide its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ...domain.models import DescriptorRegistry, Entity, InputSpec, OutputSpec
from ...infrastructure.exceptions import ConfigurationError, DescriptorErrorCode
from ...infrastructure.observability import get_logger

logger = get_logger(__name__)

RPC_HELP_TEMPLATE = "rpc-help.yaml"
METADATA_HELP_TEMPLATE = "metadata-help.yaml"


@dataclass(frozen=True)
class HelpTemplate:
    """Section templates for one kind of help page."""
    name: str
    template: str
    entity: str = ""
    input: str = ""
    output: str = ""


DEFAULT_TEMPLATES: Dict[str, HelpTemplate] = {
    METADATA_HELP_TEMPLATE: HelpTemplate(
        name=METADATA_HELP_TEMPLATE,
        template="""{name}
{rule}

{description}

      Author: {author}
     Version: {version}
     License: {license}
     Timeout: {timeout}
   Home Page: {url}
"""
    ),
    RPC_HELP_TEMPLATE: HelpTemplate(
        name=RPC_HELP_TEMPLATE,
        template="""{metadata_help}
{usage}
ACTIONS:
========
   {entity_names}

{entities}""",
        entity="""   {name} action:
   {rule}
       {description}

       INPUT:
{inputs}
       OUTPUT:
{outputs}
""",
        input="""           {name}:
              Description: {description}
                   Prompt: {prompt}
                     Type: {type}
                 Optional: {optional}
{details}""",
        output="""           {name}:
              Description: {description}
               Display As: {display_as}
"""
    ),
}


class HelpRenderer(ABC):
    """Boundary for anything that renders help from a populated registry."""

    @abstractmethod
    def render(self, registry: DescriptorRegistry, template: Optional[str] = None) -> str:
        """Render help text for ``registry``."""
        pass


class TemplateHelpRenderer(HelpRenderer):
    """Renders help with ``str.format`` section templates."""

    def __init__(self, template_directory: Optional[Union[str, Path]] = None):
        self.template_directory = Path(template_directory) if template_directory else None

    def template_for_plugin_kind(self, plugin_kind: str) -> str:
        """Pick the default template name for a plugin kind."""
        if plugin_kind == "agent":
            return RPC_HELP_TEMPLATE

        candidate = f"{plugin_kind}-help.yaml"
        if self.template_directory and (self.template_directory / candidate).is_file():
            return candidate
        if candidate in DEFAULT_TEMPLATES:
            return candidate
        return METADATA_HELP_TEMPLATE

    def get_template(self, template: str) -> HelpTemplate:
        """Resolve a template name or absolute path."""
        path = Path(template)
        if not path.is_absolute() and self.template_directory:
            path = self.template_directory / template

        if path.is_absolute() or self.template_directory:
            if path.is_file():
                return self._load_template_file(path)

        if not Path(template).is_absolute() and template in DEFAULT_TEMPLATES:
            return DEFAULT_TEMPLATES[template]

        raise ConfigurationError(
            f"Cannot find help template '{template}'",
            config_path=str(path),
            error_code=DescriptorErrorCode.HELP_TEMPLATE_NOT_FOUND.value
        )

    def _load_template_file(self, path: Path) -> HelpTemplate:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load help template {path}: {e}",
                config_path=str(path),
                error_code=DescriptorErrorCode.INVALID_HELP_TEMPLATE.value,
                cause=e
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("template"), str):
            raise ConfigurationError(
                f"Help template {path} needs a 'template' string",
                config_path=str(path),
                error_code=DescriptorErrorCode.INVALID_HELP_TEMPLATE.value
            )

        return HelpTemplate(
            name=path.name,
            template=data["template"],
            entity=data.get("entity", ""),
            input=data.get("input", ""),
            output=data.get("output", "")
        )

    def render(self, registry: DescriptorRegistry, template: Optional[str] = None) -> str:
        template_name = template or self.template_for_plugin_kind(registry.plugin_kind)
        help_template = self.get_template(template_name)

        metadata_help = ""
        if help_template.name != METADATA_HELP_TEMPLATE:
            metadata_help = self._format(self.get_template(METADATA_HELP_TEMPLATE).template, self._metadata_context(registry))

        context = self._metadata_context(registry)
        context.update(
            metadata_help=metadata_help,
            plugin_name=registry.plugin_name,
            plugin_kind=registry.plugin_kind,
            usage=registry.usage,
            entity_names=" ".join(registry.entity_names()),
            entities="".join(self._render_entity(help_template, entity) for entity in registry.entities.values())
        )
        logger.debug(f"Rendering help with template {help_template.name}")
        return self._format(help_template.template, context)

    @staticmethod
    def _metadata_context(registry: DescriptorRegistry) -> Dict[str, Any]:
        context = {str(key): value for key, value in registry.metadata.items()}
        context["rule"] = "=" * len(str(registry.metadata.get("name", "")))
        return context

    def _render_entity(self, help_template: HelpTemplate, entity: Entity) -> str:
        if not help_template.entity:
            return ""
        return self._format(help_template.entity, {
            "name": entity.name,
            "kind": entity.kind,
            "description": entity.description,
            "display": entity.display.value,
            "rule": "-" * (len(entity.name) + len(" action:")),
            "inputs": "".join(self._render_input(help_template, spec) for spec in entity.inputs.values()),
            "outputs": "".join(self._render_output(help_template, spec) for spec in entity.outputs.values()),
        })

    def _render_input(self, help_template: HelpTemplate, spec: InputSpec) -> str:
        if not help_template.input:
            return ""
        if spec.type == "string":
            details = f"               Validation: {spec.validation}\n                   Length: {spec.maxlength}\n"
        elif spec.type == "list":
            details = f"             Valid Values: {', '.join(str(v) for v in spec.allowed or ())}\n"
        else:
            details = ""
        if spec.default is not None:
            details += f"            Default Value: {spec.default}\n"

        context = dict(spec.to_dict())
        context.update(name=spec.name, details=details)
        return self._format(help_template.input, context)

    def _render_output(self, help_template: HelpTemplate, spec: OutputSpec) -> str:
        if not help_template.output:
            return ""
        context = spec.to_dict()
        context["name"] = spec.name
        return self._format(help_template.output, context)

    @staticmethod
    def _format(template: str, context: Mapping[str, Any]) -> str:
        try:
            return template.format(**context)
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                f"Help template references an unknown or invalid field: {e}",
                error_code=DescriptorErrorCode.INVALID_HELP_TEMPLATE.value,
                cause=e
            ) from e
