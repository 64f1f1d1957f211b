"""
Argument Validator Module

Validates caller-supplied argument values against the inputs an entity
declared in its descriptor, before the values reach plugin code.
"""

from typing import Any, Dict, Mapping, Optional, Union

from ...domain.models import DescriptorRegistry, Entity, InputSpec
from ...infrastructure.exceptions import ConfigurationError, DescriptorErrorCode, InputValidationError
from ...infrastructure.observability import get_logger
from ..validators import ValidatorRegistry

logger = get_logger(__name__)


class ArgumentValidator:
    """
    Checks argument values against declared inputs.

    Validation stops at the first failing argument. Any validator failure,
    including an arbitrary exception from a custom validator, is reported as
    an InputValidationError naming the entity and argument.
    Configuration problems (no validator for a declared type, a broken
    pattern) surface as ConfigurationError.
    """

    def __init__(self, validators: Optional[ValidatorRegistry] = None):
        self.validators = validators or ValidatorRegistry()

    def validate(self, entity: Union[Entity, str], key: str, declared_input: InputSpec, value: Any) -> bool:
        """Validate one supplied value; presence is assumed to be checked already."""
        self.validators.load()
        entity_name = entity.name if isinstance(entity, Entity) else entity

        try:
            if declared_input.type == "string":
                self.validators.validate(value, "string")
                self.validators.validate_length(value, declared_input.maxlength or 0)
                if declared_input.validation:
                    self.validators.validate_pattern(value, declared_input.validation)

            elif declared_input.type == "list":
                self.validators.validate_membership(value, declared_input.allowed or ())

            else:
                self.validators.validate(value, declared_input.type)

        except ConfigurationError:
            raise
        except Exception as e:
            raise InputValidationError(
                f"Cannot validate input '{key}': {e}",
                entity=entity_name,
                argument=key,
                context={"cause": str(e)}
            ) from None

        return True

    def validate_request(
        self,
        entity: Entity,
        arguments: Mapping[str, Any],
        registry: Optional[DescriptorRegistry] = None
    ) -> bool:
        """
        Validate a whole request for ``entity``.

        Every non-optional input must be present, then each supplied declared
        argument is validated in declaration order. Undeclared arguments are
        ignored.
        """
        plugin_kind = registry.plugin_kind if registry else None
        plugin_name = registry.plugin_name if registry else None

        for name in entity.required_inputs():
            if name not in arguments:
                raise InputValidationError(
                    f"{entity.name} action needs a '{name}' argument",
                    entity=entity.name,
                    argument=name,
                    code=DescriptorErrorCode.MISSING_REQUIRED_INPUT,
                    plugin_kind=plugin_kind,
                    plugin_name=plugin_name
                )

        for name, declared_input in entity.inputs.items():
            if name in arguments:
                try:
                    self.validate(entity, name, declared_input, arguments[name])
                except InputValidationError as e:
                    if registry is not None:
                        e.plugin_kind, e.plugin_name = plugin_kind, plugin_name
                        e.context.update(plugin_kind=plugin_kind, plugin_name=plugin_name)
                    raise

        for name in arguments:
            if name not in entity.inputs:
                logger.debug(f"Ignoring undeclared argument '{name}' for {entity.name}")

        return True

    @staticmethod
    def apply_defaults(entity: Entity, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``arguments`` with declared defaults filled in for absent inputs."""
        result = dict(arguments)
        for name, declared_input in entity.inputs.items():
            if name not in result and declared_input.default is not None:
                result[name] = declared_input.default
        return result
