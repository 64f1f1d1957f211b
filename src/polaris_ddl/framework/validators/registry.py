"""
Validator Registry Module

Holds the named type validators used to check argument values, plus the
length, pattern and membership checks that string and list inputs need.
"""

import importlib
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ...infrastructure.exceptions import ConfigurationError, DescriptorErrorCode
from ...infrastructure.observability import get_logger
from .builtin import BUILTIN_VALIDATORS, ValidatorError, ValidatorFunction

logger = get_logger(__name__)


class ValidatorRegistry:
    """
    Registry of named validators.

    ``load()`` must be called before any validation; it registers the built-in
    validators and imports any custom validators given as ``module:callable``
    paths. Loading twice is a no-op.
    """

    def __init__(self, custom_validators: Optional[Mapping[str, str]] = None):
        self._custom_paths: Dict[str, str] = dict(custom_validators or {})
        self._validators: Dict[str, ValidatorFunction] = {}
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> "ValidatorRegistry":
        """Register built-in and configured validators."""
        if self._loaded:
            return self

        validators = dict(BUILTIN_VALIDATORS)
        for name, dotted_path in self._custom_paths.items():
            validators[name] = self._import_validator(name, dotted_path)

        self._validators = validators
        self._loaded = True
        logger.debug("Validators loaded", extra={"validators": sorted(validators)})
        return self

    def _import_validator(self, name: str, dotted_path: str) -> ValidatorFunction:
        module_name, _, attribute = dotted_path.partition(':')
        if not module_name or not attribute:
            raise ConfigurationError(
                f"Validator '{name}' must be given as 'module:callable', got '{dotted_path}'",
                error_code=DescriptorErrorCode.VALIDATOR_NOT_FOUND.value,
                context={"validator": name}
            )
        try:
            module = importlib.import_module(module_name)
            function = getattr(module, attribute)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                f"Cannot load validator '{name}' from '{dotted_path}': {e}",
                error_code=DescriptorErrorCode.VALIDATOR_NOT_FOUND.value,
                context={"validator": name},
                cause=e
            ) from e

        if not callable(function):
            raise ConfigurationError(
                f"Validator '{name}' at '{dotted_path}' is not callable",
                error_code=DescriptorErrorCode.VALIDATOR_NOT_FOUND.value,
                context={"validator": name}
            )
        return function

    def register(self, name: str, function: ValidatorFunction) -> None:
        """Register or replace a validator. Loads the registry first if needed."""
        self.load()
        self._validators[name] = function

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise ConfigurationError(
                "Validators must be loaded before validating values",
                error_code=DescriptorErrorCode.VALIDATORS_NOT_LOADED.value
            )

    def has(self, name: str) -> bool:
        self._require_loaded()
        return name in self._validators

    def names(self) -> List[str]:
        self._require_loaded()
        return sorted(self._validators)

    def get(self, name: str) -> ValidatorFunction:
        self._require_loaded()
        try:
            return self._validators[name]
        except KeyError:
            raise ConfigurationError(
                f"No validator registered for type '{name}'",
                error_code=DescriptorErrorCode.VALIDATOR_NOT_FOUND.value,
                context={"validator": name}
            ) from None

    def validate(self, value: Any, name: str) -> None:
        """Run the validator registered under ``name``."""
        self.get(name)(value)

    def validate_length(self, value: Any, maxlength: int) -> None:
        """Fail when ``value`` is longer than ``maxlength``; 0 disables the check."""
        self._require_loaded()
        if not isinstance(value, str):
            raise ValidatorError(f"value should be a string to check its length, got {type(value).__name__}")
        if maxlength and len(value) > maxlength:
            raise ValidatorError(f"value should be at most {maxlength} characters long, got {len(value)}")

    def validate_pattern(self, value: Any, validation: str) -> None:
        """
        Check ``value`` against a named validator or, when no validator has that
        name, against ``validation`` as a regular expression.
        """
        if self.has(validation):
            self.validate(value, validation)
            return

        try:
            pattern = re.compile(validation)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid validation pattern '{validation}': {e}",
                error_code=DescriptorErrorCode.INVALID_VALIDATION_PATTERN.value,
                context={"pattern": validation},
                cause=e
            ) from e

        if not isinstance(value, str) or not pattern.search(value):
            raise ValidatorError(f"value should match {validation}")

    def validate_membership(self, value: Any, allowed: Iterable[Any]) -> None:
        """Exact, type-sensitive membership: 1 does not match True or '1'."""
        self._require_loaded()
        allowed = list(allowed)
        if not any(type(item) is type(value) and item == value for item in allowed):
            raise ValidatorError(f"value should be one of {', '.join(str(item) for item in allowed)}")
