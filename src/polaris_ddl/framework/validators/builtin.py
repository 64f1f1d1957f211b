"""
Built-in type validators.

Each validator takes a single value and returns None when it is acceptable,
raising ValidatorError otherwise. Validators are pure: no state, no I/O.
"""

import ipaddress
from typing import Any, Callable, Dict


class ValidatorError(ValueError):
    """A value failed a validation rule."""


ValidatorFunction = Callable[[Any], None]

SHELL_UNSAFE_CHARACTERS = ('`', '$', ';', '|', '&&', '>', '<')


def validate_string(value: Any) -> None:
    if not isinstance(value, str):
        raise ValidatorError(f"value should be a string, got {type(value).__name__}")


def validate_boolean(value: Any) -> None:
    if not isinstance(value, bool):
        raise ValidatorError(f"value should be a boolean, got {type(value).__name__}")


def validate_integer(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidatorError(f"value should be an integer, got {type(value).__name__}")


def validate_float(value: Any) -> None:
    if not isinstance(value, float):
        raise ValidatorError(f"value should be a float, got {type(value).__name__}")


def validate_number(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidatorError(f"value should be a number, got {type(value).__name__}")


def validate_array(value: Any) -> None:
    if not isinstance(value, (list, tuple)):
        raise ValidatorError(f"value should be an array, got {type(value).__name__}")


def validate_hash(value: Any) -> None:
    if not isinstance(value, dict):
        raise ValidatorError(f"value should be a hash, got {type(value).__name__}")


def validate_shellsafe(value: Any) -> None:
    validate_string(value)
    for character in SHELL_UNSAFE_CHARACTERS:
        if character in value:
            raise ValidatorError(f"value should not contain '{character}'")


def validate_ipv4address(value: Any) -> None:
    validate_string(value)
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        raise ValidatorError(f"value should be an ipv4 address, got '{value}'")


def validate_ipv6address(value: Any) -> None:
    validate_string(value)
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        raise ValidatorError(f"value should be an ipv6 address, got '{value}'")


BUILTIN_VALIDATORS: Dict[str, ValidatorFunction] = {
    "string": validate_string,
    "boolean": validate_boolean,
    "integer": validate_integer,
    "float": validate_float,
    "number": validate_number,
    "array": validate_array,
    "hash": validate_hash,
    "shellsafe": validate_shellsafe,
    "ipv4address": validate_ipv4address,
    "ipv6address": validate_ipv6address,
}
