"""
Type validators for descriptor inputs.
"""

from .builtin import BUILTIN_VALIDATORS, ValidatorError, ValidatorFunction
from .registry import ValidatorRegistry

__all__ = [
    'BUILTIN_VALIDATORS',
    'ValidatorError',
    'ValidatorFunction',
    'ValidatorRegistry',
]
