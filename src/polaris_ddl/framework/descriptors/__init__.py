"""
Plugin descriptors: locating, interpreting, validating against and rendering help for them.
"""

from .loader import DescriptorLoader
from .interpreter import DescriptorInterpreter, DescriptorBuilder, EntityHandle, DESCRIPTOR_SCHEMA
from .arguments import ArgumentValidator
from .help import HelpRenderer, HelpTemplate, TemplateHelpRenderer
from .manager import DescriptorManager

__all__ = [
    'DescriptorLoader',
    'DescriptorInterpreter',
    'DescriptorBuilder',
    'EntityHandle',
    'DESCRIPTOR_SCHEMA',
    'ArgumentValidator',
    'HelpRenderer',
    'HelpTemplate',
    'TemplateHelpRenderer',
    'DescriptorManager',
]
