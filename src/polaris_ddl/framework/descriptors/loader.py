"""
Descriptor Loader Module

Locates descriptor files across an ordered list of search roots.
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ...infrastructure.exceptions import DescriptorErrorCode, DescriptorNotFoundError
from ...infrastructure.observability import get_logger

logger = get_logger(__name__)

DEFAULT_NAMESPACE = "polaris"
DEFAULT_EXTENSION = "ddl"

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class DescriptorLoader:
    """
    Finds ``<root>/<namespace>/<plugin_kind>/<plugin_name>.<extension>``.

    Roots are checked in the order given and the first existing file wins.
    """

    def __init__(
        self,
        search_roots: Iterable[Union[str, Path]],
        namespace: str = DEFAULT_NAMESPACE,
        extension: str = DEFAULT_EXTENSION
    ):
        self.search_roots: List[Path] = [Path(root) for root in search_roots]
        self.namespace = namespace
        self.extension = extension.lstrip('.')

    @staticmethod
    def is_valid_identifier(value: str) -> bool:
        """Plugin names and kinds may not contain path separators or traversal."""
        return bool(value) and bool(_IDENTIFIER_PATTERN.match(value))

    def candidate_path(self, root: Path, plugin_name: str, plugin_kind: str) -> Path:
        return root / self.namespace / plugin_kind / f"{plugin_name}.{self.extension}"

    def find(self, plugin_name: str, plugin_kind: str) -> Optional[Path]:
        """Return the first matching descriptor path, or None."""
        for identifier in (plugin_name, plugin_kind):
            if not self.is_valid_identifier(identifier):
                logger.warning(
                    f"Refusing to look up descriptor for invalid identifier '{identifier}'",
                    extra={"code": DescriptorErrorCode.INVALID_PLUGIN_IDENTIFIER.value}
                )
                return None

        for root in self.search_roots:
            candidate = self.candidate_path(root, plugin_name, plugin_kind)
            logger.debug(f"Checking for {plugin_kind} descriptor '{plugin_name}' at {candidate}")
            if candidate.is_file():
                logger.debug(
                    f"Found {plugin_name} descriptor at {candidate}",
                    extra={"code": DescriptorErrorCode.DESCRIPTOR_FOUND.value, "path": str(candidate)}
                )
                return candidate

        return None

    def locate(self, plugin_name: str, plugin_kind: str) -> Path:
        """Like ``find`` but raises DescriptorNotFoundError when nothing matches."""
        path = self.find(plugin_name, plugin_kind)
        if path is None:
            raise DescriptorNotFoundError(
                f"Can't find descriptor for {plugin_kind} plugin '{plugin_name}'",
                search_roots=[str(root) for root in self.search_roots],
                plugin_kind=plugin_kind,
                plugin_name=plugin_name
            )
        return path
