"""
Version comparison and the host platform version.

Versions are compared token by token. A version string is split into ``-``,
``.``, runs of digits and runs of anything else:

- equal tokens are skipped
- ``-`` sorts before any other token, then ``.``
- two digit runs compare numerically, unless either has a leading zero, in
  which case they compare as case-insensitive strings
- any other pair compares as case-insensitive strings

When one version runs out of tokens the two full strings are compared
lexically, so ``1.0 < 1.0.0`` and ``1.0.0-rc1 > 1.0.0``.
"""

import re
from enum import IntEnum
from typing import List, Optional

from .. import __version__

DEVELOPMENT_VERSION = "@DEVELOPMENT_VERSION@"

_TOKEN_PATTERN = re.compile(r"[-.]|\d+|[^-.\d]+")

_platform_version: Optional[str] = None


class VersionOrdering(IntEnum):
    """Result of comparing two versions."""
    LESS = -1
    EQUAL = 0
    GREATER = 1


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def tokenize(version: str) -> List[str]:
    return _TOKEN_PATTERN.findall(version)


class VersionComparator:
    """Total ordering over dotted version strings with optional suffix segments."""

    @staticmethod
    def compare(version_a: str, version_b: str) -> VersionOrdering:
        """Compare two version strings."""
        a_tokens = tokenize(str(version_a))
        b_tokens = tokenize(str(version_b))

        for a, b in zip(a_tokens, b_tokens):
            if a == b:
                continue
            if a == '-':
                return VersionOrdering.LESS
            if b == '-':
                return VersionOrdering.GREATER
            if a == '.':
                return VersionOrdering.LESS
            if b == '.':
                return VersionOrdering.GREATER
            if a.isdigit() and b.isdigit():
                if a.startswith('0') or b.startswith('0'):
                    return VersionOrdering(_cmp(a.upper(), b.upper()))
                return VersionOrdering(_cmp(int(a), int(b)))
            return VersionOrdering(_cmp(a.upper(), b.upper()))

        return VersionOrdering(_cmp(str(version_a), str(version_b)))

    @staticmethod
    def is_development(version: str) -> bool:
        return version == DEVELOPMENT_VERSION

    @classmethod
    def satisfies(cls, platform_version: str, minimum: str) -> bool:
        """
        Check that ``platform_version`` is at least ``minimum``.

        A development build satisfies every requirement; callers are expected to
        warn when relying on that.
        """
        if cls.is_development(platform_version):
            return True
        return cls.compare(platform_version, minimum) >= VersionOrdering.EQUAL


def versioncmp(version_a: str, version_b: str) -> int:
    """Compare two versions returning -1, 0 or 1."""
    return int(VersionComparator.compare(version_a, version_b))


def get_platform_version() -> str:
    """Return the process-wide host platform version."""
    return _platform_version if _platform_version is not None else __version__


def set_platform_version(version: Optional[str]) -> None:
    """Override the process-wide host platform version; None restores the package version."""
    global _platform_version
    _platform_version = str(version) if version is not None else None
