"""
Tests for version ordering and the host platform version.
"""

import pytest

import polaris_ddl
from polaris_ddl.domain.versioning import (
    DEVELOPMENT_VERSION, VersionComparator, VersionOrdering, get_platform_version,
    set_platform_version, tokenize, versioncmp
)


class TestVersionComparator:
    """Test the token-wise version ordering."""

    @pytest.mark.parametrize("version_a,version_b,expected", [
        ("1.0.0", "2.0.0", VersionOrdering.LESS),
        ("2.0.0", "1.0.0", VersionOrdering.GREATER),
        ("2.0.0", "2.0.0", VersionOrdering.EQUAL),
        ("1.10", "1.9", VersionOrdering.GREATER),
        ("1.0", "1.0.0", VersionOrdering.LESS),
        ("1.0.0-rc1", "1.0.0", VersionOrdering.GREATER),
        ("1.0.0-rc1", "1.0.0-rc2", VersionOrdering.LESS),
        ("1.0-1", "1.0.1", VersionOrdering.LESS),
        ("1.0a", "1.0b", VersionOrdering.LESS),
    ])
    def test_compare(self, version_a, version_b, expected):
        """Test ordering of representative version pairs."""
        assert VersionComparator.compare(version_a, version_b) == expected

    def test_leading_zero_compares_as_string(self):
        """Digit runs with a leading zero are not compared numerically."""
        assert VersionComparator.compare("1.01", "1.1") == VersionOrdering.LESS
        assert VersionComparator.compare("1.09", "1.010") == VersionOrdering.GREATER

    def test_letters_compare_case_insensitively(self):
        """Non-numeric tokens ignore case."""
        assert VersionComparator.compare("1.0-RC", "1.0-rc") == VersionOrdering.EQUAL
        assert VersionComparator.compare("1.0-ALPHA", "1.0-beta") == VersionOrdering.LESS

    def test_antisymmetry(self):
        """Swapping the arguments flips the result."""
        pairs = [("1.2.3", "1.2.10"), ("0.9", "1.0"), ("2.0-beta", "2.0")]
        for a, b in pairs:
            assert VersionComparator.compare(a, b) == -VersionComparator.compare(b, a)

    def test_versioncmp_returns_int(self):
        """Test the plain integer wrapper."""
        assert versioncmp("1.0.0", "2.0.0") == -1
        assert versioncmp("2.0.0", "2.0.0") == 0
        assert type(versioncmp("3.0", "2.0")) is int

    def test_tokenize(self):
        """Versions split into separators, digit runs and other runs."""
        assert tokenize("1.0.0-rc1") == ["1", ".", "0", ".", "0", "-", "rc", "1"]

    def test_satisfies(self):
        """Test minimum version checks."""
        assert VersionComparator.satisfies("2.0.0", "2.0.0")
        assert VersionComparator.satisfies("2.1.0", "2.0.0")
        assert not VersionComparator.satisfies("1.0.0", "2.0.0")

    def test_development_version_satisfies_everything(self):
        """The development sentinel passes any minimum."""
        assert VersionComparator.is_development(DEVELOPMENT_VERSION)
        assert VersionComparator.satisfies(DEVELOPMENT_VERSION, "99.0.0")


class TestPlatformVersion:
    """Test the process-wide host version."""

    def test_defaults_to_package_version(self):
        assert get_platform_version() == polaris_ddl.__version__

    def test_override_and_restore(self):
        set_platform_version("1.2.3")
        assert get_platform_version() == "1.2.3"
        set_platform_version(None)
        assert get_platform_version() == polaris_ddl.__version__

    def test_override_is_stringified(self):
        set_platform_version(2.5)
        assert get_platform_version() == "2.5"
