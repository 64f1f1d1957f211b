"""
Shared pytest configuration for the polaris_ddl test suite.
"""

from tests.fixtures.logging_fixtures import log_capture, restore_root_logger  # noqa: F401
from tests.fixtures.descriptor_fixtures import (  # noqa: F401
    search_root, descriptor_writer, echo_descriptor, uptime_descriptor, reset_platform_version
)
