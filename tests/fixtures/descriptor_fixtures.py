"""
Descriptor fixtures: sample descriptor documents and temporary search roots.
"""

import textwrap
import pytest
from pathlib import Path
from typing import Callable

from polaris_ddl.domain.versioning import set_platform_version


ECHO_AGENT = """
- metadata:
    name: echo
    description: Echo service for testing
    author: POLARIS Development Team
    license: Apache-2.0
    version: "1.0.0"
    url: https://example.org/echo
    timeout: 10
- usage: Echo messages back to the caller
- action:
    name: echo
    description: Echo a message back
    display: always
- input:
    message:
      prompt: Message
      description: The message to echo
      type: string
      validation: '^[a-z ]+$'
      maxlength: 20
    mode:
      prompt: Mode
      description: How to echo
      type: list
      list: [plain, loud]
      optional: true
      default: plain
    count:
      prompt: Count
      description: Number of repetitions
      type: integer
      optional: true
- output:
    message:
      description: The echoed message
      display_as: Message
- action:
    name: ping
    description: Check liveness
- output:
    pong:
      description: Pong reply
      display_as: Reply
"""

UPTIME_DATA = """
- metadata:
    name: uptime
    description: Host uptime data source
    author: POLARIS Development Team
    license: Apache-2.0
    version: "0.2.0"
    url: https://example.org/uptime
    timeout: 5
- dataquery:
    description: Host uptime
- input:
    query:
      prompt: Unit
      description: Unit to report uptime in
      type: string
      validation: shellsafe
      maxlength: 0
- output:
    seconds:
      description: Uptime in seconds
      display_as: Seconds
"""

METADATA_ONLY = """
- metadata:
    name: {name}
    description: Minimal descriptor
    author: POLARIS Development Team
    license: Apache-2.0
    version: "1.0.0"
    url: https://example.org/{name}
    timeout: 1
"""


def metadata_fields(**overrides):
    """A complete metadata mapping with optional overrides."""
    fields = {
        "name": "echo",
        "description": "Echo service for testing",
        "author": "POLARIS Development Team",
        "license": "Apache-2.0",
        "version": "1.0.0",
        "url": "https://example.org/echo",
        "timeout": 10,
    }
    fields.update(overrides)
    return fields


def write_descriptor(root: Path, kind: str, name: str, content: str,
                     namespace: str = "polaris", extension: str = "ddl") -> Path:
    """Write a descriptor into the standard layout under ``root``."""
    path = Path(root) / namespace / kind / f"{name}.{extension}"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture
def search_root(tmp_path) -> Path:
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture
def descriptor_writer(search_root) -> Callable[..., Path]:
    """Write descriptors into ``search_root`` by default."""
    def _write(kind: str, name: str, content: str, root: Path = None, **kwargs) -> Path:
        return write_descriptor(root or search_root, kind, name, content, **kwargs)
    return _write


@pytest.fixture
def echo_descriptor(descriptor_writer) -> Path:
    return descriptor_writer("agent", "echo", ECHO_AGENT)


@pytest.fixture
def uptime_descriptor(descriptor_writer) -> Path:
    return descriptor_writer("data", "uptime", UPTIME_DATA)


@pytest.fixture(autouse=True)
def reset_platform_version():
    """Each test starts with the package version as the host platform version."""
    set_platform_version(None)
    yield
    set_platform_version(None)
