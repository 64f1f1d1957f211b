#!/usr/bin/env python3
"""
polaris-ddl command line tool

Loads a plugin descriptor from the configured search paths and either
summarises it or renders its help page.

Usage examples:
  polaris-ddl check agent echo
  polaris-ddl check agent echo --format json
  polaris-ddl check agent echo --action echo --arg message=hello
  polaris-ddl help agent echo --template /etc/polaris/rpc-help.yaml
  polaris-ddl --config polaris_ddl.yaml --search-path ./plugins help data uptime

Exit codes:
  0  descriptor loaded (and arguments validated)
  1  descriptor not found, malformed, unsatisfied or arguments invalid
  2  configuration or internal error
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import yaml

from . import __version__
from .domain.models import DescriptorRegistry
from .framework.configuration import (
    ConfigurationBuilder, FrameworkConfiguration
)
from .framework.descriptors import DescriptorManager
from .infrastructure.exceptions import ConfigurationError, DescriptorError, PolarisException
from .infrastructure.observability import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_DESCRIPTOR_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="polaris-ddl",
        description="Load and inspect POLARIS plugin descriptors"
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--config", type=str, help="YAML configuration file")
    ap.add_argument("--search-path", action="append", default=None,
                    help="Descriptor search root; repeat to search several roots in order")
    ap.add_argument("--format", choices=["text", "json"], default="text", help="Output format")

    sub = ap.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Load a descriptor and summarise it")
    check.add_argument("kind", help="Plugin kind, e.g. agent")
    check.add_argument("name", help="Plugin name")
    check.add_argument("--action", help="Entity to validate --arg values against")
    check.add_argument("--arg", action="append", default=[], metavar="KEY=VALUE",
                       help="Argument to validate; values are read as YAML scalars")

    help_cmd = sub.add_parser("help", help="Render help for a descriptor")
    help_cmd.add_argument("kind", help="Plugin kind, e.g. agent")
    help_cmd.add_argument("name", help="Plugin name")
    help_cmd.add_argument("--template", help="Template name or absolute path")

    return ap


def load_config(args) -> FrameworkConfiguration:
    builder = ConfigurationBuilder()
    if args.config:
        builder.add_yaml_source(args.config)
    return builder.with_search_paths(args.search_path or ()).build_framework_config()


def parse_arguments(pairs: List[str]) -> Dict[str, Any]:
    arguments: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ConfigurationError(
                f"Arguments must be given as KEY=VALUE, got '{pair}'",
                error_code="INVALID_ARGUMENT_SYNTAX"
            )
        try:
            arguments[key] = yaml.safe_load(value) if value else ""
        except yaml.YAMLError:
            arguments[key] = value
    return arguments


def summarise(registry: DescriptorRegistry) -> str:
    lines = [
        f"{registry.plugin_kind}/{registry.plugin_name}: {registry.path}",
        f"  {registry.metadata.get('name')} {registry.metadata.get('version')}"
        f" - {registry.metadata.get('description')}",
    ]
    for kind, version in registry.requirements.items():
        lines.append(f"  requires {kind} >= {version}")
    for entity in registry.entities.values():
        lines.append(
            f"  {entity.kind} {entity.name}: {len(entity.inputs)} input(s), {len(entity.outputs)} output(s)"
        )
    return "\n".join(lines)


def report_error(error: PolarisException, output_format: str) -> None:
    if output_format == "json":
        print(json.dumps({"ok": False, "error": error.to_dict()}, indent=2, default=str))
    else:
        print(f"ERROR {error.error_code}: {error.message}", file=sys.stderr)


def run(args) -> int:
    config = load_config(args)
    configure_logging(config.logging_config)
    manager = DescriptorManager.from_config(config)

    with logger.correlation_context():
        registry = manager.load(args.name, args.kind)

        if args.command == "help":
            print(manager.render_help(registry, args.template))
            return EXIT_OK

        if args.action or args.arg:
            entity_name = args.action or "data"
            arguments = parse_arguments(args.arg)
            manager.validate_request(registry, entity_name, arguments)

        if args.format == "json":
            print(json.dumps({"ok": True, "descriptor": registry.to_dict()}, indent=2, default=str))
        else:
            print(summarise(registry))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except DescriptorError as e:
        report_error(e, args.format)
        return EXIT_DESCRIPTOR_ERROR
    except PolarisException as e:
        report_error(e, args.format)
        return EXIT_CONFIGURATION_ERROR
    except Exception as e:
        logger.critical("Unexpected error while processing descriptor", exc_info=e)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
