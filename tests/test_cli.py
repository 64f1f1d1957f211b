"""
Tests for the polaris-ddl command line tool.
"""

import json
import os
import pytest
import yaml

from polaris_ddl import cli


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch, tmp_path):
    """Keep outer POLARIS_DDL_ settings out and send logs to a file."""
    for key in list(os.environ):
        if key.startswith("POLARIS_DDL_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("POLARIS_DDL_FRAMEWORK_LOGGING_CONFIG_OUTPUT", "file")
    monkeypatch.setenv("POLARIS_DDL_FRAMEWORK_LOGGING_CONFIG_FILE_PATH", str(tmp_path / "cli.log"))


class TestCheckCommand:
    """Test loading and summarising descriptors."""

    def test_check_text(self, search_root, echo_descriptor, capsys):
        exit_code = cli.main(["--search-path", str(search_root), "check", "agent", "echo"])

        out = capsys.readouterr().out
        assert exit_code == cli.EXIT_OK
        assert f"agent/echo: {echo_descriptor}" in out
        assert "action echo: 3 input(s), 1 output(s)" in out

    def test_check_json(self, search_root, echo_descriptor, capsys):
        exit_code = cli.main(["--search-path", str(search_root), "--format", "json", "check", "agent", "echo"])

        result = json.loads(capsys.readouterr().out)
        assert exit_code == cli.EXIT_OK
        assert result["ok"] is True
        assert list(result["descriptor"]["entities"]) == ["echo", "ping"]

    def test_check_not_found(self, search_root, capsys):
        exit_code = cli.main(["--search-path", str(search_root), "--format", "json", "check", "agent", "missing"])

        result = json.loads(capsys.readouterr().out)
        assert exit_code == cli.EXIT_DESCRIPTOR_ERROR
        assert result["ok"] is False
        assert result["error"]["error_code"] == "DESCRIPTOR_NOT_FOUND"

    def test_check_malformed(self, search_root, descriptor_writer, capsys):
        descriptor_writer("agent", "broken", "- metadata:\n    name: broken\n")
        exit_code = cli.main(["--search-path", str(search_root), "check", "agent", "broken"])

        assert exit_code == cli.EXIT_DESCRIPTOR_ERROR
        assert "MISSING_METADATA_KEY" in capsys.readouterr().err

    def test_check_valid_arguments(self, search_root, echo_descriptor):
        exit_code = cli.main([
            "--search-path", str(search_root), "check", "agent", "echo",
            "--action", "echo", "--arg", "message=hello", "--arg", "count=3"
        ])
        assert exit_code == cli.EXIT_OK

    def test_check_invalid_arguments(self, search_root, echo_descriptor, capsys):
        exit_code = cli.main([
            "--search-path", str(search_root), "--format", "json", "check", "agent", "echo",
            "--action", "echo", "--arg", "message=HELLO"
        ])

        result = json.loads(capsys.readouterr().out)
        assert exit_code == cli.EXIT_DESCRIPTOR_ERROR
        assert result["error"]["error_code"] == "INPUT_VALIDATION_FAILED"
        assert result["error"]["context"]["argument"] == "message"

    def test_check_missing_required_argument(self, search_root, echo_descriptor):
        exit_code = cli.main(["--search-path", str(search_root), "check", "agent", "echo", "--action", "echo"])
        assert exit_code == cli.EXIT_DESCRIPTOR_ERROR

    def test_data_query_arguments_default_entity(self, search_root, uptime_descriptor):
        exit_code = cli.main(["--search-path", str(search_root), "check", "data", "uptime", "--arg", "query=hours"])
        assert exit_code == cli.EXIT_OK


class TestHelpCommand:
    """Test rendering help."""

    def test_help(self, search_root, echo_descriptor, capsys):
        exit_code = cli.main(["--search-path", str(search_root), "help", "agent", "echo"])

        out = capsys.readouterr().out
        assert exit_code == cli.EXIT_OK
        assert "ACTIONS:" in out
        assert "Echo a message back" in out

    def test_help_missing_template(self, search_root, echo_descriptor, capsys):
        exit_code = cli.main(["--search-path", str(search_root), "help", "agent", "echo", "--template", "nope.yaml"])

        assert exit_code == cli.EXIT_CONFIGURATION_ERROR
        assert "HELP_TEMPLATE_NOT_FOUND" in capsys.readouterr().err


class TestConfiguration:
    """Test configuration handling in the CLI."""

    def test_config_file(self, search_root, echo_descriptor, tmp_path, capsys):
        config_path = tmp_path / "polaris_ddl.yaml"
        config_path.write_text(yaml.dump({"framework": {"plugin_search_paths": [str(search_root)]}}))

        exit_code = cli.main(["--config", str(config_path), "check", "agent", "echo"])

        assert exit_code == cli.EXIT_OK
        assert "agent/echo" in capsys.readouterr().out

    def test_missing_config_file(self, capsys):
        exit_code = cli.main(["--config", "/nonexistent/polaris_ddl.yaml", "check", "agent", "echo"])

        assert exit_code == cli.EXIT_CONFIGURATION_ERROR
        assert "CONFIG_FILE_NOT_FOUND" in capsys.readouterr().err

    def test_logs_written_to_configured_file(self, search_root, echo_descriptor, tmp_path):
        cli.main(["--search-path", str(search_root), "check", "agent", "echo"])

        records = [json.loads(line) for line in (tmp_path / "cli.log").read_text().splitlines()]
        assert any(r.get("extra", {}).get("code") == "DESCRIPTOR_LOADED" for r in records)
        assert all(r.get("correlation_id") for r in records)


class TestArgumentParsing:
    """Test KEY=VALUE parsing."""

    def test_values_are_yaml_scalars(self):
        assert cli.parse_arguments(["count=3", "flag=true", "name=web01", "empty="]) == {
            "count": 3, "flag": True, "name": "web01", "empty": ""
        }

    def test_malformed_pair(self):
        with pytest.raises(cli.ConfigurationError):
            cli.parse_arguments(["no-equals-sign"])
