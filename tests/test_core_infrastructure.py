"""
Tests for the exception hierarchy and the structured logging system.
"""

import io
import json
import pytest

from polaris_ddl.framework.configuration import LoggingConfiguration
from polaris_ddl.infrastructure.exceptions import (
    PolarisException, ConfigurationError, DescriptorError, DescriptorErrorCode,
    DescriptorNotFoundError, MalformedDescriptorError, UnsupportedRequirementError,
    VersionTooOldError, InputValidationError
)
from polaris_ddl.infrastructure.observability import (
    ConsoleLogHandler, HumanReadableFormatter, JSONLogFormatter, LogLevel,
    configure_logging, get_correlation_id, get_logger
)
from tests.fixtures.logging_fixtures import CapturingLogHandler


class TestExceptions:
    """Test the structured exception hierarchy."""

    def test_polaris_exception_to_dict(self):
        cause = ValueError("bad value")
        error = PolarisException("Something failed", "SOME_CODE", context={"key": "value"}, cause=cause)

        data = error.to_dict()
        assert data["error_type"] == "PolarisException"
        assert data["error_code"] == "SOME_CODE"
        assert data["context"] == {"key": "value"}
        assert data["cause"] == "bad value"
        assert data["correlation_id"]
        assert data["timestamp"]

    def test_descriptor_errors_share_a_base(self):
        for error_class in (DescriptorNotFoundError, UnsupportedRequirementError,
                            VersionTooOldError, InputValidationError):
            assert issubclass(error_class, DescriptorError)
        assert issubclass(MalformedDescriptorError, DescriptorError)
        assert issubclass(DescriptorError, PolarisException)
        assert not issubclass(ConfigurationError, DescriptorError)

    def test_descriptor_error_context(self):
        error = MalformedDescriptorError(
            "Input 'a' needs a 'type' property",
            code=DescriptorErrorCode.MISSING_INPUT_PROPERTY,
            path="/plugins/polaris/agent/echo.ddl",
            entity="echo",
            argument="a",
            property_name="type",
            plugin_kind="agent",
            plugin_name="echo"
        )

        assert error.error_code == "MISSING_INPUT_PROPERTY"
        assert error.context == {
            "plugin_kind": "agent",
            "plugin_name": "echo",
            "path": "/plugins/polaris/agent/echo.ddl",
            "entity": "echo",
            "argument": "a",
            "property": "type",
        }

    def test_version_too_old_context(self):
        error = VersionTooOldError("too old", required_version="2.0.0", platform_version="1.0.0")
        assert error.code == DescriptorErrorCode.VERSION_TOO_OLD
        assert error.context["required_version"] == "2.0.0"

    def test_configuration_error_code(self):
        error = ConfigurationError("missing", config_path="/etc/x.yaml", error_code="CONFIG_FILE_NOT_FOUND")
        assert error.error_code == "CONFIG_FILE_NOT_FOUND"
        assert error.context["config_path"] == "/etc/x.yaml"

    def test_error_codes_are_their_own_names(self):
        for code in DescriptorErrorCode:
            assert code.value == code.name


class TestStructuredLogging:
    """Test logger hierarchy, context and formatting."""

    def test_records_reach_ancestor_handlers(self):
        parent = get_logger("polaris_ddl.tests_hierarchy")
        child = get_logger("polaris_ddl.tests_hierarchy.child")
        handler = CapturingLogHandler()
        parent.add_handler(handler)
        try:
            child.warning("propagated")
        finally:
            parent.remove_handler(handler)

        assert child.parent is parent
        assert handler.has_record_with_message("propagated")
        assert handler.records[0]["logger"] == "polaris_ddl.tests_hierarchy.child"

    def test_level_is_inherited(self, log_capture):
        child = get_logger("polaris_ddl.tests_level.child")
        assert child.effective_level() == LogLevel.DEBUG
        child.debug("visible")
        assert log_capture.has_record_with_message("visible")

    def test_own_level_filters(self, log_capture):
        child = get_logger("polaris_ddl.tests_filter")
        child.set_level(LogLevel.ERROR)
        try:
            child.warning("hidden")
            child.error("shown")
        finally:
            child.set_level(None)

        assert not log_capture.has_record_with_message("hidden")
        assert log_capture.has_record_with_message("shown")

    def test_descriptor_context(self, log_capture):
        logger = get_logger("polaris_ddl.tests_context")
        with logger.descriptor_context("agent", "echo"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = log_capture.records
        assert inside["plugin_kind"] == "agent"
        assert inside["plugin_name"] == "echo"
        assert "plugin_kind" not in outside

    def test_correlation_context(self, log_capture):
        logger = get_logger("polaris_ddl.tests_correlation")
        with logger.correlation_context("abc-123") as correlation_id:
            assert get_correlation_id() == "abc-123"
            logger.info("tagged")
        assert correlation_id == "abc-123"
        assert get_correlation_id() is None
        assert log_capture.records[0]["correlation_id"] == "abc-123"

    def test_error_with_exception_info(self, log_capture):
        get_logger("polaris_ddl.tests_exc").error("failed", exc_info=KeyError("k"))
        assert log_capture.records[0]["extra"]["exception"]["type"] == "KeyError"

    def test_human_readable_formatter(self):
        line = HumanReadableFormatter().format({
            "timestamp": "t", "level": "INFO", "message": "Loaded",
            "plugin_kind": "agent", "plugin_name": "echo", "extra": {"code": "DESCRIPTOR_LOADED"}
        })
        assert line == "[t] INFO: Loaded [plugin=agent/echo] [code=DESCRIPTOR_LOADED]"

    def test_console_handler_writes_json(self):
        stream = io.StringIO()
        ConsoleLogHandler(JSONLogFormatter(), stream).emit({"message": "hello", "level": "INFO"})
        assert json.loads(stream.getvalue()) == {"message": "hello", "level": "INFO"}

    def test_configure_logging_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "polaris_ddl.log"
        root = configure_logging(LoggingConfiguration(level="WARNING", format="json", output="file",
                                                      file_path=str(log_file)))

        get_logger("polaris_ddl.tests_file").info("dropped")
        get_logger("polaris_ddl.tests_file").warning("kept")

        assert root.effective_level() == LogLevel.WARNING
        lines = log_file.read_text().splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["kept"]

    @pytest.mark.parametrize("output,expected", [("console", 1), ("both", 2)])
    def test_configure_logging_handlers(self, tmp_path, output, expected):
        root = configure_logging(LoggingConfiguration(output=output, file_path=str(tmp_path / "x.log")))
        assert len(root.handlers) == expected
