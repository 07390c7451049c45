"""Tests for structured logging."""

import json

import pytest
import structlog

from comm_relay.observability.logging import (
    ConsoleFormatter,
    CorrelationIDProcessor,
    JSONFormatter,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StructuredFormatter,
    add_error_code,
    build_processors,
    clear_correlation_id,
    configure_logging,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    get_logging_config,
    set_correlation_id,
)
from comm_relay.resilience.exceptions import (
    AllBackendsFailedException,
    RateLimitExceededException,
)


class TestFormatters:
    """Test log renderers."""

    @pytest.fixture
    def event_dict(self):
        """Create a failover event."""
        return {
            "event": "Dispatch failed, failing over to next backend",
            "logger": "comm_relay",
            "backend_index": 1,
            "errors": ["timeout"],
        }

    def test_json_formatter(self, event_dict):
        """Test JSON output carries the event and its fields."""
        output = json.loads(JSONFormatter()(None, "error", event_dict))

        assert output["event"] == "Dispatch failed, failing over to next backend"
        assert output["level"] == "ERROR"
        assert output["backend_index"] == 1
        assert "timestamp" in output

    def test_console_formatter_without_colors(self, event_dict):
        """Test console output is readable and plain without colors."""
        output = ConsoleFormatter(colors=False)(None, "warning", event_dict)

        assert output.startswith("WARNING [comm_relay]")
        assert "Dispatch failed" in output
        assert "backend_index=1" in output
        assert 'errors=["timeout"]' in output
        assert "\x1b[" not in output

    def test_console_formatter_with_colors(self, event_dict):
        """Test console output is coloured by level."""
        output = ConsoleFormatter(colors=True)(None, "error", event_dict)
        assert "\x1b[" in output

    def test_structured_formatter(self, event_dict):
        """Test key=value output in a fixed order."""
        output = StructuredFormatter()(None, "info", event_dict)

        assert output.split(" | ")[:3] == [
            "level=INFO",
            "logger=comm_relay",
            "message=Dispatch failed, failing over to next backend",
        ]
        assert "backend_index=1" in output


class TestCorrelation:
    """Test correlation ID propagation."""

    def teardown_method(self):
        clear_correlation_id()

    def test_set_and_clear(self):
        """Test setting and clearing the current ID."""
        set_correlation_id("abc")
        assert get_correlation_id() == "abc"
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_generated_ids_are_unique(self):
        """Test generated IDs differ."""
        assert generate_correlation_id() != generate_correlation_id()

    def test_scope_restores_previous(self):
        """Test a scope restores the outer ID on exit."""
        set_correlation_id("outer")
        with correlation_scope("inner") as correlation_id:
            assert correlation_id == "inner"
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"

    def test_scope_generates_id(self):
        """Test a scope without an ID generates one."""
        with correlation_scope() as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id

    def test_processor_adds_id(self):
        """Test the processor adds the current ID to events."""
        processor = CorrelationIDProcessor()
        with correlation_scope("req-1"):
            event = processor(None, "info", {"event": "sent"})
        assert event["correlation_id"] == "req-1"

    def test_processor_keeps_explicit_id(self):
        """Test an explicitly bound ID is not overwritten."""
        processor = CorrelationIDProcessor()
        with correlation_scope("req-1"):
            event = processor(None, "info", {"correlation_id": "explicit"})
        assert event["correlation_id"] == "explicit"


class TestErrorCodeProcessor:
    """Test error codes stamped on logged exceptions."""

    def test_exception_instance(self):
        """Test an exception passed as exc_info is recognised."""
        error = RateLimitExceededException("sms:0", retry_after=1.5)
        event = add_error_code(None, "warning", {"exc_info": error})
        assert event["error_code"] == "rate_limit_error"

    def test_exc_info_tuple(self):
        """Test an exc_info tuple is recognised."""
        error = AllBackendsFailedException("sms", [RuntimeError("down")])
        event = add_error_code(
            None, "error", {"exc_info": (type(error), error, None)}
        )
        assert event["error_code"] == "all_backends_failed"

    def test_exc_info_true_inside_handler(self):
        """Test exc_info=True resolves the exception being handled."""
        try:
            raise AllBackendsFailedException("sms", [])
        except AllBackendsFailedException:
            event = add_error_code(None, "exception", {"exc_info": True})
        assert event["error_code"] == "all_backends_failed"

    def test_other_errors_are_left_alone(self):
        """Test foreign exceptions and plain events get no code."""
        assert "error_code" not in add_error_code(
            None, "error", {"exc_info": RuntimeError("down")}
        )
        assert "error_code" not in add_error_code(None, "info", {"event": "sent"})

    def test_explicit_code_is_kept(self):
        """Test a code bound by the caller is not overwritten."""
        error = RateLimitExceededException("sms:0")
        event = add_error_code(
            None, "warning", {"exc_info": error, "error_code": "custom"}
        )
        assert event["error_code"] == "custom"


class TestLoggingConfig:
    """Test logging configuration."""

    def test_round_trip_dict(self):
        """Test conversion to and from a dictionary."""
        config = LoggingConfig(
            level=LogLevel.DEBUG, format_type=LogFormat.CONSOLE, log_file="relay.log"
        )
        data = config.to_dict()
        restored = LoggingConfig.from_dict(data)

        assert data["level"] == "DEBUG"
        assert restored == config

    @pytest.mark.parametrize(
        "format_type,renderer",
        [
            (LogFormat.JSON, JSONFormatter),
            (LogFormat.CONSOLE, ConsoleFormatter),
            (LogFormat.STRUCTURED, StructuredFormatter),
        ],
    )
    def test_renderer_follows_format(self, format_type, renderer):
        """Test the chain ends with the renderer for the format."""
        processors = build_processors(LoggingConfig(format_type=format_type))
        assert isinstance(processors[-1], renderer)

    def test_error_code_precedes_exception_formatting(self):
        """Test error codes are read before exc_info is rendered away."""
        processors = build_processors(LoggingConfig())
        position = processors.index(add_error_code)
        assert structlog.processors.format_exc_info in processors[position + 1 :]

    def test_correlation_is_optional(self):
        """Test correlation IDs are only added when enabled."""
        enabled = build_processors(LoggingConfig())
        disabled = build_processors(LoggingConfig(enable_correlation=False))

        assert any(isinstance(p, CorrelationIDProcessor) for p in enabled)
        assert not any(isinstance(p, CorrelationIDProcessor) for p in disabled)

    def test_configure_logging_records_config(self):
        """Test the active configuration is remembered."""
        previous = get_logging_config()
        config = LoggingConfig(level=LogLevel.ERROR, format_type=LogFormat.STRUCTURED)
        try:
            configure_logging(config)
            assert get_logging_config() is config
        finally:
            if previous is not None:
                configure_logging(previous)
