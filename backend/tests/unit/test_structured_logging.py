"""Tests for structured logging configuration."""
import io
import json
import logging

import pytest

from pairscope.utils.structured_logging import (
    HANDLER_NAME,
    configure_structured_logging,
    get_logger,
)


@pytest.fixture
def log_stream():
    """Capture log output in memory, restoring the session configuration afterwards."""
    stream = io.StringIO()
    yield stream
    configure_structured_logging(log_level="WARNING")


def read_lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestConfigureStructuredLogging:
    """Tests for configure_structured_logging."""

    def test_structlog_events_rendered_as_json(self, log_stream):
        configure_structured_logging(log_level="INFO", stream=log_stream)

        get_logger("pairscope.engine").info("pairs_screened", ranked=3)

        (line,) = read_lines(log_stream)
        assert line["event"] == "pairs_screened"
        assert line["ranked"] == 3
        assert line["level"] == "info"
        assert line["logger"] == "pairscope.engine"
        assert "timestamp" in line

    def test_stdlib_loggers_share_renderer(self, log_stream):
        """Service modules log through logging; their lines carry the same fields."""
        configure_structured_logging(log_level="INFO", stream=log_stream)

        logging.getLogger("pairscope.services.price_source").warning("Attempt 1 failed for MSFT")

        (line,) = read_lines(log_stream)
        assert line["event"] == "Attempt 1 failed for MSFT"
        assert line["level"] == "warning"
        assert line["logger"] == "pairscope.services.price_source"

    def test_level_filtering(self, log_stream):
        configure_structured_logging(log_level="WARNING", stream=log_stream)

        get_logger("pairscope.engine").info("hidden")
        logging.getLogger("pairscope.services").info("hidden too")
        get_logger("pairscope.engine").error("shown")

        assert [line["event"] for line in read_lines(log_stream)] == ["shown"]

    def test_exception_info_rendered(self, log_stream):
        configure_structured_logging(log_level="INFO", stream=log_stream)

        try:
            raise ValueError("bad close")
        except ValueError:
            logging.getLogger("pairscope.services").error("fetch failed", exc_info=True)

        (line,) = read_lines(log_stream)
        assert "ValueError: bad close" in line["exception"]

    def test_reconfigure_replaces_handler(self, log_stream):
        configure_structured_logging(log_level="INFO", stream=io.StringIO())
        configure_structured_logging(log_level="INFO", stream=log_stream)

        handlers = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
        assert len(handlers) == 1

        get_logger("pairscope.engine").info("once")
        assert len(read_lines(log_stream)) == 1

    def test_console_renderer(self, log_stream):
        configure_structured_logging(log_level="INFO", json_logs=False, stream=log_stream)

        get_logger("pairscope.engine").info("correlation_computed", pair="XOM/CVX")

        output = log_stream.getvalue()
        assert "correlation_computed" in output
        assert "pair=XOM/CVX" in output

    def test_quiet_third_party_loggers(self, log_stream):
        configure_structured_logging(log_level="DEBUG", stream=log_stream)

        assert logging.getLogger("httpx").level == logging.WARNING
