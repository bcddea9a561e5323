"""Tests for the logging helpers."""

import json
import logging

import pytest

from sqlcompose.utils.logging import (
    CorrelationIDFilter,
    StructuredFormatter,
    configure_logging,
    get_correlation_id,
    get_logger,
    log_with_context,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def reset_correlation_id():
    set_correlation_id(None)
    yield
    set_correlation_id(None)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("sqlcompose.test", logging.INFO, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_prefixes_namespace():
    logger = get_logger("builder")

    assert logger.name == "sqlcompose.builder"
    assert any(isinstance(f, CorrelationIDFilter) for f in logger.filters)
    assert get_logger().name == "sqlcompose"


def test_structured_formatter_outputs_json():
    """Test records render as JSON lines including extra fields."""
    set_correlation_id("req-1")

    payload = json.loads(StructuredFormatter().format(_record(extra_fields={"rows": 3})))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "req-1"
    assert payload["rows"] == 3


def test_correlation_filter_sets_attribute():
    set_correlation_id("abc")
    record = _record()

    assert CorrelationIDFilter().filter(record)
    assert record.correlation_id == "abc"
    assert get_correlation_id() == "abc"


def test_log_with_context(caplog):
    logger = get_logger("tests.context")

    with caplog.at_level(logging.DEBUG, logger="sqlcompose.tests.context"):
        log_with_context(logger, logging.DEBUG, "executed", sql="SELECT 1")

    assert caplog.records[-1].extra_fields == {"sql": "SELECT 1"}


def test_configure_logging_writes_json_lines(capsys):
    """Test the structured style emits one JSON object per record."""
    root = logging.getLogger("sqlcompose")
    try:
        handler = configure_logging(level="DEBUG", format_style="structured")
        get_logger("tests.configured").debug("ready")

        assert root.level == logging.DEBUG
        assert root.handlers == [handler]
        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert lines[0]["message"] == "sqlcompose logging configured"
        assert lines[0]["log_level"] == "DEBUG"
        assert lines[-1]["message"] == "ready"
    finally:
        root.handlers.clear()
        root.propagate = True
        root.setLevel(logging.NOTSET)
