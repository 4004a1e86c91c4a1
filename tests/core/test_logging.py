"""
Tests for the logging module.

Tests verify:
- JSON output carries service metadata and ECS field names
- Level filtering
- LogContext binds and unbinds scoped context
"""

import json
import logging

import pytest
import structlog

from dbspine.core.logging import (
    LogContext,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture
def reset_logging():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


class TestConfigureLogging:
    def test_json_output(self, capsys, reset_logging):
        configure_logging(level="INFO", json_format=True, service="dbspine-test")
        get_logger("dbspine.test").info("database_switched", database="shop")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "database_switched"
        assert record["database"] == "shop"
        assert record["service.name"] == "dbspine-test"
        assert record["log.level"] == "info"
        assert record["logger"] == "dbspine.test"
        assert "@timestamp" in record

    def test_level_filtering(self, capsys, reset_logging):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("dbspine.test")
        log.info("hidden")
        log.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_console_output(self, capsys, reset_logging):
        configure_logging(level="INFO", json_format=False, add_timestamp=False)
        get_logger("dbspine.test").info("adapter_connected", dialect="sqlite")
        assert "adapter_connected" in capsys.readouterr().err


class TestLogContext:
    def test_binds_and_unbinds(self, reset_logging):
        with LogContext(dialect="postgresql", batch_size=3):
            assert structlog.contextvars.get_contextvars() == {
                "dialect": "postgresql",
                "batch_size": 3,
            }
        assert structlog.contextvars.get_contextvars() == {}

    def test_bind_unbind_helpers(self, reset_logging):
        bind_context(database="shop")
        assert structlog.contextvars.get_contextvars()["database"] == "shop"
        unbind_context("database")
        assert "database" not in structlog.contextvars.get_contextvars()
