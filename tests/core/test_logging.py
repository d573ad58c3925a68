"""Tests for estimator.core.logging: structlog configuration."""

import json
import logging

import pytest
import structlog

from estimator.core.logging import LogContext, bind_context, configure_logging, get_logger, unbind_context


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()


class TestConfigureLogging:
    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True, service="estimator-test")
        get_logger("estimator.test").info("snapshot_saved", file="catalog.json")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "snapshot_saved"
        assert record["file"] == "catalog.json"
        assert record["level"] == "info"
        assert record["logger"] == "estimator.test"
        assert record["service"] == "estimator-test"
        assert "timestamp" in record

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("estimator.test")
        log.info("quiet")
        log.warning("loud")

        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_console_output(self, capsys):
        configure_logging(level="DEBUG", json_format=False)
        get_logger("estimator.test").debug("catalog_loaded", roles=3)
        err = capsys.readouterr().err
        assert "catalog_loaded" in err
        assert "roles" in err

    def test_nothing_on_stdout(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("estimator.test").info("hello")
        assert capsys.readouterr().out == ""


class TestContext:
    def test_log_context_binds_and_unbinds(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("estimator.test")

        with LogContext(request_id="req-1", caller="cli"):
            log.info("inside")
        log.info("outside")

        inside, outside = (json.loads(x) for x in capsys.readouterr().err.strip().splitlines()[-2:])
        assert inside["request_id"] == "req-1"
        assert inside["caller"] == "cli"
        assert "request_id" not in outside

    def test_bind_and_unbind(self, capsys):
        configure_logging(level="INFO", json_format=True)
        bind_context(request_id="abc")
        get_logger("estimator.test").info("bound")
        unbind_context("request_id")
        get_logger("estimator.test").info("unbound")

        bound, unbound = (json.loads(x) for x in capsys.readouterr().err.strip().splitlines()[-2:])
        assert bound["request_id"] == "abc"
        assert "request_id" not in unbound
