"""Unit tests for logging utilities."""

from __future__ import annotations

import asyncio
import logging

import pytest

from coupon_lookup.core import logger as logger_module


def test_environment_from_environ_detects_serverless_and_level() -> None:
    env = logger_module.Environment.from_environ(
        {"VERCEL": "1", "LOG_LEVEL": "debug"}
    )
    assert env.is_serverless is True
    assert env.log_level == "DEBUG"
    assert env.send_to_logfire is False


def test_environment_defaults() -> None:
    env = logger_module.Environment.from_environ({"LOGFIRE_TOKEN": "t"})
    assert env.is_serverless is False
    assert env.log_level == "INFO"
    assert env.send_to_logfire is True


def test_resolve_log_level_unknown_defaults_info() -> None:
    assert logger_module._resolve_log_level("nope") == logging.INFO


def test_expects_logger_arg() -> None:
    def f(x, logger):
        _ = logger
        return x

    def g(x):
        return x

    assert logger_module._expects_logger_arg(f) is True
    assert logger_module._expects_logger_arg(g) is False


def test_log_with_context_injects_logger_adapter() -> None:
    @logger_module.log_with_context(operation="op")
    def f(x: int, logger=None):
        assert isinstance(logger, logging.LoggerAdapter)
        return (x, logger.extra["operation"])

    assert f(1) == (1, "op")


def test_log_with_context_logs_and_reraises(caplog) -> None:
    @logger_module.log_with_context(operation="op")
    def boom() -> None:
        raise RuntimeError("bad")

    with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError):
        boom()

    assert "Error in boom: bad" in caplog.text


@pytest.mark.asyncio
async def test_async_log_with_context_injects_logger_adapter() -> None:
    @logger_module.async_log_with_context(operation="op")
    async def f(x: int, logger=None):
        await asyncio.sleep(0)
        assert isinstance(logger, logging.LoggerAdapter)
        return (x, logger.extra["operation"])

    assert await f(1) == (1, "op")


def test_setup_logging_is_idempotent(monkeypatch) -> None:
    calls = {"configure": 0}

    class _Handler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            _ = record

    def _configure(**kwargs):
        _ = kwargs
        calls["configure"] += 1

    monkeypatch.setattr(logger_module.logfire, "configure", _configure)
    monkeypatch.setattr(
        logger_module.logfire, "LogfireLoggingHandler", _Handler
    )
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level

    logger_module._logging_state.configured = False
    try:
        env = logger_module.Environment(is_serverless=False, log_level="DEBUG")
        logger_module.setup_logging(env)
        logger_module.setup_logging(env)

        assert calls["configure"] == 1
        assert sum(isinstance(h, _Handler) for h in root.handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = original_handlers
        root.setLevel(original_level)
        logger_module._logging_state.configured = False


def test_get_logger_returns_standard_logger() -> None:
    log = logger_module.get_logger("coupon_lookup.x")
    assert isinstance(log, logging.Logger)
    assert log.name == "coupon_lookup.x"
