"""Logfire-backed logging helpers for the coupon lookup core.

Logging is NOT configured at import time. The embedding application calls
`setup_logging()` once from its entrypoint; library code only asks for
loggers via `get_logger()` or receives one explicitly.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from types import CodeType
from typing import Any, ParamSpec, TypeVar

import logfire
from pydantic import BaseModel, ConfigDict


__all__ = [
    "Environment",
    "async_log_with_context",
    "get_logger",
    "log_with_context",
    "setup_logging",
]

P = ParamSpec("P")
R = TypeVar("R")

PACKAGE_LOGGER = "coupon_lookup"


class _LoggingState:
    """Track whether logging has been configured."""

    configured: bool = False


_logging_state = _LoggingState()


class Environment(BaseModel):
    """Snapshot of the runtime environment relevant to logging."""

    is_serverless: bool
    log_level: str
    send_to_logfire: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str | None]) -> Environment:
        """Build an environment snapshot from os.environ-like mappings.

        Serverless hosts are detected from the variables Vercel and Cloud Run
        inject; logs are shipped to Logfire only when a token is present.
        """
        is_serverless = bool(environ.get("VERCEL") or environ.get("K_SERVICE"))
        return cls(
            is_serverless=is_serverless,
            log_level=(environ.get("LOG_LEVEL") or "INFO").upper(),
            send_to_logfire=bool(environ.get("LOGFIRE_TOKEN")),
        )


def setup_logging(environment: Environment | None = None) -> None:
    """Route stdlib logging through Logfire's console exporter.

    Safe to call more than once; only the first call has an effect.

    Args:
        environment: Environment snapshot. Read from os.environ when omitted.
    """
    if _logging_state.configured:
        return

    if environment is None:
        environment = Environment.from_environ(os.environ)

    logfire.configure(
        send_to_logfire=environment.send_to_logfire,
        console=logfire.ConsoleOptions(
            min_log_level=environment.log_level.lower()
        ),
    )

    root_logger = logging.getLogger()
    has_logfire_handler = any(
        isinstance(h, logfire.LogfireLoggingHandler)
        for h in root_logger.handlers
    )
    if not has_logfire_handler:
        root_logger.addHandler(logfire.LogfireLoggingHandler())

    root_logger.setLevel(_resolve_log_level(environment.log_level))

    _logging_state.configured = True


def _resolve_log_level(level_name: str) -> int:
    """Translate log level names into logging constants."""
    numeric_level = getattr(logging, level_name.upper(), None)
    if isinstance(numeric_level, int):
        return numeric_level
    return logging.INFO


def _expects_logger_arg(func: Callable[..., Any]) -> bool:
    code_object = getattr(func, "__code__", None)
    if not isinstance(code_object, CodeType):
        return False
    return "logger" in code_object.co_varnames[: code_object.co_argcount]


def _build_logger_adapter(
    func: Callable[..., Any], context: dict[str, Any]
) -> logging.LoggerAdapter[logging.Logger]:
    module_name = getattr(func, "__module__", PACKAGE_LOGGER)
    return logging.LoggerAdapter(
        logging.getLogger(module_name),
        {"function": getattr(func, "__name__", "unknown"), **context},
    )


def log_with_context(
    **context: Any,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Attach static context to a function's log records.

    When the wrapped function declares a ``logger`` parameter and the caller
    does not pass one, a LoggerAdapter carrying the context is injected.
    Exceptions are logged with the context and re-raised.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        expects_logger = _expects_logger_arg(func)

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            adapter = _build_logger_adapter(func, context)
            if expects_logger and kwargs.get("logger") is None:
                kwargs["logger"] = adapter
            try:
                return func(*args, **kwargs)
            except Exception as error:
                adapter.error(
                    "Error in %s: %s",
                    func.__name__,
                    error,
                    extra={"error_type": type(error).__name__},
                )
                raise

        return wrapper

    return decorator


def async_log_with_context(
    **context: Any,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Async variant of log_with_context."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        expects_logger = _expects_logger_arg(func)

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            adapter = _build_logger_adapter(func, context)
            if expects_logger and kwargs.get("logger") is None:
                kwargs["logger"] = adapter
            try:
                return await func(*args, **kwargs)
            except Exception as error:
                adapter.error(
                    "Error in %s: %s",
                    func.__name__,
                    error,
                    extra={"error_type": type(error).__name__},
                )
                raise

        return wrapper

    return decorator


def get_logger(name: str) -> logging.Logger:
    """Return a standard logger for the given name (typically __name__)."""
    return logging.getLogger(name)


# Library default: stay silent until the application configures logging.
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())
