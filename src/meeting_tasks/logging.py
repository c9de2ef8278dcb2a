"""
Structured logging configuration for the meeting task tool.

structlog renders JSON in deployments and a colored console locally. The
route guard binds the request's trace ID and the signed-in user ID through
context variables, so every log line written while serving that request
carries them.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generator

import structlog
from structlog.types import Processor

from .config import config

_trace_id: ContextVar[str | None] = ContextVar('trace_id', default=None)
_user_id: ContextVar[str | None] = ContextVar('user_id', default=None)


def get_trace_id() -> str | None:
    return _trace_id.get()


def get_user_id() -> str | None:
    return _user_id.get()


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor copying the request's trace and user IDs onto the event."""
    for key, var in (('trace_id', _trace_id), ('user_id', _user_id)):
        value = var.get()
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def configure_logging(
    json_output: bool = False,
    log_level: str | None = None,
) -> None:
    """
    Configure structlog for the application.

    Args:
        json_output: JSON lines when True, colored console output otherwise
        log_level: Override log level (defaults to config.LOG_LEVEL)
    """
    level = log_level or config.LOG_LEVEL
    level_num = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format='%(message)s',
        stream=sys.stdout,
        level=level_num,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_context_info,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def logging_context(
    trace_id: str | None = None,
    user_id: str | None = None,
) -> Generator[None, None, None]:
    """
    Bind request-scoped IDs for the duration of the block.

    Usage:
        with logging_context(trace_id="abc123", user_id="user_1"):
            logger.info("team.fetch")  # Includes trace_id and user_id
    """
    tokens = []
    if trace_id is not None:
        tokens.append((_trace_id, _trace_id.set(trace_id)))
    if user_id is not None:
        tokens.append((_user_id, _user_id.set(user_id)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


# Development mode by default; deployments call configure_logging(json_output=True)
configure_logging(json_output=False)
