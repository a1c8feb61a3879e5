"""Structured logging for the reconciliation service.

Logs go through structlog on top of stdlib logging: console output when
``DEBUG`` is set, JSON lines otherwise. Account numbers found in string
event values are masked to their last four digits before rendering.
"""

import logging
import re
import sys
import time
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from autoreconcile.config import settings

# Digit runs that may be split by dashes or any whitespace; masked once they hold ten digits
ACCOUNT_NUMBER_IN_LOG = re.compile(r"[0-9][0-9\-\s]{8,}[0-9]")
MIN_ACCOUNT_DIGITS = 10
VISIBLE_ACCOUNT_DIGITS = 4


def _mask_match(match: re.Match[str]) -> str:
    digits = re.sub(r"[^0-9]", "", match.group(0))
    if len(digits) < MIN_ACCOUNT_DIGITS:
        return match.group(0)
    return "*" * (len(digits) - VISIBLE_ACCOUNT_DIGITS) + digits[-VISIBLE_ACCOUNT_DIGITS:]


def mask_account_numbers(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor hiding all but the last digits of account numbers."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = ACCOUNT_NUMBER_IN_LOG.sub(_mask_match, value)
    return event_dict


def _build_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_account_numbers,
    ]


def _select_renderer() -> Processor:
    if settings.debug:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Route structlog and stdlib records through one stdout handler."""
    processors = _build_processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_select_renderer(),
            foreign_pre_chain=processors,
        )
    )
    logging.basicConfig(
        handlers=[handler],
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def get_logger(name: str | None = None) -> BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Reset the context variables and bind the current HTTP request to them."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def current_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")


@contextmanager
def log_timing(
    operation: str,
    logger: BoundLogger | None = None,
    level: str = "info",
    **context: Any,
) -> Iterator[dict[str, Any]]:
    """Log ``"<operation> completed"`` with its duration when the block exits.

    The yielded dict collects fields known only inside the block (for example
    the number of outcomes) and receives ``duration_ms`` on exit. The entry is
    written even if the block raises.

        with log_timing("reconcile", logger=logger, ledger_count=n) as timing:
            timing["outcome_count"] = len(outcomes)
    """
    log = logger or get_logger(__name__)
    fields: dict[str, Any] = {}
    started = time.perf_counter()
    try:
        yield fields
    finally:
        fields["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        emit = getattr(log, level, log.info)
        emit(f"{operation} completed", operation=operation, **context, **fields)


def log_exception(
    logger: BoundLogger,
    exc: BaseException,
    context: str,
    *,
    level: str = "error",
    include_traceback: bool = True,
    **extra: Any,
) -> None:
    """Log ``exc`` under the message ``context`` with its type and module.

    Expected failures (a statement the model could not read) pass
    ``include_traceback=False``; unexpected ones keep the traceback.
    """
    emit = getattr(logger, level, logger.error)
    fields: dict[str, Any] = {
        "error": str(exc),
        "error_type": type(exc).__name__,
        "error_module": type(exc).__module__,
        **extra,
    }
    if include_traceback:
        fields["exc_info"] = exc
    emit(context, **fields)
