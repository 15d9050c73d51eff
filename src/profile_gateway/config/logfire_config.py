"""
Logging configuration.

Console logging is always on. When LOGFIRE_ENABLED is true and a
LOGFIRE_TOKEN is present, records are also exported to Logfire through
its standard logging handler, and spans are recorded around remote calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import logfire

SERVICE_NAME = "profile-gateway"

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_logfire_enabled = False
_configured = False


def setup_logfire(
    token: str | None = None,
    enabled: bool = False,
    level: str = "INFO",
    service_name: str = SERVICE_NAME,
) -> None:
    """Configure root logging once per process."""
    global _logfire_enabled, _configured
    if _configured:
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    handlers[0].setFormatter(logging.Formatter(_LOG_FORMAT))

    if enabled and token:
        logfire.configure(token=token, service_name=service_name, console=False)
        handlers.append(logfire.LogfireLoggingHandler())
        _logfire_enabled = True

    root = logging.getLogger()
    root.setLevel(level)
    for handler in handlers:
        root.addHandler(handler)

    # uvicorn's access log duplicates the per-route error lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
    get_logger(__name__).debug(
        "Logging configured (level=%s, logfire=%s)", level, _logfire_enabled
    )


def is_logfire_enabled() -> bool:
    return _logfire_enabled


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def safe_span(name: str, **attributes: Any) -> Iterator[None]:
    """Open a Logfire span when export is enabled, otherwise do nothing."""
    if not _logfire_enabled:
        yield
        return
    with logfire.span(name, **attributes):
        yield

