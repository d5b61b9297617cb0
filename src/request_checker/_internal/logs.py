"""Structured loggers for the package.

The library only *emits* events; configuring processors and renderers is
left to the host application.
"""

from __future__ import annotations

import structlog


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to *name* (normally ``__name__``)."""
    return structlog.get_logger(name)
