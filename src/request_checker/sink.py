"""Error sink — the per-request list of ``{field: message}`` entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from request_checker.context import RequestContext


def add_error(context: RequestContext, key: str, message: str) -> None:
    """Append ``{key: message}`` to ``context.errors``, creating the list lazily.

    Entries are never deduplicated: two chains failing on the same field
    produce two entries, in the order the failures happened.
    """
    if context.errors is None:
        context.errors = []
    context.errors.append({key: message})


def has_error(context: RequestContext) -> bool:
    """``True`` once any chain derived from *context* recorded an error."""
    return bool(context.errors)
