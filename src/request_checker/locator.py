"""Value location — resolve a field key against one request container.

Plain keys are looked up directly.  Keys starting with the configured path
marker (``$`` by default) are computed paths, evaluated by a
:class:`PathResolver` when one is supplied and treated as literal keys
otherwise.

Computed-path lookups are deliberately asymmetric:

* the *value* is always a list (a single match is wrapped), so callers that
  want a scalar follow up with ``first()`` / ``get(i)``;
* the key only *exists* when the path matches exactly one element.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal, Protocol

from jsonpath_ng.ext import parse as _parse_jsonpath

ResolveMode = Literal["value", "all"]


class PathResolver(Protocol):
    """Evaluates a path expression against a container.

    Returns the list of matched values; ``mode`` is ``"value"`` for value
    retrieval and ``"all"`` when the caller only counts matches.
    """

    def evaluate(self, container: Any, expression: str, mode: ResolveMode) -> list[Any]: ...


@lru_cache(maxsize=256)
def _compile(expression: str) -> Any:
    return _parse_jsonpath(expression)


class JsonPathResolver:
    """Default resolver backed by ``jsonpath-ng`` (extended syntax, filters included)."""

    def evaluate(self, container: Any, expression: str, mode: ResolveMode) -> list[Any]:
        return [match.value for match in _compile(expression).find(container)]


def get_value(
    container: Mapping[str, Any],
    key: str,
    resolver: PathResolver | None = None,
    marker: str = "$",
) -> Any:
    """Return the current value for *key* (``None`` when absent)."""
    if resolver is not None and key.startswith(marker):
        matches = resolver.evaluate(container, key, "value")
        if not matches:
            return [None]
        if len(matches) == 1:
            only = matches[0]
            return only if isinstance(only, list) else [only]
        return matches
    return container.get(key)


def has_key(
    container: Mapping[str, Any],
    key: str,
    resolver: PathResolver | None = None,
    marker: str = "$",
) -> bool:
    """Return ``True`` when *key* is present in *container*.

    For computed paths this requires exactly one match.
    """
    if resolver is not None and key.startswith(marker):
        return len(resolver.evaluate(container, key, "all")) == 1
    return key in container


def locate(
    container: Mapping[str, Any],
    key: str,
    resolver: PathResolver | None = None,
    marker: str = "$",
) -> tuple[Any, bool]:
    """Resolve *key* to ``(value, exists)``.

    ``exists`` is authoritative for presence, ``value`` for content.
    """
    return (
        get_value(container, key, resolver, marker),
        has_key(container, key, resolver, marker),
    )
