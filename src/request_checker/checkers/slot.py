"""FieldSlot — the one container entry a checker is allowed to write."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any


class FieldSlot:
    """Handle on ``container[key]``.

    Sanitizers never touch the container directly; they call
    :meth:`commit`, which is the single write-back path.  A slot without a
    container (inert checkers) swallows commits, and so does a *detached*
    slot, whose key is a computed path rather than an entry, until
    :meth:`rebind` points it at a plain key.
    """

    __slots__ = ("container", "key", "detached")

    def __init__(
        self,
        container: MutableMapping[str, Any] | None,
        key: str,
        detached: bool = False,
    ) -> None:
        self.container = container
        self.key = key
        self.detached = detached

    def commit(self, value: Any) -> None:
        if self.container is not None and not self.detached:
            self.container[self.key] = value

    def rebind(self, key: str) -> None:
        """Point the slot at another (plain) key of the same container."""
        self.key = key
        self.detached = False

    def __repr__(self) -> str:
        suffix = ", detached" if self.detached else ""
        return f"FieldSlot(key={self.key!r}{suffix})"
