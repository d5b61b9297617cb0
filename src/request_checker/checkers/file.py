"""FileChecker — FieldChecker specialised for uploaded files."""

from __future__ import annotations

import asyncio
import os
import re
from collections.abc import Callable, MutableMapping
from typing import TYPE_CHECKING, Any

from request_checker._internal import fsops
from request_checker._internal.logs import get_logger
from request_checker.checkers.field import FieldChecker, Pattern

if TYPE_CHECKING:
    from request_checker.context import RequestContext
    from request_checker.upload import FileMetadata

    # ``(file, key, context)`` -> value or awaitable
    FileCallback = Callable[[FileMetadata, str, RequestContext], Any]
    Destination = str | os.PathLike[str] | FileCallback

logger = get_logger(__name__)


def format_size(size: float) -> str:
    """Human-readable size: ``"500 bytes"``, ``"0.98 kb"``, ``"1.50 mb"``."""
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} kb"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} mb"
    return f"{size / (1024 * 1024 * 1024):.2f} gb"


async def _call(fn: Callable[..., Any], *args: Any) -> Any:
    result = fn(*args)
    if asyncio.iscoroutine(result):
        result = await result
    return result


class FileChecker(FieldChecker):
    """Checker over a :class:`FileMetadata` value.

    Failed checks may discard the temporary upload (``delete_on_check_failed``);
    the discard is fire-and-forget and never changes the recorded result.
    The failed state lives on the ``FileMetadata`` itself, so a second
    checker for the same upload starts out failed.

    ``copy``, ``move`` and ``delete`` are coroutines and must be awaited.
    """

    value: FileMetadata | None

    def __init__(
        self,
        context: RequestContext,
        key: str,
        value: FileMetadata | None,
        exists: bool,
        container: MutableMapping[str, Any] | None,
        *,
        delete_on_check_failed: bool = True,
        active: bool = True,
    ) -> None:
        if value is not None and value.rejected:
            active = False
        super().__init__(context, key, value, exists, container, active=active)
        self.delete_on_check_failed = delete_on_check_failed

    def add_error(self, message: str) -> None:
        super().add_error(message)
        if self.value is not None:
            self.value.reject()

    def _label(self) -> str:
        return (self.value.name if self.value is not None else "") or self.key

    def _reject(self, message: str) -> None:
        self.add_error(message)
        if self.delete_on_check_failed:
            fsops.discard_upload(self.value.path if self.value is not None else None)

    # ── predicates ───────────────────────────────────────────

    def not_empty(self, tip: str | None = None) -> FileChecker:
        if self.active and (self.value is None or self.value.size <= 0):
            self._reject(tip or f"file {self.key} can not be a empty file.")
        return self

    def size(self, min_size: int, max_size: int, tip: str | None = None) -> FileChecker:
        if self.active and (
            self.value is None or self.value.size < min_size or self.value.size > max_size
        ):
            self._reject(
                tip
                or f"file {self._label()}'s length must between "
                f"{format_size(min_size)} and {format_size(max_size)}."
            )
        return self

    def content_type_match(self, pattern: Pattern, tip: str | None = None) -> FileChecker:
        if self.active and (self.value is None or re.search(pattern, self.value.type) is None):
            self._reject(tip or f"file {self._label()} is bad format.")
        return self

    def is_image_content_type(self, tip: str | None = None) -> FileChecker:
        if self.active and (self.value is None or not self.value.type.startswith("image/")):
            self._reject(tip or f"file {self._label()} is not a image format.")
        return self

    def file_name_match(self, pattern: Pattern, tip: str | None = None) -> FileChecker:
        if self.active and (self.value is None or re.search(pattern, self.value.name) is None):
            self._reject(tip or f"file {self._label()} is bad file type.")
        return self

    def suffix_in(self, suffixes: list[str], tip: str | None = None) -> FileChecker:
        """Accept only names whose extension (text after the last ``.``) is listed."""
        if self.active:
            name = self.value.name if self.value is not None else ""
            suffix = name.rpartition(".")[2] if "." in name else ""
            if self.value is None or suffix not in suffixes:
                self._reject(tip or f"file {self._label()} is bad file type.")
        return self

    # ── filesystem operations ────────────────────────────────

    async def _resolve_destination(self, destination: Destination) -> str:
        if callable(destination):
            destination = await _call(destination, self.value, self.key, self.context)
        return os.fspath(destination)

    async def _copy(self, destination: Destination) -> bool:
        upload = self.value
        target = await self._resolve_destination(destination)
        if not await fsops.exists(upload.path):
            self.add_error(f"{self.key} upload file not exists.")
            return False
        if target.endswith(("/", "\\")) or await fsops.is_dir(target):
            target = os.path.join(target, os.path.basename(upload.path))
        try:
            await fsops.ensure_dir(os.path.dirname(target))
            await fsops.copy_file(upload.path, target)
        except OSError as e:
            logger.warning("file_operation_failed", operation="copy", key=self.key, error=str(e))
            self.add_error(f"{self.key} could not be copied.")
            return False
        upload.new_path = target
        return True

    async def copy(
        self,
        destination: Destination,
        after_copy: FileCallback | None = None,
    ) -> FileChecker:
        """Copy the upload to *destination*, creating missing directories.

        *destination* is a path or ``(file, key, context)`` callback, sync or
        async.  A trailing separator or an existing directory receives the
        upload's base name.  The final path is stored in ``value.new_path``.
        """
        if not self.active or self.value is None:
            return self
        if await self._copy(destination) and after_copy is not None:
            await _call(after_copy, self.value, self.key, self.context)
        return self

    async def move(
        self,
        destination: Destination,
        after_move: FileCallback | None = None,
    ) -> FileChecker:
        """:meth:`copy`, then remove the original upload."""
        if not self.active or self.value is None:
            return self
        if not await self._copy(destination):
            return self
        try:
            await fsops.unlink(self.value.path)
        except OSError as e:
            logger.warning("file_operation_failed", operation="move", key=self.key, error=str(e))
            self.add_error(f"{self.key} could not be moved.")
            return self
        if after_move is not None:
            await _call(after_move, self.value, self.key, self.context)
        return self

    async def delete(self) -> FileChecker:
        if not self.active or self.value is None:
            return self
        try:
            await fsops.unlink(self.value.path)
        except OSError as e:
            logger.warning("file_operation_failed", operation="delete", key=self.key, error=str(e))
            self.add_error(f"{self.key} could not be deleted.")
        return self
