"""Asynchronous filesystem steps used by ``FileChecker``.

Blocking calls run in the default executor via :func:`asyncio.to_thread`
so one request's copy never stalls the event loop for the others.
"""

from __future__ import annotations

import asyncio
import os
import shutil

from request_checker._internal.logs import get_logger

logger = get_logger(__name__)

# keeps fire-and-forget discards alive until they finish
_pending_discards: set[asyncio.Task[None]] = set()


async def exists(path: str) -> bool:
    return await asyncio.to_thread(os.path.exists, path)


async def is_dir(path: str) -> bool:
    return await asyncio.to_thread(os.path.isdir, path)


async def ensure_dir(path: str) -> None:
    """``mkdir -p``; a directory created concurrently counts as success."""
    if path:
        await asyncio.to_thread(os.makedirs, path, exist_ok=True)


async def copy_file(src: str, dst: str) -> None:
    await asyncio.to_thread(shutil.copyfile, src, dst)


async def unlink(path: str) -> None:
    await asyncio.to_thread(os.remove, path)


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        logger.warning("upload_discard_failed", path=path, error=str(e))
    else:
        logger.debug("upload_discarded", path=path)


def discard_upload(path: str | None) -> None:
    """Best-effort removal of a rejected upload.

    Runs as a background task when an event loop is running and inline
    otherwise.  Failures are logged and never reach the caller.
    """
    if not path:
        return
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        _remove_quietly(path)
        return
    task = loop.create_task(asyncio.to_thread(_remove_quietly, path))
    _pending_discards.add(task)
    task.add_done_callback(_pending_discards.discard)
