"""Tests for FileChecker predicates, upload cleanup and filesystem operations."""

import asyncio
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from request_checker import CheckerConfig, FileMetadata, RequestContext
from request_checker.checkers import format_size

DISCARD = "request_checker.checkers.file.fsops.discard_upload"


@pytest.mark.parametrize(
    "size, expected",
    [
        (500, "500 bytes"),
        (1000, "0.98 kb"),
        (5000, "4.88 kb"),
        (1536 * 1024, "1.50 mb"),
        (3 * 1024**3, "3.00 gb"),
    ],
)
def test_format_size(size, expected):
    assert format_size(size) == expected


# ── predicates ───────────────────────────────────────────────


def test_size_rejects_and_discards(file_ctx, upload):
    upload.size = 500
    with patch(DISCARD) as discard:
        file_ctx.check_file("avatar").size(1000, 5000)
    assert file_ctx.errors == [
        {"avatar": "file avatar.png's length must between 0.98 kb and 4.88 kb."}
    ]
    discard.assert_called_once_with(upload.path)


def test_size_without_discard(file_ctx, upload):
    upload.size = 500
    with patch(DISCARD) as discard:
        file_ctx.check_file("avatar", delete_on_check_failed=False).size(1000, 5000)
    discard.assert_not_called()
    assert os.path.exists(upload.path)


def test_passing_checks_never_discard(file_ctx):
    with patch(DISCARD) as discard:
        checker = file_ctx.check_file("avatar")
        checker.not_empty().size(1, 1024).is_image_content_type()
        checker.content_type_match(r"^image/png$").file_name_match(r"\.png$").suffix_in(["png", "jpg"])
    assert file_ctx.errors is None
    discard.assert_not_called()


def test_one_discard_per_chain(file_ctx, upload):
    upload.size = 0
    with patch(DISCARD) as discard:
        file_ctx.check_file("avatar").not_empty().size(1, 10).suffix_in(["gif"])
    assert file_ctx.errors == [{"avatar": "file avatar can not be a empty file."}]
    assert discard.call_count == 1


@pytest.mark.parametrize(
    "method, args, message",
    [
        ("is_image_content_type", (), "file avatar.png is not a image format."),
        ("content_type_match", (r"^video/",), "file avatar.png is bad format."),
        ("file_name_match", (r"\.gif$",), "file avatar.png is bad file type."),
        ("suffix_in", (["gif", "jpg"],), "file avatar.png is bad file type."),
    ],
)
def test_predicate_messages(file_ctx, method, args, message):
    with patch(DISCARD):
        getattr(file_ctx.check_file("avatar"), method)(*args)
    assert file_ctx.errors == [{"avatar": message}]


def test_suffix_without_extension(tmp_path, config):
    upload = FileMetadata(path=str(tmp_path / "x"), name="README", size=1)
    ctx = RequestContext(files={"doc": upload}, config=config)
    with patch(DISCARD):
        ctx.check_file("doc").suffix_in(["md"])
    assert ctx.errors == [{"doc": "file README is bad file type."}]


def test_rejection_is_shared_between_checkers(file_ctx, upload):
    with patch(DISCARD):
        file_ctx.check_file("avatar").size(1, 2)
    assert upload.rejected is True
    second = file_ctx.check_file("avatar")
    assert second.active is False
    second.not_empty().size(1, 2)
    assert len(file_ctx.errors) == 1


def test_missing_upload(file_ctx):
    with patch(DISCARD) as discard:
        file_ctx.check_file("resume").not_empty()
    assert file_ctx.errors == [{"resume": "file resume can not be a empty file."}]
    discard.assert_called_once_with(None)


# ── real discards ────────────────────────────────────────────


def test_discard_inline_without_loop(file_ctx, upload):
    file_ctx.check_file("avatar").size(1, 2)
    assert not os.path.exists(upload.path)


async def test_discard_in_background(file_ctx, upload):
    file_ctx.check_file("avatar").size(1, 2)
    for _ in range(200):
        if not os.path.exists(upload.path):
            break
        await asyncio.sleep(0.01)
    assert not os.path.exists(upload.path)
    assert file_ctx.errors is not None


def test_discard_failure_is_logged(tmp_path, config):
    upload = FileMetadata(path=str(tmp_path / "gone.png"), name="gone.png", size=10)
    ctx = RequestContext(files={"avatar": upload}, config=config)
    with capture_logs() as logs:
        ctx.check_file("avatar").size(100, 200)
    assert [entry["event"] for entry in logs] == ["upload_discard_failed"]
    assert logs[0]["log_level"] == "warning"
    assert len(ctx.errors) == 1


# ── copy / move / delete ─────────────────────────────────────


async def test_copy_into_new_directory(file_ctx, upload, tmp_path):
    dest = tmp_path / "store" / "2024"
    checker = await file_ctx.check_file("avatar").copy(str(dest) + os.sep)
    expected = dest / os.path.basename(upload.path)
    assert checker.value.new_path == str(expected)
    assert expected.read_bytes() == Path(upload.path).read_bytes()
    assert os.path.exists(upload.path)
    assert file_ctx.errors is None


async def test_copy_into_existing_directory(file_ctx, upload, tmp_path):
    dest = tmp_path / "store"
    dest.mkdir()
    checker = await file_ctx.check_file("avatar").copy(dest)
    assert checker.value.new_path == str(dest / os.path.basename(upload.path))


async def test_copy_to_file_path(file_ctx, tmp_path):
    target = tmp_path / "a" / "b" / "avatar.png"
    checker = await file_ctx.check_file("avatar").copy(str(target))
    assert checker.value.new_path == str(target)
    assert target.exists()


async def test_copy_destination_callbacks(file_ctx, tmp_path):
    def sync_dest(file, key, context):
        return str(tmp_path / "sync" / file.name)

    async def async_dest(file, key, context):
        return str(tmp_path / "async" / key / file.name)

    await file_ctx.check_file("avatar").copy(sync_dest)
    assert (tmp_path / "sync" / "avatar.png").exists()
    await file_ctx.check_file("avatar").copy(async_dest)
    assert (tmp_path / "async" / "avatar" / "avatar.png").exists()


async def test_after_copy_callbacks(file_ctx, upload, tmp_path):
    sync_cb = MagicMock()
    async_cb = AsyncMock()
    checker = await file_ctx.check_file("avatar").copy(str(tmp_path / "one") + "/", sync_cb)
    sync_cb.assert_called_once_with(upload, "avatar", file_ctx)
    await checker.copy(str(tmp_path / "two") + "/", async_cb)
    async_cb.assert_awaited_once_with(upload, "avatar", file_ctx)


async def test_copy_missing_source(file_ctx, upload, tmp_path):
    os.remove(upload.path)
    callback = MagicMock()
    checker = await file_ctx.check_file("avatar").copy(str(tmp_path / "dest") + "/", callback)
    assert file_ctx.errors == [{"avatar": "avatar upload file not exists."}]
    assert checker.value.new_path is None
    callback.assert_not_called()


async def test_copy_failure_is_recorded(file_ctx, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with capture_logs() as logs:
        checker = await file_ctx.check_file("avatar").copy(str(blocker / "sub" / "x.png"))
    assert file_ctx.errors == [{"avatar": "avatar could not be copied."}]
    assert checker.active is False
    assert logs[0]["event"] == "file_operation_failed"
    assert logs[0]["operation"] == "copy"


async def test_copy_skipped_after_failure(tmp_path, upload):
    ctx = RequestContext(files={"avatar": upload}, config=CheckerConfig(delete_on_check_failed=False))
    checker = ctx.check_file("avatar").size(1, 2)
    await checker.copy(str(tmp_path / "dest") + "/")
    assert not (tmp_path / "dest").exists()
    assert upload.new_path is None


async def test_move(file_ctx, upload, tmp_path):
    original = upload.path
    payload = Path(original).read_bytes()
    after_move = AsyncMock()
    checker = await file_ctx.check_file("avatar").move(str(tmp_path / "moved") + "/", after_move)
    assert not os.path.exists(original)
    assert Path(checker.value.new_path).read_bytes() == payload
    after_move.assert_awaited_once_with(upload, "avatar", file_ctx)


async def test_delete(file_ctx, upload):
    await file_ctx.check_file("avatar").delete()
    assert not os.path.exists(upload.path)
    assert file_ctx.errors is None


async def test_delete_failure_is_recorded(file_ctx, upload):
    os.remove(upload.path)
    await file_ctx.check_file("avatar").delete()
    assert file_ctx.errors == [{"avatar": "avatar could not be deleted."}]
