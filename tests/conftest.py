"""Shared test fixtures."""

import sys

import pytest

from request_checker import CheckerConfig, FileMetadata, RequestContext


@pytest.fixture
def config():
    return CheckerConfig()


@pytest.fixture
def ctx(config):
    return RequestContext(
        query={
            "name": "alice",
            "page": "2",
            "email": "alice@acme.com",
            "blank": "   ",
            "empty": "",
        },
        params={"id": "42"},
        headers={"content-type": "application/json; charset=utf-8"},
        body={
            "title": "  Hello World  ",
            "tags": ["news", "tech"],
            "items": [{"id": 1}, {"id": 2}],
            "user": {"name": "bob"},
        },
        config=config,
    )


@pytest.fixture
def upload(tmp_path):
    src = tmp_path / "uploads" / "upload_1a2b3c.png"
    src.parent.mkdir()
    src.write_bytes(b"\x89PNG\r\n\x1a\n fake image payload")
    return FileMetadata(
        path=str(src),
        name="avatar.png",
        type="image/png",
        size=src.stat().st_size,
    )


@pytest.fixture
def file_ctx(upload, config):
    return RequestContext(files={"avatar": upload}, config=config)


@pytest.fixture
def int_digit_limit():
    """Pin the int-from-str digit limit to the interpreter default."""
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(4300)
    yield
    sys.set_int_max_str_digits(previous)
