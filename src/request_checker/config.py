"""CheckerConfig — library-wide defaults, overridable per request."""

from __future__ import annotations

import os

from pydantic import BaseModel

_TRUTHY = {"1", "true", "yes", "on"}


class CheckerConfig(BaseModel):
    """Defaults shared by every checker created from one request context.

    Attributes:
        path_marker:            Prefix that marks a key as a computed-path
                                expression (e.g. ``"$.items[0].id"``).
        delete_on_check_failed: Whether a failing file check discards the
                                temporary upload when the caller does not
                                say otherwise.
        byte_length_encoding:   Encoding used by ``is_byte_length`` when no
                                charset is given.
    """

    path_marker: str = "$"
    delete_on_check_failed: bool = True
    byte_length_encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> CheckerConfig:
        """Build a config, falling back to ``REQUEST_CHECKER_*`` env vars."""
        data: dict[str, object] = {}

        marker = os.getenv("REQUEST_CHECKER_PATH_MARKER")
        if marker:
            data["path_marker"] = marker

        delete = os.getenv("REQUEST_CHECKER_DELETE_ON_CHECK_FAILED")
        if delete is not None:
            data["delete_on_check_failed"] = delete.strip().lower() in _TRUTHY

        encoding = os.getenv("REQUEST_CHECKER_BYTE_LENGTH_ENCODING")
        if encoding:
            data["byte_length_encoding"] = encoding

        return cls.model_validate(data)
