"""RequestContext — the per-request object checkers are created from."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from request_checker import sink
from request_checker.checkers.field import FieldChecker
from request_checker.checkers.file import FileChecker
from request_checker.config import CheckerConfig
from request_checker.exceptions import RequestValidationError
from request_checker.locator import JsonPathResolver, PathResolver, locate
from request_checker.schema import ErrorReportSchema
from request_checker.upload import FileMetadata

NO_BODY = "no body to check."
NO_FILE = "no file to check."


@dataclass
class RequestContext:
    """Framework-provided request data plus the shared error list.

    Attributes:
        query:    Query-string parameters.
        params:   Route parameters.
        headers:  Request headers.
        body:     Parsed body, or ``None`` when the request had none.  A
                  nested ``fields`` mapping (multipart parsers) takes
                  precedence over the body itself.
        files:    Uploads by field name, or ``None`` when nothing was
                  uploaded at all.
        errors:   ``[{field: message}, ...]``; stays ``None`` until the
                  first failure.
        config:   Library defaults (path marker, upload cleanup, encoding).
        resolver: Evaluator for computed-path keys; ``None`` disables them.
    """

    query: MutableMapping[str, Any] = field(default_factory=dict)
    params: MutableMapping[str, Any] = field(default_factory=dict)
    headers: MutableMapping[str, Any] = field(default_factory=dict)
    body: MutableMapping[str, Any] | None = None
    files: MutableMapping[str, Any] | None = None
    errors: list[dict[str, str]] | None = None
    config: CheckerConfig = field(default_factory=CheckerConfig.from_env)
    resolver: PathResolver | None = field(default_factory=JsonPathResolver)

    # ── checker factories ────────────────────────────────────

    def _checker(
        self,
        container: MutableMapping[str, Any],
        key: str,
        computed: bool = False,
    ) -> FieldChecker:
        resolver = self.resolver if computed else None
        marker = self.config.path_marker
        value, exists = locate(container, key, resolver, marker)
        detached = resolver is not None and key.startswith(marker)
        return FieldChecker(self, key, value, exists, container, detached=detached)

    def check_query(self, key: str, computed: bool = False) -> FieldChecker:
        return self._checker(self.query, key, computed)

    def check_params(self, key: str) -> FieldChecker:
        return self._checker(self.params, key)

    def check_header(self, key: str) -> FieldChecker:
        return self._checker(self.headers, key)

    def check_body(self, key: str, computed: bool = False) -> FieldChecker:
        """Checker for a body field.

        Without a body, a single precondition error is recorded and an
        inert checker is returned, so the caller's chain still runs safely.
        """
        if self.body is None:
            sink.add_error(self, key, NO_BODY)
            return FieldChecker(self, key, None, False, None, active=False)
        fields = self.body.get("fields")
        container = fields if isinstance(fields, MutableMapping) else self.body
        return self._checker(container, key, computed)

    def check_file(self, key: str, delete_on_check_failed: bool | None = None) -> FileChecker:
        """Checker for an upload.

        ``delete_on_check_failed`` defaults to ``config.delete_on_check_failed``.
        """
        if self.files is None:
            sink.add_error(self, key, NO_FILE)
            return FileChecker(self, key, None, False, None, active=False, delete_on_check_failed=False)
        if delete_on_check_failed is None:
            delete_on_check_failed = self.config.delete_on_check_failed

        upload = self.files.get(key)
        if isinstance(upload, Mapping):
            upload = FileMetadata.model_validate(upload)
            self.files[key] = upload
        return FileChecker(
            self,
            key,
            upload,
            upload is not None,
            self.files,
            delete_on_check_failed=delete_on_check_failed,
        )

    # ── results ──────────────────────────────────────────────

    def has_errors(self) -> bool:
        return sink.has_error(self)

    def error_report(self) -> ErrorReportSchema:
        return ErrorReportSchema.from_errors(self.errors)

    def raise_for_errors(self) -> None:
        """Raise :class:`RequestValidationError` if any check failed."""
        if self.errors:
            raise RequestValidationError(self.errors)
