"""request_checker — chainable validation and sanitization of request fields.

Ask the request context for a checker bound to one field, then chain
checks and sanitizers on it.  Failures accumulate on the context instead
of raising; a failed checker turns every later call into a no-op.
"""

from request_checker.checkers import FieldChecker, FileChecker
from request_checker.config import CheckerConfig
from request_checker.context import RequestContext
from request_checker.exceptions import (
    CheckerConfigError,
    CheckerError,
    RequestValidationError,
)
from request_checker.locator import JsonPathResolver, PathResolver
from request_checker.schema import ErrorReportSchema, FieldErrorSchema
from request_checker.upload import FileMetadata

__all__ = [
    "CheckerConfig",
    "CheckerConfigError",
    "CheckerError",
    "ErrorReportSchema",
    "FieldChecker",
    "FieldErrorSchema",
    "FileChecker",
    "FileMetadata",
    "JsonPathResolver",
    "PathResolver",
    "RequestContext",
    "RequestValidationError",
]
