"""Custom exceptions for the request_checker package.

Validation failures are *collected* on the request context, never raised.
The exceptions below cover misconfiguration and the explicit
``RequestContext.raise_for_errors`` escalation path.
"""

from __future__ import annotations


class CheckerError(Exception):
    """Base exception for all request_checker errors."""


class CheckerConfigError(CheckerError):
    """Raised when a checker operation is called with an invalid configuration."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Operation '{operation}' misconfigured: {message}")


class RequestValidationError(CheckerError):
    """Raised on demand when a request has collected validation errors."""

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = list(errors)
        count = len(self.errors)
        super().__init__(f"Request failed validation with {count} error(s)")
