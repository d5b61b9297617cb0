"""Serializable views of the collected validation errors.

Downstream error reporting (HTTP error bodies, logs) consumes these
instead of the raw ``[{field: message}]`` list.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldErrorSchema(BaseModel):
    """One failed check.

    Attributes:
        field:   Key of the field (or the precondition) that failed.
        message: Human-readable message.
    """

    field: str
    message: str


class ErrorReportSchema(BaseModel):
    """All errors of one request, in the order they were recorded.

    Attributes:
        valid:  ``True`` when no check failed.
        errors: One entry per failure; the same field may appear twice.
    """

    valid: bool = True
    errors: list[FieldErrorSchema] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[dict[str, str]] | None) -> ErrorReportSchema:
        items = [
            FieldErrorSchema(field=field, message=message)
            for entry in errors or []
            for field, message in entry.items()
        ]
        return cls(valid=not items, errors=items)

    def by_field(self) -> dict[str, list[str]]:
        """Group messages per field, keeping the recording order."""
        grouped: dict[str, list[str]] = {}
        for item in self.errors:
            grouped.setdefault(item.field, []).append(item.message)
        return grouped
