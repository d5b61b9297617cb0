"""Closed tagging of runtime values for ``FieldChecker.type``."""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

ValueKind = Literal["absent", "boolean", "number", "string", "array", "date", "object"]

TYPE_TAGS = frozenset(
    {
        "boolean",
        "string",
        "number",
        "object",
        "undefined",
        "array",
        "date",
        "null",
        "nullorundefined",
        "primitive",
    }
)


def kind_of(value: Any) -> ValueKind:
    if value is None:
        return "absent"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, date):
        return "date"
    return "object"


def matches_tag(value: Any, tag: str) -> bool:
    """Whether *value* has the shape named by *tag* (a member of ``TYPE_TAGS``)."""
    kind = kind_of(value)
    if tag in ("boolean", "string", "number"):
        return kind == tag
    if tag == "object":
        # arrays and dates count as objects too
        return kind in ("object", "array", "date")
    if tag == "array":
        return kind == "array"
    if tag == "date":
        return kind == "date"
    if tag in ("undefined", "null", "nullorundefined"):
        return kind == "absent"
    if tag == "primitive":
        return kind in ("absent", "boolean", "number", "string")
    raise ValueError(f"unknown type tag {tag!r}")
