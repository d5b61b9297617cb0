"""Chainable field checkers."""

from request_checker.checkers.field import FieldChecker
from request_checker.checkers.file import FileChecker, format_size
from request_checker.checkers.slot import FieldSlot

__all__ = [
    "FieldChecker",
    "FieldSlot",
    "FileChecker",
    "format_size",
]
