"""String-predicate collaborator: named checks and transforms on text."""

from request_checker.strings import predicates, transforms

__all__ = ["predicates", "transforms"]
