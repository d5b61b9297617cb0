"""Tests for the shared error sink."""

from request_checker import RequestContext
from request_checker.sink import add_error, has_error


def test_errors_absent_until_first_failure():
    ctx = RequestContext()
    assert ctx.errors is None
    assert has_error(ctx) is False


def test_add_error_creates_list_lazily():
    ctx = RequestContext()
    add_error(ctx, "name", "name can not be empty.")
    assert ctx.errors == [{"name": "name can not be empty."}]
    assert has_error(ctx) is True


def test_no_dedup_and_order_preserved():
    ctx = RequestContext()
    add_error(ctx, "a", "first")
    add_error(ctx, "b", "second")
    add_error(ctx, "a", "first")
    assert ctx.errors == [{"a": "first"}, {"b": "second"}, {"a": "first"}]


def test_empty_list_is_not_an_error():
    ctx = RequestContext(errors=[])
    assert has_error(ctx) is False
