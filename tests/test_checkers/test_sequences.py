"""Tests for get/first/filter on computed-path results."""

from request_checker import CheckerConfig, RequestContext


def test_first_of_single_match(ctx):
    checker = ctx.check_body("$.user.name", computed=True).exist().first().eq("bob")
    assert checker.value == "bob"
    assert ctx.errors is None


def test_filter_then_first(ctx):
    checker = ctx.check_body("$.items[*].id", computed=True)
    checker.filter(lambda item, index, key, context: item > 1).first()
    assert checker.value == 2


def test_filter_receives_index_key_and_context(ctx):
    seen = []
    ctx.check_body("tags").filter(lambda *args: seen.append(args) or True)
    assert seen == [("news", 0, "tags", ctx), ("tech", 1, "tags", ctx)]


def test_filter_with_scope(ctx):
    class Keep:
        wanted = "tech"

        def __call__(self, item, index, key, context):
            return item == self.wanted

    keep = Keep()
    checker = ctx.check_body("tags").filter(Keep.__call__, scope=keep)
    assert checker.value == ["tech"]


def test_get_out_of_range(ctx):
    assert ctx.check_body("tags").get(5).value is None
    assert ctx.check_body("tags").get(1).value == "tech"


def test_get_on_empty_value(ctx):
    assert ctx.check_query("empty").first().value == ""


def test_no_match_yields_none(ctx):
    checker = ctx.check_body("$.user.age", computed=True).first()
    assert checker.value is None
    assert checker.exists is False


def test_multiple_matches_do_not_exist(ctx):
    checker = ctx.check_body("$.items[*].id", computed=True).exist()
    assert ctx.errors == [{"$.items[*].id": "$.items[*].id should exist."}]
    # still usable for diagnostics after the failure
    assert checker.first().value == 1


def test_filter_runs_on_failed_chain():
    ctx = RequestContext(body={"ids": [1, 2, 3]}, config=CheckerConfig())
    checker = ctx.check_body("ids").is_email().filter(lambda item, *rest: item % 2)
    assert checker.active is False
    assert checker.value == [1, 3]
    assert ctx.body["ids"] == [1, 2, 3]
