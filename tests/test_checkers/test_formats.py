"""Tests for the string-format predicates exposed on FieldChecker."""

from datetime import date
from unittest.mock import patch

import pytest

from request_checker import CheckerConfig, RequestContext


def run(method, value, *args, **kwargs):
    ctx = RequestContext(body={"v": value}, config=CheckerConfig())
    getattr(ctx.check_body("v"), method)(*args, **kwargs)
    return ctx.errors


@pytest.mark.parametrize(
    "method, good, bad",
    [
        ("is_int", "42", "4.2"),
        ("is_float", "3.14", "pi"),
        ("is_email", "alice@acme.com", "alice@"),
        ("is_url", "https://acme.com/a?b=1", "not a url"),
        ("is_ip", "10.0.0.1", "10.0.0.256"),
        ("is_alpha", "abc", "abc1"),
        ("is_numeric", "-12", "1.2"),
        ("is_alphanumeric", "abc123", "abc-123"),
        ("is_base64", "aGVsbG8=", "aGVsbG8"),
        ("is_hexadecimal", "deadBEEF", "xyz"),
        ("is_hex_color", "#fff", "#ffff"),
        ("is_lowercase", "abc", "aBc"),
        ("is_uppercase", "ABC", "aBc"),
        ("is_uuid", "550e8400-e29b-41d4-a716-446655440000", "550e8400"),
        ("is_date", "2024-01-15", "someday"),
        ("is_time", "23:59", "24:00"),
        ("is_credit_card", "4111111111111111", "4111111111111112"),
        ("is_isbn", "9780306406157", "9780306406158"),
        ("is_json", '{"a": 1}', '"text"'),
        ("is_multibyte", "héllo", "hello"),
        ("is_ascii", "hello", "héllo"),
        ("is_surrogate_pair", "𠮷野家", "abc"),
        ("is_currency", "$1,000.00", "1,00"),
        ("is_data_uri", "data:text/plain;base64,SGVsbG8=", "text/plain"),
        ("is_mobile_phone", "+447400123456", "12345"),
        ("is_iso8601", "2024-01-15T10:20:30Z", "2024-13-01"),
        ("is_mac_address", "01:23:45:67:89:ab", "01:23:45:67:89"),
        ("is_isin", "US0378331005", "US0378331004"),
        ("is_fqdn", "acme.com", "acme"),
    ],
)
def test_format_good_and_bad(method, good, bad):
    assert run(method, good) is None
    errors = run(method, bad)
    assert errors is not None and len(errors) == 1
    assert list(errors[0]) == ["v"]


def test_default_messages():
    assert run("is_email", "x") == [{"v": "v is not email format."}]
    assert run("is_uuid", "x") == [{"v": "v is not a UUID format."}]
    assert run("is_divisible_by", "7", 2) == [{"v": "v can not divide by 2."}]


def test_tip_overrides_message():
    assert run("is_email", "x", tip="bad email") == [{"v": "bad email"}]


def test_non_string_fails_format():
    assert run("is_email", 5) == [{"v": "v is not email format."}]
    assert run("is_hex_color", None) == [{"v": "v is not hex color format."}]


def test_is_int_on_number_value():
    assert run("is_int", 5) is None
    assert run("is_float", 2.5) is None


def test_options_forwarded():
    assert run("is_int", "10", options={"max": 5}) == [{"v": "v is not integer."}]
    assert run("is_ip", "::1", version=4) == [{"v": "v is not ip format."}]
    assert run("is_url", "acme.com", options={"require_protocol": True}) is not None
    assert run("is_alpha", "Straße", locale="de-DE") is None


def test_is_date_accepts_date_instance():
    assert run("is_date", date(2024, 1, 15)) is None


def test_is_after_and_before():
    assert run("is_after", "2030-01-01", "2024-01-01") is None
    assert run("is_before", "2020-01-01") is None
    assert run("is_after", "2020-01-01", "2024-01-01") == [{"v": "v must after 2024-01-01."}]


def test_divisible_by():
    assert run("is_divisible_by", "10", 5) is None


def test_width_checks():
    assert run("is_full_width", "ｆｕｌｌ") is None
    assert run("is_half_width", "abc") is None
    assert run("is_variable_width", "ｆｕｌｌ width") is None
    assert run("is_variable_width", "abc") is not None


def test_is_empty():
    assert run("is_empty", "") is None
    assert run("is_empty", "x") == [{"v": "v is not empty."}]


def test_predicate_looked_up_at_call_time():
    with patch("request_checker.strings.predicates.is_email", return_value=True) as is_email:
        assert run("is_email", "anything") is None
    is_email.assert_called_once()


def test_inactive_checker_skips_predicates():
    ctx = RequestContext(body={"v": "x"}, config=CheckerConfig())
    with patch("request_checker.strings.predicates.is_uuid") as is_uuid:
        ctx.check_body("v").is_int().is_uuid()
    is_uuid.assert_not_called()


def test_is_int_beyond_digit_limit(int_digit_limit):
    assert run("is_int", "1" * 5000) == [{"v": "v is not integer."}]
