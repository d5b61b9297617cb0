"""Named boolean checks on strings.

Every check takes the string first and optional per-check configuration
after it.  Checks never raise for bad *input*; they raise
:class:`CheckerConfigError` only for bad *configuration* (unknown locale,
unsupported version).
"""

from __future__ import annotations

import json
import re
from datetime import date, datetime
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any
from urllib.parse import urlsplit
from uuid import UUID

import phonenumbers
from email_validator import EmailNotValidError, validate_email
from phonenumbers import NumberParseException, PhoneNumberType

from request_checker.exceptions import CheckerConfigError
from request_checker.strings import transforms

# ── compiled patterns ────────────────────────────────────────

_INT = re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$")
_INT_LEADING_ZEROES = re.compile(r"^[-+]?[0-9]+$")
_FLOAT = re.compile(r"^[-+]?(?:[0-9]+)?(?:\.[0-9]*)?(?:[eE][-+]?[0-9]+)?$")
_NUMERIC = re.compile(r"^[-+]?[0-9]+$")
_HEXADECIMAL = re.compile(r"^[0-9A-F]+$", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^#?(?:[0-9A-F]{3}|[0-9A-F]{6})$", re.IGNORECASE)
_BASE64 = re.compile(r"^(?:[A-Z0-9+/]{4})*(?:[A-Z0-9+/]{2}==|[A-Z0-9+/]{3}=|[A-Z0-9+/]{4})$", re.IGNORECASE)
_MAC = re.compile(r"^(?:[0-9a-fA-F]{2}:){5}[0-9a-fA-F]{2}$")
_ISIN = re.compile(r"^[A-Z]{2}[0-9A-Z]{9}[0-9]$")
_ISBN10 = re.compile(r"^(?:[0-9]{9}X|[0-9]{10})$")
_ISBN13 = re.compile(r"^[0-9]{13}$")
_CREDIT_CARD = re.compile(
    r"^(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|6(?:011|5[0-9][0-9])[0-9]{12}"
    r"|3[47][0-9]{13}|3(?:0[0-5]|[68][0-9])[0-9]{11}|(?:2131|1800|35\d{3})\d{11})$"
)
_TIME = re.compile(r"^(?:[0-1]?[0-9]|2[0-3]):[0-5]?[0-9](?::[0-5]?[0-9])?$")
_MULTIBYTE = re.compile(r"[^\x00-\x7F]")
_ASCII = re.compile(r"^[\x00-\x7F]+$")
_FULL_WIDTH = re.compile(r"[^\u0020-\u007E\uFF61-\uFF9F\uFFA0-\uFFDC\uFFE8-\uFFEE0-9a-zA-Z]")
_HALF_WIDTH = re.compile(r"[\u0020-\u007E\uFF61-\uFF9F\uFFA0-\uFFDC\uFFE8-\uFFEE0-9a-zA-Z]")
_DATA_URI = re.compile(
    r"^\s*data:(?:[a-z]+/[a-z0-9\-+]+(?:;[a-z\-]+=[a-z0-9\-]+)?)?(?:;base64)?,"
    r"[a-z0-9!$&',()*+;=\-._~:@/?%\s]*\s*$",
    re.IGNORECASE,
)
_ISO8601 = re.compile(
    r"^([+-]?\d{4}(?!\d{2}\b))((-?)((0[1-9]|1[0-2])(\3([12]\d|0[1-9]|3[01]))?"
    r"|W([0-4]\d|5[0-2])(-?[1-7])?|(00[1-9]|0[1-9]\d|[12]\d{2}|3([0-5]\d|6[1-6])))"
    r"([T\s]((([01]\d|2[0-3])((:?)[0-5]\d)?|24:?00)([.,]\d+(?!:))?)?(\17[0-5]\d([.,]\d+)?)?"
    r"([zZ]|([+-])([01]\d|2[0-3]):?([0-5]\d)?)?)?)?$"
)
_UUID = {
    None: re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$", re.IGNORECASE),
    3: re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-3[0-9A-F]{3}-[0-9A-F]{4}-[0-9A-F]{12}$", re.IGNORECASE),
    4: re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-4[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}$", re.IGNORECASE),
    5: re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-5[0-9A-F]{3}-[89AB][0-9A-F]{3}-[0-9A-F]{12}$", re.IGNORECASE),
}
_TLD = re.compile(r"^(?:[a-z\u00a1-\uffff]{2,}|xn[a-z0-9-]{2,})$", re.IGNORECASE)
_DOMAIN_PART = re.compile(r"^[a-z\u00a1-\uffff0-9-]+$", re.IGNORECASE)
_FULL_WIDTH_PART = re.compile(r"[\uff01-\uff5e]")

_ALPHA_LETTERS = {
    "en-US": "A-Z",
    "de-DE": "A-ZÄÖÜß",
    "es-ES": "A-ZÁÉÍÑÓÚÜ",
    "fr-FR": "A-ZÀÂÆÇÉÈÊËÏÎÔŒÙÛÜŸ",
    "pt-PT": "A-ZÃÁÀÂÇÉÊÍÕÓÔÚÜ",
    "ru-RU": "А-ЯЁ",
}


def _letters(locale: str) -> str:
    try:
        return _ALPHA_LETTERS[locale]
    except KeyError:
        available = ", ".join(sorted(_ALPHA_LETTERS))
        raise CheckerConfigError("is_alpha", f"unknown locale '{locale}' (available: {available})") from None


# ── numbers ──────────────────────────────────────────────────


def _in_range(number: float, options: dict[str, Any]) -> bool:
    if "min" in options and number < options["min"]:
        return False
    if "max" in options and number > options["max"]:
        return False
    if "lt" in options and not number < options["lt"]:
        return False
    return not ("gt" in options and not number > options["gt"])


def is_int(value: str, options: dict[str, Any] | None = None) -> bool:
    """Integer literal, optionally bounded by ``min``/``max``/``lt``/``gt``.

    ``allow_leading_zeroes`` (default ``True``) accepts ``"007"``.
    """
    options = options or {}
    pattern = _INT_LEADING_ZEROES if options.get("allow_leading_zeroes", True) else _INT
    if not pattern.match(value):
        return False
    try:
        number = int(value)
    except ValueError:
        # longer than the interpreter's int conversion limit
        return False
    return _in_range(number, options)


def is_float(value: str, options: dict[str, Any] | None = None) -> bool:
    if value in ("", ".", "-", "+") or not _FLOAT.match(value):
        return False
    try:
        number = float(value)
    except ValueError:
        return False
    return _in_range(number, options or {})


def is_numeric(value: str) -> bool:
    return bool(_NUMERIC.match(value))


def is_divisible_by(value: str, divisor: float) -> bool:
    if not is_float(value) or not divisor:
        return False
    return float(value) % float(divisor) == 0


def is_currency(value: str, options: dict[str, Any] | None = None) -> bool:
    """Money amount such as ``"$1,000.00"`` or ``"-12.50"``.

    Options: ``symbol`` (``"$"``), ``require_symbol``, ``allow_negatives``,
    ``thousands_separator`` (``","``), ``decimal_separator`` (``"."``),
    ``allow_space_after_symbol``, ``symbol_after_digits``.
    """
    opts = {
        "symbol": "$",
        "require_symbol": False,
        "allow_negatives": True,
        "thousands_separator": ",",
        "decimal_separator": ".",
        "allow_space_after_symbol": False,
        "symbol_after_digits": False,
        **(options or {}),
    }
    sep = re.escape(opts["thousands_separator"])
    dec = re.escape(opts["decimal_separator"])
    amount = rf"(?:0|[1-9]\d{{0,2}}(?:{sep}\d{{3}})*|[1-9]\d*)(?:{dec}\d{{2}})?"
    space = " ?" if opts["allow_space_after_symbol"] else ""
    symbol = re.escape(opts["symbol"])
    quantifier = "" if opts["require_symbol"] else "?"
    if opts["symbol_after_digits"]:
        body = rf"{amount}(?:{space}{symbol}){quantifier}"
    else:
        body = rf"(?:{symbol}{space}){quantifier}{amount}"
    sign = "-?" if opts["allow_negatives"] else ""
    return re.fullmatch(sign + body, value) is not None


# ── character classes ────────────────────────────────────────


def is_alpha(value: str, locale: str = "en-US") -> bool:
    return re.fullmatch(f"[{_letters(locale)}]+", value, re.IGNORECASE) is not None


def is_alphanumeric(value: str, locale: str = "en-US") -> bool:
    return re.fullmatch(f"[0-9{_letters(locale)}]+", value, re.IGNORECASE) is not None


def is_hexadecimal(value: str) -> bool:
    return bool(_HEXADECIMAL.match(value))


def is_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value))


def is_lowercase(value: str) -> bool:
    return value == value.lower()


def is_uppercase(value: str) -> bool:
    return value == value.upper()


def is_empty(value: str) -> bool:
    return len(value) == 0


def is_base64(value: str) -> bool:
    return len(value) % 4 == 0 and bool(_BASE64.match(value))


def is_multibyte(value: str) -> bool:
    return bool(_MULTIBYTE.search(value))


def is_ascii(value: str) -> bool:
    return bool(_ASCII.match(value))


def is_full_width(value: str) -> bool:
    return bool(_FULL_WIDTH.search(value))


def is_half_width(value: str) -> bool:
    return bool(_HALF_WIDTH.search(value))


def is_variable_width(value: str) -> bool:
    return is_full_width(value) and is_half_width(value)


def is_surrogate_pair(value: str) -> bool:
    # astral code points are what UTF-16 stores as surrogate pairs
    return any(ord(ch) > 0xFFFF for ch in value)


# ── network ──────────────────────────────────────────────────


def is_email(value: str, options: dict[str, Any] | None = None) -> bool:
    """Syntax-only email check; extra options go to ``email_validator``."""
    try:
        validate_email(value, check_deliverability=False, **(options or {}))
    except EmailNotValidError:
        return False
    return True


def is_ip(value: str, version: int | None = None) -> bool:
    try:
        address = ip_address(value)
    except ValueError:
        return False
    if version in (None, 0):
        return True
    if version == 4:
        return isinstance(address, IPv4Address)
    if version == 6:
        return isinstance(address, IPv6Address)
    raise CheckerConfigError("is_ip", f"unsupported IP version {version!r}")


def is_fqdn(value: str, options: dict[str, Any] | None = None) -> bool:
    """Fully qualified domain name.

    Options: ``require_tld`` (``True``), ``allow_underscores``,
    ``allow_trailing_dot``.
    """
    options = options or {}
    if options.get("allow_trailing_dot") and value.endswith("."):
        value = value[:-1]
    parts = value.split(".")
    if options.get("require_tld", True):
        tld = parts.pop()
        if not parts or not _TLD.match(tld):
            return False
    allow_underscores = options.get("allow_underscores", False)
    for part in parts:
        if allow_underscores:
            if "__" in part:
                return False
            part = part.replace("_", "")
        if not _DOMAIN_PART.match(part) or _FULL_WIDTH_PART.search(part):
            return False
        if part.startswith("-") or part.endswith("-"):
            return False
    return True


def is_url(value: str, options: dict[str, Any] | None = None) -> bool:
    """URL with an allowed scheme and a domain name or IP host.

    Options: ``protocols`` (``("http", "https", "ftp")``),
    ``require_protocol``, ``require_tld`` (``True``),
    ``allow_underscores``.
    """
    options = options or {}
    if not value or len(value) >= 2083 or re.search(r"\s", value) or value.startswith("mailto:"):
        return False
    protocols = tuple(options.get("protocols", ("http", "https", "ftp")))
    if "://" not in value:
        if options.get("require_protocol"):
            return False
        value = f"http://{value}"
    try:
        parts = urlsplit(value)
        port = parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in protocols or not parts.hostname:
        return False
    if port is not None and not 0 < port <= 65535:
        return False
    host = parts.hostname
    if is_ip(host):
        return True
    return is_fqdn(
        host,
        {
            "require_tld": options.get("require_tld", True),
            "allow_underscores": options.get("allow_underscores", False),
        },
    )


def is_mac_address(value: str) -> bool:
    return bool(_MAC.match(value))


def is_data_uri(value: str) -> bool:
    return bool(_DATA_URI.match(value))


def is_mobile_phone(value: str, locale: str | None = None) -> bool:
    """Mobile number, parsed with ``phonenumbers``.

    ``locale`` such as ``"en-GB"`` selects the default region for numbers
    written without a country code; without it the number must start
    with ``+``.
    """
    region = locale.replace("_", "-").split("-")[-1].upper() if locale else None
    try:
        number = phonenumbers.parse(value, region)
    except NumberParseException:
        return False
    if not phonenumbers.is_valid_number(number):
        return False
    return phonenumbers.number_type(number) in (
        PhoneNumberType.MOBILE,
        PhoneNumberType.FIXED_LINE_OR_MOBILE,
    )


# ── identifiers ──────────────────────────────────────────────


def is_uuid(value: str, version: int | None = None) -> bool:
    try:
        pattern = _UUID[version]
    except KeyError:
        raise CheckerConfigError("is_uuid", f"unsupported UUID version {version!r}") from None
    if not pattern.match(value):
        return False
    return version is None or UUID(value).version == version


def _luhn(digits: str) -> bool:
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_credit_card(value: str) -> bool:
    digits = re.sub(r"[^0-9]+", "", value)
    return bool(_CREDIT_CARD.match(digits)) and _luhn(digits)


def is_isin(value: str) -> bool:
    if not _ISIN.match(value):
        return False
    # letters expand to two digits (A=10 … Z=35) before the Luhn pass
    digits = "".join(str(int(char, 36)) for char in value)
    return _luhn(digits)


def is_isbn(value: str, version: int | str | None = None) -> bool:
    sanitized = re.sub(r"[\s-]+", "", value)
    version = str(version) if version else None
    if version is None:
        return is_isbn(sanitized, 10) or is_isbn(sanitized, 13)
    if version == "10":
        if not _ISBN10.match(sanitized):
            return False
        total = sum((i + 1) * int(sanitized[i]) for i in range(9))
        last = 10 if sanitized[9] == "X" else int(sanitized[9])
        return (total + 10 * last) % 11 == 0
    if version == "13":
        if not _ISBN13.match(sanitized):
            return False
        total = sum((1, 3)[i % 2] * int(sanitized[i]) for i in range(12))
        return (10 - total % 10) % 10 == int(sanitized[12])
    raise CheckerConfigError("is_isbn", f"unsupported ISBN version {version!r}")


# ── dates and structured text ────────────────────────────────


def is_date(value: str) -> bool:
    return transforms.to_date(value) is not None


def is_time(value: str) -> bool:
    return bool(_TIME.match(value))


def is_iso8601(value: str) -> bool:
    return bool(_ISO8601.match(value))


def _comparable(moment: datetime | date | str | None) -> datetime | None:
    if moment is None:
        return datetime.now()
    if isinstance(moment, str):
        moment = transforms.to_date(moment)
        if moment is None:
            return None
    if not isinstance(moment, datetime):
        moment = datetime(moment.year, moment.month, moment.day)
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def is_after(value: str, moment: datetime | date | str | None = None) -> bool:
    """``value`` is a date strictly after *moment* (default: now)."""
    original, comparison = _comparable(value), _comparable(moment)
    return original is not None and comparison is not None and original > comparison


def is_before(value: str, moment: datetime | date | str | None = None) -> bool:
    """``value`` is a date strictly before *moment* (default: now)."""
    original, comparison = _comparable(value), _comparable(moment)
    return original is not None and comparison is not None and original < comparison


def is_json(value: str) -> bool:
    """Parses as JSON *and* yields an object or array."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return False
    return isinstance(parsed, (dict, list))


def contains(value: str, seed: Any) -> bool:
    return str(seed) in value
