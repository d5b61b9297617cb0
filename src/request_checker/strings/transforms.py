"""Named string transforms used by the sanitizers."""

from __future__ import annotations

import base64
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import quote

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%d %B %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)

_HTML_ENTITIES = {
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "`": "&#96;",
}


def text(value: Any) -> str:
    """Coerce *value* to text; ``None`` becomes the empty string."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def to_int(value: Any, radix: int | None = None) -> int:
    """Raises ``ValueError`` for digits outside *radix* or past the int conversion limit."""
    return int(text(value).strip(), radix or 10)


def to_float(value: Any) -> float:
    return float(text(value).strip())


def to_date(value: Any) -> datetime | None:
    """Parse ISO 8601, RFC 2822 and a few common layouts; ``None`` if none fit."""
    raw = text(value).strip()
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        pass
    for layout in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, layout)
        except ValueError:
            continue
    return None


def to_boolean(value: Any, strict: bool = False) -> bool:
    """``strict``: only ``"1"``/``"true"`` are true.  Otherwise anything but
    ``"0"``, ``"false"`` and ``""`` is true."""
    raw = text(value)
    if strict:
        return raw in ("1", "true")
    return raw not in ("0", "false", "")


def trim(value: Any, chars: str | None = None) -> str:
    return text(value).strip(chars)


def ltrim(value: Any, chars: str | None = None) -> str:
    return text(value).lstrip(chars)


def rtrim(value: Any, chars: str | None = None) -> str:
    return text(value).rstrip(chars)


def escape(value: Any) -> str:
    """HTML-escape ``& " ' < > / ` ``."""
    return "".join(_HTML_ENTITIES.get(ch, ch) for ch in text(value))


def blacklist(value: Any, chars: str) -> str:
    """Remove every character of the regex character class *chars*."""
    return re.sub(f"[{chars}]+", "", text(value))


def whitelist(value: Any, chars: str) -> str:
    """Keep only characters of the regex character class *chars*."""
    return re.sub(f"[^{chars}]+", "", text(value))


def strip_low(value: Any, keep_new_lines: bool = False) -> str:
    """Drop ASCII control characters, optionally keeping ``\\n`` and ``\\r``."""
    chars = r"\x00-\x09\x0B\x0C\x0E-\x1F\x7F" if keep_new_lines else r"\x00-\x1F\x7F"
    return blacklist(value, chars)


# ── URI and base64 codecs ────────────────────────────────────

_URI_RESERVED = ";,/?:@&=+$#"
_URI_SAFE = _URI_RESERVED + "!*'()"
_URI_COMPONENT_SAFE = "!*'()"
_PERCENT_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode_uri(value: Any) -> str:
    """Percent-encode a whole URI, leaving reserved delimiters alone."""
    return quote(text(value), safe=_URI_SAFE)


def encode_uri_component(value: Any) -> str:
    return quote(text(value), safe=_URI_COMPONENT_SAFE)


def _percent_decode(raw: str, keep: str) -> str:
    if _BAD_PERCENT.search(raw):
        raise ValueError(f"malformed percent escape in {raw!r}")

    def _decode_run(match: re.Match[str]) -> str:
        decoded = bytes.fromhex(match.group(0).replace("%", "")).decode("utf-8")
        return "".join(quote(ch, safe="") if ch in keep else ch for ch in decoded)

    return _PERCENT_RUN.sub(_decode_run, raw)


def decode_uri(value: Any) -> str:
    """Inverse of :func:`encode_uri`; escapes of reserved characters stay encoded.

    Raises ``ValueError`` on malformed escapes or invalid UTF-8.
    """
    return _percent_decode(text(value), _URI_RESERVED)


def decode_uri_component(value: Any) -> str:
    """Raises ``ValueError`` on malformed escapes or invalid UTF-8."""
    return _percent_decode(text(value), "")


def encode_base64(value: Any) -> str:
    raw = value if isinstance(value, bytes) else text(value).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_base64(value: Any, as_bytes: bool = False) -> str | bytes:
    """Raises ``ValueError`` (``binascii.Error``) on bad input."""
    raw = base64.b64decode(text(value), validate=True)
    return raw if as_bytes else raw.decode("utf-8")
