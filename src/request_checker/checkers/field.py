"""FieldChecker — the chainable validator/sanitizer bound to one request field."""

from __future__ import annotations

import base64
import hashlib
import json
import re
import warnings
from collections.abc import Callable, Iterable, MutableMapping
from datetime import date
from typing import TYPE_CHECKING, Any

from request_checker import sink
from request_checker._internal.kinds import TYPE_TAGS, matches_tag
from request_checker.checkers.slot import FieldSlot
from request_checker.exceptions import CheckerConfigError
from request_checker.strings import predicates, transforms

if TYPE_CHECKING:
    from request_checker.context import RequestContext

Pattern = str | re.Pattern[str]

_UNSET: Any = object()


def _as_number(value: Any) -> float | None:
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _loose_equal(left: Any, right: Any) -> bool:
    """``==`` that also matches ``"5"`` against ``5``."""
    if left == right:
        return True
    if isinstance(left, str) != isinstance(right, str):
        a, b = _as_number(left), _as_number(right)
        return a is not None and b is not None and a == b
    return False


def _compare(left: Any, right: Any) -> int | None:
    """Three-way compare with string/number coercion; ``None`` if unordered."""
    if isinstance(left, str) != isinstance(right, str):
        left, right = _as_number(left), _as_number(right)
        if left is None or right is None:
            return None
    try:
        return (left > right) - (left < right)
    except TypeError:
        return None


class FieldChecker:
    """Fluent checker for a single request field.

    Every method returns ``self`` so checks and sanitizers chain freely::

        ctx.check_query("page").optional().to_int().ge(1)

    The checker is *active* until the first failure.  A failure appends
    ``{key: message}`` to the request's shared error list and deactivates
    the checker; later predicates and sanitizers then do nothing.  Nothing
    is ever raised for invalid input.

    Sanitizers write their result both to :attr:`value` and back into the
    container the field came from, so downstream code reading
    ``ctx.query["page"]`` sees the converted value.  Values found through a
    computed path have no single entry to write to and stay on the checker
    until :meth:`clone` names one.

    Besides the checker's own state, most sanitizers also refuse to run
    once *any* field of the request has failed.

    Attributes:
        context: The request context owning the shared error list.
        value:   Current working value.
        exists:  Whether the key was present when the checker was created.
        active:  ``False`` once the checker failed or bailed out.
    """

    def __init__(
        self,
        context: RequestContext,
        key: str,
        value: Any,
        exists: bool,
        container: MutableMapping[str, Any] | None,
        *,
        active: bool = True,
        detached: bool = False,
    ) -> None:
        self.context = context
        self.value = value
        self.exists = exists
        self.active = active
        self._slot = FieldSlot(container, key, detached)

    @property
    def key(self) -> str:
        return self._slot.key

    @property
    def failed(self) -> bool:
        return not self.active

    def __repr__(self) -> str:
        state = "active" if self.active else "failed"
        return f"{type(self).__name__}(key={self.key!r}, value={self.value!r}, {state})"

    # ── error sink and write-back ────────────────────────────

    def add_error(self, message: str) -> None:
        """Record *message* for this field and deactivate the checker."""
        self.active = False
        sink.add_error(self.context, self.key, message)

    def has_error(self) -> bool:
        """``True`` if any checker of this request has recorded an error."""
        return sink.has_error(self.context)

    def _commit(self, value: Any) -> None:
        self.value = value
        self._slot.commit(value)

    def _can_sanitize(self) -> bool:
        return self.active and not self.has_error()

    def _string_check(
        self,
        check: Callable[..., bool],
        tip: str | None,
        phrase: str,
        *args: Any,
    ) -> FieldChecker:
        if self.active and (not isinstance(self.value, str) or not check(self.value, *args)):
            self.add_error(tip or f"{self.key} {phrase}.")
        return self

    # ── presence ─────────────────────────────────────────────

    def optional(self) -> FieldChecker:
        """Skip the rest of the chain when the field was not sent."""
        if not self.exists:
            self.active = False
        return self

    def exist(self, tip: str | None = None) -> FieldChecker:
        if self.active and not self.exists:
            self.add_error(tip or f"{self.key} should exist.")
        return self

    def not_empty(self, tip: str | None = None) -> FieldChecker:
        if self.active and (self.value is None or self.value == ""):
            self.add_error(tip or f"{self.key} can not be empty.")
        return self

    def not_blank(self, tip: str | None = None) -> FieldChecker:
        if self.active and (
            self.value is None or (isinstance(self.value, str) and not self.value.strip())
        ):
            self.add_error(tip or f"{self.key} can not be blank.")
        return self

    def empty(self) -> FieldChecker:
        """Silently end the chain for a falsy value, without reporting an error."""
        if self.active and not self.value:
            self.active = False
        return self

    # ── patterns and assertions ──────────────────────────────

    def match(self, pattern: Pattern, tip: str | None = None) -> FieldChecker:
        if self.active and (
            not isinstance(self.value, str) or re.search(pattern, self.value) is None
        ):
            self.add_error(tip or f"{self.key} is bad format.")
        return self

    def not_match(self, pattern: Pattern, tip: str | None = None) -> FieldChecker:
        if self.active and (
            not isinstance(self.value, str) or re.search(pattern, self.value) is not None
        ):
            self.add_error(tip or f"{self.key} is bad format.")
        return self

    def ensure(self, assertion: Any, tip: str | None = None, should_bail: bool = False) -> FieldChecker:
        """Fail unless *assertion* is truthy.

        ``should_bail`` ends the chain first, which also skips the assertion.
        """
        if should_bail:
            self.active = False
        if self.active and not assertion:
            self.add_error(tip or f"{self.key} failed an assertion.")
        return self

    def ensure_not(self, assertion: Any, tip: str | None = None, should_bail: bool = False) -> FieldChecker:
        if should_bail:
            self.active = False
        if self.active and assertion:
            self.add_error(tip or f"{self.key} failed an assertion.")
        return self

    def check(
        self,
        fn: Callable[..., Any],
        tip: str | None = None,
        scope: Any = None,
    ) -> FieldChecker:
        """Fail unless ``fn(value, key, context)`` is truthy.

        With *scope*, it is passed as the first argument so an unbound
        method can be checked against an instance.
        """
        if self._can_sanitize():
            args = (self.value, self.key, self.context)
            ok = fn(scope, *args) if scope is not None else fn(*args)
            if not ok:
                self.add_error(tip or f"{self.key} check failed.")
        return self

    # ── numbers and lengths ──────────────────────────────────

    def is_int(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        if self.active and not predicates.is_int(str(self.value), options):
            self.add_error(tip or f"{self.key} is not integer.")
        return self

    def is_float(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        if self.active and not predicates.is_float(str(self.value), options):
            self.add_error(tip or f"{self.key} is not float.")
        return self

    def is_length(
        self,
        min_length: int = 0,
        max_length: int | None = None,
        tip: str | None = None,
    ) -> FieldChecker:
        """Require the field to exist and ``min_length <= len(value) <= max_length``."""
        self.exist(tip)
        if not self.active:
            return self
        try:
            length = len(self.value)
        except TypeError:
            length = None
        if length is None or length < min_length:
            self.add_error(tip or f"{self.key}'s length must equal or great than {min_length}.")
            return self
        if max_length is not None and length > max_length:
            self.add_error(tip or f"{self.key}'s length must equal or less than {max_length}.")
        return self

    len = is_length

    def is_byte_length(
        self,
        min_bytes: int = 0,
        max_bytes: int | None = None,
        charset: str | None = None,
        tip: str | None = None,
    ) -> FieldChecker:
        """Bound the encoded size of a non-empty value (``charset`` from config by default)."""
        self.not_empty(tip)
        if not self.active:
            return self
        encoding = charset or self.context.config.byte_length_encoding
        try:
            size = len(transforms.text(self.value).encode(encoding))
        except LookupError:
            raise CheckerConfigError("is_byte_length", f"unknown encoding '{encoding}'") from None
        except UnicodeEncodeError:
            size = None
        upper = "unbounded" if max_bytes is None else max_bytes
        if size is None or size < min_bytes or (max_bytes is not None and size > max_bytes):
            self.add_error(
                tip or f"{self.key}'s byte length must be between {min_bytes} and {upper}."
            )
        return self

    byte_length = is_byte_length

    def is_divisible_by(self, divisor: float, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_divisible_by, tip, f"can not divide by {divisor}", divisor)

    # ── membership and comparison ────────────────────────────

    def is_in(self, choices: Iterable[Any], tip: str | None = None) -> FieldChecker:
        choices = list(choices) if choices is not None else []
        if self.active and choices:
            if not any(_loose_equal(self.value, choice) for choice in choices):
                listed = ",".join(str(choice) for choice in choices)
                self.add_error(tip or f"{self.key} must be in [{listed}].")
        return self

    in_ = is_in

    def eq(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active and not _loose_equal(self.value, other):
            self.add_error(tip or f"{self.key} must equal {other}.")
        return self

    def neq(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active and _loose_equal(self.value, other):
            self.add_error(tip or f"{self.key} must not equal {other}.")
        return self

    def gt(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active:
            order = _compare(self.value, other)
            if order is None or order <= 0:
                self.add_error(tip or f"{self.key} must great than {other}.")
        return self

    def lt(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active:
            order = _compare(self.value, other)
            if order is None or order >= 0:
                self.add_error(tip or f"{self.key} must less than {other}.")
        return self

    def ge(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active:
            order = _compare(self.value, other)
            if order is None or order < 0:
                self.add_error(tip or f"{self.key} must great than or equal {other}.")
        return self

    def le(self, other: Any, tip: str | None = None) -> FieldChecker:
        if self.active:
            order = _compare(self.value, other)
            if order is None or order > 0:
                self.add_error(tip or f"{self.key} must less than or equal {other}.")
        return self

    def contains(self, seed: Any, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.contains, tip, f"must contain {seed}", seed)

    def not_contains(self, seed: Any, tip: str | None = None) -> FieldChecker:
        if self.active and (
            not isinstance(self.value, str) or predicates.contains(self.value, seed)
        ):
            self.add_error(tip or f"{self.key} must not contain {seed}.")
        return self

    # ── string formats ───────────────────────────────────────

    def is_email(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        return self._string_check(predicates.is_email, tip, "is not email format", options)

    def is_url(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        return self._string_check(predicates.is_url, tip, "is not url format", options)

    def is_ip(self, tip: str | None = None, version: int | None = None) -> FieldChecker:
        return self._string_check(predicates.is_ip, tip, "is not ip format", version)

    def is_alpha(self, tip: str | None = None, locale: str = "en-US") -> FieldChecker:
        return self._string_check(predicates.is_alpha, tip, "is not an alpha string", locale)

    def is_numeric(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_numeric, tip, "is not numeric")

    def is_alphanumeric(self, tip: str | None = None, locale: str = "en-US") -> FieldChecker:
        return self._string_check(predicates.is_alphanumeric, tip, "is not an alphanumeric string", locale)

    def is_base64(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_base64, tip, "is not a base64 string")

    def is_hexadecimal(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_hexadecimal, tip, "is not a hexadecimal string")

    def is_hex_color(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_hex_color, tip, "is not hex color format")

    def is_lowercase(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_lowercase, tip, "is not a lowercase string")

    def is_uppercase(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_uppercase, tip, "is not an uppercase string")

    def is_empty(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_empty, tip, "is not empty")

    def is_uuid(self, tip: str | None = None, version: int | None = None) -> FieldChecker:
        return self._string_check(predicates.is_uuid, tip, "is not a UUID format", version)

    def is_date(self, tip: str | None = None) -> FieldChecker:
        if isinstance(self.value, date):
            return self
        return self._string_check(predicates.is_date, tip, "is not a date format")

    def is_time(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_time, tip, "is not a time format")

    def is_after(self, moment: Any = None, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_after, tip, f"must after {moment}", moment)

    def is_before(self, moment: Any = None, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_before, tip, f"must before {moment}", moment)

    def is_credit_card(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_credit_card, tip, "is not credit card format")

    def is_isbn(self, tip: str | None = None, version: int | None = None) -> FieldChecker:
        return self._string_check(predicates.is_isbn, tip, "is not a ISBN format", version)

    def is_json(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_json, tip, "is not a json format")

    def is_multibyte(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_multibyte, tip, "is not a multibyte string")

    def is_ascii(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_ascii, tip, "is not a ascii string")

    def is_full_width(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_full_width, tip, "is not a full width string")

    def is_half_width(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_half_width, tip, "is not a half width string")

    def is_variable_width(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_variable_width, tip, "is not a variable width string")

    def is_surrogate_pair(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_surrogate_pair, tip, "is not a surrogate pair string")

    def is_currency(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        return self._string_check(predicates.is_currency, tip, "is not a currency format", options)

    def is_data_uri(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_data_uri, tip, "is not a data uri format")

    def is_mobile_phone(self, tip: str | None = None, locale: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_mobile_phone, tip, "is not a mobile phone format", locale)

    def is_iso8601(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_iso8601, tip, "is not a ISO8601 string format")

    def is_mac_address(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_mac_address, tip, "is not a MAC address format")

    def is_isin(self, tip: str | None = None) -> FieldChecker:
        return self._string_check(predicates.is_isin, tip, "is not a ISIN format")

    def is_fqdn(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        return self._string_check(
            predicates.is_fqdn, tip, "is not a fully qualified domain name format", options
        )

    # ── sanitizers ───────────────────────────────────────────

    def default(self, fallback: Any) -> FieldChecker:
        """Use *fallback* for a falsy value while the request is still error-free.

        Runs even on an inactive checker.
        """
        if not self.has_error() and not self.value:
            self._commit(fallback)
        return self

    def to_date(self, tip: str | None = None) -> FieldChecker:
        self.is_date(tip)
        if self._can_sanitize() and not isinstance(self.value, date):
            self._commit(transforms.to_date(self.value))
        return self

    def to_int(
        self,
        tip: str | None = None,
        radix: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> FieldChecker:
        if isinstance(self.value, int) and not isinstance(self.value, bool):
            return self
        self.is_int(tip, options)
        if self._can_sanitize():
            try:
                converted = transforms.to_int(self.value, radix)
            except ValueError:
                # digits outside the radix, or beyond the int conversion limit
                self.add_error(tip or f"{self.key} is not integer.")
            else:
                self._commit(converted)
        return self

    def to_float(self, tip: str | None = None, options: dict[str, Any] | None = None) -> FieldChecker:
        if isinstance(self.value, (int, float)) and not isinstance(self.value, bool):
            return self
        self.is_float(tip, options)
        if self._can_sanitize():
            self._commit(transforms.to_float(self.value))
        return self

    def to_json(self, tip: str | None = None) -> FieldChecker:
        if not self._can_sanitize() or isinstance(self.value, (dict, list)):
            return self
        try:
            parsed = json.loads(self.value)
        except (TypeError, ValueError):
            self.add_error(tip or f"{self.key} is not json format.")
        else:
            self._commit(parsed)
        return self

    def to_boolean(self, strict: bool = False) -> FieldChecker:
        if self._can_sanitize() and isinstance(self.value, str):
            self._commit(transforms.to_boolean(self.value, strict))
        return self

    def to_lowercase(self) -> FieldChecker:
        if self._can_sanitize() and self.value:
            self._commit(transforms.text(self.value).lower())
        return self

    to_low = to_lowercase

    def to_uppercase(self) -> FieldChecker:
        if self._can_sanitize() and self.value:
            self._commit(transforms.text(self.value).upper())
        return self

    to_up = to_uppercase

    def trim(self, chars: str | None = None) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.trim(self.value, chars))
        return self

    def ltrim(self, chars: str | None = None) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.ltrim(self.value, chars))
        return self

    def rtrim(self, chars: str | None = None) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.rtrim(self.value, chars))
        return self

    def escape(self) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.escape(self.value))
        return self

    def strip_low(self, keep_new_lines: bool = False) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.strip_low(self.value, keep_new_lines))
        return self

    def whitelist(self, chars: str) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.whitelist(self.value, chars))
        return self

    def blacklist(self, chars: str) -> FieldChecker:
        if self._can_sanitize():
            self._commit(transforms.blacklist(self.value, chars))
        return self

    def encode_uri(self, tip: str | None = None) -> FieldChecker:
        return self._encode(transforms.encode_uri, tip)

    def encode_uri_component(self, tip: str | None = None) -> FieldChecker:
        return self._encode(transforms.encode_uri_component, tip)

    def _encode(self, encoder: Callable[[Any], str], tip: str | None) -> FieldChecker:
        if self._can_sanitize() and self.value:
            try:
                encoded = encoder(self.value)
            except UnicodeEncodeError:
                self.add_error(tip or f"{self.key} can not be encoded.")
            else:
                self._commit(encoded)
        return self

    def decode_uri(self, tip: str | None = None) -> FieldChecker:
        return self._decode(transforms.decode_uri, tip)

    def decode_uri_component(self, tip: str | None = None) -> FieldChecker:
        return self._decode(transforms.decode_uri_component, tip)

    def _decode(self, decoder: Callable[[Any], str], tip: str | None) -> FieldChecker:
        if self._can_sanitize() and self.value:
            try:
                decoded = decoder(self.value)
            except ValueError:
                self.add_error(tip or f"{self.key} is a bad uri to decode.")
            else:
                self._commit(decoded)
        return self

    def replace(self, pattern: Pattern, replacement: str | Callable[[re.Match[str]], str]) -> FieldChecker:
        """Replace every regex match, or the first occurrence of a plain string."""
        if self._can_sanitize() and self.value:
            current = transforms.text(self.value)
            if isinstance(pattern, re.Pattern):
                self._commit(pattern.sub(replacement, current))
            else:
                self._commit(current.replace(pattern, replacement, 1))
        return self

    def encode_base64(self, tip: str | None = None) -> FieldChecker:
        return self._encode(transforms.encode_base64, tip)

    def decode_base64(self, as_bytes: bool = False, tip: str | None = None) -> FieldChecker:
        if not self.has_error() and self.value:
            try:
                decoded = transforms.decode_base64(self.value, as_bytes)
            except ValueError:
                self.add_error(tip or f"{self.key} is not a base64 string.")
            else:
                self._commit(decoded)
        return self

    def hash(self, algorithm: str, encoding: str = "hex", tip: str | None = None) -> FieldChecker:
        """Replace the value by its digest (``hex`` or ``base64`` encoded).

        Text that is not valid UTF-8 (lone surrogates) records an error and
        keeps the value.
        """
        if self.has_error() or not self.value:
            return self
        try:
            data = self.value if isinstance(self.value, bytes) else transforms.text(self.value).encode("utf-8")
        except UnicodeEncodeError:
            self.add_error(tip or f"{self.key} can not be encoded.")
            return self
        try:
            digest = hashlib.new(algorithm, data)
        except ValueError:
            raise CheckerConfigError("hash", f"unsupported algorithm '{algorithm}'") from None
        if encoding == "hex":
            self._commit(digest.hexdigest())
        elif encoding == "base64":
            self._commit(base64.b64encode(digest.digest()).decode("ascii"))
        else:
            raise CheckerConfigError("hash", f"unsupported encoding '{encoding}'")
        return self

    def md5(self) -> FieldChecker:
        return self.hash("md5")

    def sha1(self) -> FieldChecker:
        return self.hash("sha1")

    def clone(self, key: str, value: Any = _UNSET) -> FieldChecker:
        """Expose the (optionally overridden) value under *key* and follow it."""
        if not self.has_error() and self.value:
            self._slot.rebind(key)
            self._commit(self.value if value is _UNSET else value)
        return self

    # ── sequences (computed-path results) ────────────────────

    def get(self, index: int = 0) -> FieldChecker:
        if self.value:
            try:
                self.value = self.value[index]
            except (IndexError, KeyError, TypeError):
                self.value = None
        return self

    def first(self) -> FieldChecker:
        return self.get(0)

    def filter(self, fn: Callable[..., Any], scope: Any = None) -> FieldChecker:
        """Keep the items for which ``fn(item, index, key, context)`` is truthy."""
        if self.value:
            kept = []
            for index, item in enumerate(self.value):
                args = (item, index, self.key, self.context)
                if fn(scope, *args) if scope is not None else fn(*args):
                    kept.append(item)
            self.value = kept
        return self

    # ── shape ────────────────────────────────────────────────

    def type(self, expected: str, tip: str | None = None) -> FieldChecker:
        """Check the runtime shape of a truthy value.

        *expected* is one of ``boolean``, ``string``, ``number``, ``object``,
        ``undefined``, ``array``, ``date``, ``null``, ``nullOrUndefined`` or
        ``primitive``.  Unknown tags only emit a warning.
        """
        tag = expected.lower()
        if tag not in TYPE_TAGS:
            warnings.warn(f"unsupported type check '{expected}'", stacklevel=2)
            return self
        if self.active and self.value and not matches_tag(self.value, tag):
            self.add_error(tip or f"{self.key} is not {expected}.")
        return self
