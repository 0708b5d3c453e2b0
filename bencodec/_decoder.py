"""bencode decoder — bytes to Value tree.

Grammar, dispatched on one byte of lookahead:

    <len>:<raw>            byte string  (first byte is a digit)
    i<signed-decimal>e     integer
    l<value>*e             list
    d(<string><value>)*e   dictionary

Policy decisions, all per call:

  - Leading zeros ("03:abc", "i03e") and "i-0e" are rejected unless
    allow_leading_zeros=True.  Rejection keeps decode(b).encode() == b
    for everything we accept.
  - Dictionary keys may arrive in any order; the result is re-sorted and
    a repeated key keeps its last value.  require_sorted_keys=True turns
    both into errors instead.
  - Nesting is capped at max_depth.  Each container level costs exactly
    one interpreter frame (parse_value calls itself directly), and a
    RecursionError is still reported as ERR_NESTING_TOO_DEEP in case the
    caller raises max_depth past what the interpreter allows.

By default byte payloads and keys are memoryview slices of the input
(zero copy).  copy=True slices real bytes instead.
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Tuple

from ._constants import (
    BYTE_COLON,
    BYTE_DICT,
    BYTE_END,
    BYTE_INTEGER,
    BYTE_LIST,
    BYTE_NINE,
    BYTE_ZERO,
    DEFAULT_MAX_DEPTH,
    INT64_MAX,
    INT64_MIN,
    MAX_INTEGER_DIGITS,
)
from ._errors import (
    ERR_DUPLICATE_KEY,
    ERR_INTEGER_OVERFLOW,
    ERR_KEY_ORDER,
    ERR_LEADING_ZERO,
    ERR_MALFORMED_INTEGER,
    ERR_MALFORMED_LENGTH,
    ERR_NESTING_TOO_DEEP,
    ERR_NON_STRING_KEY,
    ERR_TRAILING_BYTES,
    ERR_UNEXPECTED_EOF,
    ERR_UNKNOWN_TAG,
    ERR_UNTERMINATED_DICTIONARY,
    ERR_UNTERMINATED_LIST,
    BencodeError,
)
from ._value import Bytes, Dictionary, Integer, List as ListValue, Value

log = logging.getLogger(__name__)

_DIGITS = re.compile(rb"[0-9]*")
_SIGNED_DIGITS = re.compile(rb"(-?)([0-9]*)")

# Lookahead bytes that start a value but can't be a dictionary key.
_NON_STRING_TAGS = frozenset((BYTE_INTEGER, BYTE_LIST, BYTE_DICT))


def _as_buffer(data: Any) -> bytes:
    if isinstance(data, bytes):
        return data
    # Mutable buffers are copied once: borrowed slices must not change
    # underneath a Dictionary that has already hashed them.
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError("bencode input must be bytes-like, not {}".format(type(data).__name__))


def _strip_zeros(digits: bytes) -> bytes:
    return digits.lstrip(b"0") or b"0"


class _Parser:
    """Single-use cursor over one input buffer."""

    __slots__ = ("_buf", "_view", "_end", "_len_digits", "pos",
                 "_max_depth", "_lenient", "_sorted_keys", "_copy")

    def __init__(self, buf: bytes, max_depth: int, allow_leading_zeros: bool,
                 require_sorted_keys: bool, copy: bool) -> None:
        self._buf = buf
        self._view = memoryview(buf)
        self._end = len(buf)
        # A length with more significant digits than this can't fit.
        self._len_digits = len(str(len(buf)))
        self.pos = 0
        self._max_depth = max_depth
        self._lenient = allow_leading_zeros
        self._sorted_keys = require_sorted_keys
        self._copy = copy

    # ── Scalars ───────────────────────────────────────────────

    def _parse_string(self) -> Any:
        """Parse <len>:<raw> at pos.  Caller guarantees a leading digit."""
        buf = self._buf
        start = self.pos
        digits_end = _DIGITS.match(buf, start).end()
        digits = buf[start:digits_end]

        if digits_end >= self._end:
            raise BencodeError(ERR_UNEXPECTED_EOF, "input ends inside string length", start)
        if buf[digits_end] != BYTE_COLON:
            raise BencodeError(ERR_MALFORMED_LENGTH,
                               "string length must be followed by ':'", start)
        if len(digits) > 1 and digits[0] == BYTE_ZERO:
            if not self._lenient:
                raise BencodeError(ERR_LEADING_ZERO,
                                   "string length {} has a leading zero".format(digits.decode("ascii")),
                                   start)
            digits = _strip_zeros(digits)

        first = digits_end + 1
        if len(digits) > self._len_digits:
            raise BencodeError(ERR_UNEXPECTED_EOF,
                               "string length {} exceeds input".format(digits.decode("ascii")), start)
        last = first + int(digits)
        if last > self._end:
            raise BencodeError(ERR_UNEXPECTED_EOF,
                               "string declares {} bytes, {} available".format(
                                   last - first, self._end - first),
                               start)

        self.pos = last
        if self._copy:
            return buf[first:last]
        return self._view[first:last]

    def _parse_integer(self) -> int:
        """Parse i<signed-decimal>e at pos."""
        buf = self._buf
        start = self.pos
        m = _SIGNED_DIGITS.match(buf, start + 1)
        negative = bool(m.group(1))
        digits = m.group(2)
        close = m.end()

        if close >= self._end:
            raise BencodeError(ERR_UNEXPECTED_EOF, "integer has no closing 'e'", start)
        if buf[close] != BYTE_END:
            raise BencodeError(ERR_MALFORMED_INTEGER,
                               "unexpected byte 0x{:02x} in integer".format(buf[close]), start)
        if not digits:
            raise BencodeError(ERR_MALFORMED_INTEGER, "integer has no digits", start)

        # "i03e", "i-0e", "i-00e": all non-canonical.
        if (len(digits) > 1 and digits[0] == BYTE_ZERO) or (negative and digits == b"0"):
            if not self._lenient:
                raise BencodeError(ERR_MALFORMED_INTEGER, "non-canonical integer", start)
            digits = _strip_zeros(digits)

        if len(digits) > MAX_INTEGER_DIGITS:
            raise BencodeError(ERR_INTEGER_OVERFLOW, "integer outside int64 range", start)
        value = -int(digits) if negative else int(digits)
        if value < INT64_MIN or value > INT64_MAX:
            raise BencodeError(ERR_INTEGER_OVERFLOW, "integer outside int64 range", start)

        self.pos = close + 1
        return value

    # ── Values ────────────────────────────────────────────────

    def _enter(self, depth: int, start: int) -> None:
        if depth + 1 > self._max_depth:
            raise BencodeError(ERR_NESTING_TOO_DEEP,
                               "nesting exceeds max_depth={}".format(self._max_depth), start)

    def parse_value(self, depth: int) -> Value:
        """Parse one value at pos.  depth counts enclosing containers."""
        buf = self._buf
        start = self.pos
        if start >= self._end:
            raise BencodeError(ERR_UNEXPECTED_EOF, "expected a value", start)
        lead = buf[start]

        if BYTE_ZERO <= lead <= BYTE_NINE:
            return Bytes._wrap(self._parse_string())

        if lead == BYTE_INTEGER:
            return Integer._wrap(self._parse_integer())

        if lead == BYTE_LIST:
            self._enter(depth, start)
            self.pos = start + 1
            items: List[Value] = []
            while True:
                if self.pos >= self._end:
                    raise BencodeError(ERR_UNTERMINATED_LIST, "list has no closing 'e'", start)
                if buf[self.pos] == BYTE_END:
                    self.pos += 1
                    return ListValue._wrap(tuple(items))
                items.append(self.parse_value(depth + 1))

        if lead == BYTE_DICT:
            self._enter(depth, start)
            self.pos = start + 1
            pairs: List[Tuple[Any, Value]] = []
            prev_key: Optional[bytes] = None
            in_order = True
            while True:
                key_start = self.pos
                if key_start >= self._end:
                    raise BencodeError(ERR_UNTERMINATED_DICTIONARY,
                                       "dictionary has no closing 'e'", start)
                key_lead = buf[key_start]
                if key_lead == BYTE_END:
                    self.pos += 1
                    return Dictionary._wrap(pairs, presorted=in_order)
                if not BYTE_ZERO <= key_lead <= BYTE_NINE:
                    if key_lead in _NON_STRING_TAGS:
                        raise BencodeError(ERR_NON_STRING_KEY,
                                           "dictionary key must be a byte string", key_start)
                    raise BencodeError(ERR_UNKNOWN_TAG,
                                       "unexpected byte 0x{:02x} in key position".format(key_lead),
                                       key_start)

                key = self._parse_string()

                # Once one key is out of order the dict gets re-sorted
                # anyway, so tolerant mode stops comparing.
                if in_order:
                    key_bytes = bytes(key)
                    if prev_key is not None and key_bytes <= prev_key:
                        if self._sorted_keys:
                            if key_bytes == prev_key:
                                raise BencodeError(ERR_DUPLICATE_KEY, "duplicate dictionary key",
                                                   key_start)
                            raise BencodeError(ERR_KEY_ORDER, "dictionary keys out of order",
                                               key_start)
                        in_order = False
                    prev_key = key_bytes

                pairs.append((key, self.parse_value(depth + 1)))

        raise BencodeError(ERR_UNKNOWN_TAG, "unexpected byte 0x{:02x}".format(lead), start)


def _check_depth(max_depth: int) -> None:
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        raise ValueError("max_depth must be a positive int, got {!r}".format(max_depth))


def decode_value(data: Any, *,
                 whole: bool,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 allow_leading_zeros: bool = False,
                 require_sorted_keys: bool = False,
                 copy: bool = False) -> Tuple[Value, int]:
    """Parse one value from the start of data.  Returns (value, consumed).

    whole=True additionally requires that nothing follows the value.
    """
    buf = _as_buffer(data)
    _check_depth(max_depth)
    parser = _Parser(buf, max_depth, allow_leading_zeros, require_sorted_keys, copy)

    try:
        try:
            value = parser.parse_value(0)
        except RecursionError:
            raise BencodeError(ERR_NESTING_TOO_DEEP,
                               "nesting exceeds the interpreter recursion limit",
                               parser.pos) from None
        if whole and parser.pos != len(buf):
            raise BencodeError(ERR_TRAILING_BYTES,
                               "{} bytes after the value".format(len(buf) - parser.pos),
                               parser.pos)
    except BencodeError as exc:
        log.debug("rejected bencode input (%d bytes): %s %s", len(buf), exc.code, exc)
        raise

    return value, parser.pos
