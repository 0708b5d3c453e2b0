"""bencodec — bencode decoding and encoding.

Decode BitTorrent metadata and tracker messages into an immutable value
tree, and encode trees back into canonical bytes.

Quick start:
    >>> from bencodec import decode, encode
    >>> value = decode(b"d3:cow3:moo4:spami42ee")
    >>> value[b"spam"].as_int()
    42
    >>> value.encode()
    b'd3:cow3:moo4:spami42ee'
    >>> encode({"spam": 42, "cow": b"moo"})
    b'd3:cow3:moo4:spami42ee'

Decoded byte strings borrow from the input buffer by default.  Call
value.to_owned() (or pass copy=True) before keeping a value around after
the buffer is gone.
"""

from __future__ import annotations

from typing import Any, Tuple

from ._constants import DEFAULT_MAX_DEPTH, INT64_MAX, INT64_MIN
from ._decoder import decode_value
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
    ERR_UNSUPPORTED_TYPE,
    ERR_UNTERMINATED_DICTIONARY,
    ERR_UNTERMINATED_LIST,
    ERR_WRONG_VARIANT,
    BencodeError,
)
from ._native import from_native, to_native
from ._path import lookup
from ._value import Bytes, Dictionary, Integer, List, Value

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "decode",
    "decode_prefix",
    "encode",
    "from_native",
    "to_native",
    "lookup",
    # Value model
    "Value",
    "Bytes",
    "Integer",
    "List",
    "Dictionary",
    # Exception
    "BencodeError",
    # Error codes
    "ERR_MALFORMED_LENGTH",
    "ERR_LEADING_ZERO",
    "ERR_UNEXPECTED_EOF",
    "ERR_MALFORMED_INTEGER",
    "ERR_INTEGER_OVERFLOW",
    "ERR_UNTERMINATED_LIST",
    "ERR_UNTERMINATED_DICTIONARY",
    "ERR_NON_STRING_KEY",
    "ERR_UNKNOWN_TAG",
    "ERR_NESTING_TOO_DEEP",
    "ERR_TRAILING_BYTES",
    "ERR_KEY_ORDER",
    "ERR_DUPLICATE_KEY",
    "ERR_WRONG_VARIANT",
    "ERR_UNSUPPORTED_TYPE",
    # Limits
    "DEFAULT_MAX_DEPTH",
    "INT64_MIN",
    "INT64_MAX",
]


# ── Core API ──────────────────────────────────────────────────

def decode(data: Any, *,
           max_depth: int = DEFAULT_MAX_DEPTH,
           allow_leading_zeros: bool = False,
           require_sorted_keys: bool = False,
           copy: bool = False) -> Value:
    """Decode exactly one value; bytes left over are ERR_TRAILING_BYTES.

    This is the entry point for whole files and round-trip checks.

    Keyword options:
      - max_depth: deepest list/dict nesting accepted.
      - allow_leading_zeros: accept "03:abc", "i03e" and "i-0e".  Such
        input no longer re-encodes to the same bytes.
      - require_sorted_keys: reject unsorted or repeated dictionary keys
        (ERR_KEY_ORDER / ERR_DUPLICATE_KEY) instead of re-sorting.
      - copy: return owned bytes instead of memoryview slices of data.
    """
    value, _consumed = decode_value(
        data, whole=True, max_depth=max_depth,
        allow_leading_zeros=allow_leading_zeros,
        require_sorted_keys=require_sorted_keys, copy=copy)
    return value


def decode_prefix(data: Any, *,
                  max_depth: int = DEFAULT_MAX_DEPTH,
                  allow_leading_zeros: bool = False,
                  require_sorted_keys: bool = False,
                  copy: bool = False) -> Tuple[Value, int]:
    """Decode one value from the front of data.

    Returns (value, consumed).  Whatever follows data[consumed:] is left
    for the caller, e.g. the piece payload after a ut_metadata header.
    """
    return decode_value(
        data, whole=False, max_depth=max_depth,
        allow_leading_zeros=allow_leading_zeros,
        require_sorted_keys=require_sorted_keys, copy=copy)


def encode(obj: Any) -> bytes:
    """Return canonical bencode for a Value or a plain Python object.

    Plain objects go through from_native() first, so this raises
    BencodeError for unsupported types.  For a Value it never fails.
    """
    return from_native(obj).encode()
