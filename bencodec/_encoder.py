"""bencode encoder — Value tree to canonical bytes.

Canonical means: decimal lengths and integers with no leading zeros,
"i0e" never "i-0e", and dictionary pairs in ascending byte-wise key
order.  Dictionary keeps its items sorted, so the encoder only has to
walk them in storage order.

The walk uses an explicit work stack rather than recursion.  Trees built
by hand can be nested arbitrarily deep, and encoding is total over valid
Values: it never raises.
"""

from __future__ import annotations

from typing import Any, List

from ._constants import (
    KIND_BYTES,
    KIND_INTEGER,
    KIND_LIST,
    TOKEN_COLON,
    TOKEN_DICT,
    TOKEN_END,
    TOKEN_LIST,
)


def _string_header(data: Any) -> bytes:
    return b"%d" % len(data) + TOKEN_COLON


def encode_value(root: Any) -> bytes:
    """Encode a Value into canonical bencode.

    The stack holds either pending Values or literal byte chunks that are
    already rendered (closing "e" tokens and dictionary keys).  Values
    never appear as raw bytes, so an isinstance check tells them apart.
    """
    out = bytearray()
    stack: List[Any] = [root]

    while stack:
        item = stack.pop()

        if isinstance(item, (bytes, memoryview)):
            out += item
            continue

        kind = item.kind
        if kind == KIND_BYTES:
            out += _string_header(item._data)
            out += item._data
        elif kind == KIND_INTEGER:
            out += b"i%de" % item._value
        elif kind == KIND_LIST:
            out += TOKEN_LIST
            stack.append(TOKEN_END)
            stack.extend(reversed(item._items))
        else:
            out += TOKEN_DICT
            stack.append(TOKEN_END)
            # Pushed in reverse so they pop in ascending key order:
            # key header, key bytes, then the value.
            for key, val in reversed(item._items):
                stack.append(val)
                stack.append(key)
                stack.append(_string_header(key))

    return bytes(out)
