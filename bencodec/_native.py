"""Plain-Python adapter — convert between built-in objects and Values.

Type mapping:
    bytes / bytearray / memoryview  → Bytes
    str                             → Bytes (UTF-8)
    int                             → Integer (int64 range-checked)
    list / tuple                    → List
    dict / Mapping                  → Dictionary (bytes or str keys)
    Value                           → passed through unchanged
    bool / None / float / other     → ERR_UNSUPPORTED_TYPE

to_native() goes the other way and always returns owned data: bytes,
int, list, and dict with bytes keys in canonical order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from ._constants import DEFAULT_MAX_DEPTH
from ._errors import (
    ERR_DUPLICATE_KEY,
    ERR_NESTING_TOO_DEEP,
    ERR_UNSUPPORTED_TYPE,
    BencodeError,
)
from ._value import Bytes, Dictionary, Integer, List, Value


def _native_key(key: Any) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    raise BencodeError(ERR_UNSUPPORTED_TYPE,
                       "dictionary key must be bytes or str, got {}".format(type(key).__name__))


def _descend(depth: int, max_depth: int) -> None:
    if depth + 1 > max_depth:
        raise BencodeError(ERR_NESTING_TOO_DEEP, "depth exceeds max_depth={}".format(max_depth))


def from_native(obj: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Build a Value tree from built-in Python objects."""
    return _from_native(obj, 0, max_depth)


def _from_native(obj: Any, depth: int, max_depth: int) -> Value:
    # Value first: Dictionary is a Mapping and List a Sequence.
    if isinstance(obj, Value):
        return obj

    # bool before int.  isinstance(True, int) is True, and bencode has
    # no boolean type; "i1e" would be a silent lie.
    if isinstance(obj, bool):
        raise BencodeError(ERR_UNSUPPORTED_TYPE, "bencode has no boolean type")

    if isinstance(obj, int):
        return Integer(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Bytes(obj)

    if isinstance(obj, str):
        return Bytes(obj.encode("utf-8"))

    if isinstance(obj, (list, tuple)):
        _descend(depth, max_depth)
        items = []
        for item in obj:
            items.append(_from_native(item, depth + 1, max_depth))
        return List(items)

    if isinstance(obj, Mapping):
        _descend(depth, max_depth)
        out: Dict[bytes, Value] = {}
        for k, v in obj.items():
            kb = _native_key(k)
            # {"a": 1, b"a": 2} collapses to one key; refuse to pick a winner.
            if kb in out:
                raise BencodeError(ERR_DUPLICATE_KEY, "duplicate key {!r}".format(kb))
            out[kb] = _from_native(v, depth + 1, max_depth)
        return Dictionary(out)

    raise BencodeError(ERR_UNSUPPORTED_TYPE,
                       "cannot bencode {}".format(type(obj).__name__))


def to_native(value: Value, *, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Convert a Value tree into built-in objects with owned bytes."""
    return _to_native(value, 0, max_depth)


def _to_native(value: Value, depth: int, max_depth: int) -> Any:
    if isinstance(value, Bytes):
        return value.as_bytes()
    if isinstance(value, Integer):
        return value.value
    if isinstance(value, List):
        _descend(depth, max_depth)
        out = []
        for item in value:
            out.append(_to_native(item, depth + 1, max_depth))
        return out
    if isinstance(value, Dictionary):
        _descend(depth, max_depth)
        mapping = {}
        for k, v in value.items():
            mapping[bytes(k)] = _to_native(v, depth + 1, max_depth)
        return mapping
    raise BencodeError(ERR_UNSUPPORTED_TYPE,
                       "not a bencode value: {}".format(type(value).__name__))
