"""bencode value model — the four variants, ordering, and ownership.

    Bytes       — raw byte string, no encoding assumed
    Integer     — signed 64-bit
    List        — ordered sequence of values
    Dictionary  — byte-string keys, unique, always held in sorted order

Values are immutable and hashable.  A decoded value is "borrowed" when
its byte payloads are memoryview slices of the input buffer; to_owned()
deep-copies it into plain bytes so it can outlive that buffer.  Borrowed
and owned values with the same content compare and hash equal.

Key ordering is raw unsigned-octet comparison (what Python's bytes
comparison already does): not locale collation, not case-folded.  The
Dictionary constructor sorts, so every code path that builds one gets
canonical order for free.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping, Sequence
from typing import Any, Iterable, Iterator, Tuple, Union

from ._constants import (
    DEFAULT_MAX_DEPTH,
    INT64_MAX,
    INT64_MIN,
    KIND_BYTES,
    KIND_DICT,
    KIND_INTEGER,
    KIND_LIST,
)
from ._encoder import encode_value
from ._errors import (
    ERR_INTEGER_OVERFLOW,
    ERR_NESTING_TOO_DEEP,
    ERR_UNSUPPORTED_TYPE,
    ERR_WRONG_VARIANT,
    BencodeError,
)

ByteData = Union[bytes, memoryview]


def _coerce_bytes(raw: Any) -> ByteData:
    """Normalize a byte payload or key.

    bytes pass through.  A read-only, flat, unsigned-byte memoryview over
    bytes is kept as-is (that's a borrowed slice); any other buffer is
    copied, since a read-only view of a bytearray still changes when the
    bytearray does.
    """
    if isinstance(raw, bytes):
        return raw
    if isinstance(raw, memoryview):
        if (isinstance(raw.obj, bytes) and raw.format == "B"
                and raw.ndim == 1 and raw.c_contiguous):
            return raw
        return raw.tobytes()
    if isinstance(raw, bytearray):
        return bytes(raw)
    if isinstance(raw, Bytes):
        return raw._data
    raise BencodeError(ERR_UNSUPPORTED_TYPE,
                       "expected a byte string, got {}".format(type(raw).__name__))


def _pair_sort_key(pair: Tuple[ByteData, Any]) -> bytes:
    return bytes(pair[0])


@functools.total_ordering
class Value:
    """Base class for the four bencode variants.

    Equality is structural, ordering is total across variants (see
    KIND_* in _constants), and the as_*() accessors fail loudly when the
    caller's shape assumption is wrong instead of coercing.
    """

    __slots__ = ()

    kind: int = -1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind == other.kind and _compare(self, other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self.kind != other.kind:
            return self.kind < other.kind
        return _compare(self, other) < 0

    def __hash__(self) -> int:
        # Canonical encoding is injective, so equal trees hash equal.
        return hash((self.kind, encode_value(self)))

    def __repr__(self) -> str:
        return _render(self)

    # ── Accessors ─────────────────────────────────────────────

    def _wrong(self, wanted: str) -> BencodeError:
        return BencodeError(ERR_WRONG_VARIANT,
                            "expected {}, found {}".format(wanted, type(self).__name__))

    def as_bytes(self) -> bytes:
        raise self._wrong("Bytes")

    def as_str(self, encoding: str = "utf-8") -> str:
        raise self._wrong("Bytes")

    def as_int(self) -> int:
        raise self._wrong("Integer")

    def as_list(self) -> "List":
        raise self._wrong("List")

    def as_dict(self) -> "Dictionary":
        raise self._wrong("Dictionary")

    # ── Ownership / serialization ────────────────────────────

    @property
    def is_borrowed(self) -> bool:
        """True if this value or any descendant references a caller's buffer."""
        stack: "list[Value]" = [self]
        while stack:
            val = stack.pop()
            if isinstance(val, Bytes):
                if isinstance(val._data, memoryview):
                    return True
            elif isinstance(val, List):
                stack.extend(val._items)
            elif isinstance(val, Dictionary):
                for key, child in val._items:
                    if isinstance(key, memoryview):
                        return True
                    stack.append(child)
        return False

    def to_owned(self, max_depth: int = DEFAULT_MAX_DEPTH) -> "Value":
        """Deep-copy into a tree whose payloads are independent bytes."""
        return _own(self, 0, max_depth)

    def encode(self) -> bytes:
        """Canonical bencode serialization."""
        return encode_value(self)


class Bytes(Value):
    __slots__ = ("_data",)

    kind = KIND_BYTES

    def __init__(self, data: Any = b"") -> None:
        self._data = _coerce_bytes(data)

    @classmethod
    def _wrap(cls, data: ByteData) -> "Bytes":
        # Decoder fast path: data is already bytes or a read-only slice.
        self = object.__new__(cls)
        self._data = data
        return self

    @property
    def data(self) -> ByteData:
        return self._data

    def __hash__(self) -> int:
        # memoryview hashes like the equivalent bytes, no copy needed.
        return hash((self.kind, self._data))

    def __len__(self) -> int:
        return len(self._data)

    def as_bytes(self) -> bytes:
        return bytes(self._data)

    def as_str(self, encoding: str = "utf-8") -> str:
        return bytes(self._data).decode(encoding)


class Integer(Value):
    __slots__ = ("_value",)

    kind = KIND_INTEGER

    def __init__(self, value: int = 0) -> None:
        # bool is an int subclass; Integer(True) would silently become i1e.
        if isinstance(value, bool) or not isinstance(value, int):
            raise BencodeError(ERR_UNSUPPORTED_TYPE,
                               "Integer needs an int, got {}".format(type(value).__name__))
        if value < INT64_MIN or value > INT64_MAX:
            raise BencodeError(ERR_INTEGER_OVERFLOW, "integer {} outside int64 range".format(value))
        self._value = value

    @classmethod
    def _wrap(cls, value: int) -> "Integer":
        self = object.__new__(cls)
        self._value = value
        return self

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __hash__(self) -> int:
        return hash((self.kind, self._value))

    def as_int(self) -> int:
        return self._value


class List(Value, Sequence):
    __slots__ = ("_items",)

    kind = KIND_LIST

    def __init__(self, items: Iterable[Value] = ()) -> None:
        items = tuple(items)
        for item in items:
            if not isinstance(item, Value):
                raise BencodeError(ERR_UNSUPPORTED_TYPE,
                                   "List items must be Values, got {}".format(type(item).__name__))
        self._items = items

    @classmethod
    def _wrap(cls, items: Tuple[Value, ...]) -> "List":
        self = object.__new__(cls)
        self._items = items
        return self

    def __getitem__(self, index: Any) -> Any:
        return self._items[index]

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> "List":
        return self


class Dictionary(Value, Mapping):
    """Read-only mapping from byte-string keys to Values.

    Accepts a mapping or an iterable of (key, value) pairs.  Later
    duplicates replace earlier ones, like dict().  Iteration is always in
    ascending byte-wise key order, whatever order the input had.
    """

    __slots__ = ("_items", "_index")

    kind = KIND_DICT

    def __init__(self, pairs: Any = ()) -> None:
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        index = {}
        for key, val in pairs:
            if not isinstance(val, Value):
                raise BencodeError(ERR_UNSUPPORTED_TYPE,
                                   "Dictionary values must be Values, got {}".format(type(val).__name__))
            index[_coerce_bytes(key)] = val
        self._index = index
        self._items = tuple(sorted(index.items(), key=_pair_sort_key))

    @classmethod
    def _wrap(cls, pairs: "list[Tuple[ByteData, Value]]", presorted: bool) -> "Dictionary":
        # Decoder fast path.  presorted means keys arrived strictly
        # ascending, so there is nothing to dedupe or reorder.
        self = object.__new__(cls)
        self._index = dict(pairs)
        if presorted:
            self._items = tuple(pairs)
        else:
            self._items = tuple(sorted(self._index.items(), key=_pair_sort_key))
        return self

    def __getitem__(self, key: Any) -> Value:
        if isinstance(key, Bytes):
            key = key._data
        return self._index[key]

    def __iter__(self) -> Iterator[ByteData]:
        return (k for k, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_dict(self) -> "Dictionary":
        return self


# ── Borrowed → owned conversion ──────────────────────────────
# Same depth discipline as the decoder: one frame per container level,
# refuse to go past max_depth instead of exhausting the stack.

def _own(val: Value, depth: int, max_depth: int) -> Value:
    if isinstance(val, Bytes):
        if isinstance(val._data, memoryview):
            return Bytes._wrap(val._data.tobytes())
        return val
    if isinstance(val, Integer):
        return val
    if depth + 1 > max_depth:
        raise BencodeError(ERR_NESTING_TOO_DEEP, "depth exceeds max_depth={}".format(max_depth))
    # One frame per level: before 3.12 a comprehension is a frame too.
    if isinstance(val, List):
        items = []
        for item in val._items:
            items.append(_own(item, depth + 1, max_depth))
        return List._wrap(tuple(items))
    if isinstance(val, Dictionary):
        pairs = []
        for k, v in val._items:
            pairs.append((bytes(k), _own(v, depth + 1, max_depth)))
        return Dictionary._wrap(pairs, presorted=True)
    raise BencodeError(ERR_UNSUPPORTED_TYPE, "not a bencode value: {}".format(type(val).__name__))


# ── Comparison and repr without recursion ────────────────────
# Decoded trees reach DEFAULT_MAX_DEPTH and hand-built ones go deeper;
# these walk an explicit stack like encode_value.

_CLOSE = (-1,)


def _tokens(root: Value) -> Iterator[Tuple[Any, ...]]:
    """Flatten a tree into tokens whose lexicographic order is Value order.

    Scalars are (kind, payload), containers open with (kind,) and end with
    _CLOSE, and each dictionary key is (KIND_BYTES, key).  _CLOSE sorts
    below every other token, so a shorter container sorts first.
    """
    stack: "list[Any]" = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, tuple):
            yield item
        elif isinstance(item, Bytes):
            yield (KIND_BYTES, bytes(item._data))
        elif isinstance(item, Integer):
            yield (KIND_INTEGER, item._value)
        elif isinstance(item, List):
            yield (KIND_LIST,)
            stack.append(_CLOSE)
            stack.extend(reversed(item._items))
        else:
            yield (KIND_DICT,)
            stack.append(_CLOSE)
            for key, val in reversed(item._items):
                stack.append(val)
                stack.append((KIND_BYTES, bytes(key)))


def _compare(a: Value, b: Value) -> int:
    # Equal prefixes mean both walks are at the same structural position,
    # so they also run out together.
    for ta, tb in zip(_tokens(a), _tokens(b)):
        if ta != tb:
            return -1 if ta < tb else 1
    return 0


def _render(root: Value) -> str:
    out = []
    stack: "list[Any]" = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, Bytes):
            out.append("Bytes({!r})".format(bytes(item._data)))
        elif isinstance(item, Integer):
            out.append("Integer({})".format(item._value))
        elif isinstance(item, List):
            out.append("List([")
            stack.append("])")
            for i in range(len(item._items) - 1, -1, -1):
                stack.append(item._items[i])
                if i:
                    stack.append(", ")
        else:
            out.append("Dictionary({")
            stack.append("})")
            for i in range(len(item._items) - 1, -1, -1):
                key, val = item._items[i]
                stack.append(val)
                stack.append("{!r}: ".format(bytes(key)))
                if i:
                    stack.append(", ")
    return "".join(out)
