"""Path lookup — dig through nested dictionaries by key sequence.

Pure traversal over an already-decoded tree; nothing here parses.  A
missing key or a non-Dictionary step yields None rather than raising,
because callers typically probe optional torrent fields
(["info", "files"] on a single-file torrent, say).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ._value import Dictionary, Value


def _path_key(key: Any) -> Any:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    return key


def lookup(value: Value, path: Iterable[Any]) -> Optional[Value]:
    """Return the Value at path, or None as soon as a step fails.

    path is a sequence of keys, each bytes-like or str (UTF-8 encoded).  An
    empty path returns value itself.
    """
    # A lone key would otherwise be iterated character by character.
    if isinstance(path, (str, bytes, bytearray)):
        raise TypeError("path must be a sequence of keys, not a single key")

    cur: Optional[Value] = value
    for key in path:
        if not isinstance(cur, Dictionary):
            return None
        cur = cur.get(_path_key(key))
        if cur is None:
            return None
    return cur
