"""bencode constants — grammar tokens, integer bounds, and default limits."""

from __future__ import annotations

# ── Grammar tokens (single byte each) ────────────────────────
# A value's variant is fixed by its first byte: a digit starts a byte
# string, the letters below start the other three variants.
TOKEN_INTEGER: bytes = b"i"
TOKEN_LIST: bytes = b"l"
TOKEN_DICT: bytes = b"d"
TOKEN_END: bytes = b"e"
TOKEN_COLON: bytes = b":"

# Same tokens as ints, for comparing against buf[off].
BYTE_INTEGER: int = TOKEN_INTEGER[0]
BYTE_LIST: int = TOKEN_LIST[0]
BYTE_DICT: int = TOKEN_DICT[0]
BYTE_END: int = TOKEN_END[0]
BYTE_COLON: int = TOKEN_COLON[0]
BYTE_ZERO: int = 0x30
BYTE_NINE: int = 0x39

# ── Signed 64-bit integer range ──────────────────────────────
# The grammar allows unbounded digit runs.  Values are limited to
# signed 64-bit; both decode and Integer() range-check.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Longest digit run that can still fit in int64 ("9223372036854775808"
# is 19 digits).  Anything longer overflows without calling int().
MAX_INTEGER_DIGITS: int = 19

# ── Safety limits ────────────────────────────────────────────
# Lists and dicts recurse one interpreter frame per level.  512 stays
# well below CPython's default recursion limit of 1000.
DEFAULT_MAX_DEPTH: int = 512

# ── Variant kinds ────────────────────────────────────────────
# Also the cross-variant sort order: any Bytes < any Integer < any List
# < any Dictionary.
KIND_BYTES: int = 0
KIND_INTEGER: int = 1
KIND_LIST: int = 2
KIND_DICT: int = 3
