"""bencode error codes and exception class.

Every failure the package reports is a BencodeError whose `.code` is one
of the ERR_* strings below.  Decode errors also carry `.offset`, the
position in the input where the offending token starts, so callers can
say "invalid torrent file at byte 1234" without re-parsing anything.

bencode has no synchronization points: once a token is corrupt there is
nothing to resume from, so none of these are recoverable mid-parse.
"""

from __future__ import annotations

from typing import Optional

# ── Decode errors ────────────────────────────────────────────
# Grep-friendly; the conformance vectors compare against these strings.

ERR_MALFORMED_LENGTH: str = "ERR_MALFORMED_LENGTH"      # length digits not followed by ':'
ERR_LEADING_ZERO: str = "ERR_LEADING_ZERO"              # "03:abc"
ERR_UNEXPECTED_EOF: str = "ERR_UNEXPECTED_EOF"          # input ends mid-token
ERR_MALFORMED_INTEGER: str = "ERR_MALFORMED_INTEGER"    # "ie", "i1x2e", "i-0e", "i03e"
ERR_INTEGER_OVERFLOW: str = "ERR_INTEGER_OVERFLOW"      # outside int64
ERR_UNTERMINATED_LIST: str = "ERR_UNTERMINATED_LIST"
ERR_UNTERMINATED_DICTIONARY: str = "ERR_UNTERMINATED_DICTIONARY"
ERR_NON_STRING_KEY: str = "ERR_NON_STRING_KEY"          # "di5ei6ee"
ERR_UNKNOWN_TAG: str = "ERR_UNKNOWN_TAG"                # lookahead matches no production
ERR_NESTING_TOO_DEEP: str = "ERR_NESTING_TOO_DEEP"
ERR_TRAILING_BYTES: str = "ERR_TRAILING_BYTES"          # strict decode only
ERR_KEY_ORDER: str = "ERR_KEY_ORDER"                    # require_sorted_keys only
ERR_DUPLICATE_KEY: str = "ERR_DUPLICATE_KEY"

# ── Value-model errors ───────────────────────────────────────

ERR_WRONG_VARIANT: str = "ERR_WRONG_VARIANT"            # as_int() on a Bytes, etc.
ERR_UNSUPPORTED_TYPE: str = "ERR_UNSUPPORTED_TYPE"      # float, None, bool, ...


class BencodeError(Exception):
    """Exception for bencode decode and value-model errors.

    `.code` is one of the ERR_* strings above.  `.offset` is the byte
    offset into the decoded buffer, or None when the error is not tied to
    input (e.g. constructing an out-of-range Integer).
    """

    def __init__(self, code: str, msg: str = "", offset: Optional[int] = None) -> None:
        text = msg or code
        if offset is not None:
            text = "{} (at offset {})".format(text, offset)
        super().__init__(text)
        self.code = code
        self.offset = offset
