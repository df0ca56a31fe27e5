"""Deterministic UTF-8 encoding for string payloads.

A Python str can hold surrogate code points, which UTF-8 cannot represent.
Two policies are supported:

    replace  (default) a high+low surrogate pair is joined into the
             supplementary code point it denotes; any other surrogate
             becomes U+FFFD (EF BF BD).
    strict   the string is rejected with UnicodeEncodeError.

Either way the same input always yields the same bytes.
"""

from __future__ import annotations

import codecs

POLICIES = ("replace", "strict")

_HANDLER_NAME = "bytesink.surrogates"
_REPLACEMENT = "\ufffd"


def _join_surrogates(err: UnicodeError) -> tuple[bytes, int]:
    if not isinstance(err, UnicodeEncodeError):
        raise err
    text = err.object
    out: list[str] = []
    i = err.start
    while i < err.end:
        ch = ord(text[i])
        if 0xD800 <= ch <= 0xDBFF and i + 1 < err.end:
            nxt = ord(text[i + 1])
            if 0xDC00 <= nxt <= 0xDFFF:
                out.append(chr(0x10000 + ((ch - 0xD800) << 10) + (nxt - 0xDC00)))
                i += 2
                continue
        out.append(_REPLACEMENT)
        i += 1
    # The UTF-8 encoder only takes ASCII str replacements; bytes go through as-is.
    return "".join(out).encode("utf-8"), i


codecs.register_error(_HANDLER_NAME, _join_surrogates)


def check_policy(policy: str) -> str:
    if policy not in POLICIES:
        raise ValueError(f"Unknown surrogate policy: {policy!r}. Available: {list(POLICIES)}")
    return policy


def encode(s: str, policy: str = "replace") -> bytes:
    """Encode s as UTF-8 under the given surrogate policy."""
    if not isinstance(s, str):
        raise TypeError(f"expected str, got {type(s).__name__}")
    if check_policy(policy) == "strict":
        return s.encode("utf-8")
    return s.encode("utf-8", _HANDLER_NAME)
