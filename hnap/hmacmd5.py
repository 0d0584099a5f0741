"""HMAC-MD5 signing used by the HNAP login and request authentication.

HNAP derives its session key and signs every request with HMAC-MD5 rendered
as hex. The digest is kept for protocol compatibility only and gives no
confidentiality or integrity guarantees.

>>> sign("key", "The quick brown fox jumps over the lazy dog")
'80070713463e7749b90c2dc24911e275'
"""

from __future__ import annotations

import hashlib
import hmac


def to_utf8(value: str | bytes) -> bytes:
    """Return the UTF-8 encoding of *value*.

    Strings holding UTF-16 surrogate pairs, as produced by decoding
    ``\\ud83d\\ude00`` style escapes, are joined into their code point
    before encoding.
    """
    if isinstance(value, bytes):
        return value
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError:
        joined = value.encode("utf-16", "surrogatepass").decode(
            "utf-16", "surrogatepass"
        )
        return joined.encode("utf-8", "surrogatepass")


def sign(key: str | bytes, message: str | bytes) -> str:
    """Return the lowercase hex HMAC-MD5 of *message* keyed with *key*."""
    return hmac.new(to_utf8(key), to_utf8(message), hashlib.md5).hexdigest()
