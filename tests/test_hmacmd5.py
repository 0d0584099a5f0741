import hashlib
import hmac

import pytest

from hnap.hmacmd5 import sign, to_utf8

# RFC 2202 test cases for HMAC-MD5
RFC_2202 = [
    (b"\x0b" * 16, b"Hi There", "9294727a3638bb1c13f48ef8158bfc9d"),
    (b"Jefe", b"what do ya want for nothing?", "750c783e6ab0b503eaa86e310a5db738"),
    (b"\xaa" * 16, b"\xdd" * 50, "56be34521d144c88dbb8c733f0e8b3f6"),
    (bytes(range(1, 26)), b"\xcd" * 50, "697eaf0aca3a3aea3a75164746ffaa79"),
    (b"\x0c" * 16, b"Test With Truncation", "56461ef2342edc00f9bab995690efd4c"),
    (
        b"\xaa" * 80,
        b"Test Using Larger Than Block-Size Key - Hash Key First",
        "6b1ab7fe4bd7bf8f0b62e6ce61b9d0cd",
    ),
    (
        b"\xaa" * 80,
        b"Test Using Larger Than Block-Size Key and Larger "
        b"Than One Block-Size Data",
        "6f630fad67cda0ee1fb1f562db3aa53e",
    ),
]


@pytest.mark.parametrize(("key", "message", "digest"), RFC_2202)
def test_rfc2202_vectors(key, message, digest):
    assert sign(key, message) == digest


def test_sign_text():
    digest = sign("key", "The quick brown fox jumps over the lazy dog")
    assert digest == "80070713463e7749b90c2dc24911e275"


def test_sign_empty():
    assert sign("", "") == "74e6f7298a9c2d168935f58c001bad88"


@pytest.mark.parametrize(
    ("key", "message"),
    [
        ("ключ", "сообщение"),
        ("PUBLICKEY123456", "CHALLENGE"),
        ("", "x" * 1000),
        ("k" * 100, ""),
    ],
)
def test_sign_matches_utf8_hmac(key, message):
    expected = hmac.new(
        key.encode("utf-8"), message.encode("utf-8"), hashlib.md5
    ).hexdigest()
    assert sign(key, message) == expected


def test_sign_output_format():
    digest = sign("key", "message")
    assert len(digest) == 32
    assert digest == digest.lower()
    int(digest, 16)


def test_sign_surrogate_pairs():
    """Surrogate pairs hash like the character they encode."""
    assert sign("k", "\ud83d\ude00") == sign("k", "\U0001f600")
    assert to_utf8("\ud83d\ude00") == "\U0001f600".encode()


def test_to_utf8_bytes_passthrough():
    assert to_utf8(b"\x00\xff") == b"\x00\xff"
