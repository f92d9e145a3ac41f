"""Encoding and hashing helpers shared by the key decoder and the engine."""

from __future__ import annotations

import base64
import hashlib
import re
from typing import Union

from .errors import InvalidKeyFormat


BytesLike = Union[bytes, bytearray, memoryview]

# unpadded base64url alphabet (RFC 4648 §5)
_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


# ---------------------------------------------------------------------------
# Base64url (RFC 4648 §5, no padding)
# ---------------------------------------------------------------------------

def b64u(b: BytesLike) -> str:
    """Base64url-encode bytes without trailing ``=`` padding."""
    return base64.urlsafe_b64encode(bytes(b)).decode("ascii").rstrip("=")


def ub64u(s: Union[str, bytes]) -> bytes:
    """
    Strict unpadded base64url decode.
    Raises InvalidKeyFormat on padding, foreign characters or impossible length.
    """
    if isinstance(s, (bytes, bytearray)):
        try:
            s = bytes(s).decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidKeyFormat("base64url input must be ASCII") from e
    if not isinstance(s, str):
        raise InvalidKeyFormat(f"base64url input must be str, got {type(s).__name__}")
    if not _B64URL_RE.fullmatch(s):
        raise InvalidKeyFormat("Invalid base64url: unexpected character or padding")
    if len(s) % 4 == 1:
        raise InvalidKeyFormat("Invalid base64url: impossible length")

    pad = "=" * ((4 - len(s) % 4) % 4)
    try:
        return base64.urlsafe_b64decode(s + pad)
    except Exception as e:
        raise InvalidKeyFormat(f"Invalid base64url: {e}") from e


# ---------------------------------------------------------------------------
# Integer <-> octet string (RFC 8017 §4)
# ---------------------------------------------------------------------------

def i2osp(x: int, length: int) -> bytes:
    if x < 0:
        raise ValueError("integer must be non-negative")
    if x >= 256 ** length:
        raise ValueError(f"integer too large to encode in {length} octets")
    return x.to_bytes(length, "big")


def os2ip(b: BytesLike) -> int:
    return int.from_bytes(bytes(b), "big")


def byte_length(n: int) -> int:
    """Octets needed to hold ``n``: ceil(bitlength(n) / 8)."""
    return (n.bit_length() + 7) // 8


def minimal_bytes(n: int) -> bytes:
    """Big-endian encoding of ``n`` without leading zero octets."""
    return n.to_bytes(max(1, byte_length(n)), "big")


# ---------------------------------------------------------------------------
# Messages / hashing
# ---------------------------------------------------------------------------

def to_bytes(message: Union[str, BytesLike]) -> bytes:
    """Messages are opaque bytes; ``str`` is accepted and UTF-8 encoded."""
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    raise TypeError(f"message must be bytes or str, got {type(message).__name__}")


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(bytes(data)).digest()
