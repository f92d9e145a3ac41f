"""RSASSA-PKCS1-v1_5 with SHA-256 (RFC 8017 §8.2, §9.2).

Exports:
- SHA256_DIGEST_INFO_PREFIX: DER prefix of DigestInfo for SHA-256
- NullRandom: deterministic byte source handed to the padding step
- emsa_pkcs1_v1_5_encode(message, k, rng) -> EM
- rsasp1(key, m) / rsavp1(key, s): raw RSA primitives
- sign(private_key, message) -> k-byte signature
- verify(public_key, message, signature) -> bool
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional, Union

from ..common.errors import KeyTooSmall, SignatureLengthMismatch
from ..common.utils import BytesLike, i2osp, os2ip, sha256, to_bytes
from .keys import RSAPrivateKey, RSAPublicKey

logger = logging.getLogger(__name__)


# DigestInfo ::= SEQUENCE { AlgorithmIdentifier(sha256, NULL), OCTET STRING(32) }
SHA256_DIGEST_INFO_PREFIX = bytes.fromhex("3031300d060960864801650304020105000420")
SHA256_DIGEST_SIZE = 32

# 0x00 || 0x01 || PS (>= 8 bytes) || 0x00
_MIN_PADDING = 11
MIN_MODULUS_BYTES = len(SHA256_DIGEST_INFO_PREFIX) + SHA256_DIGEST_SIZE + _MIN_PADDING


class NullRandom:
    """
    Deterministic, non-cryptographic byte source (0, 1, 2, ... mod 256).

    PKCS#1 v1.5 signature padding is fixed, so the encoder is handed one of
    these rather than a real RNG. Never use it for a randomized scheme.
    """

    __slots__ = ("_next", "consumed")

    def __init__(self) -> None:
        self._next = 0
        self.consumed = 0

    def read(self, n: int) -> bytes:
        out = bytes((self._next + i) & 0xFF for i in range(n))
        self._next = (self._next + n) & 0xFF
        self.consumed += n
        return out


def emsa_pkcs1_v1_5_encode(message: bytes, k: int, rng: Optional[NullRandom] = None) -> bytes:
    """
    EM = 0x00 || 0x01 || PS || 0x00 || DigestInfo, with len(EM) == k.

    Type-1 padding draws nothing from ``rng``; PS is always 0xFF.
    """
    if rng is not None and not isinstance(rng, NullRandom):
        raise TypeError("PKCS#1 v1.5 signature padding only accepts a NullRandom source")

    t = SHA256_DIGEST_INFO_PREFIX + sha256(message)
    if k < MIN_MODULUS_BYTES:
        raise KeyTooSmall(
            f"Modulus of {k} bytes is too short; need at least {MIN_MODULUS_BYTES}"
        )
    ps = b"\xff" * (k - len(t) - 3)
    return b"\x00\x01" + ps + b"\x00" + t


def rsasp1(key: RSAPrivateKey, m: int) -> int:
    if not 0 <= m < key.modulus:
        raise ValueError("Message representative out of range")
    return pow(m, key.private_exponent, key.modulus)


def rsavp1(key: RSAPublicKey, s: int) -> int:
    if not 0 <= s < key.modulus:
        raise ValueError("Signature representative out of range")
    return pow(s, key.public_exponent, key.modulus)


def sign(
    private_key: RSAPrivateKey,
    message: Union[str, BytesLike],
    rng: Optional[NullRandom] = None,
) -> bytes:
    """Sign message with RSA PKCS#1 v1.5 + SHA-256; returns k bytes."""
    k = private_key.size_in_bytes
    em = emsa_pkcs1_v1_5_encode(to_bytes(message), k, rng if rng is not None else NullRandom())
    s = rsasp1(private_key, os2ip(em))
    return i2osp(s, k)


def verify(
    public_key: RSAPublicKey,
    message: Union[str, BytesLike],
    signature: BytesLike,
) -> bool:
    """
    Verify RSA PKCS#1 v1.5 + SHA-256 signature.

    Raises SignatureLengthMismatch when len(signature) != k; every other
    mismatch (including s >= n) is a False result.
    """
    if not isinstance(signature, (bytes, bytearray, memoryview)):
        raise TypeError(f"signature must be bytes, got {type(signature).__name__}")
    signature = bytes(signature)

    k = public_key.size_in_bytes
    if len(signature) != k:
        raise SignatureLengthMismatch(k, len(signature))

    s = os2ip(signature)
    if s >= public_key.modulus:
        logger.debug("Signature representative not reduced mod n")
        return False
    em_received = i2osp(rsavp1(public_key, s), k)

    try:
        em_expected = emsa_pkcs1_v1_5_encode(to_bytes(message), k, NullRandom())
    except KeyTooSmall:
        # No valid RS256 signature exists under such a modulus.
        logger.debug("Modulus too small for an RS256 signature")
        return False

    ok = hmac.compare_digest(em_received, em_expected)
    logger.debug("RS256 verification %s", "passed" if ok else "failed")
    return ok
