"""
Key Decoder - extracts RSA key material from PEM text or raw components.

PEM envelope removal and DER parsing are delegated to ``cryptography``; this
module classifies the PEM blocks, pulls the integers out of the loaded key
objects and enforces the record invariants.

Exports:
- RSAPublicKey / RSAPrivateKey / ParsedKeyPair records
- KeyDecodeResult and inspect_pem() (non-raising)
- decode_pem_key_pair() (raises InvalidKeyFormat)
- decode_raw_public_key() for Base64urlUInt-style (n, e) pairs
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..common.config import Settings, resolve
from ..common.errors import InvalidKeyFormat
from ..common.utils import BytesLike, byte_length, os2ip

logger = logging.getLogger(__name__)


_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN (?P<label>[A-Z0-9 ]+)-----"
    r"(?P<body>.*?)"
    r"-----END (?P=label)-----",
    re.DOTALL,
)

_PRIVATE_LABELS = {"RSA PRIVATE KEY", "PRIVATE KEY", "ENCRYPTED PRIVATE KEY"}
_PUBLIC_LABELS = {"PUBLIC KEY", "RSA PUBLIC KEY"}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def _check_int(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidKeyFormat(f"{name} must be an integer")
    return value


@dataclass(frozen=True, repr=False)
class RSAPublicKey:
    modulus: int
    public_exponent: int

    def __post_init__(self) -> None:
        n = _check_int("modulus", self.modulus)
        e = _check_int("public_exponent", self.public_exponent)
        if n <= 0:
            raise InvalidKeyFormat("Modulus must be positive")
        if not 0 < e < n:
            raise InvalidKeyFormat("Public exponent must satisfy 0 < e < n")

    @property
    def size_in_bits(self) -> int:
        return self.modulus.bit_length()

    @property
    def size_in_bytes(self) -> int:
        return byte_length(self.modulus)

    def __repr__(self) -> str:
        return f"RSAPublicKey(bits={self.size_in_bits}, e={self.public_exponent})"


@dataclass(frozen=True, repr=False)
class RSAPrivateKey:
    """
    Minimal private key form: n, d and the two primes.
    CRT parameters are not kept; signing exponentiates with d directly.
    """

    modulus: int
    private_exponent: int
    prime1: int
    prime2: int
    public_exponent: Optional[int] = None

    def __post_init__(self) -> None:
        n = _check_int("modulus", self.modulus)
        d = _check_int("private_exponent", self.private_exponent)
        p = _check_int("prime1", self.prime1)
        q = _check_int("prime2", self.prime2)
        if n <= 0:
            raise InvalidKeyFormat("Modulus must be positive")
        if not 0 < d < n:
            raise InvalidKeyFormat("Private exponent must satisfy 0 < d < n")
        if p < 0 or q < 0:
            raise InvalidKeyFormat("Primes must be non-negative")
        if p and q and p * q != n:
            raise InvalidKeyFormat("prime1 * prime2 does not equal the modulus")
        if self.public_exponent is not None:
            e = _check_int("public_exponent", self.public_exponent)
            if not 0 < e < n:
                raise InvalidKeyFormat("Public exponent must satisfy 0 < e < n")

    @property
    def size_in_bits(self) -> int:
        return self.modulus.bit_length()

    @property
    def size_in_bytes(self) -> int:
        return byte_length(self.modulus)

    def public_key(self) -> Optional[RSAPublicKey]:
        """Implied public half, when the source carried the public exponent."""
        if self.public_exponent is None:
            return None
        return RSAPublicKey(self.modulus, self.public_exponent)

    def __repr__(self) -> str:
        return f"RSAPrivateKey(bits={self.size_in_bits})"


@dataclass(frozen=True)
class ParsedKeyPair:
    public: Optional[RSAPublicKey] = None
    private: Optional[RSAPrivateKey] = None


@dataclass(frozen=True)
class KeyDecodeResult:
    ok: bool
    reason: str
    pair: Optional[ParsedKeyPair] = None


# ---------------------------------------------------------------------------
# cryptography key objects -> records
# ---------------------------------------------------------------------------

def public_from_cryptography(key: rsa.RSAPublicKey) -> RSAPublicKey:
    numbers = key.public_numbers()
    return RSAPublicKey(numbers.n, numbers.e)


def private_from_cryptography(key: rsa.RSAPrivateKey) -> RSAPrivateKey:
    numbers = key.private_numbers()
    return RSAPrivateKey(
        modulus=numbers.public_numbers.n,
        private_exponent=numbers.d,
        prime1=numbers.p,
        prime2=numbers.q,
        public_exponent=numbers.public_numbers.e,
    )


def from_cryptography_key(key: Union[rsa.RSAPrivateKey, rsa.RSAPublicKey]) -> ParsedKeyPair:
    """Convert an already-loaded ``cryptography`` RSA key into records."""
    if isinstance(key, rsa.RSAPrivateKey):
        private = private_from_cryptography(key)
        return ParsedKeyPair(public=private.public_key(), private=private)
    if isinstance(key, rsa.RSAPublicKey):
        return ParsedKeyPair(public=public_from_cryptography(key))
    raise InvalidKeyFormat(f"Not an RSA key: {type(key).__name__}")


# ---------------------------------------------------------------------------
# PEM
# ---------------------------------------------------------------------------

def _as_text(pem: Union[str, bytes]) -> str:
    if isinstance(pem, (bytes, bytearray)):
        try:
            return bytes(pem).decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidKeyFormat("PEM text must be ASCII") from e
    if isinstance(pem, str):
        return pem
    raise InvalidKeyFormat(f"PEM input must be str or bytes, got {type(pem).__name__}")


def _is_encrypted(label: str, block: str) -> bool:
    return label == "ENCRYPTED PRIVATE KEY" or "Proc-Type: 4,ENCRYPTED" in block


def _load_private(label: str, block: str, password: Optional[bytes]) -> KeyDecodeResult:
    try:
        key = serialization.load_pem_private_key(block.encode("ascii"), password=password)
    except TypeError as e:
        # Password missing for an encrypted key, or given for a plain one.
        if password is None and _is_encrypted(label, block):
            return KeyDecodeResult(False, "ENCRYPTED")
        return KeyDecodeResult(False, f"MALFORMED({e})")
    except (ValueError, UnsupportedAlgorithm) as e:
        if password is not None and _is_encrypted(label, block):
            return KeyDecodeResult(False, "ENCRYPTED")
        return KeyDecodeResult(False, f"MALFORMED({e})")

    if not isinstance(key, rsa.RSAPrivateKey):
        return KeyDecodeResult(False, "NOT_RSA")
    try:
        private = private_from_cryptography(key)
    except InvalidKeyFormat as e:
        return KeyDecodeResult(False, f"MALFORMED({e})")
    return KeyDecodeResult(True, "OK", ParsedKeyPair(private=private))


def _load_public(block: str) -> KeyDecodeResult:
    try:
        key = serialization.load_pem_public_key(block.encode("ascii"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        return KeyDecodeResult(False, f"MALFORMED({e})")

    if not isinstance(key, rsa.RSAPublicKey):
        return KeyDecodeResult(False, "NOT_RSA")
    try:
        public = public_from_cryptography(key)
    except InvalidKeyFormat as e:
        return KeyDecodeResult(False, f"MALFORMED({e})")
    return KeyDecodeResult(True, "OK", ParsedKeyPair(public=public))


def inspect_pem(pem_text: Union[str, bytes], password: Optional[bytes] = None) -> KeyDecodeResult:
    """
    Decode every supported PEM block in ``pem_text`` without raising.

    A private-key block yields the private record; when no public block is
    present, the public half is derived from the private key's exponent.
    """
    try:
        text = _as_text(pem_text)
    except InvalidKeyFormat as e:
        return KeyDecodeResult(False, f"MALFORMED({e})")

    blocks = list(_PEM_BLOCK_RE.finditer(text))
    if not blocks:
        return KeyDecodeResult(False, "NO_PEM_BLOCK")

    public: Optional[RSAPublicKey] = None
    private: Optional[RSAPrivateKey] = None
    skipped = []

    for match in blocks:
        label = match.group("label")
        block = match.group(0)

        if label in _PRIVATE_LABELS:
            if private is not None:
                return KeyDecodeResult(False, "MALFORMED(multiple private keys)")
            result = _load_private(label, block, password)
            if not result.ok:
                return result
            private = result.pair.private
        elif label in _PUBLIC_LABELS:
            if public is not None:
                return KeyDecodeResult(False, "MALFORMED(multiple public keys)")
            result = _load_public(block)
            if not result.ok:
                return result
            public = result.pair.public
        else:
            skipped.append(label)

    if public is None and private is None:
        return KeyDecodeResult(False, f"UNSUPPORTED_LABEL({','.join(skipped)})")

    if public is not None and private is not None and public.modulus != private.modulus:
        return KeyDecodeResult(False, "MALFORMED(public key does not match private key)")

    if public is None and private is not None:
        public = private.public_key()

    logger.debug(
        "Decoded PEM: public=%s private=%s skipped=%s",
        public, private, skipped or None,
    )
    return KeyDecodeResult(True, "OK", ParsedKeyPair(public=public, private=private))


def decode_pem_key_pair(pem_text: Union[str, bytes], password: Optional[bytes] = None) -> ParsedKeyPair:
    """Decode PEM text into a key pair; raises InvalidKeyFormat on failure."""
    result = inspect_pem(pem_text, password=password)
    if not result.ok:
        raise InvalidKeyFormat(f"Unusable PEM key: {result.reason}")
    return result.pair


# ---------------------------------------------------------------------------
# Raw (modulus, exponent) components
# ---------------------------------------------------------------------------

def _component(name: str, data: BytesLike, settings: Settings) -> int:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidKeyFormat(f"{name} must be bytes, got {type(data).__name__}")
    data = bytes(data)
    if not data:
        raise InvalidKeyFormat(f"{name} is empty")
    if not settings.allow_leading_zero and len(data) > 1 and data[0] == 0:
        raise InvalidKeyFormat(f"{name} has a leading zero octet")
    return os2ip(data)


def decode_raw_public_key(
    modulus_bytes: BytesLike,
    exponent_bytes: BytesLike,
    settings: Optional[Settings] = None,
) -> RSAPublicKey:
    """Build a public key from unsigned big-endian modulus and exponent octets."""
    settings = resolve(settings)
    n = _component("modulus", modulus_bytes, settings)
    e = _component("exponent", exponent_bytes, settings)

    if settings.strict_components:
        if e <= 1:
            raise InvalidKeyFormat("Public exponent must be greater than 1")
        if e % 2 == 0:
            raise InvalidKeyFormat("Public exponent must be odd")

    key = RSAPublicKey(n, e)
    logger.debug("Decoded raw public key: %r", key)
    return key
