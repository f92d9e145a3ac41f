"""
PKCS#1 v1.5 engine tests.

Covers:
  - DigestInfo prefix and EM layout
  - KeyTooSmall boundary
  - NullRandom is never consumed by signing
  - byte-for-byte agreement with cryptography's PKCS1v15/SHA256
  - SignatureLengthMismatch vs. False results
"""

import hashlib

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from rs256.common.errors import KeyTooSmall, SignatureLengthMismatch
from rs256.common.utils import i2osp
from rs256.crypto import pkcs1
from rs256.crypto.keys import RSAPrivateKey, RSAPublicKey, from_cryptography_key


@pytest.fixture(scope="module")
def pair(rsa_key):
    return from_cryptography_key(rsa_key)


def test_sha256_digest_info_prefix():
    assert len(pkcs1.SHA256_DIGEST_INFO_PREFIX) == 19
    assert pkcs1.SHA256_DIGEST_INFO_PREFIX[:2] == b"\x30\x31"
    assert pkcs1.SHA256_DIGEST_INFO_PREFIX[-2:] == b"\x04\x20"
    assert pkcs1.MIN_MODULUS_BYTES == 62


def test_encoded_message_layout():
    msg = b"hello world"
    em = pkcs1.emsa_pkcs1_v1_5_encode(msg, 256, pkcs1.NullRandom())

    t = pkcs1.SHA256_DIGEST_INFO_PREFIX + hashlib.sha256(msg).digest()
    assert len(em) == 256
    assert em[:2] == b"\x00\x01"
    assert em[2:256 - len(t) - 1] == b"\xff" * (256 - len(t) - 3)
    assert em[256 - len(t) - 1] == 0
    assert em.endswith(t)


def test_encoding_boundary():
    assert len(pkcs1.emsa_pkcs1_v1_5_encode(b"x", 62)) == 62
    with pytest.raises(KeyTooSmall):
        pkcs1.emsa_pkcs1_v1_5_encode(b"x", 61)


def test_encoder_refuses_foreign_random_source():
    class RealRandom:
        def read(self, n):
            return b"\x00" * n

    with pytest.raises(TypeError):
        pkcs1.emsa_pkcs1_v1_5_encode(b"x", 256, RealRandom())  # type: ignore[arg-type]


def test_null_random_stream():
    rng = pkcs1.NullRandom()
    assert rng.read(3) == b"\x00\x01\x02"
    assert rng.read(2) == b"\x03\x04"
    assert rng.consumed == 5

    wrap = pkcs1.NullRandom()
    assert wrap.read(258)[-3:] == b"\xff\x00\x01"


def test_signing_never_draws_randomness(pair):
    rng = pkcs1.NullRandom()
    pkcs1.sign(pair.private, b"payload", rng)
    assert rng.consumed == 0


def test_sign_on_tiny_key_raises_key_too_small():
    tiny = RSAPrivateKey(3233, 2753, 61, 53, 17)
    with pytest.raises(KeyTooSmall):
        pkcs1.sign(tiny, b"hello")


def test_verify_on_tiny_key_is_false_not_error():
    assert pkcs1.verify(RSAPublicKey(3233, 17), b"hello", b"\x01\x02") is False


def test_signature_matches_cryptography(rsa_key, pair):
    for msg in (b"", b"hello world", bytes(range(256)) * 10):
        ours = pkcs1.sign(pair.private, msg)
        theirs = rsa_key.sign(msg, padding.PKCS1v15(), hashes.SHA256())
        assert ours == theirs
        assert pkcs1.verify(pair.public, msg, theirs)


def test_cryptography_accepts_our_signature(rsa_key, pair):
    sig = pkcs1.sign(pair.private, "unicode ✓")
    rsa_key.public_key().verify(sig, "unicode ✓".encode("utf-8"), padding.PKCS1v15(), hashes.SHA256())
    with pytest.raises(InvalidSignature):
        rsa_key.public_key().verify(sig, b"other", padding.PKCS1v15(), hashes.SHA256())


def test_signature_is_k_bytes_even_with_leading_zeros(pair):
    k = pair.private.size_in_bytes
    for i in range(64):
        sig = pkcs1.sign(pair.private, b"msg-%d" % i)
        assert len(sig) == k


def test_wrong_length_raises(pair):
    sig = pkcs1.sign(pair.private, b"m")
    with pytest.raises(SignatureLengthMismatch) as info:
        pkcs1.verify(pair.public, b"m", sig[:-1])
    assert info.value.expected == 256
    assert info.value.got == 255

    with pytest.raises(SignatureLengthMismatch):
        pkcs1.verify(pair.public, b"m", sig + b"\x00")
    with pytest.raises(SignatureLengthMismatch):
        pkcs1.verify(pair.public, b"m", b"")


def test_unreduced_signature_is_false(pair):
    n = pair.public.modulus
    k = pair.public.size_in_bytes
    assert pkcs1.verify(pair.public, b"m", i2osp(n, k)) is False
    assert pkcs1.verify(pair.public, b"m", b"\xff" * k) is False


def test_wrong_key_is_false(pair, other_rsa_key):
    other = from_cryptography_key(other_rsa_key)
    sig = pkcs1.sign(pair.private, b"m")
    assert pkcs1.verify(other.public, b"m", sig) is False


def test_raw_primitives_range_checks(pair):
    with pytest.raises(ValueError):
        pkcs1.rsasp1(pair.private, pair.private.modulus)
    with pytest.raises(ValueError):
        pkcs1.rsavp1(pair.public, -1)


def test_signature_type_checked(pair):
    with pytest.raises(TypeError):
        pkcs1.verify(pair.public, b"m", "not-bytes")  # type: ignore[arg-type]
