"""RS256 (RSASSA-PKCS1-v1_5 + SHA-256) signers and verifiers.

Typical usage:

    signer = create_rs256_signer(private_pem)
    verifier = create_rs256_verifier(public_pem)
    assert verifier.verify(b"hello world", signer.sign(b"hello world"))
"""

from rs256.common.config import Settings
from rs256.common.errors import (
    InvalidKeyFormat,
    KeyTooSmall,
    MissingKeyMaterial,
    RS256Error,
    SignatureLengthMismatch,
)
from rs256.common.jwk import RsaJwk
from rs256.crypto.keys import (
    KeyDecodeResult,
    ParsedKeyPair,
    RSAPrivateKey,
    RSAPublicKey,
    decode_pem_key_pair,
    decode_raw_public_key,
    from_cryptography_key,
    inspect_pem,
)
from rs256.crypto.sign import (
    Signer,
    Verifier,
    create_jwa_rs256_verifier,
    create_rs256_signer,
    create_rs256_verifier,
    make_signer,
    make_verifier,
    make_verifier_from_jwk,
    make_verifier_from_raw_components,
)

__version__ = "0.1.0"
__all__ = [
    "Settings",
    "RS256Error",
    "InvalidKeyFormat",
    "MissingKeyMaterial",
    "KeyTooSmall",
    "SignatureLengthMismatch",
    "RsaJwk",
    "RSAPublicKey",
    "RSAPrivateKey",
    "ParsedKeyPair",
    "KeyDecodeResult",
    "inspect_pem",
    "decode_pem_key_pair",
    "decode_raw_public_key",
    "from_cryptography_key",
    "Signer",
    "Verifier",
    "make_signer",
    "make_verifier",
    "make_verifier_from_raw_components",
    "make_verifier_from_jwk",
    "create_rs256_signer",
    "create_rs256_verifier",
    "create_jwa_rs256_verifier",
]
