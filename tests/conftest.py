"""Shared RSA key fixtures (generated once per session with cryptography)."""

import os
import sys

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

ROOT = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, ROOT)


def _private_pem(key, fmt=serialization.PrivateFormat.TraditionalOpenSSL, encryption=None) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=encryption or serialization.NoEncryption(),
    ).decode("ascii")


def _public_pem(key, fmt=serialization.PublicFormat.SubjectPublicKeyInfo) -> str:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
    ).decode("ascii")


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_pem(rsa_key) -> str:
    """PKCS#1 ``RSA PRIVATE KEY`` block."""
    return _private_pem(rsa_key)


@pytest.fixture(scope="session")
def private_pem_pkcs8(rsa_key) -> str:
    return _private_pem(rsa_key, serialization.PrivateFormat.PKCS8)


@pytest.fixture(scope="session")
def encrypted_private_pem(rsa_key) -> str:
    return _private_pem(
        rsa_key,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(b"secret123"),
    )


@pytest.fixture(scope="session")
def public_pem(rsa_key) -> str:
    """SubjectPublicKeyInfo ``PUBLIC KEY`` block."""
    return _public_pem(rsa_key)


@pytest.fixture(scope="session")
def public_pem_pkcs1(rsa_key) -> str:
    return _public_pem(rsa_key, serialization.PublicFormat.PKCS1)


@pytest.fixture(scope="session")
def other_public_pem(other_rsa_key) -> str:
    return _public_pem(other_rsa_key)
