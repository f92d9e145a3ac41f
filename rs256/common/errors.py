"""Error kinds raised by the RS256 toolkit.

Every error is a ``ValueError`` so callers that only care about "bad input"
can catch that; callers that need to tell a malformed key apart from a
missing key half catch the specific class.
"""

from __future__ import annotations


class RS256Error(ValueError):
    pass


class InvalidKeyFormat(RS256Error):
    """Malformed PEM/DER, base64url, or raw key components."""


class MissingKeyMaterial(RS256Error):
    """The decoded key does not contain the half that was requested."""


class KeyTooSmall(RS256Error):
    """Modulus too short to hold the DigestInfo plus minimum padding."""


class SignatureLengthMismatch(RS256Error):
    """Signature length differs from the modulus length."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Signature must be {expected} bytes, got {got}")
        self.expected = expected
        self.got = got
