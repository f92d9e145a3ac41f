"""
Pydantic model for RSA public JSON Web Keys (RFC 7517 / RFC 7518 §6.3.1).

Only the members needed to rebuild an RS256 verifier are modelled:
- kty  must be "RSA"
- n, e Base64urlUInt modulus and exponent
- alg  optional, must be "RS256" when present
- use  optional, must be "sig" when present
- kid  optional key id
"""

from __future__ import annotations

import json
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .config import Settings
from .errors import InvalidKeyFormat
from .utils import b64u, minimal_bytes, ub64u


class RsaJwk(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    kty: Literal["RSA"]
    n: str
    e: str
    alg: Optional[str] = None
    use: Optional[str] = None
    kid: Optional[str] = None

    @field_validator("n", "e")
    @classmethod
    def _validate_uint(cls, v: str) -> str:
        if not ub64u(v):
            raise ValueError("must encode at least one octet")
        return v

    @field_validator("alg")
    @classmethod
    def _validate_alg(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v != "RS256":
            raise ValueError(f"alg must be RS256, got {v}")
        return v

    @field_validator("use")
    @classmethod
    def _validate_use(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v != "sig":
            raise ValueError(f"use must be sig, got {v}")
        return v

    @classmethod
    def parse(cls, data: Union[str, bytes, Dict[str, Any]]) -> "RsaJwk":
        """Validate a JWK given as JSON text or a mapping; raises InvalidKeyFormat."""
        try:
            if isinstance(data, (str, bytes, bytearray)):
                return cls.model_validate_json(data)
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidKeyFormat(f"Invalid RSA JWK: {e}") from e

    @classmethod
    def from_public_key(cls, key, kid: Optional[str] = None) -> "RsaJwk":
        return cls(
            kty="RSA",
            n=b64u(minimal_bytes(key.modulus)),
            e=b64u(minimal_bytes(key.public_exponent)),
            alg="RS256",
            use="sig",
            kid=kid,
        )

    def to_public_key(self, settings: Optional[Settings] = None):
        from ..crypto.keys import decode_raw_public_key

        return decode_raw_public_key(ub64u(self.n), ub64u(self.e), settings)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), sort_keys=True)
