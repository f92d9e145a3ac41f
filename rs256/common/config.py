"""
Runtime settings for key ingestion.

Environment variables (read by ``Settings.from_env``):
  RS256_STRICT_COMPONENTS   reject raw public exponents that are even or == 1
  RS256_ALLOW_LEADING_ZERO  accept raw components carrying leading 0x00 octets
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    strict_components: bool = True
    allow_leading_zero: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            strict_components=_env_flag("RS256_STRICT_COMPONENTS", True),
            allow_leading_zero=_env_flag("RS256_ALLOW_LEADING_ZERO", True),
        )


_DEFAULT = Settings()


def default_settings() -> Settings:
    return _DEFAULT


def resolve(settings: Optional[Settings]) -> Settings:
    return settings if settings is not None else _DEFAULT
