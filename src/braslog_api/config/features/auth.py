# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Auth view of the configuration.

The bearer-token dependency only needs three values: whether auth is on,
the shared HMAC secret and the signing algorithm. ``get_auth_settings``
resolves them on every call so tests can flip ``AUTH_ENABLED`` with
``monkeypatch.setenv`` without clearing the cached ``Settings``:

* ``AUTH_ENABLED`` present in the environment: read all three from env.
* otherwise: project them from ``get_settings()``.

The secret is never logged.
"""

from __future__ import annotations

import os
from typing import Any, Final

from pydantic import BaseModel, Field, field_validator

import braslog_api.config.settings as _settings_module

__all__ = ["AuthSettings", "get_auth_settings"]

HMAC_ALGORITHMS: Final[frozenset[str]] = frozenset({"HS256", "HS384", "HS512"})
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class AuthSettings(BaseModel):
    """Auth toggles consumed by ``infrastructure.auth``."""

    enabled: bool = False
    hs256_secret: str | None = Field(default=None, repr=False)
    algorithm: str = "HS256"

    @field_validator("algorithm")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        # Only a shared secret is configured, so asymmetric algorithms cannot verify.
        alg = value.strip().upper()
        if alg not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm {value!r}; use one of HS256/HS384/HS512")
        return alg


def get_settings() -> Any:
    """Indirection over ``config.settings.get_settings`` for monkeypatching."""
    return _settings_module.get_settings()


def get_auth_settings() -> AuthSettings:
    """Resolve the current auth configuration."""
    raw_enabled = os.getenv("AUTH_ENABLED")
    if raw_enabled is not None:
        return AuthSettings(
            enabled=raw_enabled.strip().lower() in _TRUTHY,
            hs256_secret=os.getenv("AUTH_HS256_SECRET") or None,
            algorithm=os.getenv("AUTH_ALGORITHM", "HS256"),
        )

    s = get_settings()
    return AuthSettings(
        enabled=s.auth_enabled,
        hs256_secret=s.auth_hs256_secret,
        algorithm=s.auth_algorithm,
    )
