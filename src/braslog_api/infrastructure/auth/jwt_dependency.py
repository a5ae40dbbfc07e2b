# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""Bearer JWT dependency for the KPI routes.

With ``AUTH_ENABLED`` off every request runs as a synthetic ``dev-user``.
With it on, requests need an HMAC-signed token carrying ``sub`` and ``exp``;
401 responses advertise the ``Bearer`` scheme and missing scopes give 403.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, Final

import jwt
from fastapi import HTTPException, Request
from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from braslog_api.config.features.auth import AuthSettings, get_auth_settings

_CHALLENGE: Final[dict[str, str]] = {"WWW-Authenticate": "Bearer"}


class Principal(BaseModel):
    """Authenticated principal extracted from a verified JWT.

    Attributes:
        sub: Subject claim (user identifier).
        scopes: Normalized scopes as a tuple.
        claims: Full claims mapping for downstream uses/auditing.
    """

    model_config = ConfigDict(frozen=True)

    sub: str = ""
    scopes: tuple[str, ...] = ()
    claims: Mapping[str, Any] = Field(default_factory=dict)


def _extract_bearer_token(request: Request) -> str:
    """Return the raw token from the ``Authorization`` header.

    Raises:
        HTTPException: 401 on missing/malformed header or empty token.
    """
    auth = (request.headers.get("Authorization") or "").strip()
    if not auth.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token", headers=_CHALLENGE)
    token = auth.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token", headers=_CHALLENGE)
    return token


def _decode(token: str, cfg: AuthSettings) -> Mapping[str, Any]:
    if not cfg.hs256_secret:
        raise HTTPException(status_code=500, detail="Auth misconfigured (missing HS256 secret)")
    try:
        return jwt.decode(
            token,
            cfg.hs256_secret,
            algorithms=[cfg.algorithm],
            options={"verify_aud": False, "require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token", headers=_CHALLENGE) from exc


def _scopes_from(claims: Mapping[str, Any]) -> set[str]:
    raw = claims.get("scopes", claims.get("scope", ""))
    if isinstance(raw, str):
        return {s for s in raw.split() if s}
    if isinstance(raw, (list, tuple, set)):
        return {str(s) for s in raw if str(s)}
    return set()


def auth_required(
    required_scopes: str | Iterable[str] | None = None,
) -> Callable[..., Awaitable[Principal]]:
    """Create a dependency that enforces authentication and optional scope checks.

    Behavior is feature-flagged by ``AUTH_ENABLED``.
    """
    if isinstance(required_scopes, str):
        required: set[str] = {s for s in required_scopes.split() if s}
    else:
        required = set(required_scopes or ())

    async def _dep(request: Request) -> Principal:
        cfg = get_auth_settings()
        if not cfg.enabled:
            return Principal(sub="dev-user", scopes=(), claims={})

        claims = _decode(_extract_bearer_token(request), cfg)
        scope_set = _scopes_from(claims)
        if required and not required.issubset(scope_set):
            raise HTTPException(status_code=403, detail="Forbidden")

        return Principal(
            sub=str(claims.get("sub", "")), scopes=tuple(sorted(scope_set)), claims=claims
        )

    return _dep
