"""
atlas_intake.auth.jwt

JWT issuing and verification helpers.

Responsibilities:
- Verify identity tokens locally (signature + registered claims) for deployments
  that have no trusted edge proxy in front of the admin routes.
- Issue tokens for local/dev scenarios and tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt
from jwt import InvalidTokenError, PyJWKClient, PyJWKClientError

from atlas_intake.auth.models import VerifiedIdentity
from atlas_intake.policy import JwtVerification


class JwtValidationError(Exception):
    pass


@lru_cache(maxsize=8)
def _jwks_client(url: str) -> PyJWKClient:
    # PyJWKClient caches fetched keys; one client per JWKS URL per process.
    return PyJWKClient(url)


def _signing_key(cfg: JwtVerification, token: str) -> Any:
    if cfg.jwks_url:
        try:
            return _jwks_client(cfg.jwks_url).get_signing_key_from_jwt(token).key
        except PyJWKClientError as e:
            raise JwtValidationError(str(e)) from e
    return cfg.secret


def verify_identity(*, cfg: JwtVerification, token: str, now: datetime) -> VerifiedIdentity:
    options: dict[str, Any] = {"require": ["exp", "email"]}
    if cfg.audience is None:
        options["verify_aud"] = False
    try:
        payload = jwt.decode(
            token,
            _signing_key(cfg, token),
            algorithms=list(cfg.algorithms),
            audience=cfg.audience,
            issuer=cfg.issuer,
            options=options,
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    email = payload.get("email")
    if not isinstance(email, str) or not email.strip():
        raise JwtValidationError("token missing email claim")

    expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
    # jwt.decode checks exp against the wall clock; callers may pin `now`.
    if expires_at <= now:
        raise JwtValidationError("token expired")

    sub = payload.get("sub")
    iss = payload.get("iss")
    return VerifiedIdentity(
        email=email.strip(),
        expires_at=expires_at,
        subject=sub if isinstance(sub, str) else None,
        issuer=iss if isinstance(iss, str) else None,
    )


def issue_token(
    *,
    email: str,
    secret: str,
    alg: str = "HS256",
    ttl: timedelta = timedelta(hours=1),
    name: str | None = None,
    audience: str | None = None,
    issuer: str | None = None,
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "email": email,
        "sub": email,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if name:
        payload["name"] = name
    if audience:
        payload["aud"] = audience
    if issuer:
        payload["iss"] = issuer
    return jwt.encode(payload, secret, algorithm=alg)


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/dev_auth.py` and the test-suite; the
# trusted-proxy path in `auth.claims` never looks at the signature at all.
