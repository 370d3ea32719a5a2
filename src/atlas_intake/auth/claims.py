"""
atlas_intake.auth.claims

Unverified identity extraction from a `header.payload.signature` token.

Responsibilities:
- Decode the payload segment (base64url) into a JSON claim object.
- Reject malformed tokens, tokens without an email, and expired tokens.

No signature check happens here. The deployment must sit behind an edge proxy
that verifies the token first (e.g. Cloudflare Access), or use the verifying
path in `auth.jwt`.
"""

from __future__ import annotations

import binascii
import json
from datetime import UTC, datetime
from typing import Any

from jwt.utils import base64url_decode

from atlas_intake.auth.models import UnverifiedClaims


class ClaimsError(Exception):
    pass


def decode_payload(token: str) -> dict[str, Any]:
    parts = token.strip().split(".")
    if len(parts) != 3 or not parts[1]:
        raise ClaimsError("token must have three dot-separated parts")
    try:
        # base64url_decode restores the stripped '=' padding itself.
        payload = json.loads(base64url_decode(parts[1]))
    except (binascii.Error, ValueError, UnicodeDecodeError, RecursionError) as e:
        raise ClaimsError(f"undecodable payload: {e}") from e
    if not isinstance(payload, dict):
        raise ClaimsError("payload is not a JSON object")
    return payload


def _expiry(payload: dict[str, Any]) -> datetime | None:
    exp = payload.get("exp")
    if exp is None:
        return None
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        raise ClaimsError("exp is not a numeric timestamp")
    try:
        return datetime.fromtimestamp(exp, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise ClaimsError(f"exp out of range: {e}") from e


def extract_unverified_claims(token: str, *, now: datetime) -> UnverifiedClaims:
    payload = decode_payload(token)

    email = payload.get("email")
    if not isinstance(email, str) or not email.strip():
        raise ClaimsError("token missing email claim")

    expires_at = _expiry(payload)
    if expires_at is not None and expires_at <= now:
        raise ClaimsError("token expired")

    name = payload.get("name")
    sub = payload.get("sub")
    return UnverifiedClaims(
        email=email.strip(),
        expires_at=expires_at,
        name=name if isinstance(name, str) else None,
        subject=sub if isinstance(sub, str) else None,
    )
