"""
atlas_intake.auth.models

Auth domain models.

Responsibilities:
- Keep unverified and verified identities as distinct types.
- Define the three-way authorization decision.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class UnverifiedClaims:
    """
    Identity decoded from a token payload without checking its signature.

    Only trustworthy when an upstream proxy has already verified the token.
    """

    email: str
    expires_at: datetime | None = None
    name: str | None = None
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class VerifiedIdentity:
    """
    Identity whose token signature and registered claims were checked locally.
    """

    email: str
    expires_at: datetime | None
    subject: str | None = None
    issuer: str | None = None


AdminIdentity: TypeAlias = UnverifiedClaims | VerifiedIdentity


@dataclass(frozen=True, slots=True)
class Authorized:
    # None only when auth is disabled and no token was sent.
    identity: AdminIdentity | None


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    reason: str


@dataclass(frozen=True, slots=True)
class Forbidden:
    identity: AdminIdentity


AuthDecision: TypeAlias = Authorized | Unauthenticated | Forbidden


# --- Module Notes -----------------------------------------------------------
# Identities live for exactly one request and are never persisted.
