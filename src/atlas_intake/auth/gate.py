"""
atlas_intake.auth.gate

Per-request admin authorization decision.

Responsibilities:
- Turn an identity-assertion header into an identity (or none).
- Apply the configured auth mode and return Authorized / Unauthenticated /
  Forbidden. No durable state; the same inputs always give the same decision.
"""

from __future__ import annotations

from datetime import UTC, datetime

from atlas_intake.auth.claims import ClaimsError, extract_unverified_claims
from atlas_intake.auth.jwt import JwtValidationError, verify_identity
from atlas_intake.auth.models import (
    AdminIdentity,
    AuthDecision,
    Authorized,
    Forbidden,
    Unauthenticated,
)
from atlas_intake.observability.logging import get_logger
from atlas_intake.policy import AuthPolicy

log = get_logger(__name__)


class AuthGate:
    def __init__(self, policy: AuthPolicy) -> None:
        self._policy = policy

    def extract(self, header_value: str | None, *, now: datetime) -> AdminIdentity | None:
        if not header_value or not header_value.strip():
            return None
        token = header_value.strip()
        verification = self._policy.verification
        try:
            if verification is not None:
                return verify_identity(cfg=verification, token=token, now=now)
            return extract_unverified_claims(token, now=now)
        except (ClaimsError, JwtValidationError) as e:
            log.warning("identity_rejected", reason=str(e))
            return None

    def decide(self, header_value: str | None, *, now: datetime | None = None) -> AuthDecision:
        identity = self.extract(header_value, now=now or datetime.now(tz=UTC))
        mode = self._policy.mode

        if mode == "disabled":
            return Authorized(identity)
        if identity is None:
            return Unauthenticated("missing or unusable identity token")
        if mode == "delegated":
            return Authorized(identity)
        if self._policy.is_listed(identity.email):
            return Authorized(identity)
        return Forbidden(identity)
