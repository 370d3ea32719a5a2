"""
atlas_intake.auth.deps

FastAPI dependency functions for admin authentication and authorization.

Responsibilities:
- Run the `AuthGate` for the request's identity-assertion header.
- Raise `AuthenticationError` (401) / `AuthorizationError` (403) before any
  handler logic runs; the HTTP mapping lives in `api.app`.
"""

from __future__ import annotations

from fastapi import Depends, Request

from atlas_intake.api.deps import policy_dep
from atlas_intake.auth.gate import AuthGate
from atlas_intake.auth.models import AdminIdentity, Authorized, Forbidden
from atlas_intake.errors import AuthenticationError, AuthorizationError
from atlas_intake.observability.logging import get_logger
from atlas_intake.policy import Policy

log = get_logger(__name__)


def require_admin(
    request: Request,
    policy: Policy = Depends(policy_dep),
) -> AdminIdentity | None:
    header = request.headers.get(policy.auth.header_name)
    decision = AuthGate(policy.auth).decide(header)

    if isinstance(decision, Authorized):
        return decision.identity
    if isinstance(decision, Forbidden):
        log.warning("admin_forbidden", email=decision.identity.email)
        raise AuthorizationError(f"{decision.identity.email} is not an admin")

    log.info("admin_unauthenticated", reason=decision.reason)
    raise AuthenticationError(decision.reason)


# --- Module Notes -----------------------------------------------------------
# Used as a router-level dependency on every /admin route.
