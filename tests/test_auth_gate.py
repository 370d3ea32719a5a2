from __future__ import annotations

import base64
import json
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from atlas_intake.auth.claims import ClaimsError, extract_unverified_claims
from atlas_intake.auth.gate import AuthGate
from atlas_intake.auth.jwt import issue_token
from atlas_intake.auth.models import (
    Authorized,
    Forbidden,
    Unauthenticated,
    UnverifiedClaims,
    VerifiedIdentity,
)
from atlas_intake.policy import AuthPolicy, JwtVerification
from tests.conftest import ADMIN_EMAIL, token_for

NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _segment(obj: object) -> str:
    return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()


def _token(payload: object) -> str:
    return f"{_segment({'alg': 'none'})}.{_segment(payload)}.sig"


def _nested_segment(depth: int) -> str:
    raw = '{"email": "x@y.com", "a": ' + "[" * depth + "]" * depth + "}"
    return base64.urlsafe_b64encode(raw.encode()).rstrip(b"=").decode()


def _policy(mode: str, **kwargs) -> AuthPolicy:
    return AuthPolicy(
        mode=mode,  # type: ignore[arg-type]
        admin_emails=frozenset({ADMIN_EMAIL}),
        header_name="Cf-Access-Jwt-Assertion",
        **kwargs,
    )


def test_extracts_claims_without_signature_check() -> None:
    exp = int((NOW + timedelta(hours=1)).timestamp())
    claims = extract_unverified_claims(
        _token({"email": "jane@example.com", "exp": exp, "name": "Jane"}), now=NOW
    )
    assert claims == UnverifiedClaims(
        email="jane@example.com",
        expires_at=datetime.fromtimestamp(exp, tz=UTC),
        name="Jane",
    )


@pytest.mark.parametrize(
    "token",
    [
        "",
        "only.two",
        "a.b.c.d",
        "header..sig",
        "header.!!!not-base64!!!.sig",
        f"h.{_segment(['not', 'an', 'object'])}.s",
        _token({"name": "no email"}),
        _token({"email": "  "}),
        _token({"email": "a@b.com", "exp": "tomorrow"}),
        pytest.param(f"h.{_nested_segment(100_000)}.s", id="deeply-nested-payload"),
    ],
)
def test_malformed_tokens_yield_no_identity(token: str) -> None:
    with pytest.raises(ClaimsError):
        extract_unverified_claims(token, now=NOW)


def test_expiry_at_now_is_expired() -> None:
    with pytest.raises(ClaimsError):
        extract_unverified_claims(
            _token({"email": "a@b.com", "exp": int(NOW.timestamp())}), now=NOW
        )


def test_token_without_exp_is_accepted() -> None:
    claims = extract_unverified_claims(_token({"email": "a@b.com"}), now=NOW)
    assert claims.expires_at is None


def test_disabled_mode_always_authorizes() -> None:
    gate = AuthGate(_policy("disabled"))
    assert gate.decide(None, now=NOW) == Authorized(None)
    decision = gate.decide(_token({"email": "someone@else.com"}), now=NOW)
    assert isinstance(decision, Authorized)
    assert decision.identity is not None


def test_allowlist_mode_distinguishes_401_from_403() -> None:
    gate = AuthGate(_policy("allowlist"))

    assert isinstance(gate.decide(None, now=NOW), Unauthenticated)
    assert isinstance(gate.decide("garbage", now=NOW), Unauthenticated)
    assert isinstance(gate.decide(_token({"email": "intruder@example.com"}), now=NOW), Forbidden)

    decision = gate.decide(_token({"email": ADMIN_EMAIL}), now=NOW)
    assert isinstance(decision, Authorized)
    assert decision.identity is not None
    assert decision.identity.email == ADMIN_EMAIL


def test_allowlist_membership_is_exact() -> None:
    gate = AuthGate(_policy("allowlist"))
    assert isinstance(gate.decide(_token({"email": ADMIN_EMAIL.upper()}), now=NOW), Forbidden)


def test_delegated_mode_accepts_any_identity() -> None:
    gate = AuthGate(_policy("delegated"))
    assert isinstance(gate.decide(None, now=NOW), Unauthenticated)
    assert isinstance(gate.decide(_token({"email": "anyone@example.com"}), now=NOW), Authorized)


def test_expired_token_is_unauthenticated() -> None:
    gate = AuthGate(_policy("allowlist"))
    expired = token_for(ADMIN_EMAIL, ttl=timedelta(minutes=-5))
    assert isinstance(gate.decide(expired), Unauthenticated)


def test_verified_mode_checks_signature() -> None:
    gate = AuthGate(
        _policy(
            "allowlist",
            verification=JwtVerification(algorithms=("HS256",), secret="s3cret", audience="atlas"),
        )
    )

    good = issue_token(email=ADMIN_EMAIL, secret="s3cret", audience="atlas")
    decision = gate.decide(good)
    assert isinstance(decision, Authorized)
    assert isinstance(decision.identity, VerifiedIdentity)

    forged = issue_token(email=ADMIN_EMAIL, secret="wrong", audience="atlas")
    assert isinstance(gate.decide(forged), Unauthenticated)

    wrong_aud = issue_token(email=ADMIN_EMAIL, secret="s3cret", audience="other")
    assert isinstance(gate.decide(wrong_aud), Unauthenticated)


def test_verified_mode_requires_email_claim() -> None:
    gate = AuthGate(
        _policy("delegated", verification=JwtVerification(algorithms=("HS256",), secret="k"))
    )
    token = jwt.encode(
        {"sub": "x", "exp": int((datetime.now(tz=UTC) + timedelta(minutes=5)).timestamp())},
        "k",
        algorithm="HS256",
    )
    assert isinstance(gate.decide(token), Unauthenticated)
