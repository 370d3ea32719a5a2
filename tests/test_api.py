"""
tests.test_api

End-to-end HTTP scenarios against the ASGI app with a per-test SQLite file.
"""

from __future__ import annotations

import base64
from pathlib import Path

import httpx
import pytest
from sqlalchemy import func, select

from atlas_intake.api.app import create_app
from atlas_intake.db.models import Submission
from atlas_intake.policy import PolicyError
from tests.conftest import ADMIN_EMAIL, make_settings, running_client, token_for

HEADER = "Cf-Access-Jwt-Assertion"
VALID_FORM = {"name": "Jane Doe", "service_type": "General Inquiry", "message": "Hello"}


async def _row_count(app) -> int:
    async with app.state.sessionmaker() as session:
        return int((await session.execute(select(func.count()).select_from(Submission))).scalar_one())


async def _rows(app) -> list[Submission]:
    async with app.state.sessionmaker() as session:
        return list((await session.execute(select(Submission))).scalars().all())


@pytest.mark.asyncio
async def test_health_endpoints(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert "x-request-id" in r.headers

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"
        assert r.json()["notifications"] == "disabled"


@pytest.mark.asyncio
async def test_landing_page_lists_service_types(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path, service_types=["Quotes", "Repairs"]))
    async with running_client(app) as client:
        r = await client.get("/")
    assert r.status_code == 200
    assert "Repairs" in r.text
    assert "action='/submit'" in r.text


@pytest.mark.asyncio
async def test_submit_creates_one_row_with_default_status(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.post("/submit", data=VALID_FORM)
        assert r.status_code == 200
        assert "Thank you" in r.text

        rows = await _rows(app)
    assert len(rows) == 1
    assert rows[0].status == "new"
    assert rows[0].name == "Jane Doe"
    assert rows[0].email is None


@pytest.mark.asyncio
async def test_submit_uses_configured_default_status(tmp_path: Path) -> None:
    app = create_app(
        settings=make_settings(tmp_path, status_labels=["open", "closed"], default_status="open")
    )
    async with running_client(app) as client:
        assert (await client.post("/submit", data=VALID_FORM)).status_code == 200
        assert [s.status for s in await _rows(app)] == ["open"]


@pytest.mark.asyncio
async def test_submit_without_message_is_rejected(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.post("/submit", data={"name": "Jane Doe", "service_type": "General Inquiry"})
        assert r.status_code == 400
        assert "Message is required" in r.text
        assert await _row_count(app) == 0


@pytest.mark.asyncio
async def test_submit_lists_every_missing_field(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.post("/submit", data={"email": "nope"})
        assert r.status_code == 400
        for msg in (
            "Name is required",
            "Please select a service type",
            "Message is required",
            "Please enter a valid email address",
        ):
            assert msg in r.text
        assert await _row_count(app) == 0


@pytest.mark.asyncio
async def test_notification_failure_does_not_change_submit_outcome(tmp_path: Path) -> None:
    calls: list[httpx.Request] = []

    def provider_down(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    settings = make_settings(
        tmp_path,
        notifications_enabled=True,
        notification_provider="mailgun",
        notification_api_key="key-123",
        notification_from_email="noreply@example.com",
        notification_admin_email="ops@example.com",
        mailgun_domain="mg.example.com",
    )
    app = create_app(settings=settings, notification_transport=httpx.MockTransport(provider_down))
    async with running_client(app) as client:
        r = await client.post("/submit", data=VALID_FORM)
        assert r.status_code == 200
        assert await _row_count(app) == 1
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_submit_reports_persistence_failure(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        # Drop the table underneath the app to simulate a store that rejects writes.
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Submission.__table__.drop)
        r = await client.post("/submit", data=VALID_FORM)
    assert r.status_code == 500
    assert "Database error occurred" in r.text


@pytest.mark.asyncio
async def test_admin_allowlist_policy(tmp_path: Path) -> None:
    app = create_app(
        settings=make_settings(tmp_path, admin_auth_mode="allowlist", admin_emails=[ADMIN_EMAIL])
    )
    async with running_client(app) as client:
        assert (await client.get("/admin")).status_code == 401

        r = await client.get("/admin", headers={HEADER: token_for("intruder@example.com")})
        assert r.status_code == 403

        r = await client.get("/admin", headers={HEADER: token_for(ADMIN_EMAIL)})
        assert r.status_code == 200
        assert ADMIN_EMAIL in r.text

        r = await client.get("/admin", headers={HEADER: token_for(ADMIN_EMAIL.upper())})
        assert r.status_code == 403


@pytest.mark.asyncio
async def test_admin_rejects_deeply_nested_token_payload(tmp_path: Path) -> None:
    depth = 100_000
    raw = '{"email": "x@y.com", "a": ' + "[" * depth + "]" * depth + "}"
    segment = base64.urlsafe_b64encode(raw.encode()).rstrip(b"=").decode()
    app = create_app(
        settings=make_settings(tmp_path, admin_auth_mode="allowlist", admin_emails=[ADMIN_EMAIL])
    )
    async with running_client(app) as client:
        r = await client.get("/admin", headers={HEADER: f"h.{segment}.s"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_dashboard_reports_persistence_failure(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Submission.__table__.drop)
        r = await client.get("/admin")
    assert r.status_code == 500
    assert "Database error occurred" in r.text


@pytest.mark.asyncio
async def test_admin_update_of_unknown_id_is_a_server_error(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.post(
            "/admin/update",
            data={"id": "00000000-0000-0000-0000-000000000000", "status": "resolved"},
        )
    assert r.status_code == 500
    assert "Database error occurred" in r.text


@pytest.mark.asyncio
async def test_admin_update_requires_auth_before_touching_rows(tmp_path: Path) -> None:
    app = create_app(
        settings=make_settings(tmp_path, admin_auth_mode="allowlist", admin_emails=[ADMIN_EMAIL])
    )
    async with running_client(app) as client:
        await client.post("/submit", data=VALID_FORM)
        (row,) = await _rows(app)

        r = await client.post("/admin/update", data={"id": str(row.id), "status": "resolved"})
        assert r.status_code == 401
        assert [s.status for s in await _rows(app)] == ["new"]


@pytest.mark.asyncio
async def test_admin_lists_newest_first(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        for name in ("First Person", "Second Person"):
            await client.post("/submit", data={**VALID_FORM, "name": name})
        r = await client.get("/admin")
    assert r.status_code == 200
    assert r.text.index("Second Person") < r.text.index("First Person")


@pytest.mark.asyncio
async def test_admin_update_redirects_and_mutates(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        await client.post("/submit", data=VALID_FORM)
        (row,) = await _rows(app)

        r = await client.post("/admin/update", data={"id": str(row.id), "status": "resolved"})
        assert r.status_code == 302
        assert r.headers["location"] == "/admin"

        (updated,) = await _rows(app)
        assert updated.status == "resolved"
        assert updated.updated_at >= updated.created_at


@pytest.mark.asyncio
async def test_admin_update_rejects_unknown_status(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        await client.post("/submit", data=VALID_FORM)
        (row,) = await _rows(app)

        r = await client.post("/admin/update", data={"id": str(row.id), "status": "bogus"})
        assert r.status_code == 400
        (unchanged,) = await _rows(app)
        assert unchanged.status == "new"
        assert unchanged.updated_at == row.updated_at


@pytest.mark.asyncio
async def test_admin_update_requires_both_fields(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.post("/admin/update", data={"status": "resolved"})
        assert r.status_code == 400
        assert "Missing id" in r.text

        r = await client.post("/admin/update", data={"id": "  ", "status": " "})
        assert r.status_code == 400
        assert "Missing id, status" in r.text


@pytest.mark.asyncio
async def test_admin_stats(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        await client.post("/submit", data=VALID_FORM)
        await client.post("/submit", data=VALID_FORM)
        r = await client.get("/admin/stats")
    assert r.status_code == 200
    assert r.json() == {
        "total": 2,
        "by_status": {"new": 2, "in_progress": 0, "resolved": 0, "cancelled": 0},
    }


@pytest.mark.asyncio
async def test_options_answers_any_path(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path))
    async with running_client(app) as client:
        r = await client.options("/submit")
        assert r.status_code == 204

        r = await client.options(
            "/admin/update",
            headers={"Origin": "https://example.com", "Access-Control-Request-Method": "POST"},
        )
        assert r.status_code == 200
        assert r.headers["access-control-allow-origin"] == "*"


def test_inconsistent_status_config_fails_at_startup(tmp_path: Path) -> None:
    with pytest.raises(PolicyError):
        create_app(settings=make_settings(tmp_path, default_status="archived"))


@pytest.mark.asyncio
async def test_dev_token_round_trip(tmp_path: Path) -> None:
    app = create_app(
        settings=make_settings(tmp_path, admin_auth_mode="allowlist", admin_emails=[ADMIN_EMAIL])
    )
    async with running_client(app) as client:
        r = await client.post("/v1/dev/token", json={"email": ADMIN_EMAIL})
        assert r.status_code == 200
        body = r.json()
        assert body["header"] == HEADER

        r = await client.get("/admin", headers={body["header"]: body["token"]})
        assert r.status_code == 200


def test_dev_token_route_absent_in_prod(tmp_path: Path) -> None:
    app = create_app(settings=make_settings(tmp_path, env="prod"))
    assert "/v1/dev/token" not in {getattr(r, "path", None) for r in app.routes}
