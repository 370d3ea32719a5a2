"""
atlas_intake.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from atlas_intake.api.deps import dispatcher_dep, store_dep
from atlas_intake.notifications.dispatcher import NotificationDispatcher
from atlas_intake.services.submission_store import SubmissionStore

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    store: SubmissionStore = Depends(store_dep),
    dispatcher: NotificationDispatcher = Depends(dispatcher_dep),
) -> dict[str, str]:
    # Readiness: the DB must answer; notifications are reported, never required.
    await store.ping()
    return {"status": "ready", "notifications": dispatcher.describe()}
