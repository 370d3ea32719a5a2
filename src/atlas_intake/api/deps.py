"""
atlas_intake.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the startup-resolved `Policy`, settings and dispatcher from app.state.
- Provide request-scoped DB sessions and the services built on them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from atlas_intake.notifications.dispatcher import NotificationDispatcher
from atlas_intake.policy import Policy
from atlas_intake.services.intake_service import IntakeService
from atlas_intake.services.status_workflow import StatusWorkflow
from atlas_intake.services.submission_store import SubmissionStore
from atlas_intake.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def policy_dep(request: Request) -> Policy:
    # Resolved once in `create_app`; never mutated afterwards.
    return request.app.state.policy  # type: ignore[attr-defined]


def dispatcher_dep(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`api.app.create_app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed by SubmissionStore.
    async with session_factory() as session:
        yield session


def store_dep(
    session: AsyncSession = Depends(db_session),
    policy: Policy = Depends(policy_dep),
) -> SubmissionStore:
    return SubmissionStore(session=session, default_status=policy.default_status)


def workflow_dep(
    store: SubmissionStore = Depends(store_dep),
    policy: Policy = Depends(policy_dep),
) -> StatusWorkflow:
    return StatusWorkflow(store=store, labels=policy.status_labels, default=policy.default_status)


def intake_dep(
    store: SubmissionStore = Depends(store_dep),
    dispatcher: NotificationDispatcher = Depends(dispatcher_dep),
    policy: Policy = Depends(policy_dep),
) -> IntakeService:
    return IntakeService(store=store, dispatcher=dispatcher, service_types=policy.service_types)
