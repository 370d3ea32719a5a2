"""
atlas_intake.services.submission_store

Submission persistence service (transaction owner).

Responsibilities:
- Own commit/rollback around each submission write.
- Translate backing-store failures into `PersistenceError` with logged context.
- Keep `created_at <= updated_at` and make `updated_at` strictly advance.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from atlas_intake.db.models import Submission, utcnow
from atlas_intake.db.repositories.submissions import SubmissionRepo
from atlas_intake.errors import PersistenceError
from atlas_intake.intake.validation import SubmissionPayload
from atlas_intake.observability.logging import get_logger

log = get_logger(__name__)

_TICK = timedelta(microseconds=1)


def _parse_id(submission_id: uuid.UUID | str) -> uuid.UUID | None:
    if isinstance(submission_id, uuid.UUID):
        return submission_id
    try:
        return uuid.UUID(str(submission_id).strip())
    except ValueError:
        return None


class SubmissionStore:
    """
    Every mutating call is one transaction: it either commits fully or rolls
    back and raises `PersistenceError`.
    """

    def __init__(self, *, session: AsyncSession, default_status: str) -> None:
        self._session = session
        self._default_status = default_status
        self._repo = SubmissionRepo(session)

    async def create(self, payload: SubmissionPayload) -> Submission:
        try:
            sub = await self._repo.create(
                name=payload.name,
                email=payload.email,
                phone=payload.phone,
                service_type=payload.service_type,
                message=payload.message,
                status=self._default_status,
                now=utcnow(),
            )
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("persistence_failed", op="create", error=str(e))
            raise PersistenceError("Could not save submission") from e
        log.info("submission_created", submission_id=str(sub.id), service_type=sub.service_type)
        return sub

    async def get(self, submission_id: uuid.UUID | str) -> Submission | None:
        parsed = _parse_id(submission_id)
        if parsed is None:
            return None
        try:
            return await self._repo.get(parsed)
        except SQLAlchemyError as e:
            log.error("persistence_failed", op="get", error=str(e))
            raise PersistenceError("Could not load submission") from e

    async def list_all(self, *, status: str | None = None) -> list[Submission]:
        try:
            return await self._repo.list_all(status=status)
        except SQLAlchemyError as e:
            log.error("persistence_failed", op="list_all", error=str(e))
            raise PersistenceError("Could not load submissions") from e

    async def update_status(self, submission_id: uuid.UUID | str, new_status: str) -> Submission:
        parsed = _parse_id(submission_id)
        if parsed is None:
            raise PersistenceError(f"Submission {submission_id!s} not found")

        try:
            current = await self._repo.get(parsed)
            if current is None:
                raise PersistenceError(f"Submission {parsed} not found")
            sub = await self._repo.set_status(
                parsed, new_status, now=self._next_timestamp(current.updated_at)
            )
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            log.error("persistence_failed", op="update_status", submission_id=str(parsed), error=str(e))
            raise PersistenceError("Could not update submission") from e

        if sub is None:
            # Deleted between the read and the locked write.
            raise PersistenceError(f"Submission {parsed} not found")
        log.info("status_updated", submission_id=str(parsed), status=new_status)
        return sub

    async def count_by_status(self, labels: tuple[str, ...]) -> dict[str, int]:
        try:
            counts = await self._repo.count_by_status()
        except SQLAlchemyError as e:
            log.error("persistence_failed", op="count_by_status", error=str(e))
            raise PersistenceError("Could not load submission stats") from e
        stats = {"total": sum(counts.values())}
        stats.update({label: counts.get(label, 0) for label in labels})
        return stats

    async def ping(self) -> None:
        try:
            await self._session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            log.error("persistence_failed", op="ping", error=str(e))
            raise PersistenceError("Database unreachable") from e

    @staticmethod
    def _next_timestamp(previous: datetime | None) -> datetime:
        now = utcnow()
        if previous is not None and now <= previous:
            return previous + _TICK
        return now


# --- Module Notes -----------------------------------------------------------
# No optimistic concurrency: two admins updating the same row race and the last
# commit wins. The row lock in `SubmissionRepo.set_status` only serializes the
# write itself on backends that support SELECT ... FOR UPDATE.
