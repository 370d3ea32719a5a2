from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from atlas_intake.db.models import Submission


class SubmissionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        name: str,
        service_type: str,
        message: str,
        email: str | None,
        phone: str | None,
        status: str,
        now: datetime,
    ) -> Submission:
        sub = Submission(
            id=uuid.uuid4(),
            name=name,
            email=email,
            phone=phone,
            service_type=service_type,
            message=message,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self._session.add(sub)
        await self._session.flush()
        return sub

    async def get(self, submission_id: uuid.UUID) -> Submission | None:
        return await self._session.get(Submission, submission_id)

    async def list_all(self, *, status: str | None = None) -> list[Submission]:
        # Newest first; id breaks ties so equal timestamps still order deterministically.
        stmt = select(Submission).order_by(desc(Submission.created_at), desc(Submission.id))
        if status is not None:
            stmt = stmt.where(Submission.status == status)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_status(
        self, submission_id: uuid.UUID, status: str, *, now: datetime
    ) -> Submission | None:
        sub = await self._session.get(Submission, submission_id, with_for_update=True)
        if sub is None:
            return None
        sub.status = status
        sub.updated_at = now
        await self._session.flush()
        return sub

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(Submission.status, func.count()).group_by(Submission.status)
        return {status: int(n) for status, n in (await self._session.execute(stmt)).all()}
