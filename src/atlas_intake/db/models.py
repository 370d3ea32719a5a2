"""
atlas_intake.db.models

Persistence schema for contact-form submissions.

Responsibilities:
- Define the `Submission` ORM model and its dashboard indexes.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Index, String, Text, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from atlas_intake.db.base import Base


def utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    service_type: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Label membership is enforced by the workflow, not the schema; the set is config.
    status: Mapped[str] = mapped_column(String(32), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"Submission(id={self.id!s}, status={self.status!r})"


# Dashboard queries filter by status and sort newest-first.
Index("ix_submissions_status", Submission.status)
Index("ix_submissions_created_at", Submission.created_at.desc())
