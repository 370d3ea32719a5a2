"""
atlas_intake.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide a shared DeclarativeBase for all ORM models.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
