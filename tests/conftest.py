"""
tests.conftest

Shared fixtures: per-test SQLite databases, app factory helpers, identity tokens.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from atlas_intake.auth.jwt import issue_token
from atlas_intake.db.init_db import init_db
from atlas_intake.db.session import create_engine, create_sessionmaker
from atlas_intake.settings import Settings

ADMIN_EMAIL = "admin@example.com"


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'intake.db'}",
        "admin_auth_mode": "disabled",
        "notifications_enabled": False,
    }
    values.update(overrides)
    return Settings(**values)


def token_for(email: str, *, ttl: timedelta = timedelta(minutes=30)) -> str:
    # Signature is irrelevant in trusted-proxy mode; any secret will do.
    return issue_token(email=email, secret="test-secret", ttl=ttl)


@asynccontextmanager
async def running_client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx's ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def session(settings: Settings) -> AsyncIterator[AsyncSession]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        async with create_sessionmaker(engine)() as s:
            yield s
    finally:
        await engine.dispose()
