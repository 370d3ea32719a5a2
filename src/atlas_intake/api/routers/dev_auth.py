from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from atlas_intake.api.deps import settings_dep
from atlas_intake.auth.jwt import issue_token
from atlas_intake.settings import Settings

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    name: str | None = Field(default=None, max_length=255)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    token: str
    header: str


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    settings: Settings = Depends(settings_dep),
) -> DevTokenResponse:
    if settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    # HS256 only: with JWKS verification configured these tokens are rejected.
    token = issue_token(
        email=body.email,
        name=body.name,
        secret=settings.identity_jwt_secret or "dev-secret-change-me",
        ttl=timedelta(minutes=body.ttl_minutes),
        audience=settings.identity_jwt_audience,
        issuer=settings.identity_jwt_issuer,
    )
    return DevTokenResponse(token=token, header=settings.identity_header)
