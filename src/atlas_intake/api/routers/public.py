"""
atlas_intake.api.routers.public

Public contact-form endpoints.

Responsibilities:
- Serve the contact form.
- Accept form posts and hand them to `IntakeService`; the admin notification
  runs as a background task after the response is sent.
- Answer CORS preflight for any path.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.responses import HTMLResponse
from starlette.status import HTTP_204_NO_CONTENT

from atlas_intake.api import pages
from atlas_intake.api.deps import intake_dep, policy_dep
from atlas_intake.policy import Policy
from atlas_intake.services.intake_service import IntakeService

router = APIRouter(tags=["public"])

FORM_FIELDS = ("name", "email", "phone", "service_type", "message")


@router.get("/", response_class=HTMLResponse)
async def landing_page(policy: Policy = Depends(policy_dep)) -> HTMLResponse:
    return HTMLResponse(
        pages.contact_form(company_name=policy.company_name, service_types=policy.service_types)
    )


@router.post("/submit", response_class=HTMLResponse)
async def submit(
    request: Request,
    background: BackgroundTasks,
    intake: IntakeService = Depends(intake_dep),
    policy: Policy = Depends(policy_dep),
) -> HTMLResponse:
    form = await request.form()
    raw = {key: _as_text(form.get(key)) for key in FORM_FIELDS}

    # ValidationError / PersistenceError are rendered by the app-level handlers.
    await intake.submit(raw, schedule=background.add_task)
    return HTMLResponse(pages.success(company_name=policy.company_name))


@router.options("/{path:path}", include_in_schema=False)
async def preflight(path: str) -> Response:
    # CORSMiddleware decorates the response; this only makes every path answer.
    return Response(status_code=HTTP_204_NO_CONTENT)


def _as_text(value: object) -> str | None:
    # Uploaded files are not valid values for any contact-form field.
    return value if isinstance(value, str) else None
