"""
atlas_intake.api.routers.admin

Authenticated admin dashboard endpoints.

Responsibilities:
- List submissions newest-first (optionally filtered by status).
- Apply status transitions through `StatusWorkflow`.
- Report per-status counts.

Every route depends on `require_admin`, so 401/403 short-circuit before any
store or workflow code runs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
from starlette.status import HTTP_302_FOUND

from atlas_intake.api import pages
from atlas_intake.api.deps import store_dep, workflow_dep
from atlas_intake.auth.deps import require_admin
from atlas_intake.auth.models import AdminIdentity
from atlas_intake.errors import ValidationError
from atlas_intake.services.status_workflow import StatusWorkflow
from atlas_intake.services.submission_store import SubmissionStore

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class StatsResponse(BaseModel):
    total: int
    by_status: dict[str, int]


@router.get("", response_class=HTMLResponse)
async def dashboard(
    status: str | None = None,
    identity: AdminIdentity | None = Depends(require_admin),
    store: SubmissionStore = Depends(store_dep),
    workflow: StatusWorkflow = Depends(workflow_dep),
) -> HTMLResponse:
    if status is not None and not workflow.is_valid(status):
        raise ValidationError([f"Unknown status filter {status!r}"])
    submissions = await store.list_all(status=status)
    return HTMLResponse(
        pages.dashboard(
            submissions=submissions,
            labels=workflow.labels,
            identity=identity,
            status_filter=status,
        )
    )


@router.post("/update")
async def update_status(
    request: Request,
    workflow: StatusWorkflow = Depends(workflow_dep),
) -> RedirectResponse:
    form = await request.form()
    raw_id = form.get("id")
    raw_status = form.get("status")
    submission_id = raw_id.strip() if isinstance(raw_id, str) else ""
    status = raw_status.strip() if isinstance(raw_status, str) else ""

    missing = [label for label, value in (("id", submission_id), ("status", status)) if not value]
    if missing:
        raise ValidationError([f"Missing {', '.join(missing)}"])

    await workflow.apply(submission_id, status)
    return RedirectResponse(url="/admin", status_code=HTTP_302_FOUND)


@router.get("/stats", response_model=StatsResponse)
async def stats(
    store: SubmissionStore = Depends(store_dep),
    workflow: StatusWorkflow = Depends(workflow_dep),
) -> StatsResponse:
    counts = await store.count_by_status(workflow.labels)
    total = counts.pop("total")
    return StatsResponse(total=total, by_status=counts)
