"""
atlas_intake.services.intake_service

Contact-form intake flow.

Responsibilities:
- Validate -> persist -> hand the stored record to the notification dispatcher,
  strictly in that order.
- Keep notification completion decoupled from the caller's outcome.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from atlas_intake.db.models import Submission
from atlas_intake.errors import ValidationError
from atlas_intake.intake.validation import validate_submission
from atlas_intake.notifications.dispatcher import NotificationDispatcher
from atlas_intake.observability.logging import get_logger
from atlas_intake.services.submission_store import SubmissionStore

log = get_logger(__name__)

# Matches starlette.background.BackgroundTasks.add_task.
Scheduler = Callable[..., Any]


class IntakeService:
    def __init__(
        self,
        *,
        store: SubmissionStore,
        dispatcher: NotificationDispatcher,
        service_types: tuple[str, ...],
    ) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._service_types = service_types

    async def submit(
        self,
        raw: Mapping[str, str | None],
        *,
        schedule: Scheduler | None = None,
    ) -> Submission:
        """
        Store one submission and start its notification.

        With `schedule` the notification runs later (e.g. after the response is
        sent); without it, it is awaited inline. Either way delivery failures
        never surface here.
        """

        try:
            payload = validate_submission(raw, service_types=self._service_types)
        except ValidationError as e:
            log.info("submission_rejected", errors=e.messages)
            raise

        submission = await self._store.create(payload)

        notify: Callable[[Submission], Awaitable[bool]] = self._dispatcher.notify
        if schedule is not None:
            schedule(notify, submission)
        else:
            await notify(submission)
        return submission
