"""
atlas_intake.notifications.dispatcher

Best-effort admin notification after a submission is stored.

Responsibilities:
- Skip quietly when notifications are off or not fully configured.
- Compose and send through the configured `EmailProvider`.
- Absorb every delivery failure: log it, never raise to the caller.
"""

from __future__ import annotations

import httpx

from atlas_intake.notifications.message import SubmissionLike, compose
from atlas_intake.notifications.providers import EmailProvider, build_provider
from atlas_intake.observability.logging import get_logger
from atlas_intake.policy import NotificationSettings

log = get_logger(__name__)


class NotificationDispatcher:
    def __init__(
        self,
        *,
        settings: NotificationSettings,
        company_name: str,
        provider: EmailProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._company_name = company_name
        self._missing = settings.missing()
        self._provider = provider
        if self._provider is None and settings.enabled and not self._missing:
            self._provider = build_provider(settings)
        # Tests inject an httpx.MockTransport; production uses the default transport.
        self._transport = transport

    @property
    def active(self) -> bool:
        return self._settings.enabled and not self._missing and self._provider is not None

    def describe(self) -> str:
        if not self._settings.enabled:
            return "disabled"
        if self._missing:
            return f"not configured (missing {', '.join(self._missing)})"
        return f"enabled via {self._settings.provider}"

    async def notify(self, submission: SubmissionLike) -> bool:
        if not self.active or self._provider is None:
            log.info("notification_skipped", submission_id=str(submission.id), reason=self.describe())
            return False

        try:
            message = compose(submission, settings=self._settings, company_name=self._company_name)
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.timeout_seconds,
            ) as http:
                await self._provider.send(http, message)
        except Exception as e:
            # Delivery is best-effort; the submission is already stored.
            log.error(
                "notification_failed",
                submission_id=str(submission.id),
                provider=self._provider.name,
                error=str(e),
                exc_info=True,
            )
            return False

        log.info("notification_sent", submission_id=str(submission.id), provider=self._provider.name)
        return True


# --- Module Notes -----------------------------------------------------------
# No retry and no delivery status on the submission row: a failed notification
# is only visible in the logs.
