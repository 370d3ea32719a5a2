"""
atlas_intake.services.status_workflow

Submission status state machine.

Responsibilities:
- Validate target labels against the configured label set.
- Delegate accepted transitions to `SubmissionStore.update_status`.

The machine is flat: every configured label may follow every other one, there is
no terminal state, and no transition is refused on ordering grounds.
"""

from __future__ import annotations

import uuid

from atlas_intake.db.models import Submission
from atlas_intake.errors import ValidationError
from atlas_intake.services.submission_store import SubmissionStore


class StatusWorkflow:
    def __init__(
        self,
        *,
        store: SubmissionStore,
        labels: tuple[str, ...],
        default: str,
    ) -> None:
        if default not in labels:
            raise ValueError(f"default status {default!r} is not a configured label")
        self._store = store
        self._labels = labels
        self._default = default

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def default(self) -> str:
        return self._default

    def is_valid(self, label: str) -> bool:
        return label in self._labels

    async def apply(self, submission_id: uuid.UUID | str, target: str) -> Submission:
        if not self.is_valid(target):
            raise ValidationError(
                [f"Invalid status {target!r}; expected one of: {', '.join(self._labels)}"]
            )
        return await self._store.update_status(submission_id, target)
