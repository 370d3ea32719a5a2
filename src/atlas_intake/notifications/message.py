"""
atlas_intake.notifications.message

Provider-neutral email message and its composition from a submission.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from atlas_intake.errors import NotificationError
from atlas_intake.policy import NotificationSettings

MAX_SUBJECT_LENGTH = 78
_RULE = "-" * 48


class SubmissionLike(Protocol):
    id: object
    name: str
    email: str | None
    phone: str | None
    service_type: str
    message: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class EmailMessage:
    from_email: str
    from_name: str
    to: tuple[str, ...]
    subject: str
    text: str
    reply_to: str | None = None

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email


def subject_line(prefix: str, submission: SubmissionLike) -> str:
    service = submission.service_type or "General"
    customer = submission.name or "Unknown"
    subject = f"{prefix}: {service} - {customer}"
    if len(subject) > MAX_SUBJECT_LENGTH:
        return subject[: MAX_SUBJECT_LENGTH - 3] + "..."
    return subject


def body_text(submission: SubmissionLike, *, environment: str, company_name: str) -> str:
    submitted = submission.created_at.strftime("%Y-%m-%d %H:%M:%S UTC")
    return "\n".join(
        [
            _RULE,
            f"New {company_name} contact form submission",
            _RULE,
            "",
            f"Customer: {submission.name}",
            f"Email: {submission.email or 'Not provided'}",
            f"Phone: {submission.phone or 'Not provided'}",
            f"Service: {submission.service_type}",
            "",
            "Message:",
            submission.message,
            "",
            f"Submitted: {submitted}",
            f"Environment: {environment}",
            f"Submission ID: {submission.id}",
            "",
            _RULE,
            "Reply directly to this email to contact the customer.",
        ]
    )


def compose(
    submission: SubmissionLike,
    *,
    settings: NotificationSettings,
    company_name: str,
) -> EmailMessage:
    if not settings.from_email or not settings.admin_email:
        raise NotificationError("sender and admin addresses must be configured")
    return EmailMessage(
        from_email=settings.from_email,
        from_name=settings.from_name,
        to=(settings.admin_email,),
        subject=subject_line(settings.subject_prefix, submission),
        text=body_text(submission, environment=settings.environment, company_name=company_name),
        reply_to=submission.email or None,
    )
