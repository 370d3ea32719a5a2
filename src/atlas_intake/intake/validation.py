"""
atlas_intake.intake.validation

Form validation and sanitization.

Responsibilities:
- Check every rule and report all violations together (the form is re-rendered
  with the full list).
- Sanitize accepted fields: trim, strip control characters, truncate.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from atlas_intake.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_CONTROL_CHARS_RE = re.compile(r"[\u0000-\u001F\u007F-\u009F]")
# Same range minus tab and newline, for the free-text message.
_CONTROL_CHARS_MULTILINE_RE = re.compile(r"[\u0000-\u0008\u000B-\u001F\u007F-\u009F]")

MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_PHONE_LENGTH = 50
MAX_SERVICE_TYPE_LENGTH = 255
MAX_MESSAGE_LENGTH = 10_000

NAME_REQUIRED = "Name is required"
SERVICE_TYPE_REQUIRED = "Please select a service type"
MESSAGE_REQUIRED = "Message is required"
EMAIL_INVALID = "Please enter a valid email address"
SERVICE_TYPE_INVALID = "Invalid service type selected"


@dataclass(frozen=True, slots=True)
class SubmissionPayload:
    name: str
    service_type: str
    message: str
    email: str | None = None
    phone: str | None = None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def clean(value: str | None, *, multiline: bool = False) -> str:
    if not isinstance(value, str):
        return ""
    if multiline:
        value = value.replace("\r\n", "\n")
        return _CONTROL_CHARS_MULTILINE_RE.sub("", value).strip()
    return _CONTROL_CHARS_RE.sub("", value).strip()


def validate_submission(
    raw: Mapping[str, str | None],
    *,
    service_types: Iterable[str],
) -> SubmissionPayload:
    """
    Return a sanitized payload or raise `ValidationError` listing every problem.

    Rules are checked against the cleaned value (control characters removed,
    whitespace trimmed) so a field made only of junk counts as blank.
    """

    name = clean(raw.get("name"))
    email = clean(raw.get("email"))
    phone = clean(raw.get("phone"))
    service_type = clean(raw.get("service_type"))
    message = clean(raw.get("message"), multiline=True)

    errors: list[str] = []
    if not name:
        errors.append(NAME_REQUIRED)
    if not service_type:
        errors.append(SERVICE_TYPE_REQUIRED)
    if not message:
        errors.append(MESSAGE_REQUIRED)
    if email and not is_valid_email(email):
        errors.append(EMAIL_INVALID)
    if service_type and service_type not in frozenset(service_types):
        errors.append(SERVICE_TYPE_INVALID)

    for label, value, limit in (
        ("Name", name, MAX_NAME_LENGTH),
        ("Email", email, MAX_EMAIL_LENGTH),
        ("Phone number", phone, MAX_PHONE_LENGTH),
        ("Message", message, MAX_MESSAGE_LENGTH),
    ):
        if len(value) > limit:
            errors.append(f"{label} must be less than {limit:,} characters")

    if errors:
        raise ValidationError(errors)

    return SubmissionPayload(
        name=name[:MAX_NAME_LENGTH],
        service_type=service_type[:MAX_SERVICE_TYPE_LENGTH],
        message=message[:MAX_MESSAGE_LENGTH],
        email=email[:MAX_EMAIL_LENGTH] or None,
        phone=phone[:MAX_PHONE_LENGTH] or None,
    )


# --- Module Notes -----------------------------------------------------------
# Tab and newline survive in `message` only; every other field is single-line.
