"""
atlas_intake.notifications.providers

Transactional-email provider adapters.

Responsibilities:
- Define the `EmailProvider` interface.
- Map a configured provider name to its adapter.
"""

from __future__ import annotations

from atlas_intake.notifications.providers.base import EmailProvider
from atlas_intake.notifications.providers.mailchannels import MailChannelsProvider
from atlas_intake.notifications.providers.mailgun import MailgunProvider
from atlas_intake.notifications.providers.resend import ResendProvider
from atlas_intake.policy import NotificationSettings

__all__ = [
    "EmailProvider",
    "MailChannelsProvider",
    "MailgunProvider",
    "ResendProvider",
    "build_provider",
]


def build_provider(settings: NotificationSettings) -> EmailProvider:
    """
    Select the adapter named by `settings.provider`.

    Assumes `settings.missing()` is empty; raises ValueError for unknown names.
    """

    api_key = settings.api_key or ""
    if settings.provider == "mailgun":
        return MailgunProvider(
            api_key=api_key,
            domain=settings.mailgun_domain or "",
            base_url=settings.mailgun_base_url,
        )
    if settings.provider == "resend":
        return ResendProvider(api_key=api_key)
    if settings.provider == "mailchannels":
        return MailChannelsProvider(api_key=api_key)
    raise ValueError(f"unknown notification provider {settings.provider!r}")
