"""
atlas_intake.policy

Resolved, immutable runtime policy.

Responsibilities:
- Collapse the flat `Settings` into one frozen `Policy` value (auth mode,
  service-type whitelist, status labels, notification settings).
- Reject inconsistent configuration at startup rather than per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from atlas_intake.settings import Settings

AuthMode = Literal["disabled", "allowlist", "delegated"]


class PolicyError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class JwtVerification:
    # Only consulted when the deployment has no trusted proxy in front of it.
    algorithms: tuple[str, ...]
    secret: str | None = None
    jwks_url: str | None = None
    audience: str | None = None
    issuer: str | None = None


@dataclass(frozen=True, slots=True)
class AuthPolicy:
    mode: AuthMode
    admin_emails: frozenset[str]
    header_name: str
    verification: JwtVerification | None = None

    def is_listed(self, email: str) -> bool:
        return email.strip() in self.admin_emails


@dataclass(frozen=True, slots=True)
class NotificationSettings:
    enabled: bool
    provider: str
    api_key: str | None
    from_email: str | None
    from_name: str
    admin_email: str | None
    subject_prefix: str
    environment: str
    timeout_seconds: float
    mailgun_domain: str | None = None
    mailgun_base_url: str = "https://api.mailgun.net"

    def missing(self) -> list[str]:
        """
        Names of required settings that are absent. Empty means "ready to send".
        """

        missing = [
            name
            for name, value in (
                ("api_key", self.api_key),
                ("from_email", self.from_email),
                ("admin_email", self.admin_email),
            )
            if not value
        ]
        if self.provider == "mailgun" and not self.mailgun_domain:
            missing.append("mailgun_domain")
        return missing


@dataclass(frozen=True, slots=True)
class Policy:
    company_name: str
    service_types: tuple[str, ...]
    status_labels: tuple[str, ...]
    default_status: str
    auth: AuthPolicy
    notifications: NotificationSettings


def resolve_policy(settings: Settings) -> Policy:
    service_types = tuple(s.strip() for s in settings.service_types if s.strip())
    if not service_types:
        raise PolicyError("At least one service type must be configured")

    labels = tuple(dict.fromkeys(s.strip() for s in settings.status_labels if s.strip()))
    if not labels:
        raise PolicyError("At least one status label must be configured")
    if settings.default_status not in labels:
        raise PolicyError(
            f"Default status {settings.default_status!r} is not one of {', '.join(labels)}"
        )

    verification: JwtVerification | None = None
    if settings.identity_verification == "jwt":
        if not settings.identity_jwt_secret and not settings.identity_jwks_url:
            raise PolicyError("JWT verification needs identity_jwt_secret or identity_jwks_url")
        verification = JwtVerification(
            algorithms=tuple(settings.identity_jwt_algorithms),
            secret=settings.identity_jwt_secret,
            jwks_url=settings.identity_jwks_url,
            audience=settings.identity_jwt_audience,
            issuer=settings.identity_jwt_issuer,
        )

    auth = AuthPolicy(
        mode=settings.admin_auth_mode,
        admin_emails=frozenset(e.strip() for e in settings.admin_emails if e.strip()),
        header_name=settings.identity_header,
        verification=verification,
    )

    enabled = settings.notifications_enabled
    if enabled is None:
        # Emails are off in dev unless explicitly switched on.
        enabled = settings.env != "dev"

    notifications = NotificationSettings(
        enabled=enabled,
        provider=settings.notification_provider,
        api_key=settings.notification_api_key,
        from_email=settings.notification_from_email,
        from_name=settings.notification_from_name,
        admin_email=settings.notification_admin_email,
        subject_prefix=settings.notification_subject_prefix,
        environment=settings.env,
        timeout_seconds=settings.notification_timeout_seconds,
        mailgun_domain=settings.mailgun_domain,
        mailgun_base_url=settings.mailgun_base_url,
    )

    return Policy(
        company_name=settings.company_name,
        service_types=service_types,
        status_labels=labels,
        default_status=settings.default_status,
        auth=auth,
        notifications=notifications,
    )


# --- Module Notes -----------------------------------------------------------
# `Policy` is built once in `api.app.create_app` and stashed on app.state; nothing
# mutates it afterwards.
