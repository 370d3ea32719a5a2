"""
atlas_intake.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (provider API keys, JWT secret).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_TYPES: tuple[str, ...] = (
    "General Inquiry",
    "Technical Support",
    "Sales Question",
    "Partnership Opportunity",
    "Customer Service",
    "Billing Question",
    "Feature Request",
    "Bug Report",
    "Other",
)

DEFAULT_STATUS_LABELS: tuple[str, ...] = ("new", "in_progress", "resolved", "cancelled")


class Settings(BaseSettings):
    """
    Raw, env-driven configuration.

    Handlers never read this directly; `atlas_intake.policy.resolve_policy`
    turns it into the immutable `Policy` threaded through the components.
    """

    model_config = SettingsConfigDict(env_prefix="ATLAS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "atlas-intake"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./atlas_intake.db"

    # Contact form
    company_name: str = "Atlas"
    service_types: list[str] = Field(default_factory=lambda: list(DEFAULT_SERVICE_TYPES))

    # Status workflow
    status_labels: list[str] = Field(default_factory=lambda: list(DEFAULT_STATUS_LABELS))
    default_status: str = "new"

    # Admin auth
    admin_auth_mode: Literal["disabled", "allowlist", "delegated"] = "allowlist"
    admin_emails: list[str] = Field(default_factory=list)
    identity_header: str = "Cf-Access-Jwt-Assertion"
    identity_verification: Literal["trusted_proxy", "jwt"] = "trusted_proxy"
    identity_jwt_secret: str | None = Field(default=None, repr=False)
    identity_jwks_url: str | None = None
    identity_jwt_algorithms: list[str] = Field(default_factory=lambda: ["RS256"])
    identity_jwt_audience: str | None = None
    identity_jwt_issuer: str | None = None

    # Notifications. None means "use the per-environment default" (off in dev).
    notifications_enabled: bool | None = None
    notification_provider: Literal["mailgun", "resend", "mailchannels"] = "mailgun"
    notification_api_key: str | None = Field(default=None, repr=False)
    notification_from_email: str | None = None
    notification_from_name: str = "Contact Form System"
    notification_admin_email: str | None = None
    notification_subject_prefix: str = "New Contact Form"
    notification_timeout_seconds: float = 10.0
    mailgun_domain: str | None = None
    mailgun_base_url: str = "https://api.mailgun.net"

    # CORS
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; only the entrypoint calls this.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# List-valued settings are read from env as JSON, e.g.
#   ATLAS_ADMIN_EMAILS='["ops@example.com"]'
