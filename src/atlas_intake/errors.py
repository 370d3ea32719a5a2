"""
atlas_intake.errors

Domain error taxonomy.

Responsibilities:
- Give each failure class its own type so the API layer can map it to an
  HTTP outcome without inspecting messages.
"""

from __future__ import annotations


class IntakeError(Exception):
    pass


class ValidationError(IntakeError):
    """
    User-correctable input problems. Carries every violated rule, in order.
    """

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages: list[str] = list(messages)


class AuthenticationError(IntakeError):
    pass


class AuthorizationError(IntakeError):
    pass


class PersistenceError(IntakeError):
    pass


class NotificationError(IntakeError):
    pass


# --- Module Notes -----------------------------------------------------------
# NotificationError never crosses the dispatcher boundary; it exists so provider
# adapters have a single failure type to raise.
