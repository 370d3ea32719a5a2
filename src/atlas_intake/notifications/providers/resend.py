from __future__ import annotations

from typing import Any

import httpx

from atlas_intake.notifications.message import EmailMessage
from atlas_intake.notifications.providers.base import post

RESEND_SEND_URL = "https://api.resend.com/emails"


class ResendProvider:
    name = "resend"

    def __init__(self, *, api_key: str, url: str = RESEND_SEND_URL) -> None:
        self._api_key = api_key
        self._url = url

    async def send(self, http: httpx.AsyncClient, message: EmailMessage) -> None:
        payload: dict[str, Any] = {
            "from": message.sender,
            "to": list(message.to),
            "subject": message.subject,
            "text": message.text,
        }
        if message.reply_to:
            payload["reply_to"] = message.reply_to
        headers = {"Authorization": f"Bearer {self._api_key}"}
        await post(self.name, http, self._url, json=payload, headers=headers)
