from __future__ import annotations

from typing import Any

import httpx

from atlas_intake.notifications.message import EmailMessage
from atlas_intake.notifications.providers.base import post

MAILCHANNELS_SEND_URL = "https://api.mailchannels.net/tx/v1/send"


class MailChannelsProvider:
    name = "mailchannels"

    def __init__(self, *, api_key: str, url: str = MAILCHANNELS_SEND_URL) -> None:
        self._api_key = api_key
        self._url = url

    async def send(self, http: httpx.AsyncClient, message: EmailMessage) -> None:
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": addr} for addr in message.to]}],
            "from": {"email": message.from_email, "name": message.from_name},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.text}],
        }
        if message.reply_to:
            payload["reply_to"] = {"email": message.reply_to}
        await post(self.name, http, self._url, json=payload, headers={"X-Api-Key": self._api_key})
