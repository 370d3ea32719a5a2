from __future__ import annotations

import httpx

from atlas_intake.notifications.message import EmailMessage
from atlas_intake.notifications.providers.base import post


class MailgunProvider:
    name = "mailgun"

    def __init__(self, *, api_key: str, domain: str, base_url: str = "https://api.mailgun.net") -> None:
        self._auth = httpx.BasicAuth("api", api_key)
        self._url = f"{base_url.rstrip('/')}/v3/{domain}/messages"

    async def send(self, http: httpx.AsyncClient, message: EmailMessage) -> None:
        data: dict[str, str | list[str]] = {
            "from": message.sender,
            "to": list(message.to),
            "subject": message.subject,
            "text": message.text,
        }
        if message.reply_to:
            data["h:Reply-To"] = message.reply_to
        await post(self.name, http, self._url, data=data, auth=self._auth)
