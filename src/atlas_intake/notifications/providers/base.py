from __future__ import annotations

from typing import Protocol

import httpx

from atlas_intake.errors import NotificationError
from atlas_intake.notifications.message import EmailMessage


class EmailProvider(Protocol):
    name: str

    async def send(self, http: httpx.AsyncClient, message: EmailMessage) -> None:
        """Deliver `message` or raise `NotificationError`."""


def ensure_success(provider: str, response: httpx.Response) -> None:
    if response.is_success:
        return
    # Provider error bodies can be large HTML pages; keep only a prefix for logs.
    detail = response.text[:300]
    raise NotificationError(f"{provider} returned HTTP {response.status_code}: {detail}")


async def post(provider: str, http: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    try:
        response = await http.post(url, **kwargs)
    except httpx.HTTPError as e:
        raise NotificationError(f"{provider} request failed: {e!r}") from e
    ensure_success(provider, response)
    return response
