from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from famtime.services.providers.errors import MissingCredentialsError, RefinementTransportError

TokenProvider = Callable[[], Awaitable[str | None]]


async def _no_token() -> str | None:
    return None


class ProxyTransport:
    """Posts the profile and base suggestion to a backend that holds the model key."""

    kind = "proxy"

    def __init__(
        self,
        *,
        url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._token_provider = token_provider or _no_token
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        token = await self._token_provider()
        if not token:
            raise MissingCredentialsError()

        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {token}"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self.url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise RefinementTransportError("Proxy request failed", detail=str(exc)) from exc

        if response.status_code >= 400:
            detail = _error_detail(response)
            suffix = f" ({detail})" if detail else ""
            raise RefinementTransportError(
                f"Proxy responded {response.status_code}{suffix}",
                status_code=response.status_code,
                detail=detail,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise RefinementTransportError("Proxy returned invalid JSON", status_code=response.status_code) from exc
        if not isinstance(data, dict):
            raise RefinementTransportError("Proxy returned an unexpected body", status_code=response.status_code)
        return data


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, dict) and isinstance(detail.get("message"), str):
            return detail["message"]
        message = body.get("message")
        if isinstance(message, str):
            return message
    return None
