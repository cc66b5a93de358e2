from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from famtime.services.providers.errors import RefinementTransportError

DETAIL_LIMIT = 200


class OpenAITransport:
    """Calls the chat completions endpoint directly with a server-side key."""

    kind = "direct"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 15.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("OpenAITransport requires an API key")
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._get_client().chat.completions.create(**payload)
        except OpenAIError as exc:
            raise RefinementTransportError(
                "OpenAI request failed",
                status_code=getattr(exc, "status_code", None),
                detail=str(exc)[:DETAIL_LIMIT],
            ) from exc
        return response.model_dump()
