from __future__ import annotations

from typing import Any, Protocol

from famtime.core.config import Settings, settings
from famtime.services.providers.config_validation import validate_llm_provider_config
from famtime.services.providers.noop import NoopTransport
from famtime.services.providers.openai_provider import OpenAITransport
from famtime.services.providers.proxy import ProxyTransport, TokenProvider


class RefinementTransport(Protocol):
    kind: str

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]: ...


_MODE_CAPTIONS = {
    "proxy": "Generated via the FamTime cloud function (OpenAI).",
    "direct": "",
    "noop": "Local suggestion. Set up a backend proxy for real AI text.",
}


def get_refinement_transport(
    config: Settings | None = None,
    *,
    token_provider: TokenProvider | None = None,
) -> RefinementTransport:
    config = config or settings
    valid, _ = validate_llm_provider_config(config)
    if not valid:
        return NoopTransport(reason="not_configured")

    proxy_url = (config.openai_proxy_url or "").strip()
    if proxy_url.startswith(("http://", "https://")):
        return ProxyTransport(
            url=proxy_url,
            token_provider=token_provider,
            timeout=config.refinement_timeout_seconds,
        )
    return OpenAITransport(
        api_key=(config.openai_api_key or "").strip(),
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout=config.refinement_timeout_seconds,
    )


def describe_refinement_mode(kind: str) -> str:
    return _MODE_CAPTIONS.get(kind, _MODE_CAPTIONS["noop"])
