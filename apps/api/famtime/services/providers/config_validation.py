from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from famtime.core.config import Settings, settings

logger = logging.getLogger(__name__)


def _is_http_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def validate_llm_provider_config(config: Settings | None = None) -> tuple[bool, list[str]]:
    config = config or settings
    warnings: list[str] = []
    proxy_url = (config.openai_proxy_url or "").strip()
    api_key = (config.openai_api_key or "").strip()

    if proxy_url and not _is_http_url(proxy_url):
        warnings.append(f"OPENAI_PROXY_URL '{proxy_url}' is not an http(s) URL. Proxy refinement disabled.")
        proxy_url = ""
    if api_key and not (config.openai_model or "").strip():
        warnings.append("OPENAI_API_KEY configured but OPENAI_MODEL is empty. Direct refinement disabled.")
        api_key = ""
    if not proxy_url and not api_key:
        warnings.append("Neither OPENAI_PROXY_URL nor OPENAI_API_KEY is configured. Suggestions stay local.")
        return False, warnings

    return True, warnings


def validate_llm_provider_config_on_boot() -> None:
    valid, warnings = validate_llm_provider_config()
    for item in warnings:
        logger.warning(item)
    if valid:
        logger.info("Refinement transport config validated successfully.")
    else:
        logger.warning("Remote refinement disabled due to config issues. App will continue with local suggestions.")


def validate_runtime_settings_on_boot(config: Settings | None = None) -> None:
    config = config or settings
    try:
        ZoneInfo(config.time_zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(f"FAMTIME_TIME_ZONE '{config.time_zone}' is not a known time zone.") from exc

    env = (config.app_env or "development").strip().lower()
    origins = [item.strip() for item in (config.cors_allowed_origins or "").split(",") if item.strip()]
    if env == "production":
        if not origins:
            raise RuntimeError("FAMTIME_CORS_ALLOWED_ORIGINS must be set in production.")
        if "*" in origins:
            raise RuntimeError("Wildcard CORS origin is not allowed in production.")
