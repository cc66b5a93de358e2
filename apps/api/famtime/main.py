from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from famtime.api.routes.ai import router as ai_router
from famtime.api.routes.family import router as family_router
from famtime.api.routes.suggestions import router as suggestions_router
from famtime.core.config import settings
from famtime.core.exceptions import install_error_handlers
from famtime.core.logging import setup_json_logging
from famtime.core.request_logging import RequestLoggingMiddleware
from famtime.services.llm_provider import describe_refinement_mode, get_refinement_transport
from famtime.services.providers.config_validation import (
    validate_llm_provider_config_on_boot,
    validate_runtime_settings_on_boot,
)

setup_json_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    validate_llm_provider_config_on_boot()
    validate_runtime_settings_on_boot()
    yield


app = FastAPI(title="famtime api", lifespan=lifespan)
install_error_handlers(app)
allowed_origins = [item.strip() for item in settings.cors_allowed_origins.split(",") if item.strip()]
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
)
app.include_router(suggestions_router)
app.include_router(ai_router)
app.include_router(family_router)


@app.get("/health")
def health() -> dict[str, str]:
    transport = get_refinement_transport()
    return {
        "status": "ok",
        "env": settings.app_env,
        "commit": settings.git_sha or "unknown",
        "refinement": transport.kind,
        "refinement_caption": describe_refinement_mode(transport.kind),
    }
