from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from famtime.core.config import settings
from famtime.core.security import InvalidIdToken, verify_id_token
from famtime.services.providers.openai_provider import OpenAITransport

auth_scheme = HTTPBearer(auto_error=False)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(auth_scheme)],
) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing ID token",
            headers=_BEARER_CHALLENGE,
        )
    try:
        user_id = verify_id_token(credentials.credentials)
    except InvalidIdToken as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid ID token",
            headers=_BEARER_CHALLENGE,
        ) from exc

    request.state.user_id = user_id
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_openai_transport() -> OpenAITransport:
    # The proxy endpoint always talks to OpenAI directly; it never chains to another proxy.
    api_key = (settings.openai_api_key or "").strip()
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "LLM_NOT_CONFIGURED", "message": "OpenAI key not configured"},
        )
    return OpenAITransport(
        api_key=api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        timeout=settings.refinement_timeout_seconds,
    )


OpenAITransportDep = Annotated[OpenAITransport, Depends(get_openai_transport)]
