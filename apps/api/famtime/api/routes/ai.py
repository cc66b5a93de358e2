from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from famtime.api.deps import CurrentUserId, OpenAITransportDep
from famtime.schemas.suggestions import RefineRequest, RefineResponse
from famtime.services.providers.errors import RefinementTransportError
from famtime.services.suggestions.refinement import build_refine_request, extract_suggestion_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

ERROR_DETAIL_LIMIT = 200


def _proxy_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={
            "code": "LLM_PROXY_ERROR",
            "message": "OpenAI proxy error",
            "details": {"detail": detail[:ERROR_DETAIL_LIMIT] or "Unknown error"},
        },
    )


@router.post("/suggestion", response_model=RefineResponse)
async def refine_suggestion(
    payload: RefineRequest,
    user_id: CurrentUserId,
    transport: OpenAITransportDep,
) -> RefineResponse:
    request_body = build_refine_request(
        payload.profile,
        payload.fallback_suggestion,
        payload.mood,
        model=transport.model,
    )
    try:
        data = await transport.complete(request_body)
    except RefinementTransportError as exc:
        logger.warning("ai.suggestion.failed", extra={"user_id": user_id, "status_code": exc.status_code})
        raise _proxy_error(exc.detail or str(exc)) from exc

    suggestion = extract_suggestion_text(data)
    if not suggestion:
        logger.warning("ai.suggestion.empty", extra={"user_id": user_id})
        raise _proxy_error("Empty response from OpenAI")
    return RefineResponse(suggestion=suggestion)
