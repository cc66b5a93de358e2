from __future__ import annotations

from fastapi import APIRouter

from famtime.schemas.slots import FamilySlotOut, FamilySlotsRequest, FamilySlotsResponse
from famtime.services.family_slots import build_family_suggestions

router = APIRouter(prefix="/family", tags=["family"])


@router.post("/slots", response_model=FamilySlotsResponse)
def suggest_family_slots(payload: FamilySlotsRequest) -> FamilySlotsResponse:
    result = build_family_suggestions(
        confirmed_events=payload.confirmed_events,
        pending_events=payload.pending_events,
        calendar_entries=payload.calendar_entries,
        family_preferences=payload.family_preferences,
        now=payload.now,
        limit=payload.limit,
        lookahead_days=payload.lookahead_days,
    )
    return FamilySlotsResponse(
        suggestions=[
            FamilySlotOut(
                id=slot.id,
                start=slot.start,
                end=slot.end,
                day_key=slot.day_key,
                duration_minutes=slot.duration_minutes,
            )
            for slot in result.suggestions
        ],
        reason=result.reason,
    )
