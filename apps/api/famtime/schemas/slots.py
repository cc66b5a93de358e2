from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BusyInterval(BaseModel):
    start: datetime
    end: datetime


class EventIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: datetime
    end: datetime
    pending_change: BusyInterval | None = Field(default=None, alias="pendingChange")


class CalendarEntryIn(BaseModel):
    busy: list[BusyInterval] = Field(default_factory=list)


class MemberPreferencesIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mode: str | None = None
    follow_user_id: str | None = Field(default=None, alias="followUserId")
    days: list[str] = Field(default_factory=list)
    min_duration_minutes: float | None = Field(default=None, alias="minDurationMinutes")
    max_duration_minutes: float | None = Field(default=None, alias="maxDurationMinutes")
    buffer_before_minutes: float | None = Field(default=None, alias="bufferBeforeMinutes")
    buffer_after_minutes: float | None = Field(default=None, alias="bufferAfterMinutes")
    time_windows: dict[str, list[str | dict[str, Any]]] | None = Field(default=None, alias="timeWindows")


class FamilySlotsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    confirmed_events: list[EventIn] = Field(default_factory=list, alias="confirmedEvents")
    pending_events: list[EventIn] = Field(default_factory=list, alias="pendingEvents")
    calendar_entries: list[CalendarEntryIn] = Field(default_factory=list, alias="calendarEntries")
    family_preferences: dict[str, MemberPreferencesIn] = Field(default_factory=dict, alias="familyPreferences")
    now: datetime | None = None
    limit: int = Field(default=6, ge=1, le=50)
    lookahead_days: int = Field(default=21, ge=1, le=90, alias="lookaheadDays")


class FamilySlotOut(BaseModel):
    id: str
    start: datetime
    end: datetime
    day_key: str
    duration_minutes: float


class FamilySlotsResponse(BaseModel):
    suggestions: list[FamilySlotOut]
    reason: str
