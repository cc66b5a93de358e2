from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    age: int | float | str | None = None
    city: str | None = None
    location: str | None = None
    gender: str | None = None
    preferred_days: list[Any] = Field(default_factory=list, alias="preferredDays")
    seed_hash: int | float | None = Field(default=None, alias="seedHash")


class MoodOut(BaseModel):
    key: str
    label: str
    description: str
    helper: str


class CatalogItemOut(BaseModel):
    id: str
    title: str
    description: str
    tone: str
    moods: list[str]
    source: str
    is_weekend_preferred: bool


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile: ProfileIn = Field(default_factory=ProfileIn)
    mood: str | None = None
    variant_seed: str | None = Field(default=None, alias="variantSeed")
    target_date: date | None = Field(default=None, alias="targetDate")


class SuggestionOut(BaseModel):
    suggestion: str
    mood: str
    day: str | None
    is_weekend: bool
    activity_key: str
    tier: str
    seed: str


class ExamplesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mood: str | None = None
    is_weekend: bool = Field(default=False, alias="isWeekend")
    count: int = Field(default=3, ge=0, le=20)
    seed: str = ""


class ExampleOut(BaseModel):
    key: str
    label: str
    detail: str | None
    tone: str
    moods: list[str]
    prompt_line: str


class RefineRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile: ProfileIn = Field(default_factory=ProfileIn)
    fallback_suggestion: str = Field(alias="fallbackSuggestion")
    mood: str | None = None


class RefineResponse(BaseModel):
    suggestion: str
