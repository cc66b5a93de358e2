from __future__ import annotations

from fastapi import APIRouter

from famtime.schemas.suggestions import (
    CatalogItemOut,
    ExampleOut,
    ExamplesRequest,
    MoodOut,
    SuggestionOut,
    SuggestionRequest,
)
from famtime.services.suggestions.catalog import catalog_listing
from famtime.services.suggestions.composer import compose_suggestion
from famtime.services.suggestions.examples import describe_activity_for_prompt, pick_mood_examples
from famtime.services.suggestions.moods import MOOD_OPTIONS

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.get("/moods", response_model=list[MoodOut])
def list_moods() -> list[MoodOut]:
    return [
        MoodOut(key=option.key, label=option.label, description=option.description, helper=option.helper)
        for option in MOOD_OPTIONS
    ]


@router.get("/catalog", response_model=list[CatalogItemOut])
def list_catalog(weekend: bool = False) -> list[CatalogItemOut]:
    return [CatalogItemOut(**item) for item in catalog_listing("weekend" if weekend else "weekday")]


@router.post("", response_model=SuggestionOut)
def create_suggestion(payload: SuggestionRequest) -> SuggestionOut:
    composed = compose_suggestion(
        payload.profile,
        payload.mood,
        variant_seed=payload.variant_seed,
        target_date=payload.target_date,
    )
    return SuggestionOut(
        suggestion=composed.text,
        mood=composed.mood_key,
        day=composed.day,
        is_weekend=composed.is_weekend,
        activity_key=composed.activity.key,
        tier=composed.tier,
        seed=composed.seed,
    )


@router.post("/examples", response_model=list[ExampleOut])
def list_examples(payload: ExamplesRequest) -> list[ExampleOut]:
    examples = pick_mood_examples(payload.mood, is_weekend=payload.is_weekend, count=payload.count, seed=payload.seed)
    return [
        ExampleOut(
            key=item.key,
            label=item.label,
            detail=item.detail,
            tone=item.tone,
            moods=list(item.moods),
            prompt_line=describe_activity_for_prompt(item),
        )
        for item in examples
    ]
