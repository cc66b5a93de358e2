from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from famtime.services.suggestions.catalog import Activity
from famtime.services.suggestions.moods import resolve_mood
from famtime.services.suggestions.profile import build_seed, normalize_profile, sanitize_string, title_case
from famtime.services.suggestions.selector import (
    pick_activity,
    pick_day,
    pick_day_prefix,
    pick_lead,
    pick_nuance,
    resolve_weekend,
)

FALLBACK_LEAD = "Maybe"

_PARENTHESES = re.compile(r"[()]")
_DASHES = re.compile(r"[–—]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ComposedSuggestion:
    text: str
    seed: str
    mood_key: str
    day: str | None
    is_weekend: bool
    activity: Activity
    tier: str
    lead: str
    nuance: str | None


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def clean_detail(detail: object) -> str:
    text = _PARENTHESES.sub("", sanitize_string(detail))
    text = _DASHES.sub(" to ", text)
    return collapse_whitespace(text)


def compose_suggestion(
    user: Any = None,
    mood_key: object = None,
    *,
    variant_seed: str | None = None,
    target_date: date | None = None,
) -> ComposedSuggestion:
    profile = normalize_profile(user)
    mood = resolve_mood(mood_key)
    seed = build_seed(profile, mood.key, variant_seed)

    selected_day = pick_day(seed, profile.preferred_days)
    is_weekend = resolve_weekend(selected_day, profile.preferred_days, target_date)
    pick = pick_activity(seed, is_weekend=is_weekend, age=profile.age, mood=mood)

    city = title_case(profile.city)
    city_segment = f" in {city}" if city else ""
    lead = pick_lead(seed, mood) or FALLBACK_LEAD
    nuance = pick_nuance(seed, mood)
    detail = clean_detail(pick.activity.detail) or nuance or ""
    detail_segment = f" ({detail})" if detail else ""

    activity_phrase = f"{lead} {pick.activity.label}{city_segment}".strip()
    day_prefix = pick_day_prefix(seed, selected_day)
    text = collapse_whitespace(f"{day_prefix}{activity_phrase}{detail_segment}")

    return ComposedSuggestion(
        text=text,
        seed=seed,
        mood_key=mood.key,
        day=selected_day,
        is_weekend=is_weekend,
        activity=pick.activity,
        tier=pick.tier,
        lead=lead,
        nuance=nuance,
    )


def generate_profile_suggestion(
    user: Any = None,
    mood_key: object = None,
    *,
    variant_seed: str | None = None,
    target_date: date | None = None,
) -> str:
    return compose_suggestion(
        user,
        mood_key,
        variant_seed=variant_seed,
        target_date=target_date,
    ).text
