from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from famtime.services.suggestions.catalog import Activity, catalog_for, dedupe_by_key
from famtime.services.suggestions.hashing import pick_deterministic
from famtime.services.suggestions.moods import MoodOption, is_default_mood
from famtime.services.suggestions.profile import tone_for_age
from famtime.services.weekdays import (
    day_key_for_date,
    day_label,
    in_canonical_order,
    is_weekend_day,
    normalize_day_list,
)

DAY_PREFIX_WITH_DAY: tuple[str, ...] = ("{label}: ", "{label} plan: ", "{label}, idea: ")
DAY_PREFIX_WITHOUT_DAY: tuple[str, ...] = ("", "Soon: ", "When time allows: ")


@dataclass(frozen=True, slots=True)
class PoolContext:
    catalog: tuple[Activity, ...]
    mood: MoodOption
    preferred_tones: tuple[str, ...]

    def in_mood_pool(self, activity: Activity) -> bool:
        return is_default_mood(self.mood) or self.mood.key in activity.moods


@dataclass(frozen=True, slots=True)
class ActivityPick:
    activity: Activity
    tier: str


PoolBuilder = Callable[[PoolContext], list[Activity]]


def tone_and_mood_pool(ctx: PoolContext) -> list[Activity]:
    return [item for item in ctx.catalog if item.tone in ctx.preferred_tones and ctx.in_mood_pool(item)]


def tone_pool(ctx: PoolContext) -> list[Activity]:
    return [item for item in ctx.catalog if item.tone in ctx.preferred_tones]


def mood_pool(ctx: PoolContext) -> list[Activity]:
    return [item for item in ctx.catalog if ctx.in_mood_pool(item)]


def full_catalog_pool(ctx: PoolContext) -> list[Activity]:
    return list(ctx.catalog)


# Order matters: reordering changes which activities a profile can reach.
ACTIVITY_POOL_TIERS: tuple[tuple[str, PoolBuilder], ...] = (
    ("tone_mood", tone_and_mood_pool),
    ("tone", tone_pool),
    ("mood", mood_pool),
    ("all", full_catalog_pool),
)


def preferred_tones(age: int | None, mood: MoodOption) -> tuple[str, ...]:
    age_tone = tone_for_age(age)
    if age_tone is not None:
        return (age_tone,)
    return tuple(mood.tones)


def build_candidate_pool(ctx: PoolContext) -> tuple[str, list[Activity]]:
    for tier, builder in ACTIVITY_POOL_TIERS:
        pool = dedupe_by_key(builder(ctx))
        if pool:
            return tier, pool
    raise RuntimeError("Activity catalog is empty")


def pick_day(seed: str, days: Iterable[str]) -> str | None:
    ordered = in_canonical_order(normalize_day_list(list(days)))
    return pick_deterministic(seed, "day", ordered)


def resolve_weekend(
    selected_day: str | None,
    preferred_days: Iterable[str],
    target_date: date | None = None,
) -> bool:
    if target_date is not None:
        return is_weekend_day(day_key_for_date(target_date))
    if selected_day is not None:
        return is_weekend_day(selected_day)
    return any(is_weekend_day(day) for day in normalize_day_list(list(preferred_days)))


def pick_activity(seed: str, *, is_weekend: bool, age: int | None, mood: MoodOption) -> ActivityPick:
    ctx = PoolContext(
        catalog=catalog_for(is_weekend),
        mood=mood,
        preferred_tones=preferred_tones(age, mood),
    )
    tier, pool = build_candidate_pool(ctx)
    activity = pick_deterministic(seed, f"activity|{tier}", pool)
    if activity is None:
        raise RuntimeError("Activity pool resolved empty")
    return ActivityPick(activity=activity, tier=tier)


def pick_lead(seed: str, mood: MoodOption) -> str | None:
    return pick_deterministic(seed, "lead", mood.leads)


def pick_nuance(seed: str, mood: MoodOption) -> str | None:
    return pick_deterministic(seed, "nuance", mood.nuance_pool)


def pick_day_prefix(seed: str, selected_day: str | None) -> str:
    pool = DAY_PREFIX_WITH_DAY if selected_day else DAY_PREFIX_WITHOUT_DAY
    template = pick_deterministic(seed, "dayPrefix", pool) or ""
    resolved = template.format(label=day_label(selected_day)) if selected_day else template
    if resolved and not resolved.endswith(" "):
        return f"{resolved} "
    return resolved
