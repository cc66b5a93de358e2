from __future__ import annotations

from datetime import date

from famtime.services.suggestions.catalog import WEEKDAY_ACTIVITIES, WEEKEND_ACTIVITIES, Activity
from famtime.services.suggestions.composer import clean_detail, compose_suggestion, generate_profile_suggestion
from famtime.services.suggestions.moods import MOOD_KEYS, resolve_mood
from famtime.services.suggestions.selector import (
    ACTIVITY_POOL_TIERS,
    DAY_PREFIX_WITHOUT_DAY,
    PoolContext,
    build_candidate_pool,
    pick_day,
    preferred_tones,
    resolve_weekend,
)

ANNA = {"name": "Anna", "age": 28, "city": "Odense", "preferredDays": ["saturday"]}


def _activity(key: str, tone: str, moods: tuple[str, ...]) -> Activity:
    return Activity(key, f"a {key}", tone, moods)  # type: ignore[arg-type]


def test_pool_tiers_are_ordered_tone_mood_first() -> None:
    assert [name for name, _ in ACTIVITY_POOL_TIERS] == ["tone_mood", "tone", "mood", "all"]


def test_candidate_pool_falls_through_tiers() -> None:
    relaxed = resolve_mood("relaxed")
    catalog = (
        _activity("hike", "youth", ("energetic",)),
        _activity("spa", "adult", ("relaxed",)),
    )
    assert build_candidate_pool(PoolContext(catalog, relaxed, ("adult",)))[0] == "tone_mood"
    assert build_candidate_pool(PoolContext(catalog, relaxed, ("youth",))) == ("tone", [catalog[0]])
    assert build_candidate_pool(PoolContext(catalog, relaxed, ("neutral",))) == ("mood", [catalog[1]])
    energetic_only = (catalog[0],)
    assert build_candidate_pool(PoolContext(energetic_only, relaxed, ("neutral",))) == ("all", [catalog[0]])


def test_balanced_mood_pool_is_whole_catalog() -> None:
    balanced = resolve_mood("balanced")
    catalog = (_activity("hike", "youth", ("energetic",)),)
    assert build_candidate_pool(PoolContext(catalog, balanced, ()))[0] == "mood"


def test_preferred_tones_prefer_age_then_mood() -> None:
    relaxed = resolve_mood("relaxed")
    assert preferred_tones(12, relaxed) == ("youth",)
    assert preferred_tones(40, relaxed) == ("adult",)
    assert preferred_tones(28, relaxed) == ("neutral", "adult")
    assert preferred_tones(None, resolve_mood("balanced")) == ()


def test_pick_day_only_returns_preferred_days() -> None:
    assert pick_day("seed", []) is None
    assert pick_day("seed", ["saturday"]) == "saturday"
    assert pick_day("seed", ["monday", "friday"]) in {"monday", "friday"}


def test_resolve_weekend_prefers_target_date_then_selected_day() -> None:
    assert resolve_weekend("monday", ["monday"], date(2026, 10, 17)) is True
    assert resolve_weekend("saturday", ["saturday"], date(2026, 10, 19)) is False
    assert resolve_weekend("friday", ["friday"]) is True
    assert resolve_weekend(None, []) is False


def test_clean_detail_strips_parentheses_and_dashes() -> None:
    assert clean_detail("(45–60 min)") == "45 to 60 min"
    assert clean_detail("( 2—3   hours )") == "2 to 3 hours"
    assert clean_detail(None) == ""


def test_composer_is_deterministic() -> None:
    assert generate_profile_suggestion(ANNA, "relaxed") == generate_profile_suggestion(ANNA, "relaxed")


def test_composer_never_returns_empty_text() -> None:
    for mood in (*MOOD_KEYS, None, "unknown"):
        for profile in ({}, None, ANNA, {"age": 12, "preferredDays": ["monday", "tuesday"]}):
            text = generate_profile_suggestion(profile, mood)
            assert text
            assert text == text.strip()
            assert "  " not in text


def test_selected_day_is_always_a_preferred_day() -> None:
    profile = {"preferredDays": ["tuesday", "sun"]}
    for mood in MOOD_KEYS:
        for variant in ("a", "b", "c", "d"):
            assert compose_suggestion(profile, mood, variant_seed=variant).day in {"tuesday", "sunday"}


def test_weekend_flag_matches_catalog_used() -> None:
    for days in (["saturday"], ["monday"], ["thursday", "friday"], []):
        for mood in MOOD_KEYS:
            composed = compose_suggestion({"age": 35, "preferredDays": days}, mood)
            catalog = WEEKEND_ACTIVITIES if composed.is_weekend else WEEKDAY_ACTIVITIES
            assert composed.activity in catalog
            if composed.day is not None:
                assert composed.is_weekend is (composed.day in {"friday", "saturday", "sunday"})


def test_invalid_days_behave_like_no_days() -> None:
    broken = {"name": "Ole", "preferredDays": ["not-a-day", "invalid"]}
    empty = {"name": "Ole", "preferredDays": []}
    for mood in MOOD_KEYS:
        assert generate_profile_suggestion(broken, mood) == generate_profile_suggestion(empty, mood)


def test_text_without_day_uses_dayless_prefix() -> None:
    composed = compose_suggestion({"city": "aarhus"}, "creative")
    assert composed.day is None
    prefixes = [prefix for prefix in DAY_PREFIX_WITHOUT_DAY if prefix]
    assert any(composed.text.startswith(prefix) for prefix in prefixes) or composed.text.startswith(composed.lead)


def test_anna_in_odense_on_a_relaxed_saturday() -> None:
    composed = compose_suggestion(ANNA, "relaxed")
    relaxed_keys = {
        item.key
        for item in WEEKEND_ACTIVITIES
        if "relaxed" in item.moods and item.tone in {"neutral", "adult"}
    }

    assert composed.day == "saturday"
    assert composed.is_weekend is True
    assert composed.tier == "tone_mood"
    assert composed.activity.key in relaxed_keys
    assert composed.text.startswith("Saturday")
    assert "in Odense" in composed.text
    assert "Anna" not in composed.text
    assert "28" not in composed.text
    assert composed.lead in resolve_mood("relaxed").leads
    assert composed.text.endswith(")")


def test_identical_variant_seed_is_idempotent_and_changes_seed() -> None:
    first = compose_suggestion(ANNA, "relaxed", variant_seed="2026-10-18T10:00")
    second = compose_suggestion(ANNA, "relaxed", variant_seed="2026-10-18T10:00")
    assert first == second
    assert first.seed.endswith("|variant:2026-10-18T10:00")


def test_target_date_only_changes_weekend_flag() -> None:
    profile = {"age": 40, "preferredDays": ["monday"]}
    plain = compose_suggestion(profile, "balanced")
    dated = compose_suggestion(profile, "balanced", target_date=date(2026, 10, 17))
    assert plain.is_weekend is False
    assert dated.is_weekend is True
    assert dated.day == plain.day == "monday"
    assert dated.seed == plain.seed
    assert dated.activity in WEEKEND_ACTIVITIES


def test_youth_profile_gets_youth_activity_when_available() -> None:
    composed = compose_suggestion({"age": 10, "city": "aarhus", "preferredDays": ["monday"]}, "energetic")
    assert composed.tier == "tone_mood"
    assert composed.activity.key in {"bouldering", "dance_party"}
    assert "in Aarhus" in composed.text
    assert composed.text.startswith("Monday")
