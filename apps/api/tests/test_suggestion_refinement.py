from __future__ import annotations

from famtime.services.suggestions.catalog import WEEKDAY_ACTIVITIES, WEEKEND_ACTIVITIES
from famtime.services.suggestions.examples import describe_activity_for_prompt, pick_mood_examples
from famtime.services.suggestions.hashing import simple_hash
from famtime.services.suggestions.profile import normalize_profile, profile_seed_hash
from famtime.services.suggestions.refinement import (
    DIRECT_TEMPERATURE,
    REFINE_TEMPERATURE,
    build_direct_request,
    build_proxy_request,
    build_refine_request,
    extract_suggestion_text,
    resolve_suggestion,
    uses_fixed_temperature,
)

ANNA = {"name": "Anna", "age": 34, "city": "odense", "gender": "female", "preferredDays": ["saturday"]}


def test_mood_examples_are_stable_and_unique() -> None:
    first = pick_mood_examples("relaxed", is_weekend=True, count=3, seed="abc")
    second = pick_mood_examples("relaxed", is_weekend=True, count=3, seed="abc")
    assert first == second
    assert len(first) == 3
    assert len({item.key for item in first}) == 3
    assert all(item in WEEKEND_ACTIVITIES for item in first)


def test_mood_examples_come_from_mood_or_tone_matches() -> None:
    examples = pick_mood_examples("creative", count=20, seed="x")
    for item in examples:
        assert "creative" in item.moods or item.tone in {"neutral", "adult"}
    assert all(item in WEEKDAY_ACTIVITIES for item in examples)


def test_unknown_mood_examples_use_default_mood() -> None:
    assert pick_mood_examples("nope", seed="s") == pick_mood_examples("balanced", seed="s")


def test_describe_activity_for_prompt_lists_tone_moods_and_note() -> None:
    board_games = next(item for item in WEEKDAY_ACTIVITIES if item.key == "board_game_night")
    assert describe_activity_for_prompt(board_games) == (
        "A board game night. Tone: neutral; moods: balanced, relaxed, creative; note: 45 to 60 min"
    )
    walk = next(item for item in WEEKDAY_ACTIVITIES if item.key == "evening_walk")
    assert describe_activity_for_prompt(walk) == (
        "An evening walk around the neighbourhood. Tone: neutral; moods: relaxed, balanced"
    )


def test_mood_examples_are_ordered_by_hash_alone() -> None:
    examples = pick_mood_examples("creative", count=20, seed="x")
    ranks = [simple_hash(f"x|creative|{item.key}") for item in examples]
    assert ranks == sorted(ranks)


def test_fixed_temperature_models() -> None:
    assert uses_fixed_temperature("gpt-5-mini") is True
    assert uses_fixed_temperature("GPT-5") is True
    assert uses_fixed_temperature("gpt-4o-mini") is False
    assert uses_fixed_temperature(None) is False


def test_direct_request_hides_identity_and_lists_inspiration() -> None:
    examples = pick_mood_examples("relaxed", is_weekend=True, seed="abc")
    payload = build_direct_request(ANNA, "relaxed", model="gpt-4o-mini", examples=examples)

    assert payload["model"] == "gpt-4o-mini"
    assert payload["temperature"] == DIRECT_TEMPERATURE
    system, user = payload["messages"]
    assert system["role"] == "system"
    assert "18 words" in system["content"]
    assert user["role"] == "user"
    assert "Anna" not in user["content"]
    assert "34" not in user["content"]
    assert "Age group: over 30" in user["content"]
    assert "City: Odense" in user["content"]
    assert "Planned day: Saturday" in user["content"]
    assert "Mood: Relaxed" in user["content"]
    assert f"1) {describe_activity_for_prompt(examples[0])}" in user["content"]
    assert "Do not copy catalog labels" in user["content"]


def test_direct_request_omits_temperature_for_fixed_models() -> None:
    payload = build_direct_request({}, None, model="gpt-5-mini", examples=[])
    assert "temperature" not in payload
    assert "No catalog examples available." in payload["messages"][1]["content"]
    assert "Planned day: not set" in payload["messages"][1]["content"]


def test_proxy_request_shape() -> None:
    payload = build_proxy_request(ANNA, "RELAXED", "Saturday: Enjoy a long family brunch in Odense")
    assert payload == {
        "profile": {
            "name": "Anna",
            "gender": "female",
            "city": "odense",
            "preferredDays": ["saturday"],
            "age": 34,
            "seedHash": profile_seed_hash(normalize_profile(ANNA)),
        },
        "fallbackSuggestion": "Saturday: Enjoy a long family brunch in Odense",
        "mood": "relaxed",
    }


def test_refine_request_keeps_base_suggestion_and_descriptor() -> None:
    payload = build_refine_request(ANNA, "Saturday: Enjoy a long family brunch", "adventurous", model="gpt-4o-mini")
    assert payload["temperature"] == REFINE_TEMPERATURE
    user = payload["messages"][1]["content"]
    assert 'Base suggestion: "Saturday: Enjoy a long family brunch"' in user
    assert "would like to try something new" in user
    assert "Preferred days: Saturday" in user
    assert "Anna" not in user


def test_extract_suggestion_text_supports_known_shapes() -> None:
    assert extract_suggestion_text({"choices": [{"message": {"content": "  Hi there "}}]}) == "Hi there"
    assert extract_suggestion_text({"choices": [{"message": {"content": " "}, "text": "Legacy"}]}) == "Legacy"
    assert extract_suggestion_text({"suggestion": " From proxy "}) == "From proxy"
    assert extract_suggestion_text({"choices": []}) is None
    assert extract_suggestion_text({}) is None
    assert extract_suggestion_text(None) is None
    assert extract_suggestion_text("text") is None


def test_resolve_suggestion_prefers_non_empty_remote_text() -> None:
    assert resolve_suggestion("  Remote  ", "Fallback") == "Remote"
    assert resolve_suggestion("   ", "Fallback") == "Fallback"
    assert resolve_suggestion(None, "Fallback") == "Fallback"
