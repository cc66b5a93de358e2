"""Payloads and response handling for the optional remote rewrite of a suggestion.

The deterministic suggestion is always computed first and is the fallback for
every remote failure. Nothing in this module performs I/O; transports live in
``famtime.services.providers``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from famtime.services.suggestions.catalog import Activity
from famtime.services.suggestions.examples import describe_activity_for_prompt
from famtime.services.suggestions.moods import resolve_mood
from famtime.services.suggestions.profile import (
    SuggestionProfile,
    age_bracket,
    normalize_profile,
    profile_seed_hash,
    sanitize_string,
    title_case,
)
from famtime.services.weekdays import day_key_for_date, day_label

DIRECT_TEMPERATURE = 0.2
REFINE_TEMPERATURE = 0.0
FIXED_TEMPERATURE_MARKER = "gpt-5"

ADVISORY_SIGN_IN = "Sign in to fetch AI suggestions. Showing local suggestion."
ADVISORY_PROXY_FAILED = "Could not fetch AI suggestion from the cloud. Showing local suggestion instead."
ADVISORY_DIRECT_FAILED = "Could not fetch AI suggestion right now. Showing local suggestion instead."
ADVISORY_NOT_CONFIGURED = (
    "Set up OPENAI_PROXY_URL or a backend proxy for real AI suggestions. Showing local suggestion."
)

SUGGESTION_FORMAT = 'Format: "[Day: ]<short lead> <activity> [in <city>] (<short nuance>)".'

DIRECT_SYSTEM_PROMPT = " ".join(
    [
        "You are the FamTime assistant and write in English on one short line.",
        "Create a new suggestion inspired by the catalog examples, but do not repeat their names verbatim.",
        "Max 18 words, no emoji, slogans or dashes.",
        SUGGESTION_FORMAT,
    ]
)

REFINE_SYSTEM_PROMPT = " ".join(
    [
        "You are the FamTime assistant and write in English on one short line.",
        "Max 18 words, no emoji, slogans or dashes.",
        "Use the base suggestion for facts and deliver exactly one suggestion where day, activity and city are kept"
        " and the tone matches the mood.",
        SUGGESTION_FORMAT,
    ]
)


def uses_fixed_temperature(model: str | None) -> bool:
    return FIXED_TEMPERATURE_MARKER in (model or "").lower()


def _chat_payload(*, model: str, system: str, user: str, temperature: float) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
    }
    if not uses_fixed_temperature(model):
        payload["temperature"] = temperature
    return payload


def planned_day_label(profile: SuggestionProfile, target_date: date | None = None) -> str:
    if target_date is not None:
        return day_label(day_key_for_date(target_date))
    if profile.preferred_days:
        return day_label(profile.preferred_days[0])
    return ""


def _profile_lines(profile: SuggestionProfile) -> list[str]:
    return [
        "User data (for tone only, never mention it directly):",
        f"Age group: {age_bracket(profile.age)}",
        f"Gender: {profile.gender or 'unknown'}",
        f"City: {title_case(profile.city) or 'unknown'}",
    ]


def build_direct_request(
    user: Any,
    mood_key: object,
    *,
    model: str,
    examples: Sequence[Activity],
    target_date: date | None = None,
) -> dict[str, Any]:
    profile = normalize_profile(user)
    mood = resolve_mood(mood_key)
    inspiration = (
        "\n".join(f"{index}) {describe_activity_for_prompt(item)}" for index, item in enumerate(examples, start=1))
        or "No catalog examples available."
    )
    user_prompt = "\n".join(
        [
            *_profile_lines(profile),
            f"Mood: {mood.label}: {mood.description}",
            f"Planned day: {planned_day_label(profile, target_date) or 'not set'}",
            "",
            "Inspiration from the catalog:",
            inspiration,
            "",
            "Instructions:",
            f"1) Come up with one new activity that matches the mood. Use {mood.prompt}.",
            "2) Reply with one short line (sentence or fragment), max 18 words.",
            "3) Use the planned day and city if they exist, otherwise leave them out.",
            "4) Do not copy catalog labels word for word.",
            '5) Do not mention name, age or gender, and never write "Welcome to FamTime".',
        ]
    )
    return _chat_payload(model=model, system=DIRECT_SYSTEM_PROMPT, user=user_prompt, temperature=DIRECT_TEMPERATURE)


def build_proxy_request(user: Any, mood_key: object, fallback_suggestion: str) -> dict[str, Any]:
    profile = normalize_profile(user)
    return {
        "profile": {
            "name": profile.name,
            "gender": profile.gender,
            "city": profile.city,
            "preferredDays": list(profile.preferred_days),
            "age": profile.age,
            "seedHash": profile_seed_hash(profile),
        },
        "fallbackSuggestion": fallback_suggestion,
        "mood": resolve_mood(mood_key).key,
    }


def build_refine_request(
    user: Any,
    fallback_suggestion: str,
    mood_key: object,
    *,
    model: str,
) -> dict[str, Any]:
    """Prompt the proxy endpoint sends upstream to polish a base suggestion."""
    profile = normalize_profile(user)
    mood = resolve_mood(mood_key)
    days = ", ".join(day_label(day) for day in profile.preferred_days) or "none registered"
    user_prompt = "\n".join(
        [
            *_profile_lines(profile),
            f"Mood: {mood.descriptor}",
            f"Preferred days: {days}",
            "",
            f'Base suggestion: "{fallback_suggestion}"',
            "",
            "Instructions:",
            "1) Keep the day, the activity and any location from the base suggestion.",
            "2) Reply with one short line (sentence or fragment), max 18 words.",
            f"3) Tone note: {mood.descriptor}. Do not mention name, age or gender,"
            ' and never write "Welcome to FamTime".',
        ]
    )
    return _chat_payload(model=model, system=REFINE_SYSTEM_PROMPT, user=user_prompt, temperature=REFINE_TEMPERATURE)


def extract_suggestion_text(data: object) -> str | None:
    if not isinstance(data, Mapping):
        return None
    choices = data.get("choices")
    if isinstance(choices, Sequence) and not isinstance(choices, str) and choices:
        first = choices[0]
        if isinstance(first, Mapping):
            message = first.get("message")
            if isinstance(message, Mapping):
                content = sanitize_string(message.get("content"))
                if content:
                    return content
            text = sanitize_string(first.get("text"))
            if text:
                return text
    suggestion = sanitize_string(data.get("suggestion"))
    return suggestion or None


def resolve_suggestion(remote_text: object, fallback: str) -> str:
    cleaned = sanitize_string(remote_text)
    return cleaned or fallback
