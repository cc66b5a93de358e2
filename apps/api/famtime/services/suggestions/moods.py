from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from famtime.services.suggestions.catalog import Tone


@dataclass(frozen=True, slots=True)
class MoodOption:
    key: str
    label: str
    description: str
    helper: str
    tones: tuple[Tone, ...]
    leads: tuple[str, ...]
    nuance_pool: tuple[str, ...]
    prompt: str
    descriptor: str


MOOD_OPTIONS: tuple[MoodOption, ...] = (
    MoodOption(
        key="balanced",
        label="Balanced",
        description="A bit of everything, open to most ideas.",
        helper="Balanced mood keeps the next suggestion broad.",
        tones=(),
        leads=("How about", "Maybe", "Plan for"),
        nuance_pool=(
            "easy to adjust along the way",
            "something for everyone",
            "room for both fun and calm",
        ),
        prompt="a friendly, even tone",
        descriptor="the family is in a balanced mood and open to several kinds of activities",
    ),
    MoodOption(
        key="relaxed",
        label="Relaxed",
        description="Low pace, cosy and calm.",
        helper="Relaxed mood favours calm, cosy activities.",
        tones=("neutral", "adult"),
        leads=("Unwind with", "Take it slow with", "Enjoy"),
        nuance_pool=(
            "low pace and cosy vibes",
            "no rush, just time together",
            "calm and comfortable",
        ),
        prompt="a calm, cosy tone",
        descriptor="the family is in a relaxed mood and wants a low pace and cosiness",
    ),
    MoodOption(
        key="energetic",
        label="Energetic",
        description="Active plans with plenty of movement.",
        helper="Energetic mood favours active plans.",
        tones=("youth", "neutral"),
        leads=("Get moving with", "Burn off energy with", "Go all in on"),
        nuance_pool=(
            "high tempo and lots of movement",
            "fresh air and fresh legs",
            "bring water and good shoes",
        ),
        prompt="an upbeat, active tone",
        descriptor="the family is full of energy and looking for an active experience",
    ),
    MoodOption(
        key="adventurous",
        label="Adventurous",
        description="Something new, a small adventure.",
        helper="Adventurous mood favours new experiences.",
        tones=("youth", "neutral"),
        leads=("Set off on", "Explore something new with", "Be bold and try"),
        nuance_pool=(
            "a little out of the ordinary",
            "new places, new stories",
            "say yes to the unexpected",
        ),
        prompt="a curious, adventurous tone",
        descriptor="the family feels adventurous and would like to try something new",
    ),
    MoodOption(
        key="creative",
        label="Creative",
        description="Hands-on ideas with room to create.",
        helper="Creative mood favours hands-on, absorbing activities.",
        tones=("neutral", "adult"),
        leads=("Get creative with", "Make something during", "Spark ideas with"),
        nuance_pool=(
            "hands busy, minds free",
            "make something to keep",
            "time to get absorbed",
        ),
        prompt="a playful, imaginative tone",
        descriptor="the family is in a creative mood and wants an absorbing activity",
    ),
)

DEFAULT_MOOD: MoodOption = MOOD_OPTIONS[0]
DEFAULT_MOOD_KEY: str = DEFAULT_MOOD.key
MOOD_KEYS: tuple[str, ...] = tuple(option.key for option in MOOD_OPTIONS)

_MOODS_BY_KEY = MappingProxyType({option.key: option for option in MOOD_OPTIONS})

if len(_MOODS_BY_KEY) != len(MOOD_OPTIONS) or DEFAULT_MOOD_KEY != "balanced":
    raise RuntimeError("Mood registry must have unique keys and 'balanced' first")


def normalize_mood_key(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    return key if key in _MOODS_BY_KEY else None


def resolve_mood(value: object) -> MoodOption:
    key = normalize_mood_key(value)
    if key is None:
        return DEFAULT_MOOD
    return _MOODS_BY_KEY[key]


def is_default_mood(mood: MoodOption) -> bool:
    return mood.key == DEFAULT_MOOD_KEY
