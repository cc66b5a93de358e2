from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from famtime.services.suggestions.hashing import simple_hash
from famtime.services.weekdays import in_canonical_order, normalize_day_list

DEFAULT_NAME = "FamTime friend"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TITLE_BOUNDARY = re.compile(r"(^|\s|-)(\S)")


@dataclass(frozen=True, slots=True)
class SuggestionProfile:
    name: str = ""
    age: int | None = None
    city: str = ""
    gender: str = ""
    preferred_days: tuple[str, ...] = ()


def sanitize_string(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def parse_age(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def title_case(value: object) -> str:
    clean = sanitize_string(value)
    if not clean:
        return ""
    return _TITLE_BOUNDARY.sub(lambda m: f"{m.group(1)}{m.group(2).upper()}", clean.lower())


def tone_for_age(age: int | None) -> str | None:
    if age is None:
        return None
    if age < 23:
        return "youth"
    if age > 30:
        return "adult"
    return None


def age_bracket(age: int | None) -> str:
    if age is None:
        return "unknown"
    if age < 23:
        return "under 23"
    if age > 30:
        return "over 30"
    return "23-30"


def _field(source: Any, *names: str) -> Any:
    for name in names:
        if isinstance(source, Mapping):
            value = source.get(name)
        else:
            value = getattr(source, name, None)
        if value is not None:
            return value
    return None


def normalize_profile(source: Any) -> SuggestionProfile:
    if isinstance(source, SuggestionProfile):
        return source
    if source is None:
        return SuggestionProfile()
    raw_days = _field(source, "preferred_days", "preferredDays")
    days = normalize_day_list(raw_days) if isinstance(raw_days, (list, tuple, set, frozenset)) else []
    return SuggestionProfile(
        name=sanitize_string(_field(source, "name")),
        age=parse_age(_field(source, "age")),
        city=sanitize_string(_field(source, "city", "location")),
        gender=sanitize_string(_field(source, "gender")),
        preferred_days=in_canonical_order(days),
    )


def build_seed(profile: SuggestionProfile, mood_key: str, variant_seed: str | None = None) -> str:
    base = "|".join(
        [
            profile.name or DEFAULT_NAME,
            str(profile.age) if profile.age is not None else "na",
            profile.city or "nocity",
            "-".join(profile.preferred_days) or "nodays",
            mood_key,
        ]
    )
    if variant_seed:
        return f"{base}|variant:{variant_seed}"
    return base


def profile_seed_hash(profile: SuggestionProfile) -> int:
    # Mood-independent hash used to vary inspiration examples per profile.
    source = "|".join(
        [
            profile.name or DEFAULT_NAME,
            str(profile.age) if profile.age is not None else "na",
            profile.city or "nocity",
            "-".join(profile.preferred_days) or "nodays",
        ]
    )
    return simple_hash(source)
