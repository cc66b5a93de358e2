from __future__ import annotations

from collections.abc import Iterable
from datetime import date

DAY_ORDER: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

WORK_DAYS = frozenset({"monday", "tuesday", "wednesday", "thursday"})
WEEKEND_DAYS = frozenset({"friday", "saturday", "sunday"})

DAY_LABELS: dict[str, str] = {
    "monday": "Monday",
    "tuesday": "Tuesday",
    "wednesday": "Wednesday",
    "thursday": "Thursday",
    "friday": "Friday",
    "saturday": "Saturday",
    "sunday": "Sunday",
}

DANISH_DAY_NAMES: dict[str, str] = {
    "monday": "mandag",
    "tuesday": "tirsdag",
    "wednesday": "onsdag",
    "thursday": "torsdag",
    "friday": "fredag",
    "saturday": "lørdag",
    "sunday": "søndag",
}

_DAY_ALIASES: dict[str, str] = {
    "mon": "monday",
    "mandag": "monday",
    "tue": "tuesday",
    "tues": "tuesday",
    "tirsdag": "tuesday",
    "wed": "wednesday",
    "onsdag": "wednesday",
    "thu": "thursday",
    "thur": "thursday",
    "thurs": "thursday",
    "torsdag": "thursday",
    "fri": "friday",
    "fredag": "friday",
    "sat": "saturday",
    "lørdag": "saturday",
    "lordag": "saturday",
    "sun": "sunday",
    "søndag": "sunday",
    "sondag": "sunday",
}


def normalize_day_key(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    if lowered in DAY_ORDER:
        return lowered
    return _DAY_ALIASES.get(lowered)


def normalize_day_list(values: object) -> list[str]:
    """Canonical day keys in first-seen order, unknown tokens dropped."""
    if not values:
        return []
    if isinstance(values, str) or not isinstance(values, Iterable):
        values = [values]
    result: list[str] = []
    for value in values:
        day = normalize_day_key(value)
        if day is not None and day not in result:
            result.append(day)
    return result


def in_canonical_order(days: Iterable[str]) -> tuple[str, ...]:
    wanted = set(days)
    return tuple(day for day in DAY_ORDER if day in wanted)


def day_key_for_date(value: date) -> str:
    return DAY_ORDER[value.weekday()]


def is_weekend_day(day_key: str) -> bool:
    return day_key in WEEKEND_DAYS


def day_label(day_key: str) -> str:
    key = (day_key or "").strip().lower()
    return DAY_LABELS.get(key, key)
