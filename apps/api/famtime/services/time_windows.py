"""Per-day availability windows expressed as minute offsets from midnight."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from famtime.services.weekdays import DANISH_DAY_NAMES, is_weekend_day

MINUTES_PER_DAY = 24 * 60

_CLOCK = re.compile(r"^\s*(\d{1,2})\s*:\s*(\d{1,2})\s*$")


@dataclass(frozen=True, slots=True)
class MinuteInterval:
    start: float
    end: float


DEFAULT_WEEKDAY_WINDOWS: tuple[MinuteInterval, ...] = (MinuteInterval(16 * 60, 23 * 60 + 59),)
DEFAULT_WEEKEND_WINDOWS: tuple[MinuteInterval, ...] = (MinuteInterval(10 * 60, 23 * 60 + 59),)

DayWindows = dict[str, list[MinuteInterval]]


def default_windows_for_day(day_key: str) -> list[MinuteInterval]:
    return list(DEFAULT_WEEKEND_WINDOWS if is_weekend_day(day_key) else DEFAULT_WEEKDAY_WINDOWS)


def parse_time_to_minutes(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    match = _CLOCK.match(value)
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def _first_present(entry: Mapping, *keys: str) -> object:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return None


def normalize_window_entry(entry: object) -> MinuteInterval | None:
    if not entry:
        return None
    if isinstance(entry, str):
        parts = entry.split("-")
        if len(parts) != 2:
            return None
        start, end = parse_time_to_minutes(parts[0]), parse_time_to_minutes(parts[1])
    elif isinstance(entry, Mapping):
        start = parse_time_to_minutes(_first_present(entry, "start", "begin", "from"))
        end = parse_time_to_minutes(_first_present(entry, "end", "finish", "to"))
    else:
        return None
    if start is None or end is None or end <= start:
        return None
    return MinuteInterval(start, end)


def merge_minute_intervals(intervals: Iterable[MinuteInterval]) -> list[MinuteInterval]:
    clamped = [
        MinuteInterval(max(0, math.floor(item.start)), min(MINUTES_PER_DAY, math.ceil(item.end)))
        for item in intervals
    ]
    ordered = sorted((item for item in clamped if item.end > item.start), key=lambda item: item.start)

    merged: list[MinuteInterval] = []
    for current in ordered:
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = MinuteInterval(last.start, max(last.end, current.end))
        else:
            merged.append(current)
    return merged


def intersect_minute_intervals(
    first: list[MinuteInterval],
    second: list[MinuteInterval],
) -> list[MinuteInterval]:
    result: list[MinuteInterval] = []
    i = j = 0
    while i < len(first) and j < len(second):
        a, b = first[i], second[j]
        start, end = max(a.start, b.start), min(a.end, b.end)
        if end > start:
            result.append(MinuteInterval(start, end))
        if a.end < b.end:
            i += 1
        else:
            j += 1
    return result


def _lookup_keys(day_key: str) -> list[str]:
    danish = DANISH_DAY_NAMES.get(day_key, "")
    return [key for key in (day_key, day_key[:3], danish, danish[:3]) if key]


def normalize_time_windows(definition: object, allowed_days: Iterable[str]) -> DayWindows:
    """Resolve each allowed day to merged windows, falling back to the defaults."""
    windows: DayWindows = {}
    for day in allowed_days:
        entry = None
        if isinstance(definition, Mapping):
            entry = next((definition[key] for key in _lookup_keys(day) if definition.get(key)), None)
            if entry is None:
                entry = definition.get("default")

        normalized: list[MinuteInterval] = []
        if isinstance(entry, (list, tuple)) and entry:
            normalized = merge_minute_intervals(
                item for item in (normalize_window_entry(raw) for raw in entry) if item is not None
            )
        windows[day] = normalized or default_windows_for_day(day)
    return windows


def intersect_time_window_maps(base: DayWindows, other: DayWindows, allowed_days: Iterable[str]) -> DayWindows:
    # A day already dropped from ``base`` stays dropped.
    result: DayWindows = {}
    for day in allowed_days:
        first = base.get(day)
        if not first:
            continue
        second = other.get(day) or default_windows_for_day(day)
        overlap = intersect_minute_intervals(first, second)
        if overlap:
            result[day] = overlap
    return result
