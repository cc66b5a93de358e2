"""Free time slots that suit every family member.

Member preferences are intersected into one profile, busy calendar ranges are
subtracted, and a handful of candidate slots per day are placed on a
15-minute grid over the next few weeks.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo

from famtime.core.config import settings
from famtime.services.time_windows import (
    DayWindows,
    MinuteInterval,
    default_windows_for_day,
    intersect_time_window_maps,
    normalize_time_windows,
)
from famtime.services.weekdays import DAY_ORDER, WEEKEND_DAYS, WORK_DAYS, day_key_for_date, normalize_day_list

logger = logging.getLogger(__name__)

SLOT_ALIGN_MINUTES = 15
DEFAULT_LOOKAHEAD_DAYS = 21
DEFAULT_LIMIT = 6
MIN_OFFSET_MINUTES = 60
QUIET_START_HOUR = 6
DEFAULT_MIN_DURATION = 60
DEFAULT_MAX_DURATION = 240
DEFAULT_BUFFER_MINUTES = 15
WORKDAY_MAX_CAP = 180
WEEKEND_MIN_FLOOR = 120
MAX_PER_DAY = 2
SLOT_BIASES = ("start", "middle", "end")

REASON_NO_COMMON_PREFERENCES = (
    "No shared preferences found. Update the profiles' preferred days and time windows."
)
REASON_NO_FREE_SLOTS = "No free time within the preferences. Adjust the days or time windows."
REASON_NOTHING_AFTER_FILTERING = "Could not find suggestions after filtering. Choose wider time windows."


class PreferenceMode(str, Enum):
    CUSTOM = "custom"
    FOLLOW = "follow"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class TimeRange:
    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass(frozen=True, slots=True)
class PreferenceProfile:
    allowed_days: tuple[str, ...]
    day_windows: DayWindows
    min_duration: float
    max_duration: float
    buffer_minutes: float


@dataclass(frozen=True, slots=True)
class SlotCandidate:
    start: datetime
    end: datetime
    day_key: str
    duration_minutes: float


@dataclass(frozen=True, slots=True)
class FamilySlot:
    id: str
    start: datetime
    end: datetime
    day_key: str
    duration_minutes: float


@dataclass(frozen=True, slots=True)
class FamilySlotResult:
    suggestions: list[FamilySlot]
    reason: str


def _get(source: Any, *names: str) -> Any:
    for name in names:
        value = source.get(name) if isinstance(source, Mapping) else getattr(source, name, None)
        if value is not None:
            return value
    return None


def _finite(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def to_datetime(value: object, tz: ZoneInfo) -> datetime | None:
    """Accepts datetimes, ISO strings and epoch milliseconds; naive values use ``tz``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        converted = value
    elif isinstance(value, str):
        try:
            converted = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    elif _finite(value) is not None:
        try:
            converted = datetime.fromtimestamp(float(value) / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None
    if converted.tzinfo is None:
        converted = converted.replace(tzinfo=tz)
    return converted.astimezone(UTC)


def normalize_preference_mode(value: object) -> PreferenceMode:
    if isinstance(value, PreferenceMode):
        return value
    if value == PreferenceMode.FOLLOW.value:
        return PreferenceMode.FOLLOW
    if value == PreferenceMode.NONE.value:
        return PreferenceMode.NONE
    return PreferenceMode.CUSTOM


def resolve_member_preferences(family_preferences: object) -> object:
    """Apply each member's preference mode.

    ``custom`` keeps the member's own entry, ``none`` contributes no
    preferences, and ``follow`` copies the resolved entry of the member named
    by ``follow_user_id``. A follow that points at itself, at an unknown member
    or back into its own chain resolves to no preferences. List input has no
    member ids, so a follow entry there also resolves to no preferences.
    """
    if isinstance(family_preferences, (list, tuple)):
        return [
            entry if normalize_preference_mode(_get(entry, "mode")) is PreferenceMode.CUSTOM else {}
            for entry in family_preferences
            if entry is not None
        ]
    if not isinstance(family_preferences, Mapping):
        return family_preferences

    resolved: dict[str, Any] = {}

    def resolve(member_id: str, chain: frozenset[str]) -> Any:
        if member_id in resolved:
            return resolved[member_id]
        entry = family_preferences.get(member_id)
        mode = PreferenceMode.NONE if entry is None else normalize_preference_mode(_get(entry, "mode"))
        result: Any = {}
        if mode is PreferenceMode.CUSTOM:
            result = entry
        elif mode is PreferenceMode.FOLLOW:
            target = str(_get(entry, "follow_user_id", "followUserId") or "").strip()
            if (
                target
                and target != member_id
                and family_preferences.get(target) is not None
                and target not in chain
            ):
                result = resolve(target, chain | {member_id})
        resolved[member_id] = result
        return result

    for member_id in family_preferences:
        resolve(member_id, frozenset())
    return resolved


def _member_entries(family_preferences: object) -> list[Any]:
    if isinstance(family_preferences, Mapping):
        return [entry for entry in family_preferences.values() if entry is not None]
    if isinstance(family_preferences, (list, tuple)):
        return [entry for entry in family_preferences if entry is not None]
    return []


def derive_preference_profile(family_preferences: object) -> PreferenceProfile | None:
    entries = _member_entries(resolve_member_preferences(family_preferences))
    if not entries:
        return PreferenceProfile(
            allowed_days=DAY_ORDER,
            day_windows={day: default_windows_for_day(day) for day in DAY_ORDER},
            min_duration=DEFAULT_MIN_DURATION,
            max_duration=DEFAULT_MAX_DURATION,
            buffer_minutes=DEFAULT_BUFFER_MINUTES,
        )

    day_lists = [days for days in (normalize_day_list(_get(entry, "days")) for entry in entries) if days]
    allowed = list(day_lists[0]) if day_lists else list(DAY_ORDER)
    for days in day_lists[1:]:
        allowed = [day for day in allowed if day in days]
    if not allowed:
        return None

    min_duration: float = DEFAULT_MIN_DURATION
    max_duration: float = DEFAULT_MAX_DURATION
    buffer_minutes: float = DEFAULT_BUFFER_MINUTES
    for entry in entries:
        entry_min = _finite(_get(entry, "min_duration_minutes", "minDurationMinutes"))
        entry_max = _finite(_get(entry, "max_duration_minutes", "maxDurationMinutes"))
        before = _finite(_get(entry, "buffer_before_minutes", "bufferBeforeMinutes"))
        after = _finite(_get(entry, "buffer_after_minutes", "bufferAfterMinutes"))
        if entry_min is not None:
            min_duration = max(min_duration, entry_min)
        if entry_max is not None:
            max_duration = min(max_duration, entry_max)
        if before is not None or after is not None:
            buffer_minutes = max(buffer_minutes, before or 0, after or 0)
    min_duration = min(min_duration, max_duration)

    windows = normalize_time_windows(_get(entries[0], "time_windows", "timeWindows"), allowed)
    for entry in entries[1:]:
        entry_windows = normalize_time_windows(_get(entry, "time_windows", "timeWindows"), allowed)
        windows = intersect_time_window_maps(windows, entry_windows, allowed)

    allowed = [day for day in allowed if windows.get(day)]
    if not allowed:
        return None
    return PreferenceProfile(
        allowed_days=tuple(allowed),
        day_windows=windows,
        min_duration=min_duration,
        max_duration=max_duration,
        buffer_minutes=buffer_minutes,
    )


def _merge_ranges(ranges: list[TimeRange]) -> list[TimeRange]:
    merged: list[TimeRange] = []
    for current in sorted(ranges, key=lambda item: item.start):
        if merged and current.start <= merged[-1].end:
            if current.end > merged[-1].end:
                merged[-1] = TimeRange(merged[-1].start, current.end)
        else:
            merged.append(current)
    return merged


def collect_busy_ranges(
    *,
    confirmed_events: Iterable[Any] = (),
    pending_events: Iterable[Any] = (),
    calendar_entries: Iterable[Any] = (),
    buffer_minutes: float = DEFAULT_BUFFER_MINUTES,
    now: datetime,
    tz: ZoneInfo,
) -> list[TimeRange]:
    buffer = timedelta(minutes=max(0, buffer_minutes))
    ranges: list[TimeRange] = []

    def append(raw: Any) -> None:
        if raw is None:
            return
        start = to_datetime(_get(raw, "start"), tz)
        end = to_datetime(_get(raw, "end"), tz)
        if start is None or end is None or end <= start or end <= now:
            return
        ranges.append(TimeRange(start - buffer, end + buffer))

    for event in [*confirmed_events, *pending_events]:
        append(event)
        if event is not None:
            append(_get(event, "pending_change", "pendingChange"))

    for entry in calendar_entries:
        for interval in _get(entry, "busy") or []:
            append(interval)

    return _merge_ranges(ranges)


def subtract_busy(interval: TimeRange, busy: list[TimeRange]) -> list[TimeRange]:
    result: list[TimeRange] = []
    cursor = interval.start
    for item in busy:
        if cursor >= interval.end:
            break
        if item.end <= cursor or item.start >= interval.end:
            continue
        if item.start > cursor:
            result.append(TimeRange(cursor, min(item.start, interval.end)))
        cursor = max(cursor, item.end)
    if cursor < interval.end:
        result.append(TimeRange(cursor, interval.end))
    return [item for item in result if item.end > item.start]


def _align(value: datetime, rounding: Callable[[float], int]) -> datetime:
    step = SLOT_ALIGN_MINUTES * 60
    return datetime.fromtimestamp(rounding(value.timestamp() / step) * step, tz=UTC)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def place_slot(intervals: list[TimeRange], duration_minutes: float, bias: str) -> TimeRange | None:
    duration = timedelta(minutes=duration_minutes)
    fitting = [item for item in intervals if item.end - item.start >= duration]

    if bias == "middle":
        for item in sorted(fitting, key=lambda value: value.end - value.start, reverse=True):
            offset = ((item.end - item.start) - duration) / 2
            start = max(_align(item.start + offset, _round_half_up), item.start)
            if start + duration <= item.end:
                return TimeRange(start, start + duration)
        return None

    if bias == "end":
        for item in reversed(fitting):
            start = _align(item.end - duration, math.floor)
            if start >= item.start:
                return TimeRange(start, start + duration)
        return None

    for item in fitting:
        start = _align(item.start, math.ceil)
        if start + duration <= item.end:
            return TimeRange(start, start + duration)
    return None


def build_day_durations(day_key: str, min_duration: float, max_duration: float) -> list[float]:
    day_min, day_max = min_duration, max_duration
    if day_key in WORK_DAYS:
        day_max = min(day_max, max(day_min, WORKDAY_MAX_CAP))
    elif day_key in WEEKEND_DAYS:
        day_min = max(day_min, min(day_max, WEEKEND_MIN_FLOOR))
    day_min = min(day_min, day_max)

    mid = _round_half_up((day_min + day_max) / 2 / SLOT_ALIGN_MINUTES) * SLOT_ALIGN_MINUTES
    mid = max(day_min, min(day_max, mid))

    durations: list[float] = []
    for value in (day_min, mid, day_max):
        if value > 0 and value not in durations:
            durations.append(value)
    return durations


def generate_candidates(
    profile: PreferenceProfile,
    busy: list[TimeRange],
    *,
    now: datetime,
    lookahead_days: int,
    tz: ZoneInfo,
) -> list[SlotCandidate]:
    earliest = (now + timedelta(minutes=MIN_OFFSET_MINUTES)).replace(second=0, microsecond=0)
    first_day = earliest.astimezone(tz).date()
    candidates: list[SlotCandidate] = []

    for offset in range(lookahead_days):
        current = first_day + timedelta(days=offset)
        day_key = day_key_for_date(current)
        if day_key not in profile.allowed_days:
            continue
        windows: list[MinuteInterval] = profile.day_windows.get(day_key) or default_windows_for_day(day_key)
        midnight = datetime.combine(current, time(0), tzinfo=tz).astimezone(UTC)

        day_intervals: list[TimeRange] = []
        for window in windows:
            start = midnight + timedelta(minutes=max(window.start, QUIET_START_HOUR * 60))
            end = midnight + timedelta(minutes=window.end)
            if end <= start or end <= earliest:
                continue
            day_intervals.append(TimeRange(max(start, earliest), end))

        free = [
            item
            for interval in day_intervals
            for item in subtract_busy(interval, busy)
            if item.minutes >= profile.min_duration
        ]
        if not free:
            continue

        durations = build_day_durations(day_key, profile.min_duration, profile.max_duration)
        for index, duration in enumerate(durations):
            bias = SLOT_BIASES[index] if index < len(SLOT_BIASES) else "start"
            slot = place_slot(free, duration, bias)
            if slot is not None:
                candidates.append(SlotCandidate(slot.start, slot.end, day_key, duration))

    return sorted(candidates, key=lambda item: item.start)


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def select_final_suggestions(candidates: list[SlotCandidate], limit: int, tz: ZoneInfo) -> list[FamilySlot]:
    selections: list[SlotCandidate] = []
    per_day: dict[str, int] = {}
    for candidate in candidates:
        if len(selections) >= limit:
            break
        count = per_day.get(candidate.day_key, 0)
        if count >= MAX_PER_DAY:
            continue
        selections.append(candidate)
        per_day[candidate.day_key] = count + 1

    if len(selections) < limit:
        for candidate in candidates:
            if len(selections) >= limit:
                break
            if any(item.start == candidate.start for item in selections):
                continue
            selections.append(candidate)

    return [
        FamilySlot(
            id=f"{_epoch_ms(item.start)}-{_epoch_ms(item.end)}-{index}",
            start=item.start.astimezone(tz),
            end=item.end.astimezone(tz),
            day_key=item.day_key,
            duration_minutes=item.duration_minutes,
        )
        for index, item in enumerate(selections[:limit])
    ]


def build_family_suggestions(
    *,
    confirmed_events: Iterable[Any] = (),
    pending_events: Iterable[Any] = (),
    calendar_entries: Iterable[Any] = (),
    family_preferences: object = None,
    now: datetime | None = None,
    limit: int = DEFAULT_LIMIT,
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    time_zone: str | None = None,
) -> FamilySlotResult:
    tz = ZoneInfo(time_zone or settings.time_zone)
    moment = (to_datetime(now, tz) if now is not None else None) or datetime.now(UTC)

    profile = derive_preference_profile(family_preferences)
    if profile is None:
        return FamilySlotResult(suggestions=[], reason=REASON_NO_COMMON_PREFERENCES)

    busy = collect_busy_ranges(
        confirmed_events=confirmed_events,
        pending_events=pending_events,
        calendar_entries=calendar_entries,
        buffer_minutes=profile.buffer_minutes,
        now=moment,
        tz=tz,
    )
    candidates = generate_candidates(profile, busy, now=moment, lookahead_days=lookahead_days, tz=tz)
    if not candidates:
        return FamilySlotResult(suggestions=[], reason=REASON_NO_FREE_SLOTS)

    suggestions = select_final_suggestions(candidates, limit, tz)
    if not suggestions:
        return FamilySlotResult(suggestions=[], reason=REASON_NOTHING_AFTER_FILTERING)

    logger.info("family_slots.built", extra={"slot_count": len(suggestions)})
    return FamilySlotResult(suggestions=suggestions, reason="")
