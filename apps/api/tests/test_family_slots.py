from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from famtime.services.family_slots import (
    PreferenceMode,
    REASON_NO_COMMON_PREFERENCES,
    REASON_NO_FREE_SLOTS,
    build_day_durations,
    build_family_suggestions,
    derive_preference_profile,
    normalize_preference_mode,
    resolve_member_preferences,
)
from famtime.services.time_windows import (
    MinuteInterval,
    intersect_minute_intervals,
    intersect_time_window_maps,
    merge_minute_intervals,
    normalize_time_windows,
    normalize_window_entry,
    parse_time_to_minutes,
)

CPH = ZoneInfo("Europe/Copenhagen")
MONDAY_MORNING = datetime(2026, 10, 19, 8, 0, tzinfo=CPH)


def _local(slot_time: datetime) -> tuple[int, int]:
    local = slot_time.astimezone(CPH)
    return local.hour, local.minute


def test_parse_time_and_window_entries() -> None:
    assert parse_time_to_minutes("16:30") == 990
    assert parse_time_to_minutes(45) == 45
    assert parse_time_to_minutes("late") is None
    assert parse_time_to_minutes(True) is None
    assert normalize_window_entry("18:00-20:00") == MinuteInterval(1080, 1200)
    assert normalize_window_entry({"begin": 600, "finish": "12:00"}) == MinuteInterval(600, 720)
    assert normalize_window_entry({"from": "09:00", "to": "08:00"}) is None
    assert normalize_window_entry("18:00") is None


def test_merge_and_intersect_minute_intervals() -> None:
    merged = merge_minute_intervals([MinuteInterval(300, 400), MinuteInterval(60, 120), MinuteInterval(100, 200)])
    assert merged == [MinuteInterval(60, 200), MinuteInterval(300, 400)]
    assert merge_minute_intervals([MinuteInterval(-30, 1500)]) == [MinuteInterval(0, 1440)]
    assert intersect_minute_intervals([MinuteInterval(0, 600)], [MinuteInterval(300, 900)]) == [MinuteInterval(300, 600)]


def test_time_windows_lookup_order_and_defaults() -> None:
    windows = normalize_time_windows(
        {"lør": ["10:00-12:00"], "default": ["17:00-19:00"], "tue": ["bogus"]},
        ["saturday", "monday", "tuesday"],
    )
    assert windows["saturday"] == [MinuteInterval(600, 720)]
    assert windows["monday"] == [MinuteInterval(1020, 1140)]
    assert windows["tuesday"] == [MinuteInterval(960, 1439)]
    assert normalize_time_windows(None, ["sunday"]) == {"sunday": [MinuteInterval(600, 1439)]}


def test_intersecting_window_maps_drops_days_without_overlap() -> None:
    first = {"monday": [MinuteInterval(600, 700)], "tuesday": [MinuteInterval(600, 700)]}
    second = {"monday": [MinuteInterval(800, 900)], "tuesday": [MinuteInterval(650, 900)]}
    result = intersect_time_window_maps(first, second, ["monday", "tuesday"])
    assert result == {"tuesday": [MinuteInterval(650, 700)]}
    assert intersect_time_window_maps(result, second, ["monday", "tuesday"]) == result


def test_preference_profile_combines_members() -> None:
    profile = derive_preference_profile(
        {
            "parent": {"days": ["monday", "saturday", "sunday"], "min_duration_minutes": 90, "buffer_before_minutes": 30},
            "child": {"days": ["Sat", "søndag"], "maxDurationMinutes": 200},
        }
    )
    assert profile is not None
    assert profile.allowed_days == ("saturday", "sunday")
    assert profile.min_duration == 90
    assert profile.max_duration == 200
    assert profile.buffer_minutes == 30


def test_preference_profile_without_common_day() -> None:
    assert derive_preference_profile({"a": {"days": ["monday"]}, "b": {"days": ["tuesday"]}}) is None


def test_day_durations_follow_day_type() -> None:
    assert build_day_durations("monday", 60, 240) == [60, 120, 180]
    assert build_day_durations("saturday", 60, 240) == [120, 180, 240]
    assert build_day_durations("sunday", 60, 60) == [60]


def test_default_preferences_place_start_middle_and_end_slots() -> None:
    result = build_family_suggestions(now=MONDAY_MORNING, lookahead_days=1, time_zone="Europe/Copenhagen")

    assert result.reason == ""
    assert [_local(slot.start) for slot in result.suggestions] == [(16, 0), (19, 0), (20, 45)]
    assert [slot.duration_minutes for slot in result.suggestions] == [60, 120, 180]
    assert all(slot.day_key == "monday" for slot in result.suggestions)
    first = result.suggestions[0]
    assert first.id == f"{int(first.start.timestamp() * 1000)}-{int(first.end.timestamp() * 1000)}-0"


def test_busy_events_and_buffer_push_slots_later() -> None:
    result = build_family_suggestions(
        confirmed_events=[
            {
                "start": datetime(2026, 10, 19, 15, 30, tzinfo=CPH),
                "end": datetime(2026, 10, 19, 18, 0, tzinfo=CPH),
            }
        ],
        now=MONDAY_MORNING,
        lookahead_days=1,
        time_zone="Europe/Copenhagen",
    )
    assert result.suggestions
    assert _local(result.suggestions[0].start) == (18, 15)
    assert all(_local(slot.start) >= (18, 15) for slot in result.suggestions)


def test_pending_change_and_calendar_busy_ranges_block_time() -> None:
    evening = {"start": "2026-10-19T16:00:00+02:00", "end": "2026-10-19T23:59:00+02:00"}
    for kwargs in (
        {"pending_events": [{"start": "2026-10-01T10:00:00+02:00", "end": "2026-10-01T11:00:00+02:00", "pending_change": evening}]},
        {"calendar_entries": [{"busy": [evening]}]},
    ):
        result = build_family_suggestions(now=MONDAY_MORNING, lookahead_days=1, time_zone="Europe/Copenhagen", **kwargs)
        assert result.suggestions == []
        assert result.reason == REASON_NO_FREE_SLOTS


def test_at_most_two_slots_per_day_before_filling() -> None:
    result = build_family_suggestions(now=MONDAY_MORNING, lookahead_days=3, limit=6, time_zone="Europe/Copenhagen")
    assert [slot.day_key for slot in result.suggestions] == [
        "monday",
        "monday",
        "tuesday",
        "tuesday",
        "wednesday",
        "wednesday",
    ]
    assert [slot.id.rsplit("-", 1)[1] for slot in result.suggestions] == ["0", "1", "2", "3", "4", "5"]


def test_no_common_preferences_reason() -> None:
    result = build_family_suggestions(
        family_preferences={"a": {"days": ["monday"]}, "b": {"days": ["tuesday"]}},
        now=MONDAY_MORNING,
    )
    assert result.suggestions == []
    assert result.reason == REASON_NO_COMMON_PREFERENCES


def test_windows_before_now_leave_no_free_slots() -> None:
    result = build_family_suggestions(
        family_preferences={"a": {"days": ["monday"], "time_windows": {"monday": ["06:00-07:00"]}}},
        now=MONDAY_MORNING,
        lookahead_days=1,
    )
    assert result.reason == REASON_NO_FREE_SLOTS


def test_preference_modes_normalise_to_custom() -> None:
    assert normalize_preference_mode("follow") is PreferenceMode.FOLLOW
    assert normalize_preference_mode("none") is PreferenceMode.NONE
    assert normalize_preference_mode("FOLLOW") is PreferenceMode.CUSTOM
    assert normalize_preference_mode(None) is PreferenceMode.CUSTOM


def test_follow_copies_the_followed_member_and_none_contributes_nothing() -> None:
    parent = {"days": ["saturday", "sunday"], "minDurationMinutes": 90}
    resolved = resolve_member_preferences(
        {
            "parent": parent,
            "teen": {"mode": "follow", "followUserId": " parent ", "days": ["monday"]},
            "grandma": {"mode": "none", "days": ["tuesday"]},
        }
    )
    assert resolved == {"parent": parent, "teen": parent, "grandma": {}}

    profile = derive_preference_profile(
        {
            "parent": parent,
            "teen": {"mode": "follow", "followUserId": "parent", "days": ["monday"]},
            "grandma": {"mode": "none", "days": ["tuesday"]},
        }
    )
    assert profile is not None
    assert profile.allowed_days == ("saturday", "sunday")
    assert profile.min_duration == 90


def test_follow_cycles_and_unknown_targets_resolve_to_nothing() -> None:
    resolved = resolve_member_preferences(
        {
            "a": {"mode": "follow", "followUserId": "b"},
            "b": {"mode": "follow", "followUserId": "a"},
            "c": {"mode": "follow", "followUserId": "c"},
            "d": {"mode": "follow", "followUserId": "nobody"},
        }
    )
    assert resolved == {"a": {}, "b": {}, "c": {}, "d": {}}


def test_follow_chain_resolves_through_members() -> None:
    own = {"days": ["friday"]}
    resolved = resolve_member_preferences(
        {
            "kid": {"mode": "follow", "followUserId": "mum"},
            "mum": {"mode": "follow", "followUserId": "dad"},
            "dad": own,
        }
    )
    assert resolved == {"kid": own, "mum": own, "dad": own}


def test_family_slots_request_carries_preference_modes() -> None:
    from famtime.schemas.slots import FamilySlotsRequest

    payload = FamilySlotsRequest.model_validate(
        {
            "familyPreferences": {
                "a": {"days": ["saturday"]},
                "b": {"mode": "follow", "followUserId": "a", "days": ["monday"]},
            }
        }
    )
    profile = derive_preference_profile(payload.family_preferences)
    assert profile is not None
    assert profile.allowed_days == ("saturday",)
