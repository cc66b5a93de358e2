from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Tone = Literal["youth", "adult", "neutral"]
CatalogVariant = Literal["weekday", "weekend"]


@dataclass(frozen=True, slots=True)
class Activity:
    key: str
    label: str
    tone: Tone
    moods: tuple[str, ...]
    detail: str | None = None


WEEKDAY_ACTIVITIES: tuple[Activity, ...] = (
    Activity("board_game_night", "a board game night", "neutral", ("balanced", "relaxed", "creative"), "(45–60 min)"),
    Activity("evening_walk", "an evening walk around the neighbourhood", "neutral", ("relaxed", "balanced")),
    Activity("cook_together", "a cook-together dinner", "adult", ("creative", "balanced", "relaxed"), "(pick a new recipe)"),
    Activity("swim_hall", "a swim at the local pool", "neutral", ("energetic", "balanced"), "(30–45 min)"),
    Activity("bouldering", "a bouldering session", "youth", ("energetic", "adventurous"), "(beginner routes)"),
    Activity("library_visit", "a visit to the library", "neutral", ("relaxed", "creative")),
    Activity("movie_night", "a movie night with snacks", "youth", ("relaxed",)),
    Activity("lego_challenge", "a LEGO building challenge", "youth", ("creative",), "(20–30 min)"),
    Activity("bike_ride", "a short bike ride", "neutral", ("energetic", "adventurous"), "(before sunset)"),
    Activity("cookie_baking", "a cookie baking session", "neutral", ("creative", "relaxed")),
    Activity("quiz_night", "a family quiz night", "adult", ("balanced", "energetic")),
    Activity("stargazing", "some stargazing from the balcony", "adult", ("adventurous", "relaxed"), "(bring a blanket)"),
    Activity("dance_party", "a kitchen dance party", "youth", ("energetic",)),
    Activity("sketching", "a drawing and sketching evening", "adult", ("creative", "relaxed")),
)

WEEKEND_ACTIVITIES: tuple[Activity, ...] = (
    Activity("forest_hike", "a hike in the forest", "neutral", ("adventurous", "energetic"), "(2–3 hours)"),
    Activity("museum_visit", "a museum visit", "adult", ("creative", "balanced")),
    Activity("park_picnic", "a picnic in the park", "neutral", ("relaxed", "balanced"), "(bring a ball)"),
    Activity("beach_day", "a day at the beach", "youth", ("energetic", "relaxed")),
    Activity("zoo_trip", "a trip to the zoo", "youth", ("adventurous", "balanced")),
    Activity("flea_market", "a stroll through a flea market", "adult", ("relaxed", "creative")),
    Activity("kayak_trip", "a kayaking trip", "adult", ("adventurous", "energetic"), "(guided tour)"),
    Activity("family_brunch", "a long family brunch", "adult", ("relaxed",)),
    Activity("trampoline_park", "a trampoline park visit", "youth", ("energetic",), "(1–2 hours)"),
    Activity("pottery_workshop", "a pottery workshop", "neutral", ("creative",)),
    Activity("treasure_hunt", "a treasure hunt in the city", "youth", ("adventurous", "creative")),
    Activity("spa_afternoon", "a spa and wellness afternoon", "adult", ("relaxed",)),
    Activity("harbour_bike_tour", "a bike tour along the harbour", "neutral", ("energetic", "adventurous", "balanced")),
    Activity("cinema_matinee", "a cinema matinee", "neutral", ("relaxed", "balanced")),
    Activity("local_festival", "a visit to a local market or festival", "neutral", ("balanced", "adventurous")),
)


def catalog_for(is_weekend: bool) -> tuple[Activity, ...]:
    return WEEKEND_ACTIVITIES if is_weekend else WEEKDAY_ACTIVITIES


def dedupe_by_key(items: list[Activity] | tuple[Activity, ...]) -> list[Activity]:
    seen: set[str] = set()
    unique: list[Activity] = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        unique.append(item)
    return unique


def catalog_listing(variant: CatalogVariant) -> list[dict[str, object]]:
    catalog = WEEKEND_ACTIVITIES if variant == "weekend" else WEEKDAY_ACTIVITIES
    return [
        {
            "id": f"{variant}_{item.key}",
            "title": item.label[:1].upper() + item.label[1:],
            "description": item.detail or "",
            "tone": item.tone,
            "moods": list(item.moods),
            "source": variant,
            "is_weekend_preferred": variant == "weekend",
        }
        for item in catalog
    ]


def _check_catalog(name: str, catalog: tuple[Activity, ...]) -> None:
    if not catalog:
        raise RuntimeError(f"{name} must not be empty")
    keys = [item.key for item in catalog]
    if len(keys) != len(set(keys)):
        raise RuntimeError(f"{name} contains duplicate activity keys")


_check_catalog("WEEKDAY_ACTIVITIES", WEEKDAY_ACTIVITIES)
_check_catalog("WEEKEND_ACTIVITIES", WEEKEND_ACTIVITIES)
