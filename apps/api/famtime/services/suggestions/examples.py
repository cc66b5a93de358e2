from __future__ import annotations

from famtime.services.suggestions.catalog import Activity, catalog_for, dedupe_by_key
from famtime.services.suggestions.composer import clean_detail
from famtime.services.suggestions.hashing import simple_hash
from famtime.services.suggestions.moods import resolve_mood


def pick_mood_examples(
    mood_key: object = None,
    *,
    is_weekend: bool = False,
    count: int = 3,
    seed: object = "",
) -> list[Activity]:
    """Stable inspiration examples for a mood, used to ground the remote prompt.

    The pool holds the mood matches plus the activities in the mood's tones,
    or the whole catalog when nothing matches the mood. It is ordered only by
    the hash of seed, mood and activity key, so a tone match can outrank a
    mood match.
    """
    catalog = catalog_for(is_weekend)
    mood = resolve_mood(mood_key)

    mood_matches = [item for item in catalog if mood.key in item.moods]
    tone_matches = [item for item in catalog if item.tone in mood.tones]
    base = mood_matches or list(catalog)
    pool = dedupe_by_key([*mood_matches, *tone_matches, *base])

    ranked = sorted(pool, key=lambda item: simple_hash(f"{seed}|{mood.key}|{item.key}"))
    picked = ranked[: max(count, 0)]
    if not picked and count > 0:
        picked = [catalog[0]]
    return picked


def describe_activity_for_prompt(activity: Activity) -> str:
    label = activity.label[:1].upper() + activity.label[1:]
    moods = ", ".join(activity.moods) or "mixed"
    line = f"{label}. Tone: {activity.tone or 'unknown'}; moods: {moods}"
    detail = clean_detail(activity.detail)
    if detail:
        line += f"; note: {detail}"
    return line
