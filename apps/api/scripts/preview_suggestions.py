from __future__ import annotations

import argparse
from datetime import date

from famtime.services.suggestions.composer import compose_suggestion
from famtime.services.suggestions.moods import MOOD_OPTIONS
from famtime.services.suggestions.profile import normalize_profile


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the local suggestion for a profile under every mood")
    parser.add_argument("--name", default="", help="Profile name")
    parser.add_argument("--age", default=None, help="Profile age")
    parser.add_argument("--city", default="", help="Profile city")
    parser.add_argument("--gender", default="", help="Profile gender")
    parser.add_argument("--days", nargs="*", default=[], help="Preferred days, e.g. saturday sun mandag")
    parser.add_argument("--variant", default=None, help="Variant seed for a fresh idea")
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Target date (YYYY-MM-DD)")
    args = parser.parse_args()

    profile = normalize_profile(
        {
            "name": args.name,
            "age": args.age,
            "city": args.city,
            "gender": args.gender,
            "preferred_days": args.days,
        }
    )
    print(f"profile: {profile}")
    for option in MOOD_OPTIONS:
        composed = compose_suggestion(profile, option.key, variant_seed=args.variant, target_date=args.date)
        weekend = "weekend" if composed.is_weekend else "weekday"
        print(f"- {option.key:<12} [{weekend}, {composed.tier}, {composed.activity.key}] {composed.text}")


if __name__ == "__main__":
    main()
