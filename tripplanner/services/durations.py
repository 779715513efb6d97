"""Default activity durations by catalog category."""

from __future__ import annotations

CUSTOM_CATEGORY = "custom"

CATEGORY_DURATIONS: dict[str, int] = {
    "tourist_attraction": 120,
    "museum": 180,
    "restaurant": 90,
    "park": 60,
    "shopping_mall": 120,
    "amusement_park": 360,
    "zoo": 240,
    "aquarium": 150,
    "church": 45,
    "market": 90,
    "viewpoint": 30,
    "beach": 180,
    "hiking_trail": 240,
    "spa": 120,
    "nightclub": 180,
    "theater": 150,
    "stadium": 180,
    CUSTOM_CATEGORY: 120,
}


def default_duration(category: str | None) -> int:
    """Minutes to assume for a category; unknown categories fall back to ``custom``."""
    if category is None:
        return CATEGORY_DURATIONS[CUSTOM_CATEGORY]
    return CATEGORY_DURATIONS.get(category.lower(), CATEGORY_DURATIONS[CUSTOM_CATEGORY])


def format_duration(duration_minutes: int | None) -> str:
    """Human-readable duration: ``"2h 30m"``, ``"2h"``, ``"45m"``."""
    if not duration_minutes or duration_minutes <= 0:
        return "0m"
    hours, minutes = divmod(duration_minutes, 60)
    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"
