"""Seed data inserted when a store is bootstrapped.

The activity types here are the reference rows every fresh store starts with;
sessions point at them through ``activity_type_id``.
"""

from typing import TypedDict

from .schema import CURRENT_VERSION, VERSION_PROPERTY


class ActivityTypeData(TypedDict):
    """Activity type row matching the activity_type table."""
    short_name: str
    full_name: str
    description: str | None


def _activity(short_name: str, full_name: str, description: str | None) -> ActivityTypeData:
    return {
        "short_name": short_name,
        "full_name": full_name,
        "description": description,
    }


# Activity short names
WORK = "work"
SHORT_BREAK = "short_break"
LONG_BREAK = "long_break"

DEFAULT_ACTIVITY_TYPES: list[ActivityTypeData] = [
    _activity(WORK, "Pomodoro", "Productive work"),
    _activity(SHORT_BREAK, "Short Break", "Short break between working bursts"),
    _activity(LONG_BREAK, "Long Break", "Take a breather!"),
]


def version_row(version: int = CURRENT_VERSION) -> tuple[str, str]:
    """(property, value) pair recording the schema version in db_info."""
    return (VERSION_PROPERTY, str(version))


def activity_type_rows() -> list[tuple[str, str, str | None]]:
    """Default activity types as (short_name, full_name, description) tuples."""
    return [
        (a["short_name"], a["full_name"], a["description"])
        for a in DEFAULT_ACTIVITY_TYPES
    ]


def verify_default_activity_types() -> list[str]:
    """Check the seed list for duplicate short names and empty full names."""
    problems: list[str] = []
    seen: set[str] = set()
    for activity in DEFAULT_ACTIVITY_TYPES:
        short_name = activity["short_name"]
        if short_name in seen:
            problems.append(f"Duplicate activity type: {short_name}")
        seen.add(short_name)
        if not activity["full_name"]:
            problems.append(f"Activity type {short_name} has no full name")
    return problems
