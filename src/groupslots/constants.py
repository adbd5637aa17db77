"""Shared package-level defaults used across CLI and scheduling modules."""

from __future__ import annotations

MINUTES_PER_HOUR = 60
DAY_START = 0
DAY_END = 24 * MINUTES_PER_HOUR
DEFAULT_MIN_DURATION = 30
DEFAULT_PERSON_NAME_PREFIX = "person"
SCHEDULE_FILE_SUFFIXES = (".toml", ".json")
