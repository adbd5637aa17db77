"""Load group scheduling requests from TOML or JSON files."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from groupslots.constants import DEFAULT_PERSON_NAME_PREFIX, SCHEDULE_FILE_SUFFIXES
from groupslots.models import Interval, Person
from groupslots.timefmt import TimeFormatError, parse_interval

logger = logging.getLogger(__name__)


class ScheduleFileError(ValueError):
    """Raised when a schedule file cannot be read as a group request."""


@dataclass(frozen=True)
class GroupRequest:
    """People and optional minimum duration read from a schedule file."""

    people: tuple[Person, ...]
    min_duration: int | None = None


def _read_document(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix not in SCHEDULE_FILE_SUFFIXES:
        allowed = ", ".join(SCHEDULE_FILE_SUFFIXES)
        raise ScheduleFileError(f"{path.name}: unsupported file type; expected one of {allowed}")

    try:
        if suffix == ".toml":
            with path.open("rb") as handle:
                document = tomllib.load(handle)
        else:
            document = json.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ScheduleFileError(f"{path.name}: {exc}") from exc

    if not isinstance(document, dict):
        raise ScheduleFileError(f"{path.name}: top level must be a table/object")
    return document


def _parse_duration(value: Any, source: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ScheduleFileError(f"{source}: duration must be a non-negative integer")
    return value


def _parse_person(entry: Any, position: int, source: str) -> Person:
    label = f"{source}: people[{position - 1}]"
    if not isinstance(entry, dict):
        raise ScheduleFileError(f"{label} must be a table/object")
    if "active" not in entry:
        raise ScheduleFileError(f"{label} is missing 'active'")

    name = entry.get("name") or f"{DEFAULT_PERSON_NAME_PREFIX}-{position}"
    if not isinstance(name, str):
        raise ScheduleFileError(f"{label}: name must be a string")

    busy_entries = entry.get("busy", [])
    if not isinstance(busy_entries, list):
        raise ScheduleFileError(f"{label}: busy must be a list of [start, end] pairs")

    try:
        active = parse_interval(entry["active"])
    except TimeFormatError as exc:
        raise ScheduleFileError(f"{label} ({name}): active window: {exc}") from exc

    busy: list[Interval] = []
    for busy_index, busy_entry in enumerate(busy_entries):
        try:
            busy.append(parse_interval(busy_entry))
        except TimeFormatError as exc:
            raise ScheduleFileError(f"{label} ({name}): busy[{busy_index}]: {exc}") from exc

    return Person(active=active, busy=tuple(busy), name=name)


def load_group_request(path: Path | str) -> GroupRequest:
    """Read a group request from a ``.toml`` or ``.json`` file.

    :param path: Schedule file location.
    :return: Parsed people and the file's duration, if any.
    :raises FileNotFoundError: When the file does not exist.
    :raises ScheduleFileError: When the file content is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Schedule file does not exist: {path}")

    document = _read_document(path)
    entries = document.get("people", [])
    if not isinstance(entries, list):
        raise ScheduleFileError(f"{path.name}: 'people' must be a list")

    people = tuple(
        _parse_person(entry, position, path.name) for position, entry in enumerate(entries, start=1)
    )
    min_duration = _parse_duration(document.get("duration"), path.name)
    logger.debug("Loaded %d people from %s", len(people), path)
    return GroupRequest(people=people, min_duration=min_duration)
