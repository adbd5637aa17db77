from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent
from typing import Any

from groupslots.models import Interval, Person
from groupslots.timefmt import parse_hhmm


def hm(text: str) -> int:
    """Shorthand for minutes from midnight."""
    return parse_hhmm(text)


def span(start: str, end: str) -> Interval:
    return Interval(hm(start), hm(end))


HANDOUT_BUSY = [
    [span("7:00", "8:30"), span("12:00", "13:00"), span("16:00", "18:00")],
    [
        span("9:00", "10:30"),
        span("12:20", "14:00"),
        span("14:30", "15:00"),
        span("16:00", "17:00"),
    ],
]
HANDOUT_ACTIVE = [span("9:00", "19:00"), span("9:00", "18:30")]
HANDOUT_SLOTS = (
    span("10:30", "12:00"),
    span("14:00", "14:30"),
    span("15:00", "16:00"),
    span("18:00", "18:30"),
)

HANDOUT_TOML = dedent(
    """
    duration = 30

    [[people]]
    name = "alice"
    active = ["09:00", "19:00"]
    busy = [["07:00", "08:30"], ["12:00", "13:00"], ["16:00", "18:00"]]

    [[people]]
    name = "bob"
    active = "09:00-18:30"
    busy = ["09:00-10:30", "12:20-14:00", "14:30-15:00", "16:00-17:00"]
    """
).strip()


def build_handout_people() -> tuple[Person, ...]:
    """The two-person example group used across tests."""
    return (
        Person.build(HANDOUT_ACTIVE[0], HANDOUT_BUSY[0], name="alice"),
        Person.build(HANDOUT_ACTIVE[1], HANDOUT_BUSY[1], name="bob"),
    )


def write_schedule_file(tmp_path: Path, content: str, filename: str = "team.toml") -> Path:
    path = tmp_path / filename
    path.write_text(dedent(content).strip() + "\n")
    return path


def write_json_schedule(tmp_path: Path, document: Any, filename: str = "team.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(document))
    return path
