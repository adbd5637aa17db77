from __future__ import annotations

from pathlib import Path

import pytest

from groupslots.models import Interval
from groupslots.pipeline import find_common_slots
from groupslots.schedule_file import ScheduleFileError, load_group_request
from tests.conftest import (
    HANDOUT_SLOTS,
    HANDOUT_TOML,
    span,
    write_json_schedule,
    write_schedule_file,
)


def test_load_toml_handout(tmp_path: Path) -> None:
    request = load_group_request(write_schedule_file(tmp_path, HANDOUT_TOML))

    assert request.min_duration == 30
    assert [person.name for person in request.people] == ["alice", "bob"]
    assert request.people[0].active == span("9:00", "19:00")
    assert request.people[1].busy[1] == span("12:20", "14:00")
    assert find_common_slots(request.people, request.min_duration).slots == HANDOUT_SLOTS


def test_load_json_with_minutes_and_defaults(tmp_path: Path) -> None:
    path = write_json_schedule(
        tmp_path,
        {"people": [{"active": [540, 1020]}, {"name": "bob", "active": "10:00-16:00", "busy": []}]},
    )
    request = load_group_request(path)

    assert request.min_duration is None
    assert request.people[0].name == "person-1"
    assert request.people[0].busy == ()
    assert request.people[1].active == Interval(600, 960)


def test_load_empty_group(tmp_path: Path) -> None:
    request = load_group_request(write_schedule_file(tmp_path, "duration = 15"))
    assert request.people == ()
    assert request.min_duration == 15


def test_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_group_request(tmp_path / "missing.toml")


def test_unsupported_suffix(tmp_path: Path) -> None:
    path = write_schedule_file(tmp_path, "people = []", filename="team.yaml")
    with pytest.raises(ScheduleFileError, match="unsupported file type"):
        load_group_request(path)


def test_invalid_toml_is_reported(tmp_path: Path) -> None:
    path = write_schedule_file(tmp_path, "people = [")
    with pytest.raises(ScheduleFileError, match="team.toml"):
        load_group_request(path)


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "team.json"
    path.write_text("{not json")
    with pytest.raises(ScheduleFileError):
        load_group_request(path)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("people = 3", "'people' must be a list"),
        ("people = [1]", "must be a table"),
        ("[[people]]\nname = 'x'", "missing 'active'"),
        ("[[people]]\nactive = '09:00-17:00'\nbusy = '10:00-11:00'", "busy must be a list"),
        ("[[people]]\nactive = '17:00-09:00'", "active window"),
        (
            "[[people]]\nname = 'ann'\nactive = '09:00-17:00'\nbusy = ['10:00-1100']",
            r"ann\): busy\[0\]",
        ),
        ("duration = -5", "duration must be a non-negative integer"),
        ("duration = 'long'", "duration must be a non-negative integer"),
    ],
)
def test_malformed_entries_are_reported(tmp_path: Path, content: str, message: str) -> None:
    path = write_schedule_file(tmp_path, content)
    with pytest.raises(ScheduleFileError, match=message):
        load_group_request(path)


def test_json_top_level_must_be_object(tmp_path: Path) -> None:
    path = write_json_schedule(tmp_path, [1, 2])
    with pytest.raises(ScheduleFileError, match="top level"):
        load_group_request(path)
