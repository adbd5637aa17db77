from __future__ import annotations

import logging

import pytest

from groupslots.errors import (
    InvalidActiveWindow,
    InvalidInterval,
    MismatchedPersonCount,
    NegativeDuration,
)
from groupslots.intervals import complement_intervals, is_merged_timeline
from groupslots.models import FULL_DAY, Interval, Person
from groupslots.pipeline import (
    GroupScheduler,
    SchedulerConfig,
    aggregate_unavailable,
    build_people,
    compute_common_free_slots,
    filter_free_slots,
    find_common_slots,
    normalize_unavailable,
    shared_active_window,
)
from tests.conftest import (
    HANDOUT_ACTIVE,
    HANDOUT_BUSY,
    HANDOUT_SLOTS,
    build_handout_people,
    span,
)


def test_normalize_adds_time_outside_active_window() -> None:
    timeline = normalize_unavailable([], span("9:00", "17:00"))
    assert timeline == (span("0:00", "9:00"), span("17:00", "24:00"))


def test_normalize_full_day_window_has_no_seed_blocks() -> None:
    assert normalize_unavailable([], FULL_DAY) == ()


def test_normalize_clips_and_drops_busy_outside_window() -> None:
    busy = [
        span("7:00", "8:30"),
        span("8:00", "9:30"),
        span("18:00", "20:00"),
        span("20:00", "21:00"),
    ]
    timeline = normalize_unavailable(busy, span("9:00", "19:00"))
    assert timeline == (span("0:00", "9:30"), span("18:00", "24:00"))


def test_touching_busy_intervals_become_one_block() -> None:
    timeline = normalize_unavailable([Interval(0, 60), Interval(60, 120)], FULL_DAY)
    assert timeline == (Interval(0, 120),)


def test_normalize_handles_unsorted_overlapping_busy() -> None:
    busy = [span("14:00", "15:00"), span("10:00", "11:00"), span("10:30", "12:00")]
    timeline = normalize_unavailable(busy, FULL_DAY)
    assert timeline == (span("10:00", "12:00"), span("14:00", "15:00"))
    assert is_merged_timeline(timeline)


def test_aggregate_of_no_people_is_empty() -> None:
    assert aggregate_unavailable([]) == ()


def test_aggregate_merges_across_people() -> None:
    first = (Interval(0, 100), Interval(500, 600))
    second = (Interval(90, 200), Interval(600, 700))
    assert aggregate_unavailable([first, second]) == (Interval(0, 200), Interval(500, 700))
    assert aggregate_unavailable([second, first]) == aggregate_unavailable([first, second])


def test_shared_window_intersects_active_windows() -> None:
    assert shared_active_window(HANDOUT_ACTIVE) == span("9:00", "18:30")
    assert shared_active_window([]) == FULL_DAY
    assert shared_active_window([span("9:00", "12:00"), span("13:00", "17:00")]) is None
    assert shared_active_window([span("9:00", "12:00"), span("12:00", "17:00")]) is None


def test_filter_drops_zero_length_even_without_minimum() -> None:
    free = (Interval(0, 540), Interval(600, 700))
    assert filter_free_slots(free, Interval(540, 700), 0) == (Interval(600, 700),)


def test_filter_keeps_slots_exactly_at_minimum() -> None:
    free = (Interval(600, 630), Interval(700, 729))
    assert filter_free_slots(free, FULL_DAY, 30) == (Interval(600, 630),)


def test_filter_without_shared_window_is_empty() -> None:
    assert filter_free_slots((FULL_DAY,), None, 0) == ()


def test_handout_scenario() -> None:
    slots = compute_common_free_slots(HANDOUT_BUSY, HANDOUT_ACTIVE, 30)
    assert slots == HANDOUT_SLOTS


def test_handout_scenario_accepts_plain_pairs() -> None:
    busy = [[interval.as_tuple() for interval in person] for person in HANDOUT_BUSY]
    active = [interval.as_tuple() for interval in HANDOUT_ACTIVE]
    assert compute_common_free_slots(busy, active, 30) == HANDOUT_SLOTS


def test_longer_minimum_drops_short_slots() -> None:
    slots = compute_common_free_slots(HANDOUT_BUSY, HANDOUT_ACTIVE, 60)
    assert slots == (span("10:30", "12:00"), span("15:00", "16:00"))


def test_single_person_whole_active_window() -> None:
    active = [span("9:00", "17:00")]
    assert compute_common_free_slots([[]], active, 480) == (span("9:00", "17:00"),)
    assert compute_common_free_slots([[]], active, 481) == ()


def test_disjoint_active_windows_have_no_slots() -> None:
    active = [span("9:00", "12:00"), span("13:00", "17:00")]
    assert compute_common_free_slots([[], []], active, 0) == ()
    assert compute_common_free_slots([[span("9:00", "9:30")], []], active, 30) == ()


@pytest.mark.parametrize(
    ("duration", "expected"),
    [(0, (FULL_DAY,)), (1440, (FULL_DAY,)), (1441, ())],
)
def test_zero_people(duration: int, expected: tuple[Interval, ...]) -> None:
    assert compute_common_free_slots([], [], duration) == expected


def test_increasing_duration_never_adds_slots() -> None:
    durations = [0, 15, 29, 30, 31, 60, 90, 91, 480]
    results = {
        duration: set(compute_common_free_slots(HANDOUT_BUSY, HANDOUT_ACTIVE, duration))
        for duration in durations
    }
    for shorter, longer in zip(durations, durations[1:]):
        assert results[longer] <= results[shorter]


def test_result_trace_complement_round_trip() -> None:
    result = find_common_slots(build_handout_people(), min_duration=0)
    assert complement_intervals(result.free_slots) == result.global_unavailable
    assert all(is_merged_timeline(timeline) for timeline in result.unavailable)
    assert result.shared_window == span("9:00", "18:30")
    assert result.total_free_minutes == 90 + 30 + 60 + 30
    assert result.has_slots
    assert not find_common_slots(build_handout_people(), min_duration=120).has_slots


def test_scheduler_logs_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="groupslots"):
        GroupScheduler().find(build_handout_people())
    assert "Scheduling 2 people" in caplog.text
    assert "4 long enough" in caplog.text


def test_default_config_uses_thirty_minutes() -> None:
    assert GroupScheduler().config.min_duration == 30


@pytest.mark.parametrize("value", [-1, -30])
def test_negative_duration_is_rejected(value: int) -> None:
    with pytest.raises(NegativeDuration):
        compute_common_free_slots([], [], value)
    with pytest.raises(NegativeDuration):
        SchedulerConfig(min_duration=value)


def test_non_integer_duration_is_rejected() -> None:
    with pytest.raises(NegativeDuration, match="integer"):
        SchedulerConfig(min_duration=1.5)  # type: ignore[arg-type]


def test_mismatched_person_count() -> None:
    with pytest.raises(MismatchedPersonCount, match="2 people"):
        compute_common_free_slots(HANDOUT_BUSY, HANDOUT_ACTIVE[:1], 30)


def test_invalid_active_window_names_person() -> None:
    with pytest.raises(InvalidActiveWindow, match="person 1"):
        compute_common_free_slots([[], []], [(540, 600), (700, 600)], 30)


def test_invalid_busy_interval_names_person() -> None:
    with pytest.raises(InvalidInterval, match="person 0"):
        compute_common_free_slots([[(600, 1441)]], [(0, 1440)], 30)


def test_build_people_keeps_zero_length_busy_as_no_op() -> None:
    people = build_people([[(600, 600)]], [(540, 720)])
    assert people == (Person(active=Interval(540, 720), busy=(Interval(600, 600),)),)
    assert compute_common_free_slots([[(600, 600)]], [(540, 720)], 0) == (Interval(540, 720),)
