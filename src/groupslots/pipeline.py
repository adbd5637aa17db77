"""Scheduling pipeline: normalize, aggregate, complement, filter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from groupslots.constants import DEFAULT_MIN_DURATION
from groupslots.errors import (
    InvalidActiveWindow,
    InvalidInterval,
    MismatchedPersonCount,
    NegativeDuration,
)
from groupslots.intervals import clip_interval, complement_intervals, merge_intervals
from groupslots.models import (
    FULL_DAY,
    Interval,
    IntervalLike,
    Person,
    ScheduleResult,
    Timeline,
)

logger = logging.getLogger(__name__)


def normalize_unavailable(busy: Iterable[Interval], active: Interval) -> Timeline:
    """Build one person's full-day unavailable timeline.

    Time before and after the active window is unavailable. Busy intervals are
    clipped to the active window; whatever falls outside it is already covered.

    :param busy: Busy intervals in any order.
    :param active: The person's active window.
    :return: Merged unavailable timeline.
    """
    seeds = [
        Interval(FULL_DAY.start, active.start),
        Interval(active.end, FULL_DAY.end),
    ]
    clipped = [
        part for part in (clip_interval(interval, active) for interval in busy) if part is not None
    ]
    return merge_intervals(seeds + clipped)


def aggregate_unavailable(timelines: Iterable[Timeline]) -> Timeline:
    """Union per-person unavailable timelines into one global timeline."""
    return merge_intervals(interval for timeline in timelines for interval in timeline)


def shared_active_window(active_windows: Iterable[Interval]) -> Interval | None:
    """Intersect every active window.

    :param active_windows: One active window per person.
    :return: The common window, the whole day for an empty group, or ``None``
        when the windows have no minute in common.
    """
    start, end = FULL_DAY.start, FULL_DAY.end
    for window in active_windows:
        start = max(start, window.start)
        end = min(end, window.end)
    if start >= end:
        return None
    return Interval(start, end)


def filter_free_slots(
    free_slots: Iterable[Interval],
    window: Interval | None,
    min_duration: int,
) -> Timeline:
    """Clip free slots to the shared window and drop the short ones.

    Zero-length slots are dropped even when ``min_duration`` is ``0``.

    :param free_slots: Sorted free slots.
    :param window: Shared active window, ``None`` when there is none.
    :param min_duration: Minimum slot length in minutes.
    :return: Slots long enough to meet in, in time order.
    """
    if window is None:
        return ()

    kept: list[Interval] = []
    for slot in free_slots:
        clipped = clip_interval(slot, window)
        if clipped is None:
            continue
        if clipped.minutes >= min_duration:
            kept.append(clipped)
    return tuple(kept)


def validate_min_duration(value: object) -> int:
    """Return ``value`` if it is a non-negative integer number of minutes.

    :raises NegativeDuration: When the duration is negative or not an integer.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise NegativeDuration(f"min_duration must be an integer, got {value!r}")
    if value < 0:
        raise NegativeDuration(f"min_duration must be >= 0, got {value}")
    return value


@dataclass
class SchedulerConfig:
    """Configuration for the group scheduler."""

    min_duration: int = DEFAULT_MIN_DURATION

    def __post_init__(self) -> None:
        validate_min_duration(self.min_duration)


class GroupScheduler:
    """Find the time slots in which a whole group is free."""

    def __init__(self, config: SchedulerConfig | None = None) -> None:
        """Initialize scheduler state.

        :param config: Optional scheduler configuration override.
        """
        self.config = config or SchedulerConfig()

    def find(self, people: Sequence[Person]) -> ScheduleResult:
        """Run every stage for a group of people.

        :param people: Group members; may be empty.
        :return: The final slots along with every intermediate timeline.
        """
        people = tuple(people)
        logger.info(
            "Scheduling %d people (minimum duration %d min)",
            len(people),
            self.config.min_duration,
        )

        unavailable = tuple(normalize_unavailable(person.busy, person.active) for person in people)
        for index, timeline in enumerate(unavailable):
            logger.debug(
                "Person %s unavailable: %s",
                people[index].name or index,
                [interval.as_tuple() for interval in timeline],
            )

        global_unavailable = aggregate_unavailable(unavailable)
        free_slots = complement_intervals(global_unavailable)
        window = shared_active_window(person.active for person in people)
        if window is None:
            logger.info("Active windows do not overlap; no common time exists")

        slots = filter_free_slots(free_slots, window, self.config.min_duration)
        logger.info(
            "Found %d free slots, %d long enough",
            len(free_slots),
            len(slots),
        )

        return ScheduleResult(
            people=people,
            min_duration=self.config.min_duration,
            unavailable=unavailable,
            global_unavailable=global_unavailable,
            free_slots=free_slots,
            shared_window=window,
            slots=slots,
        )


def build_people(
    per_person_busy: Sequence[Sequence[IntervalLike]],
    per_person_active_window: Sequence[IntervalLike],
) -> tuple[Person, ...]:
    """Pair busy lists with active windows, validating every interval.

    :param per_person_busy: Busy intervals per person.
    :param per_person_active_window: One active window per person, same order.
    :return: Validated people.
    :raises MismatchedPersonCount: When the two sequences differ in length.
    :raises InvalidActiveWindow: When an active window is invalid.
    :raises InvalidInterval: When a busy interval is invalid.
    """
    busy_lists = list(per_person_busy)
    active_windows = list(per_person_active_window)
    if len(busy_lists) != len(active_windows):
        raise MismatchedPersonCount(
            f"got busy intervals for {len(busy_lists)} people "
            f"but active windows for {len(active_windows)}"
        )

    people: list[Person] = []
    for index, (busy, active) in enumerate(zip(busy_lists, active_windows)):
        try:
            people.append(Person.build(active, busy))
        except InvalidActiveWindow as exc:
            raise InvalidActiveWindow(f"person {index}: {exc}") from exc
        except InvalidInterval as exc:
            raise InvalidInterval(f"person {index}: busy {exc}") from exc
    return tuple(people)


def find_common_slots(
    people: Sequence[Person],
    min_duration: int = DEFAULT_MIN_DURATION,
) -> ScheduleResult:
    """
    Convenience function for a one-off scheduling request.

    Args:
        people: Group members
        min_duration: Minimum slot length in minutes

    Returns:
        ScheduleResult
    """
    return GroupScheduler(SchedulerConfig(min_duration=min_duration)).find(people)


def compute_common_free_slots(
    per_person_busy: Sequence[Sequence[IntervalLike]],
    per_person_active_window: Sequence[IntervalLike],
    min_duration_minutes: int,
) -> tuple[Interval, ...]:
    """Return every slot of at least ``min_duration_minutes`` in which all people are free.

    :param per_person_busy: Busy intervals per person, unsorted and possibly overlapping.
    :param per_person_active_window: One active window per person, same order.
    :param min_duration_minutes: Minimum slot length in minutes.
    :return: Slots in ascending time order.
    :raises ScheduleError: When the request violates the input contract.
    """
    config = SchedulerConfig(min_duration=min_duration_minutes)
    people = build_people(per_person_busy, per_person_active_window)
    return GroupScheduler(config).find(people).slots
