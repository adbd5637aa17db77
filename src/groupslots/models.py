"""Data models for intervals, people, and scheduling results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

from groupslots.constants import DAY_END, DAY_START
from groupslots.errors import InvalidActiveWindow, InvalidInterval


def _is_minute(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, order=True)
class Interval:
    """Half-open range ``[start, end)`` in minutes from midnight."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not _is_minute(self.start) or not _is_minute(self.end):
            raise InvalidInterval(
                f"interval bounds must be integer minutes, got ({self.start!r}, {self.end!r})"
            )
        if not DAY_START <= self.start <= DAY_END or not DAY_START <= self.end <= DAY_END:
            raise InvalidInterval(
                f"interval ({self.start}, {self.end}) is outside [{DAY_START}, {DAY_END}]"
            )
        if self.start > self.end:
            raise InvalidInterval(f"interval ({self.start}, {self.end}) ends before it starts")

    @classmethod
    def of(cls, value: IntervalLike) -> Interval:
        """Coerce an ``Interval`` or a ``(start, end)`` pair.

        :param value: Interval or two-item sequence of minutes.
        :return: Validated interval.
        :raises InvalidInterval: When the value is not a valid interval.
        """
        if isinstance(value, Interval):
            return value
        if isinstance(value, (str, bytes)):
            raise InvalidInterval(f"expected a (start, end) pair, got {value!r}")
        try:
            start, end = value
        except (TypeError, ValueError) as exc:
            raise InvalidInterval(f"expected a (start, end) pair, got {value!r}") from exc
        return cls(start, end)

    @property
    def minutes(self) -> int:
        """Length of the interval in minutes."""
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)


IntervalLike = Union[Interval, Sequence[int]]

FULL_DAY = Interval(DAY_START, DAY_END)


@dataclass(frozen=True)
class Person:
    """A group member with busy intervals and a daily active window."""

    active: Interval
    busy: tuple[Interval, ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        try:
            active = Interval.of(self.active)
        except InvalidInterval as exc:
            raise InvalidActiveWindow(f"active window: {exc}") from exc
        try:
            items = tuple(self.busy)
        except TypeError as exc:
            raise InvalidInterval(
                f"busy must be an iterable of intervals, got {self.busy!r}"
            ) from exc
        object.__setattr__(self, "active", active)
        object.__setattr__(self, "busy", tuple(Interval.of(item) for item in items))

    @classmethod
    def build(
        cls,
        active: IntervalLike,
        busy: Iterable[IntervalLike] = (),
        name: str | None = None,
    ) -> Person:
        """Build a person from raw intervals.

        :param active: Active window as an interval or ``(start, end)`` pair.
        :param busy: Busy intervals in any order.
        :param name: Optional display name.
        :return: Immutable person record.
        :raises InvalidActiveWindow: When the active window is invalid.
        :raises InvalidInterval: When a busy interval is invalid.
        """
        return cls(active=active, busy=busy, name=name)


Timeline = tuple[Interval, ...]


@dataclass(frozen=True)
class ScheduleResult:
    """Every intermediate timeline of one scheduling request."""

    people: tuple[Person, ...]
    min_duration: int
    unavailable: tuple[Timeline, ...]  # one per person, same order as people
    global_unavailable: Timeline
    free_slots: Timeline  # before shared-window clipping and duration filtering
    shared_window: Interval | None  # None when the active windows do not overlap
    slots: Timeline = field(default=())

    @property
    def has_slots(self) -> bool:
        return bool(self.slots)

    @property
    def total_free_minutes(self) -> int:
        """Sum of the lengths of the final slots."""
        return sum(slot.minutes for slot in self.slots)
