"""Interval primitives shared by the scheduling stages."""

from __future__ import annotations

from typing import Iterable

from groupslots.constants import DAY_END, DAY_START
from groupslots.models import Interval


def merge_intervals(intervals: Iterable[Interval]) -> tuple[Interval, ...]:
    """Merge intervals into a sorted, non-overlapping timeline.

    Touching intervals (``end == next.start``) are merged into one block.
    Zero-length intervals are dropped.

    :param intervals: Intervals in any order.
    :return: Minimal sorted timeline covering the same minutes.
    """
    ordered = sorted(interval for interval in intervals if not interval.is_empty)
    if not ordered:
        return ()

    merged: list[Interval] = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
        else:
            merged.append(current)

    return tuple(merged)


def clip_interval(interval: Interval, window: Interval) -> Interval | None:
    """Clip an interval to a window.

    :param interval: Interval to clip.
    :param window: Bounding window.
    :return: The overlapping part, or ``None`` when it is empty.
    """
    start = max(interval.start, window.start)
    end = min(interval.end, window.end)
    if start >= end:
        return None
    return Interval(start, end)


def complement_intervals(
    timeline: Iterable[Interval],
    *,
    day_start: int = DAY_START,
    day_end: int = DAY_END,
) -> tuple[Interval, ...]:
    """Invert a merged timeline over the day.

    :param timeline: Sorted, merged intervals.
    :param day_start: First minute of the day.
    :param day_end: Day boundary (exclusive).
    :return: The gaps between the intervals, in order.
    """
    gaps: list[Interval] = []
    prev = day_start
    for interval in timeline:
        if prev < interval.start:
            gaps.append(Interval(prev, interval.start))
        prev = max(prev, interval.end)
    if prev < day_end:
        gaps.append(Interval(prev, day_end))
    return tuple(gaps)


def is_merged_timeline(timeline: Iterable[Interval]) -> bool:
    """Return whether a timeline is sorted with no overlapping or touching entries."""
    previous: Interval | None = None
    for interval in timeline:
        if interval.is_empty:
            return False
        if previous is not None and interval.start <= previous.end:
            return False
        previous = interval
    return True
