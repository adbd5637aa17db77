"""Conversion between ``HH:MM`` text and minutes from midnight."""

from __future__ import annotations

import re
from typing import Sequence, Union

from groupslots.constants import DAY_END, DAY_START, MINUTES_PER_HOUR
from groupslots.errors import InvalidInterval
from groupslots.models import Interval

_HHMM_RE = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")
_RANGE_SEPARATORS = ("-", " to ")

TimeLike = Union[str, int]


class TimeFormatError(ValueError):
    """Raised when text cannot be read as a time of day or a time range."""


def parse_hhmm(text: str) -> int:
    """Convert ``H:MM`` or ``HH:MM`` to minutes from midnight.

    ``24:00`` is accepted as the end of the day.

    :param text: Time of day.
    :return: Minutes from midnight in ``[0, 1440]``.
    :raises TimeFormatError: When the text is malformed or out of range.
    """
    if not isinstance(text, str):
        raise TimeFormatError(f"expected HH:MM text, got {text!r}")
    match = _HHMM_RE.match(text.strip())
    if match is None:
        raise TimeFormatError(f"invalid time {text!r}; expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= MINUTES_PER_HOUR:
        raise TimeFormatError(f"invalid time {text!r}; minutes must be 00-59")
    total = hours * MINUTES_PER_HOUR + minutes
    if total > DAY_END:
        raise TimeFormatError(f"invalid time {text!r}; must be between 00:00 and 24:00")
    return total


def format_hhmm(minutes: int) -> str:
    """Render minutes from midnight as zero-padded ``HH:MM``."""
    if not DAY_START <= minutes <= DAY_END:
        raise TimeFormatError(f"{minutes} minutes is outside the day")
    hours, rest = divmod(minutes, MINUTES_PER_HOUR)
    return f"{hours:02d}:{rest:02d}"


def parse_time(value: TimeLike) -> int:
    """Accept ``HH:MM`` text or an integer number of minutes."""
    if isinstance(value, bool):
        raise TimeFormatError(f"expected HH:MM text or minutes, got {value!r}")
    if isinstance(value, int):
        if not DAY_START <= value <= DAY_END:
            raise TimeFormatError(f"{value} minutes is outside the day")
        return value
    return parse_hhmm(value)


def _split_range(text: str) -> tuple[str, str]:
    for separator in _RANGE_SEPARATORS:
        if separator in text:
            start, _, end = text.partition(separator)
            return start, end
    raise TimeFormatError(f"invalid range {text!r}; expected HH:MM-HH:MM")


def parse_interval(value: str | Sequence[TimeLike]) -> Interval:
    """Read a time range such as ``"09:00-10:30"`` or ``("09:00", "10:30")``.

    :param value: Range text or a two-item sequence of times.
    :return: Validated interval.
    :raises TimeFormatError: When either bound is malformed or the range is reversed.
    """
    if isinstance(value, str):
        start_text, end_text = _split_range(value)
        bounds: Sequence[TimeLike] = (start_text, end_text)
    else:
        bounds = value
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
            raise TimeFormatError(f"invalid range {value!r}; expected [start, end]")

    start, end = (parse_time(bound) for bound in bounds)
    try:
        return Interval(start, end)
    except InvalidInterval as exc:
        raise TimeFormatError(f"invalid range {value!r}: {exc}") from exc


def format_interval(interval: Interval) -> str:
    """Render an interval as ``[HH:MM, HH:MM]``."""
    return f"[{format_hhmm(interval.start)}, {format_hhmm(interval.end)}]"
