"""Exceptions raised when a scheduling request violates the input contract."""

from __future__ import annotations


class ScheduleError(ValueError):
    """Base class for rejected scheduling requests."""


class InvalidInterval(ScheduleError):
    """An interval has ``start > end`` or a bound outside the day."""


class InvalidActiveWindow(InvalidInterval):
    """A person's active window is not a valid interval."""


class MismatchedPersonCount(ScheduleError):
    """Busy lists and active windows were given for different numbers of people."""


class NegativeDuration(ScheduleError):
    """The minimum meeting duration is negative or not an integer."""
