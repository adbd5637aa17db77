"""
groupslots - Find the time slots in which a whole group is free.

Each person has busy intervals and a daily active window, in minutes from
midnight. Time outside a person's active window counts as busy. The result is
every slot inside the group's shared active window that is long enough.

Example:
    from groupslots import compute_common_free_slots

    slots = compute_common_free_slots(
        [[(420, 510), (720, 780)], [(540, 630)]],
        [(540, 1140), (540, 1110)],
        30,
    )

    for slot in slots:
        print(slot.start, slot.end)
"""

from .errors import (
    InvalidActiveWindow,
    InvalidInterval,
    MismatchedPersonCount,
    NegativeDuration,
    ScheduleError,
)
from .intervals import complement_intervals, merge_intervals
from .models import Interval, Person, ScheduleResult
from .pipeline import (
    GroupScheduler,
    SchedulerConfig,
    compute_common_free_slots,
    find_common_slots,
)

try:
    from ._version import __version__, __version_tuple__
except ImportError:
    __version__ = "0.0.0+unknown"
    __version_tuple__ = (0, 0, 0, "+unknown")

__all__ = [
    "GroupScheduler",
    "Interval",
    "InvalidActiveWindow",
    "InvalidInterval",
    "MismatchedPersonCount",
    "NegativeDuration",
    "Person",
    "ScheduleError",
    "ScheduleResult",
    "SchedulerConfig",
    "__version__",
    "__version_tuple__",
    "complement_intervals",
    "compute_common_free_slots",
    "find_common_slots",
    "merge_intervals",
]
