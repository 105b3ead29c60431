"""Fixed daily time-slot grid and weekday labels."""

from datetime import time
from typing import Optional

DAYS_PER_WEEK = 7

# Buckets of the coarse per-day density indicator (slots grouped in pairs).
SLOT_PAIR_COUNT = 5

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

SLOT_TIMES: list[tuple[time, time]] = [
    (time(8, 15), time(9, 0)),
    (time(9, 10), time(9, 55)),
    (time(10, 10), time(10, 55)),
    (time(11, 5), time(11, 50)),
    (time(14, 30), time(15, 15)),
    (time(15, 25), time(16, 10)),
    (time(16, 20), time(17, 5)),
    (time(17, 15), time(18, 0)),
    (time(18, 10), time(18, 55)),
    (time(19, 30), time(20, 15)),
    (time(20, 25), time(21, 10)),
    (time(21, 20), time(22, 5)),
]


def weekday_label(weekday: int) -> str:
    """Return the label of a 1-based weekday, or the number itself if unknown."""
    if 1 <= weekday <= len(WEEKDAY_LABELS):
        return WEEKDAY_LABELS[weekday - 1]
    return str(weekday)


def slot_bounds(start_slot: int, duration: int = 1) -> Optional[tuple[time, time]]:
    """Clock span covered by ``duration`` slots starting at ``start_slot``.
    
    Args:
        start_slot: 1-based index into ``SLOT_TIMES``.
        duration: Number of consecutive slots.
        
    Returns:
        Tuple of (start of first slot, end of last slot), or None when the
        span does not fit in the slot table.
    """
    last_slot = start_slot + max(duration, 1) - 1
    if start_slot < 1 or last_slot > len(SLOT_TIMES):
        return None
    return SLOT_TIMES[start_slot - 1][0], SLOT_TIMES[last_slot - 1][1]
