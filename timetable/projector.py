"""Projection of sessions onto the week/day/slot grid."""

import logging
from typing import Iterable

from .grid import DAYS_PER_WEEK, SLOT_PAIR_COUNT
from .models import Session

logger = logging.getLogger(__name__)

OccupancyGrid = list[list[list[int]]]


def week_sessions(sessions: Iterable[Session], week_index: int) -> list[Session]:
    """Sessions active in the week with the given 0-based index."""
    week_number = week_index + 1
    return [session for session in sessions if session.is_active_in(week_number)]


def slot_pair(start_slot: int) -> int:
    """Density bucket of a 1-based start slot (slots 1-2 -> 0, 3-4 -> 1, ...)."""
    return (start_slot - 1) // 2


def occupancy_grid(sessions: Iterable[Session], week_count: int) -> OccupancyGrid:
    """Count sessions per week, weekday and slot pair.

    The grid is indexed ``[week - 1][weekday - 1][bucket]`` with
    ``SLOT_PAIR_COUNT`` buckets per day. A session lasting more than two
    slots also counts towards the following bucket. Weeks beyond
    ``week_count`` and buckets past the end of the day are ignored.

    Args:
        sessions: Sessions to project.
        week_count: Number of semester weeks in the grid.

    Returns:
        Freshly built nested lists of counts.
    """
    grid = [
        [[0] * SLOT_PAIR_COUNT for _ in range(DAYS_PER_WEEK)]
        for _ in range(max(week_count, 0))
    ]

    for session in sessions:
        bucket = slot_pair(session.start_slot)
        buckets = [bucket, bucket + 1] if session.duration > 2 else [bucket]
        for week in session.active_weeks:
            if week > len(grid):
                logger.debug(
                    "Session '%s' week %d outside %d-week grid",
                    session.title, week, len(grid)
                )
                continue
            day = grid[week - 1][session.weekday - 1]
            for index in buckets:
                if index < SLOT_PAIR_COUNT:
                    day[index] += 1

    return grid
