"""In-memory timetable engine: sessions, week projection, conflicts and colors."""

from .colors import PALETTES, ColorAssigner, ColorMemo
from .conflicts import ConflictMemo, ConflictResolver, find_conflicts
from .models import Session
from .projector import occupancy_grid, week_sessions
from .store import ScheduleStore

__all__ = [
    "PALETTES",
    "ColorAssigner",
    "ColorMemo",
    "ConflictMemo",
    "ConflictResolver",
    "ScheduleStore",
    "Session",
    "find_conflicts",
    "occupancy_grid",
    "week_sessions",
]
