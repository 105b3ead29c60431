"""Data model for recurring timetabled sessions."""

import dataclasses
import itertools
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

_session_ids = itertools.count(1)


def _next_session_id() -> int:
    return next(_session_ids)


@dataclass
class Session:
    """A single class recurring on a subset of semester weeks."""

    title: str
    location: str
    start_slot: int  # 1-based index into the slot table
    duration: int  # number of consecutive slots
    weekday: int  # 1-7: Monday-Sunday
    active_weeks: tuple[int, ...] = field(default_factory=tuple)  # 1-based week numbers
    color: Optional[str] = field(default=None, compare=False)
    session_id: int = field(
        init=False, default_factory=_next_session_id, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        self.active_weeks = tuple(sorted({int(week) for week in self.active_weeks}))
        if not 1 <= self.weekday <= 7:
            raise ValueError(f"Weekday must be 1-7 (Mon-Sun), got {self.weekday}")
        if self.start_slot < 1:
            raise ValueError(f"Start slot must be at least 1, got {self.start_slot}")
        if self.duration < 1:
            raise ValueError(f"Duration must be at least 1, got {self.duration}")
        if self.active_weeks and self.active_weeks[0] < 1:
            raise ValueError("Week numbers must be at least 1")

    # Copies are distinct sessions and draw a fresh id
    def __copy__(self) -> "Session":
        return dataclasses.replace(self)

    def __deepcopy__(self, memo: dict) -> "Session":
        return dataclasses.replace(self)

    @property
    def slot_key(self) -> tuple[int, int]:
        """Day and start slot the session occupies."""
        return self.weekday, self.start_slot

    @property
    def match_key(self) -> tuple[str, int, int]:
        """Triple used for delete and promote matching."""
        return self.title, self.weekday, self.start_slot

    def is_active_in(self, week_number: int) -> bool:
        return week_number in self.active_weeks

    def to_dict(self) -> dict[str, Any]:
        """Plain record for persistence collaborators."""
        record: dict[str, Any] = {
            "title": self.title,
            "location": self.location,
            "startSlot": self.start_slot,
            "duration": self.duration,
            "weekday": self.weekday,
            "activeWeeks": list(self.active_weeks),
        }
        if self.color is not None:
            record["color"] = self.color
        return record

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "Session":
        """Build a session from a plain record.

        Both camelCase (``startSlot``, ``activeWeeks``) and snake_case keys
        are accepted.

        Args:
            record: Mapping with session fields.

        Returns:
            New Session instance.

        Raises:
            ValueError: If a required field is missing or out of range.
        """
        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in record:
                    return record[key]
            return default

        title = pick("title")
        if not title:
            raise ValueError(f"Session record has no title: {record!r}")

        start_slot = pick("startSlot", "start_slot", "start")
        weekday = pick("weekday", "week")
        if start_slot is None or weekday is None:
            raise ValueError(f"Session record '{title}' needs a weekday and a start slot")

        weeks: Iterable[int] = pick("activeWeeks", "active_weeks", "weeks", default=())

        return cls(
            title=str(title),
            location=str(pick("location", default="")),
            start_slot=int(start_slot),
            duration=int(pick("duration", default=1)),
            weekday=int(weekday),
            active_weeks=tuple(weeks),
        )
