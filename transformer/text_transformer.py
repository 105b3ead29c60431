"""Plain-text rendering of one timetable week."""

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from timetable.conflicts import find_conflicts
from timetable.grid import DAYS_PER_WEEK, slot_bounds, weekday_label
from timetable.models import Session
from timetable.projector import week_sessions

from .base import BaseTransformer


class TextTransformer(BaseTransformer):
    """Renders the sessions of a single week as a day-by-day listing.

    Sessions stacked on the same day and start slot are shown once, the
    first one in list order on top, with the number of hidden sessions
    as ``(+n)``.
    """

    def __init__(self, week_index: int = 0) -> None:
        """Initialize the text transformer.

        Args:
            week_index: 0-based index of the week to render.
        """
        self._week_index = week_index
        self._text: Optional[str] = None

    def _format_session(self, session: Session, stacked: int) -> str:
        last_slot = session.start_slot + session.duration - 1
        bounds = slot_bounds(session.start_slot, session.duration)
        clock = f"{bounds[0]:%H:%M}-{bounds[1]:%H:%M}" if bounds else "--:-----:--"
        line = f"  {session.start_slot:>2}-{last_slot:<2} {clock}  {session.title}"
        if session.location:
            line += f" @ {session.location}"
        if stacked:
            line += f" (+{stacked})"
        return line

    def transform(self, sessions: Sequence[Session], start_date: date) -> str:
        """Render the configured week.

        Args:
            sessions: Full session list, in display order.
            start_date: First day (Monday) of semester week 1.

        Returns:
            Multi-line text.
        """
        if isinstance(start_date, datetime):
            start_date = start_date.date()

        visible = week_sessions(sessions, self._week_index)
        lines = [f"Week {self._week_index + 1}"]

        for weekday in range(1, DAYS_PER_WEEK + 1):
            try:
                day = start_date + timedelta(weeks=self._week_index, days=weekday - 1)
                header = f"{weekday_label(weekday)} {day:%d.%m}"
            except OverflowError:
                header = weekday_label(weekday)

            shown: set[tuple[int, int]] = set()
            day_lines: list[str] = []
            for session in visible:
                if session.weekday != weekday or session.slot_key in shown:
                    continue
                shown.add(session.slot_key)
                stack = find_conflicts(sessions, session, self._week_index)
                day_lines.append(self._format_session(session, len(stack) - 1))

            lines.append(header)
            lines.extend(day_lines or ["  -"])

        self._text = "\n".join(lines) + "\n"
        return self._text

    def save(self, output_path: str) -> None:
        """Write the rendered week to a text file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._text is None:
            raise RuntimeError("No text data. Call transform() first.")

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self._text)
