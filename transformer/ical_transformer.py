"""iCalendar transformer for timetable sessions."""

import hashlib
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event, vRecur

from timetable import config
from timetable.grid import slot_bounds
from timetable.models import Session

from .base import BaseTransformer

logger = logging.getLogger(__name__)


class ICalTransformer(BaseTransformer):
    """Transformer that converts sessions to iCalendar format."""

    UID_DOMAIN = "timetable.local"

    def __init__(self, timezone_name: Optional[str] = config.ICAL_TIMEZONE) -> None:
        """Initialize the iCalendar transformer.

        Args:
            timezone_name: IANA zone for event times. None writes floating
                local times.
        """
        self._calendar: Optional[Calendar] = None
        self._timezone_name = timezone_name
        self._tz = ZoneInfo(timezone_name) if timezone_name else None

    def _generate_uid(self, session: Session, start_date: date, week: Optional[int] = None) -> str:
        """Generate a unique identifier for an event.

        Args:
            session: The session.
            start_date: Start date of the semester.
            week: Week number when a session is split into single events.

        Returns:
            Unique identifier string.
        """
        unique_string = (
            f"{session.title}-{session.weekday}-{session.start_slot}-"
            f"{session.location}-{start_date}"
        )
        if week is not None:
            unique_string += f"-w{week}"
        return hashlib.md5(unique_string.encode()).hexdigest() + "@" + self.UID_DOMAIN

    def _session_date(self, session: Session, start_date: date, week: int) -> date:
        """Calendar date of a session in a given semester week."""
        return start_date + timedelta(days=(week - 1) * 7 + session.weekday - 1)

    @staticmethod
    def _weekly_interval(weeks: Sequence[int]) -> Optional[int]:
        """Common step between active weeks, or None if they are irregular."""
        if len(weeks) < 2:
            return 1
        steps = {second - first for first, second in zip(weeks, weeks[1:])}
        if len(steps) == 1:
            return steps.pop()
        return None

    def _build_event(
        self,
        session: Session,
        day: date,
        bounds: tuple[time, time],
        uid: str
    ) -> Event:
        ical_event = Event()
        ical_event.add("uid", uid)
        ical_event.add("dtstart", datetime.combine(day, bounds[0], tzinfo=self._tz))
        ical_event.add("dtend", datetime.combine(day, bounds[1], tzinfo=self._tz))
        ical_event.add("dtstamp", datetime.now(timezone.utc))
        ical_event.add("summary", session.title)

        if session.location:
            ical_event.add("location", session.location)

        # Only flat colors are meaningful to calendar clients
        if session.color and session.color.startswith("#"):
            ical_event.add("color", session.color)

        return ical_event

    def transform(self, sessions: Sequence[Session], start_date: date) -> Calendar:
        """Transform sessions into iCalendar format.

        Sessions whose active weeks have a constant step become one
        recurring event; others are written as one event per active week.

        Args:
            sessions: Sessions to transform.
            start_date: First day (Monday) of semester week 1.

        Returns:
            iCalendar Calendar object.
        """
        if isinstance(start_date, datetime):
            start_date = start_date.date()

        self._calendar = Calendar()
        self._calendar.add("prodid", "-//Timetable//timetable-store//EN")
        self._calendar.add("version", "2.0")
        self._calendar.add("calscale", "GREGORIAN")
        self._calendar.add("method", "PUBLISH")
        self._calendar.add("x-wr-calname", "Timetable")
        if self._timezone_name:
            self._calendar.add("x-wr-timezone", self._timezone_name)

        for session in sessions:
            bounds = slot_bounds(session.start_slot, session.duration)
            if bounds is None:
                logger.warning(
                    "Skipping '%s': slots %d+%d are outside the slot table",
                    session.title, session.start_slot, session.duration
                )
                continue
            if not session.active_weeks:
                continue

            weeks = session.active_weeks
            interval = self._weekly_interval(weeks)

            if interval is not None:
                ical_event = self._build_event(
                    session,
                    self._session_date(session, start_date, weeks[0]),
                    bounds,
                    self._generate_uid(session, start_date)
                )
                if len(weeks) > 1:
                    ical_event.add("rrule", vRecur({
                        "freq": "weekly",
                        "interval": interval,
                        "count": len(weeks)
                    }))
                self._calendar.add_component(ical_event)
            else:
                for week in weeks:
                    self._calendar.add_component(self._build_event(
                        session,
                        self._session_date(session, start_date, week),
                        bounds,
                        self._generate_uid(session, start_date, week)
                    ))

        return self._calendar

    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.

        Args:
            output_path: Path to the output file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")

        with open(output_path, "wb") as f:
            f.write(self._calendar.to_ical())
