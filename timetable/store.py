"""Schedule store owning the session list and the viewed-week cursor."""

import dataclasses
import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Optional, Union

from . import config
from .colors import ColorAssigner, ColorMemo, palette_at
from .conflicts import ConflictMemo, ConflictResolver, find_conflicts
from .grid import DAYS_PER_WEEK
from .models import Session
from .projector import OccupancyGrid, occupancy_grid, week_sessions

logger = logging.getLogger(__name__)

DateInput = Union[date, datetime, str, None]
Listener = Callable[["ScheduleStore"], None]

ONE_WEEK = timedelta(weeks=1)


def _sort_key(session: Session) -> tuple[int, int]:
    return session.weekday, session.start_slot


class ScheduleStore:
    """Authoritative session list plus the semester week cursor.

    All mutation of the list goes through the store's methods. Each
    mutating method clears the conflict memo before returning, and the
    derived views (``week_sessions``, ``occupancy``) are rebuilt on every
    read, so nothing observed after a mutation is stale.

    Store operations never raise on malformed input: unknown dates fall
    back to "now", out-of-range weeks give empty projections, and lookups
    for unknown sessions give empty results.
    """

    def __init__(
        self,
        week_count: int = config.DEFAULT_WEEK_COUNT,
        palette_index: int = config.DEFAULT_PALETTE_INDEX,
        clock: Callable[[], datetime] = datetime.now
    ) -> None:
        """Initialize an empty store.

        Args:
            week_count: Number of weeks in the semester.
            palette_index: Selected color scheme.
            clock: Source of the current time.
        """
        self._clock = clock
        self._week_count = week_count
        self._sessions: list[Session] = []
        self._listeners: list[Listener] = []

        self._conflict_memo = ConflictMemo()
        self._resolver = ConflictResolver(
            self._conflict_memo,
            lambda: self._sessions,
            lambda: self._current_week_index
        )

        self._palette_index = palette_index
        self._color_memo = ColorMemo()
        self._colors = ColorAssigner(self._color_memo, palette_at(palette_index))

        self._start_date: datetime = clock()
        self._is_started = False
        self._original_week_index = 0
        self._current_week_index = 0
        self._current_month = self._start_date.month

    # -- state -------------------------------------------------------------

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(self._sessions)

    @property
    def start_date(self) -> datetime:
        return self._start_date

    @property
    def is_started(self) -> bool:
        return self._is_started

    @property
    def week_count(self) -> int:
        return self._week_count

    @property
    def original_week_index(self) -> int:
        return self._original_week_index

    @property
    def current_week_index(self) -> int:
        return self._current_week_index

    @property
    def current_month(self) -> int:
        return self._current_month

    @property
    def palette_index(self) -> int:
        return self._palette_index

    @property
    def today_weekday_index(self) -> int:
        """0-based weekday of "now" (0 = Monday, 6 = Sunday)."""
        return self._clock().weekday()

    @property
    def conflict_memo(self) -> ConflictMemo:
        return self._conflict_memo

    @property
    def color_memo(self) -> ColorMemo:
        return self._color_memo

    # -- observers ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every completed mutation.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- calendar ----------------------------------------------------------

    def _coerce_date(self, value: DateInput) -> datetime:
        # Time zones are not tracked; aware inputs are read as local wall time.
        if isinstance(value, datetime):
            return value.replace(tzinfo=None)
        if isinstance(value, date):
            return datetime.combine(value, datetime.min.time())
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip()).replace(tzinfo=None)
            except ValueError:
                pass
        logger.warning("Unusable start date %r, falling back to now", value)
        return self._clock()

    def set_start_date(self, value: DateInput) -> None:
        """Set the semester start and jump to the week containing "now".

        Args:
            value: Date, datetime or ISO string. Future dates give week 0.
        """
        self._start_date = self._coerce_date(value)
        elapsed = self._clock() - self._start_date
        self._is_started = elapsed > timedelta(0)
        self._original_week_index = max(elapsed // ONE_WEEK, 0)
        logger.debug(
            "Semester starts %s, original week index %d",
            self._start_date.date(), self._original_week_index
        )
        self.set_current_week(self._original_week_index)

    def _week_start(self, week_index: int) -> Optional[datetime]:
        try:
            return self._start_date + week_index * ONE_WEEK
        except OverflowError:
            logger.warning("Week index %d is outside the calendar range", week_index)
            return None

    def set_current_week(self, week_index: int) -> None:
        """Move the viewed-week cursor; no bounds checking is done."""
        self._conflict_memo.invalidate()
        self._current_week_index = week_index
        week_start = self._week_start(week_index)
        if week_start is not None:
            self._current_month = week_start.month
        self._changed()

    def set_week_count(self, week_count: int) -> None:
        self._week_count = week_count
        self._changed()

    def current_week_days(self) -> list[int]:
        """Day-of-month numbers of the seven days in the viewed week."""
        week_start = self._week_start(self._current_week_index)
        if week_start is None:
            return []
        try:
            return [
                (week_start + timedelta(days=offset)).day
                for offset in range(DAYS_PER_WEEK)
            ]
        except OverflowError:
            logger.warning("Viewed week runs past the calendar range")
            return []

    # -- list mutation -----------------------------------------------------

    def set_session_list(self, sessions: Iterable[Session]) -> None:
        """Replace the whole list, sorted by weekday then start slot.

        The sort is stable, so sessions sharing a day and slot keep their
        input order. Colors are reassigned from scratch.
        """
        self._sessions = sorted(sessions, key=_sort_key)
        self._conflict_memo.invalidate()
        self._colors.assign(self._sessions)
        logger.debug("Session list replaced (%d sessions)", len(self._sessions))
        self._changed()

    def add_session(self, session: Session) -> None:
        self.set_session_list([*self._sessions, session])

    def _remove_matching(self, session: Session) -> int:
        key = session.match_key
        before = len(self._sessions)
        self._sessions = [item for item in self._sessions if item.match_key != key]
        return before - len(self._sessions)

    def delete_session(self, session: Session) -> None:
        """Remove every session with the same title, weekday and start slot."""
        self._conflict_memo.invalidate()
        removed = self._remove_matching(session)
        logger.debug("Deleted %d session(s) matching %r", removed, session.match_key)
        self._changed()

    def delete_session_by_title(self, title: str) -> None:
        """Remove every session with the given title."""
        self._conflict_memo.invalidate()
        self._sessions = [item for item in self._sessions if item.title != title]
        self._changed()

    def promote_to_top(self, session: Session) -> None:
        """Make ``session`` the first entry, dropping others matching its triple."""
        self._conflict_memo.invalidate()
        self._remove_matching(session)
        self._sessions.insert(0, session)
        session.color = self._colors.color_for(session)
        self._changed()

    def update_session(self, session: Session, **changes: Any) -> bool:
        """Change fields of a stored session in place.

        Args:
            session: A session currently held by the store.
            **changes: Field values to set, e.g. ``location="A-101"``.

        Returns:
            True if the session was found and updated, False otherwise.
        """
        target = next(
            (item for item in self._sessions if item is session),
            None
        )
        if target is None:
            logger.warning("Session %r is not in the store", session.title)
            return False

        allowed = {f.name for f in dataclasses.fields(Session)} - {"session_id", "color"}
        unknown = set(changes) - allowed
        if unknown:
            logger.warning("Ignoring unknown session fields: %s", ", ".join(sorted(unknown)))
            changes = {name: value for name, value in changes.items() if name in allowed}

        try:
            candidate = dataclasses.replace(target, **changes)
        except (TypeError, ValueError) as e:
            logger.warning("Rejected update of %r: %s", target.title, e)
            return False

        for name in changes:
            setattr(target, name, getattr(candidate, name))
        self._sessions.sort(key=_sort_key)
        self._conflict_memo.invalidate()
        target.color = self._colors.color_for(target)
        self._changed()
        return True

    # -- colors ------------------------------------------------------------

    def set_palette_index(self, palette_index: int) -> None:
        """Select another color scheme and recolor every session."""
        self._palette_index = palette_index
        self._colors.set_palette(palette_at(palette_index))
        self._colors.assign(self._sessions)
        self._changed()

    def color_for(self, session: Session) -> str:
        return self._colors.color_for(session)

    # -- derived views -----------------------------------------------------

    @property
    def week_sessions(self) -> list[Session]:
        """Sessions active in the viewed week."""
        return week_sessions(self._sessions, self._current_week_index)

    @property
    def occupancy(self) -> OccupancyGrid:
        return occupancy_grid(self._sessions, self._week_count)

    def conflicts_for(self, session: Optional[Session]) -> list[Session]:
        """Memoized stack of sessions sharing ``session``'s day and slot this week."""
        return self._resolver.conflicts_for(session)

    def find_conflicts(self, session: Optional[Session]) -> list[Session]:
        """Same as ``conflicts_for`` but always rescans the list."""
        return find_conflicts(self._sessions, session, self._current_week_index)
