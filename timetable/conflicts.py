"""Conflict lookup for sessions sharing a day and start slot."""

import logging
from typing import Callable, Optional, Sequence

from .models import Session

logger = logging.getLogger(__name__)


def find_conflicts(
    sessions: Sequence[Session],
    session: Optional[Session],
    week_index: int
) -> list[Session]:
    """Scan for sessions occupying the same day and start slot in a week.

    The queried session is part of its own result when it is active in
    that week.

    Args:
        sessions: Full session list.
        session: Session to look up.
        week_index: 0-based index of the viewed week.

    Returns:
        Matching sessions in list order (empty if ``session`` is None).
    """
    if session is None:
        return []
    week_number = week_index + 1
    return [
        item for item in sessions
        if item.is_active_in(week_number) and item.slot_key == session.slot_key
    ]


class ConflictMemo:
    """Per-week cache of conflict lookups keyed by session identity."""

    def __init__(self) -> None:
        self._entries: dict[int, list[Session]] = {}

    def get(self, session: Session) -> Optional[list[Session]]:
        return self._entries.get(session.session_id)

    def put(self, session: Session, conflicts: list[Session]) -> None:
        self._entries[session.session_id] = conflicts

    def invalidate(self) -> None:
        """Drop every cached lookup."""
        if self._entries:
            logger.debug("Clearing conflict memo (%d entries)", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session: object) -> bool:
        return isinstance(session, Session) and session.session_id in self._entries


class ConflictResolver:
    """Memoized conflict queries against a store's list and week cursor."""

    def __init__(
        self,
        memo: ConflictMemo,
        sessions: Callable[[], Sequence[Session]],
        week_index: Callable[[], int]
    ) -> None:
        """Initialize the resolver.

        Args:
            memo: Cache owned by the store; the store invalidates it.
            sessions: Returns the current full session list.
            week_index: Returns the current 0-based week index.
        """
        self._memo = memo
        self._sessions = sessions
        self._week_index = week_index

    def conflicts_for(self, session: Optional[Session]) -> list[Session]:
        """Sessions stacked on the same day and start slot this week.

        Repeated calls for the same session instance return the same list
        object until the memo is invalidated.
        """
        if session is None:
            return []
        cached = self._memo.get(session)
        if cached is not None:
            return cached
        conflicts = find_conflicts(self._sessions(), session, self._week_index())
        self._memo.put(session, conflicts)
        return conflicts
