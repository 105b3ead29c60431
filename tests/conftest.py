from datetime import datetime

import pytest

from timetable.models import Session
from timetable.store import ScheduleStore


class FrozenClock:
    """Callable clock that tests can move around."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_session(title="Algebra", weekday=1, start_slot=1, duration=2,
                 weeks=(1,), location="A-101"):
    return Session(
        title=title,
        location=location,
        start_slot=start_slot,
        duration=duration,
        weekday=weekday,
        active_weeks=tuple(weeks),
    )


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 3, 11, 10, 0))


@pytest.fixture
def store(clock):
    return ScheduleStore(week_count=20, palette_index=1, clock=clock)


@pytest.fixture
def make():
    return make_session
