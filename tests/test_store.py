import dataclasses
from datetime import date, datetime

from timetable.models import Session
from timetable.store import ScheduleStore


def test_start_date_in_past_selects_current_week(store):
    store.set_start_date(date(2026, 3, 2))

    assert store.is_started
    assert store.original_week_index == 1
    assert store.current_week_index == 1
    assert store.current_month == 3


def test_start_date_accepts_iso_strings(store):
    store.set_start_date("2026-02-23")

    assert store.start_date == datetime(2026, 2, 23)
    assert store.original_week_index == 2


def test_future_start_date_gives_week_zero(store):
    store.set_start_date(date(2026, 9, 1))

    assert not store.is_started
    assert store.original_week_index == 0
    assert store.current_week_index == 0
    assert store.current_month == 9


def test_garbage_start_date_falls_back_to_now(store, clock):
    store.set_start_date("not-a-date")

    assert store.start_date == clock.now
    assert not store.is_started
    assert store.current_week_index == 0

    store.set_start_date(None)
    assert store.current_week_index == 0


def test_set_current_week_keeps_original_index(store):
    store.set_start_date(date(2026, 3, 2))
    store.set_current_week(5)

    assert store.current_week_index == 5
    assert store.original_week_index == 1
    assert store.current_month == 4


def test_current_week_days(store):
    store.set_start_date(date(2026, 3, 2))
    store.set_current_week(4)

    assert store.current_week_days() == [30, 31, 1, 2, 3, 4, 5]


def test_out_of_range_week_is_tolerated(store, make):
    store.set_start_date(date(2026, 3, 2))
    store.set_session_list([make(weeks=[1])])

    store.set_current_week(10 ** 9)

    assert store.current_week_index == 10 ** 9
    assert store.week_sessions == []
    assert store.current_week_days() == []
    assert store.current_month == 3


def test_today_weekday_index(store):
    # 2026-03-11 is a Wednesday
    assert store.today_weekday_index == 2


def test_set_session_list_sorts_by_weekday_then_slot(store, make):
    late = make(title="Late", weekday=3, start_slot=5)
    early = make(title="Early", weekday=1, start_slot=2)

    store.set_session_list([late, early])

    assert store.sessions == (early, late)
    assert [s.weekday for s in store.sessions] == [1, 3]


def test_sort_is_stable_for_shared_slots(store, make):
    first = make(title="First", weekday=2, start_slot=3)
    second = make(title="Second", weekday=2, start_slot=3)
    monday = make(title="Monday", weekday=1, start_slot=7)

    store.set_session_list([first, second, monday])

    assert [s.title for s in store.sessions] == ["Monday", "First", "Second"]


def test_store_owns_its_list(store, make):
    sessions = [make(title="A")]
    store.set_session_list(sessions)

    sessions.append(make(title="B"))

    assert len(store.sessions) == 1


def test_delete_session_removes_every_triple_match(store, make):
    target = make(title="X", weekday=2, start_slot=4, weeks=[1])
    duplicate = make(title="X", weekday=2, start_slot=4, weeks=[2, 3])
    other_slot = make(title="X", weekday=2, start_slot=6)
    other_title = make(title="Y", weekday=2, start_slot=4)
    store.set_session_list([target, duplicate, other_slot, other_title])

    store.delete_session(make(title="X", weekday=2, start_slot=4, weeks=[9]))

    assert store.sessions == (other_title, other_slot)


def test_delete_session_by_title(store, make):
    store.set_session_list([
        make(title="X", weekday=1),
        make(title="Y", weekday=2),
        make(title="X", weekday=5, start_slot=9),
    ])

    store.delete_session_by_title("X")

    assert [s.title for s in store.sessions] == ["Y"]


def test_delete_unknown_session_is_a_no_op(store, make):
    store.set_session_list([make(title="X")])

    store.delete_session(make(title="Nope"))
    store.delete_session_by_title("Nope")

    assert len(store.sessions) == 1


def test_promote_to_top(store, make):
    monday = make(title="Monday", weekday=1)
    bottom = make(title="Stack", weekday=3, start_slot=5, weeks=[1])
    twin = make(title="Stack", weekday=3, start_slot=5, weeks=[2])
    store.set_session_list([monday, bottom, twin])

    store.promote_to_top(twin)

    assert store.sessions == (twin, monday)
    assert store.sessions[0] is twin


def test_add_session_keeps_order(store, make):
    store.set_session_list([make(title="Wed", weekday=3)])

    store.add_session(make(title="Mon", weekday=1))

    assert [s.title for s in store.sessions] == ["Mon", "Wed"]
    assert all(s.color for s in store.sessions)


def test_update_session_changes_fields_in_place(store, make):
    session = make(title="Algebra", weekday=5)
    store.set_session_list([session, make(title="Art", weekday=2)])

    assert store.update_session(session, weekday=1, location="Hall", active_weeks=[3, 1])

    assert store.sessions[0] is session
    assert session.weekday == 1
    assert session.location == "Hall"
    assert session.active_weeks == (1, 3)


def test_update_session_rejects_invalid_values(store, make):
    session = make(weekday=5)
    store.set_session_list([session])

    assert not store.update_session(session, weekday=9)
    assert session.weekday == 5


def test_update_session_ignores_unknown_fields(store, make):
    session = make(location="Old")
    store.set_session_list([session])

    assert store.update_session(session, instructor="Smith", location="New")
    assert session.location == "New"
    assert not hasattr(session, "instructor")


def test_update_unknown_session(store, make):
    store.set_session_list([make()])

    assert not store.update_session(make(), location="Elsewhere")


def test_listeners_run_after_each_mutation(store, make):
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(len(s.sessions)))

    store.set_session_list([make(title="A"), make(title="B", weekday=2)])
    store.delete_session_by_title("A")
    store.set_current_week(3)
    unsubscribe()
    store.delete_session_by_title("B")

    assert seen == [2, 1, 1]


def test_derived_views_follow_mutations(store, make):
    store.set_start_date(date(2026, 3, 9))
    session = make(title="A", weekday=2, start_slot=3, weeks=[1])
    store.set_session_list([session])

    assert store.week_sessions == [session]
    assert store.occupancy[0][1][1] == 1

    store.delete_session(session)

    assert store.week_sessions == []
    assert store.occupancy[0][1][1] == 0


def test_default_configuration(clock):
    store = ScheduleStore(clock=clock)

    assert store.week_count == 20
    assert store.palette_index == 0
    assert isinstance(store.sessions, tuple)


def test_session_is_plain_record(store):
    store.set_session_list([Session.from_dict({
        "title": "Algebra", "startSlot": 1, "weekday": 1, "activeWeeks": [1],
    })])

    assert store.sessions[0].title == "Algebra"


def test_update_session_edits_the_given_copy(store, make):
    first = make(title="Algebra", weekday=1)
    twin = dataclasses.replace(first)
    store.set_session_list([first, twin])

    assert store.update_session(twin, location="Hall")

    assert twin.location == "Hall"
    assert first.location == "A-101"


def test_promoted_newcomer_is_colored(store, make):
    store.set_session_list([make(title="A", weekday=1)])
    newcomer = make(title="New", weekday=3)

    store.promote_to_top(newcomer)

    assert store.sessions[0] is newcomer
    assert newcomer.color == store.color_for(make(title="New"))
    assert newcomer.color is not None
    assert store.sessions[1].color != newcomer.color
