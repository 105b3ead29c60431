from datetime import date, datetime

import pytest

from transformer import ICalTransformer, TextTransformer


@pytest.fixture
def semester(make):
    return [
        make(title="Algebra", weekday=2, start_slot=1, duration=2, weeks=[1, 3, 5]),
        make(title="Lab", weekday=4, start_slot=5, duration=1, weeks=[1, 2, 5], location=""),
        make(title="Seminar", weekday=1, start_slot=3, duration=1, weeks=[4]),
        make(title="Night", weekday=1, start_slot=12, duration=2, weeks=[1]),
    ]


def _events(calendar, summary):
    return [e for e in calendar.walk("VEVENT") if str(e["SUMMARY"]) == summary]


def test_regular_weeks_become_one_recurring_event(semester):
    calendar = ICalTransformer().transform(semester, date(2026, 3, 2))

    (algebra,) = _events(calendar, "Algebra")
    rrule = algebra["RRULE"].to_ical()

    assert algebra.decoded("dtstart") == datetime(2026, 3, 3, 8, 15)
    assert algebra.decoded("dtend") == datetime(2026, 3, 3, 9, 55)
    assert b"FREQ=WEEKLY" in rrule
    assert b"INTERVAL=2" in rrule
    assert b"COUNT=3" in rrule
    assert str(algebra["LOCATION"]) == "A-101"


def test_irregular_weeks_become_single_events(semester):
    calendar = ICalTransformer().transform(semester, date(2026, 3, 2))

    labs = _events(calendar, "Lab")

    assert [e.decoded("dtstart") for e in labs] == [
        datetime(2026, 3, 5, 14, 30),
        datetime(2026, 3, 12, 14, 30),
        datetime(2026, 4, 2, 14, 30),
    ]
    assert len({str(e["UID"]) for e in labs}) == 3
    assert all("RRULE" not in e and "LOCATION" not in e for e in labs)


def test_single_week_has_no_rule(semester):
    calendar = ICalTransformer().transform(semester, datetime(2026, 3, 2))

    (seminar,) = _events(calendar, "Seminar")

    assert "RRULE" not in seminar
    assert seminar.decoded("dtstart") == datetime(2026, 3, 23, 10, 10)


def test_sessions_outside_slot_table_are_skipped(semester):
    calendar = ICalTransformer().transform(semester, date(2026, 3, 2))

    assert _events(calendar, "Night") == []
    assert len(calendar.walk("VEVENT")) == 5


def test_flat_colors_are_exported(make):
    session = make(title="Art", weeks=[1])
    session.color = "#99CCFF"
    gradient = make(title="Music", weeks=[1])
    gradient.color = "linear-gradient(90deg,#ff953f,#ffb449)"

    calendar = ICalTransformer().transform([session, gradient], date(2026, 3, 2))

    assert str(_events(calendar, "Art")[0]["COLOR"]) == "#99CCFF"
    assert "COLOR" not in _events(calendar, "Music")[0]


def test_timezone_is_applied(make):
    calendar = ICalTransformer("Europe/Warsaw").transform([make(weeks=[1])], date(2026, 3, 2))

    (event,) = calendar.walk("VEVENT")

    assert str(calendar["X-WR-TIMEZONE"]) == "Europe/Warsaw"
    assert event.decoded("dtstart").tzinfo is not None


def test_ical_save(tmp_path, semester):
    transformer = ICalTransformer()
    with pytest.raises(RuntimeError):
        transformer.save(str(tmp_path / "empty.ics"))

    transformer.transform(semester, date(2026, 3, 2))
    output = tmp_path / "semester.ics"
    transformer.save(str(output))

    assert output.read_bytes().startswith(b"BEGIN:VCALENDAR")


def test_text_shows_top_of_each_stack(make):
    sessions = [
        make(title="A", weekday=1, start_slot=1, weeks=[1]),
        make(title="B", weekday=1, start_slot=1, weeks=[1]),
        make(title="C", weekday=3, start_slot=5, duration=1, weeks=[1], location=""),
        make(title="D", weekday=2, weeks=[2]),
    ]

    text = TextTransformer(0).transform(sessions, date(2026, 3, 2))

    assert text.startswith("Week 1\nMon 02.03\n")
    assert "08:15-09:55  A @ A-101 (+1)\n" in text
    assert "B @" not in text
    assert "Tue 03.03\n  -\n" in text
    assert "14:30-15:15  C\n" in text
    assert "D @" not in text


def test_text_save(tmp_path, make):
    transformer = TextTransformer(1)
    with pytest.raises(RuntimeError):
        transformer.save(str(tmp_path / "week.txt"))

    transformer.transform([make(title="D", weekday=2, weeks=[2])], date(2026, 3, 2))
    output = tmp_path / "week.txt"
    transformer.save(str(output))

    assert "Tue 10.03\n" in output.read_text(encoding="utf-8")
    assert "D @ A-101" in output.read_text(encoding="utf-8")
