from datetime import date, datetime

import pytest

from segmentation_fit.calendar_store import (
    archive_past_lessons,
    generate_lessons,
    is_past,
    lesson_slot,
    load_lessons,
    save_lessons,
)
from segmentation_fit.roster import Roster
from segmentation_fit.schedule import Lesson, Schedule


def _lesson(lesson_date, day, slot, names=()):
    return Lesson(lesson_date, day, slot, Roster(names))


@pytest.mark.parametrize(
    "weekday, expected",
    [
        (1, ("Lunedi", "10-12", 10)),
        (3, ("Mercoledi", "16-18", 16)),
        (5, ("Venerdi", "16-18", 16)),
        (6, ("Sabato", "10-12", 10)),
    ],
)
def test_lesson_slot_known_days(weekday, expected):
    assert tuple(lesson_slot(weekday)) == expected


@pytest.mark.parametrize("weekday", [0, 2, 4, 7, -1])
def test_lesson_slot_other_days(weekday):
    assert lesson_slot(weekday) is None


def test_generate_lessons_from_third_march_2025():
    schedule = Schedule()
    added = generate_lessons(schedule, date(2025, 3, 3))
    assert len(added) == 17
    assert len(schedule) == 17
    first = schedule[0]
    assert (first.date, first.day, first.time_slot) == ("03/03/2025", "Lunedi", "10-12")
    assert (schedule[1].date, schedule[1].day, schedule[1].time_slot) == (
        "05/03/2025",
        "Mercoledi",
        "16-18",
    )
    last = schedule[16]
    assert (last.date, last.day) == ("31/03/2025", "Lunedi")
    assert all(len(lesson.enrolled) == 0 for lesson in schedule)


def test_generate_lessons_skips_duplicates():
    schedule = Schedule([_lesson("05/03/2025", "Mercoledi", "16-18", ["anna"])])
    added = generate_lessons(schedule, date(2025, 3, 3))
    assert len(added) == 16
    assert len(schedule) == 17
    assert list(schedule[0].enrolled) == ["anna"]
    assert generate_lessons(schedule, date(2025, 3, 3)) == []
    assert len(schedule) == 17


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2025, 3, 3, 9, 59), False),
        (datetime(2025, 3, 3, 10, 0), False),
        (datetime(2025, 3, 3, 10, 1), True),
        (datetime(2026, 1, 1), True),
    ],
)
def test_is_past_morning_slot(now, expected):
    assert is_past("03/03/2025", "10-12", now) is expected


def test_is_past_afternoon_slot():
    assert is_past("05/03/2025", "16-18", datetime(2025, 3, 5, 15)) is False
    assert is_past("05/03/2025", "16-18", datetime(2025, 3, 5, 17)) is True


def test_is_past_unknown_slot_or_bad_date():
    now = datetime(2030, 1, 1)
    assert is_past("03/03/2025", "12-14", now) is False
    assert is_past("not a date", "10-12", now) is False


def test_is_past_normalises_overflowing_day():
    # 32/01/2025 is 01/02/2025
    assert is_past("32/01/2025", "10-12", datetime(2025, 2, 1, 9)) is False
    assert is_past("32/01/2025", "10-12", datetime(2025, 2, 1, 11)) is True


def test_load_lessons_reads_headers_and_participants(tmp_path):
    path = tmp_path / "lezioni.txt"
    path.write_text(
        "05/03/2025;Mercoledi;16-18;2\nanna\nbruno\n07/03/2025;Venerdi;16-18;0\n",
        encoding="utf-8",
    )
    schedule = Schedule()
    added = load_lessons(schedule, path)
    assert len(added) == 2
    first, second = schedule
    assert (first.date, first.day, first.time_slot) == ("05/03/2025", "Mercoledi", "16-18")
    assert list(first.enrolled) == ["anna", "bruno"]
    assert (second.date, len(second.enrolled)) == ("07/03/2025", 0)


def test_load_lessons_creates_missing_file(tmp_path):
    path = tmp_path / "nuovo.txt"
    schedule = Schedule()
    assert load_lessons(schedule, path) == []
    assert path.exists()
    assert path.read_text(encoding="utf-8") == ""


def test_load_lessons_skips_malformed_lines(tmp_path):
    path = tmp_path / "lezioni.txt"
    path.write_text(
        "Data;Giorno;Orario;NumeroIscritti\nrandom text\n03/03/2025;Lunedi;10-12;1\nanna\n",
        encoding="utf-8",
    )
    schedule = Schedule()
    load_lessons(schedule, path)
    assert len(schedule) == 1
    assert list(schedule[0].enrolled) == ["anna"]


def test_load_lessons_drops_participants_beyond_capacity(tmp_path):
    path = tmp_path / "lezioni.txt"
    names = [f"utente{i}" for i in range(1, 26)]
    path.write_text(
        "03/03/2025;Lunedi;10-12;25\n" + "".join(f"{n}\n" for n in names)
        + "05/03/2025;Mercoledi;16-18;0\n",
        encoding="utf-8",
    )
    schedule = Schedule()
    load_lessons(schedule, path)
    assert len(schedule) == 2
    assert list(schedule[0].enrolled) == names[:20]
    assert schedule[1].date == "05/03/2025"


def test_save_lessons_writes_newest_participant_first(tmp_path):
    path = tmp_path / "out.txt"
    schedule = Schedule(
        [
            _lesson("03/03/2025", "Lunedi", "10-12", ["anna", "bruno"]),
            _lesson("05/03/2025", "Mercoledi", "16-18"),
        ]
    )
    save_lessons(schedule, path)
    assert path.read_text(encoding="utf-8") == (
        "03/03/2025;Lunedi;10-12;2\nbruno\nanna\n05/03/2025;Mercoledi;16-18;0\n"
    )
    assert list(schedule[0].enrolled) == ["anna", "bruno"]


def test_booking_saved_to_output_matches_oracle(tmp_path):
    output = tmp_path / "caso_test_1_output.txt"
    oracle = tmp_path / "caso_test_1_oracle.txt"
    schedule = Schedule()
    load_lessons(schedule, output)
    assert len(schedule) == 0
    generate_lessons(schedule, date(2025, 3, 3))
    schedule[0].enrolled.push("Utente_Test1")
    save_lessons(schedule, output)
    save_lessons(schedule, oracle)
    assert output.read_text(encoding="utf-8") == oracle.read_text(encoding="utf-8")

    reloaded = Schedule()
    load_lessons(reloaded, output)
    assert len(reloaded) == 17
    assert list(reloaded[0].enrolled) == ["Utente_Test1"]


def test_round_trip_reverses_roster_order(tmp_path):
    path = tmp_path / "lezioni.txt"
    save_lessons(Schedule([_lesson("03/03/2025", "Lunedi", "10-12", ["a", "b", "c"])]), path)
    reloaded = Schedule()
    load_lessons(reloaded, path)
    assert list(reloaded[0].enrolled) == ["c", "b", "a"]


def test_archive_past_lessons_moves_them_to_history(tmp_path):
    history = tmp_path / "storico.txt"
    history.write_text("01/03/2025;Sabato;10-12;0\n", encoding="utf-8")
    participants = [f"utente{i}" for i in range(1, 4)]
    schedule = Schedule(
        [
            _lesson("03/03/2025", "Lunedi", "10-12", participants),
            _lesson("20/03/2025", "Giovedi", "16-18"),
            _lesson("05/03/2025", "Mercoledi", "16-18", ["anna"]),
        ]
    )
    removed = archive_past_lessons(schedule, history, datetime(2025, 3, 10, 12))
    assert [lesson.date for lesson in removed] == ["03/03/2025", "05/03/2025"]
    assert [lesson.date for lesson in schedule] == ["20/03/2025"]
    assert history.read_text(encoding="utf-8") == (
        "01/03/2025;Sabato;10-12;0\n"
        "03/03/2025;Lunedi;10-12;3\nutente3\nutente2\nutente1\n"
        "05/03/2025;Mercoledi;16-18;1\nanna\n"
    )
    assert list(removed[0].enrolled) == participants


def test_archive_past_lessons_empty_schedule_touches_nothing(tmp_path):
    history = tmp_path / "storico.txt"
    assert archive_past_lessons(Schedule(), history, datetime(2025, 3, 10)) == []
    assert not history.exists()


def test_archive_with_no_past_lessons_keeps_schedule(tmp_path):
    history = tmp_path / "storico.txt"
    schedule = Schedule([_lesson("20/03/2025", "Giovedi", "16-18")])
    assert archive_past_lessons(schedule, history, datetime(2025, 3, 10)) == []
    assert len(schedule) == 1
    assert history.read_text(encoding="utf-8") == ""