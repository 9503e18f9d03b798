"""Lesson calendar persistence, generation of upcoming lessons and archiving."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import NamedTuple

from segmentation_fit.roster import Roster
from segmentation_fit.schedule import Lesson, Schedule

DAYS_AHEAD = 30

_HEADER = re.compile(r"([^;]+);([^;]+);([^;]+);\s*([+-]?\d+)")
_DATE = re.compile(r"\s*([+-]?\d+)/\s*([+-]?\d+)/\s*([+-]?\d+)")
_SLOT_START = {"10-12": 10, "16-18": 16}


class LessonSlot(NamedTuple):
    """Day name, time slot and starting hour of a lesson."""

    day: str
    time_slot: str
    start_hour: int


# Keys follow the 0 = Sunday ... 6 = Saturday numbering.
_WEEKLY_SLOTS = {
    1: LessonSlot("Lunedi", "10-12", 10),
    3: LessonSlot("Mercoledi", "16-18", 16),
    5: LessonSlot("Venerdi", "16-18", 16),
    6: LessonSlot("Sabato", "10-12", 10),
}


def _format_date(day: date) -> str:
    return f"{day.day:02d}/{day.month:02d}/{day.year}"


def _write_lesson(handle, lesson: Lesson) -> None:
    handle.write(
        f"{lesson.date};{lesson.day};{lesson.time_slot};{len(lesson.enrolled)}\n"
    )
    # Participants are written from the most recent enrolment down.
    for name in reversed(list(lesson.enrolled)):
        handle.write(f"{name}\n")


def load_lessons(schedule: Schedule, path: str | Path) -> list[Lesson]:
    """Append the lessons stored in ``path`` to ``schedule``.

    The file is created if it does not exist. Each lesson is a header line
    ``date;day;slot;count`` followed by ``count`` participant lines; lines
    that are not headers are skipped. Participants beyond the roster
    capacity are read but dropped. Returns the lessons added.
    """
    added: list[Lesson] = []
    with open(path, "a+", encoding="utf-8") as handle:
        handle.seek(0)
        lines = iter(handle)
        for line in lines:
            match = _HEADER.match(line)
            if match is None:
                continue
            lesson_date, day, time_slot, count = match.groups()
            roster = Roster()
            for _ in range(int(count)):
                participant = next(lines, None)
                if participant is None:
                    break
                if not roster.is_full():
                    roster.push(participant.split("\n", 1)[0])
            lesson = Lesson(lesson_date, day, time_slot, roster)
            schedule.add(lesson)
            added.append(lesson)
    return added


def save_lessons(schedule: Schedule, path: str | Path) -> None:
    """Overwrite ``path`` with every lesson of ``schedule`` and its participants."""
    with open(path, "w", encoding="utf-8") as handle:
        for lesson in schedule:
            _write_lesson(handle, lesson)


def lesson_slot(weekday: int) -> LessonSlot | None:
    """Return the lesson held on ``weekday`` (0 = Sunday, 6 = Saturday), if any."""
    return _WEEKLY_SLOTS.get(weekday)


def generate_lessons(schedule: Schedule, today: date | None = None) -> list[Lesson]:
    """Add empty lessons for the next 30 days, skipping date/slot pairs already present.

    Returns the lessons added, in date order.
    """
    start = today if today is not None else date.today()
    if isinstance(start, datetime):
        start = start.date()
    added: list[Lesson] = []
    for offset in range(DAYS_AHEAD):
        day = start + timedelta(days=offset)
        slot = lesson_slot(day.isoweekday() % 7)
        if slot is None:
            continue
        text = _format_date(day)
        if schedule.find(text, slot.time_slot) is None:
            lesson = Lesson(text, slot.day, slot.time_slot)
            schedule.add(lesson)
            added.append(lesson)
    return added


def _lesson_start(day: int, month: int, year: int, hour: int) -> datetime:
    """Build a datetime, carrying out-of-range days and months over."""
    years, month_index = divmod(year * 12 + (month - 1), 12)
    return datetime(years, month_index + 1, 1) + timedelta(days=day - 1, hours=hour)


def is_past(date_text: str, time_slot: str, now: datetime | None = None) -> bool:
    """Tell whether the lesson on ``date_text`` (dd/mm/yyyy) has already started.

    Unparsable dates and unknown time slots count as not past.
    """
    match = _DATE.match(date_text)
    if match is None:
        return False
    start_hour = _SLOT_START.get(time_slot)
    if start_hour is None:
        return False
    day, month, year = (int(part) for part in match.groups())
    try:
        start = _lesson_start(day, month, year, start_hour)
    except (ValueError, OverflowError):
        return False
    current = now if now is not None else datetime.now()
    return start < current


def archive_past_lessons(
    schedule: Schedule, path: str | Path, now: datetime | None = None
) -> list[Lesson]:
    """Move lessons that have already started from ``schedule`` to the history file.

    The lessons are appended to ``path``; nothing is done for an empty
    schedule. Returns the archived lessons in schedule order.
    """
    if len(schedule) == 0:
        return []
    current = now if now is not None else datetime.now()
    with open(path, "a", encoding="utf-8") as handle:
        removed = schedule.remove_if(
            lambda lesson: is_past(lesson.date, lesson.time_slot, current)
        )
        for lesson in removed:
            _write_lesson(handle, lesson)
    return removed