"""Lessons and the first-in-first-out schedule that holds them."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from segmentation_fit.roster import Roster


@dataclass
class Lesson:
    """A fitness lesson on a given date and time slot, with its enrolled participants."""

    date: str
    day: str
    time_slot: str
    enrolled: Roster = field(default_factory=Roster)


class EmptyScheduleError(Exception):
    """Raised when a lesson is taken from an empty schedule."""


class Schedule:
    """Queue of lessons kept in insertion order."""

    def __init__(self, lessons: Iterable[Lesson] = ()) -> None:
        self._lessons: deque[Lesson] = deque(lessons)

    def add(self, lesson: Lesson) -> None:
        """Append a lesson at the end of the schedule."""
        self._lessons.append(lesson)

    def pop(self) -> Lesson:
        """Remove and return the first lesson."""
        if not self._lessons:
            raise EmptyScheduleError("the schedule has no lessons")
        return self._lessons.popleft()

    def find(self, date: str, time_slot: str) -> Lesson | None:
        """Return the first lesson on ``date`` in ``time_slot``, if any."""
        return next(
            (
                lesson
                for lesson in self._lessons
                if lesson.date == date and lesson.time_slot == time_slot
            ),
            None,
        )

    def remove_if(self, predicate: Callable[[Lesson], bool]) -> list[Lesson]:
        """Remove every lesson matching ``predicate`` and return them in order."""
        removed = [lesson for lesson in self._lessons if predicate(lesson)]
        if removed:
            self._lessons = deque(
                lesson for lesson in self._lessons if not any(lesson is r for r in removed)
            )
        return removed

    def __len__(self) -> int:
        return len(self._lessons)

    def __iter__(self) -> Iterator[Lesson]:
        return iter(list(self._lessons))

    def __getitem__(self, index: int) -> Lesson:
        return self._lessons[index]

    def __repr__(self) -> str:
        return f"Schedule({list(self._lessons)!r})"