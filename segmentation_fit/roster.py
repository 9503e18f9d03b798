"""Bounded list of participants enrolled in a lesson."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

MAX_PARTICIPANTS = 20
NO_PARTICIPANT = ""


class RosterFullError(Exception):
    """Raised when a participant is added to a roster that is already full."""


class Roster:
    """Last-in-first-out collection of participant names with a fixed capacity.

    Iteration yields names in enrolment order, oldest first.
    """

    capacity = MAX_PARTICIPANTS

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = []
        for name in names:
            self.push(name)

    def push(self, name: str) -> None:
        """Add a participant on top; raise RosterFullError if there is no room."""
        if self.is_full():
            raise RosterFullError(
                f"roster already holds {self.capacity} participants"
            )
        self._names.append(name)

    def pop(self) -> str:
        """Remove and return the most recently enrolled participant."""
        if not self._names:
            raise IndexError("pop from an empty roster")
        return self._names.pop()

    def peek(self) -> str:
        """Return the most recent participant, or an empty string if none."""
        return self._names[-1] if self._names else NO_PARTICIPANT

    def remove(self, name: str) -> bool:
        """Remove the most recent enrolment of ``name``; report whether one was found."""
        for position in range(len(self._names) - 1, -1, -1):
            if self._names[position] == name:
                del self._names[position]
                return True
        return False

    def is_full(self) -> bool:
        return len(self._names) >= self.capacity

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Roster):
            return NotImplemented
        return self._names == other._names

    def __repr__(self) -> str:
        return f"Roster({self._names!r})"