"""Subscriber accounts and the chained hash table that stores them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

MAX_FIELD_LENGTH = 50
DEFAULT_TABLE_SIZE = 10

_HASH_MASK = 0xFFFFFFFF


@dataclass
class Subscriber:
    """A registered gym member with the number of lessons still available."""

    username: str
    password: str
    remaining_lessons: int = 0


def bucket_index(key: str, size: int) -> int:
    """Return the slot of ``key`` in a table of ``size`` slots.

    Multiplicative string hash with factor 31 on 32-bit unsigned arithmetic;
    bytes above 127 count as signed characters.
    """
    if size <= 0:
        raise ValueError("table size must be positive")
    value = 0
    for byte in key.encode("utf-8"):
        char = byte - 256 if byte >= 128 else byte
        value = (value * 31 + char) & _HASH_MASK
    return value % size


def _clip(text: str) -> str:
    return text[: MAX_FIELD_LENGTH - 1]


class SubscriberTable:
    """Hash table of subscribers keyed by user name, with separate chaining.

    New entries go at the head of their chain; iteration walks the slots in
    order and each chain from newest to oldest.
    """

    def __init__(self, size: int = DEFAULT_TABLE_SIZE) -> None:
        if size <= 0:
            raise ValueError("table size must be positive")
        self.size = size
        self._buckets: list[list[tuple[str, Subscriber]]] = [[] for _ in range(size)]

    def add(self, subscriber: Subscriber) -> bool:
        """Store a copy of ``subscriber`` unless its user name is already present.

        Returns True if it was added, False if the key already existed.
        """
        key = subscriber.username
        bucket = self._buckets[bucket_index(key, self.size)]
        if any(stored_key == key for stored_key, _ in bucket):
            return False
        stored = Subscriber(
            username=_clip(subscriber.username),
            password=_clip(subscriber.password),
            remaining_lessons=subscriber.remaining_lessons,
        )
        bucket.insert(0, (key, stored))
        return True

    def get(self, key: str) -> Subscriber | None:
        """Return the stored subscriber for ``key``, or None if absent."""
        bucket = self._buckets[bucket_index(key, self.size)]
        return next((sub for stored_key, sub in bucket if stored_key == key), None)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __iter__(self) -> Iterator[Subscriber]:
        return iter([sub for bucket in self._buckets for _, sub in bucket])

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def __repr__(self) -> str:
        return f"SubscriberTable(size={self.size}, entries={list(self)!r})"


def _strtok(text: str, start: int, delimiters: str) -> tuple[str | None, int]:
    """Return the next token from ``start`` and the position after it."""
    pos = start
    while pos < len(text) and text[pos] in delimiters:
        pos += 1
    if pos >= len(text):
        return None, len(text)
    end = pos
    while end < len(text) and text[end] not in delimiters:
        end += 1
    return text[pos:end], min(end + 1, len(text))


def _atoi(text: str) -> int:
    stripped = text.lstrip(" \t\n\r\f\v")
    sign = 1
    if stripped[:1] in ("+", "-"):
        sign = -1 if stripped[0] == "-" else 1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not char.isdigit():
            break
        digits += char
    return sign * int(digits) if digits else 0


def _parse_line(line: str) -> Subscriber | None:
    username, pos = _strtok(line, 0, ";")
    password, pos = _strtok(line, pos, ";")
    lessons, _ = _strtok(line, pos, "\n")
    if username is None or password is None or lessons is None:
        return None
    return Subscriber(
        username=username[:MAX_FIELD_LENGTH],
        password=password[:MAX_FIELD_LENGTH],
        remaining_lessons=_atoi(lessons),
    )


def load_subscribers(path: str | Path) -> SubscriberTable:
    """Read ``username;password;lessons`` lines into a new table.

    A missing file yields an empty table; malformed lines are skipped.
    """
    table = SubscriberTable(DEFAULT_TABLE_SIZE)
    try:
        with open(path, encoding="utf-8") as handle:
            for line in handle:
                subscriber = _parse_line(line)
                if subscriber is not None:
                    table.add(subscriber)
    except FileNotFoundError:
        pass
    return table


def save_subscribers(table: SubscriberTable, path: str | Path) -> None:
    """Write every subscriber as a ``username;password;lessons`` line."""
    with open(path, "w", encoding="utf-8") as handle:
        for subscriber in table:
            handle.write(
                f"{subscriber.username};{subscriber.password};"
                f"{subscriber.remaining_lessons}\n"
            )