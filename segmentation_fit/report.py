"""Monthly report of archived lessons, ranked by number of participants."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

Ask = Callable[[str], str]
Out = Callable[[str], object]

# Field widths match the layout of the history file: date, day, time slot.
_HEADER = re.compile(r"([^;]{1,10});([^;]{1,14});([^;]{1,9});\s*([+-]?\d+)")
_DATE = re.compile(r"\s*([+-]?\d+)/\s*([+-]?\d+)/\s*([+-]?\d+)")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_CONTINUE = "Premi INVIO per continuare..."


@dataclass(frozen=True)
class HistoryEntry:
    """An archived lesson and the number of participants it had."""

    date: str
    day: str
    time_slot: str
    participants: int

    @property
    def period(self) -> tuple[int, int] | None:
        """Return ``(month, year)`` of the lesson, or None if the date is unreadable."""
        match = _DATE.match(self.date)
        if match is None:
            return None
        _, month, year = (int(part) for part in match.groups())
        return month, year


def read_history(path: str | Path) -> list[HistoryEntry]:
    """Read the lesson headers of a history file, skipping participant lines.

    Raises OSError if the file cannot be opened.
    """
    entries: list[HistoryEntry] = []
    with open(path, encoding="utf-8") as handle:
        lines = iter(handle)
        for line in lines:
            match = _HEADER.match(line)
            if match is None:
                continue
            lesson_date, day, time_slot, count = match.groups()
            participants = int(count)
            entries.append(HistoryEntry(lesson_date, day, time_slot, participants))
            for _ in range(participants):
                if next(lines, None) is None:
                    break
    return entries


def available_months(entries: Iterable[HistoryEntry]) -> list[tuple[int, int]]:
    """Return the distinct ``(month, year)`` pairs in order of first appearance."""
    seen: list[tuple[int, int]] = []
    for entry in entries:
        period = entry.period
        if period is not None and period not in seen:
            seen.append(period)
    return seen


def _rank(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    """Order by participants, highest first, using pairwise exchanges.

    Ties are not kept in their original order: an exchange can move an
    earlier entry behind a later one with the same count.
    """
    ranked = list(entries)
    for i in range(len(ranked) - 1):
        for j in range(i + 1, len(ranked)):
            if ranked[j].participants > ranked[i].participants:
                ranked[i], ranked[j] = ranked[j], ranked[i]
    return ranked


def monthly_lessons(
    entries: Iterable[HistoryEntry], month: int, year: int
) -> list[HistoryEntry]:
    """Return the lessons of ``month``/``year`` that had participants, most attended first."""
    selected = [
        entry
        for entry in entries
        if entry.period == (month, year) and entry.participants > 0
    ]
    return _rank(selected)


def _to_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def run_report(
    path: str | Path, ask: Ask = input, out: Out = print
) -> list[HistoryEntry]:
    """Console dialogue showing the monthly report; returns the last list shown."""
    shown: list[HistoryEntry] = []
    while True:
        out("\n--- Report Mensile ---")
        out(
            "Visualizza le lezioni di fitness passate, "
            "ordinate per numero di partecipanti."
        )
        try:
            entries = read_history(path)
        except OSError:
            out(f"Errore apertura file {path}")
            ask(_CONTINUE)
            return shown

        months = available_months(entries)
        if not months:
            out(f"Nessun dato disponibile nel file {path}")
            ask(_CONTINUE)
            return shown

        out("\nSeleziona il mese da analizzare:")
        for number, (month, year) in enumerate(months, start=1):
            out(f"{number}) {month:02d}/{year}")
        out("0 - Esci dal Report")

        choice = _to_int(ask("Inserisci il numero della tua scelta: "))
        if choice == 0:
            return shown
        if choice < 0 or choice > len(months):
            out("Scelta non valida.")
            ask(_CONTINUE)
            continue

        month, year = months[choice - 1]
        lessons = monthly_lessons(entries, month, year)
        if not lessons:
            out(f"Nessuna lezione trovata per il mese {month}/{year}.")
            ask(_CONTINUE)
            continue

        shown = lessons
        out(f"\n--- Lezioni {month:02d}/{year} ---")
        for number, entry in enumerate(lessons, start=1):
            out(
                f"{number}) Data: {entry.date} - Giorno: {entry.day} - "
                f"Orario: {entry.time_slot} - Partecipanti: {entry.participants}"
            )

        out("\n1 - Scegli un altro mese")
        out("\n0 - Esci dal Report")
        if ask("\nScelta: ")[:1] == "0":
            return shown