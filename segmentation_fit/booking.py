"""Booking and cancelling lessons, both as plain operations and as console dialogues."""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from pathlib import Path

from segmentation_fit.roster import MAX_PARTICIPANTS
from segmentation_fit.schedule import Lesson, Schedule
from segmentation_fit.subscribers import (
    MAX_FIELD_LENGTH,
    Subscriber,
    load_subscribers,
    save_subscribers,
)

Ask = Callable[[str], str]
Out = Callable[[str], object]

GUEST_FEE = "15€"

_MAX_INPUT = MAX_FIELD_LENGTH - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_BACK_TO_MENU = "Premi INVIO per tornare al menu principale..."
_BACK_TO_AREA = "Premi INVIO per tornare alla tua area riservata..."
_ANYTHING_ELSE = "Possiamo fare altro per te? Premi INVIO..."

MSG_FULL = "Mi dispiace, la lezione è al completo!"
MSG_NO_LESSONS_LEFT = (
    "Non hai lezioni rimanenti. Rinnova l'abbonamento o acquista più lezioni."
)
MSG_ALREADY_ENROLLED = "Sei già iscritto a questa lezione."
MSG_INVALID_CHOICE = "Scelta non valida."


class BookingError(Exception):
    """Raised when a booking or a lesson selection cannot be carried out."""


def _to_int(text: str) -> int:
    """Read a leading integer the way a lenient console parser does; 0 if none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _line(text: str, limit: int | None = None) -> str:
    """Keep the first line of an answer, optionally clipped to ``limit`` characters."""
    first = text.split("\n", 1)[0]
    return first[:limit] if limit is not None else first


def _confirmed(answer: str) -> bool:
    stripped = answer.strip()
    return stripped[:1] in ("s", "S")


def format_lessons(schedule: Schedule) -> str:
    """Return the numbered list of lessons with their availability."""
    rows = ["", "Lezioni di fitness disponibili:"]
    for number, lesson in enumerate(schedule, start=1):
        taken = len(lesson.enrolled)
        if taken >= MAX_PARTICIPANTS:
            availability = "Posti esauriti"
        else:
            availability = (
                f"Posti disponibili: {MAX_PARTICIPANTS - taken}/{MAX_PARTICIPANTS}"
            )
        rows.append(
            f"{number}) Data: {lesson.date} - Giorno: {lesson.day} - "
            f"Orario: {lesson.time_slot} - {availability}"
        )
    return "\n".join(rows)


def select_lesson(schedule: Schedule, choice: int) -> Lesson:
    """Return the lesson numbered ``choice`` (counting from 1).

    Numbers below 1 select the first lesson; numbers past the end raise
    BookingError, as does an empty schedule.
    """
    if len(schedule) == 0 or choice > len(schedule):
        raise BookingError(MSG_INVALID_CHOICE)
    return schedule[max(choice, 1) - 1]


def enroll_guest(lesson: Lesson, name: str) -> None:
    """Enrol a single-entry guest; raise BookingError if the lesson is full."""
    if lesson.enrolled.is_full():
        raise BookingError(MSG_FULL)
    lesson.enrolled.push(name)


def enroll_subscriber(lesson: Lesson, subscriber: Subscriber) -> None:
    """Enrol a subscriber and use up one of their lessons.

    Raises BookingError if the subscriber has no lessons left, the lesson is
    full, or the subscriber is already enrolled.
    """
    if subscriber.remaining_lessons <= 0:
        raise BookingError(MSG_NO_LESSONS_LEFT)
    if lesson.enrolled.is_full():
        raise BookingError(MSG_FULL)
    if subscriber.username in lesson.enrolled:
        raise BookingError(MSG_ALREADY_ENROLLED)
    lesson.enrolled.push(subscriber.username)
    subscriber.remaining_lessons -= 1


def cancel_enrollment(
    lesson: Lesson, name: str, subscriber: Subscriber | None = None
) -> bool:
    """Remove the most recent enrolment of ``name`` from ``lesson``.

    If it was found and ``subscriber`` is given, the lesson is credited back
    to them. Returns whether an enrolment was removed.
    """
    if not lesson.enrolled.remove(name):
        return False
    if subscriber is not None:
        subscriber.remaining_lessons += 1
    return True


def rewrite_lesson_file(path: str | Path, lesson: Lesson, name: str) -> None:
    """Update the stored calendar after ``name`` left ``lesson``.

    The header of the lesson on the same date gets the current participant
    count, and lines equal to ``name`` under it are dropped; everything else
    is copied unchanged.
    """
    target = Path(path)
    with open(target, encoding="utf-8") as source:
        lines = [line.split("\n", 1)[0] for line in source]

    output: list[str] = []
    in_target = False
    for line in lines:
        if "/" in line and ";" in line:
            in_target = lesson.date in line
            if in_target:
                fields = line.split(";")
                if len(fields) >= 3:
                    line = (
                        f"{fields[0]};{fields[1]};{fields[2]};{len(lesson.enrolled)}"
                    )
            output.append(line)
            continue
        if in_target and line == name:
            continue
        output.append(line)

    temporary = target.with_name(target.name + ".tmp")
    temporary.write_text("".join(f"{line}\n" for line in output), encoding="utf-8")
    os.replace(temporary, target)


def book_lesson(schedule: Schedule, ask: Ask = input, out: Out = print) -> Lesson | None:
    """Console dialogue for a single-entry booking; returns the booked lesson."""
    if len(schedule) == 0:
        out("Non ci sono lezioni disponibili.")
        ask(_BACK_TO_MENU)
        return None

    out("--- Prenota una Lezione di Fitness ---")
    out(format_lessons(schedule))
    out(f"Costo ingresso singolo: {GUEST_FEE}")

    if not _confirmed(ask("\nDesideri prenotare una lezione? (s/n): ")):
        out("Prenotazione annullata.")
        ask(_BACK_TO_MENU)
        return None

    choice = _to_int(ask("Inserisci il numero della lezione a cui vuoi iscriverti: "))
    try:
        lesson = select_lesson(schedule, choice)
    except BookingError as error:
        out(str(error))
        ask(_BACK_TO_MENU)
        return None

    if lesson.enrolled.is_full():
        out(MSG_FULL)
        ask(_BACK_TO_MENU)
        return None

    name = _line(ask("Inserisci il tuo nome per prenotarti: "), _MAX_INPUT)
    try:
        enroll_guest(lesson, name)
    except BookingError:
        out("Errore nella prenotazione.")
        ask(_BACK_TO_MENU)
        return None

    out(f"Prenotazione completata per {name}\nTi è stato addebitato il costo di {GUEST_FEE}")
    ask(_BACK_TO_MENU)
    return lesson


def book_subscriber_lesson(
    schedule: Schedule, subscriber: Subscriber, ask: Ask = input, out: Out = print
) -> Lesson | None:
    """Console dialogue for a subscriber booking; returns the booked lesson."""
    if len(schedule) == 0:
        out("Non ci sono lezioni disponibili.")
        ask(_BACK_TO_AREA)
        return None

    out(format_lessons(schedule))

    prompt = f"\nDesideri prenotare una lezione, {subscriber.username}? (s/n): "
    if not _confirmed(ask(prompt)):
        out("Prenotazione annullata.")
        ask(_BACK_TO_AREA)
        return None

    if subscriber.remaining_lessons <= 0:
        out(MSG_NO_LESSONS_LEFT)
        ask(_BACK_TO_AREA)
        return None

    choice = _to_int(ask("Inserisci il numero della lezione a cui vuoi iscriverti: "))
    try:
        lesson = select_lesson(schedule, choice)
        enroll_subscriber(lesson, subscriber)
    except BookingError as error:
        out(str(error))
        ask(_BACK_TO_AREA)
        return None

    out(f"Prenotazione completata per {subscriber.username}.")
    out(f"Lezioni rimanenti: {subscriber.remaining_lessons}")
    ask(_BACK_TO_AREA)
    return lesson


def cancel_booking(
    schedule: Schedule,
    lessons_path: str | Path,
    subscribers_path: str | Path,
    ask: Ask = input,
    out: Out = print,
) -> bool:
    """Console dialogue to cancel an enrolment; returns whether one was cancelled.

    Subscribers must confirm with their password and get the lesson credited
    back; the stored calendar and subscriber files are updated.
    """
    out("--- Disdici una prenotazione ---")
    if len(schedule) == 0:
        out("Non ci sono lezioni di fitness disponibili.")
        ask(_ANYTHING_ELSE)
        return False

    out(format_lessons(schedule))

    if not _confirmed(ask("\nDesideri disdire l'iscrizione ad una lezione? (s/n): ")):
        out("Nessuna lezione disdetta.")
        ask(_ANYTHING_ELSE)
        return False

    choice = _to_int(
        ask("Inserisci il numero della lezione a cui vuoi disdire la tua iscrizione: ")
    )
    if choice < 1 or choice > len(schedule):
        out(MSG_INVALID_CHOICE)
        ask(_ANYTHING_ELSE)
        return False
    lesson = select_lesson(schedule, choice)

    name = _line(
        ask("Inserisci il tuo nome oppure, se sei abbonato, il tuo nome utente: "),
        _MAX_INPUT,
    )

    table = load_subscribers(subscribers_path)
    subscriber = table.get(name)
    if subscriber is not None:
        given = _line(
            ask("Inserisci la password per confermare la disdetta: "), _MAX_INPUT
        )
        if given != subscriber.password:
            out("Password errata. Disdetta annullata.")
            ask(_ANYTHING_ELSE)
            return False

    if not cancel_enrollment(lesson, name, subscriber):
        out("Partecipante non trovato.")
        ask(_ANYTHING_ELSE)
        return False

    if subscriber is not None:
        save_subscribers(table, subscribers_path)
        out(f"Lezione disdetta. Lezioni rimanenti: {subscriber.remaining_lessons}")

    try:
        rewrite_lesson_file(lessons_path, lesson, name)
    except OSError:
        out("Errore nell'apertura del file.")
        ask("Premi INVIO\n")
        return True

    out("Iscrizione disdetta con successo.")
    ask("Premi INVIO per continuare...")
    return True