# segmentation_fit

A library for running a gym's group fitness classes. It keeps a rolling
calendar of lessons for the next 30 days, lets walk-in guests and
subscribers book a place, handles cancellations, and builds monthly
reports of past lessons ordered by attendance.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Data files

All data lives in plain text files whose paths you pass in:

- Lessons file: each lesson is a header line `dd/mm/yyyy;Day;HH-HH;N`
  followed by the N enrolled names, one per line, most recent first.
  `load_lessons` creates the file if it does not exist.
- History file: `archive_past_lessons` appends lessons whose start time
  has passed, in the same format; it feeds the monthly report.
- Subscribers file: one line per account, `username;password;remaining`.
  A missing file loads as an empty table.

Lessons take place on Monday (Lunedi, 10-12), Wednesday (Mercoledi,
16-18), Friday (Venerdi, 16-18) and Saturday (Sabato, 10-12). Each lesson
holds at most 20 participants.

## Modules

- `segmentation_fit.roster`: `Roster`, the bounded list of participants of
  a lesson (`push`, `pop`, `peek`, `remove`, `is_full`, `len`, iteration,
  `in`); `RosterFullError` is raised when it is full.
- `segmentation_fit.schedule`: `Lesson` (date, day, time slot, enrolled
  roster) and `Schedule`, the ordered calendar (`add`, `pop`, `find`,
  `remove_if`, indexing); `EmptyScheduleError` when popping an empty one.
- `segmentation_fit.subscribers`: `Subscriber`, `SubscriberTable` (a
  chained hash table keyed by user name, with `bucket_index`),
  `load_subscribers` and `save_subscribers`.
- `segmentation_fit.calendar_store`: `load_lessons`, `save_lessons`,
  `lesson_slot`, `generate_lessons`, `is_past` and `archive_past_lessons`.
- `segmentation_fit.booking`: `format_lessons`, `select_lesson`,
  `enroll_guest`, `enroll_subscriber`, `cancel_enrollment` and
  `rewrite_lesson_file`, raising `BookingError` when a booking is refused;
  plus the console dialogues `book_lesson`, `book_subscriber_lesson` and
  `cancel_booking`, which take `ask` and `out` callables (default `input`
  and `print`).
- `segmentation_fit.report`: `HistoryEntry`, `read_history`,
  `available_months`, `monthly_lessons`, and the console dialogue
  `run_report`.

## Example

```python
import datetime
from segmentation_fit.schedule import Schedule
from segmentation_fit.calendar_store import (
    archive_past_lessons,
    generate_lessons,
    load_lessons,
    save_lessons,
)
from segmentation_fit.booking import book_lesson

schedule = Schedule([])
load_lessons(schedule, "lezioni.txt")
archive_past_lessons(schedule, "storico.txt")
generate_lessons(schedule, datetime.date.today())
book_lesson(schedule)
save_lessons(schedule, "lezioni.txt")
```

## What this package does not do

There is no command to start and no main menu. The package provides no
subscriber login screen, no account-creation or plan top-up dialogue and
no contact screen; an application has to build those from the pieces
above, for example with `SubscriberTable.get` to check a password and by
adding to `Subscriber.remaining_lessons` for a top-up.