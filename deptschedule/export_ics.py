"""
iCalendar (.ics) export.

Lessons live on a weekly grid without dates. Exporting pins them to one
concrete week, given by the date of its Monday, so the result can be
imported into Google Calendar, Outlook or Apple Calendar.
No recurrence rules are written.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable

from deptschedule.catalog import CatalogStore
from deptschedule.model import DayOfWeek, Lesson


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, time_h_mm: str) -> str:
    """
    Convert date + 'H:MM' time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    t = datetime.strptime(time_h_mm, "%H:%M").time()
    return datetime.combine(day, t).strftime("%Y%m%dT%H%M00")


def lesson_date(lesson: Lesson, week_start: date) -> date:
    return week_start + timedelta(days=list(DayOfWeek).index(lesson.day))


def export_lessons_to_ics(
    lessons: Iterable[Lesson], catalog: CatalogStore, week_start: date, out_path: str | Path
) -> int:
    """
    Export lessons of the week starting at `week_start` (a Monday) to an .ics file.
    Returns number of exported lessons. Raises ValueError if `week_start` is not a Monday.
    """
    if week_start.weekday() != 0:
        raise ValueError(f"Week start must be a Monday, got {week_start.isoformat()}")

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//DeptSchedule//EN")
    lines.append("CALSCALE:GREGORIAN")

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for lesson in lessons:
        day = lesson_date(lesson, week_start)
        course = catalog.find_course(lesson.course_id)
        professor = catalog.find_professor(lesson.professor_id)

        title = course.name if course else f"Course {lesson.course_id}"
        summary = f"{title} ({course.type.value})" if course else title
        description = professor.name if professor else f"Professor {lesson.professor_id}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:lesson-{lesson.id}-{day.strftime('%Y%m%d')}@deptschedule")
        lines.append(f"DTSTAMP:{stamp}")
        lines.append(f"DTSTART:{_dt_local(day, lesson.slot.start)}")
        lines.append(f"DTEND:{_dt_local(day, lesson.slot.end)}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        lines.append(f"LOCATION:{_ics_escape('Room ' + lesson.classroom_number)}")
        lines.append(f"DESCRIPTION:{_ics_escape(description)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # RFC 5545 wants CRLF line endings
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
