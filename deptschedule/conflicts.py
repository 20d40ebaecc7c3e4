"""
Conflict detection.

Given a candidate lesson and the lessons already placed, decide whether the
candidate double-books a professor or a classroom.

Collision rule (same grid cell):
    day == other.day AND slot == other.slot
    AND (professor_id == other.professor_id OR classroom_number == other.classroom_number)

Professor collisions are reported before classroom collisions, even when the
classroom collision comes from an earlier stored lesson.
"""

from __future__ import annotations

from typing import Iterable, Optional

from deptschedule.errors import ErrorKind, ScheduleConflict
from deptschedule.model import Lesson


def _same_cell(a: Lesson, b: Lesson) -> bool:
    return a.day == b.day and a.slot == b.slot


def validate_lesson(
    candidate: Lesson,
    lessons: Iterable[Lesson],
    exclude_id: Optional[int] = None,
) -> Optional[ScheduleConflict]:
    """
    Return the first conflict for `candidate`, or None if it can be placed.

    `exclude_id` skips the stored lesson being replaced, so a lesson does not
    collide with its own previous placement.
    """
    # Only lessons in the candidate's cell can collide
    occupants = [l for l in lessons if l.id != exclude_id and _same_cell(l, candidate)]

    for other in occupants:
        if other.professor_id == candidate.professor_id:
            return ScheduleConflict(ErrorKind.PROFESSOR_CONFLICT, other)

    for other in occupants:
        if other.classroom_number == candidate.classroom_number:
            return ScheduleConflict(ErrorKind.CLASSROOM_CONFLICT, other)

    return None


def find_double_bookings(lessons: Iterable[Lesson]) -> list[tuple[Lesson, Lesson]]:
    """
    Find colliding lesson pairs (A, B) in an arbitrary collection, each pair once (i<j).

    Used to audit lesson lists that did not go through the mutation API.
    """
    items = list(lessons)
    pairs: list[tuple[Lesson, Lesson]] = []

    # O(n^2) is fine for a department timetable
    for i in range(len(items)):
        a = items[i]
        for j in range(i + 1, len(items)):
            b = items[j]
            if not _same_cell(a, b):
                continue
            if a.professor_id == b.professor_id or a.classroom_number == b.classroom_number:
                pairs.append((a, b))

    return pairs
