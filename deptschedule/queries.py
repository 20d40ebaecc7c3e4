"""
Read-only views over the schedule and the catalog.

All functions take plain sequences so they can run on a snapshot; none of
them mutate their inputs.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from deptschedule.catalog import CatalogStore
from deptschedule.model import TOTAL_GRID_CELLS, CourseType, DayOfWeek, Lesson, TimeSlot


def find_available_classrooms(
    catalog: CatalogStore, lessons: Iterable[Lesson], slot: TimeSlot, day: DayOfWeek
) -> list[str]:
    """
    Room numbers with no lesson in the (day, slot) cell, sorted by room number.
    """
    occupied = {l.classroom_number for l in lessons if l.day == day and l.slot == slot}
    return sorted(c.number for c in catalog.list_classrooms() if c.number not in occupied)


def get_professor_schedule(lessons: Iterable[Lesson], professor_id: int) -> list[Lesson]:
    """All lessons taught by `professor_id`, in schedule (insertion) order."""
    return [l for l in lessons if l.professor_id == professor_id]


def get_classroom_schedule(lessons: Iterable[Lesson], classroom_number: str) -> list[Lesson]:
    return [l for l in lessons if l.classroom_number == classroom_number]


def get_classroom_utilization(lessons: Iterable[Lesson], classroom_number: str) -> float:
    """
    Percentage of the weekly grid in which the room hosts a lesson:
    100 * lessons_in_room / TOTAL_GRID_CELLS. Not clamped to 100.
    """
    used = sum(1 for l in lessons if l.classroom_number == classroom_number)
    return used / TOTAL_GRID_CELLS * 100


def get_most_popular_course_type(catalog: CatalogStore, lessons: Iterable[Lesson]) -> CourseType:
    """
    Course type with the most lessons.

    Ties go to the type declared first in CourseType (Lecture, Seminar, Lab,
    Practice); with no lessons the result is CourseType.LECTURE. Lessons whose
    course is not in the catalog are not counted.
    """
    counts: Counter[CourseType] = Counter()
    for l in lessons:
        course = catalog.find_course(l.course_id)
        if course is not None:
            counts[course.type] += 1

    best = CourseType.LECTURE
    for course_type in CourseType:
        # strict ">" keeps the earlier type on ties
        if counts[course_type] > counts[best]:
            best = course_type
    return best


def get_professor_load(catalog: CatalogStore, lessons: Iterable[Lesson]) -> dict[int, int]:
    """
    Lessons per professor, for every catalog professor (zero included),
    in catalog order. Lessons of unknown professors are appended after them.
    """
    load: dict[int, int] = {p.id: 0 for p in catalog.list_professors()}
    for l in lessons:
        load[l.professor_id] = load.get(l.professor_id, 0) + 1
    return load


def weekly_grid(lessons: Sequence[Lesson]) -> dict[DayOfWeek, dict[TimeSlot, list[Lesson]]]:
    """
    Arrange lessons into day -> slot -> lessons, covering all 25 cells.
    """
    grid: dict[DayOfWeek, dict[TimeSlot, list[Lesson]]] = {
        day: {slot: [] for slot in TimeSlot} for day in DayOfWeek
    }
    for l in lessons:
        grid[l.day][l.slot].append(l)
    return grid
