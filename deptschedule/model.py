"""
Central data model definitions used across the project.

This module defines the canonical structure of the department timetable so that:
- the stores, validator, queries and CLI share the same field names
- enumerations (days, slots, course types) have one fixed declaration order
- records are immutable; a changed lesson is always a new Lesson object
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class DayOfWeek(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


class TimeSlot(str, Enum):
    SLOT_1 = "8:30-10:00"
    SLOT_2 = "10:15-11:45"
    SLOT_3 = "12:15-13:45"
    SLOT_4 = "14:00-15:30"
    SLOT_5 = "15:45-17:15"

    @property
    def start(self) -> str:
        return self.value.split("-", 1)[0]

    @property
    def end(self) -> str:
        return self.value.split("-", 1)[1]


class CourseType(str, Enum):
    LECTURE = "Lecture"
    SEMINAR = "Seminar"
    LAB = "Lab"
    PRACTICE = "Practice"


# One week = every (day, slot) cell of the grid
TOTAL_GRID_CELLS = len(DayOfWeek) * len(TimeSlot)


def _parse_enum(enum_cls: type[Enum], value: Any) -> Any:
    """
    Accept an enum member, its exact value, or its name/value case-insensitively.
    Raises ValueError for anything else.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}")
    text = value.strip()
    for member in enum_cls:
        if text == member.value:
            return member
    low = text.lower()
    for member in enum_cls:
        if low == member.value.lower() or low == member.name.lower():
            return member
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}")


def parse_day(value: Any) -> DayOfWeek:
    return _parse_enum(DayOfWeek, value)


def parse_slot(value: Any) -> TimeSlot:
    return _parse_enum(TimeSlot, value)


def parse_course_type(value: Any) -> CourseType:
    return _parse_enum(CourseType, value)


@dataclass(frozen=True)
class Professor:
    id: int
    name: str
    department: str


@dataclass(frozen=True)
class Classroom:
    number: str
    capacity: int
    has_projector: bool = False


@dataclass(frozen=True)
class Course:
    id: int
    name: str
    type: CourseType


@dataclass(frozen=True)
class Lesson:
    """
    One scheduled occurrence of a course in one grid cell.

    `day` and `slot` together identify the cell; professor and classroom
    are the two resources that must not be double-booked in a cell.
    """

    id: int
    course_id: int
    professor_id: int
    classroom_number: str
    day: DayOfWeek
    slot: TimeSlot

    @property
    def cell(self) -> tuple[DayOfWeek, TimeSlot]:
        return (self.day, self.slot)

    def with_classroom(self, classroom_number: str) -> "Lesson":
        return replace(self, classroom_number=classroom_number)

    def with_cell(self, day: DayOfWeek, slot: TimeSlot) -> "Lesson":
        return replace(self, day=day, slot=slot)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "course_id": self.course_id,
            "professor_id": self.professor_id,
            "classroom_number": self.classroom_number,
            "day": self.day.value,
            "slot": self.slot.value,
        }


def normalize_lesson(lesson: Lesson) -> Lesson:
    """
    Return `lesson` with day/slot coerced to their enum members.

    Lessons built at a loose boundary (JSON, user input) may carry plain
    strings; anything that is not a known day or slot raises ValueError.
    """
    day = parse_day(lesson.day)
    slot = parse_slot(lesson.slot)
    if not isinstance(lesson.classroom_number, str) or not lesson.classroom_number.strip():
        raise ValueError(f"Invalid classroom number: {lesson.classroom_number!r}")
    for field_name in ("id", "course_id", "professor_id"):
        v = getattr(lesson, field_name)
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"Invalid {field_name}: {v!r}")
    if day is lesson.day and slot is lesson.slot:
        return lesson
    return lesson.with_cell(day, slot)


def lesson_from_dict(data: dict[str, Any]) -> Lesson:
    """
    Build a Lesson from a JSON-like dict (seed files, interactive input).
    Raises ValueError on missing keys or unknown day/slot labels.
    """
    try:
        lesson = Lesson(
            id=int(data["id"]),
            course_id=int(data["course_id"]),
            professor_id=int(data["professor_id"]),
            classroom_number=str(data["classroom_number"]).strip(),
            day=data["day"],
            slot=data["slot"],
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid lesson record: {data!r}") from exc
    return normalize_lesson(lesson)
