"""
Error taxonomy.

Schedule rule violations are *values*: the validator returns a ScheduleConflict
and the mutation API returns a MutationResult. Nothing here is raised for a
rejected placement.

Bootstrap faults (broken seed data, duplicate catalog ids) are exceptions,
because there is no caller that could resubmit them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from deptschedule.model import Lesson


class ErrorKind(str, Enum):
    PROFESSOR_CONFLICT = "ProfessorConflict"
    CLASSROOM_CONFLICT = "ClassroomConflict"
    NOT_FOUND = "NotFound"
    INVALID_INPUT = "InvalidInput"
    INVALID_REFERENCE = "InvalidReference"
    DUPLICATE_ID = "DuplicateId"


@dataclass(frozen=True)
class ScheduleConflict:
    """
    A collision between a candidate placement and a stored lesson.
    `lesson` is the stored lesson that occupies the resource.
    """

    kind: ErrorKind
    lesson: Lesson

    def describe(self) -> str:
        l = self.lesson
        resource = (
            f"professor {l.professor_id}"
            if self.kind is ErrorKind.PROFESSOR_CONFLICT
            else f"classroom {l.classroom_number}"
        )
        return f"{self.kind.value}: {resource} already has lesson {l.id} on {l.day.value} {l.slot.value}"


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    kind: Optional[ErrorKind] = None
    message: str = ""
    conflict: Optional[ScheduleConflict] = None
    lesson: Optional[Lesson] = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, lesson: Optional[Lesson] = None) -> "MutationResult":
        return cls(ok=True, lesson=lesson)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "MutationResult":
        return cls(ok=False, kind=kind, message=message)

    @classmethod
    def from_conflict(cls, conflict: ScheduleConflict) -> "MutationResult":
        return cls(ok=False, kind=conflict.kind, message=conflict.describe(), conflict=conflict)


class CatalogError(ValueError):
    """Raised when reference data is malformed (duplicate ids, bad capacity)."""


class SeedError(ValueError):
    """Raised when a seed file cannot be turned into a catalog."""


class InvalidInputError(ValueError):
    """
    Raised by read-only service calls (validate, availability) for unknown
    day/slot labels or malformed lessons. Mutations return a MutationResult instead.
    """

    kind = ErrorKind.INVALID_INPUT
