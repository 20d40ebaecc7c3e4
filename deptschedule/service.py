"""
Mutation API and query facade.

ScheduleService owns one CatalogStore and one ScheduleStore. Every mutation
runs validate-then-commit inside the write side of a readers-writer lock, so
two placements can never interleave on the same cell. Queries run under the
read side against a snapshot.

Mutations never raise for a rejected placement; they return a MutationResult
and leave the store exactly as it was. Read-only calls given an unknown
day/slot label raise InvalidInputError. Catalog additions after seeding go
through add_professor / add_classroom / add_course so they share the lock.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from deptschedule import queries
from deptschedule.catalog import CatalogStore
from deptschedule.conflicts import validate_lesson
from deptschedule.errors import ErrorKind, InvalidInputError, MutationResult, ScheduleConflict
from deptschedule.locking import ReadWriteLock
from deptschedule.model import (
    Classroom,
    Course,
    CourseType,
    DayOfWeek,
    Lesson,
    Professor,
    TimeSlot,
    normalize_lesson,
    parse_day,
    parse_slot,
)
from deptschedule.storage import ScheduleStore

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, catalog: Optional[CatalogStore] = None, store: Optional[ScheduleStore] = None) -> None:
        self.catalog = catalog if catalog is not None else CatalogStore()
        self.store = store if store is not None else ScheduleStore()
        self._lock = ReadWriteLock()

    # -----------------------------------------------------------------------
    # Helpers (caller holds the lock)
    # -----------------------------------------------------------------------

    def _check_references(self, lesson: Lesson) -> Optional[MutationResult]:
        if self.catalog.find_course(lesson.course_id) is None:
            return MutationResult.failure(ErrorKind.INVALID_REFERENCE, f"Unknown course id: {lesson.course_id}")
        if self.catalog.find_professor(lesson.professor_id) is None:
            return MutationResult.failure(
                ErrorKind.INVALID_REFERENCE, f"Unknown professor id: {lesson.professor_id}"
            )
        if self.catalog.find_classroom(lesson.classroom_number) is None:
            return MutationResult.failure(
                ErrorKind.INVALID_REFERENCE, f"Unknown classroom: {lesson.classroom_number!r}"
            )
        return None

    def _reject(self, action: str, lesson_id: Any, result: MutationResult) -> MutationResult:
        logger.debug("%s lesson %s rejected: %s", action, lesson_id, result.message)
        return result

    def _fail(self, action: str, lesson_id: Any, kind: ErrorKind, message: str) -> MutationResult:
        return self._reject(action, lesson_id, MutationResult.failure(kind, message))

    def _commit_replacement(self, action: str, candidate: Lesson) -> MutationResult:
        rejected = self._check_references(candidate)
        if rejected is not None:
            return self._reject(action, candidate.id, rejected)

        conflict = validate_lesson(candidate, self.store.lessons(), exclude_id=candidate.id)
        if conflict is not None:
            return self._reject(action, candidate.id, MutationResult.from_conflict(conflict))

        self.store.replace(candidate.id, candidate)
        logger.info(
            "%s lesson %s -> room %s, %s %s",
            action,
            candidate.id,
            candidate.classroom_number,
            candidate.day.value,
            candidate.slot.value,
        )
        return MutationResult.success(candidate)

    # -----------------------------------------------------------------------
    # Catalog writes (same lock as lesson mutations)
    # -----------------------------------------------------------------------

    def add_professor(self, professor: Professor) -> None:
        with self._lock.write():
            self.catalog.add_professor(professor)

    def add_classroom(self, classroom: Classroom) -> None:
        with self._lock.write():
            self.catalog.add_classroom(classroom)

    def add_course(self, course: Course) -> None:
        with self._lock.write():
            self.catalog.add_course(course)

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    def add_lesson(self, lesson: Lesson) -> MutationResult:
        """
        Place a new lesson. Checks, in order: well-formed input, unused id,
        known course/professor/classroom, professor conflict, classroom conflict.
        """
        try:
            lesson = normalize_lesson(lesson)
        except ValueError as exc:
            return self._fail("add", getattr(lesson, "id", None), ErrorKind.INVALID_INPUT, str(exc))

        with self._lock.write():
            if lesson.id in self.store:
                return self._fail("add", lesson.id, ErrorKind.DUPLICATE_ID, f"Lesson id {lesson.id} already exists")

            rejected = self._check_references(lesson)
            if rejected is not None:
                return self._reject("add", lesson.id, rejected)

            conflict = validate_lesson(lesson, self.store.lessons())
            if conflict is not None:
                return self._reject("add", lesson.id, MutationResult.from_conflict(conflict))

            self.store.insert(lesson)
            logger.info(
                "added lesson %s (course %s, professor %s) in room %s, %s %s",
                lesson.id,
                lesson.course_id,
                lesson.professor_id,
                lesson.classroom_number,
                lesson.day.value,
                lesson.slot.value,
            )
            return MutationResult.success(lesson)

    def reassign_classroom(self, lesson_id: int, new_classroom: str) -> MutationResult:
        """Move an existing lesson to another room, same cell."""
        if not isinstance(new_classroom, str) or not new_classroom.strip():
            return self._fail("reassign", lesson_id, ErrorKind.INVALID_INPUT, f"Invalid classroom: {new_classroom!r}")

        with self._lock.write():
            current = self.store.get(lesson_id)
            if current is None:
                return self._fail("reassign", lesson_id, ErrorKind.NOT_FOUND, f"Lesson {lesson_id} not found")
            return self._commit_replacement("reassigned", current.with_classroom(new_classroom.strip()))

    def move_lesson(self, lesson_id: int, day: Any, slot: Any) -> MutationResult:
        """Move an existing lesson to another (day, slot) cell, same room."""
        try:
            day = parse_day(day)
            slot = parse_slot(slot)
        except ValueError as exc:
            return self._fail("move", lesson_id, ErrorKind.INVALID_INPUT, str(exc))

        with self._lock.write():
            current = self.store.get(lesson_id)
            if current is None:
                return self._fail("move", lesson_id, ErrorKind.NOT_FOUND, f"Lesson {lesson_id} not found")
            return self._commit_replacement("moved", current.with_cell(day, slot))

    def cancel_lesson(self, lesson_id: int) -> bool:
        """
        Remove a lesson unconditionally. Returns whether something was removed;
        cancelling an unknown id is a no-op.
        """
        with self._lock.write():
            removed = self.store.remove(lesson_id)
        if removed:
            logger.info("cancelled lesson %s", lesson_id)
        else:
            logger.debug("cancel lesson %s: not found", lesson_id)
        return removed

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def validate(self, candidate: Lesson, exclude_id: Optional[int] = None) -> Optional[ScheduleConflict]:
        """
        Dry-run conflict check. Labels are coerced the same way add_lesson does;
        raises InvalidInputError for a malformed candidate.
        """
        try:
            candidate = normalize_lesson(candidate)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        with self._lock.read():
            return validate_lesson(candidate, self.store.lessons(), exclude_id=exclude_id)

    def lessons(self) -> tuple[Lesson, ...]:
        with self._lock.read():
            return self.store.lessons()

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        with self._lock.read():
            return self.store.get(lesson_id)

    def find_available_classrooms(self, slot: Any, day: Any) -> list[str]:
        """Raises InvalidInputError for an unknown day or slot label."""
        try:
            slot = parse_slot(slot)
            day = parse_day(day)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        with self._lock.read():
            return queries.find_available_classrooms(self.catalog, self.store.lessons(), slot, day)

    def get_professor_schedule(self, professor_id: int) -> list[Lesson]:
        with self._lock.read():
            return queries.get_professor_schedule(self.store.lessons(), professor_id)

    def get_classroom_schedule(self, classroom_number: str) -> list[Lesson]:
        with self._lock.read():
            return queries.get_classroom_schedule(self.store.lessons(), classroom_number)

    def get_classroom_utilization(self, classroom_number: str) -> float:
        with self._lock.read():
            return queries.get_classroom_utilization(self.store.lessons(), classroom_number)

    def get_most_popular_course_type(self) -> CourseType:
        with self._lock.read():
            return queries.get_most_popular_course_type(self.catalog, self.store.lessons())

    def get_professor_load(self) -> dict[int, int]:
        with self._lock.read():
            return queries.get_professor_load(self.catalog, self.store.lessons())

    def weekly_grid(self, professor_id: Optional[int] = None) -> dict[DayOfWeek, dict[TimeSlot, list[Lesson]]]:
        with self._lock.read():
            lessons = self.store.lessons()
        if professor_id is not None:
            lessons = tuple(queries.get_professor_schedule(lessons, professor_id))
        return queries.weekly_grid(lessons)
