"""
Schedule store: the authoritative set of placed lessons.

This is a plain data container. It enforces lesson-id uniqueness and
nothing else; conflict checks belong to deptschedule.conflicts and the
mutation API in deptschedule.service.

Iteration order is insertion order. `replace` keeps the lesson's position.
"""

from __future__ import annotations

from typing import Iterator, Optional

from deptschedule.model import Lesson


class ScheduleStore:
    def __init__(self) -> None:
        self._lessons: dict[int, Lesson] = {}

    def __len__(self) -> int:
        return len(self._lessons)

    def __iter__(self) -> Iterator[Lesson]:
        return iter(list(self._lessons.values()))

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self._lessons

    def lessons(self) -> tuple[Lesson, ...]:
        """Snapshot of all lessons in insertion order."""
        return tuple(self._lessons.values())

    def get(self, lesson_id: int) -> Optional[Lesson]:
        return self._lessons.get(lesson_id)

    def insert(self, lesson: Lesson) -> bool:
        """
        Append a lesson. Returns False (and changes nothing) if the id is taken.
        """
        if lesson.id in self._lessons:
            return False
        self._lessons[lesson.id] = lesson
        return True

    def replace(self, lesson_id: int, new_lesson: Lesson) -> bool:
        """
        Swap the lesson stored under `lesson_id` for `new_lesson`.
        Returns False if `lesson_id` is unknown or `new_lesson` changes the id.
        """
        if lesson_id not in self._lessons or new_lesson.id != lesson_id:
            return False
        self._lessons[lesson_id] = new_lesson
        return True

    def remove(self, lesson_id: int) -> bool:
        """Returns False if nothing was stored under `lesson_id`."""
        return self._lessons.pop(lesson_id, None) is not None
