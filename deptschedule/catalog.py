"""
Catalog store: professors, classrooms and courses.

Static reference data seeded once at startup. No conflict logic lives here;
the store only refuses records that would make lookups ambiguous
(duplicate ids) or that are nonsensical (non-positive capacity).
"""

from __future__ import annotations

from typing import Iterable, Optional

from deptschedule.errors import CatalogError
from deptschedule.model import Classroom, Course, Professor


class CatalogStore:
    def __init__(
        self,
        professors: Iterable[Professor] = (),
        classrooms: Iterable[Classroom] = (),
        courses: Iterable[Course] = (),
    ) -> None:
        # dicts keep insertion order, so listings follow seed order
        self._professors: dict[int, Professor] = {}
        self._classrooms: dict[str, Classroom] = {}
        self._courses: dict[int, Course] = {}

        for p in professors:
            self.add_professor(p)
        for c in classrooms:
            self.add_classroom(c)
        for c in courses:
            self.add_course(c)

    # -- writes --------------------------------------------------------------

    def add_professor(self, professor: Professor) -> None:
        if professor.id in self._professors:
            raise CatalogError(f"Duplicate professor id: {professor.id}")
        self._professors[professor.id] = professor

    def add_classroom(self, classroom: Classroom) -> None:
        if classroom.number in self._classrooms:
            raise CatalogError(f"Duplicate classroom number: {classroom.number!r}")
        if classroom.capacity <= 0:
            raise CatalogError(f"Classroom {classroom.number!r} must have a positive capacity")
        self._classrooms[classroom.number] = classroom

    def add_course(self, course: Course) -> None:
        if course.id in self._courses:
            raise CatalogError(f"Duplicate course id: {course.id}")
        self._courses[course.id] = course

    # -- lookups -------------------------------------------------------------

    def list_professors(self) -> list[Professor]:
        return list(self._professors.values())

    def list_classrooms(self) -> list[Classroom]:
        return list(self._classrooms.values())

    def list_courses(self) -> list[Course]:
        return list(self._courses.values())

    def find_professor(self, professor_id: int) -> Optional[Professor]:
        return self._professors.get(professor_id)

    def find_classroom(self, number: str) -> Optional[Classroom]:
        return self._classrooms.get(number)

    def find_course(self, course_id: int) -> Optional[Course]:
        return self._courses.get(course_id)
