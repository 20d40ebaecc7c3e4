"""
Seed files: bootstrap data for one department's timetable.

A seed file is JSON of the form:

    {
      "professors": [{"id": 1, "name": "...", "department": "..."}],
      "classrooms": [{"number": "101", "capacity": 30, "has_projector": true}],
      "courses":    [{"id": 1, "name": "...", "type": "Lecture"}],
      "lessons":    [{"id": 1, "course_id": 1, "professor_id": 1,
                      "classroom_number": "101", "day": "Monday", "slot": "8:30-10:00"}]
    }

"lessons" is optional. Lessons are replayed through the mutation API in file
order, so a seed can never put the service into a double-booked state;
lessons that are refused are handed back to the caller.

Unlike the schedule itself, broken catalog data is a hard error (SeedError):
there is no sensible timetable without it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deptschedule.catalog import CatalogStore
from deptschedule.errors import CatalogError, ErrorKind, MutationResult, SeedError
from deptschedule.model import Classroom, Course, Lesson, Professor, lesson_from_dict, parse_course_type
from deptschedule.service import ScheduleService


# Rooms every department timetable starts with
DEFAULT_CLASSROOMS: tuple[Classroom, ...] = (
    Classroom(number="101", capacity=30, has_projector=True),
    Classroom(number="102", capacity=25, has_projector=False),
    Classroom(number="202", capacity=50, has_projector=True),
)


@dataclass
class SeedLoad:
    service: ScheduleService
    rejected: list[tuple[dict[str, Any], MutationResult]] = field(default_factory=list)


def _records(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = payload.get(key, [])
    if not isinstance(items, list) or not all(isinstance(x, dict) for x in items):
        raise SeedError(f"Seed key {key!r} must be a list of objects")
    return items


def professor_from_dict(data: dict[str, Any]) -> Professor:
    return Professor(
        id=int(data["id"]),
        name=str(data.get("name", "")).strip(),
        department=str(data.get("department", "")).strip(),
    )


def classroom_from_dict(data: dict[str, Any]) -> Classroom:
    return Classroom(
        number=str(data["number"]).strip(),
        capacity=int(data["capacity"]),
        has_projector=bool(data.get("has_projector", False)),
    )


def course_from_dict(data: dict[str, Any]) -> Course:
    return Course(
        id=int(data["id"]),
        name=str(data.get("name", "")).strip(),
        type=parse_course_type(data["type"]),
    )


def catalog_from_payload(payload: dict[str, Any]) -> CatalogStore:
    """
    Build a CatalogStore from a seed payload.
    Raises SeedError for missing fields, bad values or duplicate ids.
    """
    if not isinstance(payload, dict):
        raise SeedError("Seed payload must be a JSON object")
    try:
        return CatalogStore(
            professors=[professor_from_dict(p) for p in _records(payload, "professors")],
            classrooms=[classroom_from_dict(c) for c in _records(payload, "classrooms")],
            courses=[course_from_dict(c) for c in _records(payload, "courses")],
        )
    except CatalogError as exc:
        raise SeedError(str(exc)) from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise SeedError(f"Invalid catalog record: {exc}") from exc


def service_from_payload(payload: dict[str, Any]) -> SeedLoad:
    service = ScheduleService(catalog_from_payload(payload))
    load = SeedLoad(service=service)

    for record in _records(payload, "lessons"):
        try:
            lesson = lesson_from_dict(record)
        except ValueError as exc:
            load.rejected.append((record, MutationResult.failure(ErrorKind.INVALID_INPUT, str(exc))))
            continue
        result = service.add_lesson(lesson)
        if not result:
            load.rejected.append((record, result))

    return load


def load_seed(path: str | Path) -> SeedLoad:
    """
    Read a seed file and build a ready-to-use service.
    Raises SeedError if the file is missing, unreadable or not valid JSON.
    """
    seed_path = Path(path)
    try:
        payload = json.loads(seed_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise SeedError(f"Cannot read seed file {seed_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SeedError(f"Seed file {seed_path} is not valid JSON: {exc}") from exc
    return service_from_payload(payload)


def catalog_to_payload(catalog: CatalogStore, lessons: tuple[Lesson, ...] = ()) -> dict[str, Any]:
    return {
        "professors": [{"id": p.id, "name": p.name, "department": p.department} for p in catalog.list_professors()],
        "classrooms": [
            {"number": c.number, "capacity": c.capacity, "has_projector": c.has_projector}
            for c in catalog.list_classrooms()
        ],
        "courses": [{"id": c.id, "name": c.name, "type": c.type.value} for c in catalog.list_courses()],
        "lessons": [l.to_dict() for l in lessons],
    }


def save_seed(payload: dict[str, Any], path: str | Path) -> None:
    """
    Write a seed payload as pretty-printed JSON. Creates parent directories if needed.
    """
    seed_path = Path(path)
    seed_path.parent.mkdir(parents=True, exist_ok=True)
    seed_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def demo_payload() -> dict[str, Any]:
    """
    Sample department: two professors, two lectures, two placed lessons.
    """
    return {
        "professors": [
            {"id": 1, "name": "Ivan Petrenko", "department": "Computer Science"},
            {"id": 2, "name": "Veronika Watson", "department": "Ethics in Technology"},
        ],
        "classrooms": [
            {"number": c.number, "capacity": c.capacity, "has_projector": c.has_projector}
            for c in DEFAULT_CLASSROOMS
        ],
        "courses": [
            {"id": 1, "name": "Introduction to Programming", "type": "Lecture"},
            {"id": 2, "name": "Ethics in Technology", "type": "Lecture"},
        ],
        "lessons": [
            {
                "id": 1,
                "course_id": 1,
                "professor_id": 1,
                "classroom_number": "101",
                "day": "Monday",
                "slot": "8:30-10:00",
            },
            {
                "id": 2,
                "course_id": 2,
                "professor_id": 2,
                "classroom_number": "202",
                "day": "Wednesday",
                "slot": "12:15-13:45",
            },
        ],
    }


def demo_service() -> ScheduleService:
    return service_from_payload(demo_payload()).service
