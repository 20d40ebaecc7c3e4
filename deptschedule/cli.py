"""
CLI (Command Line Interface).

Terminal commands over a seed file, e.g.:

    deptschedule check seed.json
    deptschedule audit seed.json
    deptschedule available seed.json Monday 10:15-11:45
    deptschedule professor seed.json 1
    deptschedule report seed.json
    deptschedule export seed.json out.ics --week 2026-02-16
    deptschedule import-catalog https://dept.example.edu/catalog seed.json
    deptschedule demo
    deptschedule interactive [seed.json]

Nothing is persisted between runs: every command loads the seed, replays its
lessons through the mutation API and works on that in-memory timetable.
The interactive UI lives in deptschedule/interactive.py.
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

import requests

from deptschedule.conflicts import find_double_bookings
from deptschedule.errors import MutationResult, SeedError
from deptschedule.export_ics import export_lessons_to_ics
from deptschedule.model import Lesson, lesson_from_dict, parse_day, parse_slot
from deptschedule.parse import parse_catalog_file, parse_catalog_html
from deptschedule.scrape import fetch_cached
from deptschedule.seed import SeedLoad, demo_payload, load_seed, save_seed, service_from_payload
from deptschedule.service import ScheduleService


def _lesson_line(lesson: Lesson) -> str:
    return (
        f"#{lesson.id} | {lesson.day.value} {lesson.slot.value} | room {lesson.classroom_number} | "
        f"course {lesson.course_id} | professor {lesson.professor_id}"
    )


def _result_line(result: MutationResult) -> str:
    kind = result.kind.value if result.kind else "Rejected"
    if result.conflict is not None:
        return f"{kind} with {_lesson_line(result.conflict.lesson)}"
    return f"{kind}: {result.message}"


def _load(path: str) -> SeedLoad | None:
    try:
        return load_seed(path)
    except SeedError as exc:
        print(f"Cannot load seed: {exc}")
        return None


def _cmd_check(args: argparse.Namespace) -> int:
    """
    Replay the seed's lessons and list every rejected placement.
    """
    load = _load(args.seed)
    if load is None:
        return 1

    placed = len(load.service.lessons())
    print(f"Placed lessons: {placed}")
    if not load.rejected:
        print("No conflicts found.")
        return 0

    print(f"Rejected lessons: {len(load.rejected)}")
    for record, result in load.rejected:
        print(f"- lesson {record.get('id', '?')}: {_result_line(result)}")
    return 1


def _cmd_audit(args: argparse.Namespace) -> int:
    """
    Report double-bookings among the seed's lessons exactly as written,
    without going through the mutation API.
    """
    try:
        payload = json.loads(Path(args.seed).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print(f"Cannot load seed: {exc}")
        return 1

    lessons: list[Lesson] = []
    for record in payload.get("lessons", []) if isinstance(payload, dict) else []:
        try:
            lessons.append(lesson_from_dict(record))
        except ValueError as exc:
            print(f"Skipping invalid lesson: {exc}")

    pairs = find_double_bookings(lessons)
    if not pairs:
        print("No double-bookings found.")
        return 0

    print(f"Double-bookings found: {len(pairs)}")
    for a, b in pairs:
        print(f"- {_lesson_line(a)}  <->  {_lesson_line(b)}")
    return 1


def _cmd_available(args: argparse.Namespace) -> int:
    try:
        day = parse_day(args.day)
        slot = parse_slot(args.slot)
    except ValueError as exc:
        print(str(exc))
        return 2

    load = _load(args.seed)
    if load is None:
        return 1

    rooms = load.service.find_available_classrooms(slot, day)
    if not rooms:
        print(f"No free classrooms on {day.value} {slot.value}.")
        return 0
    print(f"Free classrooms on {day.value} {slot.value}: {', '.join(rooms)}")
    return 0


def _cmd_professor(args: argparse.Namespace) -> int:
    load = _load(args.seed)
    if load is None:
        return 1

    service = load.service
    professor = service.catalog.find_professor(args.professor_id)
    if professor is None:
        print(f"Unknown professor id: {args.professor_id}")
        return 1

    lessons = service.get_professor_schedule(args.professor_id)
    print(f"{professor.name} ({professor.department}): {len(lessons)} lessons")
    for lesson in lessons:
        print(f"- {_lesson_line(lesson)}")
    return 0


def print_report(service: ScheduleService) -> None:
    print("Classroom utilization:")
    for room in service.catalog.list_classrooms():
        print(f"- {room.number}: {service.get_classroom_utilization(room.number):.1f}%")

    print(f"Most popular course type: {service.get_most_popular_course_type().value}")

    print("Professor load:")
    for professor_id, count in service.get_professor_load().items():
        professor = service.catalog.find_professor(professor_id)
        name = professor.name if professor else f"(unknown {professor_id})"
        print(f"- {name}: {count} lessons")


def _cmd_report(args: argparse.Namespace) -> int:
    load = _load(args.seed)
    if load is None:
        return 1
    print_report(load.service)
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Export the timetable (or one professor's agenda) for one concrete week.
    """
    try:
        week_start = date.fromisoformat(args.week)
    except ValueError:
        print(f"Invalid --week date: {args.week!r} (expected YYYY-MM-DD)")
        return 2

    load = _load(args.seed)
    if load is None:
        return 1

    service = load.service
    if args.professor is not None:
        lessons: Any = service.get_professor_schedule(args.professor)
    else:
        lessons = service.lessons()

    if not lessons:
        print("No lessons to export.")
        return 0

    try:
        n = export_lessons_to_ics(lessons, service.catalog, week_start, args.out)
    except ValueError as exc:
        print(str(exc))
        return 2
    print(f"Exported {n} lessons to: {args.out}")
    return 0


def _cmd_import_catalog(args: argparse.Namespace) -> int:
    """
    Build a seed file from a department catalog page (URL or local HTML file).
    """
    source = args.source.strip()
    try:
        if source.startswith(("http://", "https://")):
            cache = Path(args.cache) if args.cache else None
            payload, skipped = parse_catalog_html(fetch_cached(source, cache_file=cache, refresh=args.refresh))
        else:
            payload, skipped = parse_catalog_file(source)
    except requests.RequestException as exc:
        print(f"Download failed: {exc}")
        return 1
    except OSError as exc:
        print(f"Cannot read {source}: {exc}")
        return 1

    for msg in skipped:
        print(f"Skipped row: {msg}")

    save_seed(payload, args.out)
    print(
        f"Imported {len(payload['professors'])} professors, {len(payload['classrooms'])} classrooms, "
        f"{len(payload['courses'])} courses to: {args.out}"
    )
    return 0


def _cmd_demo(args: argparse.Namespace) -> int:
    """
    Walk through the sample department: place, query, reassign, cancel.
    """
    load = service_from_payload(demo_payload())
    service = load.service
    print(f"Lessons placed: {len(service.lessons())}")

    clash = lesson_from_dict(
        {"id": 3, "course_id": 2, "professor_id": 1, "classroom_number": "102", "day": "Monday", "slot": "8:30-10:00"}
    )
    result = service.add_lesson(clash)
    print("Lesson added successfully" if result else f"Failed to add lesson: {_result_line(result)}")

    print(f"Available classrooms (Monday 10:15-11:45): {service.find_available_classrooms('10:15-11:45', 'Monday')}")

    print("Professor schedule (1):")
    for lesson in service.get_professor_schedule(1):
        print(f"- {_lesson_line(lesson)}")

    print_report(service)

    result = service.reassign_classroom(1, "102")
    print("Classroom reassigned successfully" if result else f"Failed to reassign classroom: {_result_line(result)}")

    service.cancel_lesson(1)
    print("Lesson cancelled")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="deptschedule", description="Department timetable CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every placement decision")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Replay a seed file and list rejected lessons")
    p_check.add_argument("seed", type=str, help="Seed JSON file")

    p_audit = sub.add_parser("audit", help="List double-bookings in a seed file as written")
    p_audit.add_argument("seed", type=str, help="Seed JSON file")

    p_avail = sub.add_parser("available", help="Free classrooms for one day/slot")
    p_avail.add_argument("seed", type=str, help="Seed JSON file")
    p_avail.add_argument("day", type=str, help="Day (e.g. Monday)")
    p_avail.add_argument("slot", type=str, help="Time slot (e.g. 8:30-10:00)")

    p_prof = sub.add_parser("professor", help="One professor's lessons")
    p_prof.add_argument("seed", type=str, help="Seed JSON file")
    p_prof.add_argument("professor_id", type=int, help="Professor id")

    p_report = sub.add_parser("report", help="Utilization, course types and professor load")
    p_report.add_argument("seed", type=str, help="Seed JSON file")

    p_export = sub.add_parser("export", help="Export one week to .ics")
    p_export.add_argument("seed", type=str, help="Seed JSON file")
    p_export.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    p_export.add_argument("--week", type=str, required=True, help="Monday of the week (YYYY-MM-DD)")
    p_export.add_argument("--professor", type=int, default=None, help="Only this professor's lessons")

    p_import = sub.add_parser("import-catalog", help="Build a seed file from a catalog page")
    p_import.add_argument("source", type=str, help="Catalog URL or local HTML file")
    p_import.add_argument("out", type=str, help="Seed JSON file to write")
    p_import.add_argument("--cache", type=str, default=None, help="Cache the downloaded HTML here")
    p_import.add_argument("--refresh", action="store_true", help="Ignore the cached HTML")

    sub.add_parser("demo", help="Run the sample department walkthrough")

    p_inter = sub.add_parser("interactive", help="Interactive menu mode")
    p_inter.add_argument("seed", type=str, nargs="?", default=None, help="Seed JSON file (default: sample data)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    handlers = {
        "check": _cmd_check,
        "audit": _cmd_audit,
        "available": _cmd_available,
        "professor": _cmd_professor,
        "report": _cmd_report,
        "export": _cmd_export,
        "import-catalog": _cmd_import_catalog,
        "demo": _cmd_demo,
    }
    if args.command in handlers:
        raise SystemExit(handlers[args.command](args))

    if args.command == "interactive":
        from deptschedule.interactive import run_interactive

        if args.seed is None:
            service = service_from_payload(demo_payload()).service
        else:
            load = _load(args.seed)
            if load is None:
                raise SystemExit(1)
            service = load.service
        run_interactive(service)
        raise SystemExit(0)

    raise SystemExit(2)
