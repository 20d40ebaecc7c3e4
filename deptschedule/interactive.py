from __future__ import annotations

from typing import Callable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from deptschedule.errors import MutationResult
from deptschedule.model import DayOfWeek, Lesson, TimeSlot, lesson_from_dict
from deptschedule.service import ScheduleService


class Session:
    """
    One interactive run: the service being edited plus console I/O.
    `prompt_fn` defaults to console.input; tests pass a scripted one.
    """

    def __init__(
        self,
        service: ScheduleService,
        console: Optional[Console] = None,
        prompt_fn: Optional[Callable[[str], str]] = None,
    ) -> None:
        self.service = service
        self.console = console if console is not None else Console()
        self.prompt_fn = prompt_fn if prompt_fn is not None else self.console.input

    def println(self, msg: str = "") -> None:
        self.console.print(msg)

    def prompt(self, msg: str) -> str:
        return self.prompt_fn(msg).strip()

    def prompt_int(self, msg: str) -> Optional[int]:
        raw = self.prompt(msg)
        if not raw:
            return None
        if not raw.lstrip("-").isdigit():
            self.println("Not a number.")
            return None
        return int(raw)


def _result_message(result: MutationResult, done: str) -> str:
    if result:
        return f"[green]{escape(done)}[/]"
    return f"[red]{escape(result.message)}[/]"


def _pick_enum(session: Session, title: str, members: list) -> Optional[object]:
    for i, m in enumerate(members, start=1):
        session.println(f"{i}) {m.value}")
    i = session.prompt_int(f"{title} (blank = back): ")
    if i is None:
        return None
    if not (1 <= i <= len(members)):
        session.println("Out of range.")
        return None
    return members[i - 1]


def _pick_cell(session: Session) -> Optional[tuple[DayOfWeek, TimeSlot]]:
    day = _pick_enum(session, "Day", list(DayOfWeek))
    if day is None:
        return None
    slot = _pick_enum(session, "Slot", list(TimeSlot))
    if slot is None:
        return None
    return day, slot  # type: ignore[return-value]


def _lessons_table(session: Session, title: str, lessons: list[Lesson]) -> None:
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Day")
    table.add_column("Slot")
    table.add_column("Room")
    table.add_column("Course")
    table.add_column("Professor")
    for l in lessons:
        course = session.service.catalog.find_course(l.course_id)
        professor = session.service.catalog.find_professor(l.professor_id)
        table.add_row(
            str(l.id),
            l.day.value,
            l.slot.value,
            escape(l.classroom_number),
            escape(course.name) if course else str(l.course_id),
            escape(professor.name) if professor else str(l.professor_id),
        )
    session.console.print(table)


def _flow_add(session: Session) -> None:
    lesson_id = session.prompt_int("Lesson id (blank = back): ")
    if lesson_id is None:
        return
    course_id = session.prompt_int("Course id: ")
    professor_id = session.prompt_int("Professor id: ")
    room = session.prompt("Classroom number: ")
    cell = _pick_cell(session)
    if course_id is None or professor_id is None or not room or cell is None:
        session.println("Cancelled.")
        return

    lesson = lesson_from_dict(
        {
            "id": lesson_id,
            "course_id": course_id,
            "professor_id": professor_id,
            "classroom_number": room,
            "day": cell[0],
            "slot": cell[1],
        }
    )
    session.println(_result_message(session.service.add_lesson(lesson), f"Added lesson {lesson_id}"))


def _flow_reassign(session: Session) -> None:
    lesson_id = session.prompt_int("Lesson id (blank = back): ")
    if lesson_id is None:
        return
    room = session.prompt("New classroom number: ")
    result = session.service.reassign_classroom(lesson_id, room)
    session.println(_result_message(result, f"Lesson {lesson_id} moved to room {room}"))


def _flow_move(session: Session) -> None:
    lesson_id = session.prompt_int("Lesson id (blank = back): ")
    if lesson_id is None:
        return
    cell = _pick_cell(session)
    if cell is None:
        return
    result = session.service.move_lesson(lesson_id, cell[0], cell[1])
    session.println(_result_message(result, f"Lesson {lesson_id} moved to {cell[0].value} {cell[1].value}"))


def _flow_cancel(session: Session) -> None:
    lesson_id = session.prompt_int("Lesson id (blank = back): ")
    if lesson_id is None:
        return
    if session.service.cancel_lesson(lesson_id):
        session.println(f"Cancelled lesson {lesson_id}")
    else:
        session.println(f"No lesson {lesson_id} (nothing to cancel)")


def _flow_available(session: Session) -> None:
    cell = _pick_cell(session)
    if cell is None:
        return
    day, slot = cell
    rooms = session.service.find_available_classrooms(slot, day)
    if rooms:
        session.println(f"Free on {day.value} {slot.value}: [cyan]{escape(', '.join(rooms))}[/]")
    else:
        session.println(f"No free classrooms on {day.value} {slot.value}.")


def _flow_agenda(session: Session) -> None:
    professor_id = session.prompt_int("Professor id (blank = back): ")
    if professor_id is None:
        return
    professor = session.service.catalog.find_professor(professor_id)
    name = professor.name if professor else f"Professor {professor_id}"
    lessons = session.service.get_professor_schedule(professor_id)
    if not lessons:
        session.println(f"{escape(name)} has no lessons.")
        return
    _lessons_table(session, f"Agenda: {escape(name)}", lessons)


def _flow_room(session: Session) -> None:
    room = session.prompt("Classroom number (blank = back): ")
    if not room:
        return
    if session.service.catalog.find_classroom(room) is None:
        session.println(f"Unknown classroom: {escape(room)}")
        return
    lessons = session.service.get_classroom_schedule(room)
    if not lessons:
        session.println(f"Room {escape(room)} is free all week.")
        return
    _lessons_table(session, f"Room {escape(room)}", lessons)


def _flow_week(session: Session) -> None:
    grid = session.service.weekly_grid()
    table = Table(title="Week", box=box.SIMPLE)
    table.add_column("Slot")
    for day in DayOfWeek:
        table.add_column(day.value)
    for slot in TimeSlot:
        row = [slot.value]
        for day in DayOfWeek:
            row.append("\n".join(f"{escape(l.classroom_number)} #{l.id}" for l in grid[day][slot]))
        table.add_row(*row)
    session.console.print(table)


def _flow_report(session: Session) -> None:
    service = session.service
    table = Table(title="Classroom utilization", box=box.SIMPLE)
    table.add_column("Room")
    table.add_column("Capacity", justify="right")
    table.add_column("Projector")
    table.add_column("Used", justify="right")
    for room in service.catalog.list_classrooms():
        table.add_row(
            escape(room.number),
            str(room.capacity),
            "yes" if room.has_projector else "no",
            f"{service.get_classroom_utilization(room.number):.1f}%",
        )
    session.console.print(table)

    session.println(f"Most popular course type: [green]{service.get_most_popular_course_type().value}[/]")
    for professor_id, count in service.get_professor_load().items():
        professor = service.catalog.find_professor(professor_id)
        name = professor.name if professor else str(professor_id)
        session.println(f"{escape(name)}: {count} lessons")


def run_interactive(
    service: ScheduleService,
    console: Optional[Console] = None,
    prompt_fn: Optional[Callable[[str], str]] = None,
) -> None:
    """
    Interactive menu loop over one in-memory timetable.
    """
    session = Session(service, console=console, prompt_fn=prompt_fn)
    flows = {
        "1": _flow_add,
        "2": _flow_reassign,
        "3": _flow_move,
        "4": _flow_cancel,
        "5": _flow_available,
        "6": _flow_agenda,
        "7": _flow_week,
        "8": _flow_report,
        "9": _flow_room,
    }

    while True:
        session.println(f"\n=== DeptSchedule (interactive) === lessons: {len(service.lessons())}")
        choice = session.prompt(
            "\n[1] Add lesson\n"
            "[2] Reassign classroom\n"
            "[3] Move lesson\n"
            "[4] Cancel lesson\n"
            "[5] Free classrooms\n"
            "[6] Professor agenda\n"
            "[7] Week grid\n"
            "[8] Report\n"
            "[9] Room schedule\n"
            "[0] Exit\n"
            "Select: "
        )

        if choice == "0":
            session.println("Bye.")
            return

        flow = flows.get(choice)
        if flow is None:
            session.println("Invalid choice.")
            continue
        flow(session)
