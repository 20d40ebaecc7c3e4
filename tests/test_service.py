"""
Tests for the mutation API.

Contract:
- rejected add / reassign / move leave the schedule unchanged
- every placement that succeeds keeps professors and rooms single-booked
- cancel is unconditional and idempotent
"""

import random
import threading
import unittest

from deptschedule.catalog import CatalogStore
from deptschedule.conflicts import find_double_bookings
from deptschedule.errors import CatalogError, ErrorKind, InvalidInputError
from deptschedule.model import Classroom, Course, CourseType, DayOfWeek, Lesson, Professor, TimeSlot
from deptschedule.service import ScheduleService

MON = DayOfWeek.MONDAY
S1 = TimeSlot.SLOT_1


def make_service() -> ScheduleService:
    catalog = CatalogStore(
        professors=[Professor(1, "P1", "CS"), Professor(2, "P2", "CS"), Professor(3, "P3", "Math")],
        classrooms=[Classroom("101", 30, True), Classroom("102", 25, False), Classroom("202", 50, True)],
        courses=[Course(1, "Programming", CourseType.LECTURE), Course(2, "Ethics", CourseType.SEMINAR)],
    )
    return ScheduleService(catalog)


class TestAddLesson(unittest.TestCase):
    def test_professor_and_classroom_scenario(self) -> None:
        service = make_service()
        a = Lesson(1, 1, 1, "101", MON, S1)
        b = Lesson(2, 1, 1, "102", MON, S1)
        c = Lesson(3, 2, 2, "101", MON, S1)

        self.assertTrue(service.add_lesson(a))

        res_b = service.add_lesson(b)
        self.assertFalse(res_b)
        self.assertEqual(res_b.kind, ErrorKind.PROFESSOR_CONFLICT)
        self.assertEqual(res_b.conflict.lesson, a)

        res_c = service.add_lesson(c)
        self.assertFalse(res_c)
        self.assertEqual(res_c.kind, ErrorKind.CLASSROOM_CONFLICT)
        self.assertEqual(res_c.conflict.lesson, a)

        service.cancel_lesson(1)
        self.assertTrue(service.add_lesson(b))
        self.assertEqual(service.lessons(), (b,))

    def test_both_dimensions_reports_professor(self) -> None:
        service = make_service()
        service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        res = service.add_lesson(Lesson(2, 2, 1, "101", MON, S1))
        self.assertEqual(res.kind, ErrorKind.PROFESSOR_CONFLICT)

    def test_duplicate_id(self) -> None:
        service = make_service()
        service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        res = service.add_lesson(Lesson(1, 1, 2, "102", DayOfWeek.FRIDAY, S1))
        self.assertEqual(res.kind, ErrorKind.DUPLICATE_ID)
        self.assertEqual(len(service.lessons()), 1)

    def test_invalid_reference(self) -> None:
        service = make_service()
        for lesson in (
            Lesson(1, 99, 1, "101", MON, S1),
            Lesson(1, 1, 99, "101", MON, S1),
            Lesson(1, 1, 1, "999", MON, S1),
        ):
            res = service.add_lesson(lesson)
            self.assertEqual(res.kind, ErrorKind.INVALID_REFERENCE)
        self.assertEqual(service.lessons(), ())

    def test_invalid_input(self) -> None:
        service = make_service()
        res = service.add_lesson(Lesson(1, 1, 1, "101", "Saturday", S1))  # type: ignore[arg-type]
        self.assertEqual(res.kind, ErrorKind.INVALID_INPUT)
        res = service.add_lesson(Lesson(1, 1, 1, "101", MON, "7:00-8:00"))  # type: ignore[arg-type]
        self.assertEqual(res.kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(service.lessons(), ())

    def test_string_labels_are_normalized(self) -> None:
        service = make_service()
        res = service.add_lesson(Lesson(1, 1, 1, "101", "Monday", "8:30-10:00"))  # type: ignore[arg-type]
        self.assertTrue(res)
        self.assertIs(service.get_lesson(1).day, MON)

    def test_logs_commit(self) -> None:
        service = make_service()
        with self.assertLogs("deptschedule.service", level="INFO") as logs:
            service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        self.assertTrue(any("added lesson 1" in line for line in logs.output))


class TestReassignAndMove(unittest.TestCase):
    def setUp(self) -> None:
        self.service = make_service()
        self.service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        self.service.add_lesson(Lesson(2, 2, 2, "102", MON, S1))

    def test_reassign_to_free_room(self) -> None:
        res = self.service.reassign_classroom(1, "202")
        self.assertTrue(res)
        self.assertEqual(self.service.get_lesson(1).classroom_number, "202")
        # position in the schedule is kept
        self.assertEqual([l.id for l in self.service.lessons()], [1, 2])

    def test_reassign_to_own_room_is_allowed(self) -> None:
        self.assertTrue(self.service.reassign_classroom(1, "101"))

    def test_reassign_conflict_leaves_store_unchanged(self) -> None:
        before = self.service.lessons()
        res = self.service.reassign_classroom(1, "102")
        self.assertEqual(res.kind, ErrorKind.CLASSROOM_CONFLICT)
        self.assertEqual(res.conflict.lesson.id, 2)
        self.assertEqual(self.service.lessons(), before)

    def test_reassign_not_found(self) -> None:
        res = self.service.reassign_classroom(42, "202")
        self.assertEqual(res.kind, ErrorKind.NOT_FOUND)

    def test_reassign_unknown_room(self) -> None:
        res = self.service.reassign_classroom(1, "999")
        self.assertEqual(res.kind, ErrorKind.INVALID_REFERENCE)
        res = self.service.reassign_classroom(1, "  ")
        self.assertEqual(res.kind, ErrorKind.INVALID_INPUT)

    def test_move_lesson(self) -> None:
        self.assertTrue(self.service.move_lesson(2, "Tuesday", "10:15-11:45"))
        self.assertEqual(self.service.get_lesson(2).cell, (DayOfWeek.TUESDAY, TimeSlot.SLOT_2))

    def test_move_into_professor_conflict(self) -> None:
        self.service.add_lesson(Lesson(3, 1, 1, "202", DayOfWeek.FRIDAY, S1))
        before = self.service.lessons()
        res = self.service.move_lesson(3, MON, S1)
        self.assertEqual(res.kind, ErrorKind.PROFESSOR_CONFLICT)
        self.assertEqual(self.service.lessons(), before)

    def test_move_invalid_and_missing(self) -> None:
        self.assertEqual(self.service.move_lesson(1, "Sunday", S1).kind, ErrorKind.INVALID_INPUT)
        self.assertEqual(self.service.move_lesson(9, MON, S1).kind, ErrorKind.NOT_FOUND)


class TestCancel(unittest.TestCase):
    def test_cancel_is_idempotent(self) -> None:
        service = make_service()
        service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        self.assertTrue(service.cancel_lesson(1))
        self.assertFalse(service.cancel_lesson(1))
        self.assertEqual(service.lessons(), ())

    def test_cancel_unknown(self) -> None:
        service = make_service()
        self.assertFalse(service.cancel_lesson(7))


class TestQueriesThroughService(unittest.TestCase):
    def test_empty_schedule_most_popular(self) -> None:
        self.assertIs(make_service().get_most_popular_course_type(), CourseType.LECTURE)

    def test_available_accepts_labels(self) -> None:
        service = make_service()
        service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        self.assertEqual(service.find_available_classrooms("8:30-10:00", "Monday"), ["102", "202"])

    def test_utilization_and_load(self) -> None:
        service = make_service()
        service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))
        self.assertAlmostEqual(service.get_classroom_utilization("101"), 4.0)
        self.assertEqual(service.get_professor_load(), {1: 1, 2: 0, 3: 0})
        self.assertEqual([l.id for l in service.weekly_grid(professor_id=1)[MON][S1]], [1])


    def test_available_unknown_label(self) -> None:
        service = make_service()
        with self.assertRaises(InvalidInputError) as ctx:
            service.find_available_classrooms("8:30-10:00", "Sunday")
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INPUT)
        with self.assertRaises(InvalidInputError):
            service.find_available_classrooms("7:00-8:00", "Monday")


class TestValidate(unittest.TestCase):
    def setUp(self) -> None:
        self.service = make_service()
        self.service.add_lesson(Lesson(1, 1, 1, "101", MON, S1))

    def test_lowercase_labels_match_add_lesson(self) -> None:
        candidate = Lesson(9, 1, 1, "102", "monday", "8:30-10:00")  # type: ignore[arg-type]
        conflict = self.service.validate(candidate)
        self.assertIsNotNone(conflict)
        self.assertEqual(conflict.kind, ErrorKind.PROFESSOR_CONFLICT)
        self.assertEqual(self.service.add_lesson(candidate).kind, conflict.kind)

    def test_unknown_label_is_invalid_input(self) -> None:
        with self.assertRaises(InvalidInputError) as ctx:
            self.service.validate(Lesson(9, 1, 1, "101", "Saturday", S1))  # type: ignore[arg-type]
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INPUT)

    def test_exclude_id(self) -> None:
        own = self.service.get_lesson(1)
        self.assertEqual(self.service.validate(own).kind, ErrorKind.PROFESSOR_CONFLICT)
        self.assertIsNone(self.service.validate(own, exclude_id=1))

    def test_validate_does_not_mutate(self) -> None:
        before = self.service.lessons()
        self.service.validate(Lesson(9, 2, 2, "102", MON, S1))
        self.assertEqual(self.service.lessons(), before)


class TestCatalogThroughService(unittest.TestCase):
    def test_added_entries_are_usable(self) -> None:
        service = make_service()
        service.add_professor(Professor(4, "P4", "Physics"))
        service.add_classroom(Classroom("303", 20, False))
        service.add_course(Course(3, "Optics", CourseType.LAB))
        self.assertTrue(service.add_lesson(Lesson(1, 3, 4, "303", MON, S1)))
        self.assertIn("303", service.find_available_classrooms(TimeSlot.SLOT_2, MON))

    def test_duplicates_still_rejected(self) -> None:
        service = make_service()
        with self.assertRaises(CatalogError):
            service.add_classroom(Classroom("101", 10, False))


class TestInvariants(unittest.TestCase):
    def test_random_mutations_never_double_book(self) -> None:
        rng = random.Random(1234)
        service = make_service()
        days = list(DayOfWeek)
        slots = list(TimeSlot)
        rooms = ["101", "102", "202"]

        for i in range(400):
            op = rng.random()
            if op < 0.6:
                service.add_lesson(
                    Lesson(i, rng.choice([1, 2]), rng.choice([1, 2, 3]), rng.choice(rooms), rng.choice(days), rng.choice(slots))
                )
            elif op < 0.8:
                before = service.lessons()
                res = service.reassign_classroom(rng.randrange(i + 1), rng.choice(rooms))
                if not res:
                    self.assertEqual(service.lessons(), before)
            elif op < 0.9:
                service.move_lesson(rng.randrange(i + 1), rng.choice(days), rng.choice(slots))
            else:
                service.cancel_lesson(rng.randrange(i + 1))

            self.assertEqual(find_double_bookings(service.lessons()), [])

    def test_concurrent_adds_on_one_cell(self) -> None:
        service = make_service()
        results = []
        lock = threading.Lock()

        def worker(lesson_id: int) -> None:
            res = service.add_lesson(Lesson(lesson_id, 1, 1 + lesson_id % 3, "101", MON, S1))
            with lock:
                results.append(res)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(30)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(sum(1 for r in results if r), 1)
        self.assertEqual(len(service.lessons()), 1)


if __name__ == "__main__":
    unittest.main()
