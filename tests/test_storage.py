"""
Unit tests for the schedule store primitives.

The store does no conflict checking; it only keeps lessons by id.
"""

import unittest

from deptschedule.model import DayOfWeek, Lesson, TimeSlot
from deptschedule.storage import ScheduleStore


def _lesson(lesson_id: int, room: str = "101") -> Lesson:
    return Lesson(lesson_id, 1, 1, room, DayOfWeek.MONDAY, TimeSlot.SLOT_1)


class TestScheduleStore(unittest.TestCase):
    def test_insert_keeps_order_and_ids_unique(self) -> None:
        store = ScheduleStore()
        self.assertTrue(store.insert(_lesson(2)))
        self.assertTrue(store.insert(_lesson(1)))
        self.assertFalse(store.insert(_lesson(1, room="202")))
        self.assertEqual([l.id for l in store.lessons()], [2, 1])
        self.assertEqual(store.get(1).classroom_number, "101")

    def test_store_does_not_check_conflicts(self) -> None:
        # same professor, same cell: the store accepts it, validation is elsewhere
        store = ScheduleStore()
        store.insert(_lesson(1))
        self.assertTrue(store.insert(_lesson(2)))
        self.assertEqual(len(store), 2)

    def test_replace_keeps_position(self) -> None:
        store = ScheduleStore()
        for i in (1, 2, 3):
            store.insert(_lesson(i))
        self.assertTrue(store.replace(2, _lesson(2, room="202")))
        self.assertEqual([l.id for l in store], [1, 2, 3])
        self.assertEqual(store.get(2).classroom_number, "202")

    def test_replace_unknown_or_renaming_is_noop(self) -> None:
        store = ScheduleStore()
        store.insert(_lesson(1))
        self.assertFalse(store.replace(5, _lesson(5)))
        self.assertFalse(store.replace(1, _lesson(9)))
        self.assertEqual(store.lessons(), (_lesson(1),))

    def test_remove(self) -> None:
        store = ScheduleStore()
        store.insert(_lesson(1))
        self.assertTrue(store.remove(1))
        self.assertFalse(store.remove(1))
        self.assertNotIn(1, store)

    def test_snapshot_is_detached(self) -> None:
        store = ScheduleStore()
        store.insert(_lesson(1))
        snap = store.lessons()
        store.remove(1)
        self.assertEqual(len(snap), 1)


if __name__ == "__main__":
    unittest.main()
