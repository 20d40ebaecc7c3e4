import tempfile
import unittest
from datetime import date
from pathlib import Path

from deptschedule.export_ics import export_lessons_to_ics
from deptschedule.seed import demo_service


class TestExportICS(unittest.TestCase):
    def test_export_creates_file_and_contains_calendar(self) -> None:
        service = demo_service()

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "out.ics"
            n = export_lessons_to_ics(service.lessons(), service.catalog, date(2026, 2, 16), out)
            self.assertEqual(n, 2)
            text = out.read_text(encoding="utf-8")
            self.assertIn("BEGIN:VCALENDAR", text)
            self.assertIn("BEGIN:VEVENT", text)
            self.assertIn("SUMMARY:Introduction to Programming (Lecture)", text)
            # lesson 1: Monday 8:30-10:00
            self.assertIn("DTSTART:20260216T083000", text)
            self.assertIn("DTEND:20260216T100000", text)
            # lesson 2: Wednesday 12:15-13:45
            self.assertIn("DTSTART:20260218T121500", text)
            self.assertIn("LOCATION:Room 202", text)
            self.assertNotIn("RRULE", text)

    def test_week_must_start_on_monday(self) -> None:
        service = demo_service()
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(ValueError):
                export_lessons_to_ics(service.lessons(), service.catalog, date(2026, 2, 17), Path(d) / "x.ics")


if __name__ == "__main__":
    unittest.main()
