"""
Tests for CLI entry points.

These tests focus on:
- exit codes of each command (0 = ok, 1 = rejected/failed, 2 = bad arguments)
- the printed conflict reason for rejected lessons
Seed files live in a temporary directory.
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from deptschedule.cli import main
from deptschedule.seed import demo_payload, save_seed


def run_cli(argv: list[str]) -> tuple[int, str]:
    buf = io.StringIO()
    code = None
    with redirect_stdout(buf):
        try:
            main(argv)
        except SystemExit as exc:
            code = exc.code
    return code, buf.getvalue()


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.seed = self.dir / "seed.json"
        save_seed(demo_payload(), self.seed)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _seed_with_clash(self) -> Path:
        payload = demo_payload()
        payload["lessons"].append(
            {"id": 3, "course_id": 2, "professor_id": 1, "classroom_number": "102", "day": "Monday", "slot": "8:30-10:00"}
        )
        p = self.dir / "clash.json"
        save_seed(payload, p)
        return p

    def test_check_clean_seed(self) -> None:
        code, out = run_cli(["check", str(self.seed)])
        self.assertEqual(code, 0)
        self.assertIn("Placed lessons: 2", out)

    def test_check_reports_conflict_reason(self) -> None:
        code, out = run_cli(["check", str(self._seed_with_clash())])
        self.assertEqual(code, 1)
        self.assertIn("ProfessorConflict", out)
        self.assertIn("#1 |", out)

    def test_audit_lists_pairs(self) -> None:
        code, out = run_cli(["audit", str(self._seed_with_clash())])
        self.assertEqual(code, 1)
        self.assertIn("Double-bookings found: 1", out)

        code, out = run_cli(["audit", str(self.seed)])
        self.assertEqual(code, 0)

    def test_available(self) -> None:
        code, out = run_cli(["available", str(self.seed), "monday", "8:30-10:00"])
        self.assertEqual(code, 0)
        self.assertIn("102, 202", out)

    def test_available_bad_day(self) -> None:
        code, _ = run_cli(["available", str(self.seed), "Sunday", "8:30-10:00"])
        self.assertEqual(code, 2)

    def test_professor(self) -> None:
        code, out = run_cli(["professor", str(self.seed), "1"])
        self.assertEqual(code, 0)
        self.assertIn("Ivan Petrenko", out)
        code, _ = run_cli(["professor", str(self.seed), "42"])
        self.assertEqual(code, 1)

    def test_report(self) -> None:
        code, out = run_cli(["report", str(self.seed)])
        self.assertEqual(code, 0)
        self.assertIn("101: 4.0%", out)
        self.assertIn("Most popular course type: Lecture", out)

    def test_missing_seed(self) -> None:
        code, out = run_cli(["report", str(self.dir / "missing.json")])
        self.assertEqual(code, 1)
        self.assertIn("Cannot load seed", out)

    def test_export(self) -> None:
        out_file = self.dir / "week.ics"
        code, out = run_cli(["export", str(self.seed), str(out_file), "--week", "2026-02-16", "--professor", "2"])
        self.assertEqual(code, 0)
        self.assertIn("Exported 1 lessons", out)
        self.assertTrue(out_file.exists())

        code, _ = run_cli(["export", str(self.seed), str(out_file), "--week", "16.02.2026"])
        self.assertEqual(code, 2)

    def test_import_catalog_from_file(self) -> None:
        html = self.dir / "catalog.html"
        html.write_text(
            '<table id="classrooms"><tr><th>Room</th><th>Capacity</th></tr><tr><td>A1</td><td>40</td></tr></table>',
            encoding="utf-8",
        )
        out_file = self.dir / "imported.json"
        code, _ = run_cli(["import-catalog", str(html), str(out_file)])
        self.assertEqual(code, 0)
        data = json.loads(out_file.read_text(encoding="utf-8"))
        self.assertEqual(data["classrooms"], [{"number": "A1", "capacity": 40, "has_projector": False}])

    def test_import_catalog_from_url(self) -> None:
        out_file = self.dir / "imported.json"
        with mock.patch("deptschedule.cli.fetch_cached", return_value="<html></html>") as fetch:
            code, _ = run_cli(["import-catalog", "https://dept.example.edu/catalog", str(out_file)])
        self.assertEqual(code, 0)
        fetch.assert_called_once()
        self.assertTrue(out_file.exists())

    def test_demo(self) -> None:
        code, out = run_cli(["demo"])
        self.assertEqual(code, 0)
        self.assertIn("Failed to add lesson: ProfessorConflict", out)
        self.assertIn("Classroom reassigned successfully", out)
        self.assertIn("Lesson cancelled", out)

    def test_unknown_command(self) -> None:
        with redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["nope"])
        self.assertNotEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
