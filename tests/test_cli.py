"""
Tests for CLI entry points.

Every test points --data at a temporary file so the real data file
used by the application is never touched.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from coursereg.cli import main
from coursereg.model import Course, Store, Student
from coursereg.storage import load_store, save_store


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "data.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit) as ctx:
                main(["--data", str(self.path), *argv])
        return ctx.exception.code, out.getvalue()

    def test_requires_command(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main([])
        self.assertNotEqual(ctx.exception.code, 0)

    def test_courses_lists_default_catalog(self) -> None:
        code, out = self.run_cli("courses")
        self.assertEqual(code, 0)
        self.assertIn("CSE101 | Introduction to Programming | Mon, Wed | 09:00-10:30 | 0/30", out)
        self.assertIn("MAT201", out)

    def test_add_course_and_register_scenario(self) -> None:
        code, out = self.run_cli(
            "add-course", "--id", "CSE102", "--name", "Lab", "--days", "Mon", "--start", "09:30", "--end", "10:00"
        )
        self.assertEqual((code, out.strip()), (0, "Course added"))

        self.assertEqual(self.run_cli("register", "student1", "CSE101")[0], 0)
        self.assertEqual(self.run_cli("register", "student1", "MAT201")[0], 0)

        code, out = self.run_cli("register", "student1", "CSE102")
        self.assertEqual(code, 1)
        self.assertIn("schedule conflict", out)

        student = [s for s in load_store(self.path).students if s.username == "student1"][0]
        self.assertEqual(student.registrations, ("CSE101", "MAT201"))

    def test_add_course_bad_time(self) -> None:
        code, out = self.run_cli("add-course", "--id", "BAD", "--days", "Mon", "--start", "25:00", "--end", "26:00")
        self.assertEqual(code, 1)
        self.assertIn("Invalid time", out)
        self.assertFalse(self.path.exists())

    def test_update_and_delete(self) -> None:
        self.run_cli("register", "student2", "MAT201")
        code, out = self.run_cli("update-course", "--id", "MAT201", "--seats", "1", "--name", "Discrete Math")
        self.assertEqual(code, 0)
        course = [c for c in load_store(self.path).courses if c.id == "MAT201"][0]
        self.assertEqual((course.name, course.seats, course.start), ("Discrete Math", 1, "11:00"))

        code, out = self.run_cli("register", "student1", "MAT201")
        self.assertEqual((code, out.strip()), (1, "No seats available"))

        code, out = self.run_cli("update-course", "--id", "NOPE", "--name", "x")
        self.assertEqual(code, 0)
        self.assertIn("nothing updated", out)

        self.assertEqual(self.run_cli("delete-course", "MAT201")[0], 0)
        for s in load_store(self.path).students:
            self.assertNotIn("MAT201", s.registrations)

    def test_add_user_duplicate(self) -> None:
        self.assertEqual(self.run_cli("add-user", "student", "student3", "pw", "Student Three")[0], 0)
        code, out = self.run_cli("add-user", "student", "student3", "pw")
        self.assertEqual((code, out.strip()), (1, "Student username taken"))
        # separate namespace for admins
        self.assertEqual(self.run_cli("add-user", "admin", "student3", "pw")[0], 0)

    def test_timetable_and_conflicts(self) -> None:
        self.run_cli("register", "student1", "CSE101")
        code, out = self.run_cli("timetable", "student1")
        self.assertEqual(code, 0)
        self.assertIn("09:00 | CSE101", out)

        code, out = self.run_cli("conflicts", "student1")
        self.assertEqual((code, out.strip()), (0, "No conflicts found."))

        code, out = self.run_cli("timetable", "ghost")
        self.assertEqual(code, 1)

    def test_unregister_twice_is_noop(self) -> None:
        self.run_cli("register", "student1", "CSE101")
        self.assertEqual(self.run_cli("unregister", "student1", "CSE101")[0], 0)
        self.assertEqual(self.run_cli("unregister", "student1", "CSE101")[0], 0)

    def test_reset(self) -> None:
        self.run_cli("delete-course", "CSE101")
        self.assertEqual(len(load_store(self.path).courses), 1)
        self.assertEqual(self.run_cli("reset")[0], 0)
        self.assertEqual(len(load_store(self.path).courses), 2)

    def test_update_course_rejects_invalid_values(self) -> None:
        for extra in (["--start", "11:00", "--end", "10:00"], ["--start", "9am"], ["--seats", "-1"]):
            with self.subTest(extra=extra):
                code, out = self.run_cli("update-course", "--id", "CSE101", *extra)
                self.assertEqual(code, 1)
                self.assertNotIn("Course updated", out)
        self.assertFalse(self.path.exists())

    def test_timetable_with_malformed_stored_time(self) -> None:
        broken = Course(id="OLD1", name="Old", days=("Mon",), start="9am", end="10:00")
        save_store(Store(students=(Student("s1", "pw", registrations=("OLD1",)),), courses=(broken,)), self.path)
        code, out = self.run_cli("timetable", "s1")
        self.assertEqual(code, 1)
        self.assertIn("Invalid time format", out)

    def test_save_failure_exits_nonzero(self) -> None:
        with mock.patch("coursereg.cli.save_store", side_effect=OSError("read-only file system")):
            code, out = self.run_cli("register", "student1", "CSE101")
            self.assertEqual((code, out.strip()), (1, "Could not save data: read-only file system"))
            code, out = self.run_cli("reset")
            self.assertEqual(code, 1)
        self.assertFalse(self.path.exists())


if __name__ == "__main__":
    unittest.main()
