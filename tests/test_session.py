"""
Tests for the application session: login, role checks, status messages
and persisting after every successful action.
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from coursereg.model import Admin, Course, Student
from coursereg.session import Session
from coursereg.storage import load_store

CSE102 = Course(id="CSE102", name="Lab", days=("Mon",), start="09:30", end="10:00", seats=10)


class TestSession(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "data.json"
        self.session = Session.open(self.path)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_open_uses_default_dataset(self) -> None:
        self.assertEqual([c.id for c in self.session.store.courses], ["CSE101", "MAT201"])
        self.assertIsNone(self.session.role)

    def test_login_logout(self) -> None:
        self.assertFalse(self.session.login("admin", "admin1", "nope"))
        self.assertEqual(self.session.message, "Invalid credentials")
        self.assertIsNone(self.session.role)

        self.assertTrue(self.session.login("admin", "admin1", "admin1"))
        self.assertEqual(self.session.role, "admin")
        self.assertEqual(self.session.user.name, "Admin One")

        self.session.logout()
        self.assertIsNone(self.session.role)
        self.assertIsNone(self.session.user)

    def test_admin_action_persists(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        self.assertTrue(self.session.add_course(CSE102))
        self.assertEqual(self.session.message, "Course added")
        self.assertEqual(load_store(self.path), self.session.store)

        self.assertTrue(self.session.add_user("student", Student("student3", "pw", "Student Three")))
        self.assertEqual(self.session.message, "Student added")
        self.assertTrue(self.session.add_user("admin", Admin("admin3", "pw", "Admin Three")))
        self.assertEqual(self.session.message, "Admin added")
        self.assertEqual(len(load_store(self.path).students), 3)

    def test_rejected_action_keeps_snapshot_and_file(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        before = self.session.store
        self.assertFalse(self.session.add_course(Course(id="CSE101")))
        self.assertEqual(self.session.message, "Course with same ID already exists.")
        self.assertIs(self.session.store, before)
        self.assertFalse(self.path.exists())

    def test_student_cannot_run_admin_actions(self) -> None:
        self.session.login("student", "student1", "student1")
        self.assertFalse(self.session.delete_course("CSE101"))
        self.assertEqual(self.session.message, "Not authorized")
        self.assertEqual(len(self.session.store.courses), 2)

    def test_admin_cannot_register(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        self.assertFalse(self.session.register("CSE101"))
        self.assertEqual(self.session.message, "Not authorized")

    def test_student_flow(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        self.session.add_course(CSE102)
        self.session.logout()

        self.session.login("student", "student1", "student1")
        self.assertTrue(self.session.register("CSE101"))
        self.assertEqual(self.session.message, "Registered successfully")
        self.assertTrue(self.session.register("MAT201"))

        self.assertFalse(self.session.register("CSE102"))
        self.assertEqual(self.session.message, "Cannot register due to a schedule conflict with CSE101")

        self.assertFalse(self.session.register("CSE101"))
        self.assertEqual(self.session.message, "Already registered for this course")

        self.assertEqual([c.id for c in self.session.my_courses()], ["CSE101", "MAT201"])

        self.assertTrue(self.session.unregister("CSE101"))
        self.assertEqual(self.session.message, "Unregistered")
        reloaded = Session.open(self.path)
        self.assertEqual(reloaded.store, self.session.store)
        self.assertEqual(
            [s.registrations for s in reloaded.store.students if s.username == "student1"], [("MAT201",)]
        )

    def test_delete_course_message(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        self.assertTrue(self.session.delete_course("MAT201"))
        self.assertEqual(self.session.message, "Course deleted and registrations updated")
        self.assertEqual([c.id for c in load_store(self.path).courses], ["CSE101"])

    def test_failed_save_keeps_snapshot(self) -> None:
        self.session.login("admin", "admin1", "admin1")
        before = self.session.store
        with mock.patch("coursereg.session.save_store", side_effect=OSError("read-only file system")):
            self.assertFalse(self.session.add_course(CSE102))
        self.assertIs(self.session.store, before)
        self.assertEqual(self.session.message, "Could not save data: read-only file system")
        self.assertFalse(self.path.exists())

        # the next action still works once saving is possible again
        self.assertTrue(self.session.add_course(CSE102))
        self.assertEqual(load_store(self.path), self.session.store)


if __name__ == "__main__":
    unittest.main()
