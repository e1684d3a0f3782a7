"""
Application session.

A Session bundles what the presentation layer needs between actions:
- the current Store snapshot
- who is logged in (role + username)
- the status message of the last action
- where to persist

Lifecycle: open from the saved snapshot (or the default dataset), apply store
operations one at a time, save after every successful mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from coursereg import store as ops
from coursereg.errors import NotAuthorizedError, RegistrationError, StudentNotFoundError
from coursereg.model import Admin, Course, Store, Student
from coursereg.storage import load_store, save_store

logger = logging.getLogger(__name__)


@dataclass
class Session:
    store: Store
    path: Optional[Path] = None
    role: Optional[str] = None
    username: Optional[str] = None
    message: str = ""

    @classmethod
    def open(cls, path: str | Path | None = None) -> "Session":
        return cls(store=load_store(path), path=Path(path) if path is not None else None)

    # -- auth ---------------------------------------------------------------

    @property
    def user(self) -> Admin | Student | None:
        if self.role == "admin":
            return ops.find_admin(self.store, self.username or "")
        if self.role == "student":
            return ops.find_student(self.store, self.username or "")
        return None

    def login(self, kind: str, username: str, password: str) -> bool:
        try:
            user = ops.authenticate(self.store, kind, username, password)
        except RegistrationError as e:
            self.message = str(e)
            logger.info("Login rejected for %s %r", kind, username)
            return False
        self.role = kind
        self.username = user.username
        self.message = ""
        logger.info("Logged in as %s %r", kind, username)
        return True

    def logout(self) -> None:
        self.role = None
        self.username = None
        self.message = ""

    def _require(self, role: str) -> None:
        if self.role != role or self.user is None:
            raise NotAuthorizedError()

    # -- dispatch -----------------------------------------------------------

    def _apply(self, role: str, action: Callable[[Store], Store], success: str) -> bool:
        """
        Run one store operation as the logged-in user.

        On success the new snapshot is saved, then replaces the old one;
        on rejection or a failed save the snapshot stays as it was.
        Either way self.message holds the status line.
        """
        try:
            self._require(role)
            new_store = action(self.store)
        except RegistrationError as e:
            self.message = str(e)
            logger.info("Rejected: %s", self.message)
            return False

        try:
            save_store(new_store, self.path)
        except OSError as e:
            self.message = f"Could not save data: {e}"
            logger.error("Save failed, keeping previous snapshot: %s", e)
            return False

        self.store = new_store
        self.message = success
        logger.info("Accepted: %s", success)
        return True

    # -- admin actions ------------------------------------------------------

    def add_course(self, course: Course) -> bool:
        return self._apply("admin", lambda s: ops.add_course(s, course), "Course added")

    def update_course(self, course: Course) -> bool:
        return self._apply("admin", lambda s: ops.update_course(s, course), "Course updated")

    def delete_course(self, course_id: str) -> bool:
        return self._apply(
            "admin", lambda s: ops.delete_course(s, course_id), "Course deleted and registrations updated"
        )

    def add_user(self, kind: str, user: Admin | Student) -> bool:
        label = "Admin added" if kind == "admin" else "Student added"
        return self._apply("admin", lambda s: ops.add_user(s, kind, user), label)

    # -- student actions ----------------------------------------------------

    def register(self, course_id: str) -> bool:
        return self._apply(
            "student", lambda s: ops.register_course(s, self.username or "", course_id), "Registered successfully"
        )

    def unregister(self, course_id: str) -> bool:
        return self._apply(
            "student", lambda s: ops.unregister_course(s, self.username or "", course_id), "Unregistered"
        )

    def my_courses(self) -> list[Course]:
        if self.role != "student" or not self.username:
            raise StudentNotFoundError("No student logged in")
        return ops.registered_courses(self.store, self.username)
