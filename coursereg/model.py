"""
Central data model definitions used across the project.

All records are frozen dataclasses holding tuples, so a Store is an immutable
snapshot: store operations build a new Store with ``dataclasses.replace`` and
share every untouched record with the previous one.

The ``to_dict`` / ``from_dict`` pairs define the persisted JSON layout:

    {"users": {"admins": [...], "students": [...]}, "courses": [...]}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

WEEKDAYS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _str(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Course:
    """
    One catalog entry.

    ``days`` holds weekday labels (see WEEKDAYS), ``start``/``end`` are "HH:MM".
    ``seats`` is the seat cap; None means no cap.
    """

    id: str
    name: str = ""
    code: str = ""
    description: str = ""
    days: Tuple[str, ...] = ()
    start: str = "09:00"
    end: str = "10:00"
    date_range: str = ""
    seats: Optional[int] = 30

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "description": self.description,
            "days": list(self.days),
            "start": self.start,
            "end": self.end,
            "dateRange": self.date_range,
            "seats": self.seats,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        days = data.get("days") or []
        if isinstance(days, str):
            days = days.split(",")
        seats = data.get("seats")
        return cls(
            id=_str(data.get("id")).strip(),
            name=_str(data.get("name")),
            code=_str(data.get("code")),
            description=_str(data.get("description")),
            days=tuple(_str(d).strip() for d in days if _str(d).strip()),
            start=_str(data.get("start")).strip(),
            end=_str(data.get("end")).strip(),
            date_range=_str(data.get("dateRange")),
            seats=None if seats is None else int(seats),
        )


@dataclass(frozen=True)
class Admin:
    username: str
    password: str
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "password": self.password, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Admin":
        return cls(
            username=_str(data.get("username")),
            password=_str(data.get("password")),
            name=_str(data.get("name")),
        )


@dataclass(frozen=True)
class Student:
    """
    A student account. ``registrations`` keeps course ids in registration order.
    """

    username: str
    password: str
    name: str = ""
    registrations: Tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "password": self.password,
            "name": self.name,
            "registrations": list(self.registrations),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Student":
        regs = data.get("registrations") or []
        # drop duplicates, keep first occurrence
        unique: list[str] = []
        for r in regs:
            cid = _str(r)
            if cid and cid not in unique:
                unique.append(cid)
        return cls(
            username=_str(data.get("username")),
            password=_str(data.get("password")),
            name=_str(data.get("name")),
            registrations=tuple(unique),
        )


@dataclass(frozen=True)
class Store:
    """
    Full application state: admins, students and courses.
    """

    admins: Tuple[Admin, ...] = field(default_factory=tuple)
    students: Tuple[Student, ...] = field(default_factory=tuple)
    courses: Tuple[Course, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "users": {
                "admins": [a.to_dict() for a in self.admins],
                "students": [s.to_dict() for s in self.students],
            },
            "courses": [c.to_dict() for c in self.courses],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Store":
        """
        Build a Store from the persisted layout.

        Raises ValueError / TypeError / AttributeError for documents of the wrong shape;
        storage.load_store turns those into a fallback to the default dataset.
        """
        if not isinstance(data, dict):
            raise ValueError("store document must be a JSON object")
        users = data.get("users") or {}
        return cls(
            admins=tuple(Admin.from_dict(a) for a in users.get("admins") or []),
            students=tuple(Student.from_dict(s) for s in users.get("students") or []),
            courses=tuple(Course.from_dict(c) for c in data.get("courses") or []),
        )


def default_store() -> Store:
    """
    Demo dataset used on first run and whenever the persisted blob is unusable.
    """
    return Store(
        admins=(
            Admin(username="admin1", password="admin1", name="Admin One"),
            Admin(username="admin2", password="admin2", name="Admin Two"),
        ),
        students=(
            Student(username="student1", password="student1", name="Student One"),
            Student(username="student2", password="student2", name="Student Two"),
        ),
        courses=(
            Course(
                id="CSE101",
                name="Introduction to Programming",
                code="CSE101",
                description="Basics of programming in Python: variables, loops, functions.",
                days=("Mon", "Wed"),
                start="09:00",
                end="10:30",
                date_range="2025-12-01 to 2026-03-30",
                seats=30,
            ),
            Course(
                id="MAT201",
                name="Discrete Mathematics",
                code="MAT201",
                description="Logic, sets, relations, combinatorics and graph theory.",
                days=("Tue", "Thu"),
                start="11:00",
                end="12:30",
                date_range="2025-12-01 to 2026-03-30",
                seats=25,
            ),
        ),
    )
