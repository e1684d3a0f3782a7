"""
Registration store operations.

Every mutating function takes the current Store snapshot and returns a new one.
Rejections raise a RegistrationError subclass; the snapshot passed in is never
modified, so a rejected action leaves the application state exactly as it was.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from coursereg.conflicts import find_conflicts, has_conflict, time_to_minutes
from coursereg.errors import (
    AlreadyRegisteredError,
    ConflictError,
    CourseNotFoundError,
    DuplicateIdError,
    DuplicateUsernameError,
    InvalidCourseError,
    InvalidCredentialsError,
    InvalidTimeFormatError,
    SeatsFullError,
    StudentNotFoundError,
)
from coursereg.model import Admin, Course, Store, Student

USER_KINDS = ("admin", "student")


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def find_course(store: Store, course_id: str) -> Optional[Course]:
    for c in store.courses:
        if c.id == course_id:
            return c
    return None


def find_student(store: Store, username: str) -> Optional[Student]:
    for s in store.students:
        if s.username == username:
            return s
    return None


def find_admin(store: Store, username: str) -> Optional[Admin]:
    for a in store.admins:
        if a.username == username:
            return a
    return None


def seats_taken(store: Store, course_id: str) -> int:
    """
    Number of students currently registered for course_id.
    """
    return sum(1 for s in store.students if course_id in s.registrations)


def registered_courses(store: Store, username: str) -> list[Course]:
    """
    Courses the student is registered for, in catalog order.
    Ids that no longer exist in the catalog are skipped.
    """
    student = find_student(store, username)
    if student is None:
        raise StudentNotFoundError(f"Student not found: {username}")
    return [c for c in store.courses if c.id in student.registrations]


def schedule_conflicts(store: Store, username: str) -> list[tuple[Course, Course]]:
    """
    Conflicting pairs among a student's registered courses.

    Registration never creates these, but an admin editing course times can.
    """
    return find_conflicts(registered_courses(store, username))


def authenticate(store: Store, kind: str, username: str, password: str) -> Admin | Student:
    """
    Return the account matching username/password in the given role.
    Raises InvalidCredentialsError otherwise.
    """
    _check_kind(kind)
    users = store.admins if kind == "admin" else store.students
    for u in users:
        if u.username == username and u.password == password:
            return u
    raise InvalidCredentialsError()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_course(course: Course) -> None:
    """
    Reject courses with a blank id, bad times or a negative seat cap.
    """
    if not course.id.strip():
        raise InvalidCourseError("Course ID is required")

    start = time_to_minutes(course.start)
    end = time_to_minutes(course.end)
    if end <= start:
        raise InvalidTimeFormatError(f"End time {course.end} must be after start time {course.start}")

    if course.seats is not None and course.seats < 0:
        raise InvalidCourseError(f"Seats must be non-negative, got {course.seats}")


def _check_kind(kind: str) -> None:
    if kind not in USER_KINDS:
        raise ValueError(f"Unknown user kind: {kind!r} (expected one of {USER_KINDS})")


# ---------------------------------------------------------------------------
# Admin operations
# ---------------------------------------------------------------------------


def add_course(store: Store, course: Course) -> Store:
    if find_course(store, course.id) is not None:
        raise DuplicateIdError()
    validate_course(course)
    return replace(store, courses=store.courses + (course,))


def update_course(store: Store, course: Course) -> Store:
    """
    Replace the course with the same id. Unknown ids leave the store unchanged.
    """
    if find_course(store, course.id) is None:
        return store
    validate_course(course)
    return replace(store, courses=tuple(course if c.id == course.id else c for c in store.courses))


def delete_course(store: Store, course_id: str) -> Store:
    """
    Remove the course and drop its id from every student's registrations.
    """
    students = tuple(
        replace(s, registrations=tuple(r for r in s.registrations if r != course_id))
        if course_id in s.registrations
        else s
        for s in store.students
    )
    courses = tuple(c for c in store.courses if c.id != course_id)
    return replace(store, courses=courses, students=students)


def add_user(store: Store, kind: str, user: Admin | Student) -> Store:
    """
    Add an admin or student. Usernames are unique per role only.
    """
    _check_kind(kind)
    if kind == "admin":
        if find_admin(store, user.username) is not None:
            raise DuplicateUsernameError("Admin username taken")
        admin = Admin(username=user.username, password=user.password, name=user.name)
        return replace(store, admins=store.admins + (admin,))

    if find_student(store, user.username) is not None:
        raise DuplicateUsernameError("Student username taken")
    student = Student(username=user.username, password=user.password, name=user.name)
    return replace(store, students=store.students + (student,))


# ---------------------------------------------------------------------------
# Student operations
# ---------------------------------------------------------------------------


def register_course(store: Store, username: str, course_id: str) -> Store:
    course = find_course(store, course_id)
    if course is None:
        raise CourseNotFoundError()

    student = find_student(store, username)
    if student is None:
        raise StudentNotFoundError()

    if course_id in student.registrations:
        raise AlreadyRegisteredError()

    if course.seats is not None and seats_taken(store, course_id) >= course.seats:
        raise SeatsFullError()

    for other in registered_courses(store, username):
        if has_conflict(other, course):
            raise ConflictError(f"Cannot register due to a schedule conflict with {other.id}")

    updated = replace(student, registrations=student.registrations + (course_id,))
    return _replace_student(store, updated)


def unregister_course(store: Store, username: str, course_id: str) -> Store:
    """
    Drop course_id from the student's registrations. Not registered -> no-op.
    """
    student = find_student(store, username)
    if student is None:
        raise StudentNotFoundError()
    if course_id not in student.registrations:
        return store
    updated = replace(student, registrations=tuple(r for r in student.registrations if r != course_id))
    return _replace_student(store, updated)


def _replace_student(store: Store, student: Student) -> Store:
    students = tuple(student if s.username == student.username else s for s in store.students)
    return replace(store, students=students)
