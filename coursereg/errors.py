"""
Error taxonomy for registration operations.

Every rejection is a recoverable, user-facing outcome. The message passed to
the exception is exactly what the presentation layer shows on its status line,
so ``str(err)`` is all a caller needs.
"""

from __future__ import annotations


class RegistrationError(Exception):
    """Base class for all rejected store operations."""

    default_message = "Operation rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class DuplicateIdError(RegistrationError):
    default_message = "Course with same ID already exists."


class DuplicateUsernameError(RegistrationError):
    default_message = "Username taken"


class CourseNotFoundError(RegistrationError):
    default_message = "Course not found"


class StudentNotFoundError(RegistrationError):
    default_message = "Student not found"


class AlreadyRegisteredError(RegistrationError):
    default_message = "Already registered for this course"


class SeatsFullError(RegistrationError):
    default_message = "No seats available"


class ConflictError(RegistrationError):
    default_message = "Cannot register due to a schedule conflict"


class InvalidCredentialsError(RegistrationError):
    default_message = "Invalid credentials"


class NotAuthorizedError(RegistrationError):
    default_message = "Not authorized"


class InvalidCourseError(RegistrationError):
    default_message = "Invalid course"


class InvalidTimeFormatError(InvalidCourseError):
    default_message = "Invalid time format (expected HH:MM)"
