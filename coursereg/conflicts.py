"""
Conflict detection.

Two courses conflict if they share at least one weekday AND their time
intervals overlap. Intervals are half-open:
    max(a_start, b_start) < min(a_end, b_end)
so a course ending at 10:00 does not clash with one starting at 10:00.
"""

from __future__ import annotations

from typing import Iterable

from coursereg.errors import InvalidTimeFormatError
from coursereg.model import Course


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises InvalidTimeFormatError for invalid formats.
    """
    parts = str(hhmm).strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts) or len(parts[1]) != 2:
        raise InvalidTimeFormatError(f"Invalid time format: {hhmm!r} (expected HH:MM)")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise InvalidTimeFormatError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def intervals_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return max(a_start, b_start) < min(a_end, b_end)


def has_conflict(a: Course, b: Course) -> bool:
    """
    True if both courses meet on a common weekday with overlapping times.
    """
    if not set(a.days) & set(b.days):
        return False
    return intervals_overlap(
        time_to_minutes(a.start),
        time_to_minutes(a.end),
        time_to_minutes(b.start),
        time_to_minutes(b.end),
    )


def find_conflicts(courses: Iterable[Course]) -> list[tuple[Course, Course]]:
    """
    Find conflicting course pairs (A,B), each pair appears once (i<j).
    """
    items = list(courses)
    conflicts: list[tuple[Course, Course]] = []

    # O(n^2) is fine for a single student's schedule
    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            if has_conflict(items[i], items[j]):
                conflicts.append((items[i], items[j]))

    return conflicts
