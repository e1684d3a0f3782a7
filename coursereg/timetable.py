"""
Weekly timetable grid.

Rows are whole hours, columns are weekdays Mon..Sun. A course is placed in the
cell of every day it meets, in the row of the hour its start time falls in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from coursereg.conflicts import time_to_minutes
from coursereg.model import WEEKDAYS, Course

DEFAULT_FIRST_HOUR = 8
DEFAULT_LAST_HOUR = 18


@dataclass
class Timetable:
    days: tuple[str, ...]
    hours: list[int]
    cells: dict[tuple[str, int], list[Course]] = field(default_factory=dict)

    def at(self, day: str, hour: int) -> list[Course]:
        return self.cells.get((day, hour), [])


def build_timetable(courses: Iterable[Course]) -> Timetable:
    """
    Hour range spans floor(earliest start) to ceil(latest end);
    8..18 when there are no courses.
    """
    items = sorted(courses, key=lambda c: (time_to_minutes(c.start), c.id))

    if items:
        starts = [time_to_minutes(c.start) for c in items]
        ends = [time_to_minutes(c.end) for c in items]
        first = min(starts + ends) // 60
        last = -(-max(starts + ends) // 60)
    else:
        first, last = DEFAULT_FIRST_HOUR, DEFAULT_LAST_HOUR

    table = Timetable(days=WEEKDAYS, hours=list(range(first, last + 1)))
    for c in items:
        hour = time_to_minutes(c.start) // 60
        for day in c.days:
            if day in WEEKDAYS:
                table.cells.setdefault((day, hour), []).append(c)
    return table
