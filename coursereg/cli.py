"""
CLI (Command Line Interface).

Quick terminal commands for administrators, scripting and testing, e.g.:

    coursereg courses
    coursereg add-course --id CSE102 --days Mon --start 09:30 --end 10:00
    coursereg register student1 CSE101
    coursereg timetable student1
    coursereg interactive

Every command loads the saved store, applies at most one operation, saves on
success and prints the resulting status message.

Note:
- The interactive UI (with logins) lives in coursereg/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from coursereg import store as ops
from coursereg.errors import RegistrationError
from coursereg.model import Admin, Course, Store, Student, default_store
from coursereg.storage import load_store, save_store
from coursereg.timetable import build_timetable


def _split_days(text: str) -> tuple[str, ...]:
    return tuple(d.strip() for d in text.split(",") if d.strip())


def _course_line(store: Store, c: Course) -> str:
    cap = "-" if c.seats is None else str(c.seats)
    days = ", ".join(c.days)
    return f"{c.id} | {c.name or '(no name)'} | {days} | {c.start}-{c.end} | {ops.seats_taken(store, c.id)}/{cap}"


def _mutate(data: Optional[Path], action: Callable[[Store], Store], success: str) -> int:
    """
    Load, apply one store operation, save on success. Prints the status line.
    """
    current = load_store(data)
    try:
        new_store = action(current)
    except RegistrationError as e:
        print(str(e))
        return 1
    try:
        save_store(new_store, data)
    except OSError as e:
        print(f"Could not save data: {e}")
        return 1
    print(success)
    return 0


def _cmd_courses(args: argparse.Namespace) -> int:
    store = load_store(args.data)
    if not store.courses:
        print("No courses.")
        return 0
    for c in store.courses:
        print(_course_line(store, c))
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    store = load_store(args.data)
    c = ops.find_course(store, args.course_id)
    if c is None:
        print("Course not found")
        return 1

    print(f"{c.name} ({c.id})")
    print(f"Code: {c.code}")
    print(f"Days: {', '.join(c.days)}")
    print(f"Time: {c.start} - {c.end}")
    print(f"Date range: {c.date_range}")
    cap = "unlimited" if c.seats is None else str(c.seats)
    print(f"Seats: {ops.seats_taken(store, c.id)}/{cap}")
    if c.description:
        print(c.description)
    return 0


def _course_from_args(args: argparse.Namespace, base: Course) -> Course:
    """
    Overlay the options that were given on top of base.
    """
    changes: dict = {}
    for attr in ("name", "code", "description", "start", "end", "date_range", "seats"):
        value = getattr(args, attr, None)
        if value is not None:
            changes[attr] = value
    if args.days is not None:
        changes["days"] = _split_days(args.days)
    if args.unlimited:
        changes["seats"] = None
    return replace(base, **changes)


def _cmd_add_course(args: argparse.Namespace) -> int:
    course = _course_from_args(args, Course(id=args.id.strip()))
    return _mutate(args.data, lambda s: ops.add_course(s, course), "Course added")


def _cmd_update_course(args: argparse.Namespace) -> int:
    cid = args.id.strip()
    existing = ops.find_course(load_store(args.data), cid)
    if existing is None:
        # update of an unknown id is a no-op
        print(f"No course with ID {cid} (nothing updated)")
        return 0
    course = _course_from_args(args, existing)
    return _mutate(args.data, lambda s: ops.update_course(s, course), "Course updated")


def _cmd_delete_course(args: argparse.Namespace) -> int:
    cid = args.course_id.strip()
    return _mutate(args.data, lambda s: ops.delete_course(s, cid), "Course deleted and registrations updated")


def _cmd_users(args: argparse.Namespace) -> int:
    store = load_store(args.data)
    print("Admins:")
    for a in store.admins:
        print(f"- {a.username} ({a.name})")
    print("Students:")
    for s in store.students:
        print(f"- {s.username} ({s.name}) regs: {', '.join(s.registrations)}")
    return 0


def _cmd_add_user(args: argparse.Namespace) -> int:
    username = args.username.strip()
    if not username:
        print("Please provide a username.")
        return 1
    if args.kind == "admin":
        user: Admin | Student = Admin(username=username, password=args.password, name=args.name)
        label = "Admin added"
    else:
        user = Student(username=username, password=args.password, name=args.name)
        label = "Student added"
    return _mutate(args.data, lambda s: ops.add_user(s, args.kind, user), label)


def _cmd_register(args: argparse.Namespace) -> int:
    return _mutate(
        args.data,
        lambda s: ops.register_course(s, args.username, args.course_id.strip()),
        "Registered successfully",
    )


def _cmd_unregister(args: argparse.Namespace) -> int:
    return _mutate(
        args.data,
        lambda s: ops.unregister_course(s, args.username, args.course_id.strip()),
        "Unregistered",
    )


def _cmd_timetable(args: argparse.Namespace) -> int:
    store = load_store(args.data)
    try:
        courses = ops.registered_courses(store, args.username)
    except RegistrationError as e:
        print(str(e))
        return 1

    if not courses:
        print("No registered courses.")
        return 0

    try:
        table = build_timetable(courses)
    except RegistrationError as e:
        print(str(e))
        return 1

    col_width = 10
    header = "Hour  | " + " | ".join(d.ljust(col_width) for d in table.days)
    print(header)
    print("-" * len(header))
    for h in table.hours:
        cells = []
        for d in table.days:
            txt = ",".join(c.id for c in table.at(d, h))
            cells.append(txt[:col_width].ljust(col_width))
        print(f"{h:02d}:00 | " + " | ".join(cells))

    print("\nRegistered:")
    for c in courses:
        print(f"- {c.id} {c.name} ({', '.join(c.days)}) {c.start}-{c.end}")
    return 0


def _cmd_conflicts(args: argparse.Namespace) -> int:
    """
    Print conflicts among a student's registered courses (e.g. after an admin edit).
    """
    store = load_store(args.data)
    try:
        confs = ops.schedule_conflicts(store, args.username)
    except RegistrationError as e:
        print(str(e))
        return 1

    if not confs:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        print(f"- {a.id} {','.join(a.days)} {a.start}-{a.end}  <->  {b.id} {','.join(b.days)} {b.start}-{b.end}")
    return 0


def _cmd_reset(args: argparse.Namespace) -> int:
    try:
        path = save_store(default_store(), args.data)
    except OSError as e:
        print(f"Could not save data: {e}")
        return 1
    print(f"Reset to default dataset: {path}")
    return 0


def _add_course_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--id", required=True, help="Course ID (e.g. CSE101)")
    p.add_argument("--name", help="Display name")
    p.add_argument("--code", help="Course code")
    p.add_argument("--description", help="Free-text description")
    p.add_argument("--days", help="Comma separated weekdays, e.g. Mon,Wed")
    p.add_argument("--start", help="Start time HH:MM")
    p.add_argument("--end", help="End time HH:MM")
    p.add_argument("--date-range", dest="date_range", help="Free-text date range label")
    p.add_argument("--seats", type=int, help="Seat cap")
    p.add_argument("--unlimited", action="store_true", help="No seat cap")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursereg", description="Course registration CLI")
    parser.add_argument("--data", type=Path, default=None, help="Path of the JSON data file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("courses", help="List the course catalog")

    p_show = sub.add_parser("show", help="Show one course")
    p_show.add_argument("course_id", type=str, help="Course ID")

    _add_course_options(sub.add_parser("add-course", help="Add a course"))
    _add_course_options(sub.add_parser("update-course", help="Update an existing course"))

    p_del = sub.add_parser("delete-course", help="Delete a course and its registrations")
    p_del.add_argument("course_id", type=str, help="Course ID")

    sub.add_parser("users", help="List admins and students")

    p_user = sub.add_parser("add-user", help="Add an admin or student")
    p_user.add_argument("kind", choices=ops.USER_KINDS)
    p_user.add_argument("username", type=str)
    p_user.add_argument("password", type=str)
    p_user.add_argument("name", type=str, nargs="?", default="")

    for name, help_text in (("register", "Register a student"), ("unregister", "Unregister a student")):
        p = sub.add_parser(name, help=f"{help_text} for a course")
        p.add_argument("username", type=str, help="Student username")
        p.add_argument("course_id", type=str, help="Course ID")

    p_tt = sub.add_parser("timetable", help="Show a student's weekly timetable")
    p_tt.add_argument("username", type=str, help="Student username")

    p_conf = sub.add_parser("conflicts", help="Show conflicts in a student's schedule")
    p_conf.add_argument("username", type=str, help="Student username")

    sub.add_parser("reset", help="Overwrite the data file with the demo dataset")
    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "courses": _cmd_courses,
    "show": _cmd_show,
    "add-course": _cmd_add_course,
    "update-course": _cmd_update_course,
    "delete-course": _cmd_delete_course,
    "users": _cmd_users,
    "add-user": _cmd_add_user,
    "register": _cmd_register,
    "unregister": _cmd_unregister,
    "timetable": _cmd_timetable,
    "conflicts": _cmd_conflicts,
    "reset": _cmd_reset,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "interactive":
        from coursereg.interactive import run_interactive
        from coursereg.session import Session

        run_interactive(Session.open(args.data))
        raise SystemExit(0)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args))
