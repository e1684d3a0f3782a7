from __future__ import annotations

from dataclasses import replace
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from coursereg import store as ops
from coursereg.errors import RegistrationError
from coursereg.model import Admin, Course, Student
from coursereg.session import Session
from coursereg.timetable import build_timetable

console = Console()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg, markup=False)


def _status(session: Session) -> None:
    if session.message:
        _println(f"[bold]{escape(session.message)}[/]")


def _seats_label(session: Session, c: Course) -> str:
    cap = "-" if c.seats is None else str(c.seats)
    return f"{ops.seats_taken(session.store, c.id)}/{cap}"


def run_interactive(session: Session) -> None:
    """
    Home menu loop. Logging in hands over to the admin or student dashboard;
    logging out comes back here.
    """
    while True:
        _println("\n=== Course Scheduler ===")
        choice = _prompt(
            "\n[1] Student login\n"
            "[2] Admin login\n"
            "[3] Course catalog\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            if _flow_login(session, "student"):
                _student_dashboard(session)
        elif choice == "2":
            if _flow_login(session, "admin"):
                _admin_dashboard(session)
        elif choice == "3":
            _flow_catalog(session)
        else:
            _println("Invalid choice.")


def _flow_login(session: Session, kind: str) -> bool:
    _println(f"\n{'Admin' if kind == 'admin' else 'Student'} Login")
    username = _prompt("Username [blank = show demo accounts]: ").strip()
    if not username:
        users = session.store.admins if kind == "admin" else session.store.students
        _println("Demo accounts: " + escape(", ".join(u.username for u in users)))
        username = _prompt("Username: ").strip()
    password = _prompt("Password: ")
    ok = session.login(kind, username, password)
    if not ok:
        _status(session)
    return ok


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _courses_table(session: Session, title: str, numbered: bool = False) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    if numbered:
        table.add_column("#", justify="right")
    table.add_column("ID", style="bold cyan")
    table.add_column("Name")
    table.add_column("Days", style="green")
    table.add_column("Time")
    table.add_column("Seats", justify="right", style="yellow")

    registered: set[str] = set()
    if session.role == "student":
        registered = {c.id for c in session.my_courses()}

    for i, c in enumerate(session.store.courses, start=1):
        cid = escape(f"{c.id} ✓" if c.id in registered else c.id)
        row = [
            cid,
            escape(c.name),
            escape(", ".join(c.days)),
            escape(f"{c.start}-{c.end}"),
            _seats_label(session, c),
        ]
        if numbered:
            row.insert(0, str(i))
        table.add_row(*row)
    return table


def _print_course(session: Session, c: Course) -> None:
    _println(f"\n[bold]{escape(c.name)}[/] ([cyan]{escape(c.id)}[/])")
    _println(f"Code: {escape(c.code)}")
    _println(f"Days: {escape(', '.join(c.days))}")
    _println(f"Time: {escape(c.start)} - {escape(c.end)}")
    _println(f"Date range: {escape(c.date_range)}")
    _println(f"Seats: {_seats_label(session, c)}")
    if c.description:
        _println(escape(c.description))


def _pick_course(session: Session, label: str) -> Optional[Course]:
    courses = session.store.courses
    if not courses:
        _println("No courses.")
        return None
    console.print(_courses_table(session, label, numbered=True))
    pick = _prompt("Enter number [blank = back]: ").strip()
    if not pick:
        return None
    if not pick.isdigit() or not (1 <= int(pick) <= len(courses)):
        _println("Out of range.")
        return None
    return courses[int(pick) - 1]


def _flow_catalog(session: Session) -> None:
    while True:
        c = _pick_course(session, "Course catalog")
        if c is None:
            return
        _print_course(session, c)
        if session.role == "student":
            if _prompt("Register for this course? [y/N]: ").strip().lower() == "y":
                session.register(c.id)
                _status(session)


# ---------------------------------------------------------------------------
# Admin dashboard
# ---------------------------------------------------------------------------


def _admin_dashboard(session: Session) -> None:
    while session.role == "admin":
        user = session.user
        _println(f"\n=== Admin Dashboard - {escape(user.name if user else session.username or '')} ===")
        console.print(_courses_table(session, "Courses"))
        choice = _prompt(
            "\n[1] Add course\n"
            "[2] Edit course\n"
            "[3] Delete course\n"
            "[4] Add student\n"
            "[5] Add admin\n"
            "[6] List users\n"
            "[7] Course catalog\n"
            "[0] Logout\n"
            "Select: "
        ).strip()

        if choice == "0":
            session.logout()
            return
        if choice == "1":
            course = _edit_course_form(Course(id=""), ask_id=True)
            session.add_course(course)
            _status(session)
        elif choice == "2":
            c = _pick_course(session, "Edit course")
            if c is not None:
                session.update_course(_edit_course_form(c, ask_id=False))
                _status(session)
        elif choice == "3":
            c = _pick_course(session, "Delete course")
            if c is not None and _prompt(f"Delete {c.id}? [y/N]: ").strip().lower() == "y":
                session.delete_course(c.id)
                _status(session)
        elif choice == "4":
            _flow_add_user(session, "student")
        elif choice == "5":
            _flow_add_user(session, "admin")
        elif choice == "6":
            _flow_list_users(session)
        elif choice == "7":
            _flow_catalog(session)
        else:
            _println("Invalid choice.")


def _ask(label: str, current: str) -> str:
    value = _prompt(f"{label} [{current}]: ").strip()
    return value if value else current


def _edit_course_form(base: Course, ask_id: bool) -> Course:
    """
    Prompt for every field; blank keeps the shown value.
    Validation happens in the store, not here.
    """
    cid = _ask("ID", base.id) if ask_id else base.id
    name = _ask("Name", base.name)
    code = _ask("Code", base.code)
    description = _ask("Description", base.description)
    days = _ask("Days (comma separated, e.g. Mon,Tue)", ",".join(base.days))
    start = _ask("Start (HH:MM)", base.start)
    end = _ask("End (HH:MM)", base.end)
    date_range = _ask("Date range", base.date_range)
    seats_in = _ask("Seats ('none' = no cap)", "none" if base.seats is None else str(base.seats))

    seats: Optional[int]
    if seats_in.lower() == "none":
        seats = None
    else:
        try:
            seats = int(seats_in)
        except ValueError:
            _println("Seats must be a number, keeping previous value.")
            seats = base.seats

    return replace(
        base,
        id=cid,
        name=name,
        code=code,
        description=description,
        days=tuple(d.strip() for d in days.split(",") if d.strip()),
        start=start,
        end=end,
        date_range=date_range,
        seats=seats,
    )


def _flow_add_user(session: Session, kind: str) -> None:
    username = _prompt("username: ").strip()
    if not username:
        _println("Username required.")
        return
    password = _prompt("password: ")
    name = _prompt("name: ").strip()
    if kind == "admin":
        session.add_user(kind, Admin(username=username, password=password, name=name))
    else:
        session.add_user(kind, Student(username=username, password=password, name=name))
    _status(session)


def _flow_list_users(session: Session) -> None:
    table = Table(title="Users", box=box.SIMPLE)
    table.add_column("Role")
    table.add_column("Username", style="bold cyan")
    table.add_column("Name")
    table.add_column("Registrations", style="yellow")
    for a in session.store.admins:
        table.add_row("admin", escape(a.username), escape(a.name), "")
    for s in session.store.students:
        table.add_row("student", escape(s.username), escape(s.name), escape(", ".join(s.registrations)))
    console.print(table)


# ---------------------------------------------------------------------------
# Student dashboard
# ---------------------------------------------------------------------------


def _student_dashboard(session: Session) -> None:
    while session.role == "student":
        user = session.user
        name = user.name if user else ""
        _println(f"\n=== Student Dashboard - {escape(name)} ({escape(session.username or '')}) ===")
        console.print(_courses_table(session, "Available courses"))
        choice = _prompt(
            "\n[1] Register for a course\n"
            "[2] Unregister from a course\n"
            "[3] My timetable\n"
            "[4] Course catalog\n"
            "[0] Logout\n"
            "Select: "
        ).strip()

        if choice == "0":
            session.logout()
            return
        if choice == "1":
            c = _pick_course(session, "Register")
            if c is not None:
                session.register(c.id)
                _status(session)
        elif choice == "2":
            _flow_unregister(session)
        elif choice == "3":
            _flow_timetable(session)
        elif choice == "4":
            _flow_catalog(session)
        else:
            _println("Invalid choice.")


def _flow_unregister(session: Session) -> None:
    mine = session.my_courses()
    if not mine:
        _println("No registered courses.")
        return
    for i, c in enumerate(mine, start=1):
        _println(f"{i}) {escape(c.id)} - {escape(c.name)}")
    pick = _prompt("Enter number to unregister [blank = back]: ").strip()
    if not pick:
        return
    if not pick.isdigit() or not (1 <= int(pick) <= len(mine)):
        _println("Out of range.")
        return
    session.unregister(mine[int(pick) - 1].id)
    _status(session)


def _flow_timetable(session: Session) -> None:
    mine = session.my_courses()
    try:
        tt = build_timetable(mine)
    except RegistrationError as e:
        _println(f"[bold]{escape(str(e))}[/]")
        return

    table = Table(title="Your Timetable", box=box.SIMPLE)
    table.add_column("Hour", justify="right")
    for day in tt.days:
        table.add_column(day)
    for h in tt.hours:
        row = [f"{h:02d}:00"]
        for day in tt.days:
            row.append("\n".join(f"[bold]{escape(c.id)}[/] {escape(c.start)}-{escape(c.end)}" for c in tt.at(day, h)))
        table.add_row(*row)
    console.print(table)

    _println("Registered:")
    if not mine:
        _println("  (none)")
    for c in mine:
        _println(escape(f"- {c.id} - {c.name} ({', '.join(c.days)}) {c.start}-{c.end}"))
