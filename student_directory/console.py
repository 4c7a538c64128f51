"""Interactive console front-end for the student directory.

The console mirrors the three destinations of the web front-end:

``/``
    Landing page with a short description and the available actions.

``/students``
    The student directory: search, filter by program, edit and delete.

``/add-student`` and ``/edit-student/<id>``
    The student form in create or edit mode.

All state lives in :class:`StudentDirectoryCoordinator` and
:class:`StudentFormCoordinator`; the console only turns typed commands
into coordinator calls and prints the resulting view.  Input is read in
a worker thread so that the navigation scheduled after a successful
submit can fire while the prompt is waiting.

Configuration is taken from the environment (see
:mod:`student_directory.app.core.config`); ``--base-url`` and
``--log-level`` override it for one run.  Terminate with ``quit`` or
Ctrl+C.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shlex
import sys
from datetime import date
from typing import List, Optional, Set, Tuple

from student_directory.app.coordinators.directory import StudentDirectoryCoordinator
from student_directory.app.coordinators.form import DIRECTORY_ROUTE, StudentFormCoordinator
from student_directory.app.coordinators.state import EmptyState
from student_directory.app.core.config import settings
from student_directory.app.core.logging_config import setup_logging
from student_directory.app.services.student_service import StudentService
from student_directory.app.services.validation import (
    PROGRAM_NAMES,
    StudentDraft,
    calculate_age,
    error_message,
)


logger = logging.getLogger(__name__)

HOME_ROUTE = "/"
ADD_ROUTE = "/add-student"
EDIT_ROUTE_PREFIX = "/edit-student/"

NAV_LINKS = [
    (HOME_ROUTE, "Home"),
    (DIRECTORY_ROUTE, "View Students"),
    (ADD_ROUTE, "Add Student"),
]

# Accept the wire spelling as well as the Python one.
FIELD_ALIASES = {
    "name": "name",
    "email": "email",
    "birth_date": "birth_date",
    "birthdate": "birth_date",
    "program": "program",
}

FIELD_LABELS = {
    "name": "Full Name",
    "email": "Email Address",
    "birth_date": "Date of Birth (YYYY-MM-DD)",
    "program": "Academic Program",
}


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def format_date(value: date) -> str:
    """Format a date as ``January 5, 2001``."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def parse_route(path: str) -> Tuple[str, Optional[str]]:
    """Split a route into the view name and, for the edit form, the id."""
    if path == DIRECTORY_ROUTE:
        return "directory", None
    if path == ADD_ROUTE:
        return "form", None
    if path.startswith(EDIT_ROUTE_PREFIX) and len(path) > len(EDIT_ROUTE_PREFIX):
        return "form", path[len(EDIT_ROUTE_PREFIX):]
    return "home", None


def render_header(route: str) -> str:
    links = []
    for path, label in NAV_LINKS:
        links.append(f"[{label}]" if path == route else label)
    return f"🎓 {settings.project_name}\n" + " | ".join(links)


def render_home() -> str:
    return "\n".join(
        [
            f"Welcome to {settings.project_name}",
            "Register new students, view all registered students, and manage",
            "their information efficiently.",
            "",
            "Features:",
            "  Student Registration - name, email, birth date and academic program",
            "  Student Directory    - search and filter all registered students",
            "  Data Management      - edit or remove students as needed",
            "",
            "Commands: add, list, help, quit",
        ]
    )


def render_directory(directory: StudentDirectoryCoordinator, today: Optional[date] = None) -> str:
    state = directory.state
    if state.listing.loading:
        return "Loading students..."

    lines = ["Student Directory"]
    if state.listing.error:
        lines.append(f"! {state.listing.error}")

    programs = directory.available_programs
    lines.append("Programs: All Programs" + "".join(f", {p}" for p in programs))
    lines.append(directory.results_summary)

    empty = directory.empty_state
    if empty is EmptyState.NO_RECORDS:
        lines.append("No students registered yet. Type 'add' to add the first student.")
    elif empty is EmptyState.NO_MATCHES:
        lines.append("No students match your search criteria.")
    else:
        lines.append(f"{'ID':<26} {'Name':<24} {'Email':<30} {'Age':<9} {'Birth Date':<20} Program")
        for student in directory.filtered_records:
            age = calculate_age(student.birth_date, today)
            lines.append(
                f"{str(student.id):<26} {student.name:<24} {student.email:<30} "
                f"{f'{age} years':<9} {format_date(student.birth_date):<20} {student.program}"
            )

    pending = state.pending_delete
    if pending is not None:
        lines.append("")
        lines.append(
            f"Are you sure you want to delete {pending.name}? This action cannot be undone."
        )
        lines.append("Type 'confirm' to delete or 'cancel' to keep the student.")
    return "\n".join(lines)


def render_form(form: StudentFormCoordinator) -> str:
    state = form.state
    if state.loading:
        return "Loading student data..."

    lines = ["Edit Student" if state.mode.is_edit else "Add New Student"]
    for message in (state.load_error, state.submit_error):
        if message:
            lines.append(f"! {message}")
    if state.submit_success:
        lines.append(f"* {state.submit_success}")

    for name in StudentDraft.field_names():
        value = getattr(state.draft, name)
        lines.append(f"  {FIELD_LABELS[name]} *: {value}")
        kind = state.errors.get(name)
        if kind is not None:
            lines.append(f"      {error_message(name, kind)}")

    if state.submitting:
        lines.append("Saving...")
    else:
        action = "Update Student" if state.mode.is_edit else "Create Student"
        lines.append(f"Commands: set <field> <value>, programs, submit ({action}), cancel")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Console application
# ---------------------------------------------------------------------------


class StudentDirectoryConsole:
    """Command loop driving the directory and form coordinators."""

    def __init__(self, service: StudentService, *, out=None) -> None:
        self.service = service
        self.out = out or sys.stdout
        self.directory = StudentDirectoryCoordinator(service)
        self.form = StudentFormCoordinator(service, self.navigate)
        self.route = HOME_ROUTE
        self._tasks: Set[asyncio.Task] = set()
        self._running = False

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def navigate(self, path: str) -> None:
        """Schedule a route change; used by the form after a submit."""
        task = asyncio.get_running_loop().create_task(self.show(path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def show(self, path: str) -> None:
        """Leave the current view, open the one for ``path`` and print it."""
        view, student_id = parse_route(path)
        current_view, _ = parse_route(self.route)
        if current_view == "directory":
            self.directory.close()
        elif current_view == "form":
            self.form.close()

        self.route = path
        self._print()
        self._print(render_header(path))
        if view == "directory":
            await self.directory.open()
        elif view == "form":
            await self.form.open(student_id)
        self.render()

    def render(self) -> None:
        view, _ = parse_route(self.route)
        if view == "directory":
            self._print(render_directory(self.directory))
        elif view == "form":
            self._print(render_form(self.form))
        else:
            self._print(render_home())

    # ------------------------------------------------------------------
    # Command dispatch
    # ------------------------------------------------------------------
    async def dispatch(self, line: str) -> None:
        """Handle one line of user input."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._print(f"Could not parse command: {exc}")
            return
        if not parts:
            return
        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit"):
            self._running = False
            return
        if command == "help":
            self._print_help()
            return
        if command == "home":
            await self.show(HOME_ROUTE)
            return
        if command in ("list", "students"):
            await self.show(DIRECTORY_ROUTE)
            return
        if command == "add":
            await self.show(ADD_ROUTE)
            return
        if command == "edit":
            if not args:
                self._print("Usage: edit <student_id>")
                return
            await self.show(EDIT_ROUTE_PREFIX + args[0])
            return

        view, _ = parse_route(self.route)
        if view == "directory":
            await self._handle_directory(command, args)
        elif view == "form":
            await self._handle_form(command, args)
        else:
            self._print(f"Unknown command: {command}. Type 'help' for a list of commands.")

    async def _handle_directory(self, command: str, args: List[str]) -> None:
        if command == "search":
            self.directory.set_search_term(" ".join(args))
        elif command == "program":
            program = " ".join(args)
            if program.lower() == "all":
                program = ""
            self.directory.set_selected_program(program)
        elif command == "refresh":
            await self.directory.refresh()
        elif command == "delete":
            if not args:
                self._print("Usage: delete <student_id>")
                return
            student = self.directory.find(args[0])
            if student is None:
                self._print(f"No student with id {args[0]} in the list.")
                return
            self.directory.request_delete(student)
        elif command == "confirm":
            await self.directory.confirm_delete()
        elif command == "cancel":
            self.directory.cancel_delete()
        else:
            self._print(f"Unknown command: {command}. Type 'help' for a list of commands.")
            return
        self.render()

    async def _handle_form(self, command: str, args: List[str]) -> None:
        if command == "set":
            if len(args) < 1 or args[0].lower() not in FIELD_ALIASES:
                self._print("Usage: set <name|email|birth_date|program> <value>")
                return
            self.form.set_field(FIELD_ALIASES[args[0].lower()], " ".join(args[1:]))
        elif command == "programs":
            for index, program in enumerate(PROGRAM_NAMES, start=1):
                self._print(f"  {index}. {program}")
            return
        elif command == "submit":
            await self.form.submit()
        elif command == "cancel":
            await self.show(DIRECTORY_ROUTE)
            return
        else:
            self._print(f"Unknown command: {command}. Type 'help' for a list of commands.")
            return
        self.render()

    def _print_help(self) -> None:
        self._print(
            "Navigation: home, list, add, edit <id>, quit\n"
            "Directory:  search <text>, program <name|all>, refresh,\n"
            "            delete <id>, confirm, cancel\n"
            "Form:       set <field> <value>, programs, submit, cancel"
        )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    async def run(self) -> None:
        """Show the landing page and process commands until ``quit``."""
        logger.info("Using student backend at %s", self.service.client.base_url)
        self._running = True
        await self.show(HOME_ROUTE)
        while self._running:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            await self.dispatch(line)
        await self.shutdown()

    async def shutdown(self) -> None:
        """Close both views and wait for pending navigations to finish."""
        self.directory.close()
        self.form.close()
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="student-directory", description="Manage student records")
    p.add_argument("--base-url", default=settings.api_base_url, help="Base URL of the student backend")
    p.add_argument("--log-level", default=settings.log_level, help="Logging level (DEBUG, INFO, ...)")
    return p


async def _run(base_url: str) -> None:
    async with StudentService(base_url=base_url) as service:
        await StudentDirectoryConsole(service).run()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        asyncio.run(_run(args.base_url))
    except KeyboardInterrupt:
        logger.info("Stopped by user.")


if __name__ == "__main__":
    main()
