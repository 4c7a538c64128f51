"""
Client-side validation rules for student drafts.

A :class:`StudentDraft` holds the four form fields exactly as they were
entered.  :func:`validate` checks a draft against the record rules and
returns a mapping from field name to :class:`ErrorKind`; an empty
mapping means the draft may be submitted.  The same rules apply to
create and update, since an update replaces the whole record.

Age is never stored.  :func:`calculate_age` derives it from the birth
date and "today" each time it is needed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Dict, Optional

from student_directory.app.schemas.student import Program, Student, StudentInput


EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)

NAME_MIN_LENGTH = 2
MIN_AGE = 16
MAX_AGE = 100

PROGRAM_NAMES = [p.value for p in Program]


class ErrorKind(str, Enum):
    """Reasons a draft field can be rejected."""

    REQUIRED = "required"
    TOO_SHORT = "too_short"
    INVALID_EMAIL = "invalid_email"
    INVALID_DATE = "invalid_date"
    NOT_IN_PAST = "not_in_past"
    AGE_OUT_OF_RANGE = "age_out_of_range"
    INVALID_PROGRAM = "invalid_program"


_MESSAGES = {
    ("name", ErrorKind.REQUIRED): "Name is required",
    ("name", ErrorKind.TOO_SHORT): f"Name must be at least {NAME_MIN_LENGTH} characters",
    ("email", ErrorKind.REQUIRED): "Email is required",
    ("email", ErrorKind.INVALID_EMAIL): "Please enter a valid email address",
    ("birth_date", ErrorKind.REQUIRED): "Birth date is required",
    ("birth_date", ErrorKind.INVALID_DATE): "Please enter a valid date",
    ("birth_date", ErrorKind.NOT_IN_PAST): "Birth date must be in the past",
    ("birth_date", ErrorKind.AGE_OUT_OF_RANGE): (
        f"Student must be between {MIN_AGE} and {MAX_AGE} years old"
    ),
    ("program", ErrorKind.REQUIRED): "Program is required",
    ("program", ErrorKind.INVALID_PROGRAM): "Please select a valid program",
}


@dataclass(frozen=True)
class StudentDraft:
    """Form field values prior to validation.

    ``birth_date`` is ISO text (``YYYY-MM-DD``) as typed into the form.
    """

    name: str = ""
    email: str = ""
    birth_date: str = ""
    program: str = ""

    @classmethod
    def from_student(cls, student: Student) -> "StudentDraft":
        return cls(
            name=student.name,
            email=student.email,
            birth_date=student.birth_date.isoformat(),
            program=student.program,
        )

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Return the age in whole years on ``today``.

    A year is only counted once the birthday has been reached.
    """
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def parse_birth_date(value: str) -> Optional[date]:
    """Parse ISO date text, returning ``None`` when it is not a date."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def _check_birth_date(value: str, today: date) -> Optional[ErrorKind]:
    if not value.strip():
        return ErrorKind.REQUIRED
    born = parse_birth_date(value)
    if born is None:
        return ErrorKind.INVALID_DATE
    if born >= today:
        return ErrorKind.NOT_IN_PAST
    # Exact age: the current year only counts once the birthday is reached,
    # not the plain difference of calendar years.
    if not MIN_AGE <= calculate_age(born, today) <= MAX_AGE:
        return ErrorKind.AGE_OUT_OF_RANGE
    return None


def validate(draft: StudentDraft, today: Optional[date] = None) -> Dict[str, ErrorKind]:
    """Check every field of ``draft`` and return the failures.

    Only the first failing rule of each field is reported.  Fields that
    pass are absent from the result.
    """
    today = today or date.today()
    errors: Dict[str, ErrorKind] = {}

    name = draft.name.strip()
    if not name:
        errors["name"] = ErrorKind.REQUIRED
    elif len(name) < NAME_MIN_LENGTH:
        errors["name"] = ErrorKind.TOO_SHORT

    email = draft.email.strip()
    if not email:
        errors["email"] = ErrorKind.REQUIRED
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = ErrorKind.INVALID_EMAIL

    birth_error = _check_birth_date(draft.birth_date, today)
    if birth_error is not None:
        errors["birth_date"] = birth_error

    if not draft.program:
        errors["program"] = ErrorKind.REQUIRED
    elif draft.program not in PROGRAM_NAMES:
        errors["program"] = ErrorKind.INVALID_PROGRAM

    return errors


def error_message(field: str, kind: ErrorKind) -> str:
    """Return the inline message shown next to ``field``."""
    return _MESSAGES.get((field, kind), kind.value.replace("_", " ").capitalize())


def to_input(draft: StudentDraft) -> StudentInput:
    """Build the request payload from a draft that passed :func:`validate`."""
    return StudentInput(
        name=draft.name.strip(),
        email=draft.email.strip(),
        birth_date=date.fromisoformat(draft.birth_date.strip()),
        program=Program(draft.program),
    )
