"""
View state and the transitions between states.

The directory and form views each keep one immutable state object.
Every change goes through one of the transition functions below, which
take the current state (plus the event payload) and return the next
state.  They do no I/O, so they can be tested without a backend or a
front-end.

Values that depend on the current state, such as the filtered record
list, the selectable programs or a student's age, are computed by the
derivation functions at the bottom of each section and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from student_directory.app.schemas.student import Student
from student_directory.app.services.validation import ErrorKind, StudentDraft, validate


StudentId = Union[int, str]


# ---------------------------------------------------------------------------
# Directory view
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListState:
    records: Tuple[Student, ...] = ()
    loading: bool = False
    error: str = ""


@dataclass(frozen=True)
class FilterState:
    search_term: str = ""
    selected_program: str = ""


@dataclass(frozen=True)
class DirectoryState:
    """State of the student directory.

    Attributes:
        listing: Records fetched from the backend plus load status.
        filters: Search term and program filter applied locally.
        pending_delete: Student awaiting delete confirmation, if any.
    """

    listing: ListState = field(default_factory=ListState)
    filters: FilterState = field(default_factory=FilterState)
    pending_delete: Optional[Student] = None


class EmptyState(str, Enum):
    NONE = "none"
    NO_RECORDS = "no_records"
    NO_MATCHES = "no_matches"


def directory_opened(state: DirectoryState) -> DirectoryState:
    # Every visit starts with no filters and no pending confirmation.
    return DirectoryState()


def load_started(state: DirectoryState) -> DirectoryState:
    return replace(state, listing=replace(state.listing, loading=True, error=""))


def load_succeeded(state: DirectoryState, records: Iterable[Student]) -> DirectoryState:
    return replace(state, listing=ListState(records=tuple(records)))


def load_failed(state: DirectoryState, message: str) -> DirectoryState:
    # Previously loaded records stay visible next to the error.
    return replace(state, listing=replace(state.listing, loading=False, error=message))


def search_changed(state: DirectoryState, search_term: str) -> DirectoryState:
    return replace(state, filters=replace(state.filters, search_term=search_term))


def program_changed(state: DirectoryState, program: str) -> DirectoryState:
    return replace(state, filters=replace(state.filters, selected_program=program))


def delete_requested(state: DirectoryState, student: Student) -> DirectoryState:
    return replace(state, pending_delete=student)


def delete_cancelled(state: DirectoryState) -> DirectoryState:
    return replace(state, pending_delete=None)


def delete_succeeded(state: DirectoryState, student_id: StudentId) -> DirectoryState:
    records = tuple(s for s in state.listing.records if s.id != student_id)
    return replace(
        state,
        listing=replace(state.listing, records=records),
        pending_delete=None,
    )


def delete_failed(state: DirectoryState, message: str) -> DirectoryState:
    return replace(
        state,
        listing=replace(state.listing, error=message),
        pending_delete=None,
    )


def matches(student: Student, filters: FilterState) -> bool:
    """Return whether ``student`` passes both the search and program filter."""
    term = filters.search_term.lower()
    matches_search = (
        not term
        or term in student.name.lower()
        or term in student.email.lower()
    )
    matches_program = not filters.selected_program or student.program == filters.selected_program
    return matches_search and matches_program


def filtered_records(state: DirectoryState) -> List[Student]:
    return [s for s in state.listing.records if matches(s, state.filters)]


def available_programs(state: DirectoryState) -> List[str]:
    """Distinct programs of the loaded records, sorted."""
    return sorted({s.program for s in state.listing.records})


def empty_state(state: DirectoryState) -> EmptyState:
    if not state.listing.records:
        return EmptyState.NO_RECORDS
    if not filtered_records(state):
        return EmptyState.NO_MATCHES
    return EmptyState.NONE


def results_summary(state: DirectoryState) -> str:
    """E.g. ``Showing 2 of 5 students matching "ann" in Data Science``."""
    text = f"Showing {len(filtered_records(state))} of {len(state.listing.records)} students"
    if state.filters.search_term:
        text += f' matching "{state.filters.search_term}"'
    if state.filters.selected_program:
        text += f" in {state.filters.selected_program}"
    return text


# ---------------------------------------------------------------------------
# Form view
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FormMode:
    """Create mode when ``student_id`` is ``None``, edit mode otherwise."""

    student_id: Optional[StudentId] = None

    @property
    def is_edit(self) -> bool:
        return self.student_id is not None


@dataclass(frozen=True)
class FormState:
    """State of the student form.

    ``submitted_once`` turns on re-validation as fields change, so that
    inline errors follow the input after the first submit attempt.
    """

    mode: FormMode = field(default_factory=FormMode)
    draft: StudentDraft = field(default_factory=StudentDraft)
    errors: Dict[str, ErrorKind] = field(default_factory=dict)
    loading: bool = False
    load_error: str = ""
    submitting: bool = False
    submit_error: str = ""
    submit_success: str = ""
    submitted_once: bool = False


def form_opened(state: FormState, mode: FormMode) -> FormState:
    # Nothing carries over from the previous record.
    return FormState(mode=mode, loading=mode.is_edit)


def record_loaded(state: FormState, student: Student) -> FormState:
    return replace(state, draft=StudentDraft.from_student(student), loading=False, load_error="")


def record_load_failed(state: FormState, message: str) -> FormState:
    return replace(state, draft=StudentDraft(), loading=False, load_error=message)


def field_changed(
    state: FormState, name: str, value: str, today: Optional[date] = None
) -> FormState:
    if name not in StudentDraft.field_names():
        raise ValueError(f"Unknown form field: {name}")
    draft = replace(state.draft, **{name: value})
    errors = validate(draft, today) if state.submitted_once else state.errors
    return replace(state, draft=draft, errors=errors)


def validation_failed(state: FormState, errors: Dict[str, ErrorKind]) -> FormState:
    return replace(state, errors=dict(errors), submitted_once=True)


def submit_started(state: FormState) -> FormState:
    return replace(
        state,
        errors={},
        submitting=True,
        submit_error="",
        submit_success="",
        submitted_once=True,
    )


def submit_succeeded(state: FormState, message: str) -> FormState:
    if state.mode.is_edit:
        return replace(state, submitting=False, submit_success=message)
    # Cleared for the next entry.
    return replace(
        state,
        draft=StudentDraft(),
        submitting=False,
        submit_success=message,
        submitted_once=False,
    )


def submit_failed(state: FormState, message: str) -> FormState:
    return replace(state, submitting=False, submit_error=message)
