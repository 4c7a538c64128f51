"""
Coordinator for the student directory view.

The directory loads the full collection once when it is opened (and
again on refresh), filters it locally by search term and program, and
removes students after the user confirms a delete.  Deleting does not
reload the list: the record is dropped from the local copy once the
backend acknowledges it.

Errors from the backend are shown as the service's own message; a
failed reload keeps the previously loaded records on screen.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from student_directory.app.core.errors import StudentServiceError
from student_directory.app.coordinators import state as st
from student_directory.app.coordinators.base import Coordinator
from student_directory.app.schemas.student import Student
from student_directory.app.services.student_service import StudentService


logger = logging.getLogger(__name__)


class StudentDirectoryCoordinator(Coordinator[st.DirectoryState]):
    """State owner for the list, filter and delete confirmation."""

    def __init__(self, service: StudentService) -> None:
        super().__init__(st.DirectoryState())
        self.service = service
        self._mounted = False
        # Bumped on every load and on close; a response is only applied
        # when its generation is still current.
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def open(self) -> None:
        """Mount the view with a fresh state and load the students."""
        self._mounted = True
        self._apply(st.directory_opened)
        await self.refresh()

    def close(self) -> None:
        self._mounted = False
        self._generation += 1
        self._apply(st.delete_cancelled)

    async def refresh(self) -> None:
        """Reload the full collection from the backend."""
        self._generation += 1
        generation = self._generation
        self._apply(st.load_started)
        try:
            records = await self.service.list_all()
        except StudentServiceError as exc:
            if self._is_current(generation):
                self._apply(st.load_failed, exc.message)
            return
        if not self._is_current(generation):
            logger.debug("Dropping stale student list response")
            return
        self._apply(st.load_succeeded, records)
        logger.debug("Loaded %d students", len(records))

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def set_search_term(self, search_term: str) -> None:
        self._apply(st.search_changed, search_term)

    def set_selected_program(self, program: str) -> None:
        """Filter by ``program``; an empty string shows all programs."""
        self._apply(st.program_changed, program)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def find(self, student_id: str) -> Optional[Student]:
        """Look up a loaded student by the textual form of its id."""
        for student in self.state.listing.records:
            if str(student.id) == str(student_id):
                return student
        return None

    def request_delete(self, student: Student) -> None:
        self._apply(st.delete_requested, student)

    def cancel_delete(self) -> None:
        self._apply(st.delete_cancelled)

    async def confirm_delete(self) -> bool:
        """Delete the student awaiting confirmation.

        The confirmation is cleared whatever the outcome; after a
        failure the user has to request the delete again.

        Returns:
            ``True`` if the backend deleted the student.
        """
        student = self.state.pending_delete
        if student is None:
            return False
        try:
            await self.service.delete(student.id)
        except StudentServiceError as exc:
            if self._mounted:
                self._apply(st.delete_failed, exc.message)
            return False
        if self._mounted:
            self._apply(st.delete_succeeded, student.id)
        return True

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def filtered_records(self) -> List[Student]:
        return st.filtered_records(self.state)

    @property
    def available_programs(self) -> List[str]:
        return st.available_programs(self.state)

    @property
    def empty_state(self) -> st.EmptyState:
        return st.empty_state(self.state)

    @property
    def results_summary(self) -> str:
        return st.results_summary(self.state)
