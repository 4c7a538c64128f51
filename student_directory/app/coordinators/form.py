"""
Coordinator for the student form.

The same form creates new students and edits existing ones.  Opening it
with a student id switches to edit mode and fetches that record to fill
in the fields; without an id it starts empty.  A submit is validated
locally first and only reaches the backend when every field passes.

After a successful submit the coordinator schedules navigation back to
the directory.  Closing the form cancels that navigation, and responses
that arrive after the form was closed or reopened for another record
are dropped.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from student_directory.app.core.config import settings
from student_directory.app.core.errors import StudentServiceError
from student_directory.app.coordinators import state as st
from student_directory.app.coordinators.base import Coordinator
from student_directory.app.coordinators.scheduling import ScheduledTask
from student_directory.app.services.student_service import StudentService
from student_directory.app.services.validation import to_input, validate


logger = logging.getLogger(__name__)

DIRECTORY_ROUTE = "/students"

CREATED_MESSAGE = "Student created successfully!"
UPDATED_MESSAGE = "Student updated successfully!"


class StudentFormCoordinator(Coordinator[st.FormState]):
    """State owner for the form fields, validation and submission.

    Args:
        service: Backend facade.
        navigate: Called with a route path when the form wants to leave,
            i.e. ``DIRECTORY_ROUTE`` after a successful submit.
        redirect_delay: Seconds between a successful submit and the
            navigation.  Defaults to ``settings.redirect_delay_seconds``.
        today: Returns the date validation treats as today.
    """

    def __init__(
        self,
        service: StudentService,
        navigate: Callable[[str], None],
        *,
        redirect_delay: Optional[float] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        super().__init__(st.FormState())
        self.service = service
        self.navigate = navigate
        self.redirect_delay = (
            redirect_delay if redirect_delay is not None else settings.redirect_delay_seconds
        )
        self.today = today
        self._redirect = ScheduledTask()
        self._mounted = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def open(self, student_id: Optional[st.StudentId] = None) -> None:
        """Show the form in create mode, or in edit mode for ``student_id``."""
        self._redirect.cancel()
        self._mounted = True
        self._generation += 1
        generation = self._generation
        mode = st.FormMode(student_id)
        self._apply(st.form_opened, mode)
        if not mode.is_edit:
            return

        try:
            student = await self.service.get_by_id(student_id)
        except StudentServiceError as exc:
            if self._is_current(generation):
                self._apply(st.record_load_failed, exc.message)
            return
        if not self._is_current(generation):
            logger.debug("Dropping stale response for student %s", student_id)
            return
        self._apply(st.record_loaded, student)

    def close(self) -> None:
        """Tear the form down and cancel any pending navigation."""
        self._mounted = False
        self._generation += 1
        self._redirect.cancel()

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    @property
    def redirect_pending(self) -> bool:
        return self._redirect.pending

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def set_field(self, name: str, value: str) -> None:
        """Update one field (``name``, ``email``, ``birth_date`` or ``program``)."""
        self._apply(st.field_changed, name, value, self.today())

    async def submit(self) -> bool:
        """Validate and send the form.

        Returns:
            ``True`` when the backend accepted the student.
        """
        current = self.state
        if current.submitting or current.loading:
            return False

        errors = validate(current.draft, self.today())
        if errors:
            self._apply(st.validation_failed, errors)
            return False

        generation = self._generation
        payload = to_input(current.draft)
        self._apply(st.submit_started)
        try:
            if current.mode.is_edit:
                await self.service.update(current.mode.student_id, payload)
                message = UPDATED_MESSAGE
            else:
                await self.service.create(payload)
                message = CREATED_MESSAGE
        except StudentServiceError as exc:
            if self._is_current(generation):
                self._apply(st.submit_failed, exc.message)
            return False

        if not self._is_current(generation):
            logger.debug("Form closed before the submission completed")
            return True
        self._apply(st.submit_succeeded, message)
        self._redirect.schedule(self.redirect_delay, self._go_to_directory)
        return True

    def _go_to_directory(self) -> None:
        if self._mounted:
            self.navigate(DIRECTORY_ROUTE)
