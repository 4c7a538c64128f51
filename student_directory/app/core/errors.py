"""
Error types raised by the student service facade.

Every failed backend call surfaces as a :class:`StudentServiceError`
whose message is ready to show to the user.  Callers never need to
inspect anything but the message; ``status_code`` is kept for logging
and for the not-found case.
"""

from typing import Optional


class StudentServiceError(Exception):
    """A backend call failed.

    Attributes:
        message: Human readable, operation specific description, e.g.
            ``"Failed to create student: Email already exists"``.
        status_code: HTTP status of the failed response, or ``None``
            when the request never produced one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class StudentNotFoundError(StudentServiceError):
    """The backend reported that the requested student does not exist."""
