"""
Student backend client.

This module defines :class:`StudentService`, a thin asynchronous
wrapper around the student REST backend.  Each public method maps to
exactly one HTTP call:

* :meth:`StudentService.list_all` – ``GET /students``
* :meth:`StudentService.get_by_id` – ``GET /students/{id}``
* :meth:`StudentService.create` – ``POST /students``
* :meth:`StudentService.update` – ``PUT /students/{id}``
* :meth:`StudentService.delete` – ``DELETE /students/{id}``
* :meth:`StudentService.search_by_name` – ``GET /students/search?name=..``
* :meth:`StudentService.list_by_program` – ``GET /students/program/{program}``

Failures of any kind are raised as
:class:`~student_directory.app.core.errors.StudentServiceError` with a
message of the form ``"Failed to <action>: <detail>"``.  The detail is
the ``message`` (or ``detail``) field of the backend's error body when
present, otherwise a description of the transport failure.  A ``404``
raises the :class:`StudentNotFoundError` subclass.  Calls are made
once; nothing is retried.

Bodies may be returned bare or wrapped in a ``{"data": ...}``
envelope; both are accepted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from student_directory.app.core.config import settings
from student_directory.app.core.errors import StudentNotFoundError, StudentServiceError
from student_directory.app.schemas.student import Student, StudentInput


logger = logging.getLogger(__name__)

StudentId = Union[int, str]


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Extract the backend's own error text from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("detail")
    if not message:
        return None
    return message if isinstance(message, str) else str(message)


def _unwrap(data: Any) -> Any:
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


def _student_path(student_id: StudentId) -> str:
    return f"/students/{quote(str(student_id), safe='')}"


class StudentService:
    """Client for the student REST backend.

    The service owns a single :class:`httpx.AsyncClient`.  Close it
    with :meth:`aclose` or use the service as an async context manager.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialise the service.

        Args:
            base_url: Base URL of the backend, e.g.
                ``http://localhost:8080/api``.  Defaults to
                ``settings.api_base_url``.
            timeout: Request timeout in seconds.  Defaults to
                ``settings.request_timeout``.
            client: Optional preconfigured client.  When given,
                ``base_url`` and ``timeout`` are ignored.
        """
        if client is None:
            client = httpx.AsyncClient(
                base_url=(base_url or settings.api_base_url).rstrip("/"),
                timeout=timeout if timeout is not None else settings.request_timeout,
                headers={"Accept": "application/json"},
            )
        self.client = client

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "StudentService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        parse: bool = True,
    ) -> Any:
        """Perform one HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the base URL (e.g. ``/students``).
            action: Description used in error messages, e.g.
                ``"create student"``.
            params: Query parameters.
            json_body: JSON body for ``POST``/``PUT``.
            parse: Whether to decode the response body at all.
        Returns:
            The parsed body, or ``None`` for an empty or ignored response.
        Raises:
            StudentServiceError: On any transport or HTTP failure.
        """
        try:
            logger.debug("Sending %s request to %s", method, path)
            response = await self.client.request(method, path, params=params, json=json_body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            detail = _error_detail(exc.response) or f"Request failed with status code {status}"
            logger.error("API request %s %s failed (%s): %s", method, path, status, detail)
            error_cls = StudentNotFoundError if status == 404 else StudentServiceError
            raise error_cls(f"Failed to {action}: {detail}", status_code=status) from exc
        except httpx.RequestError as exc:
            detail = str(exc) or exc.__class__.__name__
            logger.error("API request %s %s failed: %s", method, path, detail)
            raise StudentServiceError(f"Failed to {action}: {detail}") from exc

        if not parse or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("API request %s %s returned invalid JSON", method, path)
            raise StudentServiceError(
                f"Failed to {action}: Invalid response from server",
                status_code=response.status_code,
            ) from exc

    def _parse_student(self, data: Any, action: str) -> Student:
        try:
            return Student.model_validate(_unwrap(data))
        except ValidationError as exc:
            logger.error("Unexpected student payload: %s", exc)
            raise StudentServiceError(f"Failed to {action}: Invalid student data in response") from exc

    def _parse_students(self, data: Any, action: str) -> List[Student]:
        items = _unwrap(data)
        if items is None:
            return []
        if not isinstance(items, list):
            raise StudentServiceError(f"Failed to {action}: Expected a list of students")
        try:
            return [Student.model_validate(item) for item in items]
        except ValidationError as exc:
            logger.error("Unexpected student payload: %s", exc)
            raise StudentServiceError(f"Failed to {action}: Invalid student data in response") from exc

    # ------------------------------------------------------------------
    # Student operations
    # ------------------------------------------------------------------
    async def list_all(self) -> List[Student]:
        """Fetch the complete collection of students."""
        action = "fetch students"
        data = await self._request("GET", "/students", action=action)
        return self._parse_students(data, action)

    async def get_by_id(self, student_id: StudentId) -> Student:
        """Fetch a single student.

        Raises:
            StudentNotFoundError: If the backend has no such student.
        """
        action = "fetch student"
        data = await self._request("GET", _student_path(student_id), action=action)
        return self._parse_student(data, action)

    async def create(self, draft: StudentInput) -> Student:
        """Create a student and return the record with its assigned id."""
        action = "create student"
        data = await self._request("POST", "/students", action=action, json_body=draft.to_payload())
        student = self._parse_student(data, action)
        logger.info("Created student %s", student.id)
        return student

    async def update(self, student_id: StudentId, draft: StudentInput) -> Student:
        """Replace all fields of an existing student."""
        action = "update student"
        data = await self._request(
            "PUT", _student_path(student_id), action=action, json_body=draft.to_payload()
        )
        student = self._parse_student(data, action)
        logger.info("Updated student %s", student_id)
        return student

    async def delete(self, student_id: StudentId) -> None:
        """Delete a student.  The response body is ignored."""
        await self._request("DELETE", _student_path(student_id), action="delete student", parse=False)
        logger.info("Deleted student %s", student_id)

    async def search_by_name(self, name: str) -> List[Student]:
        """Ask the backend for students whose name matches ``name``."""
        action = "search students"
        data = await self._request("GET", "/students/search", action=action, params={"name": name})
        return self._parse_students(data, action)

    async def list_by_program(self, program: str) -> List[Student]:
        """Ask the backend for the students enrolled in ``program``."""
        action = "fetch students by program"
        path = f"/students/program/{quote(program, safe='')}"
        data = await self._request("GET", path, action=action)
        return self._parse_students(data, action)
