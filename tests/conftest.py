# tests/conftest.py

import asyncio
from datetime import date

import pytest

from student_directory.app.core.errors import StudentNotFoundError, StudentServiceError
from student_directory.app.schemas.student import Student, StudentInput

TODAY = date(2026, 10, 19)


class FakeStudentService:
    """In-memory stand-in for StudentService.

    ``failures`` maps an operation name to the message it should fail
    with.  ``gates`` maps an operation name to an ``asyncio.Event`` the
    call waits on before answering, to hold a response in flight.
    """

    def __init__(self, students=None):
        self.students = {str(s.id): s for s in (students or [])}
        self.calls = []
        self.failures = {}
        self.gates = {}
        self._next_id = 100

    async def _enter(self, operation, *args):
        self.calls.append((operation,) + args)
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        if operation in self.failures:
            raise StudentServiceError(self.failures[operation])

    async def list_all(self):
        await self._enter("list_all")
        return list(self.students.values())

    async def get_by_id(self, student_id):
        await self._enter("get_by_id", student_id)
        try:
            return self.students[str(student_id)]
        except KeyError:
            raise StudentNotFoundError(
                "Failed to fetch student: Student not found", status_code=404
            ) from None

    async def create(self, draft: StudentInput):
        await self._enter("create", draft)
        self._next_id += 1
        student = Student(id=f"s{self._next_id}", **draft.model_dump(mode="json"))
        self.students[str(student.id)] = student
        return student

    async def update(self, student_id, draft: StudentInput):
        await self._enter("update", student_id, draft)
        student = Student(id=student_id, **draft.model_dump(mode="json"))
        self.students[str(student_id)] = student
        return student

    async def delete(self, student_id):
        await self._enter("delete", student_id)
        self.students.pop(str(student_id), None)

    def called(self, operation):
        return [c for c in self.calls if c[0] == operation]


def make_student(id, name, email, birth_date, program):
    return Student(id=id, name=name, email=email, birthDate=birth_date, program=program)


@pytest.fixture
def sample_students():
    return [
        make_student("s001", "Ana Silva", "ana.silva@uni.edu", "2003-04-12", "Computer Science"),
        make_student("s002", "Bruno Costa", "bruno@mail.com", "2001-09-30", "Data Science"),
        make_student("s003", "Carla Mendes", "carla.m@uni.edu", "1999-01-05", "Computer Science"),
        make_student("s004", "Diego Anand", "diego@campus.org", "2005-06-21", "Cybersecurity"),
    ]


@pytest.fixture
def fake_service(sample_students):
    return FakeStudentService(sample_students)


@pytest.fixture
def empty_service():
    return FakeStudentService()


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def student_factory():
    return make_student
