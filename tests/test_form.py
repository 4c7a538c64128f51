# tests/test_form.py

import asyncio

import pytest

from student_directory.app.coordinators.form import (
    CREATED_MESSAGE,
    DIRECTORY_ROUTE,
    UPDATED_MESSAGE,
    StudentFormCoordinator,
)
from student_directory.app.services.validation import ErrorKind, StudentDraft

VALID_FIELDS = {
    "name": "Eva Rocha",
    "email": "eva.rocha@uni.edu",
    "birth_date": "2004-02-14",
    "program": "Machine Learning",
}


@pytest.fixture
def navigations():
    return []


@pytest.fixture
def make_form(today, navigations):
    def factory(service, redirect_delay=0.01):
        return StudentFormCoordinator(
            service,
            navigations.append,
            redirect_delay=redirect_delay,
            today=lambda: today,
        )

    return factory


def fill(form, **overrides):
    fields = dict(VALID_FIELDS, **overrides)
    for name, value in fields.items():
        form.set_field(name, value)


def test_create_mode_starts_empty(run, make_form, fake_service):
    form = make_form(fake_service)
    run(form.open())

    assert not form.state.mode.is_edit
    assert form.state.draft == StudentDraft()
    assert fake_service.called("get_by_id") == []


def test_create_submit_resets_form_and_navigates(run, make_form, fake_service, navigations):
    form = make_form(fake_service)

    async def scenario():
        await form.open()
        fill(form)
        ok = await form.submit()
        state_after_submit = form.state
        await asyncio.sleep(0.05)
        return ok, state_after_submit

    ok, state = run(scenario())

    assert ok is True
    assert state.submit_success == CREATED_MESSAGE
    assert state.draft == StudentDraft()
    assert not state.submitting
    assert navigations == [DIRECTORY_ROUTE]
    (_, payload), = fake_service.called("create")
    assert payload.to_payload()["birthDate"] == "2004-02-14"


def test_created_student_round_trips(run, make_form, empty_service):
    form = make_form(empty_service)

    async def scenario():
        await form.open()
        fill(form)
        await form.submit()
        form.close()
        created = next(iter(empty_service.students.values()))
        return await empty_service.get_by_id(created.id)

    fetched = run(scenario())

    assert StudentDraft.from_student(fetched) == StudentDraft(**VALID_FIELDS)


def test_invalid_email_never_reaches_service(run, make_form, fake_service, navigations):
    form = make_form(fake_service)

    async def scenario():
        await form.open()
        fill(form, email="not-an-email")
        return await form.submit()

    assert run(scenario()) is False
    assert form.state.errors == {"email": ErrorKind.INVALID_EMAIL}
    assert form.state.draft.email == "not-an-email"
    assert fake_service.called("create") == []
    assert not form.redirect_pending
    assert navigations == []


def test_errors_follow_input_after_failed_submit(run, make_form, fake_service):
    form = make_form(fake_service)
    run(form.open())
    fill(form, name="E")
    run(form.submit())
    assert form.state.errors == {"name": ErrorKind.TOO_SHORT}

    form.set_field("name", "Eva")

    assert form.state.errors == {}


def test_edit_mode_prefills_fields(run, make_form, fake_service):
    form = make_form(fake_service)
    run(form.open("s002"))

    assert form.state.mode.student_id == "s002"
    assert not form.state.loading
    assert form.state.draft == StudentDraft(
        name="Bruno Costa",
        email="bruno@mail.com",
        birth_date="2001-09-30",
        program="Data Science",
    )


def test_edit_submit_keeps_fields(run, make_form, fake_service, navigations):
    form = make_form(fake_service)

    async def scenario():
        await form.open("s002")
        form.set_field("program", "Artificial Intelligence")
        await form.submit()
        await asyncio.sleep(0.05)

    run(scenario())

    assert form.state.submit_success == UPDATED_MESSAGE
    assert form.state.draft.program == "Artificial Intelligence"
    assert fake_service.students["s002"].program == "Artificial Intelligence"
    assert fake_service.called("update")[0][1] == "s002"
    assert navigations == [DIRECTORY_ROUTE]


def test_edit_unknown_id_leaves_form_empty(run, make_form, fake_service):
    form = make_form(fake_service)
    run(form.open("missing"))

    assert form.state.load_error == "Failed to fetch student: Student not found"
    assert form.state.submit_error == ""
    assert form.state.draft == StudentDraft()
    assert not form.state.loading


def test_failed_submit_preserves_fields(run, make_form, fake_service, navigations):
    fake_service.failures["create"] = "Failed to create student: Email already exists"
    form = make_form(fake_service)

    async def scenario():
        await form.open()
        fill(form)
        return await form.submit()

    assert run(scenario()) is False
    assert form.state.submit_error == "Failed to create student: Email already exists"
    assert form.state.draft == StudentDraft(**VALID_FIELDS)
    assert not form.state.submitting
    assert not form.redirect_pending
    assert navigations == []


def test_close_cancels_pending_navigation(run, make_form, fake_service, navigations):
    form = make_form(fake_service, redirect_delay=0.02)

    async def scenario():
        await form.open()
        fill(form)
        await form.submit()
        assert form.redirect_pending
        form.close()
        await asyncio.sleep(0.05)

    run(scenario())

    assert not form.redirect_pending
    assert navigations == []


def test_stale_load_for_previous_record_is_dropped(run, make_form, fake_service):
    form = make_form(fake_service)

    async def scenario():
        gate = asyncio.Event()
        fake_service.gates["get_by_id"] = gate
        first = asyncio.create_task(form.open("s001"))
        await asyncio.sleep(0)
        fake_service.gates.pop("get_by_id")
        await form.open("s003")
        gate.set()
        await first

    run(scenario())

    assert form.state.mode.student_id == "s003"
    assert form.state.draft.name == "Carla Mendes"


def test_load_after_close_is_ignored(run, make_form, fake_service):
    form = make_form(fake_service)

    async def scenario():
        gate = asyncio.Event()
        fake_service.gates["get_by_id"] = gate
        task = asyncio.create_task(form.open("s001"))
        await asyncio.sleep(0)
        form.close()
        gate.set()
        await task

    run(scenario())

    assert form.state.draft == StudentDraft()


def test_submit_while_submitting_is_ignored(run, make_form, fake_service):
    form = make_form(fake_service)

    async def scenario():
        await form.open()
        fill(form)
        gate = asyncio.Event()
        fake_service.gates["create"] = gate
        first = asyncio.create_task(form.submit())
        await asyncio.sleep(0)
        assert form.state.submitting
        second = await form.submit()
        gate.set()
        form.close()
        return await first, second

    first, second = run(scenario())

    assert first is True
    assert second is False
    assert len(fake_service.called("create")) == 1
