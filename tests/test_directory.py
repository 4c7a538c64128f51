# tests/test_directory.py

import asyncio

from student_directory.app.coordinators.directory import StudentDirectoryCoordinator
from student_directory.app.coordinators.state import EmptyState


def opened(run, service):
    directory = StudentDirectoryCoordinator(service)
    run(directory.open())
    return directory


def test_open_loads_students(run, fake_service):
    directory = opened(run, fake_service)

    assert [s.id for s in directory.state.listing.records] == ["s001", "s002", "s003", "s004"]
    assert not directory.state.listing.loading
    assert directory.state.listing.error == ""
    assert fake_service.called("list_all") == [("list_all",)]


def test_state_shows_loading_until_response(run, fake_service):
    async def scenario():
        gate = asyncio.Event()
        fake_service.gates["list_all"] = gate
        directory = StudentDirectoryCoordinator(fake_service)
        task = asyncio.create_task(directory.open())
        await asyncio.sleep(0)
        loading = directory.state.listing.loading
        gate.set()
        await task
        return loading, directory.state.listing.loading

    assert run(scenario()) == (True, False)


def test_reopen_starts_without_pending_delete_or_filters(run, fake_service):
    directory = opened(run, fake_service)
    directory.request_delete(directory.find("s003"))
    directory.set_search_term("carla")
    directory.set_selected_program("Computer Science")

    directory.close()
    run(directory.open())

    assert directory.state.pending_delete is None
    assert directory.state.filters.search_term == ""
    assert directory.state.filters.selected_program == ""
    assert run(directory.confirm_delete()) is False
    assert fake_service.called("delete") == []


def test_failed_load_reports_service_message(run, empty_service):
    empty_service.failures["list_all"] = "Failed to fetch students: Network Error"

    directory = opened(run, empty_service)

    assert directory.state.listing.error == "Failed to fetch students: Network Error"
    assert directory.state.listing.records == ()


def test_failed_refresh_keeps_displayed_students(run, fake_service):
    directory = opened(run, fake_service)
    fake_service.failures["list_all"] = "Failed to fetch students: timeout"

    run(directory.refresh())

    assert len(directory.state.listing.records) == 4
    assert directory.state.listing.error == "Failed to fetch students: timeout"


def test_filters_do_not_call_the_backend(run, fake_service):
    directory = opened(run, fake_service)

    directory.set_search_term("UNI.EDU")
    directory.set_selected_program("Computer Science")

    assert [s.id for s in directory.filtered_records] == ["s001", "s003"]
    assert directory.available_programs == ["Computer Science", "Cybersecurity", "Data Science"]
    assert len(fake_service.called("list_all")) == 1


def test_empty_directory_differs_from_no_matches(run, fake_service, empty_service):
    assert opened(run, empty_service).empty_state is EmptyState.NO_RECORDS

    directory = opened(run, fake_service)
    directory.set_search_term("nobody")
    assert directory.empty_state is EmptyState.NO_MATCHES


def test_cancel_delete_keeps_list(run, fake_service):
    directory = opened(run, fake_service)
    before = directory.state.listing

    directory.request_delete(directory.find("s002"))
    directory.cancel_delete()

    assert directory.state.pending_delete is None
    assert directory.state.listing == before
    assert fake_service.called("delete") == []


def test_confirm_delete_removes_exactly_one(run, fake_service):
    directory = opened(run, fake_service)
    directory.request_delete(directory.find("s002"))

    assert run(directory.confirm_delete()) is True

    assert [s.id for s in directory.state.listing.records] == ["s001", "s003", "s004"]
    assert directory.state.pending_delete is None
    assert fake_service.called("delete") == [("delete", "s002")]
    # Removal is local; no reload.
    assert len(fake_service.called("list_all")) == 1


def test_failed_delete_clears_confirmation_and_sets_error(run, fake_service):
    directory = opened(run, fake_service)
    fake_service.failures["delete"] = "Failed to delete student: Forbidden"
    directory.request_delete(directory.find("s001"))

    assert run(directory.confirm_delete()) is False

    assert directory.state.pending_delete is None
    assert directory.state.listing.error == "Failed to delete student: Forbidden"
    assert len(directory.state.listing.records) == 4


def test_confirm_without_pending_delete_does_nothing(run, fake_service):
    directory = opened(run, fake_service)

    assert run(directory.confirm_delete()) is False
    assert fake_service.called("delete") == []


def test_filter_updates_while_load_in_flight(run, fake_service):
    async def scenario():
        gate = asyncio.Event()
        fake_service.gates["list_all"] = gate
        directory = StudentDirectoryCoordinator(fake_service)
        task = asyncio.create_task(directory.open())
        await asyncio.sleep(0)
        assert directory.state.listing.loading

        directory.set_search_term("ana")
        gate.set()
        await task
        return directory

    directory = run(scenario())

    assert [s.id for s in directory.filtered_records] == ["s001", "s004"]


def test_response_after_close_is_dropped(run, fake_service):
    async def scenario():
        gate = asyncio.Event()
        fake_service.gates["list_all"] = gate
        directory = StudentDirectoryCoordinator(fake_service)
        task = asyncio.create_task(directory.open())
        await asyncio.sleep(0)
        directory.close()
        gate.set()
        await task
        return directory

    directory = run(scenario())

    assert directory.state.listing.records == ()
