"""Тесты коннектора Todoist."""
import pytest

from fakes import FakeResponse, FakeSession
from task_aggregator.clients import TodoistClient
from task_aggregator.config import TodoistCredentials
from task_aggregator.errors import ConfigurationError, PartialWriteError, TodoistAPIError
from task_aggregator.models import CreateTaskInput, TaskPriority, TaskStatus, UpdateTaskInput


def todoist_item(item_id, **extra):
    return {"id": item_id, "content": f"Task {item_id}", "created_at": "2024-06-01T08:00:00Z", **extra}


@pytest.fixture
def client(todoist_config, session, delays) -> TodoistClient:
    return TodoistClient(todoist_config, session, sleep=delays.append)


def urls(session):
    return [(call["method"], call["url"]) for call in session.calls]


def test_missing_token_fails_at_startup():
    with pytest.raises(ConfigurationError):
        TodoistClient(TodoistCredentials(api_token=""), FakeSession())


def test_fetch_all_resolves_project_names(client, session):
    session.queue(
        FakeResponse(200, [todoist_item("1", project_id="p1"), todoist_item("2", project_id="p2")]),
        FakeResponse(200, [{"id": "p1", "name": "Inbox"}]),
    )

    tasks = client.fetch_all()

    assert [task.project_name for task in tasks] == ["Inbox", None]
    assert urls(session) == [
        ("GET", "https://todoist.test/rest/v2/tasks"),
        ("GET", "https://todoist.test/rest/v2/projects"),
    ]


def test_fetch_all_follows_cursor_pages(todoist_config, session, delays):
    config = todoist_config.model_copy(update={"resolve_projects": False})
    client = TodoistClient(config, session, sleep=delays.append)
    session.queue(
        FakeResponse(200, {"results": [todoist_item("1"), "garbage"], "next_cursor": "abc"}),
        FakeResponse(200, {"results": [todoist_item("2")], "next_cursor": None}),
    )

    tasks = client.fetch_all()

    assert [task.provider_id for task in tasks] == ["1", "2"]
    assert session.calls[0]["params"] is None
    assert session.calls[1]["params"] == {"cursor": "abc"}


def test_fetch_all_gives_up_after_retry_cap(client, session, delays):
    session.queue(*[FakeResponse(502, {"error": "bad gateway"}) for _ in range(6)])

    with pytest.raises(TodoistAPIError) as exc_info:
        client.fetch_all()

    assert exc_info.value.status_code == 502
    assert len(session.calls) == 6
    assert delays == [0.5, 1.0, 2.0, 4.0, 8.0]


def test_create_sends_payload(client, session):
    session.queue(FakeResponse(200, todoist_item("10", priority=4)))

    task = client.create(CreateTaskInput(title="Task 10", priority=TaskPriority.URGENT))

    assert urls(session) == [("POST", "https://todoist.test/rest/v2/tasks")]
    assert session.calls[0]["json"] == {"content": "Task 10", "priority": 4}
    assert task.id == "todoist-10"
    assert task.priority is TaskPriority.URGENT


def test_create_done_task_closes_it(client, session):
    session.queue(FakeResponse(200, todoist_item("11")), FakeResponse(204))

    task = client.create(CreateTaskInput(title="Done already", status=TaskStatus.DONE))

    assert urls(session)[-1] == ("POST", "https://todoist.test/rest/v2/tasks/11/close")
    assert task.status is TaskStatus.DONE


def test_update_to_done_closes_task(client, session):
    session.queue(FakeResponse(200, todoist_item("5")), FakeResponse(204))

    task = client.update("5", UpdateTaskInput(title="Renamed", status=TaskStatus.DONE))

    assert urls(session) == [
        ("POST", "https://todoist.test/rest/v2/tasks/5"),
        ("POST", "https://todoist.test/rest/v2/tasks/5/close"),
    ]
    assert session.calls[0]["json"] == {"content": "Renamed"}
    assert task.status is TaskStatus.DONE


def test_update_from_done_to_todo_reopens_once(client, session):
    session.queue(FakeResponse(200, todoist_item("5", is_completed=True)), FakeResponse(204))

    task = client.update("5", UpdateTaskInput(status=TaskStatus.TODO))

    assert urls(session) == [
        ("POST", "https://todoist.test/rest/v2/tasks/5"),
        ("POST", "https://todoist.test/rest/v2/tasks/5/reopen"),
    ]
    assert task.status is TaskStatus.TODO


def test_update_without_status_makes_single_call(client, session):
    session.queue(FakeResponse(200, todoist_item("5", priority=2)))

    task = client.update("5", UpdateTaskInput(priority=TaskPriority.MEDIUM))

    assert len(session.calls) == 1
    assert task.priority is TaskPriority.MEDIUM


def test_delete_is_hard_delete(client, session):
    session.queue(FakeResponse(204))
    client.delete("7")
    assert urls(session) == [("DELETE", "https://todoist.test/rest/v2/tasks/7")]


def test_not_found_propagates_immediately(client, session, delays):
    session.queue(FakeResponse(404, {"error": "not found"}))
    with pytest.raises(TodoistAPIError) as exc_info:
        client.delete("missing")
    assert exc_info.value.status_code == 404
    assert delays == []


def test_project_catalogue_failure_keeps_tasks(client, session, delays):
    session.queue(
        FakeResponse(200, [todoist_item("1", project_id="p1")]),
        FakeResponse(403, {"error": "forbidden"}),
    )

    tasks = client.fetch_all()

    assert [task.provider_id for task in tasks] == ["1"]
    assert tasks[0].project_name is None
    assert delays == []


def test_failed_close_after_update_is_partial_write(client, session):
    session.queue(FakeResponse(200, todoist_item("5")), FakeResponse(400, {"error": "bad"}))

    with pytest.raises(PartialWriteError) as exc_info:
        client.update("5", UpdateTaskInput(title="Renamed", status=TaskStatus.DONE))

    assert exc_info.value.provider == "todoist"
    assert exc_info.value.status_code == 400
    assert isinstance(exc_info.value.__cause__, TodoistAPIError)


def test_failed_close_after_create_is_partial_write(client, session):
    session.queue(FakeResponse(200, todoist_item("11")), FakeResponse(404, {"error": "gone"}))

    with pytest.raises(PartialWriteError):
        client.create(CreateTaskInput(title="Done already", status=TaskStatus.DONE))
