"""Тесты CLI."""
import json

import pytest
from typer.testing import CliRunner

from fakes import FakeConnector
from task_aggregator import cli
from task_aggregator.errors import NotionAPIError
from task_aggregator.models import CreateTaskInput, Task, TaskOrigin, TaskPriority, TaskStatus, UpdateTaskInput

runner = CliRunner()


def sample_task(origin, provider_id, updated_at):
    return Task(
        id=f"{origin.value}-{provider_id}",
        origin=origin,
        provider_id=provider_id,
        title="Sample",
        status=TaskStatus.TODO,
        priority=TaskPriority.HIGH,
        created_at="2024-01-01T00:00:00Z",
        updated_at=updated_at,
        labels=("x",),
    )


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda verbosity: None)


@pytest.fixture
def connectors(monkeypatch):
    items = [
        FakeConnector(TaskOrigin.NOTION, error=NotionAPIError("down", status_code=503)),
        FakeConnector(TaskOrigin.TODOIST, [sample_task(TaskOrigin.TODOIST, "1", "2024-02-01T00:00:00Z")]),
    ]
    monkeypatch.setattr(cli, "build_connectors", lambda config: items)
    return items


def test_list_prints_tasks_and_errors(connectors, tmp_path):
    result = runner.invoke(cli.app, ["list", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [task["id"] for task in payload["tasks"]] == ["todoist-1"]
    assert payload["tasks"][0]["labels"] == ["x"]
    assert "description" not in payload["tasks"][0]
    assert "notion" in payload["errors"]


def test_delete_routes_to_provider(connectors, tmp_path):
    result = runner.invoke(cli.app, ["delete", "todoist", "42", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 0, result.output
    assert connectors[1].deleted == ["42"]


def test_verify_reports_failing_provider(connectors, tmp_path):
    result = runner.invoke(cli.app, ["verify", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1


def test_no_configured_provider(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "build_connectors", lambda config: [])
    result = runner.invoke(cli.app, ["list", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code != 0


def test_list_as_table(connectors, tmp_path):
    result = runner.invoke(cli.app, ["list", "--table", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 0, result.output
    assert "todoist-1" in result.stdout
    assert not result.stdout.lstrip().startswith("{")


def test_create_builds_input(connectors, tmp_path):
    result = runner.invoke(
        cli.app,
        [
            "create", "todoist", "Buy milk",
            "--priority", "urgent",
            "--due", "2024-08-01",
            "--label", "home",
            "--label", "errands",
            "--config", str(tmp_path / "missing.yaml"),
        ],
    )

    assert result.exit_code == 0, result.output
    (data,) = connectors[1].created
    assert isinstance(data, CreateTaskInput)
    assert data.title == "Buy milk"
    assert data.priority is TaskPriority.URGENT
    assert data.due_date == "2024-08-01"
    assert list(data.labels) == ["home", "errands"]
    assert json.loads(result.stdout)["task"]["id"] == "todoist-1"


def test_update_can_clear_due_date_and_labels(connectors, tmp_path):
    result = runner.invoke(
        cli.app,
        [
            "update", "todoist", "42",
            "--due", "",
            "--clear-labels",
            "--status", "done",
            "--config", str(tmp_path / "missing.yaml"),
        ],
    )

    assert result.exit_code == 0, result.output
    ((provider_id, fields),) = connectors[1].updated
    assert provider_id == "42"
    assert isinstance(fields, UpdateTaskInput)
    assert fields.due_date == ""
    assert fields.labels == []
    assert fields.status is TaskStatus.DONE
    assert fields.title is None
