"""Общие фикстуры тестов."""
from __future__ import annotations

from typing import List

import pytest

from fakes import FakeSession
from task_aggregator.config import NotionCredentials, TodoistCredentials


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def delays() -> List[float]:
    """Сюда пишутся задержки вместо реального ожидания."""
    return []


@pytest.fixture
def notion_config() -> NotionCredentials:
    return NotionCredentials(api_key="secret", database_id="db-1", base_url="https://notion.test/v1")


@pytest.fixture
def todoist_config() -> TodoistCredentials:
    return TodoistCredentials(api_token="token", base_url="https://todoist.test/rest/v2")
