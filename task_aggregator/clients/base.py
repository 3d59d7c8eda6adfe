"""Контракт коннектора провайдера задач."""
from __future__ import annotations

from typing import Protocol, Sequence

from task_aggregator.models import CreateTaskInput, Task, TaskOrigin, UpdateTaskInput

USER_AGENT = "task-aggregator/0.1"
REQUEST_TIMEOUT = 30


class TaskConnector(Protocol):
    """Операции, которые агрегатор вызывает у каждого провайдера."""

    origin: TaskOrigin

    def fetch_all(self) -> Sequence[Task]:
        ...

    def create(self, data: CreateTaskInput) -> Task:
        ...

    def update(self, provider_id: str, fields: UpdateTaskInput) -> Task:
        ...

    def delete(self, provider_id: str) -> None:
        ...


__all__ = ["TaskConnector", "USER_AGENT", "REQUEST_TIMEOUT"]
