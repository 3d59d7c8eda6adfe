"""Маппинг задач Todoist в канонические задачи и обратно."""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from task_aggregator.models import (
    CreateTaskInput,
    Task,
    TaskOrigin,
    TaskPriority,
    TaskStatus,
    UpdateTaskInput,
    make_task_id,
)
from task_aggregator.services.fields import (
    EPOCH,
    as_identifier,
    as_mapping,
    as_text,
    first_value,
    string_tuple,
)

LOGGER = logging.getLogger(__name__)

UNTITLED = "Untitled"
CLEAR_DUE_STRING = "no date"

# Todoist: 4 означает наивысший приоритет, 1 обычный.
PRIORITY_LEVELS: Dict[int, TaskPriority] = {
    4: TaskPriority.URGENT,
    3: TaskPriority.HIGH,
    2: TaskPriority.MEDIUM,
    1: TaskPriority.LOW,
}
PRIORITY_VALUES: Dict[TaskPriority, int] = {value: key for key, value in PRIORITY_LEVELS.items()}

TaskFields = Union[CreateTaskInput, UpdateTaskInput]


class TodoistMapper:
    """Конвертация задач Todoist в модель ``Task`` и обратно."""

    @staticmethod
    def map_priority(raw: Any) -> TaskPriority:
        if isinstance(raw, bool) or not isinstance(raw, int):
            return TaskPriority.LOW
        return PRIORITY_LEVELS.get(raw, TaskPriority.LOW)

    @staticmethod
    def map_status(raw: Any) -> TaskStatus:
        # у Todoist только два состояния
        return TaskStatus.DONE if raw is True else TaskStatus.TODO

    def to_task(
        self,
        item: Any,
        *,
        project_names: Optional[Mapping[str, str]] = None,
    ) -> Optional[Task]:
        """Возвращает ``None``, если у задачи нет идентификатора."""
        item = as_mapping(item)
        task_id = as_identifier(item.get("id"))
        if task_id is None:
            LOGGER.warning("Задача Todoist без идентификатора пропущена")
            return None

        completed = first_value(item, "is_completed", "isCompleted", "checked")
        project_name = as_text(first_value(item, "project_name", "projectName"))
        if project_name is None and project_names:
            project_id = as_identifier(first_value(item, "project_id", "projectId"))
            if project_id is not None:
                project_name = project_names.get(project_id)

        created_at = as_text(first_value(item, "created_at", "createdAt", "added_at")) or EPOCH
        updated_at = as_text(first_value(item, "updated_at", "updatedAt")) or created_at

        return Task(
            id=make_task_id(TaskOrigin.TODOIST, task_id),
            origin=TaskOrigin.TODOIST,
            provider_id=task_id,
            title=as_text(item.get("content")) or UNTITLED,
            description=as_text(item.get("description")),
            status=self.map_status(completed),
            priority=self.map_priority(item.get("priority")),
            due_date=as_text(as_mapping(item.get("due")).get("date")),
            created_at=created_at,
            updated_at=updated_at,
            labels=string_tuple(item.get("labels")),
            project_name=project_name,
        )

    def to_payload(self, fields: TaskFields, *, partial: bool = False) -> Dict[str, object]:
        """Тело запроса создания (``partial=False``) или обновления задачи.

        Статус сюда не попадает: завершение и возобновление в Todoist выполняются
        отдельными вызовами.
        """

        def wanted(value: Any) -> bool:
            return value is not None if partial else bool(value)

        payload: Dict[str, object] = {}
        if wanted(fields.title):
            payload["content"] = fields.title
        if wanted(fields.description):
            payload["description"] = fields.description or ""
        if wanted(fields.priority):
            payload["priority"] = PRIORITY_VALUES[TaskPriority.coerce(fields.priority)]
        if wanted(fields.due_date):
            if fields.due_date:
                payload["due_date"] = fields.due_date
            else:
                payload["due_string"] = CLEAR_DUE_STRING
        if wanted(fields.labels):
            payload["labels"] = list(fields.labels or [])
        return payload


__all__ = ["TodoistMapper", "PRIORITY_LEVELS", "PRIORITY_VALUES", "UNTITLED"]
