"""Определения доменных сущностей."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple


class TaskOrigin(str, Enum):
    """Провайдер, которому принадлежит задача."""

    NOTION = "notion"
    TODOIST = "todoist"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def coerce(cls, value: object) -> "TaskStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.TODO


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def coerce(cls, value: object) -> "TaskPriority":
        try:
            return cls(value)
        except ValueError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        """Порядок сортировки: urgent идёт первым."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: Dict[TaskPriority, int] = {
    TaskPriority.URGENT: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 3,
}


def make_task_id(origin: TaskOrigin, provider_id: str) -> str:
    """Глобальный идентификатор вида ``<origin>-<provider_id>``."""
    return f"{TaskOrigin(origin).value}-{provider_id}"


@dataclass(slots=True, frozen=True)
class Task:
    """Каноническая задача, общая для всех провайдеров."""

    id: str
    origin: TaskOrigin
    provider_id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    created_at: str
    updated_at: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    labels: Optional[Tuple[str, ...]] = None
    project_name: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "id": self.id,
            "origin": self.origin.value,
            "providerId": self.provider_id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.description is not None:
            payload["description"] = self.description
        if self.due_date is not None:
            payload["dueDate"] = self.due_date
        if self.labels is not None:
            payload["labels"] = list(self.labels)
        if self.project_name is not None:
            payload["projectName"] = self.project_name
        return payload


@dataclass(slots=True, frozen=True)
class TaskRef:
    """Ссылка на задачу: достаточно для записи без загрузки самой задачи."""

    origin: TaskOrigin
    provider_id: str

    @property
    def id(self) -> str:
        return make_task_id(self.origin, self.provider_id)


@dataclass(slots=True)
class CreateTaskInput:
    """Поля новой задачи."""

    title: str
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[str] = None
    labels: Optional[Sequence[str]] = None
    project_name: Optional[str] = None


@dataclass(slots=True)
class UpdateTaskInput:
    """Частичное обновление задачи.

    ``None`` означает «не менять». Пустая строка в ``due_date`` снимает срок,
    пустой список в ``labels`` очищает метки.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[str] = None
    labels: Optional[Sequence[str]] = None


__all__ = [
    "TaskOrigin",
    "TaskStatus",
    "TaskPriority",
    "Task",
    "TaskRef",
    "CreateTaskInput",
    "UpdateTaskInput",
    "make_task_id",
]
