"""Доменные модели агрегатора."""

from .entities import (
    CreateTaskInput,
    Task,
    TaskOrigin,
    TaskRef,
    TaskPriority,
    TaskStatus,
    UpdateTaskInput,
    make_task_id,
)

__all__ = [
    "Task",
    "TaskRef",
    "TaskOrigin",
    "TaskStatus",
    "TaskPriority",
    "CreateTaskInput",
    "UpdateTaskInput",
    "make_task_id",
]
