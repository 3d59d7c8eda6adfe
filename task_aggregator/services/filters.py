"""Фильтрация и сортировка списка задач для вывода."""
from __future__ import annotations

from typing import Iterable, List

from dateutil import parser

from task_aggregator.models import Task

ALL = "all"
SORT_FIELDS = ("dueDate", "createdAt", "updatedAt", "priority")


def _timestamp(value: str) -> float:
    try:
        return parser.isoparse(value).timestamp()
    except (TypeError, ValueError, OverflowError):
        return 0.0


def apply_filters(
    tasks: Iterable[Task],
    *,
    origin: str = ALL,
    status: str = ALL,
    priority: str = ALL,
    sort_by: str = "updatedAt",
) -> List[Task]:
    """Отбирает задачи по источнику, статусу и приоритету и сортирует их.

    ``dueDate`` сортируется по возрастанию (задачи без срока в конце),
    ``createdAt`` и ``updatedAt`` по убыванию, ``priority`` от urgent к low.
    """
    filtered = list(tasks)
    if origin != ALL:
        filtered = [task for task in filtered if task.origin == origin]
    if status != ALL:
        filtered = [task for task in filtered if task.status == status]
    if priority != ALL:
        filtered = [task for task in filtered if task.priority == priority]

    if sort_by == "dueDate":
        with_due = sorted((t for t in filtered if t.due_date), key=lambda t: _timestamp(t.due_date))
        return with_due + [t for t in filtered if not t.due_date]
    if sort_by == "createdAt":
        return sorted(filtered, key=lambda t: _timestamp(t.created_at), reverse=True)
    if sort_by == "updatedAt":
        return sorted(filtered, key=lambda t: _timestamp(t.updated_at), reverse=True)
    if sort_by == "priority":
        return sorted(filtered, key=lambda t: t.priority.rank)
    raise ValueError(f"Неизвестное поле сортировки: {sort_by}")


__all__ = ["apply_filters", "SORT_FIELDS", "ALL"]
