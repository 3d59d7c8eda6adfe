"""Сервисный слой приложения."""

from .aggregator import TaskAggregationService
from .cache import SnapshotCache, TaskSnapshot
from .filters import apply_filters
from .notion_mapper import NotionMapper
from .todoist_mapper import TodoistMapper

__all__ = [
    "TaskAggregationService",
    "SnapshotCache",
    "TaskSnapshot",
    "apply_filters",
    "NotionMapper",
    "TodoistMapper",
]
