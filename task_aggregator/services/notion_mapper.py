"""Маппинг страниц базы Notion в канонические задачи и обратно."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

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
    first_mapping,
    join_rich_text,
    normalize_token,
)

LOGGER = logging.getLogger(__name__)

UNTITLED = "Untitled"

STATUS_SYNONYMS: Dict[str, TaskStatus] = {
    "done": TaskStatus.DONE,
    "complete": TaskStatus.DONE,
    "completed": TaskStatus.DONE,
    "in progress": TaskStatus.IN_PROGRESS,
    "in_progress": TaskStatus.IN_PROGRESS,
    "doing": TaskStatus.IN_PROGRESS,
    "started": TaskStatus.IN_PROGRESS,
}

PRIORITY_SYNONYMS: Dict[str, TaskPriority] = {
    "urgent": TaskPriority.URGENT,
    "critical": TaskPriority.URGENT,
    "high": TaskPriority.HIGH,
    "medium": TaskPriority.MEDIUM,
    "low": TaskPriority.LOW,
}

STATUS_NAMES: Dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

PRIORITY_NAMES: Dict[TaskPriority, str] = {
    TaskPriority.LOW: "Low",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.HIGH: "High",
    TaskPriority.URGENT: "Urgent",
}

TaskFields = Union[CreateTaskInput, UpdateTaskInput]


class NotionMapper:
    """Конвертация страниц Notion в модель ``Task`` и обратно."""

    @staticmethod
    def map_status(raw: Any) -> TaskStatus:
        return STATUS_SYNONYMS.get(normalize_token(raw) or "", TaskStatus.TODO)

    @staticmethod
    def map_priority(raw: Any) -> TaskPriority:
        return PRIORITY_SYNONYMS.get(normalize_token(raw) or "", TaskPriority.MEDIUM)

    def to_task(self, page: Any) -> Optional[Task]:
        """Возвращает ``None``, если у страницы нет идентификатора."""
        page = as_mapping(page)
        page_id = as_identifier(page.get("id"))
        if page_id is None:
            LOGGER.warning("Страница Notion без идентификатора пропущена")
            return None
        props = as_mapping(page.get("properties"))

        title_prop = first_mapping(props, "Name", "Title", "title")
        title = join_rich_text(title_prop.get("title")) or UNTITLED

        desc_prop = first_mapping(props, "Description", "description")
        description = join_rich_text(desc_prop.get("rich_text")) or None

        status_prop = first_mapping(props, "Status", "status")
        status_obj = as_mapping(status_prop.get("status")) or as_mapping(status_prop.get("select"))
        status = self.map_status(status_obj.get("name"))

        priority_prop = first_mapping(props, "Priority", "priority")
        priority = self.map_priority(as_mapping(priority_prop.get("select")).get("name"))

        due_prop = first_mapping(props, "Due", "Due Date", "due_date")
        due_date = as_text(as_mapping(due_prop.get("date")).get("start"))

        tags_prop = first_mapping(props, "Tags", "Labels", "tags")
        multi_select = tags_prop.get("multi_select")
        labels = None
        if isinstance(multi_select, list):
            names = tuple(
                name for name in (as_text(as_mapping(item).get("name")) for item in multi_select) if name
            )
            labels = names or None

        project_prop = first_mapping(props, "Project", "project")
        project_name = as_text(as_mapping(project_prop.get("select")).get("name"))

        created_at = as_text(page.get("created_time")) or EPOCH
        updated_at = as_text(page.get("last_edited_time")) or created_at

        return Task(
            id=make_task_id(TaskOrigin.NOTION, page_id),
            origin=TaskOrigin.NOTION,
            provider_id=page_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            created_at=created_at,
            updated_at=updated_at,
            labels=labels,
            project_name=project_name,
        )

    def to_properties(self, fields: TaskFields, *, partial: bool = False) -> Dict[str, object]:
        """Собирает ``properties`` для создания (``partial=False``) или обновления страницы.

        При создании пустые значения пропускаются; при обновлении любое
        значение, отличное от ``None``, записывается, в том числе пустое.
        """

        def wanted(value: Any) -> bool:
            return value is not None if partial else bool(value)

        properties: Dict[str, object] = {}
        if wanted(fields.title):
            properties["Name"] = {"title": [{"text": {"content": fields.title}}]}
        if wanted(fields.status):
            properties["Status"] = {"status": {"name": STATUS_NAMES[TaskStatus.coerce(fields.status)]}}
        if wanted(fields.priority):
            properties["Priority"] = {"select": {"name": PRIORITY_NAMES[TaskPriority.coerce(fields.priority)]}}
        if wanted(fields.description):
            text = fields.description or ""
            properties["Description"] = {"rich_text": [{"text": {"content": text}}] if text else []}
        if wanted(fields.due_date):
            properties["Due"] = {"date": {"start": fields.due_date} if fields.due_date else None}
        if wanted(fields.labels):
            properties["Tags"] = {"multi_select": [{"name": name} for name in fields.labels or []]}
        project_name = getattr(fields, "project_name", None)
        if project_name:
            properties["Project"] = {"select": {"name": project_name}}
        return properties


__all__ = ["NotionMapper", "STATUS_NAMES", "PRIORITY_NAMES", "UNTITLED"]
