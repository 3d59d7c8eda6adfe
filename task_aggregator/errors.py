"""Иерархия исключений агрегатора."""
from __future__ import annotations

from typing import Optional


class TaskAggregatorError(RuntimeError):
    """Базовое исключение приложения."""


class ConfigurationError(TaskAggregatorError):
    """Не заданы учётные данные или идентификаторы провайдера."""


class UnsupportedOriginError(TaskAggregatorError, ValueError):
    """Запись адресована неизвестному провайдеру."""

    def __init__(self, origin: object) -> None:
        super().__init__(f"Неподдерживаемый источник задач: {origin!r}")
        self.origin = origin


class ProviderAPIError(TaskAggregatorError):
    """Ошибка API внешнего провайдера."""

    provider = "provider"

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        """Лимит запросов и ошибки сервера считаются временными."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class PartialWriteError(ProviderAPIError):
    """Запись у провайдера выполнена частично: часть изменений уже сохранена."""

    def __init__(self, message: str, *, provider: str, status_code: Optional[int] = None) -> None:
        super().__init__(message, status_code=status_code)
        self.provider = provider


class NotionAPIError(ProviderAPIError):
    """Ошибка Notion API."""

    provider = "notion"


class TodoistAPIError(ProviderAPIError):
    """Ошибка Todoist API."""

    provider = "todoist"


__all__ = [
    "TaskAggregatorError",
    "ConfigurationError",
    "UnsupportedOriginError",
    "ProviderAPIError",
    "PartialWriteError",
    "NotionAPIError",
    "TodoistAPIError",
]
