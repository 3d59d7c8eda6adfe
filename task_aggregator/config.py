"""Загрузка и валидация конфигурации приложения."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


class RetryOptions(BaseModel):
    """Параметры повторов при временных ошибках провайдера."""

    base_delay: float = Field(0.5, ge=0, description="Начальная задержка в секундах, удваивается с каждой попыткой")
    max_retries: int = Field(5, ge=0, description="Максимальное число повторов")


class NotionCredentials(BaseModel):
    """Настройки подключения к Notion."""

    api_key: str = Field("", description="Integration token Notion")
    database_id: str = Field("", description="Идентификатор базы данных с задачами")
    base_url: str = Field("https://api.notion.com/v1", description="Базовый URL Notion API")
    notion_version: str = Field("2022-06-28", description="Значение заголовка Notion-Version")
    # Notion ограничивает интеграции ~3 запросами в секунду
    retry: RetryOptions = Field(default_factory=lambda: RetryOptions(base_delay=0.4, max_retries=5))


class TodoistCredentials(BaseModel):
    """Настройки подключения к Todoist."""

    api_token: str = Field("", description="API token Todoist")
    base_url: str = Field("https://api.todoist.com/rest/v2", description="Базовый URL Todoist REST API")
    resolve_projects: bool = Field(True, description="Подставлять названия проектов по project_id")
    retry: RetryOptions = Field(default_factory=lambda: RetryOptions(base_delay=0.5, max_retries=5))


class CacheOptions(BaseModel):
    """Параметры кэша объединённого списка задач."""

    ttl_seconds: float = Field(30.0, ge=0, description="Время жизни снимка в секундах")


class AppConfig(BaseModel):
    """Корневая конфигурация приложения.

    Отсутствующая секция провайдера отключает этот провайдер.
    """

    notion: Optional[NotionCredentials] = None
    todoist: Optional[TodoistCredentials] = None
    cache: CacheOptions = Field(default_factory=CacheOptions)

    @classmethod
    def load(cls, path: Path | str) -> "AppConfig":
        """Загружает конфигурацию из YAML-файла."""
        path = Path(path)
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Конфигурация {path} некорректна: {exc}") from exc

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Собирает конфигурацию из переменных окружения."""
        env = os.environ if environ is None else environ
        raw: dict = {}
        if env.get("NOTION_API_KEY") or env.get("NOTION_DATABASE_ID"):
            raw["notion"] = {
                "api_key": env.get("NOTION_API_KEY", ""),
                "database_id": env.get("NOTION_DATABASE_ID", ""),
            }
        if env.get("TODOIST_API_TOKEN"):
            raw["todoist"] = {"api_token": env["TODOIST_API_TOKEN"]}
        if env.get("TASKS_CACHE_TTL"):
            raw["cache"] = {"ttl_seconds": env["TASKS_CACHE_TTL"]}
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Переменные окружения некорректны: {exc}") from exc


__all__ = ["AppConfig", "NotionCredentials", "TodoistCredentials", "RetryOptions", "CacheOptions"]
