"""CLI-интерфейс к агрегатору задач."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer

from task_aggregator.clients import NotionClient, TaskConnector, TodoistClient
from task_aggregator.config import AppConfig
from task_aggregator.models import (
    CreateTaskInput,
    TaskOrigin,
    TaskPriority,
    TaskRef,
    TaskStatus,
    UpdateTaskInput,
)
from task_aggregator.services import SnapshotCache, TaskAggregationService, apply_filters

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(help="Единый список задач Notion и Todoist")

ConfigOption = typer.Option(Path("config.yaml"), "--config", "-c", help="Путь к YAML конфигурации")
VerbosityOption = typer.Option(0, "--verbose", "-v", count=True, help="Уровень логирования")


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


def load_config(config_path: Path) -> AppConfig:
    """YAML-файл, если он есть, иначе переменные окружения."""
    if config_path.exists():
        return AppConfig.load(config_path)
    return AppConfig.from_env()


def build_connectors(config: AppConfig) -> List[TaskConnector]:
    connectors: List[TaskConnector] = []
    if config.notion is not None:
        connectors.append(NotionClient(config.notion))
    if config.todoist is not None:
        connectors.append(TodoistClient(config.todoist))
    return connectors


def build_service(config_path: Path) -> TaskAggregationService:
    config = load_config(config_path)
    connectors = build_connectors(config)
    if not connectors:
        raise typer.BadParameter("Не настроен ни один провайдер задач", param_hint="--config")
    return TaskAggregationService(connectors, SnapshotCache(ttl_seconds=config.cache.ttl_seconds))


def _echo(payload: Dict) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("list")
def list_tasks(
    origin: str = typer.Option("all", help="notion, todoist или all"),
    status: str = typer.Option("all", help="todo, in_progress, done или all"),
    priority: str = typer.Option("all", help="low, medium, high, urgent или all"),
    sort_by: str = typer.Option("updatedAt", "--sort", help="dueDate, createdAt, updatedAt или priority"),
    as_json: bool = typer.Option(True, "--json/--table", help="Формат вывода: JSON или таблица"),
    config_path: Path = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Выводит объединённый список задач."""
    configure_logging(verbosity)
    service = build_service(config_path)
    tasks = apply_filters(
        service.get_all_tasks(), origin=origin, status=status, priority=priority, sort_by=sort_by
    )
    errors = {source.value: str(error) for source, error in service.last_errors.items()}
    if as_json:
        _echo({"tasks": [task.to_dict() for task in tasks], "errors": errors})
        return
    for task in tasks:
        typer.echo(f"{task.id}  |  {task.status.value:<11}  |  {task.priority.value:<6}  |  {task.title}")
    for source, message in errors.items():
        typer.echo(f"{source}: ошибка: {message}", err=True)


@app.command("create")
def create_task(
    origin: str = typer.Argument(..., help="notion или todoist"),
    title: str = typer.Argument(..., help="Заголовок задачи"),
    description: Optional[str] = typer.Option(None, help="Описание"),
    status: Optional[TaskStatus] = typer.Option(None, help="Статус"),
    priority: Optional[TaskPriority] = typer.Option(None, help="Приоритет"),
    due: Optional[str] = typer.Option(None, help="Срок в формате YYYY-MM-DD"),
    label: Optional[List[str]] = typer.Option(None, "--label", "-l", help="Метка, можно повторять"),
    project: Optional[str] = typer.Option(None, help="Название проекта"),
    config_path: Path = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Создаёт задачу у выбранного провайдера."""
    configure_logging(verbosity)
    service = build_service(config_path)
    data = CreateTaskInput(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due,
        labels=label or None,
        project_name=project,
    )
    task = service.create_task(origin, data)
    _echo({"task": task.to_dict()})


@app.command("update")
def update_task(
    origin: TaskOrigin = typer.Argument(..., help="Источник задачи"),
    provider_id: str = typer.Argument(..., help="Идентификатор задачи у провайдера"),
    title: Optional[str] = typer.Option(None, help="Новый заголовок"),
    description: Optional[str] = typer.Option(None, help="Новое описание"),
    status: Optional[TaskStatus] = typer.Option(None, help="Новый статус"),
    priority: Optional[TaskPriority] = typer.Option(None, help="Новый приоритет"),
    due: Optional[str] = typer.Option(None, help="Новый срок; пустая строка снимает срок"),
    label: Optional[List[str]] = typer.Option(None, "--label", "-l", help="Метка, можно повторять"),
    clear_labels: bool = typer.Option(False, "--clear-labels", help="Удалить все метки"),
    config_path: Path = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Частично обновляет задачу."""
    configure_logging(verbosity)
    service = build_service(config_path)
    labels = [] if clear_labels else (label or None)
    fields = UpdateTaskInput(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due,
        labels=labels,
    )
    task = service.update_task(TaskRef(origin=origin, provider_id=provider_id), fields)
    _echo({"task": task.to_dict()})


@app.command("delete")
def delete_task(
    origin: TaskOrigin = typer.Argument(..., help="Источник задачи"),
    provider_id: str = typer.Argument(..., help="Идентификатор задачи у провайдера"),
    config_path: Path = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Удаляет задачу (в Notion архивирует страницу)."""
    configure_logging(verbosity)
    service = build_service(config_path)
    service.delete_task(TaskRef(origin=origin, provider_id=provider_id))
    typer.echo("Задача удалена")


@app.command("verify")
def verify(
    config_path: Path = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Проверяет конфигурацию и доступность провайдеров."""
    configure_logging(verbosity)
    service = build_service(config_path)
    tasks = service.get_all_tasks()
    if service.last_errors:
        for origin, error in service.last_errors.items():
            typer.echo(f"{origin.value}: ошибка: {error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Соединение успешно, задач: {len(tasks)}")


if __name__ == "__main__":
    app()
