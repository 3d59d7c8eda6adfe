"""HTTP-клиент для Todoist REST API."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

import requests

from task_aggregator.clients.base import REQUEST_TIMEOUT, USER_AGENT
from task_aggregator.clients.retry import RetryPolicy, call_with_retry
from task_aggregator.config import TodoistCredentials
from task_aggregator.errors import ConfigurationError, PartialWriteError, TodoistAPIError
from task_aggregator.models import CreateTaskInput, Task, TaskOrigin, TaskStatus, UpdateTaskInput
from task_aggregator.services.fields import as_identifier, as_text
from task_aggregator.services.todoist_mapper import TodoistMapper

LOGGER = logging.getLogger(__name__)


class TodoistClient:
    """Коннектор к Todoist.

    Завершение и возобновление задачи выполняются отдельными вызовами API, удаление
    безвозвратное.
    """

    origin = TaskOrigin.TODOIST

    def __init__(
        self,
        config: TodoistCredentials,
        session: Optional[requests.Session] = None,
        *,
        mapper: Optional[TodoistMapper] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if not config.api_token:
            raise ConfigurationError("Не задан api_token для Todoist")
        self._config = config
        self._mapper = mapper or TodoistMapper()
        self._policy = RetryPolicy(base_delay=config.retry.base_delay, max_retries=config.retry.max_retries)
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.api_token}",
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            }
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    # region low-level helpers
    def _send(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        try:
            response = self._session.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise TodoistAPIError(f"Ошибка соединения с Todoist при запросе {method} {url}: {exc}") from exc
        if response.status_code >= 400:
            raise TodoistAPIError(
                f"Ошибка Todoist {response.status_code} при запросе {method} {url}: {response.text}",
                status_code=response.status_code,
            )
        return response

    def _request(self, method: str, endpoint: str, **kwargs):
        response = call_with_retry(
            lambda: self._send(method, endpoint, **kwargs),
            self._policy,
            label=f"{method} {endpoint}",
            sleep=self._sleep,
        )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise TodoistAPIError(f"Todoist вернул некорректный JSON на {method} {endpoint}") from exc

    def _iter_collection(self, endpoint: str) -> Iterable[Dict]:
        """Итерирует коллекцию: простой список или страницы с ``next_cursor``."""
        cursor = None
        while True:
            params = {"cursor": cursor} if cursor else None
            payload = self._request("GET", endpoint, params=params)
            if isinstance(payload, list):
                items, cursor = payload, None
            else:
                items, cursor = payload.get("results") or [], payload.get("next_cursor")
            for item in items:
                if isinstance(item, dict):
                    yield item
            if not cursor:
                break

    def iter_tasks(self) -> Iterable[Dict]:
        return self._iter_collection("/tasks")

    def project_names(self) -> Dict[str, str]:
        """Словарь ``project_id -> name``."""
        names: Dict[str, str] = {}
        for project in self._iter_collection("/projects"):
            project_id = as_identifier(project.get("id"))
            name = as_text(project.get("name"))
            if project_id and name:
                names[project_id] = name
        return names

    def close_task(self, provider_id: str) -> None:
        self._request("POST", f"/tasks/{provider_id}/close")

    def reopen_task(self, provider_id: str) -> None:
        self._request("POST", f"/tasks/{provider_id}/reopen")

    # endregion

    def _change_state(self, provider_id: str, *, close: bool) -> None:
        """Закрывает или возобновляет задачу, поля которой уже записаны."""
        try:
            if close:
                self.close_task(provider_id)
            else:
                self.reopen_task(provider_id)
        except TodoistAPIError as exc:
            raise PartialWriteError(
                f"Задача {provider_id} сохранена, но смена статуса не удалась: {exc}",
                provider=exc.provider,
                status_code=exc.status_code,
            ) from exc

    def _to_task(self, item: Dict) -> Task:
        task = self._mapper.to_task(item)
        if task is None:
            raise TodoistAPIError("Todoist вернул задачу без идентификатора")
        return task

    def fetch_all(self) -> List[Task]:
        items = list(self.iter_tasks())
        projects = None
        if self._config.resolve_projects:
            try:
                projects = self.project_names()
            except TodoistAPIError as exc:
                LOGGER.warning("Не удалось получить проекты Todoist, названия проектов пропущены: %s", exc)
        tasks = [
            task
            for task in (self._mapper.to_task(item, project_names=projects) for item in items)
            if task is not None
        ]
        LOGGER.debug("Получено %s задач из Todoist", len(tasks))
        return tasks

    def create(self, data: CreateTaskInput) -> Task:
        item = self._request("POST", "/tasks", json=self._mapper.to_payload(data))
        task = self._to_task(item)
        if data.status == TaskStatus.DONE:
            self._change_state(task.provider_id, close=True)
            task = replace(task, status=TaskStatus.DONE)
        return task

    def update(self, provider_id: str, fields: UpdateTaskInput) -> Task:
        item = self._request("POST", f"/tasks/{provider_id}", json=self._mapper.to_payload(fields, partial=True))
        task = self._to_task(item)
        if fields.status is None:
            return task
        status = TaskStatus.coerce(fields.status)
        self._change_state(provider_id, close=status == TaskStatus.DONE)
        # в двухстатусной модели Todoist in_progress хранится как активная задача
        return replace(task, status=TaskStatus.DONE if status == TaskStatus.DONE else TaskStatus.TODO)

    def delete(self, provider_id: str) -> None:
        self._request("DELETE", f"/tasks/{provider_id}")


__all__ = ["TodoistClient"]
