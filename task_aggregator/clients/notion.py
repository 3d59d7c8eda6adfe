"""HTTP-клиент для Notion API."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

import requests

from task_aggregator.clients.base import REQUEST_TIMEOUT, USER_AGENT
from task_aggregator.clients.retry import RetryPolicy, call_with_retry
from task_aggregator.config import NotionCredentials
from task_aggregator.errors import ConfigurationError, NotionAPIError
from task_aggregator.models import CreateTaskInput, Task, TaskOrigin, UpdateTaskInput
from task_aggregator.services.notion_mapper import NotionMapper

LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 100


class NotionClient:
    """Коннектор к базе данных задач Notion.

    Удаление архивирует страницу, статус записывается обычным свойством.
    """

    origin = TaskOrigin.NOTION

    def __init__(
        self,
        config: NotionCredentials,
        session: Optional[requests.Session] = None,
        *,
        mapper: Optional[NotionMapper] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError("Не задан api_key для Notion")
        if not config.database_id:
            raise ConfigurationError("Не задан database_id для Notion")
        self._config = config
        self._mapper = mapper or NotionMapper()
        self._policy = RetryPolicy(base_delay=config.retry.base_delay, max_retries=config.retry.max_retries)
        self._sleep = sleep
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Notion-Version": config.notion_version,
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
            raise NotionAPIError(f"Ошибка соединения с Notion при запросе {method} {url}: {exc}") from exc
        if response.status_code >= 400:
            raise NotionAPIError(
                f"Ошибка Notion {response.status_code} при запросе {method} {url}: {response.text}",
                status_code=response.status_code,
            )
        return response

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict:
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
            raise NotionAPIError(f"Notion вернул некорректный JSON на {method} {endpoint}") from exc

    def query_database(self, cursor: Optional[str] = None) -> Dict:
        """Возвращает одну страницу результатов запроса к базе."""
        body: Dict[str, object] = {"page_size": PAGE_SIZE}
        if cursor:
            body["start_cursor"] = cursor
        return self._request("POST", f"/databases/{self._config.database_id}/query", json=body)

    def iter_pages(self) -> Iterable[Dict]:
        """Итерирует страницы базы с учётом пагинации, пропуская не-страницы."""
        cursor = None
        while True:
            payload = self.query_database(cursor)
            for result in payload.get("results") or []:
                if (
                    isinstance(result, dict)
                    and result.get("object") == "page"
                    and isinstance(result.get("properties"), dict)
                ):
                    yield result
            next_cursor = payload.get("next_cursor")
            if not payload.get("has_more") or not next_cursor:
                break
            cursor = next_cursor

    def database_properties(self) -> Dict[str, str]:
        """Свойства базы задач: ``имя -> тип``."""
        payload = self._request("GET", f"/databases/{self._config.database_id}")
        properties = payload.get("properties")
        if not isinstance(properties, dict):
            return {}
        return {
            name: str(value.get("type") or "")
            for name, value in properties.items()
            if isinstance(value, dict)
        }

    # endregion

    def _to_task(self, page: Dict) -> Task:
        task = self._mapper.to_task(page)
        if task is None:
            raise NotionAPIError("Notion вернул страницу без идентификатора")
        return task

    def fetch_all(self) -> List[Task]:
        pages = list(self.iter_pages())
        tasks = [task for task in (self._mapper.to_task(page) for page in pages) if task is not None]
        LOGGER.debug("Получено %s задач из Notion", len(tasks))
        return tasks

    def create(self, data: CreateTaskInput) -> Task:
        payload = {
            "parent": {"database_id": self._config.database_id},
            "properties": self._mapper.to_properties(data),
        }
        page = self._request("POST", "/pages", json=payload)
        return self._to_task(page)

    def update(self, provider_id: str, fields: UpdateTaskInput) -> Task:
        payload = {"properties": self._mapper.to_properties(fields, partial=True)}
        page = self._request("PATCH", f"/pages/{provider_id}", json=payload)
        return self._to_task(page)

    def delete(self, provider_id: str) -> None:
        """Архивирует страницу (мягкое удаление)."""
        self._request("PATCH", f"/pages/{provider_id}", json={"archived": True})


__all__ = ["NotionClient"]
