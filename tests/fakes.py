"""Поддельные HTTP-ответы и сессии для тестов коннекторов."""
from __future__ import annotations

import json
from typing import Any, List, Optional


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self.content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.text = self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content)


class FakeSession:
    """Отдаёт заранее заданные ответы по порядку и запоминает запросы."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.headers: dict = {}
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    def queue(self, *responses: Any) -> "FakeSession":
        self.responses.extend(responses)
        return self

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Неожиданный запрос {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeConnector:
    """Коннектор в памяти для тестов агрегатора."""

    def __init__(self, origin, tasks=None, error: Optional[Exception] = None) -> None:
        self.origin = origin
        self.tasks = list(tasks or [])
        self.error = error
        self.fetch_calls = 0
        self.created: List[Any] = []
        self.updated: List[Any] = []
        self.deleted: List[str] = []
        self.write_error: Optional[Exception] = None

    def fetch_all(self):
        self.fetch_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tasks)

    def create(self, data):
        if self.write_error is not None:
            raise self.write_error
        self.created.append(data)
        return self.tasks[0]

    def update(self, provider_id, fields):
        if self.write_error is not None:
            raise self.write_error
        self.updated.append((provider_id, fields))
        return self.tasks[0]

    def delete(self, provider_id):
        if self.write_error is not None:
            raise self.write_error
        self.deleted.append(provider_id)
