"""Объединение задач всех провайдеров и маршрутизация изменений."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Union

from dateutil import parser

from task_aggregator.clients.base import TaskConnector
from task_aggregator.errors import PartialWriteError, UnsupportedOriginError
from task_aggregator.models import CreateTaskInput, Task, TaskOrigin, TaskRef, UpdateTaskInput
from task_aggregator.services.cache import SnapshotCache

LOGGER = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _updated_at_key(task: Task) -> datetime:
    try:
        moment = parser.isoparse(task.updated_at)
    except (TypeError, ValueError, OverflowError):
        return _OLDEST
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def sort_by_updated(tasks: Sequence[Task]) -> List[Task]:
    """Сортировка по ``updated_at`` по убыванию; при равенстве сохраняется исходный порядок."""
    return sorted(tasks, key=_updated_at_key, reverse=True)


class TaskAggregationService:
    """Единая точка чтения и записи задач.

    Чтение опрашивает все коннекторы параллельно и переживает отказ любого
    из них. Запись уходит в коннектор, которому принадлежит задача, после
    чего кэш сбрасывается.
    """

    def __init__(
        self,
        connectors: Union[Mapping[TaskOrigin, TaskConnector], Sequence[TaskConnector]],
        cache: Optional[SnapshotCache] = None,
        *,
        max_workers: Optional[int] = None,
    ) -> None:
        if isinstance(connectors, Mapping):
            self._connectors: Dict[TaskOrigin, TaskConnector] = {
                TaskOrigin(origin): connector for origin, connector in connectors.items()
            }
        else:
            self._connectors = {TaskOrigin(connector.origin): connector for connector in connectors}
        self._cache = cache or SnapshotCache()
        self._max_workers = max_workers
        self.last_errors: Dict[TaskOrigin, Exception] = {}

    @property
    def cache(self) -> SnapshotCache:
        return self._cache

    # region read
    def get_all_tasks(self) -> List[Task]:
        snapshot = self._cache.get()
        if snapshot is not None:
            LOGGER.debug("Список задач отдан из кэша (%s шт.)", len(snapshot.tasks))
            return list(snapshot.tasks)

        tasks: List[Task] = []
        errors: Dict[TaskOrigin, Exception] = {}
        if self._connectors:
            workers = self._max_workers or len(self._connectors)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as executor:
                futures: Dict[TaskOrigin, Future] = {
                    origin: executor.submit(connector.fetch_all)
                    for origin, connector in self._connectors.items()
                }
                wait(futures.values())
            for origin, future in futures.items():
                error = future.exception()
                if error is not None:
                    LOGGER.error("Не удалось получить задачи из %s: %s", origin.value, error)
                    errors[origin] = error
                    continue
                tasks.extend(future.result())

        self.last_errors = errors
        ordered = sort_by_updated(tasks)
        self._cache.store(ordered)
        LOGGER.debug("Получено %s задач, отказавших источников: %s", len(ordered), len(errors))
        return ordered

    # endregion

    # region write
    def _resolve(self, origin: object) -> TaskConnector:
        try:
            key = TaskOrigin(origin)
        except ValueError:
            raise UnsupportedOriginError(origin) from None
        connector = self._connectors.get(key)
        if connector is None:
            raise UnsupportedOriginError(origin)
        return connector

    def create_task(self, origin: Union[TaskOrigin, str], data: CreateTaskInput) -> Task:
        connector = self._resolve(origin)
        try:
            task = connector.create(data)
        except PartialWriteError:
            # провайдер уже изменил данные, снимок устарел
            self.invalidate()
            raise
        self.invalidate()
        LOGGER.info("Создана задача %s", task.id)
        return task

    def update_task(self, task: Union[Task, TaskRef], fields: UpdateTaskInput) -> Task:
        connector = self._resolve(task.origin)
        try:
            updated = connector.update(task.provider_id, fields)
        except PartialWriteError:
            self.invalidate()
            raise
        self.invalidate()
        LOGGER.info("Обновлена задача %s", updated.id)
        return updated

    def delete_task(self, task: Union[Task, TaskRef]) -> None:
        connector = self._resolve(task.origin)
        connector.delete(task.provider_id)
        self.invalidate()
        LOGGER.info("Удалена задача %s", task.id)

    def invalidate(self) -> None:
        self._cache.invalidate()

    # endregion


__all__ = ["TaskAggregationService", "sort_by_updated"]
