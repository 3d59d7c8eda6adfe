"""Кэш объединённого списка задач."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from task_aggregator.models import Task


@dataclass(frozen=True)
class TaskSnapshot:
    """Неизменяемый снимок списка задач с моментом получения."""

    tasks: Tuple[Task, ...]
    captured_at: float


class SnapshotCache:
    """Ячейка с одним снимком и ограниченным временем жизни.

    Снимок только заменяется целиком или сбрасывается, поэтому читатель
    всегда видит согласованный список.
    """

    def __init__(self, ttl_seconds: float = 30.0, clock: Optional[Callable[[], float]] = None) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._snapshot: Optional[TaskSnapshot] = None

    def get(self) -> Optional[TaskSnapshot]:
        """Актуальный снимок или ``None``, если его нет или он устарел."""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        if self._clock() - snapshot.captured_at >= self.ttl_seconds:
            return None
        return snapshot

    def store(self, tasks: Sequence[Task]) -> TaskSnapshot:
        snapshot = TaskSnapshot(tasks=tuple(tasks), captured_at=self._clock())
        self._snapshot = snapshot
        return snapshot

    def invalidate(self) -> None:
        self._snapshot = None


__all__ = ["SnapshotCache", "TaskSnapshot"]
