"""Повтор запросов с экспоненциальной задержкой.

Повторяются только временные ошибки провайдера: превышение лимита (429) и
ошибки сервера (5xx). Остальные ошибки пробрасываются сразу.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from task_aggregator.errors import ProviderAPIError

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Параметры повторов: задержка ``base_delay * 2**n`` перед повтором n."""

    base_delay: float = 0.5
    max_retries: int = 5

    @property
    def max_attempts(self) -> int:
        return max(self.max_retries, 0) + 1

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2 ** attempt)


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    *,
    label: str = "request",
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """Вызывает ``func`` и повторяет его при временных ошибках.

    После исчерпания попыток пробрасывается последняя полученная ошибка.
    """
    sleep = sleep or time.sleep
    last_error: Optional[ProviderAPIError] = None
    for attempt in range(policy.max_attempts):
        try:
            return func()
        except ProviderAPIError as exc:
            last_error = exc
            if not exc.retryable or attempt >= policy.max_retries:
                raise
            delay = policy.delay_for(attempt)
            LOGGER.warning(
                "[%s] %s: ошибка %s, повтор через %.2f с (попытка %s/%s)",
                exc.provider,
                label,
                exc.status_code,
                delay,
                attempt + 1,
                policy.max_retries,
            )
            sleep(delay)
    raise last_error or ProviderAPIError(f"{label}: попытки исчерпаны")


__all__ = ["RetryPolicy", "call_with_retry"]
