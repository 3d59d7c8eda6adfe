"""HTTP-коннекторы провайдеров задач."""

from .base import TaskConnector
from .notion import NotionClient
from .retry import RetryPolicy, call_with_retry
from .todoist import TodoistClient

__all__ = ["TaskConnector", "NotionClient", "TodoistClient", "RetryPolicy", "call_with_retry"]
