"""Безопасное извлечение полей из сырых ответов провайдеров.

Каждая функция возвращает значение по умолчанию вместо исключения, если
поле отсутствует или имеет неожиданный тип.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple


def as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_text(value: Any) -> Optional[str]:
    """Непустая строка или ``None``."""
    if isinstance(value, str) and value:
        return value
    return None


def as_identifier(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def first_mapping(source: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Первое значение-словарь среди ключей ``keys``."""
    for key in keys:
        value = source.get(key)
        if isinstance(value, dict):
            return value
    return {}


def first_value(source: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if source.get(key) is not None:
            return source[key]
    return None


def join_rich_text(fragments: Any) -> str:
    """Склеивает фрагменты rich text в исходном порядке без разделителя."""
    if not isinstance(fragments, list):
        return ""
    parts = []
    for fragment in fragments:
        fragment = as_mapping(fragment)
        text = fragment.get("plain_text")
        if not isinstance(text, str):
            text = as_mapping(fragment.get("text")).get("content")
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def string_tuple(values: Any) -> Optional[Tuple[str, ...]]:
    """Непустые строки из списка; пустой результат превращается в ``None``."""
    if not isinstance(values, list):
        return None
    result = tuple(item for item in values if isinstance(item, str) and item)
    return result or None


def normalize_token(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip().lower()


# подставляется, если провайдер не вернул время создания; нормализация остаётся детерминированной
EPOCH = "1970-01-01T00:00:00Z"


__all__ = [
    "as_mapping",
    "as_text",
    "as_identifier",
    "first_mapping",
    "first_value",
    "join_rich_text",
    "string_tuple",
    "normalize_token",
    "EPOCH",
]
