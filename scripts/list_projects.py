"""Утилита для получения проектов Todoist и свойств базы Notion."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, Tuple

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from task_aggregator.clients import NotionClient, TodoistClient
from task_aggregator.config import AppConfig


def _format_table(title: str, header: Tuple[str, str], rows: Iterable[Tuple[str, str]]) -> str:
    rows = list(rows)
    if not rows:
        return f"{title}: нет данных"
    left_width = max(len(header[0]), *(len(r[0]) for r in rows))
    right_width = max(len(header[1]), *(len(r[1]) for r in rows))
    head = (
        f"{title}:\n"
        f"  {header[0].ljust(left_width)}  |  {header[1]}\n"
        f"  {'-' * left_width}--+-{'-' * right_width}"
    )
    body = "\n".join(f"  {left.ljust(left_width)}  |  {right}" for left, right in rows)
    return f"{head}\n{body}"


def collect_todoist_projects(client: TodoistClient) -> list[Tuple[str, str]]:
    return sorted(client.project_names().items(), key=lambda item: item[1].lower())


def collect_notion_properties(client: NotionClient) -> list[Tuple[str, str]]:
    return sorted(client.database_properties().items())


def main() -> None:
    parser = argparse.ArgumentParser(description="Выводит проекты Todoist и свойства базы Notion")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Путь к YAML конфигурации",
    )
    parser.add_argument(
        "--source",
        choices=["notion", "todoist", "both"],
        default="both",
        help="Для какого провайдера вывести данные",
    )
    args = parser.parse_args()

    config = AppConfig.load(args.config) if args.config.exists() else AppConfig.from_env()

    outputs: list[str] = []
    if args.source in ("notion", "both") and config.notion is not None:
        properties = collect_notion_properties(NotionClient(config.notion))
        outputs.append(_format_table("Notion database properties", ("Name", "Type"), properties))

    if args.source in ("todoist", "both") and config.todoist is not None:
        projects = collect_todoist_projects(TodoistClient(config.todoist))
        outputs.append(_format_table("Todoist projects", ("ID", "Name"), projects))

    print("\n\n".join(outputs) or "Провайдеры не настроены")


if __name__ == "__main__":
    main()
