"""Агрегатор задач Notion и Todoist."""

__version__ = "0.1.0"
