"""Database package."""

from .client import TaskCollection, get_db, init_db

__all__ = [
    "init_db",
    "get_db",
    "TaskCollection",
]
