"""Services package."""

from .tasks import TaskStore

__all__ = ["TaskStore"]
