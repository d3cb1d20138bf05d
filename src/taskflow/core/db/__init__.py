"""Database utilities - engine and session handle."""

from src.taskflow.core.db.engine import Database

__all__ = ["Database"]
