"""Persistence layer backed by SQLAlchemy and SQLite."""

from dinnerboard.db.repository import Database

__all__ = ["Database"]
