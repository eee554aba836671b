"""Database engine and session management."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from dinnerboard.config import Settings
from dinnerboard.db.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Explicitly managed SQLite handle shared by the repositories.

    The handle is opened once at process start and closed at shutdown. ``write_lock``
    serializes multi-statement writes that must not interleave within the process;
    SQLite's own locking covers writers in other processes.
    """

    def __init__(self, database_path: Path):
        self.database_path = Path(database_path)
        self.write_lock = threading.RLock()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_path)

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        """Create the engine and schema; calling open twice is a no-op."""

        if self._engine is not None:
            return self

        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{self.database_path}",
            future=True,
            echo=False,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        try:
            Base.metadata.create_all(engine)
        except OperationalError as exc:
            if "already exists" in str(exc).lower():
                logger.debug("Database schema already initialized: %s", exc)
            else:
                engine.dispose()
                raise
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )
        logger.debug("Opened database at %s", self.database_path)
        return self

    def close(self) -> None:
        """Dispose of pooled connections."""

        if self._engine is not None:
            self._engine.dispose()
            logger.debug("Closed database at %s", self.database_path)
        self._engine = None
        self._session_factory = None

    def session(self) -> Session:
        """Return a new SQLAlchemy session."""

        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager yielding a session with automatic commit/rollback."""

        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = ["Database"]
