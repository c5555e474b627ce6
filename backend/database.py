# backend/database.py
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from services.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()


def normalize_url(url: Optional[str]) -> Optional[str]:
    # Hosted Postgres hands out postgres://, SQLAlchemy requires postgresql://
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url or None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """
    Owns the engine and the session factory.

    Built once by the application entry point and handed to every service.
    A store created without a URL is "unavailable": services degrade reads to
    empty results and refuse writes.
    """

    def __init__(self, database_url: Optional[str]):
        self.url = normalize_url(database_url)
        self.engine: Optional[Engine] = None
        self._session_factory = None

        if not self.url:
            logger.warning("DATABASE_URL is not set, store is unavailable")
            return

        kwargs = {}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live as long as their single connection
            if ":memory:" in self.url or self.url == "sqlite://":
                kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **kwargs)
        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    @property
    def available(self) -> bool:
        return self._session_factory is not None

    def _require(self):
        if not self.available:
            raise StoreUnavailableError("Database not available")
        return self._session_factory

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read session. Nothing is committed."""
        db = self._require()()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Write session: commits on success, rolls back everything on error."""
        db = self._require()()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def create_all(self) -> None:
        if not self.available:
            return
        # Register every table on Base.metadata before creating
        import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def get_store(request: Request) -> Store:
    return request.app.state.store
