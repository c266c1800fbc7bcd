from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from fastapi import Request
from dexstats.config import settings
from dexstats.errors import ConfigError
from dexstats.storage.base import Base
import logging

log = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return ":memory:" in url or url in ("sqlite://", "sqlite:///")


class Database:
    """Owns one engine and its session factory.

    Built by the process entry point (API lifespan, Celery task, CLI command)
    and disposed by it; stores get sessions from here, never from a module
    global.
    """

    def __init__(self, url: Optional[str] = None, worker: bool = False):
        self.url = self._checked_url(url or settings.DATABASE_URL)
        self.engine = create_engine(self.url, **self._engine_kwargs(self.url, worker))
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @staticmethod
    def _checked_url(url: Optional[str]) -> str:
        """In-memory SQLite is accepted for tests only; a SQLite file would
        store uint256 amounts as REAL."""
        if not url:
            raise ConfigError("DATABASE_URL is not set")
        if url.startswith("sqlite") and not _is_memory_sqlite(url):
            raise ConfigError(f"Refusing file-backed SQLite store {url}; use Postgres")
        return url

    @staticmethod
    def _engine_kwargs(url: str, worker: bool) -> dict:
        if url.startswith("sqlite"):
            # in-memory only, every session must share the one connection
            return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

        kwargs = {
            "pool_pre_ping": True,
            "connect_args": {
                "connect_timeout": settings.DB_CONNECT_TIMEOUT_S,
                "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
            },
        }
        # workers are short lived, don't keep idle connections around
        if worker:
            kwargs["poolclass"] = NullPool
        else:
            kwargs["pool_size"] = settings.DB_POOL_SIZE
            kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
        return kwargs

    def create_all(self) -> None:
        # make sure every model is registered on Base.metadata
        import dexstats.storage.models  # noqa: F401
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            log.error(f"DB ping failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        log.info("Database engine disposed")


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one session per request from the app's Database."""
    database: Database = request.app.state.database
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
