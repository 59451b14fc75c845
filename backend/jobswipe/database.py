from __future__ import annotations

import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Owns the engine and session factory for the job cache store.

    Constructed once per process, opened at startup and closed at shutdown.
    """

    def __init__(self, url: str, busy_timeout_ms: int = 5000) -> None:
        self.url = url
        self.busy_timeout_ms = busy_timeout_ms
        self.engine = self._create_engine()
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self._opened = False

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def _create_engine(self) -> Engine:
        if not self.is_sqlite:
            return create_engine(self.url, pool_pre_ping=True)

        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(self.url, **kwargs)
        busy_timeout_ms = int(self.busy_timeout_ms)

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode = DELETE")
            cursor.execute(f"PRAGMA busy_timeout = {busy_timeout_ms}")
            cursor.close()

        return engine

    def open(self) -> None:
        if self._opened:
            return
        # Table classes must be registered on Base before create_all.
        from jobswipe import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        self._opened = True
        logger.info("Opened job store", extra={"database_url": self.url})

    def close(self) -> None:
        self.engine.dispose()
        self._opened = False
        logger.info("Closed job store", extra={"database_url": self.url})

    def session(self) -> Session:
        return self._session_factory()


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
