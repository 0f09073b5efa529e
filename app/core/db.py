# app/core/db.py
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


def _enable_sqlite_fks(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is on for every connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine + session factory owned by the application.

    Built once in ``create_app`` and kept on ``app.state.db``; request
    handlers get sessions from it through ``get_db``.
    """

    def __init__(self, url: str, echo: bool = False):
        kwargs = {"echo": echo, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every checkout is a new empty db
                kwargs["poolclass"] = StaticPool

        self.engine: Engine = create_engine(url, **kwargs)
        if self.engine.url.get_backend_name() == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_fks)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @property
    def backend(self) -> str:
        return self.engine.url.get_backend_name()

    def create_all(self) -> None:
        # import models so they register on Base.metadata
        from app.models import comment, invite, like, post, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("tables ready: %s", sorted(Base.metadata.tables.keys()))

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("select 1"))

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
