from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.utils.exceptions import ServerError

# Note: We instantiate Base here because a single Base object will hold the Metadata
# Every model module must import it from here, never redeclare it
class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine (and its connection pool) for the credential store.

    One instance is created by the app lifespan and stored on `app.state.database`,
    tests build their own against SQLite. Call `dispose()` to release pooled connections.
    """

    def __init__(self, url: str, pool_size: int = 10, echo: bool = False):
        if url.startswith("sqlite"):
            # SQLite in-memory databases only live as long as their single connection
            engine_args = {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }
        else:
            engine_args = {
                "pool_size": pool_size,
                "max_overflow": 0,
                "pool_pre_ping": True,
            }
        self.engine = create_engine(url, echo=echo, **engine_args)
        self.SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Iterator[Session]:
        new_session = self.SessionFactory()
        try:
            yield new_session
        finally:
            new_session.close()

    def create_all(self) -> None:
        # Import models so they register on Base.metadata
        from src.database import models  # noqa: F401
        Base.metadata.create_all(self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise ServerError("Server misconfigured: missing DATABASE_URL")
    return database


def make_session(request: Request) -> Iterator[Session]:
    """Request-scoped session from the app's Database. Override this dependency in tests."""
    yield from get_database(request).session()
