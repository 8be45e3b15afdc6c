import logging
import time
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from mailing_api.config import Settings, get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class DatabaseNotReadyError(RuntimeError):
    """Raised when the database does not accept connections within the wait window."""


def create_db_engine(settings: Settings) -> Engine:
    """
    Build the SQLAlchemy engine with the configured connection limits.

    DB_MAX_IDLE_CONNS sizes the persistent pool, the remainder up to
    DB_MAX_OPEN_CONNS is allowed as overflow.
    """
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, echo=False, **kwargs)

    pool_size = max(settings.DB_MAX_IDLE_CONNS, 1)
    return create_engine(
        url,
        future=True,
        echo=False,
        pool_size=pool_size,
        max_overflow=max(settings.DB_MAX_OPEN_CONNS - pool_size, 0),
        pool_recycle=settings.DB_CONN_MAX_LIFETIME_SECS,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine(get_settings())


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=get_engine(),
        future=True,
    )


def init_db(engine: Engine | None = None) -> None:
    """
    Import models and create tables if they don't exist.
    Alembic is the real migration tool, but this keeps local dev sane.
    """
    from mailing_api import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def wait_for_database(engine: Engine, wait_seconds: int, poll_interval: float = 1.0) -> None:
    """
    Block until the database answers a trivial query.

    With wait_seconds < 1 a single attempt is made and its error propagates.
    """
    if wait_seconds < 1:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return

    started = time.monotonic()
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return
        except OperationalError as e:
            if time.monotonic() - started > wait_seconds:
                raise DatabaseNotReadyError(f"Database not ready after {wait_seconds}s") from e
            logger.info(f"Database not ready yet, retrying: {e}")
            time.sleep(poll_interval)
