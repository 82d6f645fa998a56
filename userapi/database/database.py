"""Database engine and session management for userapi.

This module supports both:
- Local SQLite (default for dev and tests)
- PostgreSQL (or any SQLAlchemy-supported store) via the configured URL

Nothing here runs at import time; callers build an engine from settings and
hand the resulting session factory to the repository.
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from userapi.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Drivers that accept libpq connection keywords such as sslmode.
LIBPQ_DRIVERS = ("psycopg", "psycopg2")

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def _sslmode(trust_server_certificate: bool) -> str:
    # "prefer" encrypts when the server offers TLS but skips certificate checks.
    return "prefer" if trust_server_certificate else "verify-full"


def get_engine_kwargs(database_url: str, settings: Optional[Settings] = None) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    settings = settings or get_settings()
    engine_kwargs: dict = {
        "echo": settings.DEBUG,
        # Drops stale pooled connections before handing them out.
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # Route handlers run in a threadpool; connections cross threads.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
    engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
    engine_kwargs["pool_timeout"] = settings.DB_POOL_TIMEOUT_SEC
    url = make_url(database_url)
    if url.get_driver_name() in LIBPQ_DRIVERS:
        engine_kwargs["connect_args"] = {"sslmode": _sslmode(settings.TRUST_SERVER_CERTIFICATE)}
    else:
        logger.warning(f"DB_TRUST_SERVER_CERTIFICATE is ignored for driver {url.drivername}")
    return engine_kwargs


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign key enforcement on each new SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, settings: Optional[Settings] = None) -> Engine:
    engine = create_engine(database_url, **get_engine_kwargs(database_url, settings))
    if _is_sqlite_url(database_url):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    logger.info(f"Configured database engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
