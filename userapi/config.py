"""Runtime settings for userapi.

Values are read from the environment (a local `.env` file is loaded first).
The store location is either a full `DATABASE_URL` or composed from the
individual `DB_*` parts; with neither present a local SQLite file is used.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./userapi.db"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


class Settings:
    DATABASE_URL: str
    TRUST_SERVER_CERTIFICATE: bool
    DB_POOL_SIZE: int
    DB_MAX_OVERFLOW: int
    DB_POOL_TIMEOUT_SEC: int
    DEBUG: bool
    LOG_LEVEL: str
    ALEMBIC_INI: str

    def __init__(self):
        self.DATABASE_URL = self._resolve_database_url()
        self.TRUST_SERVER_CERTIFICATE = _env_bool("DB_TRUST_SERVER_CERTIFICATE", "true")
        self.DB_POOL_SIZE = _env_int("DB_POOL_SIZE", "5")
        self.DB_MAX_OVERFLOW = _env_int("DB_MAX_OVERFLOW", "5")
        self.DB_POOL_TIMEOUT_SEC = _env_int("DB_POOL_TIMEOUT_SEC", "30")
        self.DEBUG = _env_bool("DEBUG", "False")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALEMBIC_INI = os.getenv("ALEMBIC_INI", "alembic.ini")

    @staticmethod
    def _resolve_database_url() -> str:
        explicit = os.getenv("DATABASE_URL")
        if explicit:
            return explicit

        host = os.getenv("DB_HOST")
        if not host:
            return DEFAULT_DATABASE_URL

        port: Optional[int] = _env_int("DB_PORT", "0") or None
        url = URL.create(
            drivername=os.getenv("DB_DRIVER", "postgresql+psycopg"),
            username=os.getenv("DB_USER") or None,
            password=os.getenv("DB_PASSWORD") or None,
            host=host,
            port=port,
            database=os.getenv("DB_NAME") or None,
        )
        return url.render_as_string(hide_password=False)


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
