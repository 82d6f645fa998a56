"""Database migration runner.

Goal:
- Apply the versioned Alembic migrations (`upgrade head`) so the service can
  assume the `users` table exists.
- If the table was created outside Alembic (no version history), detect that
  safely and `stamp head` instead of failing.

Run once before starting the service: `python -m userapi.database.migrate_runner`.
"""

from __future__ import annotations

import logging
import sys
from typing import Dict, List, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from userapi.config import Settings, configure_logging, get_settings
from userapi.database.database import build_engine

logger = logging.getLogger(__name__)

# Tables and columns the runtime depends on.
REQUIRED_SCHEMA: Dict[str, List[str]] = {
    "users": ["id", "name", "email"],
}


def alembic_config(settings: Settings, ini_path: Optional[str] = None) -> Config:
    cfg = Config(ini_path or settings.ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL.replace("%", "%%"))
    return cfg


def missing_requirements(engine) -> List[str]:
    inspector = inspect(engine)
    missing: List[str] = []
    for table, columns in REQUIRED_SCHEMA.items():
        if not inspector.has_table(table):
            missing.append(f"missing table: {table}")
            continue
        present = {col["name"] for col in inspector.get_columns(table)}
        for column in columns:
            if column not in present:
                missing.append(f"missing column: {table}.{column}")
    return missing


def upgrade(settings: Settings, ini_path: Optional[str] = None) -> None:
    cfg = alembic_config(settings, ini_path)
    try:
        command.upgrade(cfg, "head")
        logger.info("Database schema is at head")
        return
    except Exception as e:
        msg = str(e).lower()
        if "already exists" not in msg and "duplicate" not in msg:
            raise

        # Only stamp head if we can verify the expected schema is present.
        engine = build_engine(settings.DATABASE_URL, settings)
        try:
            missing = missing_requirements(engine)
        finally:
            engine.dispose()
        if missing:
            raise RuntimeError(
                "Alembic upgrade failed and schema is not at expected baseline; refusing to stamp head. "
                + "; ".join(missing)
            ) from e

        logger.warning("Schema already present without Alembic history; stamping head")
        command.stamp(cfg, "head")


def main() -> int:
    settings = get_settings()
    configure_logging(settings)
    upgrade(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
