from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from whatsorder.core.config import CATALOG_STORE, DATABASE_URL, IDENTITY_JWT_SECRET, IDENTITY_PROVIDER, IDENTITY_PROVIDER_URL

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"
STARTUP_PREFIX = "[STARTUP]"


def _current_env() -> str:
    return os.getenv("ENVIRONMENT", os.getenv("ENV", "dev")).strip().lower()


def validate_database_environment() -> None:
    if _current_env() in {"prod", "production"} and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def validate_runtime_configuration() -> None:
    if CATALOG_STORE not in {"sql", "memory"}:
        raise RuntimeError(f"Unknown CATALOG_STORE: {CATALOG_STORE}")
    if IDENTITY_PROVIDER == "remote" and not IDENTITY_PROVIDER_URL:
        logger.warning("%s IDENTITY_PROVIDER_URL not set; owner endpoints will reject every token", STARTUP_PREFIX)
    elif IDENTITY_PROVIDER == "jwt" and not IDENTITY_JWT_SECRET:
        logger.warning("%s IDENTITY_JWT_SECRET not set; owner endpoints will reject every token", STARTUP_PREFIX)
    elif IDENTITY_PROVIDER not in {"remote", "jwt"}:
        raise RuntimeError(f"Unknown IDENTITY_PROVIDER: {IDENTITY_PROVIDER}")


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    if _current_env() == "test":
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)
