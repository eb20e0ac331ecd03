from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_EDIT_WINDOW_HOURS, DEFAULT_MIN_ATTENDANCE_PERCENTAGE
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

logger = logging.getLogger("school_attendance")

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def create_container(settings=None) -> Container:
    """Load settings, optionally prepare the database, and wire services."""

    settings = settings or load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(getattr(settings, "DB_CONFIG"))

    # Helpful startup info to avoid "connected but no tables" confusion.
    logger.info(
        "%s settings=%s db=%s@%s:%s/%s",
        getattr(settings, "SITE_NAME", "school_attendance"),
        settings.__name__,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_users(db_config)
        logger.info("demo seed ready")

    return build_container(
        db_config=db_config,
        min_attendance_percentage=float(
            getattr(settings, "MIN_ATTENDANCE_PERCENTAGE", DEFAULT_MIN_ATTENDANCE_PERCENTAGE)
        ),
        edit_window_hours=int(getattr(settings, "ATTENDANCE_EDIT_HOURS", DEFAULT_EDIT_WINDOW_HOURS)),
    )
