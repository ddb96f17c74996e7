"""Apply schema.sql to the database named by the active settings module."""

from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from payroll_office.database.bootstrap import apply_schema, list_tables
from payroll_office.logging_config import configure_logging

logger = logging.getLogger("payroll_office.scripts.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    logger.info(
        "schema ready on %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
