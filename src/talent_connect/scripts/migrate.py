# src/talent_connect/scripts/migrate.py
"""Bring the configured database up to date."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from talent_connect.core.logging import configure_logging
from talent_connect.core.settings import settings
from talent_connect.db.session import create_tables

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def alembic_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at the project's migrations folder."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Inject sync URL for Alembic (psycopg driver)
    cfg.set_main_option("sqlalchemy.url", url or settings.database_url_sync)
    return cfg


def run_upgrade_head(url: str | None = None) -> None:
    command.upgrade(alembic_config(url), "head")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or migrate the Talent Connect database")
    parser.add_argument(
        "--create-all",
        action="store_true",
        help="Create tables straight from the models instead of running migrations (development only).",
    )
    parser.add_argument("--url", default=None, help="Override database URL")
    args = parser.parse_args()

    configure_logging()
    if args.create_all:
        create_tables()
        logger.info("Created tables from model metadata")
    else:
        run_upgrade_head(args.url)
        logger.info("Database upgraded to head")


if __name__ == "__main__":
    main()
