"""Create the QR attendance database and tables for the selected APP_ENV.

    python scripts/init_db.py               # apply database/schema.sql
    python scripts/init_db.py --env testing
    python scripts/init_db.py --check       # only list existing tables
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("init_db")

EXPECTED_TABLES = ("identities", "students", "attendance")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--env", help="override APP_ENV (development, testing, production)")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--check", action="store_true", help="do not apply the schema")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv(REPO_ROOT / ".env", override=False)
    if args.env:
        os.environ["APP_ENV"] = args.env

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s %(message)s")
    db_config = dict(settings.DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    if not args.check:
        apply_schema(db_config, schema_path=args.schema)
        logger.info("schema %s applied to %s", args.schema.name, target)

    tables = set(list_tables(db_config))
    missing = [t for t in EXPECTED_TABLES if t not in tables]
    if missing:
        logger.error("%s is missing tables: %s", target, ", ".join(missing))
        return 1

    logger.info("%s ready (tables=%d)", target, len(tables))
    return 0


if __name__ == "__main__":
    sys.exit(main())
