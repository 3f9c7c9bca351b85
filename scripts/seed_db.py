"""Create the first registrar account on an empty database.

Usage: REGISTRAR_EMAIL=... REGISTRAR_PASSWORD=... python scripts/seed_db.py
"""
from __future__ import annotations

import importlib
import logging
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "lecture_portal"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from lecture_portal.database.bootstrap import ensure_registrar
from lecture_portal.database.connection import DBConfig, DatabaseConnection
from lecture_portal.database.store import MySQLRemoteStore

logger = logging.getLogger("seed_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    store = MySQLRemoteStore(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)))
    profile = ensure_registrar(
        store,
        name=os.getenv("REGISTRAR_NAME", "Registrar"),
        email=os.getenv("REGISTRAR_EMAIL", "registrar@university.edu"),
        password=os.getenv("REGISTRAR_PASSWORD") or None,
    )
    logger.info("Registrar ready: %s <%s>", profile["name"], profile["email"])


if __name__ == "__main__":
    main()
