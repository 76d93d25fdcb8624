"""
Database connection and initialization.
"""

import re
import sqlite3
from pathlib import Path

import aiosqlite

from chronify.config import settings
from chronify.logging import get_logger

logger = get_logger('database')

SCHEMA_PATH = Path(__file__).parent / "init_db.sql"

# SQLite reports unique violations by column, not by constraint name.
_UNIQUE_COLUMNS_RE = re.compile(r"UNIQUE constraint failed: (?P<columns>.+)$")

UNIQUE_CONSTRAINTS = {
    "users.email": "users_email_key",
    "users.username": "users_username_key",
    "timelines.title": "timelines_title_key",
}


def violated_constraint(error: sqlite3.IntegrityError) -> str | None:
    """
    Identify the named unique constraint behind an integrity error.

    :param error: The integrity error raised by the store
    :type error: sqlite3.IntegrityError
    :return: Constraint name such as ``timelines_title_key``, or None
    :rtype: str | None
    """
    match = _UNIQUE_COLUMNS_RE.search(str(error))
    if not match:
        return None
    columns = match.group("columns").strip()
    return UNIQUE_CONSTRAINTS.get(columns)


async def connect(db_path: str | None = None) -> aiosqlite.Connection:
    """
    Open a connection with row access by name and foreign keys enforced.

    :param db_path: Database file, defaults to the configured path
    :type db_path: str | None
    :return: Open connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path or settings.DATABASE_PATH)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA foreign_keys = ON")
    return db


async def init_db(db_path: str | None = None):
    """
    Initialize database with schema.

    :param db_path: Database file, defaults to the configured path
    :type db_path: str | None
    :return: None
    :rtype: None
    """
    path = Path(db_path or settings.DATABASE_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        await db.executescript(SCHEMA_PATH.read_text())
        await db.commit()
        logger.info(f"Database initialized at {path}")
