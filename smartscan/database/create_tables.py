"""
File: database/create_tables.py
Created: 2025-12-23
Last Modified: 2026-01-09
"""

import logging
from pathlib import Path
from typing import Optional, Union

import aiosqlite

from .common import resolve_db_path

log = logging.getLogger(__name__)


async def init_local_database(db_path: Optional[Union[str, Path]] = None) -> None:
    """Initialize the local SQLite database with required tables."""
    path = resolve_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as conn:
        # Contacts table
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS contacts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                company_name TEXT NOT NULL DEFAULT '',
                phone1 TEXT,
                phone2 TEXT,
                phone3 TEXT,
                email TEXT,
                website TEXT,
                address TEXT,
                note TEXT,
                raw_text TEXT,
                sent INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT
            )
        """)

        # Phone lookups for duplicate detection
        for column in ("phone1", "phone2", "phone3"):
            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_contacts_{column} ON contacts({column})"
            )

        # Activity log
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS activities (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                action TEXT NOT NULL,
                contact_id INTEGER,
                description TEXT NOT NULL DEFAULT '',
                metadata TEXT,  -- JSON object
                created_at TEXT NOT NULL
            )
        """)

        await conn.commit()

    log.info(f"Local database ready at {path}")
