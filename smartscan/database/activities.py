"""
Activity log operations.

File: database/activities.py
Created: 2026-01-09
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiosqlite

from ..models import ACTIVITY_ACTIONS, Activity
from .common import resolve_db_path
from .contacts import DbPath

log = logging.getLogger(__name__)

ACTIVITY_COLUMNS = ("id", "action", "contact_id", "description", "metadata", "created_at")


async def log_activity(
    action: str,
    contact_id: Optional[int] = None,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
    db_path: DbPath = None,
) -> None:
    """
    Record an action in the activity log.

    A failure to write the log is logged and swallowed; it never breaks the
    action being recorded.

    Args:
        action: One of ACTIVITY_ACTIONS
        contact_id: Contact the action applied to
        description: Human-readable summary
        metadata: Extra details, stored as JSON
    """
    if action not in ACTIVITY_ACTIONS:
        raise ValueError(f"Unknown activity action {action!r}")

    try:
        async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
            await conn.execute(
                """
                INSERT INTO activities (action, contact_id, description, metadata, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    action,
                    contact_id,
                    description,
                    json.dumps(metadata) if metadata else None,
                    datetime.now().isoformat(),
                ),
            )
            await conn.commit()
    except aiosqlite.Error as e:
        log.error(f"Error logging activity {action}: {e}")


async def get_recent_activities(limit: int = 20, db_path: DbPath = None) -> List[Activity]:
    """Most recent activities first."""
    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        async with conn.execute(
            f"""
            SELECT {', '.join(ACTIVITY_COLUMNS)}
            FROM activities
            ORDER BY created_at DESC, id DESC
            LIMIT ?
            """,
            (limit,),
        ) as cursor:
            rows = await cursor.fetchall()
    return [Activity.from_db_dict(dict(zip(ACTIVITY_COLUMNS, row))) for row in rows]
