"""
File: database/__init__.py
Created: 2025-12-23
Last Modified: 2026-01-09
"""

from .create_tables import init_local_database
from .common import DATA_DIR, LOCAL_DB_PATH
from .contacts import (
    EXPORT_FILTERS,
    insert_contact,
    get_contact,
    list_contacts,
    update_contact,
    delete_contact,
    find_duplicate_contact,
    mark_contacts_sent,
    get_contact_stats,
)
from .activities import (
    log_activity,
    get_recent_activities,
)

__all__ = [
    "init_local_database",
    "DATA_DIR",
    "LOCAL_DB_PATH",
    "EXPORT_FILTERS",
    "insert_contact",
    "get_contact",
    "list_contacts",
    "update_contact",
    "delete_contact",
    "find_duplicate_contact",
    "mark_contacts_sent",
    "get_contact_stats",
    "log_activity",
    "get_recent_activities",
]
