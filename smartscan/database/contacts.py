"""
Contact storage operations.

Empty strings from extraction are stored as NULL. Phones are stored already
cleaned (see ``smartscan.scanning.clean_phone``) so duplicate detection is a
plain equality match.

File: database/contacts.py
Created: 2026-01-09
Last Modified: 2026-01-14
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import aiosqlite

from ..models import MAX_PHONES, StoredContact
from .common import resolve_db_path

log = logging.getLogger(__name__)

CONTACT_COLUMNS = (
    "id", "company_name", "phone1", "phone2", "phone3", "email", "website",
    "address", "note", "raw_text", "sent", "created_at", "updated_at",
)
_SELECT = f"SELECT {', '.join(CONTACT_COLUMNS)} FROM contacts"

# Columns update_contact may change
EDITABLE_COLUMNS = {
    "company_name", "phone1", "phone2", "phone3", "email", "website",
    "address", "note", "raw_text", "sent",
}

EXPORT_FILTERS = ("all", "unsent", "sent")

DbPath = Optional[Union[str, Path]]


def _row_to_contact(row: Sequence[Any]) -> StoredContact:
    return StoredContact.from_db_dict(dict(zip(CONTACT_COLUMNS, row)))


def _phone_slots(phones: Sequence[str]) -> List[Optional[str]]:
    slots: List[Optional[str]] = [p or None for p in list(phones)[:MAX_PHONES]]
    return slots + [None] * (MAX_PHONES - len(slots))


async def insert_contact(
    company_name: str,
    phones: Sequence[str] = (),
    email: Optional[str] = None,
    website: Optional[str] = None,
    address: Optional[str] = None,
    raw_text: Optional[str] = None,
    note: Optional[str] = None,
    db_path: DbPath = None,
) -> StoredContact:
    """
    Insert a new contact.

    Args:
        company_name: Company name (may be empty)
        phones: Up to 3 cleaned phone numbers
        email, website, address, raw_text, note: Optional fields ("" stored as NULL)
        db_path: Database file (defaults to the local database)

    Returns:
        The stored contact
    """
    phone1, phone2, phone3 = _phone_slots(phones)
    now = datetime.now().isoformat()

    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        cursor = await conn.execute(
            """
            INSERT INTO contacts
            (company_name, phone1, phone2, phone3, email, website, address,
             note, raw_text, sent, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (
                company_name or "",
                phone1,
                phone2,
                phone3,
                email or None,
                website or None,
                address or None,
                note or None,
                raw_text or None,
                now,
            ),
        )
        await conn.commit()
        contact_id = cursor.lastrowid

    contact = await get_contact(contact_id, db_path=db_path)
    if contact is None:
        raise RuntimeError(f"Contact {contact_id} vanished after insert")
    return contact


async def get_contact(contact_id: int, db_path: DbPath = None) -> Optional[StoredContact]:
    """Get a contact by id, or None."""
    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        async with conn.execute(f"{_SELECT} WHERE id = ?", (contact_id,)) as cursor:
            row = await cursor.fetchone()
    return _row_to_contact(row) if row else None


async def list_contacts(
    filter: str = "all",
    search: Optional[str] = None,
    db_path: DbPath = None,
) -> List[StoredContact]:
    """
    List contacts, newest first.

    Args:
        filter: "all", "unsent" or "sent"
        search: Case-insensitive substring matched against company, phones and email
        db_path: Database file

    Raises:
        ValueError: For an unknown filter
    """
    if filter not in EXPORT_FILTERS:
        raise ValueError(f"Unknown filter {filter!r}; expected one of {EXPORT_FILTERS}")

    clauses: List[str] = []
    params: List[Any] = []
    if filter == "unsent":
        clauses.append("sent = 0")
    elif filter == "sent":
        clauses.append("sent = 1")

    if search:
        like = f"%{search.strip()}%"
        clauses.append(
            "(company_name LIKE ? OR phone1 LIKE ? OR phone2 LIKE ? "
            "OR phone3 LIKE ? OR email LIKE ?)"
        )
        params.extend([like] * 5)

    query = _SELECT
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY created_at DESC, id DESC"

    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        async with conn.execute(query, params) as cursor:
            rows = await cursor.fetchall()
    return [_row_to_contact(row) for row in rows]


async def update_contact(
    contact_id: int,
    db_path: DbPath = None,
    **fields: Any,
) -> Optional[StoredContact]:
    """
    Update editable fields of a contact.

    Returns:
        The updated contact, or None if it does not exist

    Raises:
        ValueError: If a field is not editable
    """
    unknown = set(fields) - EDITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
    if not fields:
        return await get_contact(contact_id, db_path=db_path)

    values: Dict[str, Any] = {}
    for key, value in fields.items():
        if key == "sent":
            values[key] = 1 if value else 0
        elif key == "company_name":
            values[key] = value or ""
        else:
            values[key] = value or None
    values["updated_at"] = datetime.now().isoformat()

    assignments = ", ".join(f"{key} = ?" for key in values)
    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        cursor = await conn.execute(
            f"UPDATE contacts SET {assignments} WHERE id = ?",
            [*values.values(), contact_id],
        )
        await conn.commit()
        if cursor.rowcount == 0:
            return None

    return await get_contact(contact_id, db_path=db_path)


async def delete_contact(contact_id: int, db_path: DbPath = None) -> bool:
    """Delete a contact. Returns False if it did not exist."""
    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        cursor = await conn.execute("DELETE FROM contacts WHERE id = ?", (contact_id,))
        await conn.commit()
        return cursor.rowcount > 0


async def find_duplicate_contact(
    phones: Sequence[str],
    db_path: DbPath = None,
) -> Optional[StoredContact]:
    """
    Find a stored contact sharing any phone number.

    Any of the (up to 3) incoming phones matching any of phone1..phone3 is a
    duplicate.

    Args:
        phones: Cleaned phone numbers; only the first 3 non-empty are used

    Returns:
        The oldest matching contact, or None
    """
    wanted = [p for p in phones if p][:MAX_PHONES]
    if not wanted:
        return None

    placeholders = ",".join("?" * len(wanted))
    query = (
        f"{_SELECT} WHERE phone1 IN ({placeholders}) "
        f"OR phone2 IN ({placeholders}) OR phone3 IN ({placeholders}) "
        "ORDER BY id LIMIT 1"
    )

    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        async with conn.execute(query, wanted * 3) as cursor:
            row = await cursor.fetchone()
    return _row_to_contact(row) if row else None


async def mark_contacts_sent(
    contact_ids: Optional[Sequence[int]] = None,
    db_path: DbPath = None,
) -> int:
    """
    Mark contacts as sent.

    Args:
        contact_ids: Contacts to mark; None marks every unsent contact

    Returns:
        Number of contacts changed
    """
    now = datetime.now().isoformat()
    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        if contact_ids is None:
            cursor = await conn.execute(
                "UPDATE contacts SET sent = 1, updated_at = ? WHERE sent = 0", (now,)
            )
        else:
            ids = list(contact_ids)
            if not ids:
                return 0
            placeholders = ",".join("?" * len(ids))
            cursor = await conn.execute(
                f"UPDATE contacts SET sent = 1, updated_at = ? "
                f"WHERE sent = 0 AND id IN ({placeholders})",
                [now, *ids],
            )
        await conn.commit()
        return cursor.rowcount


async def get_contact_stats(db_path: DbPath = None) -> Dict[str, int]:
    """
    Get dashboard counts.

    Returns:
        Dict with total, sent, unsent and today (scanned since local midnight)
    """
    stats = {"total": 0, "sent": 0, "unsent": 0, "today": 0}
    midnight = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)

    async with aiosqlite.connect(resolve_db_path(db_path)) as conn:
        async with conn.execute(
            """
            SELECT COUNT(*),
                   COALESCE(SUM(sent), 0),
                   COALESCE(SUM(created_at >= ?), 0)
            FROM contacts
            """,
            (midnight.isoformat(),),
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                stats["total"] = row[0]
                stats["sent"] = row[1]
                stats["today"] = row[2]

    stats["unsent"] = stats["total"] - stats["sent"]
    return stats
