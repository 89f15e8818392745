"""
Manual contact management: create and edit stored contacts.

Scanned contacts come in through ``scanning``; these are the hand-entered
and hand-corrected ones. Every change is recorded in the activity log.

File: manage.py
Created: 2026-01-15
"""

import logging
from typing import Any, Optional, Sequence

from .database import get_contact, insert_contact, log_activity, update_contact
from .database.contacts import EDITABLE_COLUMNS, DbPath
from .models import StoredContact
from .scanning import clean_phone, clean_phones

log = logging.getLogger(__name__)

PHONE_COLUMNS = ("phone1", "phone2", "phone3")


async def create_contact(
    company_name: str,
    phones: Sequence[str] = (),
    email: Optional[str] = None,
    website: Optional[str] = None,
    address: Optional[str] = None,
    note: Optional[str] = None,
    db_path: DbPath = None,
) -> StoredContact:
    """
    Add a contact by hand.

    Phones are cleaned the same way as scanned ones so duplicate detection
    still matches them. No duplicate check is made.

    Returns:
        The stored contact
    """
    contact = await insert_contact(
        company_name=company_name,
        phones=clean_phones(phones),
        email=email,
        website=website,
        address=address,
        note=note,
        db_path=db_path,
    )
    await log_activity(
        "created",
        contact_id=contact.id,
        description=f"Created contact: {contact.company_name}",
        db_path=db_path,
    )
    log.info(f"Created contact {contact.id}")
    return contact


async def edit_contact(
    contact_id: int,
    db_path: DbPath = None,
    **fields: Any,
) -> Optional[StoredContact]:
    """
    Change any editable field of a stored contact.

    Only the given fields change; pass "" to clear one. Phone columns are
    cleaned before storing.

    Args:
        contact_id: Contact to edit
        db_path: Database file
        **fields: company_name, phone1..phone3, email, website, address,
            note, raw_text and/or sent

    Returns:
        The updated contact, or None if it does not exist

    Raises:
        ValueError: If a field is not editable
    """
    unknown = set(fields) - EDITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    for column in PHONE_COLUMNS:
        if column in fields:
            fields[column] = clean_phone(fields[column])

    if not fields:
        return await get_contact(contact_id, db_path=db_path)

    contact = await update_contact(contact_id, db_path=db_path, **fields)
    if contact is None:
        log.warning(f"Cannot edit missing contact {contact_id}")
        return None

    await log_activity(
        "updated",
        contact_id=contact_id,
        description=f"Updated contact: {contact.company_name}",
        metadata={"fields": sorted(fields)},
        db_path=db_path,
    )
    return contact
