"""
vCard 3.0 export.

File: vcf/serializer.py
Created: 2026-01-10
Last Modified: 2026-01-14
"""

import logging
from typing import Any, Iterable, List, Mapping, Union

from ..models import VcfInputContact
from .address import decompose_address

log = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"

# Phone slot order: first number is the mobile, then work, then home
PHONE_TYPES = ["CELL", "WORK,VOICE", "HOME,VOICE"]


def escape_text(value: str) -> str:
    """Escape a property value per RFC 6350 section 3.4."""
    return (
        value.replace("\\", "\\\\")
        .replace("\n", "\\n")
        .replace(",", "\\,")
        .replace(";", "\\;")
    )


def _address_line(address: str) -> str:
    """
    Build the ADR line, or "" if the address has no usable component.

    The street slot gets the whole cleaned address so that readers which
    only show the street still show everything.
    """
    parts = decompose_address(address)
    if parts.is_empty():
        return ""

    fields = [
        "",  # PO box
        "",  # extended address
        parts.combined,
        parts.city,
        parts.state,
        parts.postal_code,
        parts.country,
    ]
    return "ADR;CHARSET=UTF-8;TYPE=WORK:" + ";".join(escape_text(f) for f in fields)


def format_contact(contact: VcfInputContact) -> str:
    """Format one contact as a vCard record (no trailing newline)."""
    name = contact.name.strip() or UNKNOWN_NAME
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN;CHARSET=UTF-8:{escape_text(name)}",
        f"N;CHARSET=UTF-8:;{escape_text(name)};;;",
    ]

    if contact.company:
        lines.append(f"ORG;CHARSET=UTF-8:{escape_text(contact.company)}")

    for phone_type, phone in zip(PHONE_TYPES, contact.phones):
        lines.append(f"TEL;TYPE={phone_type}:{escape_text(phone)}")

    if contact.email:
        lines.append(f"EMAIL;CHARSET=UTF-8;TYPE=INTERNET:{escape_text(contact.email)}")

    note = contact.note
    if contact.address.strip():
        try:
            adr = _address_line(contact.address)
        except Exception as e:
            log.warning(f"Failed to set address in vCard: {e}")
            adr = ""
            note = f"{note}\n\nAddress: {contact.address}" if note else f"Address: {contact.address}"
        if adr:
            lines.append(adr)

    if note:
        lines.append(f"NOTE;CHARSET=UTF-8:{escape_text(note)}")

    lines.append("END:VCARD")
    return "\n".join(lines)


def serialize(contacts: Iterable[Union[VcfInputContact, Mapping[str, Any]]]) -> str:
    """
    Serialize contacts to a single vCard text blob.

    Args:
        contacts: VcfInputContact values (plain mappings are validated into one)

    Returns:
        One record per contact, in input order, joined with newlines.
        "" for no contacts.
    """
    records: List[str] = []
    for contact in contacts:
        if not isinstance(contact, VcfInputContact):
            contact = VcfInputContact.model_validate(contact)
        records.append(format_contact(contact))
    return "\n".join(records)
