"""
Card scanning workflow: extract, clean, check for duplicates, save.

File: scanning.py
Created: 2026-01-09
Last Modified: 2026-01-14
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .database import find_duplicate_contact, insert_contact, log_activity
from .database.contacts import DbPath
from .extraction import ContactExtractor
from .models import MAX_PHONES, ContactRecord, ScanResult

log = logging.getLogger(__name__)

COUNTRY_PREFIX_RE = re.compile(r"^\+91[\s-]?", re.IGNORECASE)
PHONE_SEPARATOR_RE = re.compile(r"[-\s]")

BACK_SIDE_MARKER = "--- Back Side ---"


def clean_phone(phone: Optional[str]) -> str:
    """
    Normalize a phone number for storage and duplicate matching.

    Strips a leading +91 (with an optional space or dash after it) and all
    dashes and spaces. Other characters are kept.

    Examples:
        >>> clean_phone("+91 98295-50499")
        '9829550499'
        >>> clean_phone(" 0141 222 3333 ")
        '01412223333'
    """
    if not phone:
        return ""
    cleaned = COUNTRY_PREFIX_RE.sub("", phone.strip())
    return PHONE_SEPARATOR_RE.sub("", cleaned)


def clean_phones(phones: Iterable[Optional[str]]) -> List[str]:
    """Clean, drop empties, dedupe (first wins) and keep the first 3."""
    unique: List[str] = []
    for phone in phones:
        cleaned = clean_phone(phone)
        if cleaned and cleaned not in unique:
            unique.append(cleaned)
    return unique[:MAX_PHONES]


def _candidate(record: ContactRecord, phones: List[str]) -> Dict[str, Any]:
    """The values that will be stored for this scan."""
    return {
        "company_name": record.company,
        "phones": phones,
        "email": record.email or None,
        "website": record.website or None,
        "address": record.address or None,
        "raw_text": record.raw_text or None,
    }


async def _save(
    record: ContactRecord,
    description: str,
    force: bool,
    db_path: DbPath,
) -> ScanResult:
    phones = clean_phones(record.phones)
    candidate = _candidate(record, phones)

    if not force:
        existing = await find_duplicate_contact(phones, db_path=db_path)
        if existing is not None:
            log.info(f"Duplicate of contact {existing.id} ({existing.company_name!r})")
            return ScanResult(
                status="duplicate",
                existing=existing,
                candidate=candidate,
                message=f"A contact with the same phone number already exists: {existing.company_name or existing.id}",
            )

    contact = await insert_contact(
        company_name=record.company,
        phones=phones,
        email=record.email,
        website=record.website,
        address=record.address,
        raw_text=record.raw_text,
        db_path=db_path,
    )
    await log_activity(
        "uploaded",
        contact_id=contact.id,
        description=f"{description}: {contact.company_name}",
        db_path=db_path,
    )
    return ScanResult(
        status="saved",
        contact=contact,
        candidate=candidate,
        message=f"Saved contact {contact.id}",
    )


async def scan_card(
    extractor: ContactExtractor,
    image_path: Union[str, Path],
    db_path: DbPath = None,
    force: bool = False,
) -> ScanResult:
    """
    Scan one side of a card and store it.

    Args:
        extractor: Configured ContactExtractor
        image_path: Card image; the caller owns (and deletes) the file
        db_path: Database file
        force: Save even if a contact with the same phone exists

    Returns:
        ScanResult with status "saved", "duplicate" or "failed"

    Raises:
        ExtractionAbortedError: If Gemini rejected the credentials
    """
    record = await extractor.extract(image_path)
    if record.is_failure:
        log.error(f"Extraction failed for {image_path}")
        return ScanResult(status="failed", message=record.raw_text)

    return await _save(record, "Uploaded visiting card", force, db_path)


def merge_sides(front: ContactRecord, back: ContactRecord) -> ContactRecord:
    """
    Combine both sides of a card. The front wins for single-valued fields;
    phones from both sides are kept, front first.
    """
    raw_text = f"{front.raw_text}\n\n{BACK_SIDE_MARKER}\n{back.raw_text}".strip()
    return ContactRecord(
        company=front.company or back.company,
        person_name=front.person_name or back.person_name,
        phones=clean_phones([*front.phones, *back.phones]),
        email=front.email or back.email,
        website=front.website or back.website,
        address=front.address or back.address,
        raw_text=raw_text,
    )


async def scan_card_both_sides(
    extractor: ContactExtractor,
    front_path: Union[str, Path],
    back_path: Union[str, Path],
    db_path: DbPath = None,
    force: bool = False,
) -> ScanResult:
    """
    Scan the front and back of one card and store them as a single contact.

    The scan fails only if extraction failed on both sides; a failed side
    contributes nothing to the merged contact.
    """
    front = await extractor.extract(front_path)
    back = await extractor.extract(back_path)

    if front.is_failure and back.is_failure:
        log.error(f"Extraction failed for both {front_path} and {back_path}")
        return ScanResult(status="failed", message=front.raw_text)

    if front.is_failure:
        front = ContactRecord()
    if back.is_failure:
        back = ContactRecord()

    return await _save(
        merge_sides(front, back), "Uploaded visiting card (both sides)", force, db_path
    )
