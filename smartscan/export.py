"""
Export stored contacts as a .vcf file.

File: export.py
Created: 2026-01-10
Last Modified: 2026-01-13
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .database import EXPORT_FILTERS, list_contacts, log_activity, mark_contacts_sent
from .database.contacts import DbPath
from .vcf import serialize

log = logging.getLogger(__name__)


class ExportError(ValueError):
    """Nothing to export for the requested filter."""


@dataclass
class ExportResult:
    vcf: str
    count: int
    filter: str


async def export_contacts(filter: str = "all", db_path: DbPath = None) -> ExportResult:
    """
    Serialize stored contacts and mark them as sent.

    Exporting "all" or "unsent" marks every unsent contact as sent.

    Args:
        filter: "all", "unsent" or "sent"
        db_path: Database file

    Returns:
        ExportResult with the vCard text and the number of contacts

    Raises:
        ExportError: If "unsent" or "sent" matches no contacts
        ValueError: For an unknown filter
    """
    if filter not in EXPORT_FILTERS:
        raise ValueError(f"Unknown filter {filter!r}; expected one of {EXPORT_FILTERS}")

    contacts = await list_contacts(filter, db_path=db_path)

    if filter == "unsent" and not contacts:
        raise ExportError("All contacts are already sent")
    if filter == "sent" and not contacts:
        raise ExportError("No sent contacts found")

    vcf = serialize(contact.to_vcf_input() for contact in contacts)

    if filter in ("all", "unsent"):
        marked = await mark_contacts_sent(db_path=db_path)
        log.info(f"Marked {marked} contact(s) as sent")

    await log_activity(
        "exported",
        description=f"Exported {len(contacts)} contact(s) as VCF (filter: {filter})",
        metadata={"count": len(contacts), "filter": filter},
        db_path=db_path,
    )
    return ExportResult(vcf=vcf, count=len(contacts), filter=filter)


def write_export(
    result: ExportResult,
    out_dir: Union[str, Path] = ".",
    now: Optional[datetime] = None,
) -> Path:
    """
    Write an export to ``contacts_<timestamp>.vcf`` in out_dir.

    Returns:
        Path of the written file
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = int((now or datetime.now()).timestamp() * 1000)
    path = out_dir / f"contacts_{stamp}.vcf"
    path.write_text(result.vcf, encoding="utf-8")
    log.info(f"Wrote {result.count} contact(s) to {path}")
    return path
