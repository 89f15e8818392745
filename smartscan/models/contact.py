"""
Contact models: the normalized extraction output, the stored row and the
vCard serializer input.

File: models/contact.py
Created: 2025-12-23
Last Modified: 2026-01-14
"""

import unicodedata
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from unidecode import unidecode

# Returned in raw_text when every backend is unavailable or failed
EXTRACTION_FAILED_MESSAGE = (
    "OCR extraction failed. Please check your API keys or try again later."
)

MAX_PHONES = 3


def _is_latin_text(text: str) -> bool:
    """True if every letter in the text belongs to the Latin script."""
    for ch in text:
        if ch.isalpha() and not unicodedata.name(ch, "").startswith("LATIN"):
            return False
    return True


def to_latin(text: str) -> str:
    """
    Transliterate a name to Latin script if it contains non-Latin letters.

    Latin text (including accented Latin) is returned unchanged. Other
    scripts are romanized with Unidecode and title-cased, e.g. a Devanagari
    company name becomes something like "Ruup Vrssaa Jvailrii".
    """
    if not text or _is_latin_text(text):
        return text
    romanized = " ".join(unidecode(text).split())
    return romanized.title()


def _blank_if_none(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class ContactRecord(BaseModel):
    """
    Normalized contact fields extracted from a single card image.

    Created fresh on every extraction and never mutated afterwards.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    company: str = Field("", description="Business/company name (primary field)")
    person_name: str = Field("", description="Person's name, Latin script")
    phones: List[str] = Field(default_factory=list, description="Up to 3 phone numbers, first-seen order")
    email: str = Field("", description="Email address")
    website: str = Field("", description="Website URL")
    address: str = Field("", description="Free-form address, may contain newlines")
    raw_text: str = Field("", description="Full extracted text in its original script")

    @field_validator("company", "person_name", "email", "website", "address", "raw_text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _blank_if_none(value)

    @field_validator("company", "person_name")
    @classmethod
    def _romanize(cls, value: str) -> str:
        return to_latin(value.strip())

    @field_validator("phones", mode="before")
    @classmethod
    def _dedupe_phones(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        unique: List[str] = []
        for phone in value:
            phone = _blank_if_none(phone).strip()
            if phone and phone not in unique:
                unique.append(phone)
        return unique[:MAX_PHONES]

    @classmethod
    def failed(cls) -> "ContactRecord":
        """The sentinel record returned when the whole pipeline is broken."""
        return cls(raw_text=EXTRACTION_FAILED_MESSAGE)

    @property
    def is_failure(self) -> bool:
        """Distinguishes "pipeline broken" from "nothing found on the card"."""
        return (
            not self.company
            and not self.phones
            and EXTRACTION_FAILED_MESSAGE in self.raw_text
        )


class VcfInputContact(BaseModel):
    """A stored contact projected for vCard export. Read-only to the serializer."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    name: str = Field("", description="Display name ('Unknown' is used when empty)")
    company: str = Field("", description="Organization")
    phones: List[str] = Field(default_factory=list, description="Phones in slot order")
    email: str = Field("", description="Email address")
    address: str = Field("", description="Free-form address")
    note: str = Field("", description="User note")

    @field_validator("name", "company", "email", "address", "note", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _blank_if_none(value)

    @field_validator("phones", mode="before")
    @classmethod
    def _coerce_phones(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        return [_blank_if_none(p) for p in value if p]


class StoredContact(BaseModel):
    """A row of the local contacts table. Unset values are stored as NULL."""
    model_config = ConfigDict(
        validate_assignment=True,
        extra='ignore'
    )

    id: int = Field(..., description="Row id", gt=0)
    company_name: str = Field("", description="Company name shown as the contact name")
    phone1: Optional[str] = Field(None, description="First cleaned phone")
    phone2: Optional[str] = Field(None, description="Second cleaned phone")
    phone3: Optional[str] = Field(None, description="Third cleaned phone")
    email: Optional[str] = Field(None, description="Email address")
    website: Optional[str] = Field(None, description="Website URL")
    address: Optional[str] = Field(None, description="Free-form address")
    note: Optional[str] = Field(None, description="User note")
    raw_text: Optional[str] = Field(None, description="Original extracted text")
    sent: bool = Field(False, description="True once included in an export")
    created_at: datetime = Field(..., description="When the contact was scanned")
    updated_at: Optional[datetime] = Field(None, description="Last edit")

    @property
    def phones(self) -> List[str]:
        return [p for p in (self.phone1, self.phone2, self.phone3) if p]

    def to_vcf_input(self) -> VcfInputContact:
        """Project to serializer input; the company doubles as the display name."""
        return VcfInputContact(
            name=self.company_name,
            company=self.company_name,
            phones=self.phones,
            email=self.email or "",
            address=self.address or "",
            note=self.note or "",
        )

    @classmethod
    def from_db_dict(cls, data: Dict[str, Any]) -> "StoredContact":
        """Create StoredContact instance from database dictionary"""
        data = dict(data)
        data["sent"] = bool(data.get("sent"))
        for key in ("created_at", "updated_at"):
            if isinstance(data.get(key), str):
                data[key] = datetime.fromisoformat(data[key])
        if data.get("company_name") is None:
            data["company_name"] = ""
        return cls(**data)
