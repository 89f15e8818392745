"""
Result of scanning one card (one or both sides).

File: models/scan.py
Created: 2026-01-09
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from .contact import StoredContact


class ScanResult(BaseModel):
    """
    Outcome of the scan workflow.

    ``failed`` means the extraction pipeline itself was broken (sentinel
    record), which is different from a saved contact with empty fields.
    """

    status: Literal["saved", "duplicate", "failed"] = Field(..., description="What happened to the scan")
    contact: Optional[StoredContact] = Field(None, description="The saved contact")
    existing: Optional[StoredContact] = Field(None, description="Stored contact sharing a phone number")
    candidate: Dict[str, Any] = Field(default_factory=dict, description="Values that would have been saved")
    message: str = Field("", description="Human-readable summary")

    @property
    def ok(self) -> bool:
        return self.status == "saved"
