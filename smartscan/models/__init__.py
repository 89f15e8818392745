"""
Shared data models for SmartScan.
"""

from .activity import ACTIVITY_ACTIONS, Activity
from .contact import (
    EXTRACTION_FAILED_MESSAGE,
    MAX_PHONES,
    ContactRecord,
    StoredContact,
    VcfInputContact,
    to_latin,
)
from .scan import ScanResult

__all__ = [
    "ACTIVITY_ACTIONS",
    "Activity",
    "EXTRACTION_FAILED_MESSAGE",
    "MAX_PHONES",
    "ContactRecord",
    "StoredContact",
    "VcfInputContact",
    "ScanResult",
    "to_latin",
]
