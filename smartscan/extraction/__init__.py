"""
Card extraction: backend fallback chain and output normalization.
"""

from ..gemini import ExtractionAbortedError
from .extractor import ContactExtractor, assemble_record
from .parsing import (
    RegexFindings,
    find_contact_details,
    find_email,
    find_phones,
    normalize_structured,
    parse_structured_response,
    strip_code_fences,
)

__all__ = [
    "ContactExtractor",
    "ExtractionAbortedError",
    "assemble_record",
    "RegexFindings",
    "find_contact_details",
    "find_email",
    "find_phones",
    "normalize_structured",
    "parse_structured_response",
    "strip_code_fences",
]
