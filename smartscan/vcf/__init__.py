"""
vCard (.vcf) export of stored contacts.
"""

from .address import (
    AddressParts,
    clean_component,
    clean_postal_code,
    decompose_address,
    take_city,
    take_postal_code,
    take_region,
)
from .serializer import escape_text, format_contact, serialize

__all__ = [
    "AddressParts",
    "clean_component",
    "clean_postal_code",
    "decompose_address",
    "take_city",
    "take_postal_code",
    "take_region",
    "escape_text",
    "format_contact",
    "serialize",
]
