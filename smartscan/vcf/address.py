"""
Heuristic address decomposition for vCard export.

Addresses come from card extraction as free text. Multi-line addresses are
read positionally; single-line addresses are split on commas and peeled
from the right: postal code, then state/country, then city. Whatever is
left is the street.

File: vcf/address.py
Created: 2026-01-10
Last Modified: 2026-01-14
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

POSTAL_CODE_RE = re.compile(r"\b\d{5,6}(?:-\d{4})?\b", re.ASCII)
EDGE_DASH_RE = re.compile(r"^\s*-\s*|\s*-\s*$")
DIGIT_RE = re.compile(r"\d", re.ASCII)
DIGIT_RUN_RE = re.compile(r"\d{3,}", re.ASCII)
STREET_WORD_RE = re.compile(r"nagar|road|street|avenue|lane", re.IGNORECASE)
UNSAFE_CHARS_RE = re.compile(r"[;\\]")
WHITESPACE_RE = re.compile(r"\s+")

# Trailing segments recognized as a country rather than a state
KNOWN_COUNTRIES = {
    "india", "bharat", "usa", "us", "united states", "united states of america",
    "uk", "united kingdom", "uae", "united arab emirates", "canada", "australia",
    "singapore", "nepal", "sri lanka", "bangladesh", "germany", "france",
}

MIN_REGION_LENGTH = 2
MAX_REGION_LENGTH = 30
MAX_CITY_LENGTH = 50


@dataclass
class AddressParts:
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    def components(self) -> List[str]:
        return [self.street, self.city, self.state, self.postal_code, self.country]

    @property
    def combined(self) -> str:
        """Non-empty components joined with ", "."""
        return ", ".join(part for part in self.components() if part)

    def is_empty(self) -> bool:
        return not any(self.components())


def split_segments(address: str, separator: str) -> List[str]:
    """Split, trim, and drop empty segments."""
    return [part.strip() for part in address.split(separator) if part.strip()]


def take_postal_code(segments: List[str]) -> str:
    """
    Remove the first postal code found in any segment.

    The code is cut out of its segment together with a dash joining it to
    the rest ("Bhilwara - 311001" leaves "Bhilwara"). A segment that held
    only the code is dropped.
    """
    for i, segment in enumerate(segments):
        match = POSTAL_CODE_RE.search(segment)
        if not match:
            continue
        remainder = POSTAL_CODE_RE.sub("", segment, count=1)
        remainder = EDGE_DASH_RE.sub("", remainder).strip()
        if remainder:
            segments[i] = remainder
        else:
            del segments[i]
        return match.group(0)
    return ""


def _looks_like_region(segment: str) -> bool:
    return (
        not DIGIT_RE.search(segment)
        and MIN_REGION_LENGTH <= len(segment) < MAX_REGION_LENGTH
    )


def take_region(segments: List[str]) -> Tuple[str, str]:
    """
    Pop a trailing state and/or country.

    The last segment is a region if it has no digits and is 2-29 characters
    long. A known country name is taken as the country, and the segment
    before it is then tried as the state.

    Returns:
        (state, country)
    """
    if not segments or not _looks_like_region(segments[-1]):
        return "", ""

    last = segments.pop()
    if last.lower() not in KNOWN_COUNTRIES:
        return last, ""

    # Keep at least one segment for the city/street
    if len(segments) > 1 and _looks_like_region(segments[-1]):
        return segments.pop(), last
    return "", last


def take_city(segments: List[str]) -> str:
    """
    Pop the trailing segment as the city.

    Accepted if shorter than 50 characters and either free of 3+ digit runs
    or containing a locality word such as "Nagar" or "Road".
    """
    if not segments:
        return ""
    candidate = segments[-1]
    if len(candidate) < MAX_CITY_LENGTH and (
        not DIGIT_RUN_RE.search(candidate) or STREET_WORD_RE.search(candidate)
    ):
        return segments.pop()
    return ""


def clean_component(value: str) -> str:
    """Replace ; and \\ with spaces and collapse whitespace."""
    return WHITESPACE_RE.sub(" ", UNSAFE_CHARS_RE.sub(" ", value)).strip()


def clean_postal_code(value: str) -> str:
    return UNSAFE_CHARS_RE.sub("", value).strip()


def decompose_address(address: str) -> AddressParts:
    """
    Split a free-form address into vCard components.

    Args:
        address: Address text, single- or multi-line

    Returns:
        AddressParts with every component sanitized for vCard output
    """
    address = address.strip()
    parts = AddressParts()

    if "\n" in address:
        lines = split_segments(address, "\n") + [""] * 5
        parts.street, parts.city, parts.state, parts.postal_code, parts.country = lines[:5]
    else:
        segments = split_segments(address, ",")
        # No commas: nothing to peel, keep the whole line as the street
        if "," not in address or not segments:
            parts.street = address
        else:
            parts.postal_code = take_postal_code(segments)
            parts.state, parts.country = take_region(segments)
            parts.city = take_city(segments)
            parts.street = ", ".join(segments)

    return AddressParts(
        street=clean_component(parts.street),
        city=clean_component(parts.city),
        state=clean_component(parts.state),
        postal_code=clean_postal_code(parts.postal_code),
        country=clean_component(parts.country),
    )
