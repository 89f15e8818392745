"""
Parsing helpers for extraction output.

Two sources are handled here: the loosely-shaped JSON that Gemini returns
(arbitrary key casing, optional code fences) and the regex scan over raw
text that backs up email and phone numbers.

File: extraction/parsing.py
Created: 2026-01-08
Last Modified: 2026-01-13
"""

import json
import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional

from ..models import MAX_PHONES

log = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", re.IGNORECASE)

# Loosest last. Every match from every pattern is a candidate.
PHONE_PATTERNS = [
    re.compile(r"\+\d{1,3}[\s.-]?\d{4,5}[\s.-]?\d{5,6}", re.ASCII),  # +91 98295 50499
    re.compile(r"\+\d{1,3}\s?\d{10,12}", re.ASCII),                  # +919829550499
    re.compile(r"\d{3}[\s.-]\d{3}[\s.-]\d{4}", re.ASCII),            # 555-123-4567
    re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}", re.ASCII),    # (555) 123-4567
    re.compile(r"\d{10,12}", re.ASCII),                              # 9829550499
]
NON_DIGIT_RE = re.compile(r"\D", re.ASCII)

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15

# Accepted spellings for each field in the model's JSON
FIELD_KEYS = {
    "company": ("company", "Company", "companyName", "company_name"),
    "person_name": ("name", "Name", "personName", "person_name"),
    "email": ("email", "Email"),
    "website": ("website", "Website"),
    "address": ("address", "Address"),
    "raw_text": ("rawText", "raw_text", "RawText"),
}
PHONE_KEYS = ("phones", "Phones")


class RegexFindings(NamedTuple):
    email: str
    phones: List[str]


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ```) and surrounding whitespace."""
    return CODE_FENCE_RE.sub("", text).strip()


def parse_structured_response(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse a model response into a loosely-typed dict.

    Code fences are stripped first. If the remaining text is not valid JSON,
    the outermost ``{...}`` span is tried, since models sometimes add a
    sentence before or after the object.

    Args:
        text: Raw response text

    Returns:
        The parsed object, or None if no JSON object could be read
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        return None

    candidates = [cleaned]
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if 0 <= start < end and (start, end) != (0, len(cleaned) - 1):
        candidates.append(cleaned[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
        log.debug(f"Model returned JSON {type(data).__name__}, expected an object")

    return None


def _pick_text(data: Dict[str, Any], keys) -> str:
    for key in keys:
        value = data.get(key)
        if value is None or isinstance(value, (dict, list)):
            continue
        value = str(value).strip()
        if value:
            return value
    return ""


def _pick_phones(data: Dict[str, Any]) -> List[str]:
    for key in PHONE_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, (str, int)):
            value = [value]
        if not isinstance(value, list):
            return []
        return [str(p).strip() for p in value if p is not None and str(p).strip()]
    return []


def normalize_structured(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a parsed model response into ContactRecord field names.

    Missing or null fields become empty strings and ``phones`` is always a
    list of non-blank strings. Truncation to three phones happens in the
    ContactRecord itself.
    """
    fields = {name: _pick_text(data, keys) for name, keys in FIELD_KEYS.items()}
    fields["phones"] = _pick_phones(data)
    return fields


def find_email(text: str) -> str:
    match = EMAIL_RE.search(text or "")
    return match.group(0) if match else ""


def find_phones(text: str, limit: int = MAX_PHONES) -> List[str]:
    """
    Find phone numbers in raw text.

    Every pattern runs over the whole text in order. A match is kept if it
    has 10 to 15 digits; duplicates are dropped (first one wins) and the
    first ``limit`` unique candidates are returned.
    """
    candidates: List[str] = []
    for pattern in PHONE_PATTERNS:
        for match in pattern.finditer(text or ""):
            candidate = match.group(0).strip()
            digits = NON_DIGIT_RE.sub("", candidate)
            if MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS and candidate not in candidates:
                candidates.append(candidate)
    return candidates[:limit]


def find_contact_details(text: str) -> RegexFindings:
    """Regex pass over raw text: first email and up to three phones."""
    return RegexFindings(email=find_email(text), phones=find_phones(text))
