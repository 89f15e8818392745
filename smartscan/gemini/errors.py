"""
Classification of Gemini API failures.

The google-genai SDK raises ``google.genai.errors.APIError`` subclasses that
carry an HTTP ``code``; transport failures (timeouts, DNS) surface as httpx
or OS errors with no code. Both are mapped onto a small set of kinds the
fallback loop understands.

File: gemini/errors.py
Created: 2026-01-08
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIAL = "invalid_credential"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


class ExtractionAbortedError(RuntimeError):
    """A configuration error that makes falling back pointless (bad key, API disabled)."""

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


_CODE_KINDS = {
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
    401: ErrorKind.INVALID_CREDENTIAL,
    403: ErrorKind.PERMISSION_DENIED,
}


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("code", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_error(exc: BaseException) -> ErrorKind:
    """
    Map an exception from a Gemini call to an ErrorKind.

    The HTTP code wins when there is one. Otherwise the message is searched
    for the phrases Gemini uses, in the same order the codes are checked.

    Args:
        exc: Exception raised by the SDK or the transport

    Returns:
        The ErrorKind; OTHER when nothing matches
    """
    error_str = str(exc).lower()

    # Invalid keys come back as 400 INVALID_ARGUMENT, so check the reason first
    if "api key not valid" in error_str or "api_key_invalid" in error_str:
        return ErrorKind.INVALID_CREDENTIAL

    code = _status_code(exc)
    if code in _CODE_KINDS:
        return _CODE_KINDS[code]

    if "404" in error_str or "not found" in error_str:
        return ErrorKind.NOT_FOUND
    if (
        "429" in error_str
        or "quota" in error_str
        or "rate limit" in error_str
        or "resource exhausted" in error_str
        or "resource_exhausted" in error_str
    ):
        return ErrorKind.RATE_LIMITED
    if "403" in error_str or "permission" in error_str:
        return ErrorKind.PERMISSION_DENIED

    return ErrorKind.OTHER
