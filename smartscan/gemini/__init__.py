"""
Gemini integration for card extraction.

Provides the API client, the error classifier and the ordered model-variant
fallback used by the vision and text-parsing passes.
"""

from .client import GeminiClient
from .content_types import get_image_mime_type
from .errors import ErrorKind, ExtractionAbortedError, classify_error
from .fallback import (
    PARSING_POLICY,
    VISION_POLICY,
    FallbackAction,
    FallbackPolicy,
    VariantResult,
    run_variants,
)

__all__ = [
    "GeminiClient",
    "get_image_mime_type",
    "ErrorKind",
    "ExtractionAbortedError",
    "classify_error",
    "PARSING_POLICY",
    "VISION_POLICY",
    "FallbackAction",
    "FallbackPolicy",
    "VariantResult",
    "run_variants",
]
