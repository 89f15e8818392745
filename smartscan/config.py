"""
Extraction backend configuration for SmartScan.

File: config.py
Created: 2025-12-24
Last Modified: 2026-01-12
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

# Gemini variants, tried strictly in this order
DEFAULT_MODEL_VARIANTS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-exp",
]

OCR_SPACE_URL = "https://api.ocr.space/parse/imagebase64"
OCR_SPACE_DEMO_KEY = "helloworld"


@dataclass
class ExtractorConfig:
    """Credentials and tuning for the extraction backends."""

    # Gemini (vision + text parsing). None disables both passes.
    gemini_api_key: Optional[str] = None
    model_variants: List[str] = field(default_factory=lambda: list(DEFAULT_MODEL_VARIANTS))

    # OCR.space
    ocr_space_api_key: str = OCR_SPACE_DEMO_KEY
    ocr_space_url: str = OCR_SPACE_URL
    ocr_language: str = "eng"
    ocr_engine: int = 2  # engine 2 is the more accurate one for mixed fonts

    # Applies to every backend request
    request_timeout: float = 60.0

    def __post_init__(self):
        if self.gemini_api_key is not None and not self.gemini_api_key.strip():
            self.gemini_api_key = None
        if not self.model_variants:
            raise ValueError("At least one Gemini model variant is required")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @property
    def vision_enabled(self) -> bool:
        return self.gemini_api_key is not None

    @property
    def parsing_enabled(self) -> bool:
        return self.gemini_api_key is not None

    @classmethod
    def from_env(cls) -> "ExtractorConfig":
        """
        Build a config from environment variables.

        Reads GEMINI_API_KEY, OCR_SPACE_API_KEY, SMARTSCAN_GEMINI_MODELS
        (comma-separated) and SMARTSCAN_REQUEST_TIMEOUT (seconds). Call
        ``load_dotenv()`` first to pick up a ``.env`` file.
        """
        kwargs = {
            "gemini_api_key": os.environ.get("GEMINI_API_KEY"),
            "ocr_space_api_key": os.environ.get("OCR_SPACE_API_KEY") or OCR_SPACE_DEMO_KEY,
        }

        models = os.environ.get("SMARTSCAN_GEMINI_MODELS")
        if models:
            kwargs["model_variants"] = [m.strip() for m in models.split(",") if m.strip()]

        timeout = os.environ.get("SMARTSCAN_REQUEST_TIMEOUT")
        if timeout:
            kwargs["request_timeout"] = float(timeout)

        return cls(**kwargs)

    def to_dict(self) -> dict:
        """Convert to dict for display, with credentials masked."""
        return {
            "gemini_api_key": "set" if self.gemini_api_key else "missing",
            "model_variants": self.model_variants,
            "ocr_space_api_key": "demo" if self.ocr_space_api_key == OCR_SPACE_DEMO_KEY else "set",
            "ocr_space_url": self.ocr_space_url,
            "ocr_language": self.ocr_language,
            "ocr_engine": self.ocr_engine,
            "request_timeout": self.request_timeout,
        }
