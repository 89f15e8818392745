"""
OCR.space client for plain text extraction.

Used when Gemini vision is unavailable or produced nothing usable.

File: ocr/ocr_space.py
Created: 2026-01-08
Last Modified: 2026-01-12
"""

import asyncio
import base64
import logging
from pathlib import Path
from typing import Union

import requests

from ..config import OCR_SPACE_DEMO_KEY, OCR_SPACE_URL
from ..gemini.content_types import get_image_mime_type

log = logging.getLogger(__name__)

# OCRExitCode value for a fully parsed image
OCR_EXIT_SUCCESS = 1


class OCRSpaceError(RuntimeError):
    """OCR.space returned an HTTP error or a non-success exit code."""


class OCRSpaceClient:
    """Minimal client for the OCR.space ``parse/imagebase64`` endpoint."""

    def __init__(
        self,
        api_key: str = OCR_SPACE_DEMO_KEY,
        url: str = OCR_SPACE_URL,
        language: str = "eng",
        engine: int = 2,
        timeout: float = 60.0,
    ):
        self.api_key = api_key or OCR_SPACE_DEMO_KEY
        self.url = url
        self.language = language
        self.engine = engine
        self.timeout = timeout

    def build_form(self, image_bytes: bytes, mime_type: str) -> dict:
        """Form fields for one request."""
        encoded = base64.b64encode(image_bytes).decode("ascii")
        return {
            "base64Image": f"data:{mime_type};base64,{encoded}",
            "language": self.language,
            "isOverlayRequired": "false",
            "detectOrientation": "true",
            "scale": "true",
            "OCREngine": str(self.engine),
        }

    def extract_text_sync(self, image_path: Union[str, Path]) -> str:
        """
        Run OCR on an image file.

        Args:
            image_path: Path to the image

        Returns:
            Text of all parsed blocks joined with newlines, trimmed

        Raises:
            OCRSpaceError: On a non-2xx response, invalid JSON or a failed exit code
            OSError: If the image cannot be read
        """
        image_bytes = Path(image_path).read_bytes()
        form = self.build_form(image_bytes, get_image_mime_type(image_path))

        log.info("Using OCR Space API for text extraction...")
        try:
            response = requests.post(
                self.url,
                data=form,
                headers={"apikey": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise OCRSpaceError(f"OCR Space request failed: {e}") from e

        if not response.ok:
            raise OCRSpaceError(
                f"OCR Space API error: {response.status_code} {response.reason} - {response.text[:200]}"
            )

        try:
            result = response.json()
        except ValueError as e:
            raise OCRSpaceError("OCR Space returned invalid JSON") from e
        if not isinstance(result, dict):
            raise OCRSpaceError("OCR Space returned an unexpected payload")

        if result.get("OCRExitCode") != OCR_EXIT_SUCCESS:
            error = result.get("ErrorMessage") or "Unknown error"
            if isinstance(error, list):
                error = "; ".join(str(e) for e in error)
            raise OCRSpaceError(f"OCR Space failed: {error}")

        blocks = result.get("ParsedResults") or []
        if not isinstance(blocks, list):
            raise OCRSpaceError("OCR Space returned an unexpected payload")
        text = "\n".join(
            block.get("ParsedText") or "" for block in blocks if isinstance(block, dict)
        ).strip()
        log.info(f"OCR Space extraction completed, text length: {len(text)}")
        return text

    async def extract_text(self, image_path: Union[str, Path]) -> str:
        """Async wrapper around extract_text_sync."""
        return await asyncio.to_thread(self.extract_text_sync, image_path)
