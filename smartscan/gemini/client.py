"""
Gemini API client for card extraction.

Wraps the google-genai SDK with a request timeout and runs the blocking SDK
calls off the event loop. Failures are not retried here; the caller walks
the model-variant list instead.

File: gemini/client.py
Created: 2025-12-27
Last Modified: 2026-01-12
"""

import asyncio
import logging
import os
from typing import Optional

from google import genai
from google.genai import types

log = logging.getLogger(__name__)


class GeminiClient:
    """
    Client for the Gemini API (vision and text generation).
    """

    def __init__(self, api_key: Optional[str] = None, timeout: float = 60.0):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key. If not provided, reads from GEMINI_API_KEY env var.
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key provided or found in environment
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Gemini API key required. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        # HttpOptions.timeout is in milliseconds
        self.client = genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self._request_count = 0

    async def _generate(self, model: str, contents: list) -> str:
        """
        Make one generate_content call.

        Args:
            model: Model identifier (e.g. "gemini-2.5-flash")
            contents: List of content parts (text, images)

        Returns:
            Response text, stripped ("" if the model returned nothing)

        Raises:
            google.genai.errors.APIError: On any API failure
        """
        self._request_count += 1
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=model,
            contents=contents,
        )

        if not response.text:
            log.warning(f"Empty response from Gemini model {model}")
            return ""
        return response.text.strip()

    async def generate_from_image(
        self,
        model: str,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
    ) -> str:
        """
        Send an inline image plus an instruction.

        Args:
            model: Model identifier
            image_bytes: Raw image bytes (sent inline, base64 on the wire)
            mime_type: MIME type of the image
            prompt: Instruction text

        Returns:
            Response text
        """
        contents = [
            types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            prompt,
        ]
        return await self._generate(model, contents)

    async def generate_from_text(self, model: str, prompt: str) -> str:
        """Send a text-only prompt and return the response text."""
        return await self._generate(model, [prompt])

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count
