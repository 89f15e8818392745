"""
Image MIME type detection for card uploads.

File: gemini/content_types.py
Created: 2025-12-27
Last Modified: 2026-01-08
"""

from pathlib import Path
from typing import Union

DEFAULT_IMAGE_TYPE = "image/jpeg"

# Extensions with a non-JPEG MIME type; everything else is sent as JPEG
IMAGE_TYPES_BY_EXTENSION = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def get_image_mime_type(image_path: Union[str, Path]) -> str:
    """
    Map an image file extension to the MIME type sent to Gemini.

    Args:
        image_path: Path to the image file

    Returns:
        "image/png", "image/gif", "image/webp", or "image/jpeg" for anything else
    """
    suffix = Path(image_path).suffix.lower()
    return IMAGE_TYPES_BY_EXTENSION.get(suffix, DEFAULT_IMAGE_TYPE)
