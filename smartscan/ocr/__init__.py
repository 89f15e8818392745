"""
Plain OCR backend (OCR.space).
"""

from .ocr_space import OCR_EXIT_SUCCESS, OCRSpaceClient, OCRSpaceError

__all__ = [
    "OCR_EXIT_SUCCESS",
    "OCRSpaceClient",
    "OCRSpaceError",
]
