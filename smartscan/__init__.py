"""
SmartScan: visiting-card digitization.

Extracts contact details from business card images (Gemini vision, OCR.space
and regex fallbacks), stores them locally and exports them as vCard.
"""

__version__ = "0.1.0"
