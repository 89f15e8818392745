"""
Contact extraction pipeline.

Turns a card image into a ContactRecord by walking an ordered chain of
backends:

1. Gemini vision (image -> JSON), if a Gemini key is configured
2. OCR.space (image -> text), if step 1 produced no text
3. Gemini text parsing (text -> JSON), if there is text but no JSON yet
4. Regex scan of the text, used to fill email/phones left empty

Backend calls are strictly sequential. Nothing is shared between calls to
``extract``, so several images can be extracted concurrently.

File: extraction/extractor.py
Created: 2026-01-08
Last Modified: 2026-01-14
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union

from ..config import ExtractorConfig
from ..gemini import (
    PARSING_POLICY,
    VISION_POLICY,
    GeminiClient,
    get_image_mime_type,
    run_variants,
)
from ..models import ContactRecord
from ..ocr import OCRSpaceClient, OCRSpaceError
from .parsing import (
    RegexFindings,
    find_contact_details,
    normalize_structured,
    parse_structured_response,
    strip_code_fences,
)
from .prompts import VISION_PROMPT, build_parse_prompt

log = logging.getLogger(__name__)


class VisionBackend(Protocol):
    async def generate_from_image(
        self, model: str, image_bytes: bytes, mime_type: str, prompt: str
    ) -> str: ...

    async def generate_from_text(self, model: str, prompt: str) -> str: ...


class OCRBackend(Protocol):
    async def extract_text(self, image_path: Union[str, Path]) -> str: ...


def assemble_record(
    structured: Optional[Dict[str, Any]],
    findings: RegexFindings,
    working_text: str,
) -> ContactRecord:
    """
    Merge the structured result (if any) with the regex findings.

    Structured values win. Email and phones fall back to the regex pass;
    company, name, website and address have no fallback.
    """
    if structured is None:
        return ContactRecord(
            phones=findings.phones,
            email=findings.email,
            raw_text=working_text,
        )

    fields = normalize_structured(structured)
    return ContactRecord(
        company=fields["company"],
        person_name=fields["person_name"],
        phones=fields["phones"] or findings.phones,
        email=fields["email"] or findings.email,
        website=fields["website"],
        address=fields["address"],
        raw_text=fields["raw_text"] or working_text,
    )


class ContactExtractor:
    """
    Extracts a ContactRecord from a visiting card image.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        vision: Optional[VisionBackend] = None,
        ocr: Optional[OCRBackend] = None,
    ):
        """
        Args:
            config: Backend credentials and settings. Gemini passes are skipped
                when it has no Gemini key, even if ``vision`` is given.
            vision: Gemini backend (built from config if not given)
            ocr: Plain OCR backend (built from config if not given)
        """
        self.config = config or ExtractorConfig()

        if vision is None and self.config.vision_enabled:
            vision = GeminiClient(
                self.config.gemini_api_key, timeout=self.config.request_timeout
            )
        self.vision = vision

        self.ocr = ocr or OCRSpaceClient(
            api_key=self.config.ocr_space_api_key,
            url=self.config.ocr_space_url,
            language=self.config.ocr_language,
            engine=self.config.ocr_engine,
            timeout=self.config.request_timeout,
        )

    async def extract(self, image_path: Union[str, Path]) -> ContactRecord:
        """
        Extract contact details from an image.

        Args:
            image_path: Path to the card image

        Returns:
            ContactRecord. If every backend failed, the sentinel record
            (``ContactRecord.failed()``) is returned instead of raising.

        Raises:
            ExtractionAbortedError: Gemini rejected the key or the API is not
                enabled for the project
        """
        image_path = Path(image_path)
        structured: Optional[Dict[str, Any]] = None
        working_text = ""

        # Step 1: Gemini vision
        if self.config.vision_enabled and self.vision is not None:
            structured, working_text = await self._vision_pass(image_path)

        # Step 2: plain OCR
        if not working_text:
            try:
                working_text = await self.ocr.extract_text(image_path)
            except (OCRSpaceError, OSError) as e:
                log.error(f"OCR Space extraction failed: {e}")
                return ContactRecord.failed()

        # Step 3: Gemini text parsing
        if working_text and structured is None:
            if self.config.parsing_enabled and self.vision is not None:
                structured = await self._parsing_pass(working_text)
            else:
                log.info("No Gemini key for parsing. Using basic regex parsing...")

        # Step 4: regex
        findings = find_contact_details(working_text)
        record = assemble_record(structured, findings, working_text)

        log.info(
            f"Extracted {image_path.name}: company={record.company!r}, "
            f"{len(record.phones)} phone(s), structured={structured is not None}"
        )
        return record

    async def _vision_pass(
        self, image_path: Path
    ) -> Tuple[Optional[Dict[str, Any]], str]:
        """
        Returns:
            (structured result or None, working raw text)
        """
        try:
            image_bytes = image_path.read_bytes()
        except OSError as e:
            log.error(f"Could not read image {image_path}: {e}")
            return None, ""

        mime_type = get_image_mime_type(image_path)
        log.info("Using Gemini Vision API for extraction...")

        result = await run_variants(
            self.config.model_variants,
            lambda model: self.vision.generate_from_image(
                model, image_bytes, mime_type, VISION_PROMPT
            ),
            VISION_POLICY,
        )
        if result is None:
            log.info("No Gemini Vision result. Will try OCR Space fallback.")
            return None, ""

        structured = parse_structured_response(result.text)
        if structured is None:
            log.error(
                f"Failed to parse Gemini Vision JSON response from {result.variant}. "
                "Will proceed to OCR Space fallback for raw text extraction."
            )
            return None, ""

        raw_text = normalize_structured(structured)["raw_text"]
        return structured, raw_text or strip_code_fences(result.text)

    async def _parsing_pass(self, text: str) -> Optional[Dict[str, Any]]:
        log.info("Using Gemini to parse extracted text...")
        prompt = build_parse_prompt(text)

        result = await run_variants(
            self.config.model_variants,
            lambda model: self.vision.generate_from_text(model, prompt),
            PARSING_POLICY,
        )
        if result is None:
            log.info("No Gemini model available for parsing. Using basic regex parsing...")
            return None

        structured = parse_structured_response(result.text)
        if structured is None:
            log.error("Failed to parse Gemini JSON response. Falling back to basic regex parsing...")
        return structured
