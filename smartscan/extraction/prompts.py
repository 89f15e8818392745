"""
Gemini prompts for card extraction.

File: extraction/prompts.py
Created: 2026-01-08
"""

_SCHEMA = """{
  "company": "company name (this is the most important field - extract the business/company name)",
  "name": "person's name (if visible, otherwise empty string)",
  "phones": ["phone1", "phone2", "phone3"] (array of up to 3 phone numbers, can be empty),
  "email": "email address (if present, otherwise empty string)",
  "website": "website URL (if present, otherwise empty string)",
  "address": "full address including street, city, state, zip code (if present, otherwise empty string)",
  "rawText": "all text extracted from the card in original format"
}"""

VISION_PROMPT = f"""Extract contact information from this visiting card image. The card may contain text in English, Hindi (Devanagari script), or both languages.

Return a JSON object with the following structure:
{_SCHEMA}

Important rules:
1. Extract the COMPANY NAME as the primary field (this is what will be saved as the contact name)
2. If the company name or person's name is in a non-Latin script such as Hindi (Devanagari), TRANSLITERATE it to English using standard Romanization (e.g., "रूप वर्षा ज्वैलरी" -> "Roop Varsha Jewellery")
3. Use common English transliteration patterns for Hindi names
4. Extract up to 3 phone numbers in the phones array
5. Phone numbers can be in formats like: +91 98295 50499, 9829550499, +919829550499, etc.
6. If the card has multiple people, extract the company name and all phone numbers
7. Preserve the raw text for reference (keep original script in rawText)
8. Return ONLY valid JSON, no markdown, no code blocks

Return the JSON object now:"""


def build_parse_prompt(extracted_text: str) -> str:
    """Prompt asking Gemini to structure text that came from plain OCR."""
    return f"""Parse the following text extracted from a visiting card and extract contact information.

Extracted text:
{extracted_text}

Return a JSON object with the following structure:
{_SCHEMA}

Important rules:
1. Extract the COMPANY NAME as the primary field
2. If the company name or person's name is in a non-Latin script such as Hindi (Devanagari), TRANSLITERATE it to English
3. Extract up to 3 phone numbers in the phones array
4. Put the original extracted text in rawText unchanged
5. Return ONLY valid JSON, no markdown, no code blocks

Return the JSON object now:"""
