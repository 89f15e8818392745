import pytest

from smartscan.extraction import ContactExtractor, ExtractionAbortedError
from smartscan.models import EXTRACTION_FAILED_MESSAGE
from smartscan.ocr import OCRSpaceError

from conftest import (
    VARIANTS,
    FakeGemini,
    FakeOCR,
    card_json,
    invalid_key,
    not_found,
    permission_denied,
    rate_limited,
    run,
)

OCR_TEXT = "ROOP VARSHA JEWELLERY\nMob: +91 98295 50499\nroopvarsha@gmail.com"


def test_vision_success_skips_ocr_and_parsing(config, card_image):
    gemini = FakeGemini(
        image={
            "model-a": "```json\n"
            + card_json(
                company="Roop Varsha Jewellery",
                name="Anil Soni",
                phones=["+91 98295 50499", "0148 222 3333"],
                email="roop@gmail.com",
                website="roopvarsha.in",
                address="Main Bazar, Bhilwara - 311001, Rajasthan",
                rawText="ROOP VARSHA JEWELLERY ...",
            )
            + "\n```"
        }
    )
    ocr = FakeOCR("should not be used")

    record = run(ContactExtractor(config, vision=gemini, ocr=ocr).extract(card_image))

    assert record.company == "Roop Varsha Jewellery"
    assert record.person_name == "Anil Soni"
    assert record.phones == ["+91 98295 50499", "0148 222 3333"]
    assert record.email == "roop@gmail.com"
    assert record.website == "roopvarsha.in"
    assert record.address == "Main Bazar, Bhilwara - 311001, Rajasthan"
    assert record.raw_text == "ROOP VARSHA JEWELLERY ..."
    assert ocr.calls == []
    assert gemini.calls_of("text") == []
    assert gemini.calls_of("image") == [("image", "model-a", "image/png")]


def test_no_key_and_ocr_failure_returns_sentinel(no_key_config, card_image):
    gemini = FakeGemini()
    ocr = FakeOCR(OCRSpaceError("OCR Space failed: exit code 3"))

    record = run(ContactExtractor(no_key_config, vision=gemini, ocr=ocr).extract(card_image))

    assert record.raw_text == EXTRACTION_FAILED_MESSAGE
    assert record.company == ""
    assert record.person_name == ""
    assert record.phones == []
    assert record.email == ""
    assert record.website == ""
    assert record.address == ""
    assert record.is_failure
    assert gemini.calls == []


def test_no_key_uses_ocr_and_regex(no_key_config, card_image):
    ocr = FakeOCR(OCR_TEXT)

    record = run(ContactExtractor(no_key_config, ocr=ocr).extract(card_image))

    assert record.company == ""
    assert record.phones == ["+91 98295 50499"]
    assert record.email == "roopvarsha@gmail.com"
    assert record.raw_text == OCR_TEXT
    assert not record.is_failure


def test_empty_ocr_text_is_not_a_failure(no_key_config, card_image):
    record = run(ContactExtractor(no_key_config, ocr=FakeOCR("")).extract(card_image))

    assert record.raw_text == ""
    assert not record.is_failure


def test_vision_walks_variants(config, card_image):
    gemini = FakeGemini(
        image={
            "model-a": not_found(),
            "model-b": rate_limited(),
            "model-c": card_json(company="Acme", rawText="ACME"),
        }
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(card_image))

    assert record.company == "Acme"
    assert [c[1] for c in gemini.calls_of("image")] == VARIANTS


def test_vision_quota_exhausted_falls_back_to_ocr_and_parsing(config, card_image):
    gemini = FakeGemini(
        image={v: rate_limited() for v in VARIANTS},
        text={"model-a": card_json(company="Roop Varsha Jewellery", phones=["9829550499"])},
    )
    ocr = FakeOCR(OCR_TEXT)

    record = run(ContactExtractor(config, vision=gemini, ocr=ocr).extract(card_image))

    assert len(ocr.calls) == 1
    assert record.company == "Roop Varsha Jewellery"
    assert record.phones == ["9829550499"]
    # email left empty by the parser comes from the regex pass
    assert record.email == "roopvarsha@gmail.com"
    # rawText missing from the parse result -> OCR text
    assert record.raw_text == OCR_TEXT
    text_calls = gemini.calls_of("text")
    assert len(text_calls) == 1
    assert OCR_TEXT in text_calls[0][2]


@pytest.mark.parametrize("error", [invalid_key(), permission_denied()])
def test_vision_credential_errors_abort(config, card_image, error):
    gemini = FakeGemini(image={"model-a": error})
    ocr = FakeOCR(OCR_TEXT)

    with pytest.raises(ExtractionAbortedError):
        run(ContactExtractor(config, vision=gemini, ocr=ocr).extract(card_image))

    assert ocr.calls == []


def test_unparseable_vision_response_falls_through(config, card_image):
    gemini = FakeGemini(
        image={"model-a": "Sorry, I can't help with that."},
        text={"model-a": card_json(company="Acme")},
    )
    ocr = FakeOCR(OCR_TEXT)

    record = run(ContactExtractor(config, vision=gemini, ocr=ocr).extract(card_image))

    assert len(ocr.calls) == 1
    assert record.company == "Acme"
    assert len(gemini.calls_of("image")) == 1


def test_parsing_credential_error_only_skips_to_regex(config, card_image):
    gemini = FakeGemini(
        image={v: rate_limited() for v in VARIANTS},
        text={"model-a": invalid_key()},
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR(OCR_TEXT)).extract(card_image))

    assert record.company == ""
    assert record.phones == ["+91 98295 50499"]
    assert record.email == "roopvarsha@gmail.com"
    assert len(gemini.calls_of("text")) == 1


def test_unparseable_parsing_response_uses_regex(config, card_image):
    gemini = FakeGemini(
        image={v: not_found() for v in VARIANTS},
        text={"model-a": "no json"},
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR(OCR_TEXT)).extract(card_image))

    assert record.company == ""
    assert record.phones == ["+91 98295 50499"]


def test_structured_empty_fields_backfilled_from_raw_text(config, card_image):
    gemini = FakeGemini(
        image={
            "model-a": card_json(
                company="Acme",
                rawText="ACME\nsales@acme.in\n9829550499 / 9414012345",
            )
        }
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(card_image))

    assert record.email == "sales@acme.in"
    assert record.phones == ["9829550499", "9414012345"]
    # no regex fallback for these
    assert record.website == ""
    assert record.address == ""


def test_raw_response_becomes_raw_text_when_field_missing(config, card_image):
    response = '{"company": "Acme", "phones": []}'
    gemini = FakeGemini(image={"model-a": response})

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(card_image))

    assert record.raw_text == response


def test_non_latin_names_are_transliterated(config, card_image):
    gemini = FakeGemini(
        image={
            "model-a": card_json(
                company="रूप वर्षा ज्वैलरी",
                name="अनिल सोनी",
                rawText="रूप वर्षा ज्वैलरी\n9829550499",
            )
        }
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(card_image))

    assert record.company
    assert record.company != "रूप वर्षा ज्वैलरी"
    assert record.company.isascii()
    assert record.person_name.isascii()
    assert "रूप वर्षा ज्वैलरी" in record.raw_text


def test_phones_never_exceed_three(config, card_image):
    gemini = FakeGemini(
        image={"model-a": card_json(company="Acme", phones=["1111111111", "2222222222", "3333333333", "4444444444"])}
    )

    record = run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(card_image))

    assert record.phones == ["1111111111", "2222222222", "3333333333"]


def test_mime_type_follows_extension(config, tmp_path):
    image = tmp_path / "card.webp"
    image.write_bytes(b"RIFF....WEBP")
    gemini = FakeGemini(image={"model-a": card_json(company="Acme")})

    run(ContactExtractor(config, vision=gemini, ocr=FakeOCR()).extract(image))

    assert gemini.calls_of("image")[0][2] == "image/webp"


def test_missing_image_with_failing_ocr_returns_sentinel(config, tmp_path):
    gemini = FakeGemini(image={"model-a": card_json(company="Acme")})
    ocr = FakeOCR(FileNotFoundError("missing.jpg"))

    record = run(ContactExtractor(config, vision=gemini, ocr=ocr).extract(tmp_path / "missing.jpg"))

    assert record.is_failure
    assert gemini.calls == []
