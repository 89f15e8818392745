import asyncio
import json

import pytest

from smartscan.config import ExtractorConfig
from smartscan.database import init_local_database

VARIANTS = ["model-a", "model-b", "model-c"]


class FakeAPIError(Exception):
    """Stands in for google.genai.errors.APIError (has an HTTP code)."""

    def __init__(self, code, message):
        super().__init__(f"{code} {message}")
        self.code = code


def not_found():
    return FakeAPIError(404, "NOT_FOUND. models/x is not found for API version v1beta")


def rate_limited():
    return FakeAPIError(429, "RESOURCE_EXHAUSTED. You exceeded your current quota")


def invalid_key():
    return FakeAPIError(400, "INVALID_ARGUMENT. API key not valid. Please pass a valid API key. API_KEY_INVALID")


def permission_denied():
    return FakeAPIError(403, "PERMISSION_DENIED. Generative Language API has not been used in project")


class FakeGemini:
    """
    Scripted Gemini backend. Each dict maps a model variant to the response
    text or to an exception to raise; unscripted variants are "not found".
    """

    def __init__(self, image=None, text=None):
        self.image = image or {}
        self.text = text or {}
        self.calls = []

    @staticmethod
    def _outcome(script, model):
        outcome = script.get(model, not_found())
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def generate_from_image(self, model, image_bytes, mime_type, prompt):
        self.calls.append(("image", model, mime_type))
        return self._outcome(self.image, model)

    async def generate_from_text(self, model, prompt):
        self.calls.append(("text", model, prompt))
        return self._outcome(self.text, model)

    def calls_of(self, kind):
        return [c for c in self.calls if c[0] == kind]


class FakeOCR:
    def __init__(self, result=""):
        self.result = result
        self.calls = []

    async def extract_text(self, image_path):
        self.calls.append(image_path)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def card_json(**fields):
    data = {
        "company": "",
        "name": "",
        "phones": [],
        "email": "",
        "website": "",
        "address": "",
        "rawText": "",
    }
    data.update(fields)
    return json.dumps(data, ensure_ascii=False)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def config():
    return ExtractorConfig(gemini_api_key="test-key", model_variants=list(VARIANTS))


@pytest.fixture
def no_key_config():
    return ExtractorConfig(gemini_api_key=None, model_variants=list(VARIANTS))


@pytest.fixture
def card_image(tmp_path):
    path = tmp_path / "card.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nnot-really-an-image")
    return path


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "smartscan.db"
    run(init_local_database(path))
    return path
