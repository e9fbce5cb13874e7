"""
Test configuration and fixtures
"""
import copy
import json

import fitz
import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import app, get_http_client, get_settings


STUDY_JSON = {
    "flashcards": [
        {"question": "What is photosynthesis?", "answer": "Turning light into chemical energy."},
        {"question": "Where does it happen?", "answer": "In the chloroplasts."},
        {"question": "What pigment absorbs light?", "answer": "Chlorophyll."},
        {"question": "What gas is taken in?", "answer": "Carbon dioxide."},
        {"question": "What gas is released?", "answer": "Oxygen."},
    ],
    "quiz": [
        {
            "question": "Which organelle hosts photosynthesis?",
            "options": ["A) Nucleus", "B) Chloroplast", "C) Ribosome", "D) Vacuole"],
            "answer": "B",
        },
        {
            "question": "Which gas is released?",
            "options": ["A) Oxygen", "B) Nitrogen", "C) Helium", "D) Argon"],
            "answer": "A",
        },
        {
            "question": "Which pigment is green?",
            "options": ["A) Carotene", "B) Melanin", "C) Chlorophyll", "D) Keratin"],
            "answer": "C",
        },
    ],
    "summary": "Plants make food from light. This happens in chloroplasts. Oxygen is released.",
}


class FakeLLM:
    """Records chat completion requests and replies with a canned body."""

    def __init__(self, content=None, status_code=200, body=None):
        self.content = json.dumps(STUDY_JSON) if content is None else content
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(
            self.status_code,
            json={
                "model": "test-model",
                "choices": [{"message": {"role": "assistant", "content": self.content}}],
            },
        )

    @property
    def prompts(self):
        return [json.loads(r.content)["messages"][0]["content"] for r in self.requests]


@pytest.fixture
def study_json():
    return copy.deepcopy(STUDY_JSON)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(upload_dir):
    return Settings(
        _env_file=None,
        llm_api_key="test-key",
        llm_base_url="https://llm.test/v1",
        llm_model="test-model",
        upload_dir=str(upload_dir),
        max_text_chars=12000,
    )


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def client(settings, fake_llm):
    """API test client wired to the fake LLM"""

    async def _http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_llm)) as c:
            yield c

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = _http_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def pdf_bytes():
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Photosynthesis happens in chloroplasts.")
    page = doc.new_page()
    page.insert_text((72, 72), "Oxygen is   released.")
    data = doc.tobytes()
    doc.close()
    return data
