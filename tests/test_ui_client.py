"""
UI API client and the upload -> generate flow
"""
import json

import httpx
import pytest

from ui.client import ApiError, StudyApi, run_generation
from ui.config import ClientConfig
from ui.state import Phase, StudyViewState


class FakeApi:
    """Stands in for the FastAPI service behind httpx.MockTransport."""

    def __init__(self, study_json):
        self.study_json = study_json
        self.calls = []
        self.upload_status = 200
        self.upload_body = {"success": True, "text": "Plants use light.", "content_type": "text/plain", "chars": 17}
        self.generate_status = 200
        self.generate_body = {"success": True, "result": study_json, "truncated": False, "input_chars": 17}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.url.path == "/upload":
            return httpx.Response(self.upload_status, json=self.upload_body)
        if request.url.path == "/generate":
            return httpx.Response(self.generate_status, json=self.generate_body)
        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture
def fake_api(study_json):
    return FakeApi(study_json)


@pytest.fixture
def api(fake_api):
    config = ClientConfig(api_base_url="http://api.test")
    client = httpx.Client(transport=httpx.MockTransport(fake_api))
    yield StudyApi(config, client=client)
    client.close()


@pytest.fixture
def view():
    view = StudyViewState()
    view.select_file("notes.txt", b"Plants   use light.", "text/plain")
    return view


class TestClientConfig:

    def test_defaults(self):
        config = ClientConfig.from_env({})
        assert config.api_base_url == "http://localhost:5000"
        assert config.dark_mode is False

    def test_from_env(self):
        config = ClientConfig.from_env(
            {"API_BASE_URL": "http://api:5000/", "DARK_MODE": "true", "REQUEST_TIMEOUT_S": "30"}
        )
        assert config.api_base_url == "http://api:5000"
        assert config.dark_mode is True
        assert config.request_timeout_s == 30.0


class TestStudyApi:

    def test_upload_sends_multipart_file(self, api, fake_api):
        text = api.upload("notes.txt", b"Plants use light.", "text/plain")
        assert text == "Plants use light."

        request = fake_api.calls[0]
        assert request.method == "POST"
        assert str(request.url) == "http://api.test/upload"
        assert b'name="file"; filename="notes.txt"' in request.content

    def test_generate_sends_text(self, api, fake_api, study_json):
        generated = api.generate("Plants use light.")
        assert json.loads(fake_api.calls[0].content) == {"text": "Plants use light."}
        assert generated.material.model_dump() == study_json
        assert generated.truncated is False

    def test_server_error_message_is_kept(self, api, fake_api):
        fake_api.upload_status = 400
        fake_api.upload_body = {"error": "Only PDF and plain-text files are allowed"}
        with pytest.raises(ApiError) as exc:
            api.upload("a.png", b"x", "image/png")
        assert exc.value.message == "Only PDF and plain-text files are allowed"
        assert exc.value.status_code == 400

    def test_error_without_body_is_generic(self, api, fake_api):
        fake_api.generate_status = 500
        fake_api.generate_body = {}
        with pytest.raises(ApiError) as exc:
            api.generate("text")
        assert exc.value.message == "Generation failed (HTTP 500)"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        api = StudyApi(ClientConfig(api_base_url="http://api.test"), client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(ApiError) as exc:
            api.upload("notes.txt", b"x", "text/plain")
        assert "connection refused" in exc.value.message
        api.close()


class TestRunGeneration:

    def test_sequential_calls_end_ready(self, view, api, fake_api):
        assert run_generation(view, api) is Phase.READY

        assert [c.url.path for c in fake_api.calls] == ["/upload", "/generate"]
        assert json.loads(fake_api.calls[1].content) == {"text": "Plants use light."}
        assert view.extracted_text == "Plants use light."
        assert len(view.result.flashcards) == 5
        assert view.error is None

    def test_upload_failure_skips_generate(self, view, api, fake_api):
        fake_api.upload_status = 500
        fake_api.upload_body = {"error": "Failed to extract text: bad pdf"}

        assert run_generation(view, api) is Phase.FAILED
        assert view.error == "Failed to extract text: bad pdf"
        assert [c.url.path for c in fake_api.calls] == ["/upload"]
        assert view.result is None

    def test_generate_failure(self, view, api, fake_api):
        fake_api.generate_status = 500
        fake_api.generate_body = {"error": "The AI returned an invalid response. Please try again."}

        assert run_generation(view, api) is Phase.FAILED
        assert view.error == "The AI returned an invalid response. Please try again."
        assert view.result is None

    def test_truncation_is_recorded(self, view, api, fake_api):
        fake_api.generate_body["truncated"] = True
        run_generation(view, api)
        assert view.truncated is True

    def test_no_file_makes_no_calls(self, api, fake_api):
        view = StudyViewState()
        assert run_generation(view, api) is Phase.IDLE
        assert fake_api.calls == []
