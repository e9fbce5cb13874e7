from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.schemas.study import StudyMaterial
from ui.config import ClientConfig
from ui.state import Phase, StudyViewState

logger = logging.getLogger("ui.client")


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class Generated:
    material: StudyMaterial
    truncated: bool
    input_chars: int


def _error_from(r: httpx.Response, fallback: str) -> ApiError:
    message = None
    try:
        data = r.json()
        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
    except ValueError:
        pass
    return ApiError(message or f"{fallback} (HTTP {r.status_code})", status_code=r.status_code)


def _json(r: httpx.Response, fallback: str) -> Dict[str, Any]:
    try:
        data = r.json()
    except ValueError as e:
        raise ApiError(f"{fallback}: the server did not return JSON", status_code=r.status_code) from e
    if not isinstance(data, dict):
        raise ApiError(f"{fallback}: unexpected response from the server", status_code=r.status_code)
    return data


class StudyApi:
    """Thin wrapper over the /upload and /generate endpoints."""

    def __init__(self, config: ClientConfig, client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._client = client

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.config.request_timeout_s)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def upload(self, name: str, data: bytes, content_type: str) -> str:
        files = {"file": (name, data, content_type or "application/octet-stream")}
        try:
            r = self._http().post(f"{self.config.api_base_url}/upload", files=files)
        except httpx.HTTPError as e:
            raise ApiError(f"Upload failed: {e}") from e
        if r.status_code >= 400:
            raise _error_from(r, "Upload failed")
        return str(_json(r, "Upload failed").get("text", ""))

    def generate(self, text: str) -> Generated:
        payload: Dict[str, Any] = {"text": text}
        try:
            r = self._http().post(f"{self.config.api_base_url}/generate", json=payload)
        except httpx.HTTPError as e:
            raise ApiError(f"Generation failed: {e}") from e
        if r.status_code >= 400:
            raise _error_from(r, "Generation failed")
        data = _json(r, "Generation failed")
        try:
            material = StudyMaterial.model_validate(data.get("result") or {})
        except PydanticValidationError as e:
            raise ApiError("Generation failed: unexpected response from the server") from e
        return Generated(
            material=material,
            truncated=bool(data.get("truncated", False)),
            input_chars=int(data.get("input_chars", 0) or 0),
        )


def run_generation(state: StudyViewState, api: StudyApi) -> Phase:
    """
    Upload, then generate. The second call needs the first call's text,
    so they run one after the other. Ends in READY or FAILED.
    """
    if not state.begin_generation():
        return state.phase
    return complete_generation(state, api)


def complete_generation(state: StudyViewState, api: StudyApi) -> Phase:
    """Second half of run_generation, for callers that already moved to GENERATING."""
    if state.phase is not Phase.GENERATING or state.file is None:
        return state.phase

    selected = state.file
    try:
        text = api.upload(selected.name, selected.data, selected.content_type)
        state.record_extraction(text)
        generated = api.generate(text)
    except ApiError as e:
        logger.warning("generation failed file=%s err=%s", selected.name, e.message)
        state.fail(e.message)
        return state.phase

    state.succeed(generated.material, truncated=generated.truncated)
    logger.info(
        "generation ready file=%s flashcards=%s quiz=%s truncated=%s",
        selected.name,
        len(generated.material.flashcards),
        len(generated.material.quiz),
        generated.truncated,
    )
    return state.phase
