from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings
from app.core.errors import UpstreamError

logger = logging.getLogger("llm")


@dataclass(frozen=True)
class ChatResult:
    model: str
    response: str


def upstream_error_message(r: httpx.Response) -> Optional[str]:
    """Pull the provider's own error text out of an error reply, if it sent one."""
    try:
        data = r.json()
    except ValueError:
        text = r.text.strip()
        return text[:500] or None

    if not isinstance(data, dict):
        return None

    err = data.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str) and err.strip():
        return err
    if isinstance(data.get("detail"), str):
        return data["detail"]
    if isinstance(data.get("message"), str):
        return data["message"]
    return None


async def chat_completion(
    client: httpx.AsyncClient,
    prompt: str,
    settings: Settings,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> ChatResult:
    """
    One non-streaming call to {base}/chat/completions (OpenAI-compatible).
    """
    base = settings.llm_base_url.rstrip("/")
    url = f"{base}/chat/completions"

    api_key = (settings.llm_api_key or "").strip()
    if not api_key:
        raise UpstreamError("No LLM API key set. Set LLM_API_KEY in the env file")

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    payload: Dict[str, Any] = {
        "model": settings.llm_model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": settings.llm_temperature if temperature is None else temperature,
        "max_tokens": settings.llm_max_tokens if max_tokens is None else max_tokens,
    }

    try:
        r = await client.post(url, headers=headers, json=payload, timeout=settings.llm_timeout_s)
    except httpx.HTTPError as e:
        logger.warning("llm transport error url=%s err=%s", url, str(e))
        raise UpstreamError(str(e) or None) from e

    if r.status_code >= 400:
        message = upstream_error_message(r)
        logger.warning("llm error status=%s model=%s message=%s", r.status_code, settings.llm_model, message)
        raise UpstreamError(message)

    data: Any = {}
    try:
        data = r.json()
        content = (data.get("choices") or [{}])[0].get("message", {}).get("content", "")
    except (ValueError, AttributeError, IndexError):
        content = ""

    model = settings.llm_model
    if isinstance(data, dict) and data.get("model"):
        model = str(data["model"])

    return ChatResult(model=model, response=str(content or "").strip())
