from __future__ import annotations

import logging
import os
import re
from typing import Callable, Dict, Optional

import fitz

from app.core.errors import UpstreamError, ValidationError

logger = logging.getLogger("parser")

PDF = "application/pdf"
TEXT = "text/plain"

EXTENSION_TYPES = {".pdf": PDF, ".txt": TEXT}
GENERIC_TYPES = {"", "application/octet-stream"}

UNSUPPORTED_MESSAGE = "Only PDF and plain-text files are allowed"

_WS_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def extract_pdf(path: str) -> str:
    parts = []
    with fitz.open(path) as doc:
        for i in range(doc.page_count):
            page = doc.load_page(i)
            parts.append(page.get_text("text") or "")
    return "\n".join(parts)


def extract_plain_text(path: str) -> str:
    with open(path, "rb") as f:
        data = f.read()
    return data.decode("utf-8", errors="replace")


EXTRACTORS: Dict[str, Callable[[str], str]] = {
    PDF: extract_pdf,
    TEXT: extract_plain_text,
}


def resolve_content_type(filename: Optional[str], declared: Optional[str]) -> str:
    """
    Map an upload to one of the supported content types.

    The declared type wins when it is supported. Browsers sometimes send
    application/octet-stream, in which case the extension decides.
    """
    declared = (declared or "").split(";", 1)[0].strip().lower()
    if declared in EXTRACTORS:
        return declared

    if declared in GENERIC_TYPES:
        ext = os.path.splitext((filename or "").lower())[1]
        if ext in EXTENSION_TYPES:
            return EXTENSION_TYPES[ext]

    raise ValidationError(UNSUPPORTED_MESSAGE)


def extract_text(path: str, content_type: str) -> str:
    extractor = EXTRACTORS.get(content_type)
    if extractor is None:
        raise ValidationError(UNSUPPORTED_MESSAGE)

    try:
        raw = extractor(path)
    except Exception as e:
        logger.exception("extraction failed content_type=%s", content_type)
        raise UpstreamError(f"Failed to extract text: {e}") from e

    text = normalize_whitespace(raw)
    if not text:
        raise ValidationError("No readable text found in the document")
    return text
