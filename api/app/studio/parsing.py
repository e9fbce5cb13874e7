from __future__ import annotations

import json
import re
from typing import Any, List

from app.core.errors import FormatError
from app.schemas.study import Flashcard, QuizItem, StudyMaterial


_OPEN_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*")
_CLOSE_FENCE_RE = re.compile(r"```$")


def strip_code_fences(s: str) -> str:
    """
    Return the body of a ```json ... ``` block, or the input unchanged
    (stripped) when there is no fence.

    A fence may share a line with the JSON or sit on its own line. Text
    around a fenced block is dropped.
    """
    s = (s or "").strip()
    if "```" not in s:
        return s

    if s.startswith("```") or s.endswith("```"):
        body = _CLOSE_FENCE_RE.sub("", _OPEN_FENCE_RE.sub("", s, count=1), count=1).strip()
        if body and "```" not in body:
            return body

    lines = s.splitlines()
    out = []
    in_fence = False
    for line in lines:
        if line.strip().startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence:
            out.append(line)
    return "\n".join(out).strip() or s


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_study_material(raw: str) -> StudyMaterial:
    body = strip_code_fences(raw)
    if not body:
        raise FormatError("empty response")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise FormatError(f"not json: {e}") from e

    if not isinstance(data, dict):
        raise FormatError(f"expected a JSON object, got {type(data).__name__}")

    flashcards = []
    for c in _as_list(data.get("flashcards")):
        if isinstance(c, dict):
            flashcards.append(Flashcard(question=_as_str(c.get("question")), answer=_as_str(c.get("answer"))))

    quiz = []
    for q in _as_list(data.get("quiz")):
        if isinstance(q, dict):
            quiz.append(
                QuizItem(
                    question=_as_str(q.get("question")),
                    options=[_as_str(o) for o in _as_list(q.get("options"))],
                    answer=_as_str(q.get("answer")),
                )
            )

    return StudyMaterial(flashcards=flashcards, quiz=quiz, summary=_as_str(data.get("summary")))
