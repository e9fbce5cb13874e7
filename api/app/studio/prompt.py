from __future__ import annotations

from typing import Tuple


def truncate_text(text: str, max_chars: int) -> Tuple[str, bool]:
    """
    Cut the input to the generation budget. Returns (text, truncated).
    """
    if max_chars <= 0 or len(text) <= max_chars:
        return text, False
    return text[:max_chars], True


def build_study_prompt(text: str) -> str:
    prompt = f"""You are a study assistant. Read the study notes below and create study material from them.

Return ONLY a JSON object, with no explanation and no markdown code fences, in exactly this format:
{{
  "flashcards": [
    {{"question": "...", "answer": "..."}}
  ],
  "quiz": [
    {{
      "question": "...",
      "options": ["A) ...", "B) ...", "C) ...", "D) ..."],
      "answer": "A"
    }}
  ],
  "summary": "..."
}}

Rules you MUST follow:
1) Create between 5 and 8 flashcards.
2) Create between 3 and 5 quiz questions. Each has exactly 4 options labelled A), B), C), D).
3) The quiz "answer" is the single letter of the one correct option.
4) The summary is 3 to 5 sentences.
5) Use ONLY the notes below.

NOTES:
{text}

JSON:
"""
    return prompt
