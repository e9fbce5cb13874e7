from __future__ import annotations

from typing import List

from app.schemas.study import Flashcard, QuizItem, StudyMaterial


def format_flashcard(card: Flashcard) -> str:
    return f"Q: {card.question}\nA: {card.answer}"


def format_quiz_item(item: QuizItem) -> str:
    lines = [item.question]
    lines.extend(item.options)
    lines.append(f"Answer: {item.answer}")
    return "\n".join(lines)


def format_study_material(material: StudyMaterial) -> str:
    """
    Plain-text export used for the download button. One-way: nothing reads it back.
    """
    out: List[str] = ["FLASHCARDS", ""]
    for i, card in enumerate(material.flashcards, start=1):
        out.append(f"{i}. {format_flashcard(card)}")
        out.append("")

    out.extend(["QUIZ", ""])
    for i, item in enumerate(material.quiz, start=1):
        out.append(f"{i}. {format_quiz_item(item)}")
        out.append("")

    out.extend(["SUMMARY", "", material.summary])
    return "\n".join(out).rstrip() + "\n"
