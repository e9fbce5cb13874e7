"""
View state for the study UI.

The page moves through IDLE -> SELECTED -> GENERATING -> READY | FAILED and
reset() always returns to IDLE. Inside READY the active tab is tracked along
with one deck per tab: flashcards flip between UNREVEALED and REVEALED, quiz
questions go from UNANSWERED to SUBMITTED.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.schemas.study import Flashcard, QuizItem, StudyMaterial


class Phase(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class Tab(str, Enum):
    FLASHCARDS = "Flashcards"
    QUIZ = "Quiz"
    SUMMARY = "Summary"


class CardFace(str, Enum):
    UNREVEALED = "unrevealed"
    REVEALED = "revealed"


class AnswerState(str, Enum):
    UNANSWERED = "unanswered"
    SUBMITTED = "submitted"


def option_letter(option: str) -> str:
    """'B) Paris' -> 'B'"""
    s = (option or "").strip()
    return s[:1].upper() if s else ""


class _Deck(ABC):
    """Index over a fixed number of items. Moving always lands on a fresh item."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.index = 0

    def go_to(self, index: int) -> None:
        if self.size == 0:
            return
        index = max(0, min(self.size - 1, index))
        if index != self.index:
            self.index = index
            self._reset_item(index)

    def next(self) -> None:
        self.go_to(self.index + 1)

    def prev(self) -> None:
        self.go_to(self.index - 1)

    @property
    def has_prev(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.size - 1

    @abstractmethod
    def _reset_item(self, index: int) -> None:
        """Put the item at `index` back in its initial state."""


class FlashcardDeck(_Deck):
    def __init__(self, cards: List[Flashcard]) -> None:
        super().__init__(len(cards))
        self.cards = cards
        self.faces = [CardFace.UNREVEALED for _ in cards]

    @property
    def current(self) -> Optional[Flashcard]:
        return self.cards[self.index] if self.cards else None

    @property
    def face(self) -> CardFace:
        return self.faces[self.index] if self.cards else CardFace.UNREVEALED

    def flip(self) -> None:
        if not self.cards:
            return
        self.faces[self.index] = (
            CardFace.UNREVEALED if self.faces[self.index] is CardFace.REVEALED else CardFace.REVEALED
        )

    def _reset_item(self, index: int) -> None:
        self.faces[index] = CardFace.UNREVEALED


class QuizDeck(_Deck):
    def __init__(self, items: List[QuizItem]) -> None:
        super().__init__(len(items))
        self.items = items
        self.states = [AnswerState.UNANSWERED for _ in items]
        self.selected: List[Optional[str]] = [None for _ in items]

    @property
    def current(self) -> Optional[QuizItem]:
        return self.items[self.index] if self.items else None

    @property
    def state(self) -> AnswerState:
        return self.states[self.index] if self.items else AnswerState.UNANSWERED

    @property
    def selection(self) -> Optional[str]:
        return self.selected[self.index] if self.items else None

    def select(self, option: str) -> None:
        item = self.current
        if item is None or self.state is AnswerState.SUBMITTED:
            return
        if option in item.options:
            self.selected[self.index] = option

    def submit(self) -> bool:
        if self.current is None or self.state is AnswerState.SUBMITTED or self.selection is None:
            return False
        self.states[self.index] = AnswerState.SUBMITTED
        return True

    def correct_option(self) -> Optional[str]:
        item = self.current
        if item is None:
            return None
        answer = item.answer.strip().upper()[:1]
        for opt in item.options:
            if option_letter(opt) == answer:
                return opt
        return None

    def is_correct(self) -> bool:
        item = self.current
        if item is None or self.selection is None:
            return False
        return bool(item.answer) and option_letter(self.selection) == item.answer.strip().upper()[:1]

    def _reset_item(self, index: int) -> None:
        self.states[index] = AnswerState.UNANSWERED
        self.selected[index] = None


@dataclass
class SelectedFile:
    name: str
    data: bytes
    content_type: str
    file_id: Optional[str] = None  # the uploader widget's id, new for every pick


@dataclass
class StudyViewState:
    phase: Phase = Phase.IDLE
    file: Optional[SelectedFile] = None
    extracted_text: Optional[str] = None
    result: Optional[StudyMaterial] = None
    truncated: bool = False
    error: Optional[str] = None
    tab: Tab = Tab.FLASHCARDS
    flashcards: FlashcardDeck = field(default_factory=lambda: FlashcardDeck([]))
    quiz: QuizDeck = field(default_factory=lambda: QuizDeck([]))

    @property
    def trigger_enabled(self) -> bool:
        return self.file is not None and self.phase is not Phase.GENERATING

    def is_current_file(self, file_id: Optional[str]) -> bool:
        return self.file is not None and file_id is not None and self.file.file_id == file_id

    def select_file(
        self, name: str, data: bytes, content_type: str, file_id: Optional[str] = None
    ) -> bool:
        if self.phase is Phase.GENERATING:
            return False
        self.file = SelectedFile(name=name, data=data, content_type=content_type, file_id=file_id)
        self._clear_output()
        self.phase = Phase.SELECTED
        return True

    def begin_generation(self) -> bool:
        if not self.trigger_enabled:
            return False
        self._clear_output()
        self.phase = Phase.GENERATING
        return True

    def record_extraction(self, text: str) -> None:
        if self.phase is Phase.GENERATING:
            self.extracted_text = text

    def succeed(self, material: StudyMaterial, truncated: bool = False) -> None:
        if self.phase is not Phase.GENERATING:
            return
        self.result = material
        self.truncated = truncated
        self.tab = Tab.FLASHCARDS
        self.flashcards = FlashcardDeck(material.flashcards)
        self.quiz = QuizDeck(material.quiz)
        self.phase = Phase.READY

    def fail(self, message: str) -> None:
        if self.phase is not Phase.GENERATING:
            return
        self.error = message or "Something went wrong"
        self.phase = Phase.FAILED

    def reset(self) -> None:
        self.file = None
        self._clear_output()
        self.phase = Phase.IDLE

    def set_tab(self, tab: Tab) -> None:
        if self.phase is Phase.READY:
            self.tab = Tab(tab)

    def _clear_output(self) -> None:
        self.extracted_text = None
        self.result = None
        self.truncated = False
        self.error = None
        self.tab = Tab.FLASHCARDS
        self.flashcards = FlashcardDeck([])
        self.quiz = QuizDeck([])
