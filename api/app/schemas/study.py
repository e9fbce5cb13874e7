from typing import List, Optional
from pydantic import BaseModel, Field


class Flashcard(BaseModel):
    question: str = ""
    answer: str = ""


class QuizItem(BaseModel):
    question: str = ""
    options: List[str] = Field(default_factory=list)  # "A) ...", "B) ...", ...
    answer: str = ""  # single letter


class StudyMaterial(BaseModel):
    flashcards: List[Flashcard] = Field(default_factory=list)
    quiz: List[QuizItem] = Field(default_factory=list)
    summary: str = ""


class UploadResponse(BaseModel):
    success: bool = True
    text: str
    content_type: str
    chars: int


class GenerateRequest(BaseModel):
    text: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool = True
    result: StudyMaterial
    truncated: bool
    input_chars: int


class ErrorResponse(BaseModel):
    error: str
