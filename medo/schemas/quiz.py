from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional
from enum import Enum

from medo.schemas.common import MediaReference, NonBlankStr

MAX_QUESTIONS = 20


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class QuestionType(str, Enum):
    multiple_choice = "multiple-choice"
    essay = "essay"


# ── Request ──────────────────────────────────────────────────────────────────

class GenerateQuestionsRequest(BaseModel):
    """Request body for question generation. Text, a file, or both."""
    kind: Literal["generate_questions"] = "generate_questions"
    text: Optional[str] = Field(default=None, description="Educational text to generate questions from")
    file: Optional[MediaReference] = Field(default=None, description="An image or PDF to use as context")
    count: int = Field(..., ge=1, le=MAX_QUESTIONS, description="Number of questions to generate")
    question_type: QuestionType = Field(..., description="multiple-choice or essay")
    difficulty: Difficulty = Field(..., description="Desired difficulty level")
    language: Optional[str] = Field(default=None, description="Language tag, e.g. 'ar'. Defaults to the source's language")

    @field_validator("text")
    @classmethod
    def blank_text_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    @model_validator(mode="after")
    def require_content(self):
        if self.text is None and self.file is None:
            raise ValueError("Provide text, a file, or both.")
        return self


class CorrectEssayRequest(BaseModel):
    """Request body for grading one essay answer."""
    kind: Literal["correct_essay"] = "correct_essay"
    question: NonBlankStr
    ideal_answer: NonBlankStr
    user_answer: NonBlankStr


# ── Response ─────────────────────────────────────────────────────────────────

class Question(BaseModel):
    """
    A generated question.
    multiple-choice: exactly 4 options, correct_answer is one of them.
    essay: no options, correct_answer holds the ideal answer.
    """
    question: NonBlankStr
    options: List[str] = Field(default_factory=list, description="Exactly 4 options for multiple-choice; empty for essay")
    correct_answer: NonBlankStr = Field(..., description="One of the options, or the ideal essay answer")
    explanation: str = Field(..., description="Why the answer is correct / key points the answer should cover")
    type: QuestionType

    @field_validator("options", mode="before")
    @classmethod
    def null_options_are_empty(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def check_shape(self):
        if self.type is QuestionType.multiple_choice:
            if len(self.options) != 4:
                raise ValueError(f"multiple-choice question needs exactly 4 options, got {len(self.options)}")
            matches = [o for o in self.options if o.strip() == self.correct_answer.strip()]
            if not matches:
                raise ValueError("correct_answer is not one of the options")
            # Stored exactly as the option reads, so clients can compare with ==.
            self.correct_answer = matches[0]
        elif self.options:
            raise ValueError("essay question must not carry options")
        return self


class QuestionSet(BaseModel):
    """Questions returned by the generate_questions flow."""
    questions: List[Question]


class Correction(BaseModel):
    """Verdict on a user's essay answer."""
    is_correct: bool = Field(..., description="Whether the answer captures the main points of the ideal answer")
    feedback: NonBlankStr = Field(..., description="Constructive feedback, in Arabic")
