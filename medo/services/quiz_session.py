"""
A quiz over a generated QuestionSet, as an explicit state machine:

    not_started ──start()──▶ in_progress ──finish()──▶ completed
         ▲                                                 │
         └─────────────────────restart()───────────────────┘

Multiple-choice answers are checked against the correct option; essay
answers go through the correct_essay flow.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from medo.core.errors import InvalidInput
from medo.flows.common import ModelEngine
from medo.flows.essay import correct_essay
from medo.schemas.quiz import Question, QuestionSet, QuestionType

logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


_TRANSITIONS = {
    QuizState.not_started: {QuizState.in_progress},
    QuizState.in_progress: {QuizState.completed},
    QuizState.completed: {QuizState.not_started},
}


class QuizStateError(InvalidInput):
    """An action that the quiz's current state does not allow."""


class AnswerResult(BaseModel):
    answer: str
    is_correct: bool
    feedback: str


class QuizResult(BaseModel):
    total: int
    answered: int
    correct: int
    score: float  # percent, 0-100


class QuizSession:
    def __init__(self, question_set: QuestionSet):
        if not question_set.questions:
            raise InvalidInput("A quiz needs at least one question.")
        self.questions = list(question_set.questions)
        self.state = QuizState.not_started
        self.answers: Dict[int, AnswerResult] = {}

    def _transition(self, target: QuizState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise QuizStateError(f"Cannot go from '{self.state.value}' to '{target.value}'.")
        self.state = target

    def start(self) -> None:
        self._transition(QuizState.in_progress)

    def restart(self) -> None:
        self._transition(QuizState.not_started)
        self.answers.clear()

    async def answer(self, index: int, answer: str, engine: Optional[ModelEngine] = None) -> AnswerResult:
        if self.state is not QuizState.in_progress:
            raise QuizStateError(f"Answers are only accepted while the quiz is in progress (now '{self.state.value}').")
        if not 0 <= index < len(self.questions):
            raise InvalidInput(f"No question at index {index}.")
        if index in self.answers:
            raise InvalidInput(f"Question {index + 1} is already answered.")
        if not answer or not answer.strip():
            raise InvalidInput("Answer must not be empty.")

        question = self.questions[index]
        if question.type is QuestionType.multiple_choice:
            result = self._check_choice(question, answer)
        else:
            if engine is None:
                raise InvalidInput("Essay answers need a model engine for grading.")
            correction = await correct_essay(
                {
                    "question": question.question,
                    "ideal_answer": question.correct_answer,
                    "user_answer": answer,
                },
                engine,
            )
            result = AnswerResult(answer=answer, is_correct=correction.is_correct, feedback=correction.feedback)

        self.answers[index] = result
        return result

    @staticmethod
    def _check_choice(question: Question, answer: str) -> AnswerResult:
        if answer.strip() not in [o.strip() for o in question.options]:
            raise InvalidInput("Answer is not one of the question's options.")
        return AnswerResult(
            answer=answer,
            is_correct=answer.strip() == question.correct_answer.strip(),
            feedback=question.explanation,
        )

    def finish(self) -> QuizResult:
        self._transition(QuizState.completed)
        return self.result()

    def result(self) -> QuizResult:
        correct = sum(1 for a in self.answers.values() if a.is_correct)
        total = len(self.questions)
        result = QuizResult(
            total=total,
            answered=len(self.answers),
            correct=correct,
            score=round(correct / total * 100, 1),
        )
        logger.info(f"[QUIZ] {result.correct}/{result.total} correct ({result.score}%)")
        return result
