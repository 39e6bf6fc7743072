import pytest

from medo.core.errors import InvalidInput
from medo.schemas.quiz import QuestionSet
from medo.services.quiz_session import QuizSession, QuizState, QuizStateError


@pytest.fixture
def question_set() -> QuestionSet:
    return QuestionSet.model_validate({
        "questions": [
            {
                "question": "2+2?",
                "options": ["3", "4", "5", "6"],
                "correct_answer": "4",
                "explanation": "Two plus two is four.",
                "type": "multiple-choice",
            },
            {
                "question": "Capital of Egypt?",
                "options": ["Cairo", "Giza", "Luxor", "Aswan"],
                "correct_answer": "Cairo",
                "explanation": "Cairo is the capital.",
                "type": "multiple-choice",
            },
            {
                "question": "Why do plants need light?",
                "options": [],
                "correct_answer": "Light powers photosynthesis.",
                "explanation": "Photosynthesis.",
                "type": "essay",
            },
        ]
    })


@pytest.mark.asyncio
async def test_full_quiz_run(question_set, engine):
    quiz = QuizSession(question_set)
    assert quiz.state is QuizState.not_started

    quiz.start()
    first = await quiz.answer(0, "4")
    second = await quiz.answer(1, "Giza")
    engine.replies.append('{"is_correct": true, "feedback": "ممتاز"}')
    third = await quiz.answer(2, "Plants use light for photosynthesis.", engine=engine)

    assert (first.is_correct, second.is_correct, third.is_correct) == (True, False, True)
    assert third.feedback == "ممتاز"

    result = quiz.finish()
    assert quiz.state is QuizState.completed
    assert (result.total, result.answered, result.correct) == (3, 3, 2)
    assert result.score == 66.7


@pytest.mark.asyncio
async def test_answers_only_while_in_progress(question_set):
    quiz = QuizSession(question_set)
    with pytest.raises(QuizStateError):
        await quiz.answer(0, "4")


def test_illegal_transitions(question_set):
    quiz = QuizSession(question_set)
    with pytest.raises(QuizStateError):
        quiz.finish()
    quiz.start()
    with pytest.raises(QuizStateError):
        quiz.start()


@pytest.mark.asyncio
async def test_restart_clears_answers(question_set):
    quiz = QuizSession(question_set)
    quiz.start()
    await quiz.answer(0, "4")
    quiz.finish()

    quiz.restart()
    assert quiz.state is QuizState.not_started
    assert quiz.answers == {}


@pytest.mark.asyncio
async def test_answer_rules(question_set):
    quiz = QuizSession(question_set)
    quiz.start()

    with pytest.raises(InvalidInput):
        await quiz.answer(3, "4")
    with pytest.raises(InvalidInput):
        await quiz.answer(0, "7")
    with pytest.raises(InvalidInput):
        await quiz.answer(2, "an essay answer")

    await quiz.answer(0, "4")
    with pytest.raises(InvalidInput):
        await quiz.answer(0, "3")


def test_empty_question_set_is_rejected():
    with pytest.raises(InvalidInput):
        QuizSession(QuestionSet(questions=[]))
