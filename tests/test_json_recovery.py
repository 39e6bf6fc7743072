import json

import pytest

from medo.core.errors import MalformedModelOutput
from medo.schemas.quiz import Correction, QuestionSet
from medo.schemas.text import Summary
from medo.services.json_recovery import extract_json, parse_model_output


def test_fenced_json_inside_prose():
    raw = "Here is your answer:\n```json\n{\"a\":1}\n```\nHope that helps!"
    assert extract_json(raw) == {"a": 1}


def test_plain_text_is_rejected():
    with pytest.raises(MalformedModelOutput):
        extract_json("not json at all")


@pytest.mark.parametrize("raw", ["", "   \n  "])
def test_blank_response_is_rejected(raw):
    with pytest.raises(MalformedModelOutput):
        extract_json(raw)


def test_clean_json_round_trips_unchanged():
    value = {
        "title": "التمثيل الضوئي",
        "main_ideas": [{"text": "الضوء", "sub_points": [{"text": "الكلوروفيل"}]}],
        "count": 3,
        "flag": False,
    }
    pretty = json.dumps(value, indent=2, ensure_ascii=False)
    assert extract_json(pretty) == json.loads(pretty)


def test_object_surrounded_by_prose_without_fence():
    raw = 'Sure! {"is_correct": true, "feedback": "أحسنت"} Let me know.'
    assert extract_json(raw) == {"is_correct": True, "feedback": "أحسنت"}


def test_top_level_array():
    assert extract_json("The list: [1, 2, 3] as requested") == [1, 2, 3]


def test_broken_json_in_fence_is_not_repaired():
    with pytest.raises(MalformedModelOutput):
        extract_json("```json\n{\"a\": 1,,}\n```")


def test_schema_violation_is_malformed_output():
    with pytest.raises(MalformedModelOutput):
        parse_model_output(Correction, '{"is_correct": true}')


def test_multiple_choice_with_three_options_is_malformed_output():
    raw = json.dumps({
        "questions": [{
            "question": "2+2?",
            "options": ["3", "4", "5"],
            "correct_answer": "4",
            "explanation": "arithmetic",
            "type": "multiple-choice",
        }]
    })
    with pytest.raises(MalformedModelOutput):
        parse_model_output(QuestionSet, raw)


def test_valid_payload_parses_into_model():
    correction = parse_model_output(Correction, '```json\n{"is_correct": false, "feedback": "ناقص"}\n```')
    assert correction.is_correct is False
    assert correction.feedback == "ناقص"


def test_bracketed_prose_before_the_payload():
    raw = 'Here are the [5] questions you asked for:\n{"a": 1}'
    assert extract_json(raw) == {"a": 1}


def test_unparseable_brackets_do_not_hide_a_later_object():
    summary = parse_model_output(Summary, 'Sure [see note] here: {"summary": "ok"}')
    assert summary.summary == "ok"
