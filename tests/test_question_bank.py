import json

import pytest
from pydantic import ValidationError

from quiz_ladder.models.schemas import Question
from quiz_ladder.services.question_bank import import_questions_if_empty, read_question_file

from tests.conftest import count_rows

RECORDS = [
    {
        "text": "Capital of France?",
        "level": 0,
        "answers": {"a": "Paris", "b": "Rome", "c": "Berlin", "d": "Madrid"},
        "correct_answer_key": "A",
    },
    {
        "text": "2 + 2?",
        "level": 1,
        "answers": {"a": "3", "b": "4", "c": "5", "d": "22"},
        "correct_answer_key": "b",
    },
]


def write_records(tmp_path, records):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_read_question_file(tmp_path):
    questions = read_question_file(write_records(tmp_path, RECORDS))

    assert [question.level for question in questions] == [0, 1]
    assert questions[0].correct_answer_key == "a"
    assert questions[1].answers["b"] == "4"


@pytest.mark.parametrize(
    "change",
    [
        {"answers": {"a": "1", "b": "2", "c": "3"}},
        {"correct_answer_key": "e"},
        {"level": -1},
    ],
)
def test_read_question_file_rejects_bad_records(tmp_path, change):
    with pytest.raises(ValidationError):
        read_question_file(write_records(tmp_path, [{**RECORDS[0], **change}]))


async def test_import_only_into_empty_bank(tmp_path, session_factory):
    path = write_records(tmp_path, RECORDS)

    assert await import_questions_if_empty(path, session_factory) == 2
    assert await import_questions_if_empty(path, session_factory) == 0
    assert await count_rows(session_factory, Question) == 2
