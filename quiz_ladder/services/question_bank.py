"""Loading the shared question bank from a JSON file.

The file holds a list of records shaped like QuestionImportModel:
    {"text": ..., "level": 0, "answers": {"a": ..., "b": ..., "c": ..., "d": ...},
     "correct_answer_key": "a"}
"""

import json
import logging
import pathlib
from typing import List

from pydantic import TypeAdapter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quiz_ladder.crud import CreateData, ReadData
from quiz_ladder.models.dc_models import QuestionImportModel

question_list_adapter = TypeAdapter(List[QuestionImportModel])


def read_question_file(path: str | pathlib.Path) -> List[QuestionImportModel]:
    """Read and validate a question file

    Raises:
        pydantic.ValidationError: A record is malformed
    """
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    return question_list_adapter.validate_python(records)


async def import_questions(
    questions: List[QuestionImportModel],
    session_factory: async_sessionmaker[AsyncSession],
) -> int:
    """Add questions to the bank in one transaction

    Returns:
        int: Number of questions added
    """
    async with session_factory() as session:
        try:
            async with session.begin():
                for question in questions:
                    await CreateData.add_question_data(question, session)
        except SQLAlchemyError as e:
            logging.error(f"Failed to import questions: {e}")
            raise
    logging.info(f"Imported {len(questions)} question(s)")
    return len(questions)


async def import_questions_if_empty(
    path: str | pathlib.Path,
    session_factory: async_sessionmaker[AsyncSession],
) -> int:
    """Import a question file unless the bank already holds questions

    Returns:
        int: Number of questions added, 0 when the bank was already filled
    """
    async with session_factory() as session:
        count = await ReadData.count_questions(session)
    if count:
        logging.info(f"Question bank already holds {count} question(s), skip {path}")
        return 0
    return await import_questions(read_question_file(path), session_factory)
