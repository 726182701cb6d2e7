from datetime import datetime, timedelta
from uuid import uuid4

import numpy as np
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quiz_ladder.crud import CreateData
from quiz_ladder.models.dc_models import ANSWER_KEYS, QuestionImportModel
from quiz_ladder.models.schema_models import GameQuestionSchema, GameSchema, QuestionSchema
from quiz_ladder.services.game_db import GameService
from quiz_ladder.services.question_bank import import_questions

START = datetime(2024, 1, 1, 12, 0, 0)
LEVEL_COUNT = 15


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_question_records(level_count: int = LEVEL_COUNT, per_level: int = 4) -> list[QuestionImportModel]:
    return [
        QuestionImportModel(
            text=f"Level {level} question {index}",
            level=level,
            answers={key: f"Answer {key} for {level}/{index}" for key in ANSWER_KEYS},
            correct_answer_key=ANSWER_KEYS[(level + index) % 4],
        )
        for level in range(level_count)
        for index in range(per_level)
    ]


def make_game_question(game_id, level: int) -> GameQuestionSchema:
    question = QuestionSchema(
        question_id=uuid4(),
        text=f"Question {level}",
        level=level,
        answer_a="A",
        answer_b="B",
        answer_c="C",
        answer_d="D",
        correct_answer_key=ANSWER_KEYS[level % 4],
    )
    return GameQuestionSchema(
        game_question_id=uuid4(),
        game_id=game_id,
        question_id=question.question_id,
        level=level,
        question=question,
    )


def make_game(level_count: int = LEVEL_COUNT, created_at: datetime = START) -> GameSchema:
    """In-memory game whose question at level n has correct key ANSWER_KEYS[n % 4]."""
    game_id = uuid4()
    return GameSchema(
        game_id=game_id,
        player_id=uuid4(),
        created_at=created_at,
        game_questions=[make_game_question(game_id, level) for level in range(level_count)],
    )


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await CreateData.create_table(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=engine,
    )


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


@pytest.fixture
def game_service(session_factory, clock, rng):
    return GameService(
        session_factory,
        time_limit=timedelta(minutes=35),
        clock=clock,
        rng=rng,
    )


@pytest.fixture
async def question_bank(session_factory):
    records = make_question_records()
    await import_questions(records, session_factory)
    return records


@pytest.fixture
async def player(game_service):
    return await game_service.create_player("Vadik")


@pytest.fixture
async def another_player(game_service):
    return await game_service.create_player("Another")
