"""CRUD helpers for players, questions and games.

None of these commit: the service layer opens `session.begin()` and owns the
transaction, so a failure anywhere rolls back everything it wrote.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List
from uuid import UUID, uuid4

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import selectinload
from uuid6 import uuid7

from quiz_ladder.models.dc_models import QuestionImportModel
from quiz_ladder.models.schema_models import GameSchema
from quiz_ladder.models.schemas import Base, Game, GameQuestion, Player, Question


def _game_with_questions():
    return select(Game).options(
        selectinload(Game.game_questions).selectinload(GameQuestion.question)
    )


class CreateData:
    @staticmethod
    async def create_table(engine: AsyncEngine) -> None:
        """Create tables if they do not exist yet"""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @staticmethod
    async def add_player_data(player_name: str, session: AsyncSession) -> Player:
        """Add a player with an empty balance

        Args:
            player_name (str): Display name of the player
        """
        new_player = Player(
            player_id=uuid4(),
            player_name=player_name,
            balance=0,
            created_at=datetime.now(),
        )
        session.add(new_player)
        await session.flush()
        return new_player

    @staticmethod
    async def add_question_data(question: QuestionImportModel, session: AsyncSession) -> Question:
        """Add one question to the shared bank

        Args:
            question (QuestionImportModel): Validated question record
        """
        new_question = Question(
            question_id=uuid7(),
            text=question.text,
            level=question.level,
            answer_a=question.answers["a"],
            answer_b=question.answers["b"],
            answer_c=question.answers["c"],
            answer_d=question.answers["d"],
            correct_answer_key=question.correct_answer_key,
        )
        session.add(new_question)
        await session.flush()
        return new_question

    @staticmethod
    async def add_game_data(
        player_id: UUID,
        questions: List[Question],
        created_at: datetime,
        session: AsyncSession,
    ) -> Game:
        """Add a game together with one game question per level

        Args:
            player_id (UUID): Owner of the new game
            questions (List[Question]): Questions ordered by level
            created_at (datetime): Start of the game's time limit
        """
        new_game = Game(
            game_id=uuid7(),
            player_id=player_id,
            current_level=0,
            prize=0,
            audience_help_used=False,
            fifty_fifty_used=False,
            finish_reason=None,
            created_at=created_at,
            finished_at=None,
            game_questions=[
                GameQuestion(
                    game_question_id=uuid7(),
                    question_id=question.question_id,
                    question=question,
                    level=level,
                    help_hash={},
                )
                for level, question in enumerate(questions)
            ],
        )
        session.add(new_game)
        await session.flush()
        return new_game


class ReadData:
    @staticmethod
    async def read_player(player_id: UUID, session: AsyncSession, for_update: bool = False) -> Player | None:
        """Read a player row, optionally locking it

        Args:
            player_id (UUID): To identify the player
            for_update (bool): Lock the row until the transaction ends
        """
        stmt = select(Player).where(Player.player_id == player_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_game(game_id: UUID, session: AsyncSession, for_update: bool = False) -> Game | None:
        """Read a game with its questions

        Args:
            game_id (UUID): To identify the game
            for_update (bool): Lock the game row until the transaction ends
        """
        stmt = _game_with_questions().where(Game.game_id == game_id)
        if for_update:
            stmt = stmt.with_for_update(of=Game)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_in_progress_game(player_id: UUID, session: AsyncSession) -> Game | None:
        """Read the unfinished game of a player, if any

        Args:
            player_id (UUID): Owner of the game
        """
        stmt = (
            _game_with_questions()
            .where(Game.player_id == player_id, Game.finished_at.is_(None))
            .order_by(Game.created_at.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_games_for_player(player_id: UUID, session: AsyncSession) -> List[Game]:
        """Read all games of a player, newest first"""
        stmt = (
            _game_with_questions()
            .where(Game.player_id == player_id)
            .order_by(Game.created_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def read_question_ids_by_level(level_count: int, session: AsyncSession) -> Dict[int, List[UUID]]:
        """Read candidate question ids for levels 0..level_count-1

        Returns:
            Dict[int, List[UUID]]: Question ids grouped by level, in a stable order
        """
        stmt = (
            select(Question.question_id, Question.level)
            .where(Question.level >= 0, Question.level < level_count)
            .order_by(Question.level, Question.question_id)
        )
        result = await session.execute(stmt)
        ids_by_level: Dict[int, List[UUID]] = defaultdict(list)
        for question_id, level in result.all():
            ids_by_level[level].append(question_id)
        return dict(ids_by_level)

    @staticmethod
    async def read_questions(question_ids: Iterable[UUID], session: AsyncSession) -> Dict[UUID, Question]:
        question_ids = list(question_ids)
        stmt = select(Question).where(Question.question_id.in_(question_ids))
        result = await session.execute(stmt)
        return {question.question_id: question for question in result.scalars().all()}

    @staticmethod
    async def count_questions(session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(Question))
        return result.scalar_one()

    @staticmethod
    async def read_expired_game_ids(deadline: datetime, session: AsyncSession) -> List[UUID]:
        """Read unfinished games created before `deadline`"""
        stmt = (
            select(Game.game_id)
            .where(Game.finished_at.is_(None), Game.created_at < deadline)
            .order_by(Game.created_at)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())


class UpdateData:
    @staticmethod
    def apply_game_state_no_commit(row: Game, game: GameSchema) -> None:
        """Copy the mutable state of `game` onto its row

        Args:
            row (Game): Row loaded in the current transaction
            game (GameSchema): Game after the state machine ran
        """
        row.current_level = game.current_level
        row.prize = game.prize
        row.audience_help_used = game.audience_help_used
        row.fifty_fifty_used = game.fifty_fifty_used
        row.finish_reason = game.finish_reason.value if game.finish_reason else None
        row.finished_at = game.finished_at

        help_by_level = {
            game_question.level: game_question.help_hash.model_dump(exclude_none=True)
            for game_question in game.game_questions
        }
        for question_row in row.game_questions:
            help_hash = help_by_level.get(question_row.level, {})
            if help_hash != (question_row.help_hash or {}):
                question_row.help_hash = help_hash

    @staticmethod
    async def credit_balance_no_commit(player_id: UUID, amount: int, session: AsyncSession) -> None:
        """Add `amount` to the player's balance

        Args:
            player_id (UUID): Player to credit
            amount (int): Prize to add
        """
        stmt = (
            update(Player)
            .where(Player.player_id == player_id)
            .values(balance=Player.balance + amount)
        )
        await session.execute(stmt)
