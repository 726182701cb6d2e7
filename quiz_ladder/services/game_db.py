"""DB service layer for game lifecycle use cases.

- Callers never touch DB sessions directly; they call GameService.
- This layer owns session/transaction boundaries: one transaction per operation.
- Ownership and expiry are checked here before the state machine runs.
- A terminal transition and its balance credit are written in the same transaction.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Callable, List
from uuid import UUID

import numpy as np
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quiz_ladder.converter import DataConverter
from quiz_ladder.crud import CreateData, ReadData, UpdateData
from quiz_ladder.domain.errors import (
    GameAlreadyInProgress,
    GameNotFound,
    InsufficientQuestions,
    NotOwner,
    PlayerNotFound,
)
from quiz_ladder.domain.game_rules import DEFAULT_TIME_LIMIT, GameRules
from quiz_ladder.domain.prize_ladder import PrizeLadder
from quiz_ladder.domain.question_selection import select_question_ids
from quiz_ladder.models.dc_models import GameResultModel, HelpTypeModel
from quiz_ladder.models.schema_models import GameSchema, PlayerSchema
from quiz_ladder.models.schemas import Game

data_converter = DataConverter()


class GameService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ladder: PrizeLadder | None = None,
        time_limit: timedelta = DEFAULT_TIME_LIMIT,
        clock: Callable[[], datetime] = datetime.now,
        rng: np.random.Generator | None = None,
    ):
        self.session_factory = session_factory
        self.rules = GameRules(ladder or PrizeLadder(), time_limit)
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng()

    async def start_game(self, player_id: UUID) -> GameResultModel:
        """Create a new game with one question per ladder level.

        Raises:
            PlayerNotFound: Unknown player.
            GameAlreadyInProgress: The player owns an unfinished game; the error carries it.
            InsufficientQuestions: The bank cannot fill every level; nothing is created.
        """
        level_count = self.rules.ladder.size
        async with self._transaction(f"start game for player {player_id}") as session:
            # Locking the player serializes concurrent starts for the same player.
            player = await ReadData.read_player(player_id, session, for_update=True)
            if player is None:
                raise PlayerNotFound(f"Player {player_id} not found")

            existing = await ReadData.read_in_progress_game(player_id, session)
            if existing is not None:
                existing_game = data_converter.convert_game_to_gameschema(existing)
                # An expired game must not block a new one.
                if not self.rules.time_out(existing_game, self.clock()):
                    logging.info(f"Player {player_id} already plays game {existing.game_id}")
                    raise GameAlreadyInProgress(existing_game)
                await self._persist_terminal(existing, existing_game, session)

            ids_by_level = await ReadData.read_question_ids_by_level(level_count, session)
            try:
                question_ids = select_question_ids(ids_by_level, level_count, self.rng)
            except InsufficientQuestions as e:
                logging.error(f"Failed to create game for player {player_id}: {e}")
                raise

            questions = await ReadData.read_questions(question_ids, session)
            row = await CreateData.add_game_data(
                player_id,
                [questions[question_id] for question_id in question_ids],
                self.clock(),
                session,
            )
            game = data_converter.convert_game_to_gameschema(row)

        logging.info(f"Created game {game.game_id} for player {player_id}")
        return data_converter.convert_gameschema_to_result(game, self.rules)

    async def answer(self, game_id: UUID, player_id: UUID, letter: str) -> GameResultModel:
        def operation(game: GameSchema) -> bool:
            return self.rules.answer_current_question(game, letter, self.clock())

        return await self._run(game_id, player_id, operation, "answer")

    async def use_help(self, game_id: UUID, player_id: UUID, help_type: HelpTypeModel) -> GameResultModel:
        help_type = HelpTypeModel(help_type)

        def operation(game: GameSchema) -> bool:
            self.rules.use_help(game, help_type, self.rng)
            return False

        return await self._run(game_id, player_id, operation, f"use_help:{help_type.value}")

    async def take_money(self, game_id: UUID, player_id: UUID) -> GameResultModel:
        def operation(game: GameSchema) -> bool:
            return self.rules.take_money(game, self.clock())

        return await self._run(game_id, player_id, operation, "take_money")

    async def read_game(self, game_id: UUID, player_id: UUID) -> GameResultModel:
        """Read a game snapshot for its owner, expiring it first if needed."""
        return await self._run(game_id, player_id, lambda game: False, "read")

    async def time_out(self, game_id: UUID) -> GameResultModel:
        """Expire a game if its time limit has passed. Safe to call repeatedly."""
        result, _ = await self._time_out(game_id)
        return result

    async def sweep_expired_games(self) -> int:
        """Time out every stale in-progress game, each in its own transaction.

        Returns:
            int: Number of games this sweep finished
        """
        deadline = self.clock() - self.rules.time_limit
        async with self.session_factory() as session:
            game_ids = await ReadData.read_expired_game_ids(deadline, session)

        timed_out = 0
        for game_id in game_ids:
            _, finished = await self._time_out(game_id)
            if finished:
                timed_out += 1
        if timed_out:
            logging.info(f"Sweep timed out {timed_out} game(s)")
        return timed_out

    async def find_in_progress_game_for(self, player_id: UUID) -> GameSchema | None:
        async with self.session_factory() as session:
            row = await ReadData.read_in_progress_game(player_id, session)
            if row is None:
                return None
            return data_converter.convert_game_to_gameschema(row)

    async def read_games_for_player(self, player_id: UUID) -> List[GameResultModel]:
        async with self.session_factory() as session:
            rows = await ReadData.read_games_for_player(player_id, session)
            games = [data_converter.convert_game_to_gameschema(row) for row in rows]
        return [data_converter.convert_gameschema_to_result(game, self.rules) for game in games]

    async def read_player(self, player_id: UUID) -> PlayerSchema:
        async with self.session_factory() as session:
            player = await ReadData.read_player(player_id, session)
            if player is None:
                raise PlayerNotFound(f"Player {player_id} not found")
            return PlayerSchema.model_validate(player)

    async def create_player(self, player_name: str) -> PlayerSchema:
        async with self._transaction("create player") as session:
            player = await CreateData.add_player_data(player_name, session)
            player_data = PlayerSchema.model_validate(player)
        logging.info(f"Created player {player_data.player_id}")
        return player_data

    @asynccontextmanager
    async def _transaction(self, action: str):
        """Open a session and a transaction; storage errors are logged and re-raised."""
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except SQLAlchemyError as e:
                logging.error(f"Failed to {action}: {e}")
                raise

    async def _run(self, game_id: UUID, player_id: UUID, operation, operation_name: str) -> GameResultModel:
        """Load, guard, mutate and persist one game in a single transaction."""
        async with self._transaction(f"{operation_name} on game {game_id}") as session:
            row = await ReadData.read_game(game_id, session, for_update=True)
            if row is None:
                raise GameNotFound(f"Game {game_id} not found")
            if row.player_id != player_id:
                logging.warning(f"Player {player_id} tried {operation_name} on game {game_id}")
                raise NotOwner(f"Game {game_id} does not belong to player {player_id}")

            game = data_converter.convert_game_to_gameschema(row)
            if self.rules.time_out(game, self.clock()):
                finished = True
            else:
                finished = operation(game)

            credited = 0
            if finished:
                credited = await self._persist_terminal(row, game, session)
            else:
                UpdateData.apply_game_state_no_commit(row, game)
        return data_converter.convert_gameschema_to_result(game, self.rules, credited)

    async def _time_out(self, game_id: UUID) -> tuple[GameResultModel, bool]:
        async with self._transaction(f"time out game {game_id}") as session:
            row = await ReadData.read_game(game_id, session, for_update=True)
            if row is None:
                raise GameNotFound(f"Game {game_id} not found")
            game = data_converter.convert_game_to_gameschema(row)
            credited = 0
            finished = self.rules.time_out(game, self.clock())
            if finished:
                credited = await self._persist_terminal(row, game, session)
        return data_converter.convert_gameschema_to_result(game, self.rules, credited), finished

    async def _persist_terminal(self, row: Game, game: GameSchema, session: AsyncSession) -> int:
        """Write a just-finished game and credit its prize in the open transaction."""
        UpdateData.apply_game_state_no_commit(row, game)
        await session.flush()
        credited = 0
        if game.prize > 0:
            await UpdateData.credit_balance_no_commit(game.player_id, game.prize, session)
            credited = game.prize
        logging.info(
            f"Game {game.game_id} finished as {game.status.value} "
            f"at level {game.current_level} with prize {game.prize}"
        )
        return credited
