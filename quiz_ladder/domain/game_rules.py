"""Game state machine.

A game starts in progress at level 0 and ends exactly once as won, cashed out,
timed out or failed. Every method mutates the given `GameSchema` in place and
never touches storage; the caller persists the result and applies any credit.

Methods that can end a game return True when *this* call ended it.
"""

from datetime import datetime, timedelta

import numpy as np

from quiz_ladder.domain.errors import (
    AlreadyFinished,
    HelpAlreadyUsed,
    NoPreviousLevel,
    NothingToCashOut,
)
from quiz_ladder.domain.help_rules import audience_distribution, fifty_fifty
from quiz_ladder.domain.prize_ladder import PrizeLadder
from quiz_ladder.models.dc_models import ANSWER_KEYS, FinishReasonModel, HelpTypeModel
from quiz_ladder.models.schema_models import GameQuestionSchema, GameSchema

DEFAULT_TIME_LIMIT = timedelta(minutes=35)


class GameRules:
    def __init__(self, ladder: PrizeLadder, time_limit: timedelta = DEFAULT_TIME_LIMIT):
        self.ladder = ladder
        self.time_limit = time_limit

    def is_expired(self, game: GameSchema, now: datetime) -> bool:
        return now - game.created_at > self.time_limit

    def current_game_question(self, game: GameSchema) -> GameQuestionSchema | None:
        """Question at `current_level`; None once every level is answered."""
        if game.current_level >= len(game.game_questions):
            return None
        return game.game_questions[game.current_level]

    def previous_level(self, game: GameSchema) -> int:
        if game.current_level == 0:
            raise NoPreviousLevel(f"Game {game.game_id} has not passed any level yet")
        return game.current_level - 1

    def previous_game_question(self, game: GameSchema) -> GameQuestionSchema:
        return game.game_questions[self.previous_level(game)]

    def answer_current_question(self, game: GameSchema, letter: str, now: datetime) -> bool:
        """Grade `letter` against the current question.

        An expired game times out instead and the letter is ignored.
        """
        self._ensure_in_progress(game)
        if self.is_expired(game, now):
            self._finish(
                game,
                FinishReasonModel.timed_out,
                self.ladder.fireproof_prize_for(game.current_level),
                now,
            )
            return True

        game_question = self.current_game_question(game)
        if (letter or "").strip().lower() != game_question.correct_answer_key:
            self._finish(
                game,
                FinishReasonModel.failed,
                self.ladder.fireproof_prize_for(game.current_level),
                now,
            )
            return True

        game.current_level += 1
        if game.current_level == self.ladder.size:
            self._finish(
                game, FinishReasonModel.won, self.ladder.prize_for(self.ladder.size), now
            )
            return True
        return False

    def use_help(
        self, game: GameSchema, help_type: HelpTypeModel, rng: np.random.Generator
    ) -> None:
        """Apply a one-time aid to the current question.

        Raises:
            AlreadyFinished: the game is over.
            HelpAlreadyUsed: this aid was already used in the game; nothing changes.
        """
        self._ensure_in_progress(game)
        help_type = HelpTypeModel(help_type)
        game_question = self.current_game_question(game)
        keys = list(ANSWER_KEYS)

        if help_type == HelpTypeModel.audience_help:
            if game.audience_help_used:
                raise HelpAlreadyUsed(f"Audience help already used in game {game.game_id}")
            game_question.help_hash.audience_help = audience_distribution(
                keys, game_question.correct_answer_key, rng
            )
            game.audience_help_used = True
        else:
            if game.fifty_fifty_used:
                raise HelpAlreadyUsed(f"Fifty-fifty already used in game {game.game_id}")
            game_question.help_hash.fifty_fifty = fifty_fifty(
                keys, game_question.correct_answer_key, rng
            )
            game.fifty_fifty_used = True

    def take_money(self, game: GameSchema, now: datetime) -> bool:
        self._ensure_in_progress(game)
        if game.current_level == 0:
            raise NothingToCashOut(f"Game {game.game_id} has no completed level to cash out")
        self._finish(
            game,
            FinishReasonModel.cashed_out,
            self.ladder.prize_for(game.current_level),
            now,
        )
        return True

    def time_out(self, game: GameSchema, now: datetime) -> bool:
        """Finish an expired game. No-op for finished or still-running games."""
        if game.finished or not self.is_expired(game, now):
            return False
        self._finish(
            game,
            FinishReasonModel.timed_out,
            self.ladder.fireproof_prize_for(game.current_level),
            now,
        )
        return True

    def _ensure_in_progress(self, game: GameSchema) -> None:
        if game.finished:
            raise AlreadyFinished(f"Game {game.game_id} is already {game.status.value}")

    def _finish(
        self, game: GameSchema, reason: FinishReasonModel, prize: int, now: datetime
    ) -> None:
        game.prize = prize
        game.finish_reason = reason
        game.finished_at = now
