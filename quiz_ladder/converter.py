from quiz_ladder.domain.game_rules import GameRules
from quiz_ladder.models.dc_models import CurrentQuestionModel, GameResultModel, GameStatusModel
from quiz_ladder.models.schema_models import GameSchema
from quiz_ladder.models.schemas import Game


class DataConverter:
    """This class is used to convert data between different formats."""

    def convert_game_to_gameschema(self, game: Game) -> GameSchema:
        """Convert a game row, questions included, to the GameSchema the rules work on"""
        return GameSchema.model_validate(game)

    def convert_gameschema_to_result(
        self, game: GameSchema, rules: GameRules, credited: int = 0
    ) -> GameResultModel:
        """Convert the GameSchema to the GameResultModel handed to the caller

        Args:
            game (GameSchema): Game after the operation
            rules (GameRules): Rules used to locate the current question
            credited (int): Balance credit applied by the operation

        Returns:
            GameResultModel: Snapshot of the game; the current question is only
                included while the game is in progress
        """
        current_question = None
        game_question = rules.current_game_question(game)
        if game.status == GameStatusModel.in_progress and game_question is not None:
            current_question = CurrentQuestionModel(
                level=game_question.level,
                text=game_question.question.text,
                variants=game_question.variants,
                help=game_question.help_hash.model_copy(),
            )

        return GameResultModel(
            game_id=game.game_id,
            player_id=game.player_id,
            status=game.status,
            current_level=game.current_level,
            prize=game.prize,
            audience_help_used=game.audience_help_used,
            fifty_fifty_used=game.fifty_fifty_used,
            created_at=game.created_at,
            finished_at=game.finished_at,
            current_question=current_question,
            credited=credited,
        )
