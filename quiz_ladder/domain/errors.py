"""Domain errors surfaced to the caller of the game service."""


class GameError(Exception):
    """Base class for every caller-visible game rule violation."""


class GameAlreadyInProgress(GameError):
    """The player already owns an unfinished game; `game` is that game."""

    def __init__(self, game):
        self.game = game
        super().__init__(
            f"Player {game.player_id} already has game {game.game_id} in progress"
        )


class NotOwner(GameError):
    pass


class AlreadyFinished(GameError):
    pass


class HelpAlreadyUsed(GameError):
    pass


class NothingToCashOut(GameError):
    pass


class NoPreviousLevel(GameError):
    pass


class InsufficientQuestions(GameError):
    def __init__(self, level: int):
        self.level = level
        super().__init__(f"No unused question available for level {level}")


class GameNotFound(GameError):
    pass


class PlayerNotFound(GameError):
    pass
