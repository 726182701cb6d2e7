from pydantic import BaseModel, field_validator
from enum import Enum
from uuid import UUID
from datetime import datetime
from typing import Optional, Dict, List

ANSWER_KEYS = ("a", "b", "c", "d")


class GameStatusModel(str, Enum):
    in_progress = "in_progress"
    won = "won"
    cashed_out = "cashed_out"
    timed_out = "timed_out"
    failed = "failed"


class FinishReasonModel(str, Enum):
    won = "won"
    cashed_out = "cashed_out"
    timed_out = "timed_out"
    failed = "failed"


class HelpTypeModel(str, Enum):
    audience_help = "audience_help"
    fifty_fifty = "fifty_fifty"


class HelpModel(BaseModel):
    audience_help: Optional[Dict[str, int]] = None
    fifty_fifty: Optional[List[str]] = None


class CurrentQuestionModel(BaseModel):
    """Question as shown to the player. The correct key is never included."""
    level: int
    text: str
    variants: Dict[str, str]
    help: HelpModel


class GameResultModel(BaseModel):
    """Snapshot of a game after an operation, for rendering and accounting."""
    game_id: UUID
    player_id: UUID
    status: GameStatusModel
    current_level: int
    prize: int
    audience_help_used: bool
    fifty_fifty_used: bool
    created_at: datetime
    finished_at: datetime | None
    current_question: Optional[CurrentQuestionModel] = None
    credited: int = 0  # balance credit applied by this operation


class QuestionImportModel(BaseModel):
    text: str
    level: int
    answers: Dict[str, str]
    correct_answer_key: str

    @field_validator("level")
    @classmethod
    def check_level(cls, value: int) -> int:
        if value < 0:
            raise ValueError("level must be >= 0")
        return value

    @field_validator("answers")
    @classmethod
    def check_answers(cls, value: Dict[str, str]) -> Dict[str, str]:
        if sorted(value) != list(ANSWER_KEYS):
            raise ValueError(f"answers must have exactly the keys {', '.join(ANSWER_KEYS)}")
        return value

    @field_validator("correct_answer_key")
    @classmethod
    def check_correct_answer_key(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ANSWER_KEYS:
            raise ValueError(f"correct_answer_key must be one of {', '.join(ANSWER_KEYS)}")
        return value
