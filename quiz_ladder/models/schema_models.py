from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from uuid import UUID
from datetime import datetime

from quiz_ladder.models.dc_models import (
    FinishReasonModel,
    GameStatusModel,
    HelpModel,
)


class PlayerSchema(BaseModel):
    player_id: UUID
    player_name: str
    balance: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QuestionSchema(BaseModel):
    question_id: UUID
    text: str
    level: int
    answer_a: str
    answer_b: str
    answer_c: str
    answer_d: str
    correct_answer_key: str

    class Config:
        from_attributes = True

    @property
    def variants(self) -> Dict[str, str]:
        return {
            "a": self.answer_a,
            "b": self.answer_b,
            "c": self.answer_c,
            "d": self.answer_d,
        }


class GameQuestionSchema(BaseModel):
    game_question_id: UUID
    game_id: UUID
    question_id: UUID
    level: int
    help_hash: HelpModel = Field(default_factory=HelpModel)
    question: QuestionSchema

    class Config:
        from_attributes = True

    @property
    def correct_answer_key(self) -> str:
        return self.question.correct_answer_key

    @property
    def variants(self) -> Dict[str, str]:
        return self.question.variants


class GameSchema(BaseModel):
    game_id: UUID
    player_id: UUID
    current_level: int = 0
    prize: int = 0
    audience_help_used: bool = False
    fifty_fifty_used: bool = False
    finish_reason: FinishReasonModel | None = None
    created_at: datetime
    finished_at: datetime | None = None
    game_questions: List[GameQuestionSchema] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @property
    def finished(self) -> bool:
        return self.finished_at is not None

    @property
    def status(self) -> GameStatusModel:
        if self.finished_at is None:
            return GameStatusModel.in_progress
        return GameStatusModel(self.finish_reason.value)
