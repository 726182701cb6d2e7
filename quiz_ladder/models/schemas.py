from sqlalchemy import ForeignKey, Index, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, TEXT, Boolean, DateTime, Integer, String, Uuid
from uuid import uuid4
from uuid6 import uuid7
from datetime import datetime


class Base(DeclarativeBase):
    pass


class Player(Base):
    __tablename__ = "player"
    player_id = Column(Uuid, primary_key=True, default=uuid4)
    player_name = Column(String, nullable=False)
    balance = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    games = relationship("Game", back_populates="player")


class Question(Base):
    __tablename__ = "question"
    question_id = Column(Uuid, primary_key=True, default=uuid7)
    text = Column(TEXT, nullable=False)
    level = Column(Integer, nullable=False, index=True)
    answer_a = Column(String, nullable=False)
    answer_b = Column(String, nullable=False)
    answer_c = Column(String, nullable=False)
    answer_d = Column(String, nullable=False)
    correct_answer_key = Column(String(1), nullable=False)


class Game(Base):
    __tablename__ = "game"
    __table_args__ = (
        # At most one unfinished game per player.
        Index(
            "uq_game_player_in_progress",
            "player_id",
            unique=True,
            postgresql_where=text("finished_at IS NULL"),
            sqlite_where=text("finished_at IS NULL"),
        ),
    )
    game_id = Column(Uuid, primary_key=True, default=uuid7)
    player_id = Column(Uuid, ForeignKey("player.player_id"), nullable=False, index=True)
    current_level = Column(Integer, default=0, nullable=False)
    prize = Column(Integer, default=0, nullable=False)
    audience_help_used = Column(Boolean, default=False, nullable=False)
    fifty_fifty_used = Column(Boolean, default=False, nullable=False)
    finish_reason = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    finished_at = Column(DateTime, nullable=True)

    player = relationship("Player", back_populates="games")
    game_questions = relationship(
        "GameQuestion",
        back_populates="game",
        order_by="GameQuestion.level",
        cascade="all, delete-orphan",
    )


class GameQuestion(Base):
    __tablename__ = "game_question"
    __table_args__ = (
        UniqueConstraint("game_id", "level"),
        UniqueConstraint("game_id", "question_id"),
    )
    game_question_id = Column(Uuid, primary_key=True, default=uuid7)
    game_id = Column(Uuid, ForeignKey("game.game_id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Uuid, ForeignKey("question.question_id"), nullable=False)
    level = Column(Integer, nullable=False)
    help_hash = Column(JSON, default=dict, nullable=False)

    game = relationship("Game", back_populates="game_questions")
    question = relationship("Question")
