import asyncio
import logging
from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from quiz_ladder.crud import CreateData
from quiz_ladder.db import Session, engine
from quiz_ladder.domain.prize_ladder import PrizeLadder
from quiz_ladder.load_settings import (
    fireproof_levels,
    game_time_limit_minutes,
    log_level,
    prize_ladder,
    questions_file,
    sweep_interval_minutes,
)
from quiz_ladder.services.game_db import GameService
from quiz_ladder.services.question_bank import import_questions_if_empty


def build_game_service() -> GameService:
    """Game service wired to the configured database, ladder and time limit."""
    return GameService(
        Session,
        ladder=PrizeLadder.from_settings(prize_ladder, fireproof_levels),
        time_limit=timedelta(minutes=game_time_limit_minutes),
    )


async def main():
    """Create tables, load the question bank and run the expiry sweep until cancelled."""
    logging.basicConfig(level=log_level)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    await CreateData.create_table(engine)
    if questions_file:
        await import_questions_if_empty(questions_file, Session)

    game_service = build_game_service()
    scheduler = AsyncIOScheduler()
    # Games expire lazily on access; the sweep finishes the ones nobody touches.
    scheduler.add_job(
        game_service.sweep_expired_games,
        "interval",
        minutes=sweep_interval_minutes,
    )
    scheduler.start()
    logging.info("Start expiry sweep")
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown()
        await engine.dispose()
        logging.info("Stop expiry sweep")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
