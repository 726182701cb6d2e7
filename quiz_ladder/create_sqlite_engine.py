import pathlib

from sqlalchemy.ext.asyncio import create_async_engine

from quiz_ladder.load_settings import sqlite_path

file_path = pathlib.Path(sqlite_path).resolve()
sqlite_url = f"sqlite+aiosqlite:///{file_path}"


engine = create_async_engine(url=sqlite_url, echo=False)
