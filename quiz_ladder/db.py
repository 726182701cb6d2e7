from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quiz_ladder.load_settings import db_backend

if db_backend == "sqlite":
    from quiz_ladder.create_sqlite_engine import engine
else:
    from quiz_ladder.create_postgres_engine import engine

# Centralized session factory; services receive it instead of building their own.
Session = async_sessionmaker(
    autocommit=False,
    class_=AsyncSession,
    autoflush=True,
    expire_on_commit=False,
    bind=engine,
)
