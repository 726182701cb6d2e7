import os
from dotenv import load_dotenv

load_dotenv()

db_backend = os.getenv("DB_BACKEND", "postgres")
user = os.getenv("DB_USER", "postgres")
password = os.getenv("DB_PASSWORD", "postgres")
host = os.getenv("DB_HOST", "localhost")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME", "quiz_ladder")
sqlite_path = os.getenv("SQLITE_PATH", "quiz_ladder.sqlite3")
db_pool_size = int(os.getenv("DB_POOL_SIZE", "20"))
db_max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "20"))

game_time_limit_minutes = float(os.getenv("GAME_TIME_LIMIT_MINUTES", "35"))
sweep_interval_minutes = float(os.getenv("SWEEP_INTERVAL_MINUTES", "5"))

# Comma-separated; unset falls back to the default ladder.
prize_ladder = os.getenv("PRIZE_LADDER")
fireproof_levels = os.getenv("FIREPROOF_LEVELS")

questions_file = os.getenv("QUESTIONS_FILE")
log_level = os.getenv("LOG_LEVEL", "INFO")

if __name__ == "__main__":
    print(db_backend, user, host, port, db_name, game_time_limit_minutes)
