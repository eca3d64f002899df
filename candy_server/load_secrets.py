import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME")
pepper_data = os.getenv("PEPPER_DATA", "")

redis_host = os.getenv("REDIS_HOST", "redis")
redis_port = int(os.getenv("REDIS_PORT", "6379"))

session_token_ttl_seconds = int(os.getenv("SESSION_TOKEN_TTL_SECONDS", "3600"))
reward_metadata_uri = os.getenv("REWARD_METADATA_URI", "https://example.com/candy.json")


def get_database_url() -> str:
    """DATABASE_URL wins, then Postgres from DB_* variables, then a local SQLite file."""
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url
    if host:
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
    file_path = pathlib.Path(__file__).parents[1] / "candy_server.sqlite3"
    return f"sqlite+aiosqlite:///{file_path}"


database_url = get_database_url()

if __name__ == "__main__":
    print(database_url, redis_host, redis_port, session_token_ttl_seconds)
