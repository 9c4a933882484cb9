# app/database.py
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()


def _engine_options(db_url: str) -> tuple[str, dict]:
    """
    Normalize the URL and pick pool settings for it.

    Postgres goes through the Supabase pooler, which caps clients in
    session mode: one pre-pinged connection per process, SSL enforced.
    Anything else (SQLite for local runs and tests) gets engine defaults.
    """
    if not db_url.startswith("postgresql"):
        return db_url, {"echo": False}

    if "sslmode=" not in db_url:
        sep = "&" if "?" in db_url else "?"
        db_url = f"{db_url}{sep}sslmode=require"

    return db_url, {
        "echo": False,
        "pool_pre_ping": True,
        "pool_size": 1,
        "max_overflow": 0,
    }


db_url, engine_options = _engine_options(settings.DATABASE_URL)

engine = create_engine(db_url, **engine_options)


def create_db_and_tables() -> None:
    """Create any missing tables; run once from the app lifespan."""
    SQLModel.metadata.create_all(engine)


def get_session():
    # one session per request, closed when the response is sent
    with Session(engine) as session:
        yield session
