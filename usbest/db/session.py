# usbest/db/session.py
import logging
import re

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from usbest.core.config import settings

logger = logging.getLogger(__name__)


def mask_url(u: str) -> str:
    """Masks the password in the URL so it can be logged."""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", u)


def _engine_kwargs(url: str) -> dict:
    # SQLite (local runs, tests) does not take the pool settings below
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,   # Supabase pooler drops idle connections
        "pool_pre_ping": True,
    }


db_url = settings.db_url
logger.info("Using database %s", mask_url(db_url))

engine = create_engine(db_url, **_engine_kwargs(db_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency: one session per request, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> bool:
    try:
        with engine.connect() as conn:
            row = conn.execute(text("SELECT 1")).fetchone()
            return bool(row and row[0] == 1)
    except Exception:
        logger.exception("Database connection check failed")
        return False
