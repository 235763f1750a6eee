"""Database engine and per-request session management"""

from typing import Any, Dict, Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from acquisition_gateway.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Pooling for server databases; SQLite gets a thread-shareable connection instead"""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,  # seconds
    }


engine = create_engine(settings.database_url, **engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one session per request and always close it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
