"""Database engine and session configuration.

Only speaker line history lives in the database; voice scripts are
loaded from text assets at startup.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from npc_voice.config import settings


def create_db_engine(url: str, echo: bool = False, **kwargs: Any) -> Engine:
    """Build an engine; SQLite URLs get the cross-thread flag FastAPI needs."""
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    return create_engine(url, echo=echo, **kwargs)


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards.

    Backs the VoiceService dependency in the voices router.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
