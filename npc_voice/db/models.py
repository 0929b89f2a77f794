"""SQLAlchemy declarative base and ORM models."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all database models."""


class SpeakerHistoryModel(Base):
    """ORM model for a speaker's recently shown voice lines."""

    __tablename__ = "speaker_history"

    npc_id: Mapped[str] = mapped_column(String, primary_key=True)
    voice_id: Mapped[str] = mapped_column(String, nullable=False)
    # 오래된 것 → 최근 순
    recent_line_ids: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
