"""FastAPI application entrypoint."""

import random
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from npc_voice.api.health import router as health_router
from npc_voice.api.voices import router as voices_router
from npc_voice.config import settings
from npc_voice.core.logging import get_logger, setup_logging
from npc_voice.core.voice.registry import VoiceRegistry
from npc_voice.core.voice.resolver import FALLBACKS
from npc_voice.db.database import engine as db_engine
from npc_voice.db.models import Base

setup_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # DB 테이블 생성
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    # 보이스 스크립트 로드
    logger.info("Loading voice scripts from %s...", settings.VOICE_SCRIPT_PATH)
    registry = VoiceRegistry(fallback=FALLBACKS[settings.PLACEHOLDER_FALLBACK])
    report = registry.load_from_file(settings.VOICE_SCRIPT_PATH)
    if not report.ok:
        logger.warning("%d voice sections failed to load", len(report.errors))
    app.state.voice_registry = registry
    logger.info("Voice registry initialized (%d voices).", registry.count())

    if settings.RANDOM_SEED is not None:
        app.state.voice_rng = random.Random(settings.RANDOM_SEED)
    app.state.recent_line_memory = settings.RECENT_LINE_MEMORY

    yield

    # 종료 시 정리
    logger.info("Shutting down...")
    app.state.voice_registry = None


app = FastAPI(title="NPC Voice", lifespan=lifespan)

app.include_router(health_router)
app.include_router(voices_router)
