"""Shared test fixtures."""

import random
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from npc_voice.api.health import router as health_router
from npc_voice.api.voices import router as voices_router
from npc_voice.core.voice.registry import VoiceRegistry
from npc_voice.db.database import create_db_engine, get_db
from npc_voice.db.models import Base

TEST_SCRIPT = """\
voice:smith1
Stranger||Haven't seen you around {village} before.
Indifferent|working|{time-greeting}, looking for some armour or weapons?
Hostile||Get out of my sight.
#
voice:shopkeeper1
Indifferent||Good day, {player-name}.
Indifferent||Come by when you need #goods#.
Friendly|working|I set aside some #goods# for you.
#
voice:villager1
Stranger||Hello.
Stranger||Nice weather.
Stranger||Not from {village}, are you?
Indifferent||I'm off to get some #meal#.
#
"""


@pytest.fixture()
def test_engine():
    """In-memory SQLite shared across connections."""
    engine = create_db_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(test_engine) -> Generator[Session, None, None]:
    """Raw database session for direct DB assertions."""
    session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def voice_registry() -> VoiceRegistry:
    """Registry loaded with TEST_SCRIPT."""
    registry = VoiceRegistry()
    registry.load_text(TEST_SCRIPT)
    return registry


@pytest.fixture()
def client(test_engine, voice_registry: VoiceRegistry) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to an in-memory database and TEST_SCRIPT."""
    session_factory = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app = FastAPI()
    app.include_router(health_router)
    app.include_router(voices_router)
    app.dependency_overrides[get_db] = _override_get_db
    app.state.voice_registry = voice_registry
    app.state.voice_rng = random.Random(42)
    app.state.recent_line_memory = 2

    with TestClient(app) as tc:
        yield tc
