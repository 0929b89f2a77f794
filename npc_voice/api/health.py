"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from npc_voice.db.database import get_db

router = APIRouter()


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, str | int]:
    """Return application, database and voice registry status."""
    registry = getattr(request.app.state, "voice_registry", None)
    voices = registry.count() if registry is not None else 0
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected", "voices": voices}
    except Exception:
        return {"status": "error", "database": "disconnected", "voices": voices}
