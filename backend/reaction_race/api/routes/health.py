"""
Health check endpoints.

Reports server status, the number of rooms held and whether the
record store is reachable.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from datetime import datetime

from reaction_race.api.routes.racing import get_room_registry
from reaction_race.core.room_registry import RoomRegistry
from reaction_race.database import get_db
from reaction_race.config import get_settings

router = APIRouter()
settings = get_settings()


def _check_database(db: Session) -> str:
    """Run a trivial query, returning "ok" or the failure message."""
    try:
        db.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        return f"failed: {str(e)}"


@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    registry: RoomRegistry = Depends(get_room_registry)
) -> dict:
    """
    Basic health check endpoint.

    Example response:
        {
            "status": "healthy",
            "app_name": "ReactionRace",
            "version": "0.1.0",
            "timestamp": "2026-10-19T12:00:00Z",
            "rooms": 2,
            "database": "connected"
        }
    """
    db_check = _check_database(db)

    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "rooms": registry.room_count(),
        "database": "connected" if db_check == "ok" else f"error: {db_check}",
    }


@router.get("/health/ready")
async def readiness_check(db: Session = Depends(get_db)) -> dict:
    """
    Readiness check for the service.

    The room registry is always ready once the app has started, so only
    the record store is checked.
    """
    db_check = _check_database(db)
    return {
        "ready": db_check == "ok",
        "checks": {
            "database": db_check
        }
    }
