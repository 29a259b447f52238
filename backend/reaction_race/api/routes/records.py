"""
Game record API endpoints.

Archives finished results and serves the leaderboard, per-player
history and archive stats.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import logging

from reaction_race.config import get_settings
from reaction_race.database import get_db
from reaction_race.services import record_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["records"])
settings = get_settings()


# Request/Response models
class SaveRecordRequest(BaseModel):
    """Request model for archiving a result."""
    game_id: str = Field(..., min_length=1, max_length=64, description="Room identifier")
    player_name: str = Field(..., min_length=1, description="Player display name")
    score: int = Field(..., description="Final score")
    reaction_time: Optional[float] = Field(default=None, allow_inf_nan=False, description="Reaction time in ms")


class GameRecordResponse(BaseModel):
    """Response model for a game record."""
    id: int
    game_id: str
    player_name: str
    score: int
    reaction_time: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StatsResponse(BaseModel):
    """Archive totals."""
    total_records: int
    total_players: int
    status: str


@router.post("/database/save", response_model=GameRecordResponse, status_code=201)
async def save_record(request: SaveRecordRequest, db: Session = Depends(get_db)):
    """
    Archive a player's result.

    Raises:
        400: Invalid record
        500: Database error
    """
    try:
        return record_service.save_game_record(
            db,
            game_id=request.game_id,
            player_name=request.player_name,
            score=request.score,
            reaction_time=request.reaction_time
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to save record: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to save record: {str(e)}")


@router.get("/leaderboard", response_model=List[GameRecordResponse])
async def get_leaderboard(
    limit: int = Query(default=10, ge=1, le=settings.records.MAX_LIMIT, description="Maximum number of records"),
    db: Session = Depends(get_db)
):
    """
    Get top records by score.

    Returns:
        Records ordered by score (highest first)
    """
    return record_service.get_leaderboard(db, limit)


@router.get("/database/player/{player_name}", response_model=List[GameRecordResponse])
async def get_player_history(
    player_name: str,
    limit: int = Query(default=10, ge=1, le=settings.records.MAX_LIMIT, description="Maximum number of records"),
    db: Session = Depends(get_db)
):
    """
    Get a player's archived results.

    Returns:
        Records ordered newest first (empty if the player is unknown)
    """
    return record_service.get_player_history(db, player_name, limit)


@router.get("/database/stats", response_model=StatsResponse)
async def get_stats(db: Session = Depends(get_db)):
    """
    Get archive totals.

    Raises:
        500: Database error
    """
    try:
        total_records, total_players = record_service.get_stats(db)
    except Exception as e:
        logger.error(f"Failed to read record stats: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to read record stats: {str(e)}")

    return StatsResponse(
        total_records=total_records,
        total_players=total_players,
        status="connected"
    )
