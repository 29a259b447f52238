"""
Record service layer for the game record archive.

Handles saving finished results and the leaderboard, player history
and stats queries.
"""

import logging
import math
from typing import Optional, List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from reaction_race.config import get_settings
from reaction_race.models.game_record import GameRecord

logger = logging.getLogger(__name__)


def validate_player_name(player_name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate player name format.

    Args:
        player_name: Name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not player_name or not player_name.strip():
        return False, "Player name is required"

    max_length = get_settings().records.MAX_PLAYER_NAME_LENGTH
    if len(player_name.strip()) > max_length:
        return False, f"Player name must not exceed {max_length} characters"

    return True, None


def clamp_limit(limit: Optional[int]) -> int:
    """Clamp a query limit to [1, MAX_LIMIT], using the default for None."""
    records = get_settings().records
    if limit is None:
        return records.DEFAULT_LIMIT
    return max(1, min(limit, records.MAX_LIMIT))


def save_game_record(
    db: Session,
    game_id: str,
    player_name: str,
    score: int,
    reaction_time: Optional[float] = None
) -> GameRecord:
    """
    Append a game record.

    Args:
        db: Database session
        game_id: Room the result came from
        player_name: Player display name
        score: Final score
        reaction_time: Reaction time in ms, if any

    Returns:
        Saved GameRecord

    Raises:
        ValueError: If the record is invalid
    """
    is_valid, error_message = validate_player_name(player_name)
    if not is_valid:
        raise ValueError(error_message)

    if not game_id or not game_id.strip():
        raise ValueError("Game id is required")

    if reaction_time is not None and not math.isfinite(reaction_time):
        raise ValueError("Reaction time must be a finite number")

    if reaction_time is not None and reaction_time < 0:
        raise ValueError("Reaction time must not be negative")

    record = GameRecord(
        game_id=game_id.strip(),
        player_name=player_name.strip(),
        score=score,
        reaction_time=reaction_time
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Saved record {record.id}: {record.player_name} scored {score} in {record.game_id}")
    return record


def get_leaderboard(db: Session, limit: Optional[int] = None) -> List[GameRecord]:
    """
    Get top records by score.

    Args:
        db: Database session
        limit: Maximum number of records

    Returns:
        Records ordered by score (highest first), oldest first on ties
    """
    return (
        db.query(GameRecord)
        .order_by(GameRecord.score.desc(), GameRecord.id.asc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_player_history(db: Session, player_name: str, limit: Optional[int] = None) -> List[GameRecord]:
    """
    Get a player's records.

    Args:
        db: Database session
        player_name: Player to look up
        limit: Maximum number of records

    Returns:
        Records ordered newest first
    """
    return (
        db.query(GameRecord)
        .filter(GameRecord.player_name == player_name)
        .order_by(GameRecord.created_at.desc(), GameRecord.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_stats(db: Session) -> Tuple[int, int]:
    """
    Get archive totals.

    Returns:
        Tuple of (total_records, distinct_players)
    """
    total_records = db.query(func.count(GameRecord.id)).scalar() or 0
    total_players = db.query(func.count(func.distinct(GameRecord.player_name))).scalar() or 0
    return total_records, total_players
