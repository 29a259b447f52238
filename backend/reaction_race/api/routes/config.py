"""
Configuration API endpoints.

Provides access to scoring and room limits for clients.
"""

from fastapi import APIRouter
from typing import Dict, Any

from reaction_race.config import get_settings

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/scoring")
async def get_scoring_config() -> Dict[str, Any]:
    """
    Get scoring rules.

    Lets the frontend explain points without hard-coding the bands.

    Returns:
        dict: False-start threshold, time bands and rank bonuses
    """
    scoring = get_settings().scoring

    return {
        "FALSE_START_THRESHOLD_MS": scoring.FALSE_START_THRESHOLD_MS,
        "FALSE_START_PENALTY": scoring.FALSE_START_PENALTY,
        "NO_REACTION_POINTS": scoring.NO_REACTION_POINTS,
        "TIME_BANDS": [
            {"below_ms": upper_bound, "points": points}
            for upper_bound, points in scoring.TIME_BANDS
        ],
        "SLOWEST_BAND_POINTS": scoring.SLOWEST_BAND_POINTS,
        "RANK_BONUSES": list(scoring.RANK_BONUSES),
        "RANK_BONUS_FALLBACK": scoring.RANK_BONUS_FALLBACK,
    }


@router.get("/game")
async def get_game_config() -> Dict[str, Any]:
    """
    Get room creation limits.

    Returns:
        dict: Player and round limits plus defaults
    """
    game = get_settings().game

    return {
        "MIN_PLAYERS": game.MIN_PLAYERS,
        "MAX_PLAYERS": game.MAX_PLAYERS,
        "MIN_ROUNDS": game.MIN_ROUNDS,
        "MAX_ROUNDS": game.MAX_ROUNDS,
        "DEFAULT_PLAYERS": game.DEFAULT_PLAYERS,
        "DEFAULT_ROUNDS": game.DEFAULT_ROUNDS,
    }
