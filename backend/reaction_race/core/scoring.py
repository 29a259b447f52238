"""
Round scoring rules.

Pure functions used by RaceRoom.finish_round() to turn raw reaction
times into points and ranks. All thresholds come from ScoringConfig.
"""

from typing import Dict, List, Optional, Tuple

from reaction_race.config import get_settings


def is_false_start(reaction_time: float) -> bool:
    """Check if a reported reaction time is faster than humanly plausible."""
    return reaction_time < get_settings().scoring.FALSE_START_THRESHOLD_MS


def base_points(reaction_time: Optional[float], false_start: bool = False) -> int:
    """
    Get base points for a single reaction, before any rank bonus.

    Args:
        reaction_time: Reported time in ms (None if the player never reacted)
        false_start: Whether the reaction was a false start

    Returns:
        Points for the reaction time band (negative for a false start)
    """
    scoring = get_settings().scoring

    if false_start:
        return scoring.FALSE_START_PENALTY

    if reaction_time is None:
        return scoring.NO_REACTION_POINTS

    for upper_bound, points in scoring.TIME_BANDS:
        if reaction_time < upper_bound:
            return points
    return scoring.SLOWEST_BAND_POINTS


def rank_bonus(rank: int) -> int:
    """Get bonus points for a 1-based rank."""
    scoring = get_settings().scoring
    if 1 <= rank <= len(scoring.RANK_BONUSES):
        return scoring.RANK_BONUSES[rank - 1]
    return scoring.RANK_BONUS_FALLBACK


def rank_reactions(valid_times: List[Tuple[int, float]]) -> Dict[int, int]:
    """
    Assign dense ranks to valid reactions.

    Sorting is stable, so equal times keep the order they were given in
    (player order).

    Args:
        valid_times: (player_id, reaction_time) pairs, false starts excluded

    Returns:
        Mapping of player_id -> rank (1 = fastest)
    """
    ordered = sorted(valid_times, key=lambda entry: entry[1])
    return {player_id: rank for rank, (player_id, _) in enumerate(ordered, start=1)}
