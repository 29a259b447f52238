"""
Unit tests for round scoring rules (scoring.py).

Tests false-start classification, time bands, rank bonuses and ranking.
"""

import pytest
from reaction_race.core import scoring


class TestFalseStart:
    """Test false-start classification."""

    def test_below_threshold_is_false_start(self):
        """Test times under 100ms are false starts."""
        assert scoring.is_false_start(0.0) is True
        assert scoring.is_false_start(99.9) is True
        assert scoring.is_false_start(-20.0) is True

    def test_threshold_is_valid(self):
        """Test exactly 100ms is a valid reaction."""
        assert scoring.is_false_start(100.0) is False
        assert scoring.is_false_start(350.0) is False


class TestBasePoints:
    """Test time band points."""

    @pytest.mark.parametrize("reaction_time,expected", [
        (100.0, 15),
        (199.9, 15),
        (200.0, 12),
        (299.0, 12),
        (300.0, 10),
        (400.0, 8),
        (499.9, 8),
        (500.0, 5),
        (2500.0, 5),
    ])
    def test_time_bands(self, reaction_time, expected):
        """Test each band boundary."""
        assert scoring.base_points(reaction_time) == expected

    def test_false_start_penalty(self):
        """Test false starts cost 5 points regardless of time."""
        assert scoring.base_points(None, false_start=True) == -5

    def test_no_reaction(self):
        """Test players who never reacted get nothing."""
        assert scoring.base_points(None) == 0


class TestRankBonus:
    """Test rank bonus points."""

    def test_podium_bonuses(self):
        """Test top three ranks."""
        assert scoring.rank_bonus(1) == 10
        assert scoring.rank_bonus(2) == 7
        assert scoring.rank_bonus(3) == 5

    def test_fallback_bonus(self):
        """Test every rank below third gets 3."""
        assert scoring.rank_bonus(4) == 3
        assert scoring.rank_bonus(8) == 3


class TestRankReactions:
    """Test dense ranking."""

    def test_ranks_by_ascending_time(self):
        """Test fastest gets rank 1."""
        ranks = scoring.rank_reactions([(1, 320.0), (2, 150.0), (3, 240.0)])
        assert ranks == {2: 1, 3: 2, 1: 3}

    def test_ties_keep_player_order(self):
        """Test equal times are ranked in the order given."""
        ranks = scoring.rank_reactions([(1, 200.0), (2, 150.0), (3, 200.0)])
        assert ranks == {2: 1, 1: 2, 3: 3}

    def test_empty(self):
        """Test no valid reactions gives no ranks."""
        assert scoring.rank_reactions([]) == {}
