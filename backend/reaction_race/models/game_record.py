"""
Game record model for archived race results.

Records are append-only: one row per player per archived game.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime

from reaction_race.database import Base


class GameRecord(Base):
    """
    Archived result of one player in one game.

    Attributes:
        id: Primary key
        game_id: Room id the result came from
        player_name: Player display name
        score: Final cumulative score (can be negative)
        reaction_time: Best or last valid reaction time in ms, if any
        created_at: Archive timestamp
    """
    __tablename__ = "game_records"

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(String(64), nullable=False, index=True)
    player_name = Column(String(50), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    reaction_time = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<GameRecord(id={self.id}, player_name='{self.player_name}', score={self.score})>"
