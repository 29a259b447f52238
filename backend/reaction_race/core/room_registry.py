"""
Room registry for reaction race rooms.

This module owns every active room (in-memory storage), resolves room
ids and serialises all room operations behind a single lock.
"""

import logging
import threading
from typing import Dict, List, Optional

from reaction_race.core.room import (
    RaceError,
    RaceRoom,
    RoomState,
    RoomSnapshot,
    RoundResult,
    PlayerRoundResult,
)

logger = logging.getLogger(__name__)


class RoomNotFoundError(RaceError):
    """Raised when a room id does not resolve to a room."""
    pass


class RoomRegistry:
    """
    Manages all race rooms (in-memory storage).

    One lock guards the whole room map, and every operation (reads
    included) holds it until the room operation completes. Rooms are
    never removed before close().
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._rooms: Dict[str, RaceRoom] = {}
        self._lock = threading.Lock()

    def _get(self, room_id: str) -> RaceRoom:
        """Resolve room id. Caller must hold the lock."""
        room = self._rooms.get(room_id)
        if room is None:
            logger.warning(f"Room {room_id} not found")
            raise RoomNotFoundError(f"Room {room_id} not found")
        return room

    def create_room(
        self,
        player_count: int,
        round_count: int,
        names: Optional[List[str]] = None
    ) -> RoomSnapshot:
        """
        Create new room and return its snapshot.

        Args:
            player_count: Number of players
            round_count: Number of rounds to play
            names: Player display names (placeholders fill any gaps)

        Returns:
            Snapshot of the new room, including its id
        """
        with self._lock:
            room = RaceRoom.create(player_count, round_count, names)
            while room.room_id in self._rooms:
                room = RaceRoom.create(player_count, round_count, names)
            self._rooms[room.room_id] = room
            logger.info(
                f"Created room {room.room_id}: {player_count} players, {round_count} rounds"
            )
            return room.snapshot()

    def get_room(self, room_id: str) -> RoomSnapshot:
        """
        Get room snapshot by id.

        Raises:
            RoomNotFoundError: If the room does not exist
        """
        with self._lock:
            return self._get(room_id).snapshot()

    def list_rooms(self, state_filter: Optional[RoomState] = None) -> List[RoomSnapshot]:
        """
        List all rooms, optionally filtered by state.

        Args:
            state_filter: Only return rooms in this state (None = all)

        Returns:
            Snapshots sorted by creation time (newest first)
        """
        with self._lock:
            rooms = list(self._rooms.values())
            if state_filter:
                rooms = [room for room in rooms if room.state == state_filter]
            rooms.sort(key=lambda room: room.created_at, reverse=True)
            return [room.snapshot() for room in rooms]

    def start_round(self, room_id: str) -> RoomSnapshot:
        """
        Start the next round's countdown.

        Raises:
            RoomNotFoundError: If the room does not exist
        """
        with self._lock:
            room = self._get(room_id)
            room.start_round()
            return room.snapshot()

    def trigger_signal(self, room_id: str) -> RoomSnapshot:
        """
        Fire the green light.

        Raises:
            RoomNotFoundError: If the room does not exist
        """
        with self._lock:
            room = self._get(room_id)
            room.trigger_signal()
            return room.snapshot()

    def record_reaction(
        self,
        room_id: str,
        player_id: int,
        reaction_time: float
    ) -> PlayerRoundResult:
        """
        Record a reaction in a room.

        Raises:
            RoomNotFoundError: If the room does not exist
            InvalidStateError: If the room is not racing
            UnknownPlayerError: If the player is not in the room
            DuplicateReactionError: If the player already reacted
        """
        with self._lock:
            room = self._get(room_id)
            try:
                return room.record_reaction(player_id, reaction_time)
            except RaceError as e:
                logger.warning(f"Rejected reaction in room {room_id}: {e}")
                raise

    def finish_round(self, room_id: str) -> RoundResult:
        """
        Score the current round.

        Raises:
            RoomNotFoundError: If the room does not exist
        """
        with self._lock:
            return self._get(room_id).finish_round()

    def room_count(self) -> int:
        """Get number of rooms held."""
        with self._lock:
            return len(self._rooms)

    def close(self) -> None:
        """Drop every room. Called once at shutdown."""
        with self._lock:
            count = len(self._rooms)
            self._rooms.clear()
        logger.info(f"Room registry closed ({count} rooms dropped)")
