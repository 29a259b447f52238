"""
Race room state machine and round scoring.

This module defines the data structures for a single reaction race room
(players, per-round results, snapshots) and the RaceRoom class that
drives the round lifecycle:

    WAITING -> COUNTDOWN -> RACING -> FINISHED -> WAITING | GAME_OVER

Transitions only happen through explicit operations, never by time alone.
"""

import logging
import math
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple
from uuid import uuid4

from reaction_race.config import get_settings
from reaction_race.core import scoring

logger = logging.getLogger(__name__)


class RaceError(Exception):
    """Base class for rejected room operations."""
    pass


class InvalidStateError(RaceError):
    """Raised when an operation is attempted outside its required state."""
    pass


class UnknownPlayerError(RaceError):
    """Raised when a player id does not belong to the room."""
    pass


class DuplicateReactionError(RaceError):
    """Raised when a player reacts twice in the same round."""
    pass


class InvalidReactionTimeError(RaceError):
    """Raised when a reported reaction time is not a finite number."""
    pass


class RoomState(Enum):
    """Room state machine."""
    WAITING = "waiting"        # Idle between rounds
    COUNTDOWN = "countdown"    # Countdown running, no reactions yet
    READY = "ready"            # Reserved, never entered
    RACING = "racing"          # Signal fired, accepting reactions
    FINISHED = "finished"      # Round scored (transient)
    GAME_OVER = "gameover"     # All rounds played


@dataclass
class Player:
    """Player seated in a room."""
    id: int  # Stable, 1-based
    name: str
    score: int = 0
    input_binding: str = " "  # Display only
    ready: bool = False  # Reserved (future feature)


@dataclass(frozen=True)
class PlayerRoundResult:
    """One player's outcome for one round."""
    player_id: int
    reaction_time: Optional[float] = None  # Only set for valid reactions
    false_start: bool = False
    rank: Optional[int] = None  # Only set for valid reactions
    points: int = 0


@dataclass(frozen=True)
class RoundResult:
    """Scored round, player results ordered by player id."""
    round_number: int
    player_results: Tuple[PlayerRoundResult, ...]


@dataclass(frozen=True)
class RoomSnapshot:
    """Detached copy of a room's public state."""
    room_id: str
    state: RoomState
    players: Tuple[Player, ...]
    current_round: int
    max_rounds: int
    round_history: Tuple[RoundResult, ...]

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get player by id, None if not seated."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None


def _default_player_name(player_id: int) -> str:
    return get_settings().game.PLACEHOLDER_NAME.format(id=player_id)


def _input_binding(player_id: int) -> str:
    game = get_settings().game
    return game.INPUT_BINDINGS.get(player_id, game.DEFAULT_INPUT_BINDING)


@dataclass
class RaceRoom:
    """
    A single race room.

    Holds the players, the current round's reactions and the full round
    history. Not thread-safe on its own; RoomRegistry serialises access.
    """
    room_id: str
    players: List[Player]
    max_rounds: int
    state: RoomState = RoomState.WAITING
    current_round: int = 0
    round_history: List[RoundResult] = field(default_factory=list)
    signal_time: Optional[float] = None
    reacted_ids: Set[int] = field(default_factory=set)
    reactions: Dict[int, float] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)

    @classmethod
    def create(
        cls,
        player_count: int,
        round_count: int,
        names: Optional[List[str]] = None,
        room_id: Optional[str] = None
    ) -> "RaceRoom":
        """
        Create a room in WAITING state.

        Args:
            player_count: Number of seats (player ids 1..player_count)
            round_count: Rounds to play before GAME_OVER
            names: Display names by seat; missing entries get a placeholder
            room_id: Explicit id (generated if None)

        Returns:
            New RaceRoom instance
        """
        names = names or []
        players = []
        for player_id in range(1, player_count + 1):
            name = names[player_id - 1] if player_id <= len(names) else None
            players.append(Player(
                id=player_id,
                name=name or _default_player_name(player_id),
                input_binding=_input_binding(player_id)
            ))

        return cls(
            room_id=room_id or f"game_{uuid4().hex}",
            players=players,
            max_rounds=round_count
        )

    def has_player(self, player_id: int) -> bool:
        """Check if player id belongs to the room."""
        return any(player.id == player_id for player in self.players)

    def is_game_over(self) -> bool:
        """Check if all rounds have been played."""
        return self.state == RoomState.GAME_OVER

    def start_round(self) -> None:
        """
        Enter COUNTDOWN and clear the previous round's reactions.

        Allowed from any state, so it doubles as a round restart.
        """
        self.state = RoomState.COUNTDOWN
        self.signal_time = None
        self.reacted_ids.clear()
        self.reactions.clear()
        logger.info(f"Room {self.room_id} round {self.current_round + 1} countdown started")

    def trigger_signal(self) -> None:
        """Fire the green light and start accepting reactions."""
        self.state = RoomState.RACING
        self.signal_time = time.time()
        logger.info(f"Room {self.room_id} signal fired")

    def record_reaction(self, player_id: int, reaction_time: float) -> PlayerRoundResult:
        """
        Record a player's reported reaction time.

        The time is trusted as reported. False starts are kept in
        `reactions` but never surfaced as a valid time.

        Args:
            player_id: Reacting player
            reaction_time: Reported reaction time in ms

        Returns:
            Unscored acknowledgment (rank None, 0 points)

        Raises:
            InvalidStateError: If the room is not RACING
            UnknownPlayerError: If the player is not in the room
            DuplicateReactionError: If the player already reacted this round
            InvalidReactionTimeError: If the time is NaN or infinite
        """
        if self.state != RoomState.RACING:
            raise InvalidStateError(
                f"Room {self.room_id} is not racing (state: {self.state.value})"
            )

        if not self.has_player(player_id):
            valid_ids = [player.id for player in self.players]
            raise UnknownPlayerError(
                f"Player {player_id} not in room {self.room_id} (valid ids: {valid_ids})"
            )

        if player_id in self.reacted_ids:
            raise DuplicateReactionError(
                f"Player {player_id} already reacted in round {self.current_round + 1}"
            )

        if not math.isfinite(reaction_time):
            raise InvalidReactionTimeError(
                f"Reaction time must be a finite number (got {reaction_time})"
            )

        false_start = scoring.is_false_start(reaction_time)
        self.reacted_ids.add(player_id)
        self.reactions[player_id] = reaction_time
        logger.debug(
            f"Room {self.room_id}: player {player_id} reacted in {reaction_time}ms"
            f"{' (false start)' if false_start else ''}"
        )

        return PlayerRoundResult(
            player_id=player_id,
            reaction_time=None if false_start else reaction_time,
            false_start=false_start
        )

    def finish_round(self) -> RoundResult:
        """
        Score the current round and advance the round counter.

        Every player gets a result, including those who never reacted.
        Valid reactions are ranked by time and earn a rank bonus on top of
        their time-band points. Totals are added to cumulative scores.

        Returns:
            RoundResult ordered by player id
        """
        self.state = RoomState.FINISHED
        self.current_round += 1

        valid_times = []
        for player in self.players:
            reaction_time = self.reactions.get(player.id)
            if reaction_time is not None and not scoring.is_false_start(reaction_time):
                valid_times.append((player.id, reaction_time))
        ranks = scoring.rank_reactions(valid_times)

        player_results = []
        for player in self.players:
            reaction_time = self.reactions.get(player.id)
            false_start = reaction_time is not None and scoring.is_false_start(reaction_time)
            if false_start:
                reaction_time = None

            rank = ranks.get(player.id)
            points = scoring.base_points(reaction_time, false_start)
            if rank is not None:
                points += scoring.rank_bonus(rank)

            player.score += points
            player_results.append(PlayerRoundResult(
                player_id=player.id,
                reaction_time=reaction_time,
                false_start=false_start,
                rank=rank,
                points=points
            ))

        round_result = RoundResult(
            round_number=self.current_round,
            player_results=tuple(player_results)
        )
        self.round_history.append(round_result)

        if self.current_round >= self.max_rounds:
            self.state = RoomState.GAME_OVER
            logger.info(f"Room {self.room_id} game over after {self.current_round} rounds")
        else:
            self.state = RoomState.WAITING
            logger.info(f"Room {self.room_id} round {self.current_round}/{self.max_rounds} finished")

        return round_result

    def snapshot(self) -> RoomSnapshot:
        """Get a detached copy of the room's public state."""
        return RoomSnapshot(
            room_id=self.room_id,
            state=self.state,
            players=tuple(replace(player) for player in self.players),
            current_round=self.current_round,
            max_rounds=self.max_rounds,
            round_history=tuple(self.round_history)
        )
