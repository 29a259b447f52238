"""
REST API endpoints for reaction race rooms.

Provides the round lifecycle over HTTP:
- Create a room
- List rooms
- Start a round countdown
- Trigger the green light
- Record a player's reaction
- Finish (score) the round
- Get room status
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
import logging

from reaction_race.config import get_settings
from reaction_race.core.room import (
    RaceError,
    RoomState,
    RoomSnapshot,
    RoundResult,
    PlayerRoundResult,
)
from reaction_race.core.room_registry import RoomRegistry, RoomNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/racing")
settings = get_settings()


def get_room_registry(request: Request) -> RoomRegistry:
    """Dependency returning the registry created at application startup."""
    return request.app.state.room_registry


# ===== Pydantic Models =====

class CreateRoomRequest(BaseModel):
    """Request to create a new room."""
    player_count: int = Field(
        default=settings.game.DEFAULT_PLAYERS,
        ge=settings.game.MIN_PLAYERS,
        le=settings.game.MAX_PLAYERS,
        description="Number of players"
    )
    round_count: int = Field(
        default=settings.game.DEFAULT_ROUNDS,
        ge=settings.game.MIN_ROUNDS,
        le=settings.game.MAX_ROUNDS,
        description="Rounds to play"
    )
    player_names: List[str] = Field(default_factory=list, description="Player names by seat")


class ReactionRequest(BaseModel):
    """Request to record a reaction."""
    game_id: str = Field(..., description="Room identifier")
    player_id: int = Field(..., description="Reacting player id")
    reaction_time: float = Field(..., allow_inf_nan=False, description="Reported reaction time in ms")


class PlayerResponse(BaseModel):
    """Player information in a room."""
    id: int
    name: str
    score: int
    key: str
    is_ready: bool = False


class PlayerRoundResultResponse(BaseModel):
    """One player's round outcome."""
    player_id: int
    reaction_time: Optional[float] = None
    is_false_start: bool = False
    rank: Optional[int] = None
    points: int = 0


class RoundResultResponse(BaseModel):
    """Scored round."""
    round: int
    player_results: List[PlayerRoundResultResponse]


class RoomResponse(BaseModel):
    """Full room state response."""
    game_id: str
    game_state: str
    players: List[PlayerResponse]
    current_round: int
    max_rounds: int
    round_results: List[RoundResultResponse]


# ===== Helper Functions =====

def _player_result_to_response(result: PlayerRoundResult) -> PlayerRoundResultResponse:
    """Convert PlayerRoundResult dataclass to response."""
    return PlayerRoundResultResponse(
        player_id=result.player_id,
        reaction_time=result.reaction_time,
        is_false_start=result.false_start,
        rank=result.rank,
        points=result.points
    )


def _round_to_response(round_result: RoundResult) -> RoundResultResponse:
    """Convert RoundResult dataclass to response."""
    return RoundResultResponse(
        round=round_result.round_number,
        player_results=[
            _player_result_to_response(result)
            for result in round_result.player_results
        ]
    )


def _room_to_response(snapshot: RoomSnapshot) -> RoomResponse:
    """Convert RoomSnapshot to RoomResponse."""
    return RoomResponse(
        game_id=snapshot.room_id,
        game_state=snapshot.state.value,
        players=[
            PlayerResponse(
                id=player.id,
                name=player.name,
                score=player.score,
                key=player.input_binding,
                is_ready=player.ready
            )
            for player in snapshot.players
        ],
        current_round=snapshot.current_round,
        max_rounds=snapshot.max_rounds,
        round_results=[_round_to_response(r) for r in snapshot.round_history]
    )


def _room_not_found(e: RoomNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


# ===== REST Endpoints =====

@router.post("/create", response_model=RoomResponse, status_code=201)
def create_room(
    request: CreateRoomRequest,
    registry: RoomRegistry = Depends(get_room_registry)
):
    """
    Create a new room in waiting state.

    Args:
        request: Room creation parameters

    Returns:
        Created room state, including its id
    """
    names = [name.strip() for name in request.player_names]
    snapshot = registry.create_room(request.player_count, request.round_count, names)
    return _room_to_response(snapshot)


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    state: Optional[str] = Query(default=None, description="Filter by state"),
    registry: RoomRegistry = Depends(get_room_registry)
):
    """
    List all rooms, optionally filtered by state.

    Returns:
        Rooms sorted by creation time (newest first)
    """
    state_filter = None
    if state:
        try:
            state_filter = RoomState(state)
        except ValueError:
            valid = ", ".join(s.value for s in RoomState)
            raise HTTPException(status_code=400, detail=f"Invalid state: {state}. Must be one of: {valid}")

    return [_room_to_response(s) for s in registry.list_rooms(state_filter=state_filter)]


@router.post("/start/{room_id}", response_model=RoomResponse)
def start_round(room_id: str, registry: RoomRegistry = Depends(get_room_registry)):
    """
    Start a round countdown.

    Raises:
        HTTPException: If room not found
    """
    try:
        return _room_to_response(registry.start_round(room_id))
    except RoomNotFoundError as e:
        raise _room_not_found(e)


@router.post("/trigger/{room_id}", response_model=RoomResponse)
def trigger_signal(room_id: str, registry: RoomRegistry = Depends(get_room_registry)):
    """
    Fire the green light.

    Raises:
        HTTPException: If room not found
    """
    try:
        return _room_to_response(registry.trigger_signal(room_id))
    except RoomNotFoundError as e:
        raise _room_not_found(e)


@router.post("/react", response_model=PlayerRoundResultResponse)
def record_reaction(
    request: ReactionRequest,
    registry: RoomRegistry = Depends(get_room_registry)
):
    """
    Record a player's reaction.

    Returns:
        Unscored acknowledgment; points and rank are assigned on finish

    Raises:
        HTTPException: 404 if room not found, 400 if the reaction is rejected
    """
    try:
        result = registry.record_reaction(request.game_id, request.player_id, request.reaction_time)
    except RoomNotFoundError as e:
        raise _room_not_found(e)
    except RaceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _player_result_to_response(result)


@router.post("/finish/{room_id}", response_model=RoundResultResponse)
def finish_round(room_id: str, registry: RoomRegistry = Depends(get_room_registry)):
    """
    Score the current round.

    Raises:
        HTTPException: If room not found
    """
    try:
        return _round_to_response(registry.finish_round(room_id))
    except RoomNotFoundError as e:
        raise _room_not_found(e)


@router.get("/status/{room_id}", response_model=RoomResponse)
def get_room(room_id: str, registry: RoomRegistry = Depends(get_room_registry)):
    """
    Get full room state.

    Raises:
        HTTPException: If room not found
    """
    try:
        return _room_to_response(registry.get_room(room_id))
    except RoomNotFoundError as e:
        raise _room_not_found(e)
