"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a UI front-end and the engine.
State is always projected from the player's seat: the opponent's hand is
only a count, revealed cards arrive as `cards_revealed` events.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- UNKNOWN_OPPONENT: No scripted opponent with that name
- INVALID_DECK: Deck text could not be parsed
- VALIDATION_ERROR: Request parameters are inconsistent
- Engine rejections reuse the engine's codes (NOT_YOUR_TURN, CHEAT_LOCKED, ...)
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


API_VERSION = "v1"


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    YOUR_TURN = "your_turn"
    OPPONENT_TURN = "opponent_turn"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_OPPONENT = "UNKNOWN_OPPONENT"
    INVALID_DECK = "INVALID_DECK"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    # Engine rejections
    INVALID_PHASE = "INVALID_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    INVALID_TARGET = "INVALID_TARGET"
    INSUFFICIENT_RESOURCES = "INSUFFICIENT_RESOURCES"
    CHEAT_LOCKED = "CHEAT_LOCKED"
    NOT_PLAYER_WINDOW = "NOT_PLAYER_WINDOW"
    ITEM_UNAVAILABLE = "ITEM_UNAVAILABLE"
    GAME_OVER = "GAME_OVER"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"


class CommandKind(str, Enum):
    """Commands a UI can submit."""
    PLAY_CARD = "play_card"
    ATTEMPT_CHEAT = "attempt_cheat"
    USE_ITEM = "use_item"
    RESTART = "restart"


class CheatId(str, Enum):
    """Cheats the player can attempt."""
    PULL_SEEDS = "pull_seeds"
    SLEEVE = "sleeve"
    SWAP_CARD = "swap_card"
    PEEK = "peek"
    LOOK_OVER_SHOULDER = "look_over_shoulder"
    INNER_EYE = "inner_eye"
    HACK_ORDERING = "hack_ordering"
    DEJA_VU = "deja_vu"
    DUPLICATE = "duplicate"
    INVISIBILITY = "invisibility"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    rank: int = Field(..., ge=0, le=12)
    color: str = Field(..., description="r, b, g or y")
    word: Optional[str] = Field(None, description="Word of power, if any")

    model_config = {"from_attributes": True}


class TableCardInfo(BaseModel):
    """A card played this round."""
    card: CardInfo
    owner: str


class ParticipantInfo(BaseModel):
    """One side of the table, as the player sees it."""
    participant: str
    hand: Optional[list[CardInfo]] = Field(
        None, description="Visible for the player only"
    )
    hand_count: int = 0
    draw_pile_count: int = 0
    win_pile_count: int = 0
    sleeve: Optional[list[CardInfo]] = Field(None, description="Visible for the player only")
    points: int = 0
    seeds: int = 0
    mana: int = 0
    unlocked_cheats: list[str] = Field(default_factory=list)


class DistractionInfo(BaseModel):
    """Distraction timer of one observer."""
    observer: str = Field(..., description="bird or magician")
    active: bool = False
    rounds_remaining: int = 0


class EventInfo(BaseModel):
    """An engine event."""
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class CheatInfo(BaseModel):
    """A cheat from the catalog."""
    cheat_id: str
    cheat_class: str = Field(..., description="physical, magic or free")
    seed_cost: int = 0
    mana_cost: int = 0
    description: str = ""


class OpponentInfo(BaseModel):
    """A scripted opponent."""
    name: str
    description: str


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new match session."""
    opponent: str = Field("apprentice", description="Scripted opponent name")
    seed: Optional[int] = Field(None, description="Seed for random opponents")
    shuffle_seed: Optional[int] = Field(None, description="Shuffle both piles with this seed")
    player_deck: Optional[str] = Field(None, description="Deck text, e.g. '7r 12g:Qube 0b'")
    opponent_deck: Optional[str] = Field(None, description="Deck text for the opponent")
    starting_seeds: Optional[int] = Field(None, ge=0)
    starting_mana: Optional[int] = Field(None, ge=0)


class CommandRequest(BaseModel):
    """A player command."""
    command_type: CommandKind
    hand_index: Optional[int] = Field(None, ge=0, description="Card in the player's hand")
    cheat_id: Optional[CheatId] = None
    opponent_index: Optional[int] = Field(
        None, ge=0, description="Card in the opponent's hand (swap_card, invisibility)"
    )
    item_id: Optional[str] = None


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field(API_VERSION, description="API version")


class MatchStateResponse(BaseModel):
    """Complete match state for display."""
    session_id: str
    status: SessionStatus
    phase: str
    round_number: int
    initiative: str
    to_play: Optional[str] = None
    player: ParticipantInfo
    opponent: ParticipantInfo
    table: list[TableCardInfo] = Field(default_factory=list)
    stake_count: int = 0
    distractions: list[DistractionInfo] = Field(default_factory=list)
    items_available: list[str] = Field(default_factory=list)
    available_cheats: list[str] = Field(default_factory=list)
    ordering_inverted: bool = False
    deja_vu_pending: bool = False
    result: Optional[str] = None
    winner: Optional[str] = None
    api_version: str = API_VERSION


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    opponent: str
    created_at: float = 0.0
    state: MatchStateResponse
    events: list[EventInfo] = Field(default_factory=list)
    api_version: str = API_VERSION


class CommandResponse(BaseModel):
    """Result of a player command and the opponent's answer."""
    success: bool
    events: list[EventInfo] = Field(default_factory=list)
    opponent_moves: list[str] = Field(default_factory=list)
    state: MatchStateResponse
    api_version: str = API_VERSION


class EventLogResponse(BaseModel):
    """Events of a session, from a cursor on."""
    session_id: str
    events: list[EventInfo] = Field(default_factory=list)
    next_cursor: int = 0


class CheatCatalogResponse(BaseModel):
    cheats: list[CheatInfo]


class OpponentListResponse(BaseModel):
    opponents: list[OpponentInfo]


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
