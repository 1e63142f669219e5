"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine commands
2. Manages sessions and their game loops
3. Projects match state from the player's seat

This layer is framework-agnostic; api/app.py only wires it to FastAPI.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
    CommandRequest,
    CommandKind,
    # Responses
    SessionResponse,
    MatchStateResponse,
    CommandResponse,
    EventLogResponse,
    CheatCatalogResponse,
    OpponentListResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    TableCardInfo,
    ParticipantInfo,
    DistractionInfo,
    EventInfo,
    CheatInfo,
    OpponentInfo,
    # Enums
    SessionStatus,
    ErrorCode,
)
from ..bots import OPPONENTS
from ..engine_core.cards import Card
from ..engine_core.cheats import available_cheats
from ..engine_core.command import Command
from ..engine_core.command_generator import describe_cheats
from ..engine_core.config import MatchConfig
from ..engine_core.errors import DeckParseError
from ..engine_core.state import CheatKind, MatchState, Participant, ParticipantState
from ..session import SessionManager, Session, GameLoop

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for UI front-ends.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest(opponent="archmage"))
        result = service.submit_command(
            session.session_id,
            CommandRequest(command_type="play_card", hand_index=0),
        )
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Config applied to every new session before request overrides
    base_config: MatchConfig = field(default_factory=MatchConfig)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Create a new session and let the opponent move if it leads."""
        if request.opponent not in OPPONENTS:
            return ErrorResponse(
                error=f"Unknown opponent: {request.opponent}",
                error_code=ErrorCode.UNKNOWN_OPPONENT,
                details={"opponents": sorted(OPPONENTS)},
            )

        overrides = {
            name: value
            for name, value in (
                ("shuffle_seed", request.shuffle_seed),
                ("player_deck", request.player_deck),
                ("opponent_deck", request.opponent_deck),
                ("starting_seeds", request.starting_seeds),
                ("starting_mana", request.starting_mana),
            )
            if value is not None
        }

        try:
            config = MatchConfig(**{**self.base_config.__dict__, **overrides})
            session = self.session_manager.create_session(
                config=config, opponent=request.opponent, seed=request.seed
            )
        except DeckParseError as e:
            logger.warning("Rejected deck text: %s", e)
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.INVALID_DECK,
                details={"token": e.token, "position": e.position},
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        loop = GameLoop(session)
        self._game_loops[session.session_id] = loop
        loop.start()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Get session info with the current state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def get_state(self, session_id: str) -> MatchStateResponse | ErrorResponse:
        """Get the current match state."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self.build_state(session)

    def get_events(self, session_id: str, cursor: int = 0) -> EventLogResponse | ErrorResponse:
        """Get events logged since `cursor`."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        events = session.event_log[cursor:]
        return EventLogResponse(
            session_id=session_id,
            events=[self._event_to_info(event) for event in events],
            next_cursor=cursor + len(events),
        )

    def submit_command(
        self, session_id: str, request: CommandRequest
    ) -> CommandResponse | ErrorResponse:
        """
        Apply a player command and run the opponent.

        Rejections come back as ErrorResponse carrying the engine's code;
        a rejected cheat's event is in details["events"].
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        command = self._to_command(request)
        if command is None:
            return ErrorResponse(
                error=f"{request.command_type.value} is missing a required field",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        loop = self._game_loops.get(session_id)
        if loop is None:
            loop = GameLoop(session)
            self._game_loops[session_id] = loop

        result = loop.submit(command)
        if not result.success:
            return ErrorResponse(
                error=result.error or "Command rejected",
                error_code=ErrorCode(result.error_code.name),
                details={"events": [self._event_to_info(e).model_dump() for e in result.events]},
            )

        return CommandResponse(
            success=True,
            events=[self._event_to_info(event) for event in result.events],
            opponent_moves=result.opponent_moves,
            state=self.build_state(session),
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List session IDs."""
        return self.session_manager.list_sessions()

    def cleanup_stale_sessions(self, max_age_seconds: int) -> int:
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        live = set(self.session_manager.list_sessions())
        for session_id in list(self._game_loops):
            if session_id not in live:
                del self._game_loops[session_id]
        return removed

    def cheat_catalog(self) -> CheatCatalogResponse:
        return CheatCatalogResponse(cheats=[CheatInfo(**entry) for entry in describe_cheats()])

    def list_opponents(self) -> OpponentListResponse:
        return OpponentListResponse(
            opponents=[
                OpponentInfo(name=opponent.name, description=opponent.description)
                for opponent in OPPONENTS.values()
            ]
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _to_command(self, request: CommandRequest) -> Command | None:
        """Translate a request into an engine command; None when a field is missing."""
        if request.command_type == CommandKind.PLAY_CARD:
            if request.hand_index is None:
                return None
            return Command.play_card(Participant.PLAYER, request.hand_index)
        if request.command_type == CommandKind.ATTEMPT_CHEAT:
            if request.cheat_id is None:
                return None
            return Command.attempt_cheat(
                CheatKind(request.cheat_id.value),
                hand_index=request.hand_index,
                opponent_index=request.opponent_index,
            )
        if request.command_type == CommandKind.USE_ITEM:
            if request.item_id is None:
                return None
            return Command.use_item(request.item_id)
        return Command.restart()

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=self._status(session.match),
            opponent=session.opponent_name,
            created_at=session.created_at,
            state=self.build_state(session),
            events=[self._event_to_info(event) for event in session.event_log],
        )

    def _status(self, match: MatchState) -> SessionStatus:
        if match.is_over:
            return SessionStatus.GAME_OVER
        if match.to_play is Participant.PLAYER:
            return SessionStatus.YOUR_TURN
        return SessionStatus.OPPONENT_TURN

    def build_state(self, session: Session) -> MatchStateResponse:
        """Project the match state from the player's seat."""
        match = session.match
        return MatchStateResponse(
            session_id=session.session_id,
            status=self._status(match),
            phase=match.phase.value,
            round_number=match.round_number,
            initiative=match.initiative.value,
            to_play=match.to_play.value if match.to_play else None,
            player=self._participant_info(match.player, visible=True),
            opponent=self._participant_info(match.opponent, visible=False),
            table=[
                TableCardInfo(card=self._card_info(entry.card), owner=entry.owner.value)
                for entry in match.table
            ],
            stake_count=len(match.stake),
            distractions=[
                DistractionInfo(
                    observer=observer.value,
                    active=timer.active,
                    rounds_remaining=timer.rounds_remaining,
                )
                for observer, timer in match.distractions.items()
            ],
            items_available=list(match.items_available),
            available_cheats=[kind.value for kind in available_cheats(match)],
            ordering_inverted=match.ordering_inverted,
            deja_vu_pending=match.deja_vu_pending,
            result=match.result.value if match.result else None,
            winner=match.winner.value if match.winner else None,
        )

    def _participant_info(self, side: ParticipantState, visible: bool) -> ParticipantInfo:
        return ParticipantInfo(
            participant=side.participant.value,
            hand=[self._card_info(card) for card in side.hand] if visible else None,
            hand_count=len(side.hand),
            draw_pile_count=len(side.draw_pile),
            win_pile_count=len(side.win_pile),
            sleeve=[self._card_info(card) for card in side.sleeve] if visible else None,
            points=side.points,
            seeds=side.seeds,
            mana=side.mana,
            unlocked_cheats=sorted(kind.value for kind in side.unlocked_cheats),
        )

    @staticmethod
    def _card_info(card: Card) -> CardInfo:
        return CardInfo(
            card_id=card.card_id,
            rank=card.rank,
            color=card.color.value,
            word=card.word.value if card.word else None,
        )

    @staticmethod
    def _event_to_info(event) -> EventInfo:
        data = event.to_dict()
        event_type = data.pop("type")
        if event_type == "cards_drawn" and data["participant"] == Participant.OPPONENT.value:
            # The opponent's hand stays hidden
            data["count"] = len(data["cards"])
            data["cards"] = []
        return EventInfo(type=event_type, data=data)
