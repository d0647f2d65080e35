import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

# JSON-like payload alias
JSONPayload = Dict[str, Any]

SEATS = (0, 1)

# ==== SERVER → CLIENT ====


class server_message_type(enum.IntEnum):
    WELCOME = 1
    PROMPT = 2
    FEEDBACK = 3
    SCORECARD = 4
    GAME_OVER = 5
    ERROR = 6


@dataclass(frozen=True)
class ServerMessage:
    type: server_message_type
    payload: JSONPayload

    @property
    def text(self) -> str:
        return str(self.payload.get("text") or "")


# ==== CLIENT → SERVER ====


class client_message_type(enum.IntEnum):
    GUESS = 1


@dataclass(frozen=True)
class ClientMessage:
    type: client_message_type
    payload: JSONPayload


# ==== GAME RESULT ====


class outcome_type(enum.IntEnum):
    PLAYER_0_EXACT_WIN = 1
    PLAYER_1_EXACT_WIN = 2
    PLAYER_0_HIGHER_SCORE = 3
    PLAYER_1_HIGHER_SCORE = 4
    DRAW = 5
    # a seat dropped or timed out, the other one wins
    PLAYER_0_FORFEIT_WIN = 6
    PLAYER_1_FORFEIT_WIN = 7


_WINNING_SEAT = {
    outcome_type.PLAYER_0_EXACT_WIN: 0,
    outcome_type.PLAYER_1_EXACT_WIN: 1,
    outcome_type.PLAYER_0_HIGHER_SCORE: 0,
    outcome_type.PLAYER_1_HIGHER_SCORE: 1,
    outcome_type.PLAYER_0_FORFEIT_WIN: 0,
    outcome_type.PLAYER_1_FORFEIT_WIN: 1,
}


def winner_seat(outcome: outcome_type) -> Optional[int]:
    """Seat that won, or None for a draw."""
    return _WINNING_SEAT.get(outcome)


class ProtocolError(ValueError):
    """Raised when a frame is not a valid message."""
