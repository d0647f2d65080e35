from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from network.protocol import SEATS, outcome_type
from server.connection import PlayerConnection
from server.scoring import is_exact_match


@dataclass
class Player:
    seat: int
    connection: Optional[PlayerConnection] = None
    score: int = 0


@dataclass(frozen=True)
class TurnRecord:
    round: int
    seat: int
    guess: Optional[int]  # None when the turn was forfeited
    score: int


@dataclass
class GameState:
    """
    Everything one game needs. Owned by the worker running the game, so no
    locking is done here.
    """

    secret: int
    max_rounds: int
    players: List[Player] = field(default_factory=lambda: [Player(0), Player(1)])
    round: int = 0
    winner: Optional[int] = None
    forfeited_seat: Optional[int] = None
    history: List[TurnRecord] = field(default_factory=list)
    outcome: Optional[outcome_type] = None

    def __post_init__(self) -> None:
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {self.max_rounds}")
        if [p.seat for p in self.players] != list(SEATS):
            raise ValueError("A game needs exactly two players in seats 0 and 1.")

    @property
    def turns_played(self) -> int:
        return len(self.history)

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.forfeited_seat is not None

    def record_turn(self, seat: int, guess: Optional[int], points: int) -> TurnRecord:
        if points < 0:
            raise ValueError("Scores never decrease.")
        record = TurnRecord(round=self.round, seat=seat, guess=guess, score=points)
        self.history.append(record)
        self.players[seat].score += points
        if guess is not None and is_exact_match(points) and self.winner is None:
            self.winner = seat
        return record

    def totals(self) -> List[int]:
        return [player.score for player in self.players]


def resolve_outcome(state: GameState) -> outcome_type:
    """
    Decide the result once the turn loop has stopped.

    An exact match beats everything, then a forfeit, then the higher total.
    """
    if state.winner is not None:
        return (
            outcome_type.PLAYER_0_EXACT_WIN
            if state.winner == 0
            else outcome_type.PLAYER_1_EXACT_WIN
        )
    if state.forfeited_seat is not None:
        return (
            outcome_type.PLAYER_1_FORFEIT_WIN
            if state.forfeited_seat == 0
            else outcome_type.PLAYER_0_FORFEIT_WIN
        )
    first, second = state.totals()
    if first > second:
        return outcome_type.PLAYER_0_HIGHER_SCORE
    if second > first:
        return outcome_type.PLAYER_1_HIGHER_SCORE
    return outcome_type.DRAW
