from typing import List, Optional

from network.protocol import (
    ServerMessage,
    outcome_type,
    server_message_type,
    winner_seat,
)

TURN_PROMPT_TEXT = "Your turn to guess: "
GAME_OVER_MARKER = "Game Over"


def _player_label(seat: int) -> str:
    return f"Player {seat + 1}"


def welcome_message(seat: int) -> ServerMessage:
    return ServerMessage(
        type=server_message_type.WELCOME,
        payload={"seat": seat, "text": f"Welcome {_player_label(seat)}!\n"},
    )


def prompt_message(round_no: int) -> ServerMessage:
    return ServerMessage(
        type=server_message_type.PROMPT,
        payload={"round": round_no, "text": TURN_PROMPT_TEXT},
    )


def feedback_message(guess: int, points: int, total: int) -> ServerMessage:
    return ServerMessage(
        type=server_message_type.FEEDBACK,
        payload={
            "guess": guess,
            "score": points,
            "total": total,
            "text": f"You guessed {guess}. Score this turn: {points}. Total: {total}\n",
        },
    )


def scorecard_message(totals: List[int]) -> ServerMessage:
    text = (
        "\n========= SCORECARD =========\n"
        f"{_player_label(0)}: {totals[0]}\n"
        f"{_player_label(1)}: {totals[1]}\n"
        "=============================\n\n"
    )
    return ServerMessage(
        type=server_message_type.SCORECARD,
        payload={"totals": list(totals), "text": text},
    )


def error_message(error: str) -> ServerMessage:
    return ServerMessage(
        type=server_message_type.ERROR,
        payload={"error": error, "text": f"{error}\n"},
    )


def _game_over_text(outcome: outcome_type, totals: List[int]) -> str:
    seat: Optional[int] = winner_seat(outcome)
    match outcome:
        case outcome_type.PLAYER_0_EXACT_WIN | outcome_type.PLAYER_1_EXACT_WIN:
            return (
                f"\n{GAME_OVER_MARKER}. {_player_label(seat)} guessed the correct "
                "number and wins with 100 points!\n"
            )
        case outcome_type.PLAYER_0_HIGHER_SCORE | outcome_type.PLAYER_1_HIGHER_SCORE:
            return (
                f"\n{GAME_OVER_MARKER}. No one guessed the correct number.\n"
                f"But {_player_label(seat)} wins by score: {totals[seat]}\n"
            )
        case outcome_type.PLAYER_0_FORFEIT_WIN | outcome_type.PLAYER_1_FORFEIT_WIN:
            return (
                f"\n{GAME_OVER_MARKER}. {_player_label(1 - seat)} left the game.\n"
                f"{_player_label(seat)} wins by forfeit with {totals[seat]} points.\n"
            )
        case _:
            return f"\n{GAME_OVER_MARKER}. It's a draw! Both players scored {totals[0]}\n"


def game_over_message(outcome: outcome_type, totals: List[int]) -> ServerMessage:
    return ServerMessage(
        type=server_message_type.GAME_OVER,
        payload={
            "outcome": int(outcome),
            "winner": winner_seat(outcome),
            "totals": list(totals),
            "text": _game_over_text(outcome, totals),
        },
    )
