from __future__ import annotations

from core.config import DEFAULT_MAX_INVALID_GUESSES
from core.logger import get_logger
from network.protocol import ServerMessage, outcome_type
from server.connection import InvalidGuess, PlayerDisconnected
from server.game_state import GameState, Player, resolve_outcome
from server.messages import (
    error_message,
    feedback_message,
    game_over_message,
    prompt_message,
    scorecard_message,
)
from server.scoring import score

logger = get_logger(__name__)


def _broadcast(state: GameState, msg: ServerMessage) -> None:
    for player in state.players:
        player.connection.send(msg)


def _request_guess(
    state: GameState, player: Player, max_invalid_guesses: int
) -> int | None:
    """
    Prompt `player` until a valid guess arrives.

    Returns None when the player used up `max_invalid_guesses` attempts.
    """
    conn = player.connection
    for attempt in range(1, max_invalid_guesses + 1):
        conn.discard_pending()
        conn.send(prompt_message(state.round))
        try:
            return conn.read_guess()
        except InvalidGuess as exc:
            logger.warning(
                "Rejected guess from seat %s (attempt %s/%s): %s",
                player.seat,
                attempt,
                max_invalid_guesses,
                exc,
            )
            if attempt < max_invalid_guesses:
                conn.send(
                    error_message(f"Invalid guess: {exc} Please send a whole number.")
                )
    return None


def _play_turn(state: GameState, player: Player, max_invalid_guesses: int) -> None:
    guess = _request_guess(state, player, max_invalid_guesses)
    if guess is None:
        state.record_turn(player.seat, None, 0)
        player.connection.send(
            error_message("Too many invalid guesses. Your turn is forfeited (0 points).")
        )
        logger.info(
            "Round %s seat %s forfeited the turn, total=%s",
            state.round,
            player.seat,
            player.score,
        )
    else:
        points = score(guess, state.secret)
        state.record_turn(player.seat, guess, points)
        player.connection.send(feedback_message(guess, points, player.score))
        logger.info(
            "Round %s seat %s guessed %s -> %s points, total=%s",
            state.round,
            player.seat,
            guess,
            points,
            player.score,
        )
    _broadcast(state, scorecard_message(state.totals()))


def _finish(state: GameState) -> None:
    end_msg = game_over_message(state.outcome, state.totals())
    for player in state.players:
        try:
            player.connection.send(end_msg)
        except PlayerDisconnected as exc:
            logger.info(
                "Could not deliver result to seat %s: %s", player.seat, exc.reason
            )
        finally:
            player.connection.close()


def run_game(
    state: GameState, max_invalid_guesses: int = DEFAULT_MAX_INVALID_GUESSES
) -> outcome_type:
    """
    Play the whole game on the calling thread.

    Seats take turns in order for `state.max_rounds` rounds. The loop stops
    early on an exact match or when a seat drops, which forfeits the game.
    Both connections are closed before returning.
    """
    logger.info("Game started: %s rounds", state.max_rounds)
    try:
        try:
            for round_no in range(state.max_rounds):
                state.round = round_no
                for player in state.players:
                    _play_turn(state, player, max_invalid_guesses)
                    if state.finished:
                        break
                if state.finished:
                    break
        except PlayerDisconnected as exc:
            logger.warning("Seat %s forfeits: %s", exc.seat, exc.reason)
            state.forfeited_seat = exc.seat

        state.outcome = resolve_outcome(state)
        logger.info(
            "Game over after %s turns: %s totals=%s",
            state.turns_played,
            state.outcome.name,
            state.totals(),
        )
        _finish(state)
    except Exception:
        logger.exception("Unexpected error while running the game")
        for player in state.players:
            player.connection.close()
        raise
    return state.outcome
