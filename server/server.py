from __future__ import annotations

import argparse
import socket
import sys
import threading
from typing import Callable, List, Optional, Tuple

from core.config import (
    DEFAULT_MAX_INVALID_GUESSES,
    DEFAULT_MAX_ROUNDS,
    ConfigError,
    load_config,
)
from core.logger import get_logger, set_level
from network.protocol import outcome_type
from server.connection import PlayerConnection, PlayerDisconnected
from server.game import run_game
from server.game_state import GameState, Player
from server.messages import welcome_message

logger = get_logger(__name__)

BACKLOG = 2  # exactly two players per game


class GameHost:
    """
    Accepts two players and runs one game between them.

    The first accepted connection sits in seat 0, the second in seat 1. The
    game itself runs on a single worker thread which `start` waits on.
    """

    def __init__(
        self,
        bind_host: str = "0.0.0.0",
        port: int = 8080,
        turn_timeout: Optional[float] = None,
        max_invalid_guesses: int = DEFAULT_MAX_INVALID_GUESSES,
    ) -> None:
        if turn_timeout is not None and turn_timeout <= 0:
            raise ValueError(f"turn_timeout must be positive, got {turn_timeout}")
        self.bind_host = bind_host
        self.port = port
        self.turn_timeout = turn_timeout
        self.max_invalid_guesses = max_invalid_guesses
        self._server_socket: Optional[socket.socket] = None
        self.state: Optional[GameState] = None

    def bind(self) -> Tuple[str, int]:
        if self._server_socket is None:
            server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            try:
                server_socket.bind((self.bind_host, self.port))
                server_socket.listen(BACKLOG)
            except OSError:
                server_socket.close()
                raise
            self._server_socket = server_socket
            self.port = server_socket.getsockname()[1]
            logger.info("Server listening on %s:%s", self.bind_host, self.port)
        return self.bind_host, self.port

    def _accept_players(self) -> List[Player]:
        players: List[Player] = []
        logger.info("Waiting for players to connect...")
        for seat in (0, 1):
            client_socket, client_address = self._server_socket.accept()
            conn = PlayerConnection(
                client_socket, seat, client_address, turn_timeout=self.turn_timeout
            )
            logger.info("Seat %s taken by %s", seat, conn.address)
            players.append(Player(seat=seat, connection=conn))
            try:
                conn.send(welcome_message(seat))
            except PlayerDisconnected as exc:
                # the game loop notices the dead seat on its first send
                logger.warning("Could not greet seat %s: %s", seat, exc.reason)
        return players

    def start(self, secret: int, max_rounds: int = DEFAULT_MAX_ROUNDS) -> outcome_type:
        self.bind()
        errors: List[BaseException] = []
        try:
            players = self._accept_players()
            self.state = GameState(
                secret=secret, max_rounds=max_rounds, players=players
            )

            def _worker() -> None:
                try:
                    run_game(self.state, self.max_invalid_guesses)
                except Exception as exc:
                    errors.append(exc)

            game_thread = threading.Thread(target=_worker, name="game-worker")
            game_thread.start()
            game_thread.join()
        finally:
            self.close()
        if errors:
            raise errors[0]
        return self.state.outcome

    def close(self) -> None:
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None
            logger.info("Server socket closed")


def prompt_secret(
    input_func: Callable[[str], str] = input,
    output_func: Callable[[str], None] = print,
) -> int:
    """Ask the host operator for the secret until an integer is entered."""
    while True:
        raw = input_func("Enter number to guess: ")
        try:
            return int(raw.strip())
        except ValueError:
            output_func(f"{raw.strip()!r} is not a whole number, try again.")


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    parser = argparse.ArgumentParser(description="Number duel game host")
    parser.add_argument(
        "--bind", type=str, default=config.bind_host, help="Address to listen on"
    )
    parser.add_argument("--port", type=int, default=config.port, help="Port to listen on")
    parser.add_argument(
        "--rounds", type=int, default=config.max_rounds, help="Rounds per game"
    )
    parser.add_argument(
        "--secret", type=int, default=None, help="Secret number (prompted when omitted)"
    )
    parser.add_argument(
        "--turn-timeout",
        type=float,
        default=config.turn_timeout,
        help="Seconds a player may take per guess before forfeiting",
    )
    parser.add_argument(
        "--log", type=str, default=config.log_level, help="LOG level (DEBUG/INFO/...)"
    )
    args = parser.parse_args(argv)
    if args.rounds < 1:
        parser.error("--rounds must be at least 1")
    if args.turn_timeout is not None and args.turn_timeout <= 0:
        parser.error("--turn-timeout must be a positive number of seconds")
    set_level(args.log)

    secret = args.secret
    if secret is None:
        try:
            secret = prompt_secret()
        except (EOFError, KeyboardInterrupt):
            print("\nNo secret entered, exiting.")
            return 1
    logger.info("Number to guess is: %s", secret)

    host = GameHost(
        bind_host=args.bind,
        port=args.port,
        turn_timeout=args.turn_timeout,
        max_invalid_guesses=config.max_invalid_guesses,
    )
    try:
        outcome = host.start(secret, args.rounds)
    except OSError as exc:
        logger.error("Could not run the game on %s:%s: %s", args.bind, args.port, exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        host.close()
        return 130
    logger.info("Final outcome: %s", outcome.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
