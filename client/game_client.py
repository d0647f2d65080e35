"""
Console client for the number duel.

`PlayerClient` connects to a game host, prints everything the host says and,
whenever the host hands it the turn, asks the local operator for a guess.
It is an explicit state machine: while waiting on the server it only reads
the socket, while waiting on the operator it only reads the console.
"""

from __future__ import annotations

import argparse
import enum
import socket
import sys
from contextlib import closing
from typing import BinaryIO, Callable, List, Optional, Tuple

from core.config import ConfigError, load_config
from core.logger import get_logger, set_level
from network.json_codec import decode_server_message, encode_client_message
from network.protocol import (
    ClientMessage,
    ProtocolError,
    ServerMessage,
    client_message_type,
    server_message_type,
)

logger = get_logger(__name__)

CONNECT_TIMEOUT = 10.0
GUESS_PROMPT = "Enter your guess: "


class client_state(enum.IntEnum):
    AWAITING_SERVER = 1
    AWAITING_LOCAL_INPUT = 2
    FINISHED = 3


class client_exit_status(enum.IntEnum):
    GAME_OVER = 0
    DISCONNECTED = 1
    CONNECTION_FAILED = 2
    INPUT_CLOSED = 3


def _print_verbatim(text: str) -> None:
    print(text, end="", flush=True)


class PlayerClient:
    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._input = input_func
        self._output = output_func or _print_verbatim
        self.state = client_state.AWAITING_SERVER
        self.seat: Optional[int] = None
        self.exit_status = client_exit_status.DISCONNECTED

    # Public API -----------------------------------------------------------------
    def run(self, server_address: Tuple[str, int]) -> client_exit_status:
        host, port = server_address
        logger.info("Connecting to %s:%s", host, port)
        try:
            sock = socket.create_connection((host, port), timeout=CONNECT_TIMEOUT)
        except socket.gaierror as exc:
            logger.error("Could not resolve %s: %s", host, exc)
            self._output(f"Invalid address / address not supported: {host}\n")
            return client_exit_status.CONNECTION_FAILED
        except OSError as exc:
            logger.error("Connection to %s:%s failed: %s", host, port, exc)
            self._output(f"Connection failed: {exc}\n")
            return client_exit_status.CONNECTION_FAILED
        # turns can take as long as the other player needs
        sock.settimeout(None)
        with closing(sock):
            return self.play(sock)

    def play(self, sock: socket.socket) -> client_exit_status:
        """Drive the game on an already connected socket until it ends."""
        self.state = client_state.AWAITING_SERVER
        self.exit_status = client_exit_status.DISCONNECTED
        with closing(sock.makefile("rb")) as reader:
            while self.state != client_state.FINISHED:
                if self.state == client_state.AWAITING_SERVER:
                    self._on_server(reader)
                else:
                    self._on_local_input(sock)
        return self.exit_status

    # State handlers ---------------------------------------------------------------
    def _on_server(self, reader: BinaryIO) -> None:
        msg = self._read_message(reader)
        if msg is None:
            logger.info("Server closed the connection")
            self._finish(client_exit_status.DISCONNECTED)
            return
        self._output(msg.text)
        match msg.type:
            case server_message_type.WELCOME:
                self.seat = msg.payload.get("seat")
            case server_message_type.PROMPT:
                self.state = client_state.AWAITING_LOCAL_INPUT
            case server_message_type.GAME_OVER:
                self._finish(client_exit_status.GAME_OVER)

    def _on_local_input(self, sock: socket.socket) -> None:
        try:
            guess = self._ask_guess()
        except (EOFError, KeyboardInterrupt):
            self._output("\nInput closed, leaving the game.\n")
            self._finish(client_exit_status.INPUT_CLOSED)
            return
        message = ClientMessage(
            type=client_message_type.GUESS, payload={"guess": guess}
        )
        try:
            sock.sendall(encode_client_message(message))
        except OSError as exc:
            logger.warning("Could not send guess: %s", exc)
            self._finish(client_exit_status.DISCONNECTED)
            return
        self.state = client_state.AWAITING_SERVER

    # Helpers ----------------------------------------------------------------------
    def _finish(self, status: client_exit_status) -> None:
        self.exit_status = status
        self.state = client_state.FINISHED

    def _ask_guess(self) -> int:
        while True:
            raw = self._input(GUESS_PROMPT).strip()
            try:
                return int(raw)
            except ValueError:
                self._output(f"{raw!r} is not a whole number, try again.\n")

    def _read_message(self, reader: BinaryIO) -> Optional[ServerMessage]:
        while True:
            try:
                line = reader.readline()
            except OSError as exc:
                logger.warning("Read from server failed: %s", exc)
                return None
            if not line:
                return None
            if not line.strip():
                continue
            try:
                return decode_server_message(line.decode("utf-8"))
            except (UnicodeDecodeError, ProtocolError) as exc:
                logger.warning("Skipping malformed message from server: %s", exc)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return int(client_exit_status.CONNECTION_FAILED)

    parser = argparse.ArgumentParser(description="Number duel player client")
    parser.add_argument(
        "--host", type=str, default=config.host, help="Game host address"
    )
    parser.add_argument("--port", type=int, default=config.port, help="Game host port")
    parser.add_argument(
        "--log", type=str, default=config.log_level, help="LOG level (DEBUG/INFO/...)"
    )
    args = parser.parse_args(argv)
    set_level(args.log)

    status = PlayerClient().run((args.host, args.port))
    return int(status)


if __name__ == "__main__":
    sys.exit(main())
