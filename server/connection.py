from __future__ import annotations

import socket
from typing import Optional, Tuple

from core.logger import get_logger
from network.json_codec import decode_client_message, encode_server_message
from network.protocol import (
    ClientMessage,
    ProtocolError,
    ServerMessage,
    client_message_type,
)

logger = get_logger(__name__)

BUFFER_SIZE = 4096  # bytes
MAX_FRAME_SIZE = 64 * 1024


class PlayerDisconnected(ConnectionError):
    """The player's connection closed, failed or timed out."""

    def __init__(self, seat: int, reason: str = "connection closed") -> None:
        super().__init__(f"Player in seat {seat} disconnected: {reason}")
        self.seat = seat
        self.reason = reason


class InvalidGuess(ValueError):
    """The player sent something that is not a single integer guess."""


class PlayerConnection:
    """One seat's socket, with newline framing on reads."""

    def __init__(
        self,
        sock: socket.socket,
        seat: int,
        address: Tuple[str, int] | None = None,
        turn_timeout: Optional[float] = None,
    ) -> None:
        if turn_timeout is not None and turn_timeout <= 0:
            raise ValueError(f"turn_timeout must be positive, got {turn_timeout}")
        self.sock = sock
        self.seat = seat
        self.address = address
        self.turn_timeout = turn_timeout
        self._buffer = b""
        self._closed = False
        self.sock.settimeout(turn_timeout)

    def send(self, msg: ServerMessage) -> None:
        try:
            self.sock.sendall(encode_server_message(msg))
        except OSError as exc:
            raise PlayerDisconnected(self.seat, f"send failed: {exc}") from exc
        logger.debug("TX seat=%s type=%s", self.seat, msg.type.name)

    def _recv_chunk(self) -> bytes:
        try:
            chunk = self.sock.recv(BUFFER_SIZE)
        except socket.timeout as exc:
            raise PlayerDisconnected(self.seat, "turn timed out") from exc
        except OSError as exc:
            raise PlayerDisconnected(self.seat, f"read failed: {exc}") from exc
        if not chunk:
            raise PlayerDisconnected(self.seat)
        return chunk

    def _skip_oversized_line(self) -> None:
        while b"\n" not in self._buffer:
            self._buffer = self._recv_chunk()
        self._buffer = self._buffer.split(b"\n", 1)[1]

    def _read_line(self) -> bytes:
        while b"\n" not in self._buffer:
            if len(self._buffer) > MAX_FRAME_SIZE:
                # drop the whole line so it counts as one bad message
                self._skip_oversized_line()
                raise InvalidGuess("Message too large.")
            self._buffer += self._recv_chunk()
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line

    def discard_pending(self) -> int:
        """
        Drop anything the player sent before being prompted.

        Returns the number of bytes dropped. A closed peer is left for the
        next read to report.
        """
        dropped = len(self._buffer)
        self._buffer = b""
        self.sock.setblocking(False)
        try:
            while True:
                chunk = self.sock.recv(BUFFER_SIZE)
                if not chunk:
                    break
                dropped += len(chunk)
        except BlockingIOError:
            pass
        except OSError as exc:
            raise PlayerDisconnected(self.seat, f"read failed: {exc}") from exc
        finally:
            self.sock.settimeout(self.turn_timeout)
        if dropped:
            logger.warning(
                "Dropped %s unrequested bytes from seat %s", dropped, self.seat
            )
        return dropped

    def read_message(self) -> ClientMessage:
        while True:
            line = self._read_line()
            if line.strip():
                break
        try:
            message = decode_client_message(line.decode("utf-8"))
        except (UnicodeDecodeError, ProtocolError) as exc:
            raise InvalidGuess(f"Could not decode message: {exc}") from exc
        logger.debug("RX seat=%s type=%s", self.seat, message.type.name)
        return message

    def read_guess(self) -> int:
        message = self.read_message()
        if message.type != client_message_type.GUESS:
            raise InvalidGuess(f"Expected a guess, got {message.type.name}.")
        guess = message.payload.get("guess")
        if not isinstance(guess, int) or isinstance(guess, bool):
            raise InvalidGuess(f"Guess must be an integer, got {guess!r}.")
        return guess

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.sock.close()
        except OSError:
            logger.debug("Socket for seat %s already gone", self.seat)
