"""Scripted stand-ins for player clients, used by the game loop tests."""

from __future__ import annotations

import threading
from contextlib import closing
from typing import List, Sequence, Union

from network.json_codec import decode_server_message, encode_client_message
from network.protocol import (
    ClientMessage,
    ServerMessage,
    client_message_type,
    server_message_type,
)

# Leave the game instead of answering the next prompt.
DROP = object()
# Keep the connection open but never answer the next prompt.
STALL = object()

Move = Union[int, bytes, object]


class ScriptedPeer(threading.Thread):
    """
    Answers each PROMPT with the next scripted move: an int is sent as a
    GUESS, raw bytes are sent as-is, DROP closes the connection and STALL
    leaves the prompt unanswered.
    """

    def __init__(self, sock, moves: Sequence[Move]) -> None:
        super().__init__(daemon=True)
        self.sock = sock
        self.moves: List[Move] = list(moves)
        self.messages: List[ServerMessage] = []

    def run(self) -> None:
        try:
            with closing(self.sock.makefile("rb")) as reader:
                for line in reader:
                    msg = decode_server_message(line.decode("utf-8").strip())
                    self.messages.append(msg)
                    if msg.type == server_message_type.GAME_OVER:
                        break
                    if msg.type != server_message_type.PROMPT:
                        continue
                    if not self.moves:
                        break
                    move = self.moves.pop(0)
                    if move is DROP:
                        break
                    if move is STALL:
                        continue
                    if isinstance(move, bytes):
                        self.sock.sendall(move)
                    else:
                        self.sock.sendall(
                            encode_client_message(
                                ClientMessage(
                                    type=client_message_type.GUESS,
                                    payload={"guess": move},
                                )
                            )
                        )
        finally:
            self.sock.close()

    def of_type(self, message_type: server_message_type) -> List[ServerMessage]:
        return [m for m in self.messages if m.type == message_type]
