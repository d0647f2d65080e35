import contextlib
import io
import os
import socket
import unittest
from contextlib import closing
from unittest import mock

from server.connection import PlayerConnection
from server.server import GameHost, main


class TurnTimeoutValidationTest(unittest.TestCase):
    def _main_exit_code(self, *argv: str) -> int:
        stderr = io.StringIO()
        env = {k: v for k, v in os.environ.items() if not k.startswith("GAME_")}
        with mock.patch.dict(os.environ, env, clear=True):
            with contextlib.redirect_stderr(stderr):
                with self.assertRaises(SystemExit) as ctx:
                    main(list(argv))
        self.assertIn("--turn-timeout", stderr.getvalue())
        return ctx.exception.code

    def test_cli_rejects_zero_and_negative_timeouts(self) -> None:
        for value in ("0", "-1", "-0.5"):
            with self.subTest(value=value):
                with mock.patch("server.server.GameHost") as host_cls:
                    code = self._main_exit_code(
                        "--secret", "5", "--port", "0", f"--turn-timeout={value}"
                    )
                self.assertEqual(code, 2)
                host_cls.assert_not_called()

    def test_host_rejects_non_positive_timeout(self) -> None:
        for value in (0, -3.0):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    GameHost(bind_host="127.0.0.1", port=0, turn_timeout=value)

    def test_connection_rejects_non_positive_timeout(self) -> None:
        left, right = socket.socketpair()
        with closing(left), closing(right):
            with self.assertRaises(ValueError):
                PlayerConnection(left, 0, turn_timeout=0.0)
            conn = PlayerConnection(left, 0, turn_timeout=0.5)
            self.assertEqual(left.gettimeout(), 0.5)
            self.assertEqual(conn.turn_timeout, 0.5)


if __name__ == "__main__":
    unittest.main()
