"""TCP front end: accepts connections, moves bytes and drives the game clock."""

from __future__ import annotations

import logging
import random
import selectors
import socket
from dataclasses import dataclass, field

from zappyd.config import ServerConfig
from zappyd.game import Game
from zappyd.hub import Hub
from zappyd.models import BUFFER_SIZE, MAX_CLIENTS, Client
from zappyd.textutil import now_microseconds

logger = logging.getLogger(__name__)

LISTEN_BACKLOG = 128
POLL_FAILURE = 84


@dataclass(eq=False)
class _Connection:
    sock: socket.socket
    client: Client
    pending: bytearray = field(default_factory=bytearray)


class Server:
    """A listening socket, its connections and the game they play."""

    def __init__(
        self,
        config: ServerConfig,
        host: str = "",
        rng: random.Random | None = None,
    ) -> None:
        self._closed = False
        self._connections: dict[Client, _Connection] = {}
        self._listener = self._open_listener(host, config.port)
        try:
            self.game = Game(
                config.width,
                config.height,
                config.teams,
                config.clients_nb,
                config.freq,
                rng=rng,
            )
        except Exception:
            self._listener.close()
            raise
        self.port = self._listener.getsockname()[1]
        self.hub = Hub(self.game, on_disconnect=self._forget)
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ, None)
        self.current_time = now_microseconds()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _open_listener(host: str, port: int) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(LISTEN_BACKLOG)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        return sock

    def accept(self) -> Client | None:
        """Accept one pending connection and greet it; return its client, or None."""
        try:
            conn, address = self._listener.accept()
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as error:
            logger.error("accept: %s", error)
            return None
        conn.setblocking(False)
        client = Client(fd=conn.fileno())
        connection = _Connection(conn, client)
        self._connections[client] = connection
        self.hub.add_client(client)
        if len(self._connections) >= MAX_CLIENTS:
            self.hub.disconnect(client)
            return None
        self._selector.register(conn, selectors.EVENT_READ, connection)
        client.send("WELCOME\n")
        self._flush(connection)
        logger.info("New client connected from %s:%d", address[0], address[1])
        return client

    def _forget(self, client: Client) -> None:
        connection = self._connections.pop(client, None)
        if connection is None:
            return
        logger.info("Client disconnected (fd: %d)", client.fd)
        self._flush(connection)
        try:
            self._selector.unregister(connection.sock)
        except (KeyError, ValueError):
            pass
        connection.sock.close()

    @staticmethod
    def _flush(connection: _Connection) -> None:
        connection.pending += connection.client.take_output()
        if not connection.pending:
            return
        try:
            sent = connection.sock.send(connection.pending)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as error:
            logger.debug("write to fd %d failed: %s", connection.client.fd, error)
            return
        del connection.pending[:sent]

    def _flush_all(self) -> None:
        for connection in list(self._connections.values()):
            self._flush(connection)

    def _read(self, connection: _Connection) -> None:
        client = connection.client
        try:
            data = connection.sock.recv(BUFFER_SIZE)
        except (BlockingIOError, InterruptedError):
            return
        except OSError:
            self.hub.disconnect(client)
            return
        if not data:
            self.hub.disconnect(client)
            return
        self.hub.receive(client, data)

    def _time_unit_us(self) -> int:
        return 1_000_000 // self.game.time_unit

    def _timeout(self) -> float:
        elapsed = now_microseconds() - self.current_time
        milliseconds = (self._time_unit_us() - elapsed) // 1000
        return max(milliseconds, 0) / 1000

    def _tick(self) -> bool:
        current = now_microseconds()
        if current - self.current_time >= self._time_unit_us():
            self.current_time = current
            self.hub.update()
            return True
        return False

    def step(self, timeout: float | None = 0.0) -> bool:
        """Wait up to ``timeout`` seconds for events, handle them, and advance the
        game when a time unit has passed; tell whether the game advanced."""
        for key, _ in self._selector.select(timeout):
            if key.data is None:
                self.accept()
                continue
            connection = key.data
            if self._connections.get(connection.client) is connection:
                self._read(connection)
        updated = self._tick()
        self._flush_all()
        return updated

    def run(self) -> int:
        """Serve until waiting for events fails; return the exit status."""
        while True:
            try:
                self.step(self._timeout())
            except OSError as error:
                logger.error("poll: %s", error)
                return POLL_FAILURE

    def close(self) -> None:
        """Drop every client and stop listening."""
        if self._closed:
            return
        self._closed = True
        for client in list(self._connections):
            self.hub.disconnect(client)
        try:
            self._selector.unregister(self._listener)
        except (KeyError, ValueError):
            pass
        self._listener.close()
        self._selector.close()