"""Core game entities: resources, orientations, teams, eggs, tiles, players and clients."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from zappyd.textutil import rstrip_whitespace

MAX_CLIENTS = 1024
BUFFER_SIZE = 4096
MAX_TEAMS = 10
MAX_CMD_QUEUE = 10


class Resource(IntEnum):
    """Resources that lie on tiles and fill inventories."""

    FOOD = 0
    LINEMATE = 1
    DERAUMERE = 2
    SIBUR = 3
    MENDIANE = 4
    PHIRAS = 5
    THYSTAME = 6


NB_RESOURCES = len(Resource)

RESOURCE_NAMES: tuple[str, ...] = (
    "food",
    "linemate",
    "deraumere",
    "sibur",
    "mendiane",
    "phiras",
    "thystame",
)


class Orientation(IntEnum):
    """Direction a player faces."""

    NORTH = 1
    EAST = 2
    SOUTH = 3
    WEST = 4


class ClientType(Enum):
    """Role of a connected client."""

    UNKNOWN = "unknown"
    PLAYER = "player"
    GRAPHIC = "graphic"


def resource_index(name: str | None) -> int:
    """Return the index of the resource called ``name``; raise ValueError if unknown."""
    if name is None:
        raise ValueError("no resource name given")
    try:
        return RESOURCE_NAMES.index(name)
    except ValueError:
        raise ValueError(f"unknown resource: {name!r}") from None


def resource_name(index: int) -> str:
    """Return the protocol name of the resource at ``index``."""
    if not 0 <= index < NB_RESOURCES:
        raise ValueError(f"resource index out of range: {index}")
    return RESOURCE_NAMES[index]


def is_valid_resource(name: str | None) -> bool:
    """Tell whether ``name`` names a resource."""
    return name in RESOURCE_NAMES


def _empty_resources() -> list[int]:
    return [0] * NB_RESOURCES


@dataclass(eq=False)
class Egg:
    """An egg from which a new player of a team can hatch."""

    id: int
    x: int
    y: int
    team: Team | None = field(default=None, repr=False)


@dataclass(eq=False)
class Team:
    """A team with its slot limit and the eggs it owns."""

    name: str
    max_clients: int
    connected_clients: int = 0
    eggs: list[Egg] = field(default_factory=list, repr=False)

    def available_slots(self) -> int:
        """Number of further players the team may still connect."""
        return self.max_clients - self.connected_clients


@dataclass(eq=False)
class Player:
    """A player standing on the map."""

    id: int
    x: int
    y: int
    orientation: int = Orientation.NORTH
    team: Team | None = field(default=None, repr=False)
    level: int = 1
    inventory: list[int] = field(default_factory=_empty_resources)
    food_timer: int = 126
    client: Client | None = field(default=None, repr=False)
    is_incanting: bool = False
    action_time: int = 0


@dataclass(eq=False)
class Tile:
    """One square of the map."""

    resources: list[int] = field(default_factory=_empty_resources)
    players: list[Player] = field(default_factory=list)
    eggs: list[Egg] = field(default_factory=list)

    def add_player(self, player: Player) -> bool:
        """Put ``player`` on the tile unless it is full; tell whether it was added."""
        if len(self.players) >= MAX_CLIENTS:
            return False
        self.players.append(player)
        return True

    def remove_player(self, player: Player) -> bool:
        """Take ``player`` off the tile; tell whether it was there."""
        for position, present in enumerate(self.players):
            if present is player:
                del self.players[position]
                return True
        return False


@dataclass(eq=False)
class Client:
    """A connection with its pending input, pending output and command queue."""

    fd: int = -1
    type: ClientType = ClientType.UNKNOWN
    player: Player | None = field(default=None, repr=False)
    commands: deque[str] = field(default_factory=deque)
    _inbox: bytearray = field(default_factory=bytearray, repr=False)
    _outbox: bytearray = field(default_factory=bytearray, repr=False)

    def send(self, message: str | bytes) -> bool:
        """Queue ``message`` for output; refuse it when the buffer would overflow."""
        data = message.encode() if isinstance(message, str) else bytes(message)
        if BUFFER_SIZE - len(self._outbox) < len(data):
            return False
        self._outbox += data
        return True

    def take_output(self) -> bytes:
        """Return and clear everything queued for output."""
        data = bytes(self._outbox)
        self._outbox.clear()
        return data

    def feed(self, data: bytes) -> list[str]:
        """Absorb received bytes and return the complete lines now available."""
        room = BUFFER_SIZE - 1 - len(self._inbox)
        if room > 0:
            self._inbox += data[:room]
        lines = []
        while True:
            end = self._inbox.find(b"\n")
            if end < 0:
                break
            lines.append(self._inbox[:end].decode("utf-8", errors="replace"))
            del self._inbox[: end + 1]
        return lines

    def enqueue(self, line: str) -> bool:
        """Add a command line to the queue unless the queue is full."""
        if len(self.commands) >= MAX_CMD_QUEUE:
            return False
        self.commands.append(rstrip_whitespace(line))
        return True