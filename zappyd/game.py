"""Game world: the map, the teams with their eggs, resource spawning and players."""

from __future__ import annotations

import random
import struct
from collections.abc import Iterable

from zappyd.models import NB_RESOURCES, Egg, Player, Resource, Team, Tile
from zappyd.textutil import now_microseconds

RESOURCE_DENSITY: tuple[float, ...] = (0.05, 0.03, 0.015, 0.01, 0.01, 0.008, 0.005)
INITIAL_FOOD = 10
FOOD_TIMER = 126


def _float32(value: float) -> float:
    """Round ``value`` to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def resource_quantity(width: int, height: int, resource: int) -> int:
    """Units of ``resource`` spread over a ``width`` x ``height`` map per spawn (at least one)."""
    total_tiles = width * height
    density = _float32(RESOURCE_DENSITY[resource])
    quantity = int(_float32(total_tiles * density))
    return max(quantity, 1)


class Game:
    """The world: a wrapping grid of tiles, the teams, and the id counters."""

    def __init__(
        self,
        width: int,
        height: int,
        teams: Iterable[str],
        nb_clients: int,
        freq: int = 100,
        rng: random.Random | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid map size: {width}x{height}")
        self.width = width
        self.height = height
        self.time_unit = freq
        self.rng = rng if rng is not None else random.Random()
        self.grid: list[list[Tile]] = [
            [Tile() for _ in range(width)] for _ in range(height)
        ]
        self.teams: list[Team] = []
        self.player_id_counter = 0
        self.egg_id_counter = 0
        self.last_resource_spawn = 0
        for name in teams:
            self._add_team(name, nb_clients)
        self.spawn_resources()

    def _new_egg(self, team: Team | None, x: int, y: int) -> Egg:
        egg = Egg(self.egg_id_counter, x, y, team)
        self.egg_id_counter += 1
        return egg

    def _add_team(self, name: str, nb_clients: int) -> Team:
        team = Team(name, nb_clients)
        for _ in range(nb_clients):
            x = self.rng.randrange(self.width)
            y = self.rng.randrange(self.height)
            egg = self._new_egg(team, x, y)
            team.eggs.insert(0, egg)
            self.tile(x, y).eggs.append(egg)
        self.teams.append(team)
        return team

    def wrap(self, x: int, y: int) -> tuple[int, int]:
        """Bring coordinates back onto the torus."""
        return x % self.width, y % self.height

    def tile(self, x: int, y: int) -> Tile:
        """Tile at ``(x, y)``, coordinates wrapping around the edges."""
        x, y = self.wrap(x, y)
        return self.grid[y][x]

    def spawn_resources(self) -> None:
        """Scatter a fresh batch of every resource over random tiles."""
        for resource in range(NB_RESOURCES):
            for _ in range(resource_quantity(self.width, self.height, resource)):
                x = self.rng.randrange(self.width)
                y = self.rng.randrange(self.height)
                self.tile(x, y).resources[resource] += 1
        self.last_resource_spawn = now_microseconds()

    def find_team(self, name: str) -> Team | None:
        """Team called ``name``, or None."""
        for team in self.teams:
            if team.name == name:
                return team
        return None

    def create_player(self, team: Team | None, x: int, y: int) -> Player:
        """Make a new level-1 player facing a random direction; it is not yet on the map."""
        self.player_id_counter += 1
        orientation = self.rng.randrange(4) + 1
        inventory = [0] * NB_RESOURCES
        inventory[Resource.FOOD] = INITIAL_FOOD
        return Player(
            id=self.player_id_counter,
            x=x,
            y=y,
            orientation=orientation,
            team=team,
            inventory=inventory,
            food_timer=FOOD_TIMER,
        )

    def place_player(self, player: Player) -> bool:
        """Put ``player`` on the tile at its position; tell whether there was room."""
        return self.tile(player.x, player.y).add_player(player)

    def move_player(self, player: Player, x: int, y: int) -> None:
        """Move ``player`` from its tile to the tile at ``(x, y)``."""
        self.tile(player.x, player.y).remove_player(player)
        player.x, player.y = self.wrap(x, y)
        self.tile(player.x, player.y).add_player(player)

    def lay_egg(self, player: Player) -> Egg:
        """Lay an egg of the player's team on the player's tile."""
        if player.team is None:
            raise ValueError(f"player {player.id} has no team")
        egg = self._new_egg(player.team, player.x, player.y)
        player.team.eggs.insert(0, egg)
        self.tile(egg.x, egg.y).eggs.insert(0, egg)
        return egg