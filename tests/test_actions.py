import random
from dataclasses import dataclass, field

import pytest

from zappyd.actions import (
    ElevationRequirement,
    cmd_connect_nbr,
    cmd_fork,
    cmd_incantation,
    cmd_inventory,
    cmd_set,
    cmd_take,
    requirement_for,
)
from zappyd.game import Game
from zappyd.models import Client, ClientType, Resource


@dataclass
class _Hub:
    game: Game
    clients: list = field(default_factory=list)


@pytest.fixture
def hub():
    game = Game(10, 10, ["red", "blue"], 2, rng=random.Random(0))
    for row in game.grid:
        for tile in row:
            tile.resources = [0] * len(Resource)
            tile.eggs = []
    for team in game.teams:
        team.eggs = []
    return _Hub(game)


def _join(hub, x=3, y=4, team_name="red", level=1):
    team = hub.game.find_team(team_name)
    player = hub.game.create_player(team, x, y)
    player.level = level
    hub.game.place_player(player)
    client = Client(fd=len(hub.clients) + 5, type=ClientType.PLAYER, player=player)
    player.client = client
    hub.clients.append(client)
    return client


def test_requirement_table_values():
    assert requirement_for(1) == ElevationRequirement(1, 1, 1, 0, 0, 0, 0, 0)
    assert requirement_for(7) == ElevationRequirement(7, 6, 2, 2, 2, 2, 2, 1)


@pytest.mark.parametrize("level", [0, 8, -1])
def test_requirement_out_of_range(level):
    with pytest.raises(ValueError):
        requirement_for(level)


def test_requirement_levels_match_index():
    assert [requirement_for(level).level for level in range(1, 8)] == list(range(1, 8))


def test_inventory_format(hub):
    client = _join(hub)
    cmd_inventory(hub, client, ["Inventory"])
    assert client.take_output() == (
        b"[food 10, linemate 0, deraumere 0, sibur 0, mendiane 0, phiras 0, thystame 0]\n"
    )


def test_inventory_without_player():
    client = Client()
    cmd_inventory(None, client, ["Inventory"])
    assert client.take_output() == b"ko\n"


def test_connect_nbr_counts_free_slots(hub):
    client = _join(hub)
    team = client.player.team
    cmd_connect_nbr(hub, client, ["Connect_nbr"])
    first = client.take_output()
    team.connected_clients += 1
    cmd_connect_nbr(hub, client, ["Connect_nbr"])
    second = client.take_output()
    assert first == f"{team.max_clients}\n".encode()
    assert second == f"{team.max_clients - 1}\n".encode()


def test_connect_nbr_without_team(hub):
    client = _join(hub)
    client.player.team = None
    cmd_connect_nbr(hub, client, ["Connect_nbr"])
    assert client.take_output() == b"ko\n"


def test_fork_lays_egg_on_tile_and_team(hub):
    client = _join(hub, x=2, y=7)
    team = client.player.team
    cmd_fork(hub, client, ["Fork"])
    assert client.take_output() == b"ok\n"
    tile = hub.game.tile(2, 7)
    assert len(tile.eggs) == 1
    assert team.eggs[0] is tile.eggs[0]
    assert (tile.eggs[0].x, tile.eggs[0].y) == (2, 7)


def test_fork_without_team(hub):
    client = _join(hub)
    client.player.team = None
    cmd_fork(hub, client, ["Fork"])
    assert client.take_output() == b"ko\n"
    assert hub.game.tile(3, 4).eggs == []


def test_take_moves_one_unit(hub):
    client = _join(hub)
    tile = hub.game.tile(3, 4)
    tile.resources[Resource.SIBUR] = 2
    cmd_take(hub, client, ["Take", "sibur"])
    assert client.take_output() == b"ok\n"
    assert tile.resources[Resource.SIBUR] == 1
    assert client.player.inventory[Resource.SIBUR] == 1


@pytest.mark.parametrize("args", [["Take"], ["Take", "gold"], ["Take", "linemate"]])
def test_take_refused(hub, args):
    client = _join(hub)
    cmd_take(hub, client, args)
    assert client.take_output() == b"ko\n"
    assert client.player.inventory[Resource.LINEMATE] == 0


def test_set_then_take_round_trip(hub):
    client = _join(hub)
    before_tile = list(hub.game.tile(3, 4).resources)
    before_inventory = list(client.player.inventory)
    cmd_set(hub, client, ["Set", "food"])
    assert hub.game.tile(3, 4).resources[Resource.FOOD] == before_tile[Resource.FOOD] + 1
    cmd_take(hub, client, ["Take", "food"])
    assert client.take_output() == b"ok\nok\n"
    assert hub.game.tile(3, 4).resources == before_tile
    assert client.player.inventory == before_inventory


def test_set_without_stock(hub):
    client = _join(hub)
    cmd_set(hub, client, ["Set", "thystame"])
    assert client.take_output() == b"ko\n"
    assert hub.game.tile(3, 4).resources[Resource.THYSTAME] == 0


def test_incantation_level_one(hub):
    client = _join(hub)
    tile = hub.game.tile(3, 4)
    tile.resources[Resource.LINEMATE] = 1
    cmd_incantation(hub, client, ["Incantation"])
    assert client.take_output() == b"Elevation underway\nCurrent level: 2\n"
    assert client.player.level == 2
    assert tile.resources[Resource.LINEMATE] == 0


def test_incantation_missing_stones(hub):
    client = _join(hub)
    cmd_incantation(hub, client, ["Incantation"])
    assert client.take_output() == b"ko\n"
    assert client.player.level == 1


def test_incantation_needs_enough_players(hub):
    client = _join(hub, level=2)
    tile = hub.game.tile(3, 4)
    for resource in (Resource.LINEMATE, Resource.DERAUMERE, Resource.SIBUR):
        tile.resources[resource] = 1
    cmd_incantation(hub, client, ["Incantation"])
    assert client.take_output() == b"ko\n"
    assert tile.resources[Resource.LINEMATE] == 1


def test_incantation_raises_all_same_level(hub):
    first = _join(hub, level=2)
    second = _join(hub, level=2, team_name="blue")
    other = _join(hub, level=1)
    tile = hub.game.tile(3, 4)
    for resource in (Resource.LINEMATE, Resource.DERAUMERE, Resource.SIBUR):
        tile.resources[resource] = 1
    cmd_incantation(hub, first, ["Incantation"])
    assert first.player.level == second.player.level == 3
    assert other.player.level == 1
    assert second.take_output() == first.take_output()
    assert other.take_output() == b""
    assert tile.resources == [0] * len(Resource)


def test_incantation_at_max_level(hub):
    client = _join(hub, level=8)
    cmd_incantation(hub, client, ["Incantation"])
    assert client.take_output() == b"ko\n"
    assert client.player.level == 8