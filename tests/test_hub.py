import random

import pytest

from zappyd.game import Game
from zappyd.hub import FOOD_TICKS, Hub, find_command
from zappyd.models import MAX_CMD_QUEUE, Client, ClientType, Resource


def make_hub(nb_clients=2):
    game = Game(10, 10, ["red", "blue"], nb_clients, rng=random.Random(0))
    dropped = []
    return Hub(game, on_disconnect=dropped.append), dropped


def connect(hub, team=b"red"):
    client = Client()
    hub.add_client(client)
    hub.receive(client, team + b"\n")
    return client


@pytest.mark.parametrize(
    "name,time",
    [("Forward", 7), ("Inventory", 1), ("Connect_nbr", 0), ("Fork", 42), ("Incantation", 300)],
)
def test_find_command_times(name, time):
    info = find_command(name)
    assert info.name == name
    assert info.time == time


@pytest.mark.parametrize("name", ["forward", "Unknown", ""])
def test_find_command_unknown(name):
    assert find_command(name) is None


def test_player_connection_sends_slots_and_size():
    hub, _ = make_hub()
    team = hub.game.find_team("red")
    egg = team.eggs[0]
    client = connect(hub)
    assert client.take_output() == b"1\n10 10\n"
    assert client.type is ClientType.PLAYER
    assert client.player.client is client
    assert (client.player.x, client.player.y) == (egg.x, egg.y)
    assert client.player in hub.game.tile(egg.x, egg.y).players
    assert team.connected_clients == 1


def test_carriage_return_is_ignored_in_team_name():
    hub, _ = make_hub()
    client = connect(hub, b"blue\r")
    assert client.type is ClientType.PLAYER
    assert client.player.team is hub.game.find_team("blue")


def test_unknown_team_is_rejected():
    hub, dropped = make_hub()
    client = connect(hub, b"green")
    assert client.take_output() == b"ko\n"
    assert client not in hub.clients
    assert dropped == [client]


def test_full_team_is_rejected():
    hub, dropped = make_hub(nb_clients=1)
    first = connect(hub)
    second = connect(hub)
    assert first.type is ClientType.PLAYER
    assert second.take_output() == b"ko\n"
    assert dropped == [second]
    assert hub.game.find_team("red").connected_clients == 1


def test_graphic_connection_receives_world():
    hub, _ = make_hub()
    player_client = connect(hub)
    gui = connect(hub, b"GRAPHIC")
    text = gui.take_output().decode()
    assert gui.type is ClientType.GRAPHIC
    assert text.startswith("msz 10 10\ntna red\ntna blue\n")
    assert text.count("bct ") == 100
    assert f"ppo #{player_client.player.id} " in text


def test_player_lines_are_queued_and_limited():
    hub, _ = make_hub()
    client = connect(hub)
    hub.receive(client, b"Inventory  \n")
    assert list(client.commands) == ["Inventory"]
    hub.receive(client, b"Look\n" * (MAX_CMD_QUEUE + 5))
    assert len(client.commands) == MAX_CMD_QUEUE


def test_process_inventory_command():
    hub, _ = make_hub()
    client = connect(hub)
    client.take_output()
    hub.receive(client, b"Inventory\n")
    hub.process_commands(client)
    assert client.take_output() == (
        b"[food 10, linemate 0, deraumere 0, sibur 0, mendiane 0, phiras 0, thystame 0]\n"
    )
    assert client.player.action_time == 1
    assert not client.commands


@pytest.mark.parametrize("line", [b"Dance\n", b"   \n"])
def test_bad_command_answers_ko(line):
    hub, _ = make_hub()
    client = connect(hub)
    client.take_output()
    hub.receive(client, line)
    hub.process_commands(client)
    assert client.take_output() == b"ko\n"
    assert client.player.action_time == 0


def test_busy_player_keeps_queue():
    hub, _ = make_hub()
    client = connect(hub)
    client.player.action_time = 3
    hub.receive(client, b"Right\n")
    hub.process_commands(client)
    assert list(client.commands) == ["Right"]


def test_update_runs_commands_after_action_time():
    hub, _ = make_hub()
    client = connect(hub)
    player = client.player
    start = player.orientation
    hub.receive(client, b"Right\nLeft\n")
    hub.update()
    assert player.orientation == start % 4 + 1
    assert player.action_time == 7
    for _ in range(6):
        hub.update()
    assert list(client.commands) == ["Left"]
    hub.update()
    assert player.orientation == start
    assert not client.commands


def test_kill_player():
    hub, _ = make_hub()
    client = connect(hub)
    player = client.player
    client.take_output()
    hub.kill_player(player)
    assert client.take_output() == b"dead\n"
    assert client.player is None
    assert player not in hub.game.tile(player.x, player.y).players
    assert hub.game.find_team("red").connected_clients == 0


def test_starving_player_dies():
    hub, _ = make_hub()
    client = connect(hub)
    client.player.inventory[Resource.FOOD] = 0
    client.player.food_timer = 1
    client.take_output()
    for _ in range(FOOD_TICKS):
        hub.update()
    assert client.player is None
    assert client.take_output() == b"dead\n"


def test_fed_player_eats():
    hub, _ = make_hub()
    client = connect(hub)
    client.player.inventory[Resource.FOOD] = 3
    client.player.food_timer = 1
    for _ in range(FOOD_TICKS):
        hub.update()
    assert client.player.inventory[Resource.FOOD] == 2
    assert client.player.food_timer == 126


def test_disconnect_kills_player_and_forgets_client():
    hub, dropped = make_hub()
    client = connect(hub)
    player = client.player
    hub.receive(client, b"Look\n")
    hub.disconnect(client)
    assert client not in hub.clients
    assert dropped == [client]
    assert not client.commands
    assert player not in hub.game.tile(player.x, player.y).players
    assert hub.game.find_team("red").connected_clients == 0


def test_newest_client_first():
    hub, _ = make_hub()
    first = Client()
    second = Client()
    hub.add_client(first)
    hub.add_client(second)
    assert hub.clients == [second, first]