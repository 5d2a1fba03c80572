"""Client sessions: login, command queues, command dispatch and the game clock."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from zappyd.actions import (
    cmd_connect_nbr,
    cmd_fork,
    cmd_incantation,
    cmd_inventory,
    cmd_set,
    cmd_take,
)
from zappyd.game import FOOD_TIMER, Game
from zappyd.gui import handle_graphic_connection
from zappyd.models import Client, ClientType, Player, Resource, Team
from zappyd.movement import cmd_broadcast, cmd_eject, cmd_forward, cmd_left, cmd_right
from zappyd.textutil import split_words
from zappyd.vision import cmd_look

logger = logging.getLogger(__name__)

GRAPHIC_TEAM = "GRAPHIC"
FOOD_TICKS = 126
RESOURCE_TICKS = 20
_NAME_LIMIT = 255


@dataclass(frozen=True)
class CommandInfo:
    """A player command: its name, its handler and its duration in time units."""

    name: str
    func: Callable[["Hub", Client, list[str]], None]
    time: int


COMMANDS: tuple[CommandInfo, ...] = (
    CommandInfo("Forward", cmd_forward, 7),
    CommandInfo("Right", cmd_right, 7),
    CommandInfo("Left", cmd_left, 7),
    CommandInfo("Look", cmd_look, 7),
    CommandInfo("Inventory", cmd_inventory, 1),
    CommandInfo("Broadcast", cmd_broadcast, 7),
    CommandInfo("Connect_nbr", cmd_connect_nbr, 0),
    CommandInfo("Fork", cmd_fork, 42),
    CommandInfo("Eject", cmd_eject, 7),
    CommandInfo("Take", cmd_take, 7),
    CommandInfo("Set", cmd_set, 7),
    CommandInfo("Incantation", cmd_incantation, 300),
)

_COMMANDS_BY_NAME = {info.name: info for info in COMMANDS}


def find_command(name: str) -> CommandInfo | None:
    """The command called exactly ``name``, or None."""
    return _COMMANDS_BY_NAME.get(name)


def _clean_name(name: str) -> str:
    name = name[:_NAME_LIMIT]
    for stop in ("\n", "\r", "\0"):
        name = name.split(stop, 1)[0]
    return name


class Hub:
    """The connected clients around a game, and the rules that tie them together."""

    def __init__(
        self,
        game: Game,
        on_disconnect: Callable[[Client], None] | None = None,
    ) -> None:
        self.game = game
        self.clients: list[Client] = []
        self.on_disconnect = on_disconnect
        self._food_tick = 0
        self._resource_tick = 0

    def add_client(self, client: Client) -> None:
        """Register a freshly connected client; newest clients come first."""
        self.clients.insert(0, client)

    def receive(self, client: Client, data: bytes) -> None:
        """Feed received bytes to ``client`` and handle every complete line."""
        for line in client.feed(data):
            if client not in self.clients:
                break
            self.handle_line(client, line)

    def handle_line(self, client: Client, line: str) -> None:
        """Handle one line: a team name from a newcomer or a command from a player."""
        if client.type is ClientType.UNKNOWN:
            self.handle_new_client(client, line)
        elif client.type is ClientType.PLAYER:
            client.enqueue(line)

    def handle_new_client(self, client: Client, team_name: str) -> None:
        """Log ``client`` in as a graphical client or as a player of a team."""
        name = _clean_name(team_name)
        if name == GRAPHIC_TEAM:
            handle_graphic_connection(self, client)
            return
        team = self.game.find_team(name)
        if team is None:
            self.reject(client)
            return
        self._connect_player(client, team)

    def _connect_player(self, client: Client, team: Team) -> None:
        egg = team.eggs[0] if team.eggs else None
        if egg is None or team.connected_clients >= team.max_clients:
            self.reject(client)
            return
        player = self.game.create_player(team, egg.x, egg.y)
        team.connected_clients += 1
        self.game.place_player(player)
        client.player = player
        player.client = client
        client.type = ClientType.PLAYER
        client.send(f"{team.available_slots()}\n")
        client.send(f"{self.game.width} {self.game.height}\n")

    def reject(self, client: Client) -> None:
        """Refuse ``client`` and drop its connection."""
        client.send("ko\n")
        self.disconnect(client)

    def process_commands(self, client: Client) -> None:
        """Run the next queued command of ``client`` unless its player is busy."""
        player = client.player
        if not client.commands or player is None or player.action_time > 0:
            return
        line = client.commands.popleft()
        args = split_words(line, " ")
        if not args:
            client.send("ko\n")
            return
        command = find_command(args[0])
        if command is None:
            logger.debug("unknown command %r", args[0])
            client.send("ko\n")
            return
        player.action_time = command.time
        command.func(self, client, args)

    def kill_player(self, player: Player | None) -> None:
        """Tell the player's client it is dead and take the player out of the game."""
        if player is None:
            return
        for client in self.clients:
            if client.player is player:
                client.send("dead\n")
                client.player = None
                break
        self.game.tile(player.x, player.y).remove_player(player)
        if player.team is not None:
            player.team.connected_clients -= 1
        player.client = None
        logger.debug("player %d died", player.id)

    def disconnect(self, client: Client) -> None:
        """Forget ``client``, killing its player."""
        if client.player is not None:
            self.kill_player(client.player)
        if client in self.clients:
            self.clients.remove(client)
        client.commands.clear()
        if self.on_disconnect is not None:
            self.on_disconnect(client)

    def _update_actions(self) -> None:
        for client in list(self.clients):
            player = client.player
            if client.type is not ClientType.PLAYER or player is None:
                continue
            if player.action_time > 0:
                player.action_time -= 1
            if client.commands:
                self.process_commands(client)

    def _update_food(self) -> None:
        self._food_tick += 1
        if self._food_tick < FOOD_TICKS:
            return
        self._food_tick = 0
        for client in list(self.clients):
            player = client.player
            if client.type is not ClientType.PLAYER or player is None:
                continue
            player.food_timer -= 1
            if player.food_timer > 0:
                continue
            if player.inventory[Resource.FOOD] > 0:
                player.inventory[Resource.FOOD] -= 1
                player.food_timer = FOOD_TIMER
            else:
                self.kill_player(player)

    def update(self) -> None:
        """Advance the game by one time unit."""
        self._update_actions()
        self._update_food()
        self._resource_tick += 1
        if self._resource_tick >= RESOURCE_TICKS:
            self.game.spawn_resources()
            self._resource_tick = 0