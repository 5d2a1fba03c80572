"""Commands acting on inventories and the team: Fork, Incantation, Inventory, Connect_nbr, Take, Set."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from zappyd.gui import broadcast_player_action
from zappyd.models import (
    RESOURCE_NAMES,
    Client,
    Player,
    Resource,
    Tile,
    is_valid_resource,
    resource_index,
)

logger = logging.getLogger(__name__)

MAX_LEVEL = 8


@dataclass(frozen=True)
class ElevationRequirement:
    """Players and stones needed on a tile to rise from ``level``."""

    level: int
    nb_players: int
    linemate: int
    deraumere: int
    sibur: int
    mendiane: int
    phiras: int
    thystame: int

    def stones(self) -> dict[Resource, int]:
        """Stones consumed by the ritual, keyed by resource."""
        return {
            Resource.LINEMATE: self.linemate,
            Resource.DERAUMERE: self.deraumere,
            Resource.SIBUR: self.sibur,
            Resource.MENDIANE: self.mendiane,
            Resource.PHIRAS: self.phiras,
            Resource.THYSTAME: self.thystame,
        }


_REQUIREMENTS: tuple[ElevationRequirement, ...] = (
    ElevationRequirement(1, 1, 1, 0, 0, 0, 0, 0),
    ElevationRequirement(2, 2, 1, 1, 1, 0, 0, 0),
    ElevationRequirement(3, 2, 2, 0, 1, 0, 2, 0),
    ElevationRequirement(4, 4, 1, 1, 2, 0, 1, 0),
    ElevationRequirement(5, 4, 1, 2, 1, 3, 0, 0),
    ElevationRequirement(6, 6, 1, 2, 3, 0, 1, 0),
    ElevationRequirement(7, 6, 2, 2, 2, 2, 2, 1),
)


def requirement_for(level: int) -> ElevationRequirement:
    """Requirement to rise from ``level``; raise ValueError outside 1-7."""
    if not 1 <= level < MAX_LEVEL:
        raise ValueError(f"no elevation from level {level}")
    return _REQUIREMENTS[level - 1]


def cmd_fork(hub, client: Client, args: list[str]) -> None:
    """Answer the Fork command: lay an egg of the player's team."""
    player = client.player
    if player is None or player.team is None:
        client.send("ko\n")
        return
    egg = hub.game.lay_egg(player)
    logger.debug("egg %d laid at (%d,%d) for team %s", egg.id, egg.x, egg.y, player.team.name)
    client.send("ok\n")


def _same_level(tile: Tile, level: int) -> list[Player]:
    return [other for other in tile.players if other.level == level]


def _has_stones(tile: Tile, requirement: ElevationRequirement) -> bool:
    return all(
        tile.resources[resource] >= needed
        for resource, needed in requirement.stones().items()
    )


def cmd_incantation(hub, client: Client, args: list[str]) -> None:
    """Answer the Incantation command: raise every same-level player on the tile."""
    player = client.player
    if player is None or player.level >= MAX_LEVEL:
        client.send("ko\n")
        return
    level = player.level
    requirement = requirement_for(level)
    tile = hub.game.tile(player.x, player.y)
    participants = _same_level(tile, level)
    if len(participants) < requirement.nb_players or not _has_stones(tile, requirement):
        client.send("ko\n")
        return
    for resource, needed in requirement.stones().items():
        tile.resources[resource] -= needed
    for participant in participants:
        participant.level += 1
        if participant.client is not None:
            participant.client.send(
                f"Elevation underway\nCurrent level: {participant.level}\n"
            )
    logger.debug("elevated %d players from level %d", len(participants), level)
    broadcast_player_action(hub, player, "incantation")


def cmd_inventory(hub, client: Client, args: list[str]) -> None:
    """Answer the Inventory command."""
    player = client.player
    if player is None:
        client.send("ko\n")
        return
    items = ", ".join(
        f"{name} {count}" for name, count in zip(RESOURCE_NAMES, player.inventory)
    )
    client.send(f"[{items}]\n")


def cmd_connect_nbr(hub, client: Client, args: list[str]) -> None:
    """Answer the Connect_nbr command: free slots left in the player's team."""
    player = client.player
    if player is None or player.team is None:
        client.send("ko\n")
        return
    client.send(f"{player.team.available_slots()}\n")


def _requested_resource(client: Client, args: list[str]) -> int | None:
    if client.player is None:
        return None
    name = args[1] if len(args) > 1 else None
    if not is_valid_resource(name):
        return None
    return resource_index(name)


def cmd_take(hub, client: Client, args: list[str]) -> None:
    """Answer the Take command: pick one unit of a resource off the tile."""
    index = _requested_resource(client, args)
    if index is None:
        client.send("ko\n")
        return
    player = client.player
    tile = hub.game.tile(player.x, player.y)
    if tile.resources[index] <= 0:
        client.send("ko\n")
        return
    tile.resources[index] -= 1
    player.inventory[index] += 1
    client.send("ok\n")
    broadcast_player_action(hub, player, "take")


def cmd_set(hub, client: Client, args: list[str]) -> None:
    """Answer the Set command: drop one unit of a resource on the tile."""
    index = _requested_resource(client, args)
    if index is None:
        client.send("ko\n")
        return
    player = client.player
    if player.inventory[index] <= 0:
        client.send("ko\n")
        return
    player.inventory[index] -= 1
    hub.game.tile(player.x, player.y).resources[index] += 1
    client.send("ok\n")
    broadcast_player_action(hub, player, "set")