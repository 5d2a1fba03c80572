"""Commands that move players or carry sound: Forward, Right, Left, Eject, Broadcast."""

from __future__ import annotations

import logging

from zappyd.game import Game
from zappyd.gui import broadcast_player_action
from zappyd.models import Client, ClientType, Orientation, Player

logger = logging.getLogger(__name__)

_RESPONSE_LIMIT = 1023

_DELTAS: dict[int, tuple[int, int]] = {
    Orientation.NORTH: (0, -1),
    Orientation.SOUTH: (0, 1),
    Orientation.EAST: (1, 0),
    Orientation.WEST: (-1, 0),
}

_OPPOSITE: dict[int, int] = {
    Orientation.NORTH: Orientation.SOUTH,
    Orientation.SOUTH: Orientation.NORTH,
    Orientation.EAST: Orientation.WEST,
    Orientation.WEST: Orientation.EAST,
}


def _delta(orientation: int) -> tuple[int, int]:
    return _DELTAS.get(orientation, (0, 0))


def _opposite(orientation: int) -> int:
    return int(_OPPOSITE.get(orientation, Orientation.NORTH))


def move_forward(game: Game, player: Player) -> None:
    """Move ``player`` one tile in the direction it faces."""
    dx, dy = _delta(player.orientation)
    game.move_player(player, player.x + dx, player.y + dy)


def _shortest_offset(emitter: int, listener: int, size: int) -> int:
    offset = emitter - listener
    half = size // 2
    if offset > half:
        return offset - size
    if offset < -half:
        return offset + size
    return offset


def _raw_direction(dx: int, dy: int) -> int:
    if dx == 0:
        return 1 if dy < 0 else 5 if dy > 0 else 0
    if dx > 0:
        return 2 if dy < 0 else 4 if dy > 0 else 3
    return 8 if dy < 0 else 6 if dy > 0 else 7


def sound_direction(
    width: int, height: int, listener: Player, emitter_x: int, emitter_y: int
) -> int:
    """Tile number (1-8, 0 for the same tile) from which ``listener`` hears a sound."""
    if listener.x == emitter_x and listener.y == emitter_y:
        return 0
    dx = _shortest_offset(emitter_x, listener.x, width)
    dy = _shortest_offset(emitter_y, listener.y, height)
    adjusted = _raw_direction(dx, dy) - listener.orientation + 1
    if adjusted <= 0:
        adjusted += 8
    if adjusted > 8:
        adjusted -= 8
    return adjusted


def cmd_forward(hub, client: Client, args: list[str]) -> None:
    """Answer the Forward command."""
    player = client.player
    if player is None:
        client.send("ko\n")
        return
    move_forward(hub.game, player)
    client.send("ok\n")
    broadcast_player_action(hub, player, "move")


def cmd_right(hub, client: Client, args: list[str]) -> None:
    """Answer the Right command: turn a quarter clockwise."""
    player = client.player
    if player is None:
        client.send("ko\n")
        return
    player.orientation = player.orientation % 4 + 1
    client.send("ok\n")
    broadcast_player_action(hub, player, "turn")


def cmd_left(hub, client: Client, args: list[str]) -> None:
    """Answer the Left command: turn a quarter anticlockwise."""
    player = client.player
    if player is None:
        client.send("ko\n")
        return
    player.orientation -= 1
    if player.orientation < 1:
        player.orientation = int(Orientation.WEST)
    client.send("ok\n")
    broadcast_player_action(hub, player, "turn")


def _eject_players(game: Game, ejector: Player) -> int:
    tile = game.tile(ejector.x, ejector.y)
    dx, dy = _delta(ejector.orientation)
    pushed_from = _opposite(ejector.orientation)
    targets = [other for other in tile.players if other is not ejector]
    for target in targets:
        game.move_player(target, target.x + dx, target.y + dy)
        if target.client is not None:
            target.client.send(f"eject: {pushed_from}\n")
        logger.debug(
            "player %d ejected player %d to (%d,%d)",
            ejector.id, target.id, target.x, target.y,
        )
    return len(targets)


def _destroy_eggs(game: Game, x: int, y: int) -> int:
    tile = game.tile(x, y)
    destroyed = tile.eggs
    tile.eggs = []
    for egg in destroyed:
        if egg.team is not None:
            egg.team.eggs = [kept for kept in egg.team.eggs if kept is not egg]
    return len(destroyed)


def cmd_eject(hub, client: Client, args: list[str]) -> None:
    """Answer the Eject command: push others off the tile and break its eggs."""
    player = client.player
    if player is None:
        client.send("ko\n")
        return
    count = _eject_players(hub.game, player)
    _destroy_eggs(hub.game, player.x, player.y)
    client.send("ok\n")
    logger.debug("player %d ejected %d players", player.id, count)
    broadcast_player_action(hub, player, "eject")


def cmd_broadcast(hub, client: Client, args: list[str]) -> None:
    """Answer the Broadcast command: every other player hears the message."""
    emitter = client.player
    if emitter is None:
        client.send("ko\n")
        return
    message = " ".join(args[1:])
    for other in hub.clients:
        listener = other.player
        if other.type is not ClientType.PLAYER or listener is None:
            continue
        if listener is emitter:
            continue
        direction = sound_direction(
            hub.game.width, hub.game.height, listener, emitter.x, emitter.y
        )
        other.send(f"message {direction}, {message}\n"[:_RESPONSE_LIMIT])
    client.send("ok\n")