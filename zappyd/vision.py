"""What a player sees: tile descriptions and the Look command."""

from __future__ import annotations

from zappyd.game import Game
from zappyd.models import RESOURCE_NAMES, Client, Orientation, Player, Tile

_MAX_RESOURCES_SHOWN = 10
_MAX_OTHERS_SHOWN = 5
_LEVEL_ONE_CONE = ((0, 0), (-1, -1), (0, -1), (1, -1))


def tile_content(tile: Tile | None, is_current: bool) -> str:
    """Describe a tile as space-separated object names."""
    if tile is None:
        return ","
    words: list[str] = []
    if is_current:
        words.append("player")
    others = len(tile.players) - 1 if is_current else len(tile.players)
    words.extend(["player"] * max(0, min(others, _MAX_OTHERS_SHOWN)))
    shown = 0
    for name, count in zip(RESOURCE_NAMES, tile.resources):
        take = max(0, min(count, _MAX_RESOURCES_SHOWN - shown))
        words.extend([name] * take)
        shown += take
    return " ".join(words)


def _rotate(dx: int, dy: int, orientation: int) -> tuple[int, int]:
    if orientation == Orientation.NORTH:
        return dx, dy
    if orientation == Orientation.EAST:
        return -dy, dx
    if orientation == Orientation.SOUTH:
        return -dx, -dy
    if orientation == Orientation.WEST:
        return dy, -dx
    return 0, 0


def look(game: Game, player: Player) -> str:
    """The bracketed list of tiles in front of ``player``, its own tile first."""
    parts = []
    for dx, dy in _LEVEL_ONE_CONE:
        rx, ry = _rotate(dx, dy, player.orientation)
        tile = game.tile(player.x + rx, player.y + ry)
        parts.append(tile_content(tile, dx == 0 and dy == 0))
    return "[" + ",".join(parts) + "]"


def cmd_look(hub, client: Client, args: list[str]) -> None:
    """Answer the Look command."""
    if client.player is None:
        client.send("ko\n")
        return
    client.send(look(hub.game, client.player) + "\n")