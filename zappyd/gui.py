"""Messages sent to graphical clients."""

from __future__ import annotations

from zappyd.models import Client, ClientType, Player

_POSITION_ACTIONS = frozenset({"move", "turn"})


def _position_message(player: Player) -> str:
    return f"ppo #{player.id} {player.x} {player.y} {player.orientation}\n"


def send_map_size(hub, client: Client) -> None:
    """Send the map dimensions."""
    client.send(f"msz {hub.game.width} {hub.game.height}\n")


def send_tile_content(hub, client: Client, x: int, y: int) -> None:
    """Send the resources lying on the tile at ``(x, y)``."""
    tile = hub.game.tile(x, y)
    counts = " ".join(str(count) for count in tile.resources)
    client.send(f"bct {x} {y} {counts}\n")


def send_teams(hub, client: Client) -> None:
    """Send the name of every team."""
    for team in hub.game.teams:
        client.send(f"tna {team.name}\n")


def send_player_position(client: Client, player: Player | None) -> None:
    """Send the position and orientation of ``player``."""
    if player is None:
        return
    client.send(_position_message(player))


def broadcast_player_action(hub, player: Player | None, action: str) -> None:
    """Tell every graphical client about a move or a turn of ``player``."""
    if player is None or action not in _POSITION_ACTIONS:
        return
    message = _position_message(player)
    for client in hub.clients:
        if client.type is ClientType.GRAPHIC:
            client.send(message)


def handle_graphic_connection(hub, client: Client) -> None:
    """Turn ``client`` into a graphical client and send it the whole world."""
    client.type = ClientType.GRAPHIC
    send_map_size(hub, client)
    send_teams(hub, client)
    for y in range(hub.game.height):
        for x in range(hub.game.width):
            send_tile_content(hub, client, x, y)
    for other in hub.clients:
        if other.type is ClientType.PLAYER and other.player is not None:
            send_player_position(client, other.player)