# zappyd

A game server for Zappy. Teams of players live on a wrapping, tiled world,
gather resources, lay eggs and perform incantations to rise in level. Player
clients and graphical observers connect to the server over TCP with a
line-based text protocol. The package has no dependencies beyond the
standard library.

## Installation

```
pip install .
```

## Running the server

```
zappy_server -p port -x width -y height -n name1 name2 ... -c clientsNb -f freq
```

| Option | Meaning | Default |
| --- | --- | --- |
| `-p port` | port number | 4242 |
| `-x width` | width of the world (10-30) | 10 |
| `-y height` | height of the world (10-30) | 10 |
| `-n name1 name2 ...` | names of the teams (required) | |
| `-c clientsNb` | number of authorized clients per team | 3 |
| `-f freq` | reciprocal of the time unit for actions (2-10000) | 100 |

`-n` takes every following argument up to the next one that starts with `-`.
Numeric values are read like C's `atoi` (a missing number counts as 0).

An invalid command line, or `-h`, prints the usage text and exits with
status 84. On start the server prints its configuration, then logs
connections and disconnections to standard output. Interrupting it with
Ctrl-C closes every connection and exits with status 0; a failure while
waiting for network events exits with status 84.

Example:

```
zappy_server -p 4242 -x 12 -y 12 -n red blue -c 4 -f 100
```

## Protocol

Every new connection gets `WELCOME`. The client then sends one line:

* a team name: the server answers with the number of free slots left in the
  team, then `width height`, and the connection acts as a player placed on
  one of the team's eggs. An unknown team, a full team or a team without
  eggs gets `ko` and the connection is closed.
* `GRAPHIC`: the server sends `msz`, one `tna` per team, one `bct` per tile
  and one `ppo` per player, and after that sends `ppo` updates whenever a
  player moves or turns.

Player commands (up to 10 are queued per client; further lines are dropped):

| Command | Time units | Answer |
| --- | --- | --- |
| `Forward` | 7 | `ok` |
| `Right` | 7 | `ok` |
| `Left` | 7 | `ok` |
| `Look` | 7 | `[tile,tile,...]` |
| `Inventory` | 1 | `[food n, linemate n, ...]` |
| `Broadcast <text>` | 7 | `ok`; others get `message <k>, <text>` |
| `Connect_nbr` | 0 | free slots in the team |
| `Fork` | 42 | `ok` |
| `Eject` | 7 | `ok`; ejected players get `eject: <k>` |
| `Take <object>` | 7 | `ok` or `ko` |
| `Set <object>` | 7 | `ok` or `ko` |
| `Incantation` | 300 | `Elevation underway` / `Current level: n` or `ko` |

Objects are `food`, `linemate`, `deraumere`, `sibur`, `mendiane`, `phiras`
and `thystame`. An unknown command or one that fails gets `ko`.

A command runs as soon as it is taken from the queue; its time is the number
of game ticks the player must wait before the next queued command runs. Every
126 ticks each player's food timer drops; when it runs out the player eats one
food or dies (`dead`). Every 20 ticks a fresh batch of resources is scattered
over the map.

## Using it as a library

The server can be embedded and driven one step at a time:

```python
from zappyd.config import parse_arguments, validate_arguments
from zappyd.server import Server

config = parse_arguments(["-p", "4242", "-n", "red", "blue"])
validate_arguments(config)
with Server(config) as server:
    while True:
        server.step(0.01)
```

`Server.run()` loops on `step` until waiting for events fails, and
`Server.close()` drops every client and stops listening.

The game rules live in `zappyd.game`, `zappyd.movement`, `zappyd.actions`,
`zappyd.vision` and `zappyd.gui`; `zappyd.hub.Hub` ties them to connected
clients without touching sockets:

```python
import random

from zappyd.game import Game
from zappyd.hub import Hub
from zappyd.models import Client

game = Game(10, 10, ["red"], 2, rng=random.Random(1))
hub = Hub(game)
client = Client()
hub.add_client(client)
hub.receive(client, b"red\nInventory\n")
print(client.take_output())  # b"1\n10 10\n"
hub.update()
print(client.take_output())
# b"[food 10, linemate 0, deraumere 0, sibur 0, mendiane 0, phiras 0, thystame 0]\n"
```

## What it does not do

* `Look` always shows the player's own tile and the three tiles in front of
  it, whatever the player's level; the field of view does not widen.
* Incantations complete at once; no ritual start or end is reported to
  graphical clients, and graphical clients get no messages beyond `msz`,
  `tna`, `bct` and `ppo`.
* Connecting a player does not use up the egg it hatches from.
* There is no win condition and no game end; the server serves until it is
  stopped.