"""Command-line configuration of the server."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_PORT = 4242
DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10
DEFAULT_FREQ = 100
DEFAULT_CLIENTS_NB = 3

_WITH_ARGUMENT = "pxyncf"
_FLAGS = "h"


class UsageError(Exception):
    """The command line is wrong or help was asked for."""


@dataclass
class ServerConfig:
    """Settings the server is started with."""

    port: int = DEFAULT_PORT
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    teams: list[str] = field(default_factory=list)
    clients_nb: int = DEFAULT_CLIENTS_NB
    freq: int = DEFAULT_FREQ


def _atoi(text: str) -> int:
    """Read a leading decimal integer, giving 0 when there is none."""
    text = text.lstrip(" \t\n\r\v\f")
    sign = 1
    if text[:1] in ("+", "-"):
        if text[0] == "-":
            sign = -1
        text = text[1:]
    digits = ""
    for char in text:
        if not char.isdigit() or not char.isascii():
            break
        digits += char
    return sign * int(digits) if digits else 0


def _take_teams(argv: list[str], start: int) -> list[str]:
    names = []
    for arg in argv[start:]:
        if arg.startswith("-"):
            break
        names.append(arg)
    return names


def parse_arguments(argv: list[str]) -> ServerConfig:
    """Build a configuration from the arguments (program name excluded)."""
    config = ServerConfig()
    position = 0
    while position < len(argv):
        arg = argv[position]
        if arg == "--":
            break
        if not arg.startswith("-") or arg == "-":
            position += 1
            continue
        position += 1
        cluster = arg[1:]
        while cluster:
            option, cluster = cluster[0], cluster[1:]
            if option in _FLAGS:
                raise UsageError("help requested")
            if option not in _WITH_ARGUMENT:
                raise UsageError(f"invalid option -- '{option}'")
            if option == "n":
                if cluster or position >= len(argv):
                    raise UsageError("option -n needs team names")
                names = _take_teams(argv, position)
                if not names:
                    raise UsageError("option -n needs team names")
                config.teams = names
                position += len(names)
                break
            if cluster:
                value, cluster = cluster, ""
            elif position < len(argv):
                value = argv[position]
                position += 1
            else:
                raise UsageError(f"option requires an argument -- '{option}'")
            number = _atoi(value)
            if option == "p":
                config.port = number
            elif option == "x":
                config.width = number
            elif option == "y":
                config.height = number
            elif option == "c":
                config.clients_nb = number
            else:
                config.freq = number
    return config


def validate_arguments(config: ServerConfig) -> None:
    """Raise UsageError when the configuration cannot start a game."""
    if not config.teams:
        raise UsageError("No teams specified")
    if not (10 <= config.width <= 30 and 10 <= config.height <= 30):
        raise UsageError("Invalid world dimensions (10-30)")
    if not 2 <= config.freq <= 10000:
        raise UsageError("Invalid frequency (2-10000)")


def usage_text(prog_name: str) -> str:
    """Help text describing the command line."""
    return (
        f"USAGE: {prog_name} -p port -x width -y height -n name1 name2 ... "
        "-c clientsNb -f freq\n"
        "\t-p port\t\tport number\n"
        "\t-x width\twidth of the world\n"
        "\t-y height\theight of the world\n"
        "\t-n name1 name2 ...\tname of the team\n"
        "\t-c clientsNb\tnumber of authorized clients per team\n"
        "\t-f freq\t\treciprocal of time unit for execution of actions\n"
    )


def configuration_text(config: ServerConfig) -> str:
    """Summary of the configuration printed at start-up."""
    teams = "".join(f"{name} " for name in config.teams)
    return (
        f"Server started on port {config.port}\n"
        f"World size: {config.width}x{config.height}\n"
        f"Teams: {teams}\n"
        f"Max clients per team: {config.clients_nb}\n"
        f"Time unit: 1/{config.freq} seconds\n"
    )