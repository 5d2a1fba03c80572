"""Command-line entry point of the game server."""

from __future__ import annotations

import logging
import os
import sys

from zappyd.config import (
    UsageError,
    configuration_text,
    parse_arguments,
    usage_text,
    validate_arguments,
)
from zappyd.server import Server

FAILURE = 84
_HELP_MESSAGE = "help requested"


def _program_name() -> str:
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "zappy_server"


def main(argv=None) -> int:
    """Parse the command line, start the server and serve until it stops."""
    args = sys.argv[1:] if argv is None else list(argv)
    prog = _program_name()
    try:
        config = parse_arguments(args)
    except UsageError as error:
        if str(error) != _HELP_MESSAGE:
            print(f"{prog}: {error}", file=sys.stderr)
        print(usage_text(prog), end="")
        return FAILURE
    try:
        validate_arguments(config)
    except UsageError as error:
        print(f"Error: {error}", file=sys.stderr)
        print(usage_text(prog), end="")
        return FAILURE
    print(configuration_text(config), end="", flush=True)
    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)
    try:
        server = Server(config)
    except (OSError, ValueError) as error:
        print(f"Error: Failed to create server ({error})", file=sys.stderr)
        return FAILURE
    try:
        return server.run()
    except KeyboardInterrupt:
        return 0
    finally:
        server.close()


if __name__ == "__main__":
    sys.exit(main())