"""The interactive client: connects to a server and runs typed commands."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from craftlink.commands import parse_command
from craftlink.connection import Connection, ConnectionError_
from craftlink.logger import log
from craftlink.packet import PORT
from craftlink.paths import current_path

_LOG_FILE = "client.log"


def run_ui(connection: Connection) -> None:
    """Prompt for commands and print their output until input ends."""
    while True:
        try:
            line = input(f"ClientUI @ {current_path()} > ")
        except EOFError:
            print()
            break
        print(parse_command(connection, line.split()), end="")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Connect to the server and run the command prompt."""
    parser = argparse.ArgumentParser(description="Client for the image server.")
    parser.add_argument("--host", default="127.0.0.1", help="server address")
    parser.add_argument("--port", type=int, default=PORT, help="server port")
    args = parser.parse_args(argv)

    connection = Connection()
    try:
        connection.open()
    except ConnectionError_:
        return 1

    with connection:
        try:
            connection.connect(args.port, args.host)
        except ConnectionError_:
            log(_LOG_FILE, 1, "Attempted to connect to client.")
            return 1
        log(_LOG_FILE, 0, "Attempted to connect to client.")
        run_ui(connection)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())