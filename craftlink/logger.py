"""Timestamped log lines appended to files in the program's log directory."""

from __future__ import annotations

import sys
import time

from craftlink.paths import LOGS_DIR, root_path


def log(filename: str, success_flag: int, msg: str) -> str:
    """Append a line to the log file ``filename`` and echo it to stdout.

    The line holds a nanosecond timestamp, the status flag and the message.
    Returns the line as written, without its newline.
    """
    entry = f"{time.time_ns()}:\t{int(success_flag)} '{msg}'"

    directory = root_path() / LOGS_DIR
    file_path = directory / filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        with file_path.open("a", encoding="utf-8") as handle:
            handle.write(entry + "\n")
    except OSError:
        print(f"Failed to open log file at '{file_path}'", file=sys.stderr)

    print(f"{filename}-{entry}")
    return entry