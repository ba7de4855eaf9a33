"""Client commands: each takes the words typed by the user and returns text to show."""

from __future__ import annotations

import time
from typing import Callable, Dict, List, Sequence

from craftlink.connection import Connection, ConnectionError_
from craftlink.logger import log
from craftlink.packet import ActionType, Packet, PktType
from craftlink.paths import display_log_files, display_received_files
from craftlink.stream import send_custom_message, stream_out_file

CMD_HELP = "help"
CMD_UPLOAD = "push"
CMD_DOWNLOAD = "pull"
CMD_INFO = "info"
CMD_LS = "ls"
CMD_MSG = "msg"
CMD_TELEM = "telem"

_TERM_RESET = "\033[0m"
_TERM_FG_WHITE = "\033[37m"
_TERM_BG_BLACK = "\033[40m"

_LOG_FILE = "client.log"

UNKNOWN_COMMAND = (
    "Command does not exist or was typed incorrectly. "
    "Use 'help' to find existing commands.\n"
)


def parse_command(connection: Connection, args: Sequence[str]) -> str:
    """Run the command named by the first word with the remaining words as arguments."""
    if not args:
        return ""

    command, *rest = args
    handlers: Dict[str, Callable[[], str]] = {
        CMD_HELP: cmd_help,
        CMD_UPLOAD: lambda: cmd_push(connection, rest),
        CMD_DOWNLOAD: lambda: cmd_pull(connection, rest),
        CMD_INFO: lambda: cmd_info(connection),
        CMD_LS: cmd_ls,
        CMD_MSG: lambda: cmd_msg(connection, rest),
        CMD_TELEM: lambda: cmd_telem(connection, rest),
    }
    handler = handlers.get(command)
    if handler is None:
        return UNKNOWN_COMMAND
    return handler()


def cmd_help() -> str:
    """The help menu."""
    return (
        f"{_TERM_BG_BLACK}{_TERM_FG_WHITE} ---= GoogCraftImages - Client CLI Help Menu =---\n"
        f"{_TERM_RESET}"
        " help\t\t\tDisplay this help menu\n"
        " push <filename>\tUpload a file to the server\n"
        " pull <filename>\tDownload a file from the server\n"
        " info\t\t\tQuery the server for general information\n"
        " ls\t\t\tList files in program directories.\n"
        " msg <message>\t\tSend a dynamically-sized message to the server.\n"
        " telem <on/off>\t\tEnable or disable telemetry.\n"
    )


def cmd_push(connection: Connection, args: Sequence[str]) -> str:
    """Upload the file named by the first argument to the server."""
    if not args:
        return "Usage: push <filename>\n"

    filename = args[0]
    try:
        stream_out_file(connection, filename)
    except ConnectionError_ as exc:
        return f"Error {exc.code} when sending sequences.\n"
    except OSError:
        return "Error -1 when sending sequences.\n"
    return f"Successfully sent file {filename} to the server!\n"


def cmd_pull(connection: Connection, args: Sequence[str]) -> str:
    """Downloading is not offered by the server; nothing is shown."""
    return ""


def cmd_info(connection: Connection) -> str:
    """Ask the server for its information and report how long the reply took."""
    start = time.perf_counter()
    timestamp = time.time_ns() // 1_000_000

    request = Packet(
        ActionType.INFO,
        PktType.ACTION,
        0,
        timestamp.to_bytes(8, "little", signed=True),
    )
    try:
        connection.send(request)
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to send info request packet to server.")
        return "Failed to request server info.\n"

    try:
        response = connection.receive()
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to receive server response.")
        return "Failed to receive server response.\n"

    response_ms = (time.perf_counter() - start) * 1000.0
    log(_LOG_FILE, 0, f"Response time: {response_ms:.6f} ms")

    message = response.data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    return f"{message}\nResponse Time: {response_ms:.6f} ms\n"


def cmd_ls() -> str:
    """Print the log and file directories' contents."""
    display_log_files()
    display_received_files()
    return ""


def cmd_msg(connection: Connection, args: Sequence[str]) -> str:
    """Send the arguments to the server as one message."""
    try:
        send_custom_message(connection, args)
    except ConnectionError_:
        return "Error sending custom message\n"
    return "Successfully sent custom message\n"


def cmd_telem(connection: Connection, args: List[str]) -> str:
    """Ask the user for a telemetry preset and send it to the server."""
    print("Select telemetry preset:")
    print("1. Basic Metrics")
    print("2. Advanced Debug Data")
    print("3. Full System Report")
    try:
        choice = input("Enter choice: ")
        preset = int(choice.strip())
        payload = preset.to_bytes(4, "little", signed=True)
    except (EOFError, ValueError, OverflowError):
        return "Invalid telemetry preset.\n"

    packet = Packet(ActionType.TELEMETRY, PktType.ACTION, 0, payload)
    try:
        connection.send(packet)
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to send telemetry packet to server.")
        return "Failed to send telemetry data.\n"
    log(_LOG_FILE, 0, "Sent telemetry packet successfully.")
    return "Telemetry data sent successfully.\n"