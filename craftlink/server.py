"""The file server: accepts clients and answers their packets one by one."""

from __future__ import annotations

import argparse
import threading
import time
from typing import Iterator, Optional, Sequence

from craftlink.connection import Connection, ConnectionError_
from craftlink.logger import log
from craftlink.packet import PORT, ActionType, Packet, PktType
from craftlink.paths import display_log_files, display_received_files
from craftlink.upload import State, UploadReceiver

_LOG_FILE = "server.log"
_MESSAGE_LOG = "message.log"

SERVER_INFO = "Server Info: Version 1.0.0, Uptime: 24h"

_MENU = (
    "***************************\n"
    "*                         *\n"
    "* 1. View Log Files       *\n"
    "* 2. View Received Files  *\n"
    "*                         *\n"
    "***************************"
)


def _choices() -> Iterator[str]:
    """Yield each non-blank character typed on standard input."""
    while True:
        try:
            line = input()
        except EOFError:
            return
        yield from (char for char in line if not char.isspace())


def display_options() -> None:
    """Show the operator menu and act on each choice until input ends."""
    choices = _choices()
    while True:
        print(_MENU)
        choice = next(choices, None)
        if choice is None:
            return
        if choice == "1":
            display_log_files()
        elif choice == "2":
            display_received_files()
        else:
            print("Bad Input ")


def _text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _handle_upload(packet: Packet, receiver: UploadReceiver) -> PktType:
    header = packet.header
    try:
        if receiver.state != State.READING:
            receiver.begin(packet)
        elif header.sequence_num > 0 and header.data_size > 0:
            receiver.add_data(packet)
        elif header.sequence_num > 0:
            receiver.finish(packet)
    except (ValueError, OSError):
        return PktType.NACK
    return PktType.ACK


def _handle_info(connection: Connection) -> PktType:
    start = time.perf_counter()
    reply = Packet(
        ActionType.INFO, PktType.ACK, 0, SERVER_INFO.encode("utf-8") + b"\0"
    )
    try:
        connection.send(reply)
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to send server response packet.")
        return PktType.NACK
    response_ms = (time.perf_counter() - start) * 1000.0
    log(_LOG_FILE, 0, f"Response time: {response_ms:.6f} ms")
    return PktType.ACK


def _handle_telemetry(connection: Connection, packet: Packet) -> PktType:
    log(_LOG_FILE, 0, "Received telemetry: " + _text(packet.data))
    reply = Packet(ActionType.TELEMETRY, PktType.ACK, 0)
    try:
        connection.send(reply)
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to send telemetry response packet.")
        return PktType.NACK
    return PktType.ACK


def handle_packet(
    connection: Connection, packet: Packet, receiver: UploadReceiver
) -> PktType:
    """Act on one packet from a client and return the reply type to send back.

    Info and telemetry requests also send their own reply packet first.
    """
    action = packet.header.action_id

    if action == ActionType.DELETE:
        log(_LOG_FILE, 0, "Delete action received")
        return PktType.ACK
    if action == ActionType.DOWNLOAD:
        log(_LOG_FILE, 0, "Download action received")
        receiver.state = State.STREAMING
        log(_LOG_FILE, 0, "Transitioned to the STREAMING state.")
        return PktType.ACK
    if action == ActionType.POSITION:
        log(_LOG_FILE, 0, "Position action received")
        return PktType.ACK
    if action == ActionType.MESSAGE:
        log(_LOG_FILE, 0, "Received message from client")
        size = packet.header.data_size
        log(_MESSAGE_LOG, size, _text(packet.data[:size]))
        return PktType.ACK
    if action == ActionType.UPLOAD:
        log(_LOG_FILE, 0, "Upload action received")
        return _handle_upload(packet, receiver)
    if action == ActionType.INFO:
        log(_LOG_FILE, 0, "Info action received")
        return _handle_info(connection)
    if action == ActionType.TELEMETRY:
        log(_LOG_FILE, 0, "Telemetry action received")
        return _handle_telemetry(connection, packet)

    log(_LOG_FILE, 0, "Unknown action received!")
    return PktType.NACK


def handle_client(connection: Connection) -> None:
    """Answer a connected client's packets until the connection fails or ends."""
    receiver = UploadReceiver(State.IDLE)
    log(_LOG_FILE, 0, "Transitioned to the IDLE state...")

    while True:
        log(_LOG_FILE, 0, "Waiting for a packet...")
        try:
            packet = connection.receive()
        except ConnectionError_:
            break
        log(_LOG_FILE, len(packet), "Packet received! Received n bytes.")

        response = handle_packet(connection, packet, receiver)
        packet.make_response(response)
        try:
            sent = connection.send(packet)
        except ConnectionError_:
            log(_LOG_FILE, -1, "Sent response packet back to client.")
            break
        log(_LOG_FILE, sent, "Sent response packet back to client.")


def serve_forever(port: int) -> None:
    """Listen on ``port`` and serve clients one after another.

    Raises :class:`ConnectionError_` if the socket cannot be opened or bound.
    """
    server = Connection()
    try:
        server.open()
    except ConnectionError_:
        log(_LOG_FILE, -1, "Failed to open a socket")
        raise

    with server:
        try:
            server.serve(port)
        except ConnectionError_:
            log(_LOG_FILE, -1, "Failed to serve on the chosen port.")
            raise

        threading.Thread(target=display_options, daemon=True).start()

        while True:
            log(_LOG_FILE, 0, "Transitioned to the LISTENING state...")
            try:
                client = server.accept()
            except ConnectionError_:
                continue
            log(_LOG_FILE, 0, "Client accepted!")
            with client:
                handle_client(client)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server on the chosen port."""
    parser = argparse.ArgumentParser(description="Image file server.")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    try:
        serve_forever(args.port)
    except ConnectionError_:
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())