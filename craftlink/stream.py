"""Sending files and text messages to the server as packet sequences."""

from __future__ import annotations

from typing import Iterable

from craftlink.connection import Connection, ConnectionError_
from craftlink.logger import log
from craftlink.packet import MAX_DATA_SIZE, ActionType, Packet, PktType
from craftlink.paths import find_file_path

_LOG_FILE = "stream.log"


def _send(connection: Connection, packet: Packet, code: int, failure: str) -> None:
    try:
        connection.send(packet)
    except ConnectionError_ as exc:
        log(_LOG_FILE, code, failure)
        raise ConnectionError_(failure, code) from exc


def stream_out_file(connection: Connection, filepath: str) -> None:
    """Upload a file from the program's directories as an upload sequence.

    The first packet carries the name, each following one a chunk of the file,
    and a final empty packet closes the sequence. Raises ``OSError`` when the
    file cannot be opened and :class:`ConnectionError_` when a send fails,
    with ``code`` -1, -2 or -3 for the first, a data or the final packet.
    """
    path = find_file_path(filepath)
    try:
        handle = open(path, "rb")
    except OSError:
        log(_LOG_FILE, -1, "File failed to open.")
        raise

    with handle:
        sequence = 0
        first = Packet(ActionType.UPLOAD, PktType.ACTION, sequence, filepath.encode("utf-8"))
        _send(connection, first, -1, "Failed to send initial upload packet to server.")
        log(_LOG_FILE, 0, "Sent initial upload packet.")

        while True:
            sequence = (sequence + 1) & 0xFFFF
            chunk = handle.read(MAX_DATA_SIZE)
            packet = Packet(ActionType.UPLOAD, PktType.ACTION, sequence, chunk)
            _send(connection, packet, -2, "Failed to send upload sequence packet to server.")
            log(_LOG_FILE, len(chunk), "Sent a sequence to the server.")
            if len(chunk) < MAX_DATA_SIZE:
                break

        sequence = (sequence + 1) & 0xFFFF
        final = Packet(ActionType.UPLOAD, PktType.ACTION, sequence)
        _send(connection, final, -3, "Failed to send final sequence packet to server.")
        log(_LOG_FILE, 0, "Sent final sequence to the server.")


def send_custom_message(connection: Connection, words: Iterable[str]) -> None:
    """Send the words, joined by single spaces, as one message packet."""
    text = " ".join(words)
    packet = Packet(ActionType.MESSAGE, PktType.ACTION, 0, text.encode("utf-8"))
    _send(connection, packet, -1, "Failed to send custom message to server.")
    log(_LOG_FILE, 0, "Sent custom message packet.")