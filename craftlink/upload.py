"""Server-side assembly of uploaded files from their packet sequences."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import List, Optional, Tuple

from craftlink.logger import log
from craftlink.packet import Packet
from craftlink.paths import find_file_path

_LOG_FILE = "server.log"
_NAME_LIMIT = 199


class State(IntEnum):
    """What the server is doing."""

    OFF = 0
    LISTENING = 1
    IDLE = 2
    STREAMING = 3
    READING = 4


class UploadReceiver:
    """Collects one upload: its name packet, its data packets and its final packet."""

    def __init__(self, state: State = State.IDLE) -> None:
        self.state = state
        self.filename: Optional[Path] = None
        self._sequences: List[Optional[bytes]] = []

    @property
    def sequences(self) -> Tuple[Optional[bytes], ...]:
        """The data received so far by sequence number; ``None`` marks a gap."""
        return tuple(self._sequences)

    def begin(self, packet: Packet) -> Path:
        """Start an upload from its first packet, which carries the file name.

        Raises ``ValueError`` if the packet is not sequence 0.
        """
        if packet.header.sequence_num != 0:
            message = (
                "Server was not in reading state, but sequence was greater than 0. "
                "We are missing the new filename."
            )
            log(_LOG_FILE, -1, message)
            raise ValueError(message)

        self.state = State.READING
        log(_LOG_FILE, 0, "Transitioned to the READING state.")

        raw = packet.data[: min(packet.header.data_size, _NAME_LIMIT)]
        name = raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        self.filename = find_file_path("DL-" + name)
        print(f"Preparing file upload for '{self.filename}'. Waiting for sequences...")
        return self.filename

    def add_data(self, packet: Packet) -> None:
        """Store a data packet at the place its sequence number gives it."""
        sequence = packet.header.sequence_num
        if sequence < 1:
            raise ValueError("Data sequences are numbered from 1.")
        if sequence > len(self._sequences):
            self._sequences.extend([None] * (sequence - len(self._sequences)))
        self._sequences[sequence - 1] = bytes(packet.data[: packet.header.data_size])

    def finish(self, packet: Packet) -> Path:
        """Write the collected sequences to the upload's file.

        Raises ``ValueError`` if a sequence is missing and ``OSError`` if the
        file cannot be written. Either way the sequences are dropped and the
        state returns to listening.
        """
        try:
            missing = [
                number
                for number, chunk in enumerate(self._sequences, start=1)
                if chunk is None
            ]
            for number in missing:
                log(
                    _LOG_FILE,
                    number,
                    "Sequence number was missing. Final packet came out of order, "
                    "or a packet was dropped.",
                )
            if missing:
                raise ValueError(f"Missing upload sequences: {missing}")

            if self.filename is None:
                log(_LOG_FILE, -1, "Failed to open file for writing.")
                raise ValueError("No upload file name was received.")

            try:
                self.filename.parent.mkdir(parents=True, exist_ok=True)
                handle = open(self.filename, "wb")
            except OSError:
                log(_LOG_FILE, -1, "Failed to open file for writing.")
                raise

            with handle:
                try:
                    for chunk in self._sequences:
                        handle.write(chunk)
                except OSError:
                    log(_LOG_FILE, -1, "Failed to write to disk. Unexpected error. File went bad.")
                    raise
                finally:
                    log(_LOG_FILE, 0, "Done writing file to disk.")
            return self.filename
        finally:
            self._sequences.clear()
            self.state = State.LISTENING
            log(_LOG_FILE, 0, "Transitioned to the LISTENING state.")