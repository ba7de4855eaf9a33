"""TCP connections that carry whole packets in both directions."""

from __future__ import annotations

import socket
from typing import Optional

from craftlink.logger import log
from craftlink.packet import FOOTER_SIZE, HEADER_SIZE, Packet, PacketError, PacketHeader

_LOG_FILE = "socket.log"


class ConnectionError_(OSError):
    """Raised when a connection cannot be opened, used or closed.

    ``code`` carries a negative status that tells callers which step failed.
    """

    def __init__(self, message: str, code: int = -1) -> None:
        super().__init__(message)
        self.code = code


class Connection:
    """A TCP socket that sends and receives :class:`Packet` objects."""

    def __init__(self, sock: Optional[socket.socket] = None) -> None:
        self._sock = sock
        self.failed = False

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        """Whether the connection holds an open socket."""
        return self._sock is not None

    @property
    def local_port(self) -> int:
        """The local port the socket is bound to."""
        return self._socket().getsockname()[1]

    def _socket(self) -> socket.socket:
        if self._sock is None:
            self.failed = True
            raise ConnectionError_("Socket is not open.")
        return self._sock

    def _fail(self, flag: int, message: str, code: int = -1) -> ConnectionError_:
        self.failed = True
        log(_LOG_FILE, flag, message)
        return ConnectionError_(message, code)

    def open(self) -> None:
        """Create a fresh TCP socket."""
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        except OSError as exc:
            self.failed = True
            print(f"[Socket] Failed to open socket - {exc.errno}")
            raise ConnectionError_(f"Failed to open socket: {exc}") from exc
        self.failed = False

    def close(self) -> None:
        """Close the socket; closing a connection that is not open does nothing."""
        if self._sock is None:
            return
        sock, self._sock = self._sock, None
        try:
            sock.close()
        except OSError as exc:
            raise self._fail(-1, "Attempted to close socket.") from exc
        log(_LOG_FILE, 0, "Attempted to close socket.")

    def connect(self, port: int, addr: Optional[str]) -> None:
        """Connect to a server at ``addr`` on ``port``."""
        if addr is None:
            self.failed = True
            print("[Socket] Failed to connect to NULL address")
            raise ConnectionError_("Failed to connect to NULL address")
        sock = self._socket()
        try:
            sock.connect((addr, port))
        except (OSError, OverflowError) as exc:
            self.failed = True
            print("[Socket] Failed to connect to address")
            raise ConnectionError_(f"Failed to connect to {addr}:{port}: {exc}") from exc
        self.failed = False

    def serve(self, port: int) -> None:
        """Bind to ``port`` on every interface and start listening."""
        sock = self._socket()
        try:
            sock.bind(("", port))
        except (OSError, OverflowError) as exc:
            raise self._fail(-1, "Socket failed to bind") from exc
        try:
            sock.listen(1)
        except OSError as exc:
            raise self._fail(-1, "Socket failed to listen") from exc
        self.failed = False

    def accept(self) -> "Connection":
        """Wait for a client and return its connection."""
        sock = self._socket()
        try:
            client, _ = sock.accept()
        except OSError as exc:
            raise self._fail(-1, "Socket failed to accept") from exc
        return Connection(client)

    def _recv_exact(self, size: int, flag: int, message: str) -> bytes:
        sock = self._socket()
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = sock.recv(size - len(buffer))
            except OSError as exc:
                raise self._fail(flag, message, flag) from exc
            if not chunk:
                raise self._fail(flag, message, flag)
            buffer.extend(chunk)
        return bytes(buffer)

    def receive(self) -> Packet:
        """Read one whole packet: header, data and checksum."""
        raw_header = self._recv_exact(
            HEADER_SIZE, -1, "Failed to receive packet header over socket"
        )
        header = PacketHeader.unpack(raw_header)
        rest = self._recv_exact(
            header.data_size + FOOTER_SIZE, -3, "Failed to receive packet data in socket"
        )
        packet = Packet()
        try:
            packet.set_packet(header, rest)
        except PacketError as exc:
            raise self._fail(
                -4,
                "Failed to set the packet structure with the header, buffer, and data size",
                -4,
            ) from exc
        return packet

    def send(self, packet: Packet) -> int:
        """Send a whole packet and return the number of bytes sent."""
        sock = self._socket()
        payload = packet.serialize()
        try:
            sock.sendall(payload)
        except OSError as exc:
            raise self._fail(-1, "Failed to send the correct number of bytes") from exc
        return len(payload)