"""Wire packets: a fixed six-byte header, a variable data field and a checksum byte."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional, Union

PORT = 8186

MAX_DATA_SIZE = 0xFFFF
HEADER_SIZE = 6
FOOTER_SIZE = 1
MAX_PACKET_SIZE = HEADER_SIZE + MAX_DATA_SIZE + FOOTER_SIZE
MIN_PACKET_SIZE = HEADER_SIZE + FOOTER_SIZE

_HEADER = struct.Struct("<BBHH")


class ActionType(IntEnum):
    """The action a packet asks for."""

    UPLOAD = 0
    DOWNLOAD = 1
    DELETE = 2
    POSITION = 3
    MESSAGE = 4
    INFO = 5
    TELEMETRY = 6


class PktType(IntEnum):
    """Whether a packet is a request or a reply to one."""

    ACTION = 0
    ACK = 1
    NACK = 2


class PacketError(ValueError):
    """Raised when a packet or header cannot be built from the given input."""


def _enum_or_int(enum_cls, value: int):
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class PacketHeader:
    """The fixed-size header that precedes every packet's data."""

    action_id: Union[ActionType, int] = ActionType.UPLOAD
    pkt_type: Union[PktType, int] = PktType.ACTION
    sequence_num: int = 0
    data_size: int = 0

    def pack(self) -> bytes:
        """Encode the header as its six wire bytes."""
        try:
            return _HEADER.pack(
                int(self.action_id),
                int(self.pkt_type),
                int(self.sequence_num),
                int(self.data_size),
            )
        except struct.error as exc:
            raise PacketError(f"Header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data) -> "PacketHeader":
        """Decode a header from exactly six bytes."""
        raw = bytes(data)
        if len(raw) != HEADER_SIZE:
            raise PacketError(
                f"Header needs {HEADER_SIZE} bytes, got {len(raw)}"
            )
        action_id, pkt_type, sequence_num, data_size = _HEADER.unpack(raw)
        return cls(
            _enum_or_int(ActionType, action_id),
            _enum_or_int(PktType, pkt_type),
            sequence_num,
            data_size,
        )


class Packet:
    """A header, its data and the checksum that covers them."""

    def __init__(
        self,
        action_id: Union[ActionType, int] = ActionType.UPLOAD,
        pkt_type: Union[PktType, int] = PktType.ACTION,
        sequence_num: int = 0,
        data: bytes = b"",
    ) -> None:
        self.header = PacketHeader(action_id, pkt_type, sequence_num, 0)
        self.data = b""
        self.checksum = 0
        self.copy_data(data)

    def set_packet(self, header: PacketHeader, buffer: Optional[bytes]) -> None:
        """Fill the packet from a header and a buffer.

        The buffer holds either exactly ``header.data_size`` bytes of data, or
        that data followed by one checksum byte, which is then kept as is.
        """
        raw = b"" if buffer is None else bytes(buffer)
        with_checksum = len(raw) == header.data_size + 1
        if buffer is None and header.data_size:
            raise PacketError("Buffer was missing when data was expected.")
        if not with_checksum and len(raw) != header.data_size:
            raise PacketError("Buffer size was invalid.")

        self.header = replace(header)
        self.copy_data(raw[: header.data_size])
        if with_checksum:
            self.checksum = raw[-1]

    def make_response(self, response: Union[PktType, int]) -> None:
        """Turn this packet into a data-less reply of the given type."""
        self.data = b""
        self.header.data_size = 0
        self.header.pkt_type = response
        self.header.sequence_num = 0
        self.checksum = self.calculate_checksum()

    def copy_data(self, buffer: bytes) -> None:
        """Replace the data, update the header's size and recompute the checksum."""
        raw = bytes(buffer)
        if len(raw) > MAX_DATA_SIZE:
            raise PacketError(
                f"Data of {len(raw)} bytes exceeds the maximum of {MAX_DATA_SIZE}"
            )
        self.data = raw
        self.header.data_size = len(raw)
        self.checksum = self.calculate_checksum()

    def calculate_checksum(self) -> int:
        """XOR of the header fields and every data byte, kept to eight bits."""
        header = self.header
        checksum = (
            int(header.action_id)
            ^ int(header.pkt_type)
            ^ int(header.sequence_num)
            ^ int(header.data_size)
        ) & 0xFF
        for byte in self.data[: header.data_size]:
            checksum ^= byte
        return checksum

    def describe(self) -> str:
        """A human-readable summary of the packet's header and checksum."""
        header = self.header
        return (
            f"Action ID: {int(header.action_id)}\n"
            f"Packet Type: {int(header.pkt_type)}\n"
            f"Sequence Number: {header.sequence_num}\n"
            f"Data Size: {header.data_size}\n"
            f"Checksum: {self.checksum}\n"
        )

    def serialize(self) -> bytes:
        """Encode the whole packet as it travels on the wire."""
        return (
            self.header.pack()
            + self.data[: self.header.data_size]
            + bytes([self.checksum & 0xFF])
        )

    def __len__(self) -> int:
        return MIN_PACKET_SIZE + self.header.data_size

    def __repr__(self) -> str:
        return (
            f"Packet(header={self.header!r}, data={self.data!r}, "
            f"checksum={self.checksum})"
        )