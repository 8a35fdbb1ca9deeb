"""Wire format and settings shared by the screen sender and the receiver."""

from __future__ import annotations

import struct
from dataclasses import dataclass

SERVER_ADDR = "192.168.1.241"
SERVER_PORT = 8080
PORT = 8080
PACKET_SIZE = 1000
PIXEL_BYTES = 4
RECV_BUFFERS = 1000
SHUTDOWN_TIMEOUT = 1

_HEADER = struct.Struct("!5I")

HEADER_SIZE = _HEADER.size
PAYLOAD_SIZE = PACKET_SIZE - HEADER_SIZE


@dataclass(frozen=True)
class PacketHeader:
    """Header at the front of every datagram, five big-endian 32-bit fields."""

    image_id: int
    seq: int
    total_packets: int
    width: int
    height: int

    def pack(self) -> bytes:
        """Encode the header in network byte order."""
        try:
            return _HEADER.pack(
                self.image_id, self.seq, self.total_packets, self.width, self.height
            )
        except struct.error as exc:
            raise ValueError(f"header field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes | bytearray | memoryview) -> PacketHeader:
        """Decode a header from the start of ``data``; trailing bytes are ignored."""
        if len(data) < HEADER_SIZE:
            raise ValueError(
                f"need {HEADER_SIZE} bytes for a packet header, got {len(data)}"
            )
        return cls(*_HEADER.unpack_from(data))