"""Reassembly of images from received datagrams and PPM output."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .protocol import HEADER_SIZE, PACKET_SIZE, PIXEL_BYTES, PacketHeader

log = logging.getLogger(__name__)


@dataclass
class ReceptionState:
    """State of the image currently being received."""

    output_dir: Path = field(default_factory=Path)
    current_image_id: int = 0
    total_packets: int = 0
    width: int = 0
    height: int = 0
    image_buffer: bytearray | None = None
    received_mask: bytearray | None = None
    packets_received: int = 0
    packet_payload_size: int = 0
    last_activity: float = 0.0
    active: bool = False

    def reset(self) -> None:
        """Drop the current image; the output directory is kept."""
        self.current_image_id = 0
        self.total_packets = 0
        self.width = 0
        self.height = 0
        self.image_buffer = None
        self.received_mask = None
        self.packets_received = 0
        self.packet_payload_size = 0
        self.last_activity = 0.0
        self.active = False

    @property
    def progress(self) -> float:
        """Percentage of the expected packets that have arrived."""
        if not self.total_packets:
            return 0.0
        return 100.0 * self.packets_received / self.total_packets

    def save_image(self, directory: str | Path | None = None) -> Path | None:
        """Write the current image as a binary PPM; return its path, or None if idle."""
        if not self.active or self.image_buffer is None:
            return None

        target = Path(directory) if directory is not None else Path(self.output_dir)
        path = target / f"image_{self.current_image_id}.ppm"

        pixel_count = self.width * self.height
        size = pixel_count * PIXEL_BYTES
        pixels = bytes(self.image_buffer[:size]).ljust(size, b"\0")
        rgb = bytearray(pixel_count * 3)
        rgb[0::3] = pixels[2::PIXEL_BYTES]
        rgb[1::3] = pixels[1::PIXEL_BYTES]
        rgb[2::3] = pixels[0::PIXEL_BYTES]

        with path.open("wb") as fh:
            fh.write(f"P6 {self.width} {self.height} 255\n".encode("ascii"))
            fh.write(rgb)

        log.info(
            "Image %d saved: %s (%.1f%% complete)",
            self.current_image_id,
            path,
            self.progress,
        )
        return path

    def _start_image(self, header: PacketHeader) -> bool:
        self.reset()
        self.active = True
        self.current_image_id = header.image_id
        self.total_packets = header.total_packets
        self.width = header.width
        self.height = header.height
        self.packet_payload_size = PACKET_SIZE - HEADER_SIZE
        try:
            self.image_buffer = bytearray(self.total_packets * self.packet_payload_size)
            self.received_mask = bytearray(self.total_packets)
        except MemoryError:
            log.error("cannot allocate buffers for image %d", header.image_id)
            self.reset()
            return False
        log.info(
            "New image %d: %dx%d, %d packets expected.",
            header.image_id,
            self.width,
            self.height,
            self.total_packets,
        )
        return True

    def process_packet(
        self, data: bytes | bytearray | memoryview, now: float | None = None
    ) -> bool:
        """Take in one datagram; return True if it added a new piece of the image.

        A packet for a different image saves the current one first and starts
        over. Packets shorter than a header are ignored.
        """
        if len(data) < HEADER_SIZE:
            return False
        header = PacketHeader.unpack(data)

        if not self.active or header.image_id != self.current_image_id:
            if self.active:
                self.save_image()
            if not self._start_image(header):
                return False

        self.last_activity = time.time() if now is None else now

        seq = header.seq
        assert self.received_mask is not None and self.image_buffer is not None
        if seq >= self.total_packets or self.received_mask[seq]:
            return False

        self.received_mask[seq] = 1
        self.packets_received += 1
        payload = bytes(data[HEADER_SIZE:HEADER_SIZE + self.packet_payload_size])
        start = seq * self.packet_payload_size
        self.image_buffer[start:start + len(payload)] = payload
        return True